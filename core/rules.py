from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_scenario_rules(
    program: str,
    cap_pct: float,
    program_cap_dollars: float,
    seller_credit: float,
    applied_seller_credit: float,
) -> List[RuleResult]:
    """Seller credit checks for one computed scenario, in display order.

    ``cap_pct`` is the program cap in percent of price (e.g. ``3.0``).
    """
    res: List[RuleResult] = []

    if seller_credit > program_cap_dollars:
        res.append(
            RuleResult(
                code="SELLER_CREDIT_OVER_CAP",
                severity="warn",
                message=f"Seller credit exceeds typical {program} cap (~{cap_pct:.1f}%).",
                context={"seller_credit": seller_credit, "cap": program_cap_dollars},
            )
        )

    if applied_seller_credit < seller_credit:
        res.append(
            RuleResult(
                code="SELLER_CREDIT_UNUSED",
                severity="info",
                message="Not all seller credit usable given current costs/points.",
                context={
                    "applied": applied_seller_credit,
                    "unused": seller_credit - applied_seller_credit,
                },
            )
        )

    return res
