"""Standard FHA annual mortgage insurance premium lookup."""
from __future__ import annotations

import math
from typing import Optional

from core.presets import FHA_ANNUAL_MIP, FHA_HIGH_BALANCE_THRESHOLD


def _positive(x) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x) and x > 0


def normalize_ltv(price, ltv=None, loan_amount=None) -> Optional[float]:
    """Return the LTV ratio as given, or derive it from loan amount and price."""

    if _positive(ltv):
        return float(ltv)
    if _positive(loan_amount) and price > 0:
        return loan_amount / price
    return None


def normalize_loan_amount(price, ltv=None, loan_amount=None) -> Optional[float]:
    """Return the loan amount as given, or derive it from price and LTV."""

    if _positive(loan_amount):
        return float(loan_amount)
    if ltv is not None and price > 0:
        return price * ltv
    return None


def standard_fha_annual_mip_factor(
    price, term_months, ltv=None, loan_amount=None
) -> Optional[float]:
    """Look up the annual MIP factor for an FHA loan.

    The factor depends on the term (more than 15 years or not), whether the
    loan is above the high-balance threshold, and whether LTV is above 90%.
    ``None`` means the inputs were not enough to decide; callers should leave
    any existing MI factor alone in that case.
    """

    ltv_ratio = normalize_ltv(price, ltv, loan_amount)
    loan = normalize_loan_amount(price, ltv_ratio, loan_amount)
    if ltv_ratio is None or loan is None or not term_months:
        return None

    key = (
        (">15" if term_months > 180 else "<=15")
        + "_"
        + ("high" if loan > FHA_HIGH_BALANCE_THRESHOLD else "std")
        + "_"
        + ("<=90" if ltv_ratio <= 0.90 else ">90")
    )
    return FHA_ANNUAL_MIP[key]
