"""Side-by-side comparison of computed scenarios."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from core.models import ScenarioInput, ScenarioOutput


@dataclass
class Insight:
    title: str
    value: str
    descriptor: str
    option: str


def format_currency(value) -> str:
    """Dollar amount with cents only when the value has a fractional part."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        num = 0.0
    if not math.isfinite(num):
        num = 0.0
    sign = "-" if num < 0 else ""
    if abs(num % 1) > 0:
        return f"{sign}${abs(num):,.2f}"
    return f"{sign}${abs(num):,.0f}"


def format_rate(value, digits: int = 3) -> str:
    return f"{float(value or 0):.{digits}f}%"


def option_label(index: int) -> str:
    """Spreadsheet-style label: Option A .. Option Z, Option AA, ..."""
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    label = ""
    i = index
    while True:
        label = alphabet[i % 26] + label
        i = i // 26 - 1
        if i < 0:
            break
    return f"Option {label}"


def scenario_names(scenarios: Sequence[ScenarioInput]) -> List[str]:
    return [
        (s.name or "").strip() or option_label(i) for i, s in enumerate(scenarios)
    ]


def scenario_totals(scenarios: Sequence[ScenarioInput]) -> Dict[str, float]:
    """Total seller credit offered and the average note rate across options."""
    if not scenarios:
        return {"total_credit": 0.0, "avg_rate": 0.0}
    return {
        "total_credit": sum(s.seller_credit for s in scenarios),
        "avg_rate": sum(s.note_rate for s in scenarios) / len(scenarios),
    }


def _lowest(results: Sequence[ScenarioOutput], attr: str) -> int:
    best = 0
    for idx, r in enumerate(results):
        if getattr(r, attr) < getattr(results[best], attr):
            best = idx
    return best


def comparison_insights(
    names: Sequence[str], results: Sequence[ScenarioOutput]
) -> List[Insight]:
    """Headline winners across scenarios; ties go to the earlier option."""
    if not results:
        return []

    piti_idx = _lowest(results, "piti_monthly")
    cash_idx = _lowest(results, "cash_to_close")
    apr_idx = _lowest(results, "apr_estimate")
    out = [
        Insight(
            "Most Affordable Monthly",
            format_currency(results[piti_idx].piti_monthly),
            "Total monthly PITI",
            names[piti_idx],
        ),
        Insight(
            "Lowest Cash to Close",
            format_currency(results[cash_idx].cash_to_close),
            "Estimated funds required",
            names[cash_idx],
        ),
        Insight(
            "Best APR Estimate",
            format_rate(results[apr_idx].apr_estimate),
            "Annual percentage rate",
            names[apr_idx],
        ),
    ]

    break_evens: List[Tuple[int, int]] = [
        (r.break_even_months_on_points, idx)
        for idx, r in enumerate(results)
        if r.break_even_months_on_points is not None and r.break_even_months_on_points > 0
    ]
    if break_evens:
        months, idx = min(break_evens)
        out.append(
            Insight(
                "Fastest Points Break-even",
                f"{months} mo",
                "Time to recover buydown",
                names[idx],
            )
        )
    return out


def _break_even_label(months: Optional[int]) -> str:
    return f"{months} mo" if months is not None else "—"


COMPARISON_ROWS: List[Tuple[str, Callable[[ScenarioOutput], str]]] = [
    ("APR (est)", lambda r: format_rate(r.apr_estimate)),
    ("Loan Amount", lambda r: format_currency(r.loan_amount)),
    ("Principal & Interest", lambda r: format_currency(r.p_and_i)),
    ("Mortgage Insurance", lambda r: format_currency(r.pmi_monthly)),
    ("Total Payment (PITI)", lambda r: format_currency(r.piti_monthly)),
    ("Applied Seller Credit", lambda r: format_currency(r.applied_seller_credit)),
    ("→ To Discount Points", lambda r: format_currency(r.applied_to_points)),
    ("→ To Closing Costs", lambda r: format_currency(r.applied_to_costs)),
    ("Cash to Close (est)", lambda r: format_currency(r.cash_to_close)),
    ("Points Break-even", lambda r: _break_even_label(r.break_even_months_on_points)),
    ("Warnings", lambda r: " · ".join(r.warnings) if r.warnings else "—"),
]


def comparison_table(
    names: Sequence[str], results: Sequence[ScenarioOutput]
) -> pd.DataFrame:
    """Metric rows by scenario columns, formatted for display."""
    data = {
        name: [fmt(r) for _, fmt in COMPARISON_ROWS]
        for name, r in zip(_unique(names), results)
    }
    df = pd.DataFrame(data, index=[label for label, _ in COMPARISON_ROWS])
    df.index.name = "Metric"
    return df


def allocation_table(result: ScenarioOutput) -> pd.DataFrame:
    """Buydown steps for one scenario in the order they were applied."""
    rows = [
        {
            "Rate": step.rate,
            "Points Cost": step.points_cost,
            "Monthly Save": step.monthly_save,
            "Break-even (mo)": step.break_even,
        }
        for step in result.allocation_steps
    ]
    return pd.DataFrame(
        rows, columns=["Rate", "Points Cost", "Monthly Save", "Break-even (mo)"]
    )


def _unique(names: Sequence[str]) -> List[str]:
    # DataFrame columns must not collide when two options share a name
    seen: Dict[str, int] = {}
    out = []
    for n in names:
        if n in seen:
            seen[n] += 1
            out.append(f"{n} ({seen[n]})")
        else:
            seen[n] = 1
            out.append(n)
    return out
