from __future__ import annotations
import logging
import math
from typing import Iterable, List, Optional, Tuple

from core.fha import standard_fha_annual_mip_factor
from core.models import AllocationStep, ScenarioInput, ScenarioOutput
from core.presets import (
    BUYDOWN_STEP_POINTS_PCT,
    BUYDOWN_STEP_RATE,
    CONVENTIONAL_CAP_BANDS,
    MAX_BREAK_EVEN_MONTHS,
    PROGRAM_CAP_PCT,
)
from core.rules import evaluate_scenario_rules

logger = logging.getLogger(__name__)


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Optional monthly carry fields arrive as ``None`` when the officer leaves
    them blank; they count as zero in payment totals.
    """

    try:
        if x is None or (isinstance(x, float) and math.isnan(x)):
            return default
        return float(x)
    except Exception:
        return default


def round_half_up(x: float) -> int:
    """Nearest whole number with .5 going up (2.5 -> 3), unlike banker's ``round``."""
    return int(math.floor(x + 0.5))


def amortized_payment(principal, annual_rate_pct, term_months):
    """Level monthly payment for a fixed-rate loan.

    ``annual_rate_pct`` is the nominal yearly rate (``6.875`` for 6.875%) and
    ``term_months`` the amortization period.  A zero rate pays the balance off
    straight-line.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(term_months or 0)
    if n <= 0:
        return 0.0
    if r == 0:
        return L / n
    growth = (1 + r) ** n
    return L * (r * growth) / (growth - 1)


def resolve_loan_amount(s: ScenarioInput) -> float:
    """An explicit loan amount wins over price times LTV."""

    if s.loan_amount is not None:
        return s.loan_amount
    return s.price * (s.ltv if s.ltv is not None else 0.0)


def effective_ltv(s: ScenarioInput, loan_amount: float) -> float:
    if s.ltv is not None:
        return s.ltv
    return loan_amount / s.price if s.price else 0.0


def program_credit_cap_pct(program: str, ltv: float) -> float:
    """Typical maximum seller contribution for a program, in percent of price."""

    if program == "Conventional":
        if ltv > 0.90:
            return CONVENTIONAL_CAP_BANDS[">90"]
        if ltv > 0.75:
            return CONVENTIONAL_CAP_BANDS["75-90"]
        return CONVENTIONAL_CAP_BANDS["<=75"]
    return PROGRAM_CAP_PCT[program]


def allocate_buydown(
    loan_amount: float,
    note_rate: float,
    term_months: int,
    available_credit: float,
) -> Tuple[float, float, List[AllocationStep]]:
    """Spend seller credit on whole 0.125% rate buydown steps.

    Steps are taken greedily from the note rate downward while a whole step is
    still affordable and the step pays for itself within
    ``MAX_BREAK_EVEN_MONTHS``.  Returns ``(final_rate, applied_to_points,
    steps)`` with steps in the order they were applied.
    """

    remaining = available_credit
    applied = 0.0
    candidate = note_rate
    steps: List[AllocationStep] = []
    step_cost = loan_amount * (BUYDOWN_STEP_POINTS_PCT / 100)

    while remaining > 0:
        if step_cost > remaining:
            break
        before = amortized_payment(loan_amount, candidate, term_months)
        after = amortized_payment(loan_amount, candidate - BUYDOWN_STEP_RATE, term_months)
        monthly_save = max(0.0, before - after)
        if monthly_save <= 0:
            logger.debug("Buydown below %.3f%% saves nothing; stopping", candidate)
            break
        break_even = math.ceil(step_cost / monthly_save)
        if break_even > MAX_BREAK_EVEN_MONTHS:
            logger.debug(
                "Buydown below %.3f%% breaks even in %d months; stopping",
                candidate,
                break_even,
            )
            break

        remaining -= step_cost
        applied += step_cost
        candidate -= BUYDOWN_STEP_RATE
        steps.append(
            AllocationStep(
                rate=candidate,
                points_cost=step_cost,
                monthly_save=monthly_save,
                break_even=break_even,
            )
        )
        logger.debug("Bought down to %.3f%% for $%.2f", candidate, step_cost)

    return candidate, applied, steps


def pmi_monthly(pmi_type: Optional[str], annual_factor: Optional[float], loan_amount: float) -> float:
    """Monthly mortgage insurance.

    Only borrower-paid monthly MI is priced here.  SPMI and LPMI are accepted
    but return ``0.0``; single-premium and lender-paid costs are not modeled.
    """

    if not pmi_type or pmi_type == "None":
        return 0.0
    if pmi_type == "BPMI" and annual_factor:
        return annual_factor * loan_amount / 12
    return 0.0


def apr_estimate(final_rate: float, applied_to_points: float, loan_amount: float) -> float:
    """Rough APR: points spread as 30/360 of their percent of the loan.

    This is an illustration for side-by-side comparison only and is not a
    compliance-grade APR.
    """

    points_pct = applied_to_points / loan_amount * 100 if loan_amount else 0.0
    return max(final_rate, final_rate + points_pct * (30 / 360))


def compute_scenario(s: ScenarioInput) -> ScenarioOutput:
    """Compute loan terms, payment breakdown and credit allocation for one scenario."""

    loan_amount = resolve_loan_amount(s)
    points_cost = loan_amount * (s.discount_points_pct / 100)

    cap_pct = program_credit_cap_pct(s.program, effective_ltv(s, loan_amount))
    program_cap_dollars = s.price * cap_pct / 100

    eligible_costs = points_cost + s.closing_costs
    max_usable_credit = min(s.seller_credit, program_cap_dollars, eligible_costs)

    if s.lock_rate:
        final_rate, applied_to_points, steps = s.note_rate, 0.0, []
    else:
        final_rate, applied_to_points, steps = allocate_buydown(
            loan_amount, s.note_rate, s.term_months, max_usable_credit
        )

    p_and_i = amortized_payment(loan_amount, final_rate, s.term_months)

    factor = s.pmi_annual_factor
    if s.program == "FHA" and factor is None:
        factor = standard_fha_annual_mip_factor(
            s.price, s.term_months, ltv=s.ltv, loan_amount=s.loan_amount
        )
    pmi = pmi_monthly(s.pmi_type, factor, loan_amount)

    applied_seller_credit = applied_to_points + min(
        s.closing_costs, max_usable_credit - applied_to_points
    )
    applied_to_costs = applied_seller_credit - applied_to_points

    piti = (
        p_and_i
        + pmi
        + nz(s.taxes_monthly)
        + nz(s.insurance_monthly)
        + nz(s.hoa_monthly)
    )
    cash_to_close = (s.price - loan_amount) + (s.closing_costs - applied_to_costs)
    apr = apr_estimate(final_rate, applied_to_points, loan_amount)

    rules = evaluate_scenario_rules(
        s.program, cap_pct, program_cap_dollars, s.seller_credit, applied_seller_credit
    )

    break_even_months = None
    if steps:
        total_save = sum(step.monthly_save for step in steps) or 1
        break_even_months = round_half_up(applied_to_points / total_save)

    return ScenarioOutput(
        loan_amount=loan_amount,
        points_cost=points_cost,
        applied_seller_credit=applied_seller_credit,
        applied_to_points=applied_to_points,
        applied_to_costs=applied_to_costs,
        final_rate=final_rate,
        p_and_i=round(p_and_i, 2),
        pmi_monthly=round(pmi, 2),
        piti_monthly=round(piti, 2),
        cash_to_close=round(cash_to_close, 2),
        apr_estimate=round(apr, 3),
        break_even_months_on_points=break_even_months,
        warnings=[r.message for r in rules],
        allocation_steps=steps,
    )


def compare_scenarios(scenarios: Iterable[ScenarioInput]) -> List[ScenarioOutput]:
    """Compute each scenario independently, preserving input order."""

    return [compute_scenario(s) for s in scenarios]
