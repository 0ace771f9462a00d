import itertools
import math

import pytest
from pydantic import ValidationError

from core.calculators import (
    allocate_buydown,
    amortized_payment,
    apr_estimate,
    compare_scenarios,
    compute_scenario,
    pmi_monthly,
    program_credit_cap_pct,
    resolve_loan_amount,
    round_half_up,
)
from core.models import ScenarioInput


def scenario(**overrides):
    fields = dict(
        price=450000,
        ltv=0.95,
        program="Conventional",
        term_months=360,
        note_rate=6.875,
        discount_points_pct=0,
        closing_costs=9000,
        seller_credit=12000,
        pmi_type="BPMI",
        pmi_annual_factor=0.006,
        lock_rate=False,
    )
    fields.update(overrides)
    return ScenarioInput(**fields)


def test_amortized_payment_standard():
    pmt = amortized_payment(427500, 6.875, 360)
    assert 2800 < pmt < 2820


def test_amortized_payment_zero_rate_is_straight_line():
    assert amortized_payment(360000, 0, 360) == 1000.0


def test_loan_amount_prefers_explicit_amount():
    assert resolve_loan_amount(scenario(loan_amount=400000)) == 400000
    assert resolve_loan_amount(scenario()) == pytest.approx(427500)
    assert resolve_loan_amount(scenario(ltv=None)) == 0.0


@pytest.mark.parametrize(
    "program, ltv, expected",
    [
        ("Conventional", 0.95, 3.0),
        ("Conventional", 0.90, 6.0),
        ("Conventional", 0.80, 6.0),
        ("Conventional", 0.75, 9.0),
        ("FHA", 0.965, 6.0),
        ("VA", 1.0, 4.0),
        ("USDA", 1.0, 6.0),
        ("Jumbo", 0.80, 3.0),
    ],
)
def test_program_credit_cap_pct(program, ltv, expected):
    assert program_credit_cap_pct(program, ltv) == expected


def test_buydown_scenario():
    out = compute_scenario(scenario())
    assert out.loan_amount == pytest.approx(427500)
    assert out.pmi_monthly == 213.75
    # 9000 usable credit buys four 2137.50 steps
    assert len(out.allocation_steps) == 4
    assert [s.rate for s in out.allocation_steps] == [6.75, 6.625, 6.5, 6.375]
    assert out.final_rate == 6.375
    assert out.applied_to_points == pytest.approx(8550)
    assert out.applied_to_costs == pytest.approx(450)
    assert out.applied_seller_credit == pytest.approx(9000)
    assert out.cash_to_close == 31050.0
    assert out.p_and_i == round(amortized_payment(427500, 6.375, 360), 2)
    assert out.apr_estimate == 6.542
    assert 55 <= out.break_even_months_on_points <= 65
    assert out.warnings == ["Not all seller credit usable given current costs/points."]


def test_locked_rate_scenario():
    out = compute_scenario(scenario(lock_rate=True))
    assert out.applied_to_points == 0
    assert out.final_rate == 6.875
    assert out.allocation_steps == []
    assert out.break_even_months_on_points is None
    assert out.p_and_i == round(amortized_payment(427500, 6.875, 360), 2)
    assert out.applied_to_costs == pytest.approx(9000)
    assert out.cash_to_close == 22500.0
    assert out.apr_estimate == 6.875


def test_fha_mip_applied_when_factor_missing():
    s = scenario(program="FHA", price=309300, ltv=0.97, loan_amount=300000, pmi_annual_factor=None)
    out = compute_scenario(s)
    assert out.pmi_monthly == pytest.approx(0.0055 * 300000 / 12, abs=0.005)


def test_explicit_factor_overrides_fha_lookup():
    s = scenario(program="FHA", price=309300, ltv=0.97, loan_amount=300000, pmi_annual_factor=0.008)
    assert compute_scenario(s).pmi_monthly == 200.0


def test_fha_without_mi_type_has_no_mi():
    s = scenario(program="FHA", pmi_type=None, pmi_annual_factor=None)
    assert compute_scenario(s).pmi_monthly == 0.0


@pytest.mark.parametrize("pmi_type", ["SPMI", "LPMI", "None", None])
def test_only_bpmi_is_priced(pmi_type):
    assert pmi_monthly(pmi_type, 0.006, 427500) == 0.0


def test_bpmi_without_factor_is_zero():
    assert pmi_monthly("BPMI", None, 427500) == 0.0


def test_jumbo_cap_warning():
    out = compute_scenario(
        scenario(program="Jumbo", price=500000, ltv=0.8, seller_credit=20000, closing_costs=10000)
    )
    assert "Seller credit exceeds typical Jumbo cap (~3.0%)." in out.warnings
    assert out.warnings[0].startswith("Seller credit exceeds")
    assert out.applied_seller_credit <= 15000 + 1e-6


def test_under_cap_has_no_cap_warning():
    out = compute_scenario(scenario())
    assert not any("exceeds typical" in w for w in out.warnings)


def test_buydown_stops_when_break_even_too_long():
    # near-zero rates save too little per step to recover 0.50 points in 84 months
    final_rate, applied, steps = allocate_buydown(400000, 0.125, 360, 50000)
    assert steps == []
    assert applied == 0.0
    assert final_rate == 0.125


def test_buydown_needs_whole_step():
    final_rate, applied, steps = allocate_buydown(400000, 6.875, 360, 1999.99)
    assert steps == [] and applied == 0.0 and final_rate == 6.875


def test_zero_loan_amount_does_not_divide_by_zero():
    out = compute_scenario(scenario(ltv=None, seller_credit=5000, closing_costs=3000))
    assert out.loan_amount == 0.0
    assert out.allocation_steps == []
    assert out.applied_to_costs == 3000
    assert out.cash_to_close == 450000.0
    assert out.apr_estimate == 6.875


def test_zero_price_does_not_divide_by_zero():
    out = compute_scenario(scenario(price=0, ltv=None, loan_amount=100000))
    assert out.applied_seller_credit == 0.0
    assert out.warnings[0] == "Seller credit exceeds typical Conventional cap (~9.0%)."


def test_zero_rate_scenario_payment():
    out = compute_scenario(scenario(note_rate=0, lock_rate=True, ltv=0.8))
    assert out.p_and_i == round(360000 / 360, 2)


def test_points_cost_informational():
    out = compute_scenario(scenario(discount_points_pct=1.0, lock_rate=True))
    assert out.points_cost == pytest.approx(4275)
    # points widen the usable credit ceiling to 13275, capped at the 12000 credit
    assert out.applied_seller_credit == pytest.approx(9000)


def test_apr_estimate_spreads_points():
    assert apr_estimate(6.375, 8550, 427500) == pytest.approx(6.375 + 2 * 30 / 360)
    assert apr_estimate(6.5, 0, 0) == 6.5


GRID = list(
    itertools.product(
        ["Conventional", "FHA", "VA", "USDA", "Jumbo"],
        [0.8, 0.965],
        [180, 360],
        [3.0, 7.5],
        [0, 6000, 30000],
        [False, True],
    )
)


@pytest.mark.parametrize("program, ltv, term, rate, credit, lock", GRID)
def test_allocation_invariants(program, ltv, term, rate, credit, lock):
    s = scenario(
        program=program,
        ltv=ltv,
        term_months=term,
        note_rate=rate,
        seller_credit=credit,
        discount_points_pct=0.5,
        lock_rate=lock,
        pmi_annual_factor=None,
    )
    out = compute_scenario(s)
    assert abs(out.applied_to_points + out.applied_to_costs - out.applied_seller_credit) < 1e-6
    assert out.applied_seller_credit <= credit + 1e-6
    assert out.applied_seller_credit <= out.points_cost + s.closing_costs + 1e-6
    for step in out.allocation_steps:
        assert step.break_even <= 84
        assert step.monthly_save > 0
    if lock:
        assert out.applied_to_points == 0
        assert out.final_rate == rate
        assert out.allocation_steps == []
    else:
        assert out.final_rate == pytest.approx(rate - 0.125 * len(out.allocation_steps))


def test_compare_scenarios_preserves_order():
    inputs = [scenario(lock_rate=True), scenario(), scenario(note_rate=7.5)]
    results = compare_scenarios(inputs)
    assert [r.final_rate for r in results][0] == 6.875
    assert results[1] == compute_scenario(inputs[1])
    assert len(results) == 3


def test_output_serializes_with_wire_names():
    s = ScenarioInput.model_validate(
        {"price": 400000, "loanAmount": 380000, "program": "FHA", "termMonths": 360, "noteRate": 6.5}
    )
    assert s.loan_amount == 380000
    payload = compute_scenario(s).model_dump(by_alias=True)
    for key in ("pAndI", "pmiMonthly", "allocationSteps", "breakEvenMonthsOnPoints", "finalRate"):
        assert key in payload


@pytest.mark.parametrize(
    "field, value",
    [("note_rate", math.inf), ("discount_points_pct", math.nan), ("seller_credit", math.inf), ("ltv", math.nan)],
)
def test_non_finite_inputs_are_rejected(field, value):
    with pytest.raises(ValidationError):
        scenario(**{field: value})


@pytest.mark.parametrize("value, expected", [(2.5, 3), (60.5, 61), (60.49, 60), (0.0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
