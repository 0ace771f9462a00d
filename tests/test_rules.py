from core.rules import evaluate_scenario_rules


def _codes(*args):
    return [r.code for r in evaluate_scenario_rules(*args)]


def test_over_cap_and_unused_in_order():
    codes = _codes("Jumbo", 3.0, 15000, 20000, 10000)
    assert codes == ["SELLER_CREDIT_OVER_CAP", "SELLER_CREDIT_UNUSED"]


def test_cap_message_uses_one_decimal():
    res = evaluate_scenario_rules("VA", 4.0, 16000, 20000, 20000)
    assert res[0].message == "Seller credit exceeds typical VA cap (~4.0%)."
    assert res[0].context["cap"] == 16000


def test_credit_at_cap_is_not_over():
    assert _codes("FHA", 6.0, 18000, 18000, 18000) == []


def test_unused_credit_only():
    res = evaluate_scenario_rules("Conventional", 3.0, 13500, 12000, 9000)
    assert [r.code for r in res] == ["SELLER_CREDIT_UNUSED"]
    assert res[0].context["unused"] == 3000


def test_seller_credit_rules_are_advisory():
    res = evaluate_scenario_rules("Jumbo", 3.0, 15000, 20000, 0)
    assert [r.severity for r in res] == ["warn", "info"]
