import copy
import streamlit as st
from pydantic import ValidationError
from core.compare import option_label
from core.models import ScenarioInput
from core.presets import BLANK_SCENARIO, PMI_TYPES, PROGRAMS


def new_scenario(index: int) -> dict:
    s = copy.deepcopy(BLANK_SCENARIO)
    s["name"] = option_label(index)
    return s


WIDGET_PREFIXES = {
    "name", "program", "price", "ltv", "loan_amount", "term", "rate", "points", "costs", "credit",
    "pmi_type", "pmi_factor", "taxes", "insurance", "hoa", "lock", "remove",
}


def _opt_float(v):
    return None if v is None else float(v)


def _optional_number(label, value, key, **kwargs):
    # blank input stays None so "not provided" differs from zero
    return st.number_input(label, value=_opt_float(value), key=key, **kwargs)


def _option_index(options, value) -> int:
    # restored sessions may carry values no longer offered
    return options.index(value) if value in options else 0


def _clear_widget_keys(start: int) -> None:
    """Drop card widget state from index ``start`` on so shifted cards redraw from data."""
    for key in list(st.session_state.keys()):
        prefix, _, idx = str(key).rpartition("_")
        if prefix in WIDGET_PREFIXES and idx.isdigit() and int(idx) >= start:
            del st.session_state[key]


def render_scenario_card(i: int, s: dict) -> dict:
    """Inputs for one scenario; returns the edited field dict."""
    s["name"] = st.text_input("Name", value=s.get("name") or option_label(i), key=f"name_{i}")
    s["program"] = st.selectbox(
        "Program", PROGRAMS, index=_option_index(PROGRAMS, s.get("program")), key=f"program_{i}"
    )
    s["price"] = st.number_input(
        "Purchase Price", value=float(s.get("price", 0.0)), min_value=0.0, step=1000.0, key=f"price_{i}"
    )
    s["ltv"] = _optional_number(
        "LTV (ratio)", s.get("ltv"), f"ltv_{i}", min_value=0.0, max_value=1.5, step=0.01, format="%.4f",
        help="Leave blank when entering a loan amount",
    )
    s["loan_amount"] = _optional_number(
        "Loan Amount", s.get("loan_amount"), f"loan_amount_{i}", min_value=0.0, step=1000.0,
        help="Overrides price × LTV when set",
    )
    s["term_months"] = int(
        st.number_input("Term (months)", value=int(s.get("term_months", 360)), min_value=1, step=12, key=f"term_{i}")
    )
    s["note_rate"] = st.number_input(
        "Note Rate %", value=float(s.get("note_rate", 0.0)), step=0.125, format="%.3f", key=f"rate_{i}"
    )
    s["discount_points_pct"] = st.number_input(
        "Discount Points %", value=float(s.get("discount_points_pct", 0.0)), step=0.125, key=f"points_{i}"
    )
    s["closing_costs"] = st.number_input(
        "Closing Costs", value=float(s.get("closing_costs", 0.0)), min_value=0.0, step=500.0, key=f"costs_{i}"
    )
    s["seller_credit"] = st.number_input(
        "Seller / Builder Credit", value=float(s.get("seller_credit", 0.0)), min_value=0.0, step=500.0,
        key=f"credit_{i}",
    )
    pmi = s.get("pmi_type") or "None"
    s["pmi_type"] = st.selectbox("PMI Type", PMI_TYPES, index=_option_index(PMI_TYPES, pmi), key=f"pmi_type_{i}")
    s["pmi_annual_factor"] = _optional_number(
        "PMI Annual Factor", s.get("pmi_annual_factor"), f"pmi_factor_{i}", min_value=0.0, step=0.0005,
        format="%.4f", help="Blank on FHA uses the standard annual MIP",
    )
    with st.expander("Monthly Carry"):
        s["taxes_monthly"] = _optional_number("Taxes", s.get("taxes_monthly"), f"taxes_{i}", min_value=0.0)
        s["insurance_monthly"] = _optional_number(
            "Insurance", s.get("insurance_monthly"), f"insurance_{i}", min_value=0.0
        )
        s["hoa_monthly"] = _optional_number("HOA", s.get("hoa_monthly"), f"hoa_{i}", min_value=0.0)
    s["lock_rate"] = st.checkbox(
        "Lock Rate (No Buydown)", value=bool(s.get("lock_rate", False)), key=f"lock_{i}",
        help="Preserve rate, no buydown allowed",
    )
    return s


def render_scenario_cards() -> list:
    """Render every scenario card and return validated ``ScenarioInput`` models.

    Cards that fail validation are reported inline and left out of the list.
    """
    st.session_state.setdefault("scenarios", [new_scenario(0), new_scenario(1)])
    scenarios = st.session_state["scenarios"]

    if st.button("Add Scenario", key="add_scenario"):
        scenarios.append(new_scenario(len(scenarios)))

    models = []
    remove = None
    cols = st.columns(max(len(scenarios), 1))
    for i, (col, s) in enumerate(zip(cols, scenarios)):
        with col:
            st.subheader(s.get("name") or option_label(i))
            scenarios[i] = render_scenario_card(i, s)
            try:
                models.append(ScenarioInput(**scenarios[i]))
            except ValidationError as exc:
                st.error(f"{option_label(i)}: {exc.error_count()} invalid field(s)")
            if len(scenarios) > 1 and st.button("Remove", key=f"remove_{i}"):
                remove = i
    if remove is not None:
        scenarios.pop(remove)
        _clear_widget_keys(remove)
        st.rerun()
    st.session_state["scenarios"] = scenarios
    return models
