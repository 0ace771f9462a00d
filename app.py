
import logging
import streamlit as st
from core.calculators import compare_scenarios
from core.compare import format_currency, format_rate, scenario_names, scenario_totals
from core.presets import DISCLAIMER
from core.state import load_state, save_state
from core.templates import TemplateStore
from core.version import __version__
from ui.dashboard import render_comparison_view
from ui.scenario_cards import render_scenario_cards
from ui.sidebar import render_template_sidebar

logger = logging.getLogger(__name__)


def render_header(models):
    st.title("Mortgage Scenario Studio")
    st.caption(
        "Side-by-side loan scenarios that put builder concessions to work: "
        "rate buydowns, closing cost coverage and PMI options."
    )
    totals = scenario_totals(models)
    c1, c2, c3 = st.columns(3)
    c1.metric("Scenarios", len(models))
    c2.metric("Total Seller Credit", format_currency(totals["total_credit"]))
    c3.metric("Average Note Rate", format_rate(totals["avg_rate"]))


def run_comparison(models):
    """Compute every scenario and keep the results in session state."""
    results = compare_scenarios(models)
    logger.info("Compared %d scenarios", len(results))
    st.session_state["results"] = results
    st.session_state["result_names"] = scenario_names(models)
    return results


def main():
    st.set_page_config(page_title="Mortgage Scenario Studio", layout="wide")
    load_state()
    header = st.container()
    models = render_scenario_cards()
    with header:
        render_header(models)
    render_template_sidebar(TemplateStore(), models)
    st.sidebar.caption(f"v{__version__}")

    if st.button("Compare Scenarios", key="compare", type="primary", disabled=not models):
        run_comparison(models)
    render_comparison_view(
        st.session_state.get("result_names", []), st.session_state.get("results", [])
    )
    st.caption(DISCLAIMER)
    save_state()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
