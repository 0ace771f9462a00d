import streamlit as st
from core.compare import allocation_table, comparison_insights, comparison_table, format_currency, format_rate
from export.pdf_export import build_comparison_csv, build_comparison_pdf


def render_comparison_view(names, results):
    """Render insight metrics, the side-by-side table and per-option buydown detail."""
    if not results:
        return
    st.header("Comparison")
    insights = comparison_insights(names, results)
    cols = st.columns(len(insights))
    for col, item in zip(cols, insights):
        col.metric(item.title, item.value)
        col.caption(f"{item.option} · {item.descriptor}")

    st.dataframe(comparison_table(names, results), use_container_width=True)

    for name, r in zip(names, results):
        with st.expander(f"{name}: {format_rate(r.final_rate)} final rate"):
            for w in r.warnings:
                st.warning(w)
            steps = allocation_table(r)
            if steps.empty:
                st.caption("No buydown steps taken.")
            else:
                st.dataframe(steps, use_container_width=True)
                st.caption(
                    f"Points paid by credit: {format_currency(r.applied_to_points)} • "
                    f"Break-even: {r.break_even_months_on_points} mo"
                )

    c1, c2 = st.columns(2)
    c1.download_button(
        "Download PDF",
        data=build_comparison_pdf(names, results),
        file_name="scenario_comparison.pdf",
        mime="application/pdf",
    )
    c2.download_button(
        "Download CSV",
        data=build_comparison_csv(names, results),
        file_name="scenario_comparison.csv",
        mime="text/csv",
    )
