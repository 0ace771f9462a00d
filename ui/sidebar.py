import streamlit as st
from pydantic import ValidationError
from core.models import ScenarioInput
from core.templates import TemplateStore, TemplateStoreError, TemplateNotFoundError, template_to_scenario


def render_template_sidebar(store: TemplateStore, current: list) -> None:
    """Sidebar to save a scenario as a preset and load or delete presets."""
    st.sidebar.header("Templates")

    title = st.sidebar.text_input("Template Title", key="template_title", max_chars=80)
    options = [s.name or f"Scenario {i + 1}" for i, s in enumerate(current)]
    source = (
        st.sidebar.selectbox("Save From", list(range(len(options))), format_func=lambda i: options[i], key="template_source")
        if options
        else None
    )
    if st.sidebar.button("Save Template", key="save_template", disabled=not options):
        try:
            tpl = store.create(title, current[source])
            st.sidebar.success(f"Saved “{tpl.title}”")
        except ValidationError:
            st.sidebar.error("Template title must be 1–80 characters.")
        except (OSError, TemplateStoreError) as exc:
            st.sidebar.error(f"Could not save template: {exc}")

    try:
        templates = store.list()
    except TemplateStoreError as exc:
        st.sidebar.error(str(exc))
        return
    if not templates:
        st.sidebar.caption("No saved templates yet.")
        return

    for tpl in templates:
        with st.sidebar.expander(tpl.title):
            st.caption(f"{tpl.program} • {tpl.term_months} mo • {tpl.note_rate:.3f}%")
            c1, c2 = st.columns(2)
            if c1.button("Load", key=f"load_{tpl.id}"):
                scenario: ScenarioInput = template_to_scenario(tpl)
                st.session_state.setdefault("scenarios", []).append(scenario.model_dump())
                st.rerun()
            if c2.button("Delete", key=f"delete_{tpl.id}"):
                try:
                    store.delete(tpl.id)
                except TemplateNotFoundError:
                    st.sidebar.warning("Template was already removed.")
                st.rerun()
