from __future__ import annotations

import streamlit as st

from survey_portal.core.errors import ApiError, RequiredAnswerMissing
from survey_portal.services.survey_taking import SurveyTakingFlow, TakingStage

from . import components, state


def render(flow: SurveyTakingFlow) -> None:
    """Render paging controls and the final submit button for the survey."""

    prev_col, page_col, next_col = st.columns([1, 2, 1], vertical_alignment="center")

    with page_col:
        st.caption(f"Page {flow.current_page + 1} of {max(flow.total_pages, 1)}")

    with prev_col:
        if flow.current_page > 0 and st.button("← Previous", key="previous_page"):
            flow.previous_page()
            st.rerun()

    with next_col:
        if not flow.is_last_page:
            if st.button("Next →", key="next_page", type="primary"):
                try:
                    flow.next_page()
                except RequiredAnswerMissing as exc:
                    st.warning(str(exc))
                else:
                    st.rerun()
            return

        submitting = flow.stage is TakingStage.SUBMITTING
        if st.button("Submit Survey", key="submit_survey", type="primary", disabled=submitting):
            _submit(flow)


def _submit(flow: SurveyTakingFlow) -> None:
    try:
        flow.validate_page()
    except RequiredAnswerMissing as exc:
        st.warning(str(exc))
        return

    try:
        with st.spinner("Submitting..."):
            flow.submit()
    except RequiredAnswerMissing:
        st.warning("Please answer all required questions")
        return
    except ApiError as exc:
        components.report_write_error(exc, "submit survey")
        return

    state.navigate(state.VIEW_DASHBOARD)
    state.set_notice("Survey submitted successfully!", "success")
    st.rerun()
