from __future__ import annotations

from typing import Tuple

import streamlit as st

from survey_portal.API import fetch_together
from survey_portal.core.errors import ApiError
from survey_portal.models.response import SurveyResponse
from survey_portal.models.survey import QuestionType, Survey
from survey_portal.services.export import export_responses, format_report_date, format_report_time
from survey_portal.services.response_browser import ResponseBrowser, completion_rate

from . import components, state

_SURVEY_KEY = "responses_survey"
_SEARCH_KEY = "responses_search"


def render(survey_id: int, *, show_back: bool = True) -> None:
    """Searchable, paginated list of a survey's responses with CSV export."""

    back_label = "← Back" if show_back else None
    loaded = _load(survey_id)
    if loaded is None:
        components.render_header("Survey Responses", back_label=back_label)
        return
    survey, browser = loaded

    components.render_header(survey.title or "Survey Responses", "Survey Responses", back_label=back_label)

    selected_id = state.get_object(state.SELECTED_RESPONSE_KEY)
    if selected_id is not None:
        detail = _load_detail(selected_id)
        if detail is not None:
            _render_detail(survey, detail)
            return
        state.clear_object(state.SELECTED_RESPONSE_KEY)

    responses = browser.all_responses
    components.render_stat_cards(
        [
            ("Total Responses", len(responses)),
            ("Questions", len(survey.questions)),
            ("Completion Rate", completion_rate(responses)),
        ]
    )

    search_col, export_col = st.columns([3, 1], vertical_alignment="bottom")
    with search_col:
        st.text_input(
            "Search by student name",
            key=_SEARCH_KEY,
            placeholder="Search by student name...",
            on_change=_apply_search,
            args=(browser,),
        )
    with export_col:
        report = export_responses(survey, responses)
        if report is None:
            st.button("Export to CSV", disabled=True, help="No responses to export")
        else:
            st.download_button(
                "Export to CSV",
                data=report.encode(),
                file_name=report.filename,
                mime=report.mime_type,
            )

    page = browser.current_page()
    if page.total_results == 0:
        if browser.search_term:
            components.render_muted("No responses match your search")
        else:
            components.render_muted("No responses yet")
        return

    _render_table(page.rows)

    prev_col, summary_col, next_col = st.columns([1, 3, 1], vertical_alignment="center")
    with prev_col:
        st.button(
            "Previous",
            key="responses_previous",
            disabled=not page.has_previous,
            on_click=browser.go_to,
            args=(page.number - 1,),
        )
    with summary_col:
        st.caption(f"{page.summary()} · Page {page.number} of {page.total_pages}")
    with next_col:
        st.button(
            "Next",
            key="responses_next",
            disabled=not page.has_next,
            on_click=browser.go_to,
            args=(page.number + 1,),
        )


def _load(survey_id: int) -> Tuple[Survey, ResponseBrowser] | None:
    browser: ResponseBrowser | None = state.get_object(state.RESPONSE_BROWSER_KEY)
    survey: Survey | None = state.get_object(_SURVEY_KEY)
    if browser is not None and survey is not None and survey.id == survey_id:
        return survey, browser

    services = state.get_services()
    try:
        with st.spinner("Loading responses..."):
            survey, responses = fetch_together(
                lambda: services.surveys.get_survey(survey_id),
                lambda: services.responses.by_survey(survey_id),
            )
    except ApiError as exc:
        components.report_read_error(exc, "responses")
        return None

    browser = ResponseBrowser(responses, search=st.session_state.get(_SEARCH_KEY))
    state.set_object(_SURVEY_KEY, survey)
    state.set_object(state.RESPONSE_BROWSER_KEY, browser)
    return survey, browser


def _load_detail(response_id: int) -> SurveyResponse | None:
    cached: SurveyResponse | None = state.get_object(state.RESPONSE_DETAIL_KEY)
    if cached is not None and cached.id == response_id:
        return cached

    try:
        with st.spinner("Loading response..."):
            detail = state.get_services().responses.get_response(response_id)
    except ApiError as exc:
        components.report_read_error(exc, "response details")
        return None

    state.set_object(state.RESPONSE_DETAIL_KEY, detail)
    return detail


def _apply_search(browser: ResponseBrowser) -> None:
    browser.search(st.session_state.get(_SEARCH_KEY, ""))


def _render_table(rows: Tuple[SurveyResponse, ...]) -> None:
    header = st.columns([3, 2, 2, 1])
    for column, label in zip(header, ("Student Name", "Submission Date", "Submission Time", "Actions")):
        column.markdown(f"**{label}**")

    for response in rows:
        submitted = _local(response)
        name_col, date_col, time_col, action_col = st.columns([3, 2, 2, 1], vertical_alignment="center")
        name_col.write(response.student_name)
        date_col.write(format_report_date(submitted))
        time_col.write(format_report_time(submitted))
        action_col.button(
            "View Details",
            key=f"view_response_{response.id}",
            on_click=state.set_object,
            args=(state.SELECTED_RESPONSE_KEY, response.id),
        )


def _render_detail(survey: Survey, response: SurveyResponse) -> None:
    st.subheader("Response Details")
    submitted = _local(response)
    st.markdown(f"**{response.student_name}**")
    st.caption(f"Submitted: {format_report_date(submitted)}, {format_report_time(submitted)}")

    for index, question in enumerate(survey.questions, start=1):
        answer = response.answer_to(question.id)
        with st.container(border=True):
            st.markdown(f"**{index}. {question.question_text}**")
            if answer is None:
                st.caption("(No answer)")
            elif question.question_type is QuestionType.LIKERT and answer.answer_number is not None:
                st.write(f"Rating: {answer.answer_number}")
            else:
                st.write(answer.display_value)

    st.button("Close", key="close_response", on_click=state.clear_object, args=(state.SELECTED_RESPONSE_KEY,))


def _local(response: SurveyResponse):
    submitted = response.submitted_at
    return submitted.astimezone() if submitted.tzinfo is not None else submitted
