from __future__ import annotations

import html

import streamlit as st

from survey_portal.core.errors import AlreadySubmittedError, ApiError, AuthenticationError, InvalidAnswerError
from survey_portal.models.survey import Question, QuestionType
from survey_portal.services.survey_taking import SurveyTakingFlow

from . import components, navigation, state

PLACEHOLDER_OPTION = "Select an option..."

_ANSWER_HINTS = {
    QuestionType.MCQ: "Select one option",
    QuestionType.LIKERT: "Rate on the scale",
    QuestionType.SHORT_ANSWER: "Short text answer",
    QuestionType.LONG_ANSWER: "Detailed text answer",
}


def render(survey_id: int) -> None:
    """Render the paginated take-survey view for a student."""

    flow = _load_flow(survey_id)
    if flow is None:
        return

    survey = flow.survey
    components.render_header(survey.title, survey.description or None)
    st.progress(flow.progress / 100, text=f"Progress · {flow.progress}% Complete")

    questions = flow.questions
    if not questions:
        st.info("This survey has no questions yet.")
        return

    for offset, question in enumerate(flow.page_questions()):
        _render_question(flow, question, flow.page_start + offset + 1)

    st.caption(f"Answered {flow.answered_count} of {len(questions)} questions")
    navigation.render(flow)


def _load_flow(survey_id: int) -> SurveyTakingFlow | None:
    flow: SurveyTakingFlow | None = state.get_object(state.TAKING_FLOW_KEY)
    if flow is not None and flow.survey_id == survey_id:
        return flow

    services = state.get_services()
    flow = SurveyTakingFlow(survey_id, surveys=services.surveys, responses=services.responses)
    try:
        with st.spinner("Loading survey..."):
            flow.load()
    except AlreadySubmittedError as exc:
        _leave(exc.message, "warning")
        return None
    except AuthenticationError as exc:
        state.sign_out()
        state.set_notice(exc.message, "warning")
        st.rerun()
    except ApiError as exc:
        _leave(f"Failed to load survey: {exc.message}", "error")
        return None

    state.set_object(state.TAKING_FLOW_KEY, flow)
    return flow


def _leave(message: str, level: str) -> None:
    state.navigate(state.VIEW_DASHBOARD)
    state.set_notice(message, level)
    st.rerun()


def _render_question(flow: SurveyTakingFlow, question: Question, number: int) -> None:
    with st.container(border=True):
        marker = " *" if question.is_required else ""
        st.markdown(f"**{number}. {question.question_text}**{marker}")
        st.caption(_ANSWER_HINTS.get(question.question_type, ""))

        widget_key = f"answer_{question.id}"
        if widget_key not in st.session_state:
            st.session_state[widget_key] = _widget_default(flow, question)

        value = _render_widget(question, widget_key)
        if value == PLACEHOLDER_OPTION:
            value = None
        try:
            flow.set_answer(question.id, value)
        except InvalidAnswerError as exc:
            st.warning(str(exc))


def _widget_default(flow: SurveyTakingFlow, question: Question):
    stored = flow.get_answer(question.id)
    if stored is not None:
        return stored.value
    if question.question_type in (QuestionType.MCQ, QuestionType.LIKERT):
        return PLACEHOLDER_OPTION
    return ""


def _render_widget(question: Question, widget_key: str):
    if question.question_type is QuestionType.MCQ:
        return st.radio(
            "Select an answer",
            options=[PLACEHOLDER_OPTION, *question.options],
            key=widget_key,
            label_visibility="collapsed",
        )

    if question.question_type is QuestionType.LIKERT:
        low_col, high_col = st.columns(2)
        with low_col:
            st.caption(question.likert_min_label or "Min")
        with high_col:
            st.markdown(
                f"<div style='text-align:right;font-size:0.85rem;color:#6b7280;'>{html.escape(question.likert_max_label or 'Max')}</div>",
                unsafe_allow_html=True,
            )
        return st.radio(
            "Rating",
            options=[PLACEHOLDER_OPTION, *question.likert_values],
            key=widget_key,
            horizontal=True,
            format_func=lambda option: "–" if option == PLACEHOLDER_OPTION else str(option),
            label_visibility="collapsed",
        )

    if question.question_type is QuestionType.LONG_ANSWER:
        return st.text_area(
            "Your answer",
            key=widget_key,
            height=140,
            placeholder="Enter your detailed answer",
            label_visibility="collapsed",
        )

    return st.text_input(
        "Your answer",
        key=widget_key,
        placeholder="Enter your answer",
        label_visibility="collapsed",
    )
