from __future__ import annotations

import streamlit as st

from survey_portal.core.errors import ApiError, PartialSurveyError, SurveyValidationError
from survey_portal.models.survey import QuestionType, SurveyStatus
from survey_portal.services.survey_builder import QuestionEditor, StagedQuestion, SurveyBuilder

from . import components, state

_STATUS_LABELS = {
    SurveyStatus.DRAFT: "Draft (Not visible to students)",
    SurveyStatus.ACTIVE: "Active (Visible to all students)",
    SurveyStatus.CLOSED: "Closed (No longer accepting responses)",
}


def _get_builder() -> SurveyBuilder:
    builder: SurveyBuilder | None = state.get_object(state.BUILDER_KEY)
    if builder is None:
        builder = SurveyBuilder()
        state.set_object(state.BUILDER_KEY, builder)
    return builder


def render() -> None:
    """Two-step survey creation wizard."""

    components.render_header("Create New Survey")
    builder = _get_builder()

    details_col, questions_col = st.columns(2)
    with details_col:
        st.markdown(f"{'**' if builder.step == 1 else ''}1. Survey Details{'**' if builder.step == 1 else ''}")
    with questions_col:
        st.markdown(f"{'**' if builder.step == 2 else ''}2. Add Questions{'**' if builder.step == 2 else ''}")

    if builder.step == 1:
        _render_details_step(builder)
    else:
        _render_questions_step(builder)


def _render_details_step(builder: SurveyBuilder) -> None:
    details = builder.details
    st.info('Once you set this survey to "Active", it will automatically be available to all registered students.')

    with st.form("survey_details_form"):
        title = st.text_input("Survey Title *", value=details.title, placeholder="Enter survey title")
        description = st.text_area("Description", value=details.description, placeholder="Describe your survey")
        status_col, due_col = st.columns(2)
        with status_col:
            statuses = list(SurveyStatus)
            status = st.selectbox(
                "Status",
                options=statuses,
                index=statuses.index(details.status),
                format_func=lambda value: _STATUS_LABELS[value],
            )
        with due_col:
            due_date = st.date_input("Due Date", value=details.due_date)
        proceed = st.form_submit_button("Next: Add Questions →", type="primary")

    if proceed:
        details.title = title
        details.description = description
        details.status = status
        details.due_date = due_date or None
        try:
            builder.go_to_questions()
        except SurveyValidationError as exc:
            st.warning(str(exc))
            return
        st.rerun()


def _render_questions_step(builder: SurveyBuilder) -> None:
    staged = builder.questions
    if staged:
        st.subheader(f"Questions ({len(staged)})")
        for index, question in enumerate(staged):
            _render_staged(builder, index, question)

    st.subheader("Add Question")
    _render_editor(builder.editor)

    if st.button("Add Question", key="add_question"):
        try:
            builder.add_question()
        except SurveyValidationError as exc:
            st.warning(str(exc))
        else:
            _forget_editor_widgets()
            st.rerun()

    st.divider()
    back_col, submit_col = st.columns(2)
    with back_col:
        st.button("← Back to Details", on_click=builder.back_to_details)
    with submit_col:
        if st.button("Create Survey", type="primary", disabled=not staged):
            _submit(builder)


def _render_staged(builder: SurveyBuilder, index: int, question: StagedQuestion) -> None:
    with st.container(border=True):
        text_col, remove_col = st.columns([5, 1], vertical_alignment="center")
        with text_col:
            st.markdown(f"**{index + 1}. {question.question_text}**")
            details = [question.question_type.label, "Required" if question.is_required else "Optional"]
            if question.options:
                details.append(f"Options: {', '.join(question.options)}")
            if question.question_type is QuestionType.LIKERT:
                details.append(f"Scale: {question.likert_min}–{question.likert_max}")
            st.caption(" · ".join(details))
        with remove_col:
            st.button("Remove", key=f"remove_question_{index}", on_click=builder.remove_question, args=(index,))


def _render_editor(editor: QuestionEditor) -> None:
    editor.question_text = st.text_area(
        "Question Text *",
        value=editor.question_text,
        key="editor_question_text",
        placeholder="Enter your question",
    )

    type_col, required_col = st.columns([3, 1], vertical_alignment="bottom")
    with type_col:
        types = list(QuestionType)
        chosen = st.selectbox(
            "Question Type",
            options=types,
            index=types.index(editor.question_type),
            format_func=lambda value: value.label,
            key="editor_question_type",
        )
        editor.change_type(chosen)
    with required_col:
        editor.is_required = st.checkbox("Required", value=editor.is_required, key="editor_is_required")

    if editor.question_type is QuestionType.MCQ:
        st.markdown("Options")
        for index, option in enumerate(editor.options):
            option_col, remove_col = st.columns([5, 1], vertical_alignment="bottom")
            with option_col:
                value = st.text_input(
                    f"Option {index + 1}",
                    value=option,
                    key=f"editor_option_{index}_{len(editor.options)}",
                    placeholder=f"Option {index + 1}",
                    label_visibility="collapsed",
                )
                if value != option:
                    editor.set_option(index, value)
            with remove_col:
                if len(editor.options) > 1:
                    st.button("✕", key=f"editor_remove_option_{index}", on_click=editor.remove_option, args=(index,))
        st.button("+ Add Option", key="editor_add_option", on_click=editor.add_option)

    elif editor.question_type is QuestionType.LIKERT:
        min_col, max_col = st.columns(2)
        with min_col:
            editor.likert_min = int(st.number_input("Min Value", value=editor.likert_min, step=1, key="editor_likert_min"))
            editor.likert_min_label = st.text_input(
                "Min Label",
                value=editor.likert_min_label,
                key="editor_likert_min_label",
                placeholder="e.g., Strongly Disagree",
            )
        with max_col:
            editor.likert_max = int(st.number_input("Max Value", value=editor.likert_max, step=1, key="editor_likert_max"))
            editor.likert_max_label = st.text_input(
                "Max Label",
                value=editor.likert_max_label,
                key="editor_likert_max_label",
                placeholder="e.g., Strongly Agree",
            )


def _forget_editor_widgets() -> None:
    for key in [name for name in st.session_state.keys() if str(name).startswith("editor_")]:
        del st.session_state[key]


def _submit(builder: SurveyBuilder) -> None:
    services = state.get_services()
    try:
        with st.spinner("Creating survey..."):
            builder.submit(services.surveys, services.questions)
    except SurveyValidationError as exc:
        st.warning(str(exc))
        return
    except PartialSurveyError as exc:
        components.report_write_error(exc, "save every question")
        return
    except ApiError as exc:
        components.report_write_error(exc, "create survey")
        return

    state.navigate(state.VIEW_DASHBOARD)
    state.set_notice("Survey created successfully! It will be visible to all students once activated.", "success")
    st.rerun()
