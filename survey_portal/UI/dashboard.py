from __future__ import annotations

import streamlit as st

from survey_portal.core.errors import ApiError, AuthenticationError
from survey_portal.models.survey import SurveyStatus, SurveySummary
from survey_portal.models.user import User
from survey_portal.services.dashboard import (
    STATUS_COLOURS,
    TeacherDashboard,
    format_due_date,
    load_student_overview,
)

from . import components, state


def _render_user_bar(user: User, portal: str) -> None:
    name_col, logout_col = st.columns([4, 1], vertical_alignment="center")
    with name_col:
        st.title(portal)
        st.caption(user.full_name)
    with logout_col:
        st.button("Logout", key="logout_button", on_click=state.sign_out)


def render_teacher(user: User) -> None:
    """Teacher landing page: stats, survey cards and their actions."""

    _render_user_bar(user, "Teacher Portal")
    components.render_notice()

    board: TeacherDashboard | None = state.get_object(state.TEACHER_DASHBOARD_KEY)
    if board is None:
        board = TeacherDashboard(state.get_services().surveys)
        try:
            board.refresh()
        except ApiError as exc:
            components.report_read_error(exc, "surveys")
            return
        state.set_object(state.TEACHER_DASHBOARD_KEY, board)

    stats = board.stats()
    components.render_stat_cards(
        [
            ("Total Surveys", stats.total_surveys),
            ("Active Surveys", stats.active_surveys),
            ("Total Responses", stats.total_responses),
        ]
    )

    heading_col, create_col = st.columns([4, 1], vertical_alignment="center")
    with heading_col:
        st.subheader("My Surveys")
    with create_col:
        st.button(
            "Create Survey",
            type="primary",
            on_click=state.navigate,
            args=(state.VIEW_CREATE_SURVEY,),
        )

    if not board.surveys:
        components.render_muted("No surveys yet. Create your first survey to get started.")
        return

    for survey in board.surveys:
        _render_teacher_card(board, survey)


def _render_teacher_card(board: TeacherDashboard, survey: SurveySummary) -> None:
    with st.container(border=True):
        colour = STATUS_COLOURS.get(survey.status, "gray")
        st.markdown(f"#### {survey.title}  :{colour}[{survey.status.value}]")
        if survey.description:
            st.write(survey.description)
        st.caption(
            f"Due: {format_due_date(survey.due_date)} · "
            f"{survey.question_count} questions · {survey.response_count} responses"
        )

        analytics_col, responses_col, status_col, delete_col = st.columns(4)
        with analytics_col:
            st.button(
                "Analytics",
                key=f"analytics_{survey.id}",
                on_click=state.navigate,
                args=(state.VIEW_ANALYTICS,),
                kwargs={"survey_id": survey.id},
            )
        with responses_col:
            st.button(
                "Responses",
                key=f"responses_{survey.id}",
                on_click=state.navigate,
                args=(state.VIEW_RESPONSES,),
                kwargs={"survey_id": survey.id},
            )
        with status_col:
            statuses = list(SurveyStatus)
            st.selectbox(
                "Status",
                options=statuses,
                index=statuses.index(survey.status),
                format_func=lambda value: value.value.title(),
                key=f"status_{survey.id}",
                label_visibility="collapsed",
                on_change=_change_status,
                args=(board, survey.id),
            )
        with delete_col:
            if st.button("Delete", key=f"delete_{survey.id}"):
                state.set_object(state.PENDING_DELETE_KEY, survey.id)

        if state.get_object(state.PENDING_DELETE_KEY) == survey.id:
            st.warning("Delete this survey? All of its questions and responses are removed too.")
            confirm_col, cancel_col = st.columns(2)
            with confirm_col:
                if st.button("Confirm delete", key=f"confirm_delete_{survey.id}", type="primary"):
                    try:
                        board.delete(survey.id)
                    except ApiError as exc:
                        components.report_write_error(exc, "delete survey")
                    else:
                        state.clear_object(state.PENDING_DELETE_KEY)
                        st.rerun()
            with cancel_col:
                st.button(
                    "Cancel",
                    key=f"cancel_delete_{survey.id}",
                    on_click=state.clear_object,
                    args=(state.PENDING_DELETE_KEY,),
                )


def render_student(user: User) -> None:
    """Student landing page: open surveys and submission history."""

    _render_user_bar(user, "Student Portal")
    components.render_notice()

    services = state.get_services()
    try:
        overview = load_student_overview(services.surveys, services.responses)
    except ApiError as exc:
        components.report_read_error(exc, "surveys")
        return

    components.render_stat_cards(
        [
            ("Available Surveys", len(overview.available)),
            ("Completed", len(overview.completed)),
        ]
    )

    st.subheader("Available Surveys")
    if not overview.available:
        components.render_muted("No surveys are waiting for you.")
    for survey in overview.available:
        with st.container(border=True):
            st.markdown(f"#### {survey.title}")
            if survey.description:
                st.write(survey.description)
            st.caption(
                f"By {survey.created_by_name or 'your teacher'} · Due: {format_due_date(survey.due_date)} · "
                f"{survey.question_count} questions"
            )
            st.button(
                "Take Survey",
                key=f"take_{survey.id}",
                type="primary",
                on_click=state.navigate,
                args=(state.VIEW_TAKE_SURVEY,),
                kwargs={"survey_id": survey.id},
            )

    st.subheader("Completed Surveys")
    if not overview.completed:
        components.render_muted("You have not submitted any surveys yet.")
    for response in overview.completed:
        st.markdown(
            f"- **{response.survey_title or f'Survey {response.survey}'}** "
            f"· submitted {format_due_date(response.submitted_at)}"
        )


def _change_status(board: TeacherDashboard, survey_id: int) -> None:
    key = f"status_{survey_id}"
    try:
        board.change_status(survey_id, st.session_state[key])
    except AuthenticationError as exc:
        state.sign_out()
        state.set_notice(exc.message, "warning")
    except ApiError as exc:
        del st.session_state[key]
        state.set_notice(f"Failed to update survey status: {exc.message}", "error")
