from __future__ import annotations

import logging
from typing import Callable

import streamlit as st

from survey_portal.core.errors import ApiError, AuthenticationError
from survey_portal.core.logging_config import configure_logging

from . import analytics, builder, components, dashboard, responses, state, take_survey

logger = logging.getLogger(__name__)


def run_app() -> None:
    """Entry point for the Streamlit-based survey portal."""

    st.set_page_config(page_title="Survey Portal", page_icon="📝", layout="wide")
    configure_logging()
    state.ensure_defaults()

    if not ensure_signed_in():
        components.render_login_page()
        return

    _route(state.get_view())


def ensure_signed_in() -> bool:
    """Resolve the current user for a stored token; False when a login is needed."""

    session = state.get_auth_session()
    if not session.is_authenticated:
        return False
    if state.get_current_user() is not None:
        return True

    try:
        user = state.get_services().auth.current_user()
    except AuthenticationError as exc:
        state.sign_out()
        state.set_notice(exc.message, "warning")
        return False
    except ApiError as exc:
        logger.warning("Could not resolve the current user: %s", exc.message)
        state.sign_out()
        state.set_notice("Could not reach the survey server. Please sign in again.", "error")
        return False

    state.set_current_user(user)
    return True


def _route(view: str) -> None:
    user = state.get_current_user()
    survey_id = state.get_selected_survey_id()

    if view == state.VIEW_TAKE_SURVEY and survey_id is not None:
        take_survey.render(survey_id)
    elif view == state.VIEW_CREATE_SURVEY and user.is_teacher:
        builder.render()
    elif view == state.VIEW_RESPONSES and user.is_teacher and survey_id is not None:
        responses.render(survey_id)
    elif view == state.VIEW_ANALYTICS and user.is_teacher and survey_id is not None:
        analytics.render(survey_id)
    elif user.is_teacher:
        dashboard.render_teacher(user)
    else:
        dashboard.render_student(user)


def run_teacher_page(page_title: str, page_icon: str, render: Callable[..., None]) -> None:
    """Standalone multipage entry: sign-in, teacher check, survey picker, then ``render``."""

    st.set_page_config(page_title=page_title, page_icon=page_icon, layout="wide")
    configure_logging()
    state.ensure_defaults()

    if not ensure_signed_in():
        components.render_login_page()
        return

    components.render_notice()
    user = state.get_current_user()
    if not user.is_teacher:
        st.warning("Only teachers can view this page.")
        return

    survey_id = _pick_survey()
    if survey_id is not None:
        render(survey_id, show_back=False)


def _pick_survey() -> int | None:
    try:
        surveys = state.get_services().surveys.list_surveys()
    except ApiError as exc:
        components.report_read_error(exc, "surveys")
        return None
    if not surveys:
        st.info("You have not created any surveys yet.")
        return None

    ids = [survey.id for survey in surveys]
    titles = {survey.id: survey.title for survey in surveys}
    selected = state.get_selected_survey_id()
    chosen = st.selectbox(
        "Survey",
        options=ids,
        index=ids.index(selected) if selected in ids else 0,
        format_func=lambda survey_id: titles[survey_id],
    )
    if chosen != selected:
        st.session_state[state.SELECTED_SURVEY_KEY] = chosen
    return chosen
