from __future__ import annotations

from typing import Any, Optional

import streamlit as st

from survey_portal.API import AuthSession, PortalServices
from survey_portal.models.user import User

AUTH_SESSION_KEY = "auth_session"
SERVICES_KEY = "portal_services"
CURRENT_USER_KEY = "current_user"
VIEW_KEY = "view"
SELECTED_SURVEY_KEY = "selected_survey_id"
NOTICE_KEY = "notice"
TAKING_FLOW_KEY = "taking_flow"
BUILDER_KEY = "survey_builder"
RESPONSE_BROWSER_KEY = "response_browser"
SELECTED_RESPONSE_KEY = "selected_response_id"
RESPONSE_DETAIL_KEY = "response_detail"
TEACHER_DASHBOARD_KEY = "teacher_dashboard"
PENDING_DELETE_KEY = "pending_delete"

VIEW_LOGIN = "login"
VIEW_DASHBOARD = "dashboard"
VIEW_TAKE_SURVEY = "take_survey"
VIEW_CREATE_SURVEY = "create_survey"
VIEW_RESPONSES = "responses"
VIEW_ANALYTICS = "analytics"

_WIDGET_PREFIXES = ("answer_", "editor_")

_VIEW_SCOPED_KEYS = (
    TEACHER_DASHBOARD_KEY,
    TAKING_FLOW_KEY,
    BUILDER_KEY,
    RESPONSE_BROWSER_KEY,
    SELECTED_RESPONSE_KEY,
    RESPONSE_DETAIL_KEY,
    PENDING_DELETE_KEY,
)


def ensure_defaults() -> None:
    """Ensure the expected session state keys exist with sensible defaults."""

    st.session_state.setdefault(AUTH_SESSION_KEY, AuthSession())
    st.session_state.setdefault(CURRENT_USER_KEY, None)
    st.session_state.setdefault(VIEW_KEY, VIEW_LOGIN)
    st.session_state.setdefault(SELECTED_SURVEY_KEY, None)
    st.session_state.setdefault(NOTICE_KEY, None)


def get_auth_session() -> AuthSession:
    return st.session_state[AUTH_SESSION_KEY]


def get_services() -> PortalServices:
    """Return the backend clients bound to this browser session's credentials."""

    services: PortalServices | None = st.session_state.get(SERVICES_KEY)
    session = get_auth_session()
    if services is None or services.client.session is not session:
        services = PortalServices.for_session(session)
        st.session_state[SERVICES_KEY] = services
    return services


def get_current_user() -> Optional[User]:
    return st.session_state.get(CURRENT_USER_KEY)


def set_current_user(user: Optional[User]) -> None:
    st.session_state[CURRENT_USER_KEY] = user


def sign_out() -> None:
    """Drop credentials and every view-scoped object."""

    get_auth_session().clear()
    set_current_user(None)
    st.session_state[SELECTED_SURVEY_KEY] = None
    _forget_view_objects()
    st.session_state[VIEW_KEY] = VIEW_LOGIN


def get_view() -> str:
    return str(st.session_state[VIEW_KEY])


def navigate(view: str, *, survey_id: int | None = None) -> None:
    """Switch to ``view``; state belonging to the previous view is discarded."""

    _forget_view_objects()
    st.session_state[VIEW_KEY] = view
    st.session_state[SELECTED_SURVEY_KEY] = survey_id


def get_selected_survey_id() -> Optional[int]:
    value = st.session_state.get(SELECTED_SURVEY_KEY)
    return int(value) if value is not None else None


def set_notice(message: str, level: str = "info") -> None:
    """Queue a one-time message shown on the next rendered view."""

    st.session_state[NOTICE_KEY] = {"message": message, "level": level}


def pop_notice() -> Optional[dict[str, str]]:
    return st.session_state.pop(NOTICE_KEY, None)


def get_object(key: str) -> Any:
    return st.session_state.get(key)


def set_object(key: str, value: Any) -> None:
    st.session_state[key] = value


def clear_object(key: str) -> None:
    st.session_state.pop(key, None)


def _forget_view_objects() -> None:
    for key in _VIEW_SCOPED_KEYS:
        st.session_state.pop(key, None)
    for key in [name for name in st.session_state.keys() if str(name).startswith(_WIDGET_PREFIXES)]:
        del st.session_state[key]
