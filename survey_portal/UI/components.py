from __future__ import annotations

import html
import logging
from typing import Sequence, Tuple

import streamlit as st
from pydantic import ValidationError

from survey_portal.core.errors import ApiError, AuthenticationError
from survey_portal.models.user import LoginCredentials, SignupData, UserRole

from . import state

logger = logging.getLogger(__name__)


def render_notice() -> None:
    """Show the message queued by the previous view, if any."""

    notice = state.pop_notice()
    if not notice:
        return
    level = notice.get("level", "info")
    message = notice.get("message", "")
    if level == "error":
        st.error(message)
    elif level == "warning":
        st.warning(message)
    elif level == "success":
        st.success(message)
    else:
        st.info(message)


def report_write_error(exc: ApiError, action: str) -> None:
    """Surface a failed write; expired sessions go back to the login screen."""

    if isinstance(exc, AuthenticationError):
        state.sign_out()
        state.set_notice(exc.message, "warning")
        st.rerun()
    st.error(f"Failed to {action}: {exc.message}")


def report_read_error(exc: ApiError, what: str) -> None:
    """Log a failed read and render the empty state instead of crashing."""

    logger.warning("Failed to load %s: %s", what, exc.message)
    if isinstance(exc, AuthenticationError):
        state.sign_out()
        state.set_notice(exc.message, "warning")
        st.rerun()
    st.error(f"Failed to load {what}.")


def render_header(title: str, subtitle: str | None = None, *, back_label: str | None = "← Back") -> None:
    """Title row with an optional button back to the dashboard."""

    title_col, action_col = st.columns([4, 1], vertical_alignment="center")
    with title_col:
        st.title(title)
        if subtitle:
            st.caption(subtitle)
    with action_col:
        if back_label:
            st.button(
                back_label,
                key=f"back_{title}",
                on_click=state.navigate,
                args=(state.VIEW_DASHBOARD,),
            )


def render_stat_cards(cards: Sequence[Tuple[str, str | int]]) -> None:
    columns = st.columns(len(cards))
    for column, (label, value) in zip(columns, cards):
        with column:
            st.metric(label, value)


def render_muted(message: str) -> None:
    st.markdown(
        f'<div style="padding:1rem;text-align:center;color:#6b7280;">{html.escape(message)}</div>',
        unsafe_allow_html=True,
    )


def render_login_page() -> None:
    """Sign-in form with a secondary tab for creating an account."""

    st.title("Survey Portal")
    render_notice()
    login_tab, signup_tab = st.tabs(["Sign in", "Create account"])

    with login_tab:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary")
        if submitted:
            _handle_login(username, password)

    with signup_tab:
        with st.form("signup_form", clear_on_submit=False):
            first_col, last_col = st.columns(2)
            with first_col:
                first_name = st.text_input("First name")
            with last_col:
                last_name = st.text_input("Last name")
            new_username = st.text_input("Username", key="signup_username")
            email = st.text_input("Email")
            new_password = st.text_input("Password", type="password", key="signup_password")
            role = st.selectbox(
                "I am a",
                options=[UserRole.STUDENT, UserRole.TEACHER],
                format_func=lambda value: value.value.title(),
            )
            section = st.text_input("Section (optional)")
            course = st.text_input("Course (optional)")
            year_level = st.number_input("Year level (optional)", min_value=0, max_value=10, value=0, step=1)
            created = st.form_submit_button("Create account")
        if created:
            try:
                data = SignupData(
                    username=new_username.strip(),
                    email=email.strip(),
                    password=new_password,
                    first_name=first_name.strip(),
                    last_name=last_name.strip(),
                    role=role,
                    section=section.strip() or None,
                    course=course.strip() or None,
                    year_level=int(year_level) or None,
                )
            except ValidationError:
                st.warning("Username, email and password are required.")
                return
            try:
                state.get_services().auth.signup(data)
            except ApiError as exc:
                st.error(f"Failed to create account: {exc.message}")
                return
            st.success("Account created. You can sign in now.")


def _handle_login(username: str, password: str) -> None:
    try:
        credentials = LoginCredentials(username=username.strip(), password=password)
    except ValidationError:
        st.warning("Please enter your username and password.")
        return

    services = state.get_services()
    try:
        services.auth.login(credentials)
        user = services.auth.current_user()
    except ApiError as exc:
        services.auth.logout()
        st.error(f"Sign in failed: {exc.message}")
        return

    state.set_current_user(user)
    state.navigate(state.VIEW_DASHBOARD)
    st.rerun()
