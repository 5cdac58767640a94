from __future__ import annotations

import logging

from survey_portal.API.client import ApiClient
from survey_portal.models.user import LoginCredentials, SignupData, TokenPair, User

logger = logging.getLogger(__name__)


class AuthService:
    """Login, signup and current-user lookup against the backend."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    @property
    def is_authenticated(self) -> bool:
        return self._client.session.is_authenticated

    def login(self, credentials: LoginCredentials) -> TokenPair:
        """Exchange credentials for tokens and keep them on the session."""

        data = self._client.post("/auth/login/", credentials.model_dump())
        tokens = TokenPair.model_validate(data)
        self._client.session.store(tokens)
        logger.info("Signed in as %s", credentials.username)
        return tokens

    def signup(self, data: SignupData) -> User:
        created = self._client.post("/api/users/", data.model_dump(mode="json", exclude_none=True))
        return User.model_validate(created)

    def current_user(self) -> User:
        return User.model_validate(self._client.get("/api/users/me/"))

    def logout(self) -> None:
        self._client.session.clear()
        logger.info("Signed out")
