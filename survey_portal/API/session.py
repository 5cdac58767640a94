from __future__ import annotations

from dataclasses import dataclass

from survey_portal.models.user import TokenPair


@dataclass
class AuthSession:
    """Credentials of one signed-in browser session.

    Handed explicitly to :class:`~survey_portal.API.client.ApiClient`; every
    request reads the access token from here.
    """

    access_token: str | None = None
    refresh_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def store(self, tokens: TokenPair) -> None:
        self.access_token = tokens.access
        self.refresh_token = tokens.refresh

    def clear(self) -> None:
        self.access_token = None
        self.refresh_token = None

    def authorization_header(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}
