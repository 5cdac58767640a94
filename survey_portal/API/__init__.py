from __future__ import annotations

from dataclasses import dataclass

from .auth import AuthService
from .client import ApiClient, fetch_together, unwrap_list
from .session import AuthSession
from .surveys import QuestionService, ResponseService, SurveyService


@dataclass(frozen=True)
class PortalServices:
    """All backend clients bound to one authenticated session."""

    client: ApiClient
    auth: AuthService
    surveys: SurveyService
    questions: QuestionService
    responses: ResponseService

    @classmethod
    def for_session(cls, session: AuthSession, **client_kwargs) -> "PortalServices":
        client = ApiClient(session, **client_kwargs)
        return cls(
            client=client,
            auth=AuthService(client),
            surveys=SurveyService(client),
            questions=QuestionService(client),
            responses=ResponseService(client),
        )


__all__ = [
    "ApiClient",
    "AuthService",
    "AuthSession",
    "PortalServices",
    "QuestionService",
    "ResponseService",
    "SurveyService",
    "fetch_together",
    "unwrap_list",
]
