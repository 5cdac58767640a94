from __future__ import annotations

from typing import Dict, List


class ApiError(RuntimeError):
    """Normalized failure raised by every call into the survey backend."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        errors: Dict[str, List[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


class AuthenticationError(ApiError):
    """The stored credentials are missing, expired or rejected."""


class NotFoundError(ApiError):
    """The requested survey, question or response does not exist."""


class AlreadySubmittedError(ApiError):
    """The current student already answered the survey."""


class ApiConnectionError(ApiError):
    """The backend could not be reached or did not answer in time."""


class SurveyValidationError(ValueError):
    """Local input was rejected before any request was issued."""


class RequiredAnswerMissing(SurveyValidationError):
    """A required question has no answer."""

    def __init__(self, question_id: int, question_text: str) -> None:
        super().__init__(f"Please answer: {question_text}")
        self.question_id = question_id
        self.question_text = question_text


class InvalidAnswerError(SurveyValidationError):
    """An answer value does not fit the question it targets."""


class PartialSurveyError(ApiError):
    """The survey was created but not every question could be saved."""

    def __init__(self, survey_id: int, created: int, total: int, cause: ApiError) -> None:
        super().__init__(
            f"Survey {survey_id} was created but only {created} of {total} questions were saved: {cause.message}",
            status_code=cause.status_code,
            errors=cause.errors,
        )
        self.survey_id = survey_id
        self.created = created
        self.total = total


__all__ = [
    "ApiError",
    "AuthenticationError",
    "NotFoundError",
    "AlreadySubmittedError",
    "ApiConnectionError",
    "SurveyValidationError",
    "RequiredAnswerMissing",
    "InvalidAnswerError",
    "PartialSurveyError",
]
