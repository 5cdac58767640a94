from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Sequence

from survey_portal.API.client import fetch_together
from survey_portal.API.surveys import ResponseService, SurveyService
from survey_portal.models.response import SurveyResponse
from survey_portal.models.survey import Survey, SurveyStatus, SurveySummary

logger = logging.getLogger(__name__)

STATUS_COLOURS = {
    SurveyStatus.ACTIVE: "green",
    SurveyStatus.DRAFT: "orange",
    SurveyStatus.CLOSED: "gray",
}


@dataclass(frozen=True)
class TeacherStats:
    total_surveys: int
    active_surveys: int
    total_responses: int


def teacher_stats(surveys: Sequence[SurveySummary]) -> TeacherStats:
    return TeacherStats(
        total_surveys=len(surveys),
        active_surveys=sum(1 for survey in surveys if survey.status is SurveyStatus.ACTIVE),
        total_responses=sum(survey.response_count for survey in surveys),
    )


def format_due_date(value: datetime | date | None) -> str:
    if value is None:
        return "No deadline"
    return f"{value:%b} {value.day}, {value.year}"


class TeacherDashboard:
    """A teacher's survey list with status changes and confirmed deletes.

    The local list only changes after the backend confirmed a write.
    """

    def __init__(self, surveys: SurveyService) -> None:
        self._service = surveys
        self._surveys: List[SurveySummary] = []

    @property
    def surveys(self) -> List[SurveySummary]:
        return list(self._surveys)

    def refresh(self) -> List[SurveySummary]:
        self._surveys = self._service.list_surveys()
        return self.surveys

    def stats(self) -> TeacherStats:
        return teacher_stats(self._surveys)

    def delete(self, survey_id: int) -> None:
        self._service.delete_survey(survey_id)
        self._surveys = [survey for survey in self._surveys if survey.id != survey_id]
        logger.info("Deleted survey %s", survey_id)

    def change_status(self, survey_id: int, status: SurveyStatus) -> Survey:
        """Write a new status; transitions are not validated client-side."""

        current = self._service.get_survey(survey_id)
        payload = {
            "title": current.title,
            "description": current.description,
            "status": SurveyStatus(status).value,
        }
        if current.due_date is not None:
            payload["due_date"] = current.due_date.isoformat()
        updated = self._service.update_survey(survey_id, payload)
        self._surveys = [
            survey.model_copy(update={"status": updated.status}) if survey.id == survey_id else survey
            for survey in self._surveys
        ]
        logger.info("Survey %s is now %s", survey_id, updated.status.value)
        return updated


@dataclass(frozen=True)
class StudentOverview:
    available: tuple[SurveySummary, ...]
    completed: tuple[SurveyResponse, ...]


def student_overview(surveys: Sequence[SurveySummary], history: Sequence[SurveyResponse]) -> StudentOverview:
    """Split surveys into those still open to the student and those answered."""

    answered = {response.survey for response in history}
    available = tuple(
        survey
        for survey in surveys
        if survey.status is SurveyStatus.ACTIVE and survey.id not in answered
    )
    completed = tuple(sorted(history, key=lambda response: response.submitted_at, reverse=True))
    return StudentOverview(available=available, completed=completed)


def load_student_overview(surveys: SurveyService, responses: ResponseService) -> StudentOverview:
    listed, history = fetch_together(surveys.list_surveys, responses.my_history)
    return student_overview(listed, history)


__all__ = [
    "STATUS_COLOURS",
    "StudentOverview",
    "TeacherDashboard",
    "TeacherStats",
    "format_due_date",
    "load_student_overview",
    "student_overview",
    "teacher_stats",
]
