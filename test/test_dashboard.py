from __future__ import annotations

from datetime import date, datetime

import pytest

from conftest import build_response, build_survey
from survey_portal.core.errors import ApiError
from survey_portal.models.survey import SurveyStatus, SurveySummary
from survey_portal.services.dashboard import (
    TeacherDashboard,
    format_due_date,
    load_student_overview,
    student_overview,
    teacher_stats,
)


def _summary(survey_id: int, status: str = "active", responses: int = 0) -> SurveySummary:
    return SurveySummary.model_validate(
        {"id": survey_id, "title": f"Survey {survey_id}", "status": status, "response_count": responses}
    )


class _StubSurveyService:
    def __init__(self, summaries, *, fail_writes: bool = False) -> None:
        self._summaries = list(summaries)
        self._fail_writes = fail_writes
        self.updates: list[tuple[int, dict]] = []
        self.deleted: list[int] = []

    def list_surveys(self):
        return list(self._summaries)

    def get_survey(self, survey_id: int):
        return build_survey(id=survey_id, title="Midterm", description="Mid", status="draft", due_date="2024-06-01")

    def update_survey(self, survey_id: int, payload):
        if self._fail_writes:
            raise ApiError("Server error", status_code=500)
        self.updates.append((survey_id, dict(payload)))
        return build_survey(id=survey_id, title=payload["title"], status=payload["status"])

    def delete_survey(self, survey_id: int) -> None:
        if self._fail_writes:
            raise ApiError("Server error", status_code=500)
        self.deleted.append(survey_id)


class _StubResponseService:
    def __init__(self, history) -> None:
        self._history = history

    def my_history(self):
        return list(self._history)


def test_teacher_stats() -> None:
    stats = teacher_stats([_summary(1, responses=3), _summary(2, "draft", 4), _summary(3, "closed")])

    assert (stats.total_surveys, stats.active_surveys, stats.total_responses) == (3, 1, 7)


def test_format_due_date() -> None:
    assert format_due_date(None) == "No deadline"
    assert format_due_date(date(2024, 6, 1)) == "Jun 1, 2024"
    assert format_due_date(datetime(2024, 12, 25, 8, 30)) == "Dec 25, 2024"


def test_change_status_puts_full_survey_and_updates_list() -> None:
    service = _StubSurveyService([_summary(1, "draft"), _summary(2)])
    board = TeacherDashboard(service)
    board.refresh()

    board.change_status(1, SurveyStatus.ACTIVE)

    survey_id, payload = service.updates[0]
    assert survey_id == 1
    assert payload["title"] == "Midterm"
    assert payload["description"] == "Mid"
    assert payload["status"] == "active"
    assert payload["due_date"].startswith("2024-06-01")
    assert [survey.status for survey in board.surveys] == [SurveyStatus.ACTIVE, SurveyStatus.ACTIVE]


def test_failed_writes_leave_list_untouched() -> None:
    board = TeacherDashboard(_StubSurveyService([_summary(1, "draft")], fail_writes=True))
    board.refresh()

    with pytest.raises(ApiError):
        board.change_status(1, "closed")
    with pytest.raises(ApiError):
        board.delete(1)

    assert [(survey.id, survey.status) for survey in board.surveys] == [(1, SurveyStatus.DRAFT)]


def test_delete_removes_survey_after_confirmation() -> None:
    service = _StubSurveyService([_summary(1), _summary(2)])
    board = TeacherDashboard(service)
    board.refresh()

    board.delete(1)

    assert service.deleted == [1]
    assert [survey.id for survey in board.surveys] == [2]
    assert board.stats().total_surveys == 1


def test_student_overview_splits_available_and_completed() -> None:
    surveys = [_summary(1), _summary(2), _summary(3, "draft"), _summary(4, "closed")]
    older = build_response(1, "Sam", survey=2, submitted_at=datetime(2024, 1, 1))
    newer = build_response(2, "Sam", survey=4, submitted_at=datetime(2024, 2, 1))

    overview = student_overview(surveys, [older, newer])

    assert [survey.id for survey in overview.available] == [1]
    assert [response.id for response in overview.completed] == [2, 1]


def test_load_student_overview_fetches_both_lists() -> None:
    overview = load_student_overview(
        _StubSurveyService([_summary(5)]),
        _StubResponseService([]),
    )

    assert [survey.id for survey in overview.available] == [5]
    assert overview.completed == ()
