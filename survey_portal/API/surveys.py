from __future__ import annotations

from typing import Any, Dict, List, Mapping

from survey_portal.API.client import ApiClient, unwrap_list
from survey_portal.models.analytics import QuestionAnalytics
from survey_portal.models.response import ResponseCreate, SubmissionStatus, SurveyResponse
from survey_portal.models.survey import Question, Survey, SurveySummary


class SurveyService:
    """CRUD wrapper around ``/api/surveys/``."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def list_surveys(self) -> List[SurveySummary]:
        """Return the surveys visible to the signed-in user (filtered by role server-side)."""

        data = self._client.get("/api/surveys/")
        return [SurveySummary.model_validate(item) for item in unwrap_list(data, "results", "surveys")]

    def get_survey(self, survey_id: int) -> Survey:
        return Survey.model_validate(self._client.get(f"/api/surveys/{survey_id}/"))

    def create_survey(self, payload: Mapping[str, Any]) -> Survey:
        return Survey.model_validate(self._client.post("/api/surveys/", payload))

    def update_survey(self, survey_id: int, payload: Mapping[str, Any]) -> Survey:
        return Survey.model_validate(self._client.put(f"/api/surveys/{survey_id}/", payload))

    def delete_survey(self, survey_id: int) -> None:
        self._client.delete(f"/api/surveys/{survey_id}/")

    def check_submission(self, survey_id: int) -> bool:
        data = self._client.get(f"/api/surveys/{survey_id}/check_submission/")
        return SubmissionStatus.model_validate(data or {}).has_submitted

    def get_analytics(self, survey_id: int) -> List[QuestionAnalytics]:
        data = self._client.get(f"/api/surveys/{survey_id}/analytics/")
        return [QuestionAnalytics.model_validate(item) for item in unwrap_list(data)]


class QuestionService:
    """CRUD wrapper around ``/api/questions/``."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def list_questions(self, survey_id: int) -> List[Question]:
        data = self._client.get("/api/questions/", params={"survey_id": survey_id})
        return [Question.model_validate(item) for item in unwrap_list(data)]

    def create_question(self, payload: Mapping[str, Any]) -> Question:
        return Question.model_validate(self._client.post("/api/questions/", payload))

    def update_question(self, question_id: int, payload: Mapping[str, Any]) -> Question:
        return Question.model_validate(self._client.put(f"/api/questions/{question_id}/", payload))

    def delete_question(self, question_id: int) -> None:
        self._client.delete(f"/api/questions/{question_id}/")


class ResponseService:
    """Submission and lookup of survey responses."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def submit(self, submission: ResponseCreate) -> Dict[str, Any]:
        return self._client.post("/api/responses/", submission.to_request()) or {}

    def by_survey(self, survey_id: int) -> List[SurveyResponse]:
        data = self._client.get("/api/responses/by_survey/", params={"survey_id": survey_id})
        return [SurveyResponse.model_validate(item) for item in unwrap_list(data)]

    def my_history(self) -> List[SurveyResponse]:
        data = self._client.get("/api/responses/my_history/")
        return [SurveyResponse.model_validate(item) for item in unwrap_list(data)]

    def get_response(self, response_id: int) -> SurveyResponse:
        return SurveyResponse.model_validate(self._client.get(f"/api/responses/{response_id}/"))


__all__ = ["SurveyService", "QuestionService", "ResponseService"]
