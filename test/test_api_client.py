from __future__ import annotations

import json

import pytest
import requests

from survey_portal.API import AuthSession, PortalServices, fetch_together, unwrap_list
from survey_portal.core.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    NotFoundError,
)
from survey_portal.models.response import AnswerPayload, ResponseCreate
from survey_portal.models.user import LoginCredentials, SignupData


class _FakeResponse:
    def __init__(self, status_code: int = 200, body=None) -> None:
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body
        self.content = b"" if body is None else json.dumps(body).encode("utf-8")

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class _StubHttp:
    """Stands in for ``requests.Session``; replies are queued per call."""

    def __init__(self, *replies) -> None:
        self._replies = list(replies)
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def _services(*replies, token: str | None = "tok"):
    http = _StubHttp(*replies)
    session = AuthSession(access_token=token)
    return PortalServices.for_session(session, base_url="http://api.test/", timeout=3, http=http), http


def test_requests_carry_bearer_token_and_timeout() -> None:
    services, http = _services(_FakeResponse(200, [{"id": 1, "title": "S"}]))

    surveys = services.surveys.list_surveys()

    assert [survey.title for survey in surveys] == ["S"]
    call = http.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://api.test/api/surveys/"
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["timeout"] == 3


def test_anonymous_requests_have_no_authorization_header() -> None:
    services, http = _services(_FakeResponse(200, {"access": "a", "refresh": "r"}), token=None)

    services.auth.login(LoginCredentials(username="sam", password="pw"))

    assert "Authorization" not in http.calls[0]["headers"]
    assert http.calls[0]["json"] == {"username": "sam", "password": "pw"}
    assert services.client.session.access_token == "a"
    assert services.auth.is_authenticated


def test_logout_clears_tokens() -> None:
    services, _ = _services()
    services.auth.logout()

    assert not services.auth.is_authenticated
    assert services.client.session.authorization_header() == {}


@pytest.mark.parametrize(
    ("status", "body", "error_type", "message"),
    [
        (401, {"detail": "Token expired"}, AuthenticationError, "Token expired"),
        (404, None, NotFoundError, "The requested item was not found."),
        (400, {"title": ["This field is required."]}, ApiError, "title: This field is required."),
        (400, {"non_field_errors": ["Bad pair"]}, ApiError, "Bad pair"),
        (500, None, ApiError, "An unexpected error occurred. Please try again."),
    ],
)
def test_error_mapping(status, body, error_type, message) -> None:
    services, _ = _services(_FakeResponse(status, body))

    with pytest.raises(error_type) as excinfo:
        services.surveys.get_survey(3)

    assert excinfo.value.message == message
    assert excinfo.value.status_code == status


def test_field_errors_are_kept() -> None:
    services, _ = _services(_FakeResponse(400, {"title": ["Too long."], "status": "Invalid."}))

    with pytest.raises(ApiError) as excinfo:
        services.surveys.create_survey({"title": "x" * 500})

    assert excinfo.value.errors == {"title": ["Too long."], "status": ["Invalid."]}


def test_transport_failure_becomes_connection_error() -> None:
    services, _ = _services(requests.ConnectionError("refused"))

    with pytest.raises(ApiConnectionError):
        services.surveys.list_surveys()


def test_empty_body_returns_none() -> None:
    services, http = _services(_FakeResponse(204))

    assert services.surveys.delete_survey(4) is None
    assert http.calls[0]["method"] == "DELETE"
    assert http.calls[0]["url"] == "http://api.test/api/surveys/4/"


def test_submission_and_lookups_hit_expected_endpoints() -> None:
    services, http = _services(
        _FakeResponse(201, {"id": 9}),
        _FakeResponse(200, {"has_submitted": True}),
        _FakeResponse(200, {"results": []}),
    )
    submission = ResponseCreate(survey=2, answers=[AnswerPayload(question_id=5, answer_number=3)])

    assert services.responses.submit(submission) == {"id": 9}
    assert services.surveys.check_submission(2) is True
    assert services.responses.by_survey(2) == []

    assert http.calls[0]["json"] == {"survey": 2, "answers": [{"question_id": 5, "answer_number": 3}]}
    assert http.calls[1]["url"].endswith("/api/surveys/2/check_submission/")
    assert http.calls[2]["params"] == {"survey_id": 2}


def test_unwrap_list_accepts_bare_and_wrapped_lists() -> None:
    assert unwrap_list([1, 2]) == [1, 2]
    assert unwrap_list({"results": [3]}) == [3]
    assert unwrap_list({"surveys": [4]}, "results", "surveys") == [4]
    assert unwrap_list({"count": 0}) == []
    assert unwrap_list(None) == []


def test_fetch_together_reraises_first_failure() -> None:
    def fail():
        raise NotFoundError("gone", status_code=404)

    assert fetch_together(lambda: 1, lambda: "two") == (1, "two")
    with pytest.raises(NotFoundError):
        fetch_together(fail, lambda: "two")


def test_question_endpoints() -> None:
    question = {"id": 5, "question_text": "Pace?", "question_type": "mcq", "options": ["Slow", "Fast"]}
    services, http = _services(
        _FakeResponse(200, [question]),
        _FakeResponse(201, question),
        _FakeResponse(200, {**question, "question_text": "Pace of class?"}),
        _FakeResponse(204),
    )

    listed = services.questions.list_questions(3)
    created = services.questions.create_question({"survey": 3, **question})
    updated = services.questions.update_question(5, {"question_text": "Pace of class?"})
    services.questions.delete_question(5)

    assert [item.id for item in listed] == [5]
    assert created.options == ["Slow", "Fast"]
    assert updated.question_text == "Pace of class?"
    assert [(call["method"], call["url"]) for call in http.calls] == [
        ("GET", "http://api.test/api/questions/"),
        ("POST", "http://api.test/api/questions/"),
        ("PUT", "http://api.test/api/questions/5/"),
        ("DELETE", "http://api.test/api/questions/5/"),
    ]
    assert http.calls[0]["params"] == {"survey_id": 3}
    assert http.calls[2]["json"] == {"question_text": "Pace of class?"}


def test_survey_endpoints() -> None:
    survey = {"id": 3, "title": "Week 1", "status": "draft"}
    services, http = _services(
        _FakeResponse(200, {"surveys": [survey]}),
        _FakeResponse(200, survey),
        _FakeResponse(201, survey),
        _FakeResponse(200, {**survey, "status": "active"}),
        _FakeResponse(200, [{"question_id": 1, "question_type": "likert", "total_responses": 2, "data": {"4": 2}}]),
    )

    assert [item.id for item in services.surveys.list_surveys()] == [3]
    assert services.surveys.get_survey(3).title == "Week 1"
    services.surveys.create_survey({"title": "Week 1"})
    assert services.surveys.update_survey(3, {"title": "Week 1", "status": "active"}).status.value == "active"
    analytics = services.surveys.get_analytics(3)

    assert analytics[0].total_responses == 2
    assert [(call["method"], call["url"]) for call in http.calls] == [
        ("GET", "http://api.test/api/surveys/"),
        ("GET", "http://api.test/api/surveys/3/"),
        ("POST", "http://api.test/api/surveys/"),
        ("PUT", "http://api.test/api/surveys/3/"),
        ("GET", "http://api.test/api/surveys/3/analytics/"),
    ]


def test_response_and_user_endpoints() -> None:
    response = {"id": 8, "survey": 3, "student_name": "Ana", "submitted_at": "2024-03-05T14:07:09Z"}
    user = {"id": 2, "username": "ana", "role": "student"}
    services, http = _services(
        _FakeResponse(200, response),
        _FakeResponse(200, [response]),
        _FakeResponse(201, user),
        _FakeResponse(200, user),
    )

    assert services.responses.get_response(8).student_name == "Ana"
    assert [item.id for item in services.responses.my_history()] == [8]
    services.auth.signup(SignupData(username="ana", email="ana@example.edu", password="pw"))
    assert services.auth.current_user().username == "ana"

    assert [(call["method"], call["url"]) for call in http.calls] == [
        ("GET", "http://api.test/api/responses/8/"),
        ("GET", "http://api.test/api/responses/my_history/"),
        ("POST", "http://api.test/api/users/"),
        ("GET", "http://api.test/api/users/me/"),
    ]
    assert http.calls[2]["json"]["role"] == "student"
    assert "section" not in http.calls[2]["json"]
