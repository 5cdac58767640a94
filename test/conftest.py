from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("SURVEY_API_BASE_URL", "http://testserver")
os.environ.setdefault("QUESTIONS_PER_PAGE", "5")
os.environ.setdefault("RESPONSES_PER_PAGE", "10")

from survey_portal.models.response import SurveyResponse  # noqa: E402
from survey_portal.models.survey import Survey  # noqa: E402


def build_survey(questions=None, **overrides) -> Survey:
    payload = {
        "id": 10,
        "title": "Course Feedback",
        "description": "End of term survey",
        "status": "active",
        "due_date": None,
        "questions": questions
        if questions is not None
        else [
            {
                "id": 1,
                "question_text": "Favourite topic?",
                "question_type": "mcq",
                "order": 0,
                "options": ["A", "B"],
            },
            {
                "id": 2,
                "question_text": "Rate the course",
                "question_type": "likert",
                "order": 1,
                "likert_min": 1,
                "likert_max": 5,
            },
            {
                "id": 3,
                "question_text": "Any comments?",
                "question_type": "short_answer",
                "order": 2,
                "is_required": False,
            },
        ],
    }
    payload.update(overrides)
    return Survey.model_validate(payload)


def build_response(response_id: int, student_name: str, answers=None, **overrides) -> SurveyResponse:
    payload = {
        "id": response_id,
        "survey": 10,
        "student": response_id,
        "student_name": student_name,
        "submitted_at": datetime(2024, 3, 5, 14, 7, 9),
        "answers": answers or [],
    }
    payload.update(overrides)
    return SurveyResponse.model_validate(payload)


@pytest.fixture
def survey() -> Survey:
    return build_survey()

