from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Union

from pydantic import BaseModel, Field, field_validator


class SurveyStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class QuestionType(str, Enum):
    MCQ = "mcq"
    LIKERT = "likert"
    SHORT_ANSWER = "short_answer"
    LONG_ANSWER = "long_answer"

    @property
    def label(self) -> str:
        return _QUESTION_TYPE_LABELS[self]

    @property
    def is_free_text(self) -> bool:
        return self in (QuestionType.SHORT_ANSWER, QuestionType.LONG_ANSWER)


_QUESTION_TYPE_LABELS = {
    QuestionType.MCQ: "Multiple Choice",
    QuestionType.LIKERT: "Likert Scale",
    QuestionType.SHORT_ANSWER: "Short Answer",
    QuestionType.LONG_ANSWER: "Long Answer",
}

DEFAULT_LIKERT_MIN = 1
DEFAULT_LIKERT_MAX = 5


class Question(BaseModel):
    """A typed prompt that belongs to exactly one survey."""

    id: int
    survey: int | None = None
    question_text: str
    question_type: QuestionType
    order: int = 0
    is_required: bool = True
    options: List[str] = Field(default_factory=list)
    likert_min: int = DEFAULT_LIKERT_MIN
    likert_max: int = DEFAULT_LIKERT_MAX
    likert_min_label: str | None = None
    likert_max_label: str | None = None

    model_config = {"extra": "ignore"}

    @field_validator("options", mode="before")
    @classmethod
    def _stringify_options(cls, value: Iterable[Union[str, int]] | None) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            raise TypeError("options must be provided as a sequence, not a single string")
        return [str(option) for option in value]

    @field_validator("likert_min", "likert_max", mode="before")
    @classmethod
    def _default_scale_bounds(cls, value: Any, info) -> Any:
        # The backend serializes unset bounds as null.
        if value is None or value == "":
            return DEFAULT_LIKERT_MIN if info.field_name == "likert_min" else DEFAULT_LIKERT_MAX
        return value

    @property
    def likert_values(self) -> List[int]:
        return list(range(self.likert_min, self.likert_max + 1))

    @property
    def is_free_text(self) -> bool:
        return self.question_type.is_free_text


class Survey(BaseModel):
    """A survey with its ordered questions."""

    id: int
    title: str
    description: str = ""
    status: SurveyStatus = SurveyStatus.DRAFT
    due_date: datetime | date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: int | None = None
    created_by_name: str = ""
    questions: List[Question] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: str | None) -> str:
        return value or ""

    @field_validator("due_date", mode="before")
    @classmethod
    def _empty_due_date(cls, value: Any) -> Any:
        return value or None

    @field_validator("questions", mode="after")
    @classmethod
    def _sort_questions(cls, value: List[Question]) -> List[Question]:
        return sorted(value, key=lambda question: question.order)

    def question_by_id(self, question_id: int) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class SurveySummary(BaseModel):
    """One row of the survey list endpoint."""

    id: int
    title: str
    description: str = ""
    status: SurveyStatus = SurveyStatus.DRAFT
    due_date: datetime | date | None = None
    created_at: datetime | None = None
    created_by_name: str = ""
    question_count: int = 0
    response_count: int = 0

    model_config = {"extra": "ignore"}

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: str | None) -> str:
        return value or ""

    @field_validator("due_date", mode="before")
    @classmethod
    def _empty_due_date(cls, value: Any) -> Any:
        return value or None


__all__ = [
    "SurveyStatus",
    "QuestionType",
    "Question",
    "Survey",
    "SurveySummary",
    "DEFAULT_LIKERT_MIN",
    "DEFAULT_LIKERT_MAX",
]
