from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, Field, model_validator

from survey_portal.core.errors import InvalidAnswerError
from survey_portal.models.survey import Question, QuestionType

NO_ANSWER_PLACEHOLDER = "(No answer)"


class AnswerPayload(BaseModel):
    """Wire shape of a single submitted answer; exactly one value field is set."""

    question_id: int
    answer_choice: str | None = None
    answer_number: int | None = None
    answer_text: str | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _ensure_single_value(self) -> "AnswerPayload":
        populated = [
            name
            for name in ("answer_choice", "answer_number", "answer_text")
            if getattr(self, name) is not None
        ]
        if len(populated) != 1:
            raise ValueError("exactly one of answer_choice, answer_number, answer_text must be set")
        return self


class ChoiceAnswer(BaseModel):
    """A selected multiple-choice option."""

    kind: Literal["choice"] = Field(default="choice", frozen=True)
    value: str

    model_config = {"extra": "forbid", "frozen": True}

    def to_payload(self, question_id: int) -> AnswerPayload:
        return AnswerPayload(question_id=question_id, answer_choice=self.value)


class NumberAnswer(BaseModel):
    """A Likert rating."""

    kind: Literal["number"] = Field(default="number", frozen=True)
    value: int

    model_config = {"extra": "forbid", "frozen": True}

    def to_payload(self, question_id: int) -> AnswerPayload:
        return AnswerPayload(question_id=question_id, answer_number=self.value)


class TextAnswer(BaseModel):
    """A short or long free-text reply."""

    kind: Literal["text"] = Field(default="text", frozen=True)
    value: str

    model_config = {"extra": "forbid", "frozen": True}

    def to_payload(self, question_id: int) -> AnswerPayload:
        return AnswerPayload(question_id=question_id, answer_text=self.value)


TaggedAnswer = Annotated[
    Union[ChoiceAnswer, NumberAnswer, TextAnswer],
    Field(discriminator="kind"),
]


def is_blank(raw: Any) -> bool:
    """Return True for values that count as "no answer"."""

    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    return False


def answer_for(question: Question, raw: Any) -> ChoiceAnswer | NumberAnswer | TextAnswer:
    """Build the answer variant matching ``question``'s type.

    Raises ``InvalidAnswerError`` when ``raw`` does not fit the question: an
    option that is not offered, a rating outside the Likert range, or a
    non-string reply to a free-text question.
    """

    if is_blank(raw):
        raise InvalidAnswerError(f"An answer is required for: {question.question_text}")

    if question.question_type is QuestionType.MCQ:
        choice = str(raw)
        if choice not in question.options:
            raise InvalidAnswerError(f"{choice!r} is not an option of: {question.question_text}")
        return ChoiceAnswer(value=choice)

    if question.question_type is QuestionType.LIKERT:
        if isinstance(raw, bool):
            raise InvalidAnswerError("Likert ratings must be whole numbers")
        try:
            rating = int(raw)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidAnswerError(f"{raw!r} is not a valid rating") from exc
        if isinstance(raw, float) and rating != raw:
            raise InvalidAnswerError("Likert ratings must be whole numbers")
        if not question.likert_min <= rating <= question.likert_max:
            raise InvalidAnswerError(
                f"Rating must be between {question.likert_min} and {question.likert_max}"
            )
        return NumberAnswer(value=rating)

    if not isinstance(raw, str):
        raise InvalidAnswerError(f"A text answer is required for: {question.question_text}")
    return TextAnswer(value=raw)


class ResponseCreate(BaseModel):
    """Body of ``POST /api/responses/``."""

    survey: int
    answers: List[AnswerPayload]

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Answer(BaseModel):
    """A stored answer as returned inside a response."""

    id: int | None = None
    question: int
    question_text: str | None = None
    question_type: QuestionType | None = None
    answer_text: str | None = None
    answer_choice: str | None = None
    answer_number: int | None = None

    model_config = {"extra": "ignore"}

    @property
    def display_value(self) -> str:
        """Return the populated value, checked as choice, then number, then text."""

        if self.answer_choice:
            return self.answer_choice
        if self.answer_number is not None:
            return str(self.answer_number)
        if self.answer_text:
            return self.answer_text
        return NO_ANSWER_PLACEHOLDER


class SurveyResponse(BaseModel):
    """One student's complete submission to one survey."""

    id: int
    survey: int
    survey_title: str = ""
    student: int | None = None
    student_name: str = ""
    submitted_at: datetime
    answers: List[Answer] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def answer_to(self, question_id: int) -> Answer | None:
        for answer in self.answers:
            if answer.question == question_id:
                return answer
        return None


class SubmissionStatus(BaseModel):
    has_submitted: bool = False

    model_config = {"extra": "ignore"}


__all__ = [
    "AnswerPayload",
    "ChoiceAnswer",
    "NumberAnswer",
    "TextAnswer",
    "TaggedAnswer",
    "answer_for",
    "is_blank",
    "ResponseCreate",
    "Answer",
    "SurveyResponse",
    "SubmissionStatus",
    "NO_ANSWER_PLACEHOLDER",
]
