from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from survey_portal.API.surveys import QuestionService, SurveyService
from survey_portal.core.errors import ApiError, PartialSurveyError, SurveyValidationError
from survey_portal.models.survey import (
    DEFAULT_LIKERT_MAX,
    DEFAULT_LIKERT_MIN,
    QuestionType,
    Survey,
    SurveyStatus,
)

logger = logging.getLogger(__name__)


class SurveyDetails(BaseModel):
    """Step one of the wizard: survey metadata."""

    title: str = ""
    description: str = ""
    status: SurveyStatus = SurveyStatus.DRAFT
    due_date: date | None = None

    def validate_step(self) -> None:
        if not self.title.strip():
            raise SurveyValidationError("Please enter a survey title")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title.strip(),
            "description": self.description,
            "status": self.status.value,
        }
        if self.due_date is not None:
            payload["due_date"] = self.due_date.isoformat()
        return payload


class StagedQuestion(BaseModel):
    """A validated question waiting for the survey to be created."""

    question_text: str
    question_type: QuestionType
    is_required: bool = True
    options: List[str] = Field(default_factory=list)
    likert_min: int | None = None
    likert_max: int | None = None
    likert_min_label: str | None = None
    likert_max_label: str | None = None

    model_config = {"frozen": True}

    def to_payload(self, survey_id: int, order: int) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        payload.update(survey=survey_id, order=order)
        return payload


class QuestionEditor(BaseModel):
    """Mutable single-question form reused for every addition."""

    question_text: str = ""
    question_type: QuestionType = QuestionType.MCQ
    is_required: bool = True
    options: List[str] = Field(default_factory=lambda: [""])
    likert_min: int = DEFAULT_LIKERT_MIN
    likert_max: int = DEFAULT_LIKERT_MAX
    likert_min_label: str = ""
    likert_max_label: str = ""

    model_config = {"validate_assignment": True}

    @field_validator("options", mode="before")
    @classmethod
    def _stringify_options(cls, value: Any) -> List[str]:
        if value is None:
            return []
        return ["" if option is None else str(option) for option in value]

    def change_type(self, question_type: QuestionType | str) -> None:
        """Switch type; option rows restart from a single blank entry."""

        resolved = QuestionType(question_type)
        if resolved is self.question_type:
            return
        self.question_type = resolved
        self.options = [""] if resolved is QuestionType.MCQ else []

    def add_option(self) -> None:
        self.options = [*self.options, ""]

    def set_option(self, index: int, value: str) -> None:
        options = list(self.options)
        options[index] = value
        self.options = options

    def remove_option(self, index: int) -> None:
        if len(self.options) <= 1:
            return
        self.options = [option for position, option in enumerate(self.options) if position != index]

    def build(self) -> StagedQuestion:
        """Validate the form and return the question to stage."""

        text = self.question_text.strip()
        if not text:
            raise SurveyValidationError("Please enter a question")

        if self.question_type is QuestionType.MCQ:
            options = [option.strip() for option in self.options if option.strip()]
            if not options:
                raise SurveyValidationError("Multiple choice questions need at least one option")
            return StagedQuestion(
                question_text=text,
                question_type=self.question_type,
                is_required=self.is_required,
                options=options,
            )

        if self.question_type is QuestionType.LIKERT:
            if self.likert_min > self.likert_max:
                raise SurveyValidationError("The minimum rating must not exceed the maximum")
            return StagedQuestion(
                question_text=text,
                question_type=self.question_type,
                is_required=self.is_required,
                likert_min=self.likert_min,
                likert_max=self.likert_max,
                likert_min_label=self.likert_min_label.strip() or None,
                likert_max_label=self.likert_max_label.strip() or None,
            )

        return StagedQuestion(
            question_text=text,
            question_type=self.question_type,
            is_required=self.is_required,
        )


class SurveyBuilder:
    """Two-step survey wizard held entirely in memory."""

    def __init__(self) -> None:
        self.details = SurveyDetails()
        self.editor = QuestionEditor()
        self.step = 1
        self._questions: List[StagedQuestion] = []

    @property
    def questions(self) -> List[StagedQuestion]:
        return list(self._questions)

    def go_to_questions(self) -> None:
        self.details.validate_step()
        self.step = 2

    def back_to_details(self) -> None:
        self.step = 1

    def add_question(self) -> StagedQuestion:
        staged = self.editor.build()
        self._questions.append(staged)
        self.editor = QuestionEditor()
        return staged

    def remove_question(self, index: int) -> None:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"no staged question at position {index}")
        del self._questions[index]

    def submit(self, surveys: SurveyService, questions: QuestionService) -> Survey:
        """Create the survey, then each staged question in order.

        Question failures after the survey exists raise ``PartialSurveyError``;
        nothing is rolled back.
        """

        self.details.validate_step()
        if not self._questions:
            raise SurveyValidationError("Please add at least one question")

        survey = surveys.create_survey(self.details.to_payload())
        logger.info("Created survey %s (%s)", survey.id, survey.title)

        total = len(self._questions)
        for order, staged in enumerate(self._questions):
            try:
                questions.create_question(staged.to_payload(survey.id, order))
            except ApiError as exc:
                logger.error("Question %d of %d failed for survey %s", order + 1, total, survey.id)
                raise PartialSurveyError(survey.id, order, total, exc) from exc

        logger.info("Added %d questions to survey %s", total, survey.id)
        return survey


__all__ = ["SurveyDetails", "StagedQuestion", "QuestionEditor", "SurveyBuilder"]
