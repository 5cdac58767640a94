from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, List

from survey_portal.API.surveys import ResponseService, SurveyService
from survey_portal.core.config import settings
from survey_portal.core.errors import (
    AlreadySubmittedError,
    ApiError,
    InvalidAnswerError,
    RequiredAnswerMissing,
)
from survey_portal.models.response import (
    AnswerPayload,
    ChoiceAnswer,
    NumberAnswer,
    ResponseCreate,
    TextAnswer,
    answer_for,
    is_blank,
)
from survey_portal.models.survey import Question, Survey

logger = logging.getLogger(__name__)

StoredAnswer = ChoiceAnswer | NumberAnswer | TextAnswer


class TakingStage(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    DONE = "done"
    ABORTED = "aborted"


class SurveyTakingFlow:
    """Paginated, validated answering of a single survey by a student.

    The flow checks once on :meth:`load` whether the student already
    submitted, keeps answers keyed by question id (each validated against
    its question type when stored) and submits them in one request.
    """

    def __init__(
        self,
        survey_id: int,
        *,
        surveys: SurveyService,
        responses: ResponseService,
        page_size: int | None = None,
    ) -> None:
        if surveys is None or responses is None:
            raise ValueError("surveys and responses services must be provided")
        size = page_size if page_size is not None else settings.questions_per_page
        if size <= 0:
            raise ValueError("page_size must be a positive integer")

        self.survey_id = survey_id
        self._surveys = surveys
        self._responses = responses
        self._page_size = size
        self._survey: Survey | None = None
        self._answers: Dict[int, StoredAnswer] = {}
        self._page = 0
        self.stage = TakingStage.LOADING

    @property
    def survey(self) -> Survey:
        if self._survey is None:
            raise RuntimeError("survey has not been loaded")
        return self._survey

    @property
    def questions(self) -> List[Question]:
        return list(self._survey.questions) if self._survey else []

    @property
    def page_size(self) -> int:
        return self._page_size

    def load(self) -> Survey:
        """Check for a prior submission, then fetch the survey.

        Raises ``AlreadySubmittedError`` (without fetching questions) when the
        student already answered; any API failure also aborts the flow.
        """

        try:
            if self._surveys.check_submission(self.survey_id):
                self.stage = TakingStage.ABORTED
                logger.info("Survey %s already submitted; aborting", self.survey_id)
                raise AlreadySubmittedError("You have already submitted this survey")
            survey = self._surveys.get_survey(self.survey_id)
        except ApiError:
            self.stage = TakingStage.ABORTED
            raise

        self._survey = survey
        self._answers = {}
        self._page = 0
        self.stage = TakingStage.IN_PROGRESS
        logger.info("Loaded survey %s with %d questions", survey.id, len(survey.questions))
        return survey

    # Pagination -----------------------------------------------------------------

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.questions) / self._page_size)

    @property
    def current_page(self) -> int:
        """Zero-based index of the visible page."""

        return self._page

    @property
    def is_last_page(self) -> bool:
        return self._page >= max(self.total_pages - 1, 0)

    @property
    def page_start(self) -> int:
        return self._page * self._page_size

    def page_questions(self) -> List[Question]:
        start = self.page_start
        return self.questions[start : start + self._page_size]

    def validate_page(self) -> None:
        """Raise ``RequiredAnswerMissing`` for the first unanswered required question on this page."""

        self._ensure_answered(self.page_questions())

    def next_page(self) -> int:
        """Advance one page once every required question on it is answered."""

        self.validate_page()
        if not self.is_last_page:
            self._page += 1
        return self._page

    def previous_page(self) -> int:
        self._page = max(self._page - 1, 0)
        return self._page

    # Answers --------------------------------------------------------------------

    @property
    def answers(self) -> Dict[int, StoredAnswer]:
        return dict(self._answers)

    def get_answer(self, question_id: int) -> StoredAnswer | None:
        return self._answers.get(question_id)

    def set_answer(self, question_id: int, raw: object) -> StoredAnswer | None:
        """Store ``raw`` for the question, or clear it when ``raw`` is blank.

        Raises ``InvalidAnswerError`` (leaving the stored answers untouched)
        when the value does not fit the question's type.
        """

        question = self.survey.question_by_id(question_id)
        if question is None:
            raise InvalidAnswerError(f"Question {question_id} is not part of this survey")

        if is_blank(raw):
            self._answers.pop(question_id, None)
            return None

        answer = answer_for(question, raw)
        self._answers[question_id] = answer
        return answer

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def progress(self) -> int:
        """Answered share of the whole survey as an integer percentage, halves rounded up."""

        total = len(self.questions)
        if total == 0:
            return 0
        return math.floor(self.answered_count * 100 / total + 0.5)

    def _ensure_answered(self, questions: List[Question]) -> None:
        for question in questions:
            if question.is_required and question.id not in self._answers:
                raise RequiredAnswerMissing(question.id, question.question_text)

    # Submission -----------------------------------------------------------------

    def build_submission(self) -> ResponseCreate:
        """Validate the whole survey and normalize answers to the wire format."""

        self._ensure_answered(self.questions)

        payloads: List[AnswerPayload] = []
        for question in self.questions:
            answer = self._answers.get(question.id)
            if answer is None:
                continue
            payloads.append(answer.to_payload(question.id))
        return ResponseCreate(survey=self.survey.id, answers=payloads)

    def submit(self) -> None:
        """Send all answers in a single request; no retry on failure."""

        if self.stage is not TakingStage.IN_PROGRESS:
            raise RuntimeError(f"cannot submit while {self.stage.value}")

        submission = self.build_submission()
        self.stage = TakingStage.SUBMITTING
        try:
            self._responses.submit(submission)
        except ApiError:
            self.stage = TakingStage.IN_PROGRESS
            logger.exception("Submitting survey %s failed", self.survey_id)
            raise

        self.stage = TakingStage.DONE
        logger.info("Submitted %d answers for survey %s", len(submission.answers), self.survey_id)


__all__ = ["SurveyTakingFlow", "TakingStage", "StoredAnswer"]
