from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Mapping

from pydantic import BaseModel, Field, field_validator

from survey_portal.models.survey import QuestionType


def as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_count(value: Any) -> float | None:
    """Return ``value`` as a finite, non-negative number or ``None``."""

    number = as_number(value)
    if number is None or number < 0:
        return None
    return number


def _count_map(source: Any) -> Dict[str, float]:
    if not isinstance(source, Mapping):
        return {}
    counts: Dict[str, float] = {}
    for key, value in source.items():
        number = _as_count(value)
        if number is None:
            continue
        counts[str(key)] = number
    return counts


class QuestionAnalytics(BaseModel):
    """Backend aggregate for one question; ``data`` is validated on read."""

    question_id: int
    question_text: str = ""
    question_type: QuestionType
    total_responses: int = 0
    data: Any = None

    model_config = {"extra": "ignore"}

    @field_validator("total_responses", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        number = _as_count(value)
        return int(number) if number is not None else 0


class ChoiceCounts(BaseModel):
    """Option -> count map for a multiple-choice question."""

    counts: Dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Any) -> "ChoiceCounts":
        return cls(counts=_count_map(data))

    @property
    def total(self) -> float:
        return sum(self.counts.values())


class LikertSummary(BaseModel):
    """Rating distribution accepted from either payload variant.

    ``shape`` records which variant was read: ``"wrapped"`` for
    ``{"distribution": {...}, "average": n}`` and ``"flat"`` for a bare
    value -> count map.
    """

    shape: Literal["wrapped", "flat", "empty"]
    distribution: Dict[str, float] = Field(default_factory=dict)
    reported_average: float | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "LikertSummary":
        if not isinstance(data, Mapping):
            return cls(shape="empty")

        if "distribution" in data:
            average = as_number(data.get("average"))
            return cls(
                shape="wrapped",
                distribution=_count_map(data.get("distribution")),
                reported_average=average,
            )

        distribution = _count_map(data)
        return cls(shape="flat" if distribution else "empty", distribution=distribution)

    @property
    def total(self) -> float:
        return sum(self.distribution.values())

    @property
    def computed_average(self) -> float | None:
        """Mean rating from the distribution, ignoring non-numeric or non-finite scale keys."""

        weighted = 0.0
        total = 0.0
        for value, count in self.distribution.items():
            rating = as_number(value)
            if rating is None:
                continue
            weighted += rating * count
            total += count
        if total <= 0:
            return None
        return weighted / total

    @property
    def average(self) -> float:
        if self.reported_average is not None:
            return self.reported_average
        return self.computed_average or 0.0


class TextSummary(BaseModel):
    """Verbatim replies and word counts for a free-text question."""

    responses: List[str] | None = None
    word_frequency: Dict[str, float] | None = None

    @classmethod
    def from_payload(cls, data: Any) -> "TextSummary":
        if not isinstance(data, Mapping):
            return cls()

        raw_responses = data.get("responses")
        responses: List[str] | None = None
        if isinstance(raw_responses, list):
            responses = [str(item) for item in raw_responses if item is not None]

        raw_frequency = data.get("word_frequency")
        frequency: Dict[str, float] | None = None
        if isinstance(raw_frequency, Mapping):
            frequency = _count_map(raw_frequency)

        return cls(responses=responses, word_frequency=frequency)


__all__ = [
    "as_number",
    "QuestionAnalytics",
    "ChoiceCounts",
    "LikertSummary",
    "TextSummary",
]
