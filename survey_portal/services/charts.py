from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence, Tuple

from survey_portal.models.analytics import (
    ChoiceCounts,
    LikertSummary,
    QuestionAnalytics,
    TextSummary,
    as_number,
)
from survey_portal.models.survey import QuestionType

NO_DATA_MESSAGE = "No data available for this question"
NO_LIKERT_RESPONSES_MESSAGE = "No responses yet for this question"
NO_WORD_FREQUENCY_MESSAGE = "No word frequency data available"
NO_WORDS_MESSAGE = "No words to display"
NO_TEXT_RESPONSES_MESSAGE = "No text responses available"

MAX_CLOUD_WORDS = 20
MIN_BAR_HEIGHT = 8.0
BASE_FONT_SIZE = 12.0
FONT_SIZE_RANGE = 20.0
BASE_OPACITY = 0.5


@dataclass(frozen=True)
class ChoiceBar:
    label: str
    count: float
    percentage: float

    @property
    def percentage_label(self) -> str:
        return f"{self.percentage:.1f}"


@dataclass(frozen=True)
class ChoiceChart:
    bars: Tuple[ChoiceBar, ...]
    total: float
    empty_message: str | None = None


@dataclass(frozen=True)
class LikertBar:
    value: str
    count: float
    height: float


@dataclass(frozen=True)
class LikertChart:
    bars: Tuple[LikertBar, ...]
    average: float
    shape: str
    empty_message: str | None = None

    @property
    def average_label(self) -> str:
        return f"{self.average:.2f}"


@dataclass(frozen=True)
class WordChip:
    word: str
    frequency: float
    font_size: float
    opacity: float


@dataclass(frozen=True)
class WordCloud:
    words: Tuple[WordChip, ...]
    empty_message: str | None = None


@dataclass(frozen=True)
class TextChart:
    cloud: WordCloud
    responses: Tuple[str, ...]
    responses_message: str | None = None


@dataclass(frozen=True)
class AnalyticsOverview:
    total_questions: int
    total_responses: int
    response_rate: str


@dataclass(frozen=True)
class QuestionCard:
    """Everything the analytics view needs to draw one question."""

    position: int
    analytics: QuestionAnalytics
    choice: ChoiceChart | None = None
    likert: LikertChart | None = None
    text: TextChart | None = None
    metadata: dict[str, int | float | str] = field(default_factory=dict)


def format_count(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def choice_chart(data: object) -> ChoiceChart:
    """Percent share of each option; empty or all-zero maps show a placeholder."""

    counts = ChoiceCounts.from_payload(data)
    total = counts.total
    if not counts.counts or total <= 0:
        return ChoiceChart(bars=(), total=0.0, empty_message=NO_DATA_MESSAGE)

    bars = tuple(
        ChoiceBar(label=option, count=count, percentage=_percentage(count, total))
        for option, count in counts.counts.items()
    )
    return ChoiceChart(bars=bars, total=total)


def _percentage(count: float, total: float) -> float:
    """Share of ``total`` in percent to one decimal, halves rounded up."""

    share = Decimal(str(count * 100 / total))
    return float(share.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _scale_sort_key(value: str) -> Tuple[int, float, str]:
    rating = as_number(value)
    if rating is None:
        return (1, 0.0, value)
    return (0, rating, value)


def likert_chart(data: object) -> LikertChart:
    """Bars per rating value, ordered numerically, scaled against the tallest."""

    if data is None or not isinstance(data, dict):
        return LikertChart(bars=(), average=0.0, shape="empty", empty_message=NO_DATA_MESSAGE)

    summary = LikertSummary.from_payload(data)
    if not summary.distribution:
        return LikertChart(bars=(), average=0.0, shape=summary.shape, empty_message=NO_LIKERT_RESPONSES_MESSAGE)

    max_count = max(summary.distribution.values())
    bars: List[LikertBar] = []
    for value in sorted(summary.distribution, key=_scale_sort_key):
        count = summary.distribution[value]
        height = count / max_count * 100 if max_count > 0 else 0.0
        if count > 0:
            height = max(height, MIN_BAR_HEIGHT)
        bars.append(LikertBar(value=value, count=count, height=height))

    return LikertChart(bars=tuple(bars), average=summary.average, shape=summary.shape)


def word_cloud(summary: TextSummary) -> WordCloud:
    """Top words by frequency, sized and faded relative to the most frequent."""

    if summary.word_frequency is None:
        return WordCloud(words=(), empty_message=NO_WORD_FREQUENCY_MESSAGE)

    ranked = sorted(summary.word_frequency.items(), key=lambda item: item[1], reverse=True)[:MAX_CLOUD_WORDS]
    if not ranked:
        return WordCloud(words=(), empty_message=NO_WORDS_MESSAGE)

    max_frequency = ranked[0][1]
    words = []
    for word, frequency in ranked:
        ratio = frequency / max_frequency if max_frequency > 0 else 0.0
        words.append(
            WordChip(
                word=word,
                frequency=frequency,
                font_size=BASE_FONT_SIZE + ratio * FONT_SIZE_RANGE,
                opacity=BASE_OPACITY + ratio * (1 - BASE_OPACITY),
            )
        )
    return WordCloud(words=tuple(words))


def text_chart(data: object) -> TextChart:
    summary = TextSummary.from_payload(data)
    responses = tuple(summary.responses or ())
    return TextChart(
        cloud=word_cloud(summary),
        responses=responses,
        responses_message=None if responses else NO_TEXT_RESPONSES_MESSAGE,
    )


def question_card(position: int, analytics: QuestionAnalytics) -> QuestionCard:
    question_type = analytics.question_type
    metadata = {"question_type": question_type.value, "total_responses": analytics.total_responses}
    if question_type is QuestionType.MCQ:
        return QuestionCard(position, analytics, choice=choice_chart(analytics.data), metadata=metadata)
    if question_type is QuestionType.LIKERT:
        return QuestionCard(position, analytics, likert=likert_chart(analytics.data), metadata=metadata)
    return QuestionCard(position, analytics, text=text_chart(analytics.data), metadata=metadata)


def build_cards(entries: Sequence[QuestionAnalytics]) -> List[QuestionCard]:
    return [question_card(index, entry) for index, entry in enumerate(entries, start=1)]


def overview(entries: Sequence[QuestionAnalytics]) -> AnalyticsOverview:
    total_responses = entries[0].total_responses if entries else 0
    return AnalyticsOverview(
        total_questions=len(entries),
        total_responses=total_responses,
        response_rate="100%" if total_responses > 0 else "0%",
    )


__all__ = [
    "AnalyticsOverview",
    "ChoiceBar",
    "ChoiceChart",
    "LikertBar",
    "LikertChart",
    "QuestionCard",
    "TextChart",
    "WordChip",
    "WordCloud",
    "build_cards",
    "choice_chart",
    "format_count",
    "likert_chart",
    "overview",
    "question_card",
    "text_chart",
    "word_cloud",
]
