from __future__ import annotations

import pytest

from survey_portal.models.analytics import QuestionAnalytics
from survey_portal.services import charts


def _analytics(question_type: str, data, total: int = 4) -> QuestionAnalytics:
    return QuestionAnalytics.model_validate(
        {
            "question_id": 1,
            "question_text": "Q",
            "question_type": question_type,
            "total_responses": total,
            "data": data,
        }
    )


def test_choice_percentages_sum_to_one_hundred() -> None:
    chart = charts.choice_chart({"Red": 1, "Green": 1, "Blue": 1})

    assert chart.total == 3
    assert [bar.percentage_label for bar in chart.bars] == ["33.3", "33.3", "33.3"]
    assert sum(bar.percentage for bar in chart.bars) == pytest.approx(100, abs=0.5)


@pytest.mark.parametrize("data", [{}, {"A": 0, "B": 0}, None, ["A"]])
def test_choice_chart_without_data(data) -> None:
    chart = charts.choice_chart(data)

    assert chart.bars == ()
    assert chart.empty_message == charts.NO_DATA_MESSAGE


def test_likert_average_matches_distribution() -> None:
    distribution = {"5": 1, "1": 2, "3": 0, "10": 1}
    chart = charts.likert_chart({"distribution": distribution})

    expected = sum(int(value) * count for value, count in distribution.items()) / sum(distribution.values())
    assert chart.average == pytest.approx(expected)
    assert chart.average_label == f"{expected:.2f}"
    assert [bar.value for bar in chart.bars] == ["1", "3", "5", "10"]


def test_likert_bar_heights() -> None:
    chart = charts.likert_chart({"1": 100, "2": 1, "3": 0})
    heights = {bar.value: bar.height for bar in chart.bars}

    assert heights["1"] == 100
    assert heights["2"] == charts.MIN_BAR_HEIGHT
    assert heights["3"] == 0
    assert chart.shape == "flat"


def test_likert_prefers_reported_average() -> None:
    chart = charts.likert_chart({"distribution": {"4": 2}, "average": 3.25})

    assert chart.average_label == "3.25"
    assert chart.shape == "wrapped"


def test_likert_empty_states() -> None:
    assert charts.likert_chart(None).empty_message == charts.NO_DATA_MESSAGE
    assert charts.likert_chart({"distribution": {}}).empty_message == charts.NO_LIKERT_RESPONSES_MESSAGE


def test_word_cloud_keeps_top_words_scaled() -> None:
    frequency = {f"word{index}": index for index in range(1, 26)}
    chart = charts.text_chart({"word_frequency": frequency, "responses": ["fine"]})
    words = chart.cloud.words

    assert len(words) == charts.MAX_CLOUD_WORDS
    assert words[0].word == "word25"
    assert words[0].font_size == pytest.approx(32.0)
    assert words[0].opacity == pytest.approx(1.0)
    assert words[-1].word == "word6"
    assert words[-1].font_size == pytest.approx(12 + 6 / 25 * 20)
    assert chart.responses == ("fine",)
    assert chart.responses_message is None


def test_text_sections_degrade_independently() -> None:
    no_words = charts.text_chart({"responses": ["ok"]})
    empty_words = charts.text_chart({"word_frequency": {}, "responses": []})

    assert no_words.cloud.empty_message == charts.NO_WORD_FREQUENCY_MESSAGE
    assert no_words.responses == ("ok",)
    assert empty_words.cloud.empty_message == charts.NO_WORDS_MESSAGE
    assert empty_words.responses_message == charts.NO_TEXT_RESPONSES_MESSAGE


def test_cards_and_overview() -> None:
    entries = [
        _analytics("mcq", {"A": 3, "B": 1}),
        _analytics("likert", {"distribution": {"2": 4}}),
        _analytics("long_answer", {"responses": ["a", "b"]}),
    ]

    cards = charts.build_cards(entries)
    summary = charts.overview(entries)

    assert [card.position for card in cards] == [1, 2, 3]
    assert cards[0].choice is not None and cards[0].likert is None
    assert cards[1].likert.average == pytest.approx(2.0)
    assert cards[2].text.responses == ("a", "b")
    assert (summary.total_questions, summary.total_responses, summary.response_rate) == (3, 4, "100%")
    assert charts.overview([]).response_rate == "0%"


def test_format_count() -> None:
    assert charts.format_count(3.0) == "3"
    assert charts.format_count(2.5) == "2.5"


def test_choice_percentages_round_halves_up() -> None:
    chart = charts.choice_chart({"A": 1, "B": 15})

    assert [bar.percentage for bar in chart.bars] == [6.3, 93.8]
    assert [bar.percentage_label for bar in chart.bars] == ["6.3", "93.8"]


def test_likert_ignores_non_finite_scale_keys() -> None:
    chart = charts.likert_chart({"1": 2, "nan": 1, "5": 1, "inf": 3})

    assert chart.average == pytest.approx((1 * 2 + 5 * 1) / 3)
    assert chart.average_label == "2.33"
    assert [bar.value for bar in chart.bars] == ["1", "5", "inf", "nan"]
