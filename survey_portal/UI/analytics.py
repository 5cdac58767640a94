from __future__ import annotations

import html
from typing import List, Tuple

import streamlit as st

from survey_portal.API import fetch_together
from survey_portal.core.errors import ApiError
from survey_portal.models.analytics import QuestionAnalytics
from survey_portal.models.survey import Survey
from survey_portal.services.charts import (
    ChoiceChart,
    LikertChart,
    QuestionCard,
    TextChart,
    build_cards,
    format_count,
    overview,
)

from . import components, state

_BAR_COLOUR = "#4f46e5"


def render(survey_id: int, *, show_back: bool = True) -> None:
    """Per-question analytics for one survey."""

    back_label = "← Back" if show_back else None
    loaded = _load(survey_id)
    if loaded is None:
        components.render_header("Survey Analytics", back_label=back_label)
        return
    survey, entries = loaded

    components.render_header(survey.title or "Survey Analytics", "Survey Analytics", back_label=back_label)

    summary = overview(entries)
    components.render_stat_cards(
        [
            ("Total Questions", summary.total_questions),
            ("Total Responses", summary.total_responses),
            ("Response Rate", summary.response_rate),
        ]
    )

    if not entries:
        components.render_muted("No analytics available yet")
        return

    for card in build_cards(entries):
        _render_card(card)


def _load(survey_id: int) -> Tuple[Survey, List[QuestionAnalytics]] | None:
    services = state.get_services()
    try:
        with st.spinner("Loading analytics..."):
            return fetch_together(
                lambda: services.surveys.get_survey(survey_id),
                lambda: services.surveys.get_analytics(survey_id),
            )
    except ApiError as exc:
        components.report_read_error(exc, "analytics")
        return None


def _render_card(card: QuestionCard) -> None:
    analytics = card.analytics
    with st.container(border=True):
        st.markdown(f"**Question {card.position}: {analytics.question_text}**")
        st.caption(f"{analytics.question_type.label} · {analytics.total_responses} responses")

        if card.choice is not None:
            _render_choice(card.choice)
        elif card.likert is not None:
            _render_likert(card.likert)
        elif card.text is not None:
            _render_text(card.text)


def _render_choice(chart: ChoiceChart) -> None:
    if chart.empty_message:
        components.render_muted(chart.empty_message)
        return

    rows = []
    for bar in chart.bars:
        rows.append(
            "<div style='margin-bottom:0.6rem;'>"
            "<div style='display:flex;justify-content:space-between;font-size:0.9rem;'>"
            f"<span>{html.escape(bar.label)}</span>"
            f"<span>{format_count(bar.count)} ({bar.percentage_label}%)</span>"
            "</div>"
            "<div style='background:#e5e7eb;border-radius:4px;height:10px;'>"
            f"<div style='background:{_BAR_COLOUR};width:{bar.percentage}%;height:10px;border-radius:4px;'></div>"
            "</div></div>"
        )
    st.markdown("".join(rows), unsafe_allow_html=True)


def _render_likert(chart: LikertChart) -> None:
    if chart.empty_message:
        components.render_muted(chart.empty_message)
        return

    st.metric("Average Rating", chart.average_label)
    columns = []
    for bar in chart.bars:
        columns.append(
            "<div style='flex:1;display:flex;flex-direction:column;align-items:center;justify-content:flex-end;'>"
            f"<div style='font-size:0.8rem;'>{format_count(bar.count)}</div>"
            f"<div style='background:{_BAR_COLOUR};width:70%;height:{bar.height:.1f}%;border-radius:4px 4px 0 0;'></div>"
            f"<div style='font-size:0.85rem;margin-top:0.25rem;'>{html.escape(bar.value)}</div>"
            "</div>"
        )
    st.markdown(
        f"<div style='display:flex;gap:0.5rem;height:180px;align-items:stretch;'>{''.join(columns)}</div>",
        unsafe_allow_html=True,
    )


def _render_text(chart: TextChart) -> None:
    st.markdown("Word Frequency")
    cloud = chart.cloud
    if cloud.empty_message:
        components.render_muted(cloud.empty_message)
    else:
        chips = "".join(
            f"<span style='font-size:{chip.font_size:.1f}px;opacity:{chip.opacity:.2f};"
            f"color:{_BAR_COLOUR};margin:0 0.4rem;' title='{format_count(chip.frequency)}'>"
            f"{html.escape(chip.word)}</span>"
            for chip in cloud.words
        )
        st.markdown(
            f"<div style='display:flex;flex-wrap:wrap;align-items:center;padding:0.5rem;'>{chips}</div>",
            unsafe_allow_html=True,
        )

    st.markdown("Responses")
    if chart.responses_message:
        components.render_muted(chart.responses_message)
        return
    with st.container(height=240):
        for text in chart.responses:
            st.markdown(
                f"<div style='padding:0.4rem 0;border-bottom:1px solid #e5e7eb;'>{html.escape(text)}</div>",
                unsafe_allow_html=True,
            )
