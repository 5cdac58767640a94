"""Human-readable response report.

The output opens in a spreadsheet but is not an interchange format: banner
rows, a question-text row and a ``---`` separator precede the data, so column
alignment only holds for the header and data rows. Do not parse it back.
"""
from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from survey_portal.models.response import NO_ANSWER_PLACEHOLDER, Answer, SurveyResponse
from survey_portal.models.survey import Survey

IDENTITY_HEADERS = ("Student Name", "Submission Date", "Submission Time")
SEPARATOR_CELL = "---"


@dataclass(frozen=True)
class ReportFile:
    filename: str
    content: str
    mime_type: str = "text/csv"

    def encode(self) -> bytes:
        return self.content.encode("utf-8")


def quote(value: str) -> str:
    """Wrap in double quotes, doubling any embedded quote."""

    return '"' + value.replace('"', '""') + '"'


def format_report_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_report_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"


def answer_cell(answer: Answer | None) -> str:
    if answer is None:
        return NO_ANSWER_PLACEHOLDER
    if answer.answer_choice:
        return quote(answer.answer_choice)
    if answer.answer_number is not None:
        return str(answer.answer_number)
    if answer.answer_text:
        return quote(answer.answer_text)
    return NO_ANSWER_PLACEHOLDER


def build_response_report(
    survey: Survey,
    responses: Sequence[SurveyResponse],
    *,
    generated_at: datetime | None = None,
) -> str:
    """Render ``responses`` as the annotated comma-separated report."""

    moment = generated_at or datetime.now()
    questions = survey.questions
    title = survey.title or "Survey"
    lines: List[str] = [
        quote(f"{title} - Response Report"),
        quote(f"Generated on: {format_report_date(moment)}, {format_report_time(moment)}"),
        quote(f"Total Responses: {len(responses)}"),
        "",
    ]

    headers = [*IDENTITY_HEADERS, *(f"Question {index}" for index in range(1, len(questions) + 1))]
    lines.append(",".join(headers))
    lines.append(",".join(["", "", "", *(quote(question.question_text) for question in questions)]))
    lines.append(",".join([SEPARATOR_CELL] * len(headers)))

    for response in responses:
        submitted = response.submitted_at
        if submitted.tzinfo is not None:
            submitted = submitted.astimezone()
        row = [
            quote(response.student_name),
            format_report_date(submitted),
            format_report_time(submitted),
        ]
        row.extend(answer_cell(response.answer_to(question.id)) for question in questions)
        lines.append(",".join(row))

    lines.extend(
        [
            "",
            quote("--- End of Report ---"),
            quote(f"Total Students: {len(responses)}"),
        ]
    )
    return "\n".join(lines) + "\n"


def report_filename(title: str, *, timestamp_ms: int | None = None) -> str:
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    safe_title = re.sub(r"[^a-z0-9]", "_", title or "Survey", flags=re.IGNORECASE)
    return f"{safe_title}_responses_{stamp}.csv"


def export_responses(
    survey: Survey,
    responses: Sequence[SurveyResponse],
    *,
    generated_at: datetime | None = None,
) -> ReportFile | None:
    """Build the downloadable report; ``None`` when there is nothing to export."""

    if not responses:
        return None
    return ReportFile(
        filename=report_filename(survey.title),
        content=build_response_report(survey, responses, generated_at=generated_at),
    )


__all__ = [
    "ReportFile",
    "answer_cell",
    "build_response_report",
    "export_responses",
    "format_report_date",
    "format_report_time",
    "quote",
    "report_filename",
]
