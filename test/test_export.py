from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

from conftest import build_response
from survey_portal.services.export import (
    answer_cell,
    build_response_report,
    export_responses,
    format_report_date,
    format_report_time,
    report_filename,
)
from survey_portal.models.response import Answer

GENERATED_AT = datetime(2024, 3, 5, 9, 4, 0)


def _responses():
    return [
        build_response(
            1,
            'Jo "JJ" Park',
            answers=[
                {"question": 1, "answer_choice": "B"},
                {"question": 2, "answer_number": 4},
                {"question": 3, "answer_text": 'said "hi", then left'},
            ],
        ),
        build_response(2, "Ana Cruz", answers=[{"question": 1, "answer_choice": "A"}]),
    ]


def test_report_layout(survey) -> None:
    lines = build_response_report(survey, _responses(), generated_at=GENERATED_AT).splitlines()

    assert lines[:4] == [
        '"Course Feedback - Response Report"',
        '"Generated on: 3/5/2024, 9:04:00 AM"',
        '"Total Responses: 2"',
        "",
    ]
    assert lines[4] == "Student Name,Submission Date,Submission Time,Question 1,Question 2,Question 3"
    assert lines[5] == ',,,"Favourite topic?","Rate the course","Any comments?"'
    assert lines[6] == ",".join(["---"] * 6)
    assert lines[-3:] == ["", '"--- End of Report ---"', '"Total Students: 2"']


def test_data_rows_have_identity_plus_question_cells(survey) -> None:
    responses = _responses()
    lines = build_response_report(survey, responses, generated_at=GENERATED_AT).splitlines()
    data_lines = lines[7 : 7 + len(responses)]

    rows = list(csv.reader(io.StringIO("\n".join(data_lines))))

    assert len(rows) == len(responses)
    assert all(len(row) == len(survey.questions) + 3 for row in rows)
    assert rows[0] == ['Jo "JJ" Park', "3/5/2024", "2:07:09 PM", "B", "4", 'said "hi", then left']
    assert rows[1][3:] == ["A", "(No answer)", "(No answer)"]
    assert data_lines[0].startswith('"Jo ""JJ"" Park"')


def test_answer_cell_priority() -> None:
    assert answer_cell(None) == "(No answer)"
    assert answer_cell(Answer(question=1, answer_number=0)) == "0"
    assert answer_cell(Answer(question=1, answer_text="")) == "(No answer)"


def test_report_date_and_time_formats() -> None:
    assert format_report_date(datetime(2024, 12, 31)) == "12/31/2024"
    assert format_report_time(datetime(2024, 1, 1, 0, 5, 9)) == "12:05:09 AM"
    assert format_report_time(datetime(2024, 1, 1, 12, 0, 0)) == "12:00:00 PM"


def test_aware_submission_times_are_localized(survey) -> None:
    moment = datetime(2024, 3, 5, 14, 7, 9, tzinfo=timezone.utc)
    response = build_response(1, "Ana", submitted_at=moment)
    local = moment.astimezone()

    lines = build_response_report(survey, [response], generated_at=GENERATED_AT).splitlines()

    assert lines[7].split(",")[1:3] == [format_report_date(local), format_report_time(local)]


def test_report_filename() -> None:
    assert report_filename("Week 3: Check-in!", timestamp_ms=1700000000000) == (
        "Week_3__Check_in__responses_1700000000000.csv"
    )


def test_export_skips_empty_response_list(survey) -> None:
    assert export_responses(survey, []) is None

    report = export_responses(survey, _responses(), generated_at=GENERATED_AT)
    assert report.filename.startswith("Course_Feedback_responses_")
    assert report.mime_type == "text/csv"
    assert report.encode().decode("utf-8") == report.content
