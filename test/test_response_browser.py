from __future__ import annotations

import pytest

from conftest import build_response
from survey_portal.services.response_browser import ResponseBrowser, completion_rate


def _responses(count: int):
    return [build_response(index, f"Student {index:02d}") for index in range(1, count + 1)]


def test_last_page_of_twenty_three_responses() -> None:
    browser = ResponseBrowser(_responses(23), page_size=10)

    assert browser.total_pages == 3
    browser.go_to(3)
    page = browser.current_page()

    assert page.number == 3
    assert len(page.rows) == 3
    assert page.summary() == "Showing 21 to 23 of 23 results"
    assert page.has_previous and not page.has_next


def test_go_to_clamps_to_existing_pages() -> None:
    browser = ResponseBrowser(_responses(12), page_size=5)

    browser.go_to(10)
    assert browser.current_page().number == 3
    browser.go_to(-4)
    assert browser.current_page().number == 1


def test_search_is_case_insensitive_and_resets_page() -> None:
    responses = _responses(15) + [build_response(99, "Maria Lopez")]
    browser = ResponseBrowser(responses, page_size=10)
    browser.go_to(2)

    browser.search("maria")
    page = browser.current_page()

    assert page.number == 1
    assert [row.student_name for row in page.rows] == ["Maria Lopez"]
    assert page.summary() == "Showing 1 to 1 of 1 results"

    browser.search(None)
    assert len(browser.filtered()) == 16


def test_empty_results() -> None:
    browser = ResponseBrowser(_responses(4), page_size=10)
    browser.search("nobody")
    page = browser.current_page()

    assert browser.total_pages == 0
    assert page.rows == ()
    assert page.summary() == "Showing 0 results"
    assert not page.has_previous and not page.has_next


def test_completion_rate() -> None:
    assert completion_rate([]) == "0%"
    assert completion_rate(_responses(1)) == "100%"


def test_page_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ResponseBrowser([], page_size=0)


def test_browser_can_start_filtered() -> None:
    responses = _responses(3) + [build_response(40, "Maria Lopez")]

    browser = ResponseBrowser(responses, page_size=10, search="LOPEZ")

    assert browser.search_term == "LOPEZ"
    assert [row.student_name for row in browser.current_page().rows] == ["Maria Lopez"]
