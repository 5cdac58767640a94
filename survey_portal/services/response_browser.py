from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from survey_portal.core.config import settings
from survey_portal.models.response import SurveyResponse


@dataclass(frozen=True)
class ResponsePage:
    """One slice of the filtered response list."""

    number: int
    total_pages: int
    total_results: int
    start_index: int
    rows: tuple[SurveyResponse, ...]

    @property
    def end_index(self) -> int:
        return min(self.start_index + len(self.rows), self.total_results)

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    def summary(self) -> str:
        if self.total_results == 0:
            return "Showing 0 results"
        return f"Showing {self.start_index + 1} to {self.end_index} of {self.total_results} results"


class ResponseBrowser:
    """Client-side search and pagination over a survey's responses."""

    def __init__(
        self,
        responses: Sequence[SurveyResponse],
        *,
        page_size: int | None = None,
        search: str | None = None,
    ) -> None:
        size = page_size if page_size is not None else settings.responses_per_page
        if size <= 0:
            raise ValueError("page_size must be a positive integer")

        self._responses = list(responses)
        self._page_size = size
        self._search = search or ""
        self._page = 1

    @property
    def all_responses(self) -> List[SurveyResponse]:
        return list(self._responses)

    @property
    def search_term(self) -> str:
        return self._search

    def search(self, term: str | None) -> None:
        """Filter by student name; always returns to the first page."""

        self._search = term or ""
        self._page = 1

    def filtered(self) -> List[SurveyResponse]:
        needle = self._search.lower()
        if not needle:
            return list(self._responses)
        return [response for response in self._responses if needle in response.student_name.lower()]

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.filtered()) / self._page_size)

    def go_to(self, page: int) -> None:
        self._page = min(max(page, 1), max(self.total_pages, 1))

    def current_page(self) -> ResponsePage:
        rows = self.filtered()
        total_pages = math.ceil(len(rows) / self._page_size)
        number = min(max(self._page, 1), max(total_pages, 1))
        start = (number - 1) * self._page_size
        return ResponsePage(
            number=number,
            total_pages=total_pages,
            total_results=len(rows),
            start_index=start,
            rows=tuple(rows[start : start + self._page_size]),
        )


def completion_rate(responses: Sequence[SurveyResponse]) -> str:
    """Every stored response is a full submission, so any response means 100%."""

    return "100%" if responses else "0%"


__all__ = ["ResponseBrowser", "ResponsePage", "completion_rate"]
