from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _positive_number(name: str, raw: Optional[str], default: float, cast=float):
    if raw is None:
        return cast(default)
    try:
        value = cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be greater than zero, got {raw!r}")
    return value


class Settings:

    def __init__(self) -> None:
        base_url = _strip_or_none(os.getenv("SURVEY_API_BASE_URL")) or "http://localhost:8000"
        self.api_base_url = base_url.rstrip("/")

        self.request_timeout = _positive_number(
            "SURVEY_API_TIMEOUT",
            _strip_or_none(os.getenv("SURVEY_API_TIMEOUT")),
            15.0,
        )
        self.questions_per_page = _positive_number(
            "QUESTIONS_PER_PAGE",
            _strip_or_none(os.getenv("QUESTIONS_PER_PAGE")),
            5,
            cast=int,
        )
        self.responses_per_page = _positive_number(
            "RESPONSES_PER_PAGE",
            _strip_or_none(os.getenv("RESPONSES_PER_PAGE")),
            10,
            cast=int,
        )

        self.log_level = (_strip_or_none(os.getenv("LOG_LEVEL")) or "INFO").upper()


settings = Settings()
