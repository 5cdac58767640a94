from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Tuple, TypeVar

import requests

from survey_portal.API.session import AuthSession
from survey_portal.core.config import settings
from survey_portal.core.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

_GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


class ApiClient:
    """Thin JSON wrapper over ``requests`` that attaches the session token."""

    def __init__(
        self,
        session: AuthSession,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        http: requests.Session | None = None,
    ) -> None:
        if session is None:
            raise ValueError("session must be provided")

        self._session = session
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._http = http or requests.Session()

    @property
    def session(self) -> AuthSession:
        return self._session

    def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Mapping[str, Any] | None = None) -> Any:
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: Mapping[str, Any] | None = None) -> Any:
        return self.request("PUT", path, json=payload)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Issue one request and return the decoded JSON body (``None`` when empty)."""

        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json", **self._session.authorization_header()}
        logger.debug("%s %s", method, path)

        try:
            response = self._http.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiConnectionError(
                "Unable to reach the survey server. Check your connection and try again."
            ) from exc

        if not response.ok:
            error = _error_from_response(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, error.message)
            raise error

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("The server returned an unreadable response.", status_code=response.status_code) from exc


def _error_from_response(response: requests.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None

    message, field_errors = _extract_message(body)
    status = response.status_code

    if status == 401:
        return AuthenticationError(message or "Your session has expired. Please sign in again.", status_code=status, errors=field_errors)
    if status == 404:
        return NotFoundError(message or "The requested item was not found.", status_code=status, errors=field_errors)
    return ApiError(message or _GENERIC_MESSAGE, status_code=status, errors=field_errors)


def _extract_message(body: Any) -> Tuple[str | None, Dict[str, List[str]]]:
    """Pull a human message and field errors out of a DRF-style error body."""

    if isinstance(body, str):
        return (body.strip() or None), {}
    if isinstance(body, list):
        texts = [str(item) for item in body if item]
        return (texts[0] if texts else None), {}
    if not isinstance(body, Mapping):
        return None, {}

    for key in ("detail", "message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip(), {}

    field_errors: Dict[str, List[str]] = {}
    for key, value in body.items():
        if isinstance(value, list):
            field_errors[str(key)] = [str(item) for item in value]
        elif isinstance(value, str):
            field_errors[str(key)] = [value]

    for key, messages in field_errors.items():
        if messages:
            prefix = "" if key == "non_field_errors" else f"{key}: "
            return f"{prefix}{messages[0]}", field_errors
    return None, field_errors


def unwrap_list(data: Any, *keys: str) -> List[Any]:
    """Accept either a bare JSON list or a paginated wrapper object."""

    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in keys or ("results",):
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []


def fetch_together(first: Callable[[], T], second: Callable[[], U]) -> Tuple[T, U]:
    """Run two independent reads concurrently and wait for both.

    The first failure (in argument order) is re-raised once both calls ended.
    """

    with ThreadPoolExecutor(max_workers=2) as pool:
        first_future = pool.submit(first)
        second_future = pool.submit(second)
        return first_future.result(), second_future.result()


__all__ = ["ApiClient", "fetch_together", "unwrap_list"]
