"""HTTP client for the ClickUp REST API with rate-limit aware retries."""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Sequence, Tuple
from urllib.parse import quote

import httpx
import structlog

from clickup_discord_bridge.config import CLICKUP_API_BASE_URL
from clickup_discord_bridge.errors import ClickUpApiError, ParameterError, RateLimitExceeded

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 5
DEFAULT_MAX_BACKOFF = 60.0
DEFAULT_RETRY_AFTER = 5.0

_BODY_METHODS = {"POST", "PUT", "PATCH"}

QueryParams = Sequence[Tuple[str, str]]


def segment(value: Any) -> str:
    """Percent-encode *value* as a single URL path segment.

    Slashes, query and fragment markers are escaped so the value can never
    reach a different resource; dot segments are rejected outright.
    """

    encoded = quote(str(value), safe="")
    if encoded in ("", ".", ".."):
        raise ParameterError(f"Invalid identifier: {value!r}")
    return encoded


def _retry_after_seconds(response: httpx.Response) -> float:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return DEFAULT_RETRY_AFTER
    try:
        delay = float(raw)
    except ValueError:
        return DEFAULT_RETRY_AFTER
    return max(delay, 0.0)


class ClickUpClient:
    """Single chokepoint for every call made to ClickUp.

    HTTP 429 answers are retried after the server's ``Retry-After`` delay, at
    most *max_retries* times and never beyond *max_backoff* seconds of total
    sleep; once that budget is spent ``RateLimitExceeded`` is raised. Any other
    non-2xx answer raises ``ClickUpApiError`` carrying the status and body.
    """

    def __init__(
        self,
        *,
        token: str,
        base_url: str = CLICKUP_API_BASE_URL,
        http: httpx.Client | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not token:
            raise ValueError("A ClickUp API token is required.")

        self._token = token
        self._base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout)
        self._max_retries = max_retries
        self._max_backoff = max_backoff
        self._sleep = sleep

    def __enter__(self) -> "ClickUpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": self._token,
            "Content-Type": "application/json",
        }

    def call(
        self,
        path: str,
        method: str = "GET",
        body: Mapping[str, Any] | None = None,
        params: QueryParams | None = None,
    ) -> Any:
        """Issue a request against ``base_url + path`` and return decoded JSON."""

        method = method.upper()
        url = f"{self._base_url}{path}"
        payload = dict(body) if body is not None and method in _BODY_METHODS else None
        log = structlog.get_logger().bind(method=method, path=path)

        retries = 0
        waited = 0.0

        while True:
            try:
                response = self._http.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=payload,
                    params=list(params) if params else None,
                )
            except httpx.HTTPError as exc:
                log.error("clickup_request_failed", error=str(exc), error_type=type(exc).__name__)
                raise

            if response.status_code == 429:
                delay = _retry_after_seconds(response)
                if retries >= self._max_retries or waited + delay > self._max_backoff:
                    log.error("clickup_rate_limit_exceeded", attempts=retries + 1, waited=waited)
                    raise RateLimitExceeded(attempts=retries + 1, waited=waited)

                log.warning("clickup_rate_limited", retry_after=delay, attempt=retries + 1)
                self._sleep(delay)
                retries += 1
                waited += delay
                continue

            if not response.is_success:
                log.warning("clickup_request_rejected", status_code=response.status_code)
                raise ClickUpApiError(response.status_code, response.text)

            if not response.content:
                return {}
            return response.json()
