"""HTTP request execution with bounded retries and per-attempt timeouts."""

import enum
import logging
import time
from typing import Any, Optional

import httpx

from .classifier import classify_response, classify_transport_error, is_retryable_status
from .exceptions import RequestFailedError, SvgenError
from ._version import __version__

logger = logging.getLogger("svgen.transport")

INITIAL_BACKOFF_MS = 250
BACKOFF_MULTIPLIER = 2
MAX_BACKOFF_MS = 3_000


class Outcome(enum.Enum):
    SUCCESS = "success"
    RETRYING = "retrying"
    FAILED = "failed"


def backoff_ms(attempt: int) -> int:
    """Delay after the zero-based ``attempt`` failed: 250, 500, 1000, ... capped at 3000."""
    return min(INITIAL_BACKOFF_MS * BACKOFF_MULTIPLIER ** attempt, MAX_BACKOFF_MS)


class RequestExecutor:
    """Issues one logical request, retrying transient failures.

    An attempt is retried when it failed at the transport level (timeout,
    connection error, undecodable body) or the server answered 429 or 5xx,
    as long as attempts remain. Other non-2xx statuses are classified and
    raised at once. When
    every attempt is spent, :class:`RequestFailedError` carries the last
    underlying error.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout_ms: int,
        retries: int,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.timeout_ms = timeout_ms
        self.retries = retries

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def _headers(self, has_body: bool, stream: bool) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "text/event-stream" if stream else "application/json",
            "User-Agent": f"svgen/{__version__}",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _attempt(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> tuple[Outcome, Optional[httpx.Response], Optional[SvgenError]]:
        """Run one attempt and decide where the retry loop goes next."""
        try:
            response = httpx.request(
                method,
                url,
                headers=headers,
                json=body,
                timeout=httpx.Timeout(self.timeout_ms / 1000),
            )
        except httpx.RequestError as exc:
            return Outcome.RETRYING, None, classify_transport_error(exc, self.timeout_ms, url)

        if response.is_success:
            return Outcome.SUCCESS, response, None
        if is_retryable_status(response.status_code):
            return Outcome.RETRYING, response, classify_response(response)
        return Outcome.FAILED, response, classify_response(response)

    def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        stream: bool = False,
    ) -> httpx.Response:
        """Send ``method path`` and return the successful (2xx) response.

        Raises:
            HttpError / RemoteError: non-retryable error status.
            RequestFailedError: all attempts were spent on retryable failures.
        """
        url = f"{self.endpoint}{path}"
        headers = self._headers(body is not None, stream)
        last_error: Optional[SvgenError] = None

        for attempt in range(self.max_attempts):
            outcome, response, error = self._attempt(method, url, headers, body)

            if outcome is Outcome.SUCCESS:
                return response
            if outcome is Outcome.FAILED:
                logger.debug("%s %s rejected (HTTP %d), not retrying", method, path, response.status_code)
                raise error

            last_error = error
            if attempt + 1 < self.max_attempts:
                delay = backoff_ms(attempt)
                logger.warning(
                    "%s %s failed (%s), attempt %d/%d, retrying in %dms",
                    method,
                    path,
                    error,
                    attempt + 1,
                    self.max_attempts,
                    delay,
                )
                time.sleep(delay / 1000)

        logger.error("%s %s failed after %d attempts: %s", method, path, self.max_attempts, last_error)
        raise RequestFailedError(self.max_attempts, last_error)
