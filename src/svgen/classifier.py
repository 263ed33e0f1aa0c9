"""Map raw transport and HTTP outcomes onto the svgen error taxonomy."""

import json
from typing import Any

import httpx

from .exceptions import HttpError, NetworkError, RemoteError, RequestTimeoutError, TransportFailure
from .schema import parse_error_envelope

RETRYABLE_STATUS = 429


def is_retryable_status(status_code: int) -> bool:
    """429 and every 5xx are retried; everything else is final."""
    return status_code == RETRYABLE_STATUS or status_code >= 500


def classify_transport_error(exc: Exception, timeout_ms: int, url: str = "") -> TransportFailure:
    """Classify an httpx request error (no usable response was received)."""
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(timeout_ms, url)
    return NetworkError(f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__, exc)


def classify_http_error(status_code: int, status_text: str, body: str) -> HttpError:
    """Classify a non-2xx response.

    A body matching the error envelope yields a :class:`RemoteError`;
    anything else, including a body that is not JSON at all, yields a
    generic :class:`HttpError` with the body attached as details.
    """
    try:
        payload: Any = json.loads(body)
    except ValueError:
        return HttpError(status_code, status_text, body)

    envelope = parse_error_envelope(payload)
    if envelope is not None:
        return RemoteError(
            status=envelope.status,
            code=envelope.code,
            message=envelope.message,
            request_id=envelope.request_id,
            details=payload,
        )
    return HttpError(status_code, status_text, payload)


def classify_response(response: httpx.Response) -> HttpError:
    return classify_http_error(response.status_code, response.reason_phrase, response.text)
