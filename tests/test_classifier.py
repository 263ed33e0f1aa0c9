"""Tests for error classification."""

import httpx
import pytest

from svgen.classifier import (
    classify_http_error,
    classify_response,
    classify_transport_error,
    is_retryable_status,
)
from svgen.exceptions import HttpError, NetworkError, RemoteError, RequestTimeoutError


@pytest.mark.parametrize("status", [429, 500, 502, 503, 504, 599])
def test_retryable_statuses(status):
    assert is_retryable_status(status) is True


@pytest.mark.parametrize("status", [200, 301, 400, 401, 403, 404, 409, 422])
def test_final_statuses(status):
    assert is_retryable_status(status) is False


def test_envelope_becomes_remote_error():
    body = '{"status": 429, "code": "rate_limited", "message": "Slow down", "request_id": "req_9"}'

    error = classify_http_error(429, "Too Many Requests", body)

    assert isinstance(error, RemoteError)
    assert error.status == 429
    assert error.code == "rate_limited"
    assert error.request_id == "req_9"
    assert str(error) == "HTTP 429 rate_limited: Slow down"
    assert error.details["message"] == "Slow down"


def test_json_without_envelope_becomes_http_error():
    error = classify_http_error(500, "Internal Server Error", '{"error": "boom"}')

    assert type(error) is HttpError
    assert error.status_text == "Internal Server Error"
    assert error.details == {"error": "boom"}
    assert str(error) == "HTTP 500: Internal Server Error"


def test_non_json_body_kept_as_text():
    """A non-JSON error body is attached verbatim."""
    error = classify_http_error(502, "Bad Gateway", "<html>upstream</html>")

    assert type(error) is HttpError
    assert error.details == "<html>upstream</html>"


def test_empty_body():
    error = classify_http_error(503, "", "")

    assert type(error) is HttpError
    assert str(error) == "HTTP 503"


def test_classify_response_uses_httpx_response():
    response = httpx.Response(404, json={"status": 404, "code": "not_found", "message": "No such id"})

    error = classify_response(response)

    assert isinstance(error, RemoteError)
    assert error.remote_message == "No such id"


def test_timeout_exception():
    error = classify_transport_error(httpx.ConnectTimeout("slow"), 1500, "http://x/v1/models")

    assert isinstance(error, RequestTimeoutError)
    assert error.timeout_ms == 1500
    assert "1500ms" in str(error)


def test_network_exception():
    error = classify_transport_error(httpx.ConnectError("refused"), 1500)

    assert isinstance(error, NetworkError)
    assert "refused" in str(error)
