"""Custom exceptions for the svgen client core.

Every error raised by the core derives from :class:`SvgenError`. The
``exit_code`` attribute is a hint for whatever presents the error; the core
itself never exits the process.
"""

from typing import Any, Optional


class SvgenError(Exception):
    """Base class for all svgen errors."""

    exit_code = 1

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigInvalidError(SvgenError):
    """Raised when a merged or supplied config value is out of range."""

    exit_code = 2

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid config value for '{field}': {message}")


class ConfigCorruptError(SvgenError):
    """Raised when the persisted config file cannot be trusted.

    Covers both malformed JSON and a schema violation. The file is never
    repaired automatically.
    """

    def __init__(self, path: str, reason: str, details: Any = None):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason} in config file: {path}", details)


class SchemaError(SvgenError):
    """Raised when a request or response payload violates its schema."""

    exit_code = 2

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message, self.issues)


class TransportFailure(SvgenError):
    """A single attempt failed before any HTTP response was received."""


class RequestTimeoutError(TransportFailure):
    """A single attempt exceeded its deadline."""

    def __init__(self, timeout_ms: int, url: str = ""):
        self.timeout_ms = timeout_ms
        self.url = url
        super().__init__(f"Request to {url or 'endpoint'} timed out after {timeout_ms}ms")


class NetworkError(TransportFailure):
    """DNS failure, refused or reset connection and similar."""


class HttpError(SvgenError):
    """Server answered with a non-2xx status and no recognizable envelope."""

    def __init__(self, status: int, status_text: str = "", details: Any = None):
        self.status = status
        self.status_text = status_text
        message = f"HTTP {status}: {status_text}" if status_text else f"HTTP {status}"
        super().__init__(message, details)


class RemoteError(HttpError):
    """Server answered with a structured error envelope."""

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        request_id: Optional[str] = None,
        details: Any = None,
    ):
        self.code = code
        self.remote_message = message
        self.request_id = request_id
        super().__init__(status, details=details)
        self.message = f"HTTP {status} {code}: {message}"
        self.args = (self.message,)


class RequestFailedError(SvgenError):
    """All attempts were exhausted; carries the last underlying error."""

    def __init__(self, attempts: int, last_error: Optional[SvgenError]):
        self.attempts = attempts
        self.last_error = last_error
        suffix = f": {last_error}" if last_error is not None else ""
        super().__init__(f"Request failed after {attempts} attempts{suffix}", last_error)


class GenerationFailedError(SvgenError):
    """The server reported a generation as failed while polling."""

    def __init__(self, generation_id: str, reason: Optional[str] = None, details: Any = None):
        self.generation_id = generation_id
        self.reason = reason or "unknown error"
        super().__init__(f"Generation {generation_id} failed: {self.reason}", details)


class WaitTimeoutError(SvgenError):
    """Polling gave up before the generation finished."""

    def __init__(self, generation_id: str, max_wait_ms: int):
        self.generation_id = generation_id
        self.max_wait_ms = max_wait_ms
        super().__init__(
            f"Timed out waiting for generation {generation_id} after {max_wait_ms}ms"
        )
