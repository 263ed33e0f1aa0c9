"""svgen — client core for a remote SVG generation API."""

from .client import SvgenClient
from .config import EffectiveConfig, PersistedConfig, resolve_effective_config
from .builders import build_generate_request, build_image_reference, build_vectorize_request
from .schema import (
    GenerateRequest,
    VectorizeRequest,
    SvgResponse,
    SseEvent,
    validate_request,
    validate_response,
)
from .stream import decode_sse
from .transport import RequestExecutor
from .exceptions import (
    SvgenError,
    ConfigInvalidError,
    ConfigCorruptError,
    SchemaError,
    RequestTimeoutError,
    NetworkError,
    HttpError,
    RemoteError,
    RequestFailedError,
    GenerationFailedError,
    WaitTimeoutError,
)
from ._version import __version__

__all__ = [
    "SvgenClient",
    "EffectiveConfig",
    "PersistedConfig",
    "resolve_effective_config",
    "build_generate_request",
    "build_image_reference",
    "build_vectorize_request",
    "GenerateRequest",
    "VectorizeRequest",
    "SvgResponse",
    "SseEvent",
    "validate_request",
    "validate_response",
    "decode_sse",
    "RequestExecutor",
    "SvgenError",
    "ConfigInvalidError",
    "ConfigCorruptError",
    "SchemaError",
    "RequestTimeoutError",
    "NetworkError",
    "HttpError",
    "RemoteError",
    "RequestFailedError",
    "GenerationFailedError",
    "WaitTimeoutError",
    "__version__",
]
