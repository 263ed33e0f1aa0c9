"""Request and response payload schemas.

Request models are closed (unknown fields are rejected) so that nothing
malformed is ever transmitted. Response models are open: the remote
service may add fields, and those are preserved on the validated object.
"""

from typing import Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .exceptions import SchemaError

MAX_BASE64_LENGTH = 16 * 1024 * 1024
MAX_REFERENCES = 4

_url_adapter = TypeAdapter(AnyUrl)


class RequestModel(BaseModel):
    """Closed schema: unknown fields are a validation error."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        """JSON body to transmit, without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ResponseModel(BaseModel):
    """Open schema: unknown fields are kept as extra attributes."""

    model_config = ConfigDict(extra="allow")


class UrlReference(RequestModel):
    url: str

    @field_validator("url")
    @classmethod
    def _is_url(cls, value: str) -> str:
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            raise ValueError("must be a valid URL") from None
        return value


class Base64Reference(RequestModel):
    base64: str = Field(min_length=1, max_length=MAX_BASE64_LENGTH)


ImageReference = Union[UrlReference, Base64Reference]


class _SamplingParams(RequestModel):
    model: str = Field(min_length=1)
    n: Optional[StrictInt] = Field(None, ge=1, le=16)
    top_p: Optional[StrictFloat] = Field(None, ge=0, le=1)
    max_output_tokens: Optional[StrictInt] = Field(None, ge=1, le=131_072)
    stream: Optional[StrictBool] = None
    temperature: Optional[StrictFloat] = Field(None, ge=0, le=2)
    presence_penalty: Optional[StrictFloat] = Field(None, ge=-2, le=2)


class GenerateRequest(_SamplingParams):
    """Body of ``POST /v1/svgs/generations``."""

    prompt: str = Field(min_length=1)
    instructions: Optional[str] = Field(None, min_length=1)
    references: Optional[list[ImageReference]] = Field(None, max_length=MAX_REFERENCES)


class VectorizeRequest(_SamplingParams):
    """Body of ``POST /v1/svgs/vectorizations``."""

    image: ImageReference
    auto_crop: Optional[StrictBool] = None
    target_size: Optional[StrictInt] = Field(None, ge=128, le=4096)


class SvgDocument(ResponseModel):
    svg: str = Field(min_length=1)
    mime_type: Literal["image/svg+xml"] = Field(validation_alias=AliasChoices("mime_type", "mimeType"))


class Usage(ResponseModel):
    total_tokens: int = Field(ge=0)
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)


class SvgResponse(ResponseModel):
    """A completed generation or vectorization."""

    id: str = Field(min_length=1)
    created: int = Field(ge=0)
    data: list[SvgDocument] = Field(min_length=1)
    usage: Optional[Usage] = None


class ErrorEnvelope(ResponseModel):
    """Structured error body returned by the API on failure."""

    status: int
    code: str
    message: str = Field(min_length=1)
    request_id: Optional[str] = Field(None, min_length=1)


class SseEvent(BaseModel):
    """One decoded server-sent event."""

    event: str = "message"
    id: Optional[str] = None
    retry: Optional[int] = None
    data: Any = None


REQUEST_MODELS: dict[str, type[RequestModel]] = {
    "generate": GenerateRequest,
    "vectorize": VectorizeRequest,
}


def describe_validation_error(exc: ValidationError) -> str:
    """Render the first violation as ``field.path: message``."""
    issue = exc.errors(include_url=False)[0]
    location = ".".join(str(part) for part in issue["loc"])
    return f"{location}: {issue['msg']}" if location else issue["msg"]


def validate_request(kind: str, candidate: Any) -> RequestModel:
    """Validate a request body for ``kind`` ("generate" or "vectorize")."""
    model = REQUEST_MODELS.get(kind)
    if model is None:
        raise SchemaError(f"Unknown request kind: {kind}")
    if isinstance(candidate, model):
        candidate = candidate.model_dump(exclude_none=True)
    try:
        return model.model_validate(candidate)
    except ValidationError as exc:
        raise SchemaError(
            f"Invalid {kind} payload: {describe_validation_error(exc)}",
            exc.errors(include_url=False),
        ) from exc


def validate_response(candidate: Any) -> SvgResponse:
    """Validate an SVG response body, keeping unrecognized server fields."""
    try:
        return SvgResponse.model_validate(candidate)
    except ValidationError as exc:
        raise SchemaError(
            f"Invalid SVG response: {describe_validation_error(exc)}",
            exc.errors(include_url=False),
        ) from exc


def parse_error_envelope(candidate: Any) -> Optional[ErrorEnvelope]:
    """Return the envelope when ``candidate`` matches it, else None."""
    try:
        return ErrorEnvelope.model_validate(candidate)
    except ValidationError:
        return None
