"""Build validated request payloads from caller-level inputs."""

from typing import Any, Optional, Sequence

from .exceptions import SchemaError
from .schema import GenerateRequest, VectorizeRequest, validate_request


def build_image_reference(url: Optional[str] = None, base64: Optional[str] = None) -> dict[str, str]:
    """Shape a single image reference, requiring exactly one of url/base64.

    The schema union alone would accept either variant, so the exclusive
    choice is checked here before validation.
    """
    if bool(url) == bool(base64):
        raise SchemaError("Provide exactly one of an image URL or base64 image data.")
    return {"url": url} if url else {"base64": base64}


def _sampling_fields(
    model: str,
    n: Optional[int],
    top_p: Optional[float],
    max_output_tokens: Optional[int],
    stream: Optional[bool],
    temperature: Optional[float],
    presence_penalty: Optional[float],
) -> dict[str, Any]:
    return {
        "model": model,
        "n": n,
        "top_p": top_p,
        "max_output_tokens": max_output_tokens,
        "stream": stream,
        "temperature": temperature,
        "presence_penalty": presence_penalty,
    }


def _without_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def build_generate_request(
    model: str,
    prompt: str,
    instructions: Optional[str] = None,
    reference_urls: Sequence[str] = (),
    reference_base64: Sequence[str] = (),
    n: Optional[int] = None,
    top_p: Optional[float] = None,
    max_output_tokens: Optional[int] = None,
    stream: Optional[bool] = None,
    temperature: Optional[float] = None,
    presence_penalty: Optional[float] = None,
) -> GenerateRequest:
    """Build a text-to-SVG request.

    References are sent URLs first, then base64 blobs, in the order given.
    """
    references = [build_image_reference(url=url) for url in reference_urls]
    references += [build_image_reference(base64=blob) for blob in reference_base64]

    payload = _sampling_fields(model, n, top_p, max_output_tokens, stream, temperature, presence_penalty)
    payload.update(
        prompt=prompt,
        instructions=instructions,
        references=references or None,
    )
    return validate_request("generate", _without_none(payload))


def build_vectorize_request(
    model: str,
    image_url: Optional[str] = None,
    image_base64: Optional[str] = None,
    auto_crop: Optional[bool] = None,
    target_size: Optional[int] = None,
    n: Optional[int] = None,
    top_p: Optional[float] = None,
    max_output_tokens: Optional[int] = None,
    stream: Optional[bool] = None,
    temperature: Optional[float] = None,
    presence_penalty: Optional[float] = None,
) -> VectorizeRequest:
    """Build an image-to-SVG request from exactly one image source."""
    image = build_image_reference(url=image_url, base64=image_base64)

    payload = _sampling_fields(model, n, top_p, max_output_tokens, stream, temperature, presence_penalty)
    payload.update(image=image, auto_crop=auto_crop, target_size=target_size)
    return validate_request("vectorize", _without_none(payload))
