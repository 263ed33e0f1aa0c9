"""Main entry point for the svgen client core."""

import json
import logging
import time
from typing import Any, Optional, Union
from urllib.parse import quote

from .config import DEFAULT_ENDPOINT, DEFAULT_POLL_INTERVAL_MS, DEFAULT_RETRIES, DEFAULT_TIMEOUT_MS, EffectiveConfig
from .exceptions import ConfigInvalidError, GenerationFailedError, SchemaError, WaitTimeoutError
from .schema import GenerateRequest, SseEvent, SvgResponse, VectorizeRequest, validate_request, validate_response
from .status import infer_generation_state
from .stream import decode_sse
from .transport import RequestExecutor

logger = logging.getLogger("svgen.client")

DEFAULT_MAX_WAIT_MS = 300_000

GENERATIONS_PATH = "/v1/svgs/generations"
VECTORIZATIONS_PATH = "/v1/svgs/vectorizations"


class SvgenClient:
    """Client for the SVG generation API.

    Usage:
        resolved = resolve_effective_config()
        client = SvgenClient.from_config(resolved.effective)

        request = build_generate_request(model="arrow-preview", prompt="A rocket icon")
        response = client.generate(request)
        print(response.data[0].svg)
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        retries: int = DEFAULT_RETRIES,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ):
        self.poll_interval_ms = poll_interval_ms
        self._executor = RequestExecutor(
            endpoint=endpoint,
            api_key=api_key,
            timeout_ms=timeout_ms,
            retries=retries,
        )

    @classmethod
    def from_config(cls, config: EffectiveConfig) -> "SvgenClient":
        """Build a client from a resolved configuration. Requires an API key."""
        if not config.api_key:
            raise ConfigInvalidError(
                "apiKey",
                "missing API key; set SVGEN_API_KEY (or QUIVERAI_API_KEY) or store it in the config file",
            )
        return cls(
            api_key=config.api_key,
            endpoint=config.endpoint,
            timeout_ms=config.timeout,
            retries=config.retries,
            poll_interval_ms=config.poll_interval,
        )

    def _request_json(self, method: str, path: str, body: Any = None) -> Any:
        response = self._executor.execute(method, path, body=body)
        text = response.text
        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError as exc:
            raise SchemaError("Expected JSON response from API.") from exc

    def _request_events(self, path: str, body: Any) -> list[SseEvent]:
        response = self._executor.execute("POST", path, body=body, stream=True)
        return decode_sse(response.text)

    def list_models(self) -> Any:
        """List models available to the API key."""
        return self._request_json("GET", "/v1/models")

    def get_model(self, model_id: str) -> Any:
        return self._request_json("GET", f"/v1/models/{quote(model_id, safe='')}")

    def generate(self, request: Union[GenerateRequest, dict]) -> SvgResponse:
        """Generate SVGs from a prompt and wait for the JSON response."""
        payload = validate_request("generate", request).to_payload()
        return validate_response(self._request_json("POST", GENERATIONS_PATH, payload))

    def generate_stream(self, request: Union[GenerateRequest, dict]) -> list[SseEvent]:
        """Generate SVGs as an SSE stream, returning the decoded events in order."""
        payload = validate_request("generate", request).to_payload()
        payload["stream"] = True
        return self._request_events(GENERATIONS_PATH, payload)

    def vectorize(self, request: Union[VectorizeRequest, dict]) -> SvgResponse:
        """Convert a raster image to SVG and wait for the JSON response."""
        payload = validate_request("vectorize", request).to_payload()
        return validate_response(self._request_json("POST", VECTORIZATIONS_PATH, payload))

    def vectorize_stream(self, request: Union[VectorizeRequest, dict]) -> list[SseEvent]:
        payload = validate_request("vectorize", request).to_payload()
        payload["stream"] = True
        return self._request_events(VECTORIZATIONS_PATH, payload)

    def get_generation(self, generation_id: str) -> Any:
        """Fetch the current state of a generation as raw JSON."""
        return self._request_json("GET", f"{GENERATIONS_PATH}/{quote(generation_id, safe='')}")

    def wait_for_generation(
        self,
        generation_id: str,
        interval_ms: Optional[int] = None,
        max_wait_ms: int = DEFAULT_MAX_WAIT_MS,
    ) -> Any:
        """Poll a generation until it is done and return the final payload.

        Raises:
            GenerationFailedError: the server reported the generation failed.
            WaitTimeoutError: ``max_wait_ms`` elapsed first.
        """
        interval_ms = self.poll_interval_ms if interval_ms is None else interval_ms
        started = time.monotonic()

        while (time.monotonic() - started) * 1000 <= max_wait_ms:
            payload = self.get_generation(generation_id)
            state = infer_generation_state(payload)

            if state.state == "failed":
                raise GenerationFailedError(generation_id, state.reason, payload)
            if state.state == "done":
                return payload

            logger.info("waiting for %s...", generation_id)
            time.sleep(interval_ms / 1000)

        raise WaitTimeoutError(generation_id, max_wait_ms)
