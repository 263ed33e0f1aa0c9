"""Generation status inference for polling.

The status endpoint does not have a fixed shape while a job is running, so
the state is inferred from whichever signal the payload carries: a
non-empty ``data`` list, an HTTP-like numeric ``status`` or a textual one.
"""

from typing import Any, Literal, NamedTuple, Optional

DONE_STATUSES = frozenset({"done", "completed", "complete", "succeeded", "success"})
PENDING_STATUSES = frozenset({"queued", "pending", "processing", "running", "in_progress"})
FAILED_STATUSES = frozenset({"failed", "error", "cancelled", "canceled"})


class GenerationState(NamedTuple):
    state: Literal["done", "pending", "failed"]
    reason: Optional[str] = None


def infer_generation_state(payload: Any) -> GenerationState:
    """Classify a ``GET /v1/svgs/generations/{id}`` payload.

    Unknown shapes are treated as pending so the caller keeps polling
    until its own deadline.
    """
    if not isinstance(payload, dict):
        return GenerationState("pending")

    data = payload.get("data")
    if isinstance(data, list) and data:
        return GenerationState("done")

    message = payload.get("message")
    status = payload.get("status")

    if isinstance(status, (int, float)) and not isinstance(status, bool) and status >= 400:
        return GenerationState("failed", message if isinstance(message, str) else f"HTTP {status}")

    if isinstance(status, str):
        normalized = status.lower()
        if normalized in DONE_STATUSES:
            return GenerationState("done")
        if normalized in PENDING_STATUSES:
            return GenerationState("pending")
        if normalized in FAILED_STATUSES:
            return GenerationState(
                "failed", message if isinstance(message, str) else f"status={normalized}"
            )

    return GenerationState("pending")
