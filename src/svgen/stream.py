"""Decoding of buffered server-sent-event (SSE) payloads."""

import json
import re

from .schema import SseEvent

DONE_SENTINEL = "[DONE]"

_BLOCK_SEPARATOR = re.compile(r"\r?\n\r?\n")
_LINE_SEPARATOR = re.compile(r"\r?\n")
_DIGITS = re.compile(r"[0-9]+")


def _field_value(line: str, prefix: str) -> str:
    value = line[len(prefix):]
    return value[1:] if value.startswith(" ") else value


def _decode_block(block: str) -> SseEvent:
    event = "message"
    event_id = None
    retry = None
    data_lines: list[str] = []

    for line in _LINE_SEPARATOR.split(block):
        if line.startswith("data:"):
            data_lines.append(_field_value(line, "data:"))
        elif line.startswith("event:"):
            event = line[len("event:"):].strip()
        elif line.startswith("id:"):
            event_id = line[len("id:"):].strip()
        elif line.startswith("retry:"):
            raw_retry = line[len("retry:"):].strip()
            if _DIGITS.fullmatch(raw_retry):
                try:
                    retry = int(raw_retry)
                except ValueError:
                    # longer than the interpreter's int conversion limit
                    pass

    raw_data = "\n".join(data_lines)
    if raw_data == DONE_SENTINEL:
        return SseEvent.model_construct(event="done", id=event_id, retry=retry, data=DONE_SENTINEL)

    try:
        data = json.loads(raw_data)
    except (ValueError, RecursionError):
        data = raw_data
    # fields are already typed; validation would reject lone surrogates
    return SseEvent.model_construct(event=event, id=event_id, retry=retry, data=data)


def decode_sse(text: str) -> list[SseEvent]:
    """Decode a complete SSE body into events, in input order.

    Blocks are separated by a blank line. Within a block, ``data:`` lines
    are joined with newlines and the last ``event:``/``id:``/``retry:`` line
    wins. A payload of exactly ``[DONE]`` becomes a ``done`` event; other
    payloads are parsed as JSON when possible and kept verbatim otherwise.
    Never raises for any string input.
    """
    blocks = (block.strip() for block in _BLOCK_SEPARATOR.split(text))
    return [_decode_block(block) for block in blocks if block]


def encode_sse(event: SseEvent) -> str:
    """Serialize one event as an SSE block, terminated by a blank line."""
    lines = []
    if event.event != "message":
        lines.append(f"event: {event.event}")
    if event.id is not None:
        lines.append(f"id: {event.id}")
    if event.retry is not None:
        lines.append(f"retry: {event.retry}")
    data = event.data if isinstance(event.data, str) else json.dumps(event.data)
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"
