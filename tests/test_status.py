"""Tests for generation status inference."""

import pytest

from svgen.status import GenerationState, infer_generation_state


def test_data_means_done():
    """A non-empty data list is done regardless of status."""
    payload = {"id": "gen_1", "status": "running", "data": [{"svg": "<svg/>"}]}

    assert infer_generation_state(payload) == GenerationState("done")


def test_empty_data_is_not_done():
    assert infer_generation_state({"id": "gen_1", "data": []}).state == "pending"


@pytest.mark.parametrize("status", ["done", "completed", "COMPLETE", "succeeded", "success"])
def test_done_statuses(status):
    assert infer_generation_state({"status": status}).state == "done"


@pytest.mark.parametrize("status", ["queued", "pending", "processing", "running", "in_progress"])
def test_pending_statuses(status):
    assert infer_generation_state({"status": status}).state == "pending"


@pytest.mark.parametrize("status", ["failed", "error", "cancelled", "canceled"])
def test_failed_statuses(status):
    state = infer_generation_state({"status": status})

    assert state.state == "failed"
    assert state.reason == f"status={status}"


def test_failed_status_uses_message():
    state = infer_generation_state({"status": "error", "message": "model overloaded"})

    assert state == GenerationState("failed", "model overloaded")


def test_numeric_error_status():
    """An HTTP-like status of 400 or above is a failure."""
    assert infer_generation_state({"status": 500}) == GenerationState("failed", "HTTP 500")
    assert infer_generation_state({"status": 404, "message": "gone"}) == GenerationState("failed", "gone")
    assert infer_generation_state({"status": 202}).state == "pending"


def test_unknown_shapes_are_pending():
    """Anything unrecognized keeps the caller polling."""
    assert infer_generation_state({"id": "gen_1"}).state == "pending"
    assert infer_generation_state({"status": "mystery"}).state == "pending"
    assert infer_generation_state(None).state == "pending"
    assert infer_generation_state(["data"]).state == "pending"
    assert infer_generation_state({"status": True}).state == "pending"
