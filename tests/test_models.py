"""Tests for request, artifact and queue models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from recraft_mcp.models import (
    CustomImageSize,
    GenerationRequest,
    GenerationResult,
    MaterializedArtifact,
    QueueStatus,
    QueueStatusWithLogs,
    QueueSubmission,
    RemoteArtifact,
    decode_queue_status,
)

# ============================================================================
# Generation parameters
# ============================================================================


def test_defaults_and_provider_input() -> None:
    request = GenerationRequest(prompt="a red fox")

    assert request.to_provider_input() == {
        "prompt": "a red fox",
        "image_size": "1024x1024",
        "style": "any",
        "enable_safety_checker": True,
        "num_images": 1,
        "sync_mode": True,
    }


def test_optional_fields_forwarded_when_set() -> None:
    request = GenerationRequest(
        prompt="fox",
        image_size={"width": 600, "height": 800},
        colors=[{"r": 255, "g": 0, "b": 0}],
        style_id="abc",
        seed=0,
    )

    payload = request.to_provider_input()
    assert payload["image_size"] == {"width": 600, "height": 800}
    assert payload["colors"] == [{"r": 255, "g": 0, "b": 0}]
    assert payload["style_id"] == "abc"
    assert payload["seed"] == 0
    assert request.size_label == "600x800"


def test_empty_colors_are_not_forwarded() -> None:
    assert "colors" not in GenerationRequest(prompt="fox", colors=[]).to_provider_input()


@pytest.mark.parametrize(
    "overrides",
    [
        {"prompt": ""},
        {"image_size": {"width": 1024}},
        {"image_size": {"width": 256, "height": 1024}},
        {"image_size": "999x999"},
        {"num_images": 0},
        {"num_images": 5},
        {"colors": [{"r": 0, "g": 0, "b": 0}] * 6},
        {"colors": [{"r": 256, "g": 0, "b": 0}]},
        {"style": "oil_painting"},
    ],
)
def test_invalid_requests_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        GenerationRequest(**{"prompt": "fox", **overrides})


def test_custom_size_requires_both_dimensions() -> None:
    with pytest.raises(ValidationError):
        CustomImageSize(height=1024)


def test_queue_submission_strips_webhook() -> None:
    submission = QueueSubmission(prompt="fox", webhook_url="https://hooks.example.test/done")

    payload = submission.to_provider_input()
    assert "webhook_url" not in payload
    assert "sync_mode" not in payload
    assert submission.webhook_url == "https://hooks.example.test/done"


# ============================================================================
# Results and artifacts
# ============================================================================


def test_remote_artifact_defaults_content_type() -> None:
    assert RemoteArtifact(url="https://x.test/a.png").content_type == "image/png"
    assert RemoteArtifact(url="https://x.test/a.png", content_type=None).content_type == "image/png"
    assert RemoteArtifact(url="https://x.test/a.jpg", content_type="image/jpeg").content_type == "image/jpeg"


def test_generation_result_requires_images_and_keeps_missing_seed() -> None:
    with pytest.raises(ValidationError):
        GenerationResult(images=[])
    result = GenerationResult.model_validate({"images": [{"url": "https://x.test/a.png"}]})
    assert result.seed is None


def test_materialized_artifact_requires_exactly_one_outcome() -> None:
    remote = RemoteArtifact(url="https://x.test/a.png")
    with pytest.raises(ValidationError):
        MaterializedArtifact(index=1, remote=remote, filename="a.png")
    with pytest.raises(ValidationError):
        MaterializedArtifact(index=1, remote=remote, filename="a.png", local_path=Path("/tmp/a.png"), error="x")

    failed = MaterializedArtifact(index=1, remote=remote, filename="a.png", error="HTTP 404")
    assert not failed.downloaded


# ============================================================================
# Queue status decoding
# ============================================================================


def test_status_without_logs() -> None:
    status = decode_queue_status({"status": "IN_QUEUE", "queue_position": 3, "response_url": "https://q.test/r"})

    assert isinstance(status, QueueStatus)
    assert not isinstance(status, QueueStatusWithLogs)
    assert status.kind == "status"
    assert status.queue_position == 3


def test_status_with_logs_skips_malformed_entries() -> None:
    status = decode_queue_status(
        {
            "status": "IN_PROGRESS",
            "logs": [
                {"message": "step 1", "timestamp": "2024-01-01T00:00:00Z"},
                "garbage",
                {"timestamp": "no message"},
                {"message": "step 2", "timestamp": "2024-01-01T00:00:01Z", "level": "INFO"},
            ],
        }
    )

    assert isinstance(status, QueueStatusWithLogs)
    assert [entry.message for entry in status.logs] == ["step 1", "step 2"]
    assert status.logs[0].render() == "[2024-01-01T00:00:00Z] step 1"


@pytest.mark.parametrize("logs", [None, [], "not-a-list", [42]])
def test_empty_or_odd_logs_decode_to_status_only(logs) -> None:
    status = decode_queue_status({"status": "COMPLETED", "logs": logs})
    assert type(status) is QueueStatus


def test_missing_status_is_unknown() -> None:
    assert decode_queue_status({}).status == "UNKNOWN"
