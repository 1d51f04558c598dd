"""Plain-text summaries returned by the tools."""
from __future__ import annotations

from typing import Sequence

from recraft_mcp.models import (
    GenerationRequest,
    MaterializedArtifact,
    ProviderResult,
    QueuedJob,
    QueueStatus,
    QueueStatusWithLogs,
)

MODEL_LABEL = "fal-ai/recraft/v3"

CONFIGURATION_ERROR = "Error: FAL_KEY environment variable is not set. Please configure your fal.ai API key."


def render_seed(seed: int | None) -> str:
    # 0 is a real seed; only a missing value means the provider picked one
    return "Seed: Auto-generated" if seed is None else f"Seed: {seed}"


def render_image_details(artifacts: Sequence[MaterializedArtifact]) -> str:
    blocks = []
    for img in artifacts:
        lines = [f"Image {img.index}:"]
        if img.local_path is not None:
            lines.append(f"  Local Path: {img.local_path}")
        lines.append(f"  Original URL: {img.url}")
        lines.append(f"  Filename: {img.filename}")
        lines.append(f"  Content Type: {img.remote.content_type}")
        if img.remote.file_size is not None:
            lines.append(f"  File Size: {img.remote.file_size} bytes")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_download_note(artifacts: Sequence[MaterializedArtifact], images_dir_label: str = "images") -> str:
    failed = [str(img.index) for img in artifacts if not img.downloaded]
    if len(failed) == len(artifacts):
        return "Note: Local download failed, but original URLs are available."
    note = f"Images have been downloaded to the local '{images_dir_label}' directory."
    if failed:
        note += f"\nNote: Failed to download image(s) {', '.join(failed)}; their original URLs are listed above."
    return note


def render_generation(
    request: GenerationRequest,
    result: ProviderResult,
    artifacts: Sequence[MaterializedArtifact],
    *,
    images_dir_label: str = "images",
) -> str:
    header = [
        f"Successfully generated {len(artifacts)} image(s) using {MODEL_LABEL}:",
        "",
        f'Prompt: "{request.prompt}"',
        f"Image Size: {request.size_label}",
        f"Style: {request.style}",
    ]
    if request.colors:
        header.append(f"Colors: {len(request.colors)} custom colors")
    if request.style_id:
        header.append(f"Style ID: {request.style_id}")
    header.append(f"Safety Checker: {'Enabled' if request.enable_safety_checker else 'Disabled'}")
    header.append(render_seed(result.data.seed))
    header.append(f"Request ID: {result.request_id}")

    return "\n".join(header) + _images_section(artifacts, images_dir_label)


def render_queue_result(
    request_id: str,
    result: ProviderResult,
    artifacts: Sequence[MaterializedArtifact],
    *,
    images_dir_label: str = "images",
) -> str:
    header = [
        f"Queue Result for Request ID: {request_id}",
        "",
        f"Successfully completed! Generated {len(artifacts)} image(s):",
        "",
        render_seed(result.data.seed),
    ]
    return "\n".join(header) + _images_section(artifacts, images_dir_label)


def render_submission(job: QueuedJob, prompt: str) -> str:
    webhook = f"Webhook URL: {job.webhook_url}" if job.webhook_url else "No webhook configured"
    return (
        "Successfully submitted image generation request to queue.\n\n"
        f"Request ID: {job.request_id}\n"
        f'Prompt: "{prompt}"\n'
        f"{webhook}\n\n"
        "Use the request ID with recraft_v3_queue_status to check progress "
        "or recraft_v3_queue_result to get the final result."
    )


def render_status(request_id: str, status: QueueStatus | QueueStatusWithLogs) -> str:
    text = f"Queue Status for Request ID: {request_id}\n\nStatus: {status.status}"
    if status.queue_position is not None:
        text += f"\nQueue Position: {status.queue_position}"
    if status.response_url:
        text += f"\nResponse URL: {status.response_url}"
    if isinstance(status, QueueStatusWithLogs):
        text += "\n\nLogs:\n" + "\n".join(entry.render() for entry in status.logs)
    return text


def render_failure(action: str, exc: BaseException) -> str:
    return f"Failed to {action}. Error: {exc}"


def _images_section(artifacts: Sequence[MaterializedArtifact], images_dir_label: str) -> str:
    return (
        "\n\nGenerated Images:\n"
        + render_image_details(artifacts)
        + "\n\n"
        + render_download_note(artifacts, images_dir_label)
    )
