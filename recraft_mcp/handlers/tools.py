"""Tool definitions registered on the MCP server.

Each tool validates its arguments, delegates to the shared
:class:`~recraft_mcp.services.orchestrator.JobOrchestrator` and returns the
rendered text. Error results are raised as ``ToolError`` so the transport
marks them with ``isError``.
"""
import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from recraft_mcp.models import GenerationRequest, ImageSize, QueueSubmission, RGBColor, Style, ToolResult
from recraft_mcp.services.orchestrator import JobOrchestrator

logger = logging.getLogger(__name__)

Prompt = Annotated[str, Field(min_length=1, description="The text prompt to generate an image from")]
Colors = Annotated[
    list[RGBColor] | None,
    Field(max_length=5, description="A list of RGB color objects to use in the generation"),
]
NumImages = Annotated[int, Field(ge=1, le=4, description="Number of images to generate")]
RequestId = Annotated[str, Field(min_length=1, description="The request ID from queue submission")]

TOOL_DESCRIPTIONS: dict[str, str] = {
    "recraft_v3_generate": (
        "Generate high-quality images using fal-ai/recraft/v3 - Advanced text-to-image "
        "generation model with superior design capabilities"
    ),
    "recraft_v3_generate_queue": "Submit a long-running image generation request to the queue using fal-ai/recraft/v3",
    "recraft_v3_queue_status": "Check the status of a queued image generation request",
    "recraft_v3_queue_result": "Get the result of a completed queued image generation request",
}


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def register_tools(server: FastMCP, orchestrator: JobOrchestrator) -> None:
    """Attach the four generation tools to *server*."""

    # ---------------------------------------------------------------------------
    # Tool: recraft_v3_generate
    # ---------------------------------------------------------------------------

    @server.tool(name="recraft_v3_generate", description=TOOL_DESCRIPTIONS["recraft_v3_generate"])
    async def recraft_v3_generate(
        prompt: Prompt,
        image_size: ImageSize = "1024x1024",
        style: Style = "any",
        colors: Colors = None,
        style_id: str | None = None,
        enable_safety_checker: bool = True,
        num_images: NumImages = 1,
        seed: int | None = None,
        sync_mode: bool = True,
    ) -> str:
        request = GenerationRequest(
            prompt=prompt,
            image_size=image_size,
            style=style,
            colors=colors,
            style_id=style_id,
            enable_safety_checker=enable_safety_checker,
            num_images=num_images,
            seed=seed,
            sync_mode=sync_mode,
        )
        return _unwrap(await orchestrator.generate(request))

    # ---------------------------------------------------------------------------
    # Tool: recraft_v3_generate_queue
    # ---------------------------------------------------------------------------

    @server.tool(name="recraft_v3_generate_queue", description=TOOL_DESCRIPTIONS["recraft_v3_generate_queue"])
    async def recraft_v3_generate_queue(
        prompt: Prompt,
        image_size: ImageSize = "1024x1024",
        style: Style = "any",
        colors: Colors = None,
        style_id: str | None = None,
        enable_safety_checker: bool = True,
        num_images: NumImages = 1,
        seed: int | None = None,
        webhook_url: str | None = None,
    ) -> str:
        submission = QueueSubmission(
            prompt=prompt,
            image_size=image_size,
            style=style,
            colors=colors,
            style_id=style_id,
            enable_safety_checker=enable_safety_checker,
            num_images=num_images,
            seed=seed,
            webhook_url=webhook_url,
        )
        return _unwrap(await orchestrator.enqueue(submission))

    # ---------------------------------------------------------------------------
    # Tool: recraft_v3_queue_status
    # ---------------------------------------------------------------------------

    @server.tool(name="recraft_v3_queue_status", description=TOOL_DESCRIPTIONS["recraft_v3_queue_status"])
    async def recraft_v3_queue_status(request_id: RequestId, logs: bool = True) -> str:
        return _unwrap(await orchestrator.status(request_id, include_logs=logs))

    # ---------------------------------------------------------------------------
    # Tool: recraft_v3_queue_result
    # ---------------------------------------------------------------------------

    @server.tool(name="recraft_v3_queue_result", description=TOOL_DESCRIPTIONS["recraft_v3_queue_result"])
    async def recraft_v3_queue_result(request_id: RequestId) -> str:
        return _unwrap(await orchestrator.result(request_id))

    logger.debug("Registered tools: %s", ", ".join(TOOL_DESCRIPTIONS))


TOOL_NAMES: tuple[str, ...] = tuple(TOOL_DESCRIPTIONS)
