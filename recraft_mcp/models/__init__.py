from .artifact import GenerationResult, MaterializedArtifact, ProviderResult, RemoteArtifact
from .generation import (
    CustomImageSize,
    GenerationParameters,
    GenerationRequest,
    ImageSize,
    ImageSizeName,
    QueueSubmission,
    RGBColor,
    Style,
)
from .queue import (
    LogEntry,
    QueuedJob,
    QueueStatus,
    QueueStatusResponse,
    QueueStatusWithLogs,
    decode_queue_status,
)
from .tool_result import ToolResult

__all__ = [
    "CustomImageSize",
    "GenerationParameters",
    "GenerationRequest",
    "GenerationResult",
    "ImageSize",
    "ImageSizeName",
    "LogEntry",
    "MaterializedArtifact",
    "ProviderResult",
    "QueueStatus",
    "QueueStatusResponse",
    "QueueStatusWithLogs",
    "QueueSubmission",
    "QueuedJob",
    "RGBColor",
    "RemoteArtifact",
    "Style",
    "ToolResult",
    "decode_queue_status",
]
