"""Queue-side models and defensive decoding of provider status payloads.

The provider returns status objects whose shape depends on the job state and
on whether logs were requested. Everything downstream works with the tagged
union produced by :func:`decode_queue_status` instead of probing raw dicts.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class QueuedJob(BaseModel):
    """A request accepted by the provider queue."""

    model_config = ConfigDict(frozen=True)

    request_id: str
    webhook_url: str | None = None
    status_url: str | None = None
    response_url: str | None = None


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    message: str
    timestamp: str | None = None
    level: str | None = None

    def render(self) -> str:
        return f"[{self.timestamp or ''}] {self.message}"


class QueueStatus(BaseModel):
    """Status-only response."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["status"] = "status"
    status: str
    queue_position: int | None = None
    response_url: str | None = None


class QueueStatusWithLogs(QueueStatus):
    kind: Literal["with_logs"] = "with_logs"  # type: ignore[assignment]
    logs: list[LogEntry] = Field(..., min_length=1)


QueueStatusResponse = Annotated[Union[QueueStatus, QueueStatusWithLogs], Field(discriminator="kind")]


def decode_log_entries(raw: Any) -> list[LogEntry]:
    """Parse a list of raw log dicts, skipping anything malformed."""

    if not isinstance(raw, list):
        return []
    entries: list[LogEntry] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        try:
            entries.append(LogEntry.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed log entry: %r", item)
    return entries


def decode_queue_status(payload: Mapping[str, Any]) -> QueueStatusResponse:
    """Turn a raw status payload into :class:`QueueStatus` or :class:`QueueStatusWithLogs`."""

    status = payload.get("status")
    position = payload.get("queue_position")
    response_url = payload.get("response_url")
    common: dict[str, Any] = {
        "status": str(status) if status is not None else "UNKNOWN",
        "queue_position": position if isinstance(position, int) else None,
        "response_url": response_url if isinstance(response_url, str) else None,
    }
    logs = decode_log_entries(payload.get("logs"))
    if logs:
        return QueueStatusWithLogs(logs=logs, **common)
    return QueueStatus(**common)
