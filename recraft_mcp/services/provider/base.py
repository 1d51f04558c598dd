from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, Callable

from recraft_mcp.models import LogEntry, ProviderResult, QueuedJob, QueueStatus, QueueStatusWithLogs


class ProviderError(Exception):
    """Raised when the image provider rejects a call or cannot be reached."""

    def __init__(self, status: int | None, message: str, response_json: dict[str, Any] | None = None):
        prefix = f"Provider API error {status}: " if status is not None else ""
        super().__init__(f"{prefix}{message}")
        self.status = status
        self.response_json = response_json or {}


class Subscription:
    """Handle on a synchronous-execute run.

    ``logs()`` is a lazy, single-pass stream of progress events; ``result()``
    waits for completion (draining whatever progress was not consumed) and
    returns the final output.
    """

    def __init__(
        self,
        request_id: str,
        events: AsyncIterator[LogEntry],
        fetch_result: Callable[[], Awaitable[ProviderResult]],
    ) -> None:
        self.request_id = request_id
        self._events = events
        self._fetch_result = fetch_result

    def logs(self) -> AsyncIterator[LogEntry]:
        return self._events

    async def result(self) -> ProviderResult:
        async for _ in self._events:
            pass
        return await self._fetch_result()


class ImageProvider(ABC):
    """Abstract interface for a hosted image-generation provider."""

    name: str = "abstract"

    @abstractmethod
    async def subscribe(self, arguments: dict[str, Any]) -> Subscription:
        """Start a generation whose result the caller will wait for."""

    @abstractmethod
    async def submit(self, arguments: dict[str, Any], *, webhook_url: str | None = None) -> QueuedJob:
        """Enqueue a generation and return immediately with its request id."""

    @abstractmethod
    async def status(self, request_id: str, *, logs: bool = True) -> QueueStatus | QueueStatusWithLogs:
        """Return a single point-in-time status for a queued request."""

    @abstractmethod
    async def result(self, request_id: str) -> ProviderResult:
        """Wait for a queued request to finish and return its output."""

    async def aclose(self) -> None:
        return None
