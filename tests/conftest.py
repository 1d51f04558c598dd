"""Shared pytest fixtures for recraft_mcp tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from recraft_mcp.config import Settings
from recraft_mcp.models import (
    GenerationResult,
    LogEntry,
    ProviderResult,
    QueuedJob,
    QueueStatus,
    QueueStatusWithLogs,
    RemoteArtifact,
)
from recraft_mcp.services.provider import ImageProvider, Subscription
from recraft_mcp.services.storage import ArtifactFetcher, BatchMaterializer

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    return tmp_path / "images"


@pytest.fixture
def settings(images_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        fal_key="test-key",
        images_dir=str(images_dir),
        poll_interval_s=0.0,
    )


@pytest.fixture
def unconfigured_settings(images_dir: Path) -> Settings:
    return Settings(_env_file=None, fal_key=None, images_dir=str(images_dir))


def image_server(failing: dict[str, int] | None = None) -> httpx.MockTransport:
    """Serve PNG bytes for every URL except those mapped to an error status."""

    failing = failing or {}

    def handler(request: httpx.Request) -> httpx.Response:
        status = failing.get(str(request.url))
        if status is not None:
            return httpx.Response(status, text="nope")
        return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})

    return httpx.MockTransport(handler)


@pytest.fixture
def make_materializer(images_dir: Path) -> Callable[..., BatchMaterializer]:
    def _make(failing: dict[str, int] | None = None, max_concurrency: int = 1) -> BatchMaterializer:
        fetcher = ArtifactFetcher(images_dir, transport=image_server(failing))
        return BatchMaterializer(fetcher, max_concurrency=max_concurrency)

    return _make


# ============================================================================
# Provider stub
# ============================================================================


class StubProvider(ImageProvider):
    """In-memory provider recording every call."""

    name = "stub"

    def __init__(
        self,
        *,
        urls: tuple[str, ...] = ("https://cdn.example.test/a.png",),
        seed: int | None = None,
        logs: tuple[str, ...] = (),
        error: Exception | None = None,
        status: QueueStatus | QueueStatusWithLogs | None = None,
        request_id: str = "req-123",
    ) -> None:
        self.calls: list[tuple[str, Any]] = []
        self._urls = urls
        self._seed = seed
        self._logs = logs
        self._error = error
        self._status = status or QueueStatus(status="IN_QUEUE", queue_position=2)
        self._request_id = request_id

    def _output(self) -> ProviderResult:
        data = GenerationResult(
            images=[RemoteArtifact(url=url, file_size=1234) for url in self._urls],
            seed=self._seed,
        )
        return ProviderResult(request_id=self._request_id, data=data)

    async def _events(self):
        for message in self._logs:
            yield LogEntry(message=message, timestamp="2024-01-01T00:00:00Z")

    async def _fetch(self) -> ProviderResult:
        return self._output()

    async def subscribe(self, arguments: dict[str, Any]) -> Subscription:
        self.calls.append(("subscribe", arguments))
        if self._error:
            raise self._error
        return Subscription(self._request_id, self._events(), self._fetch)

    async def submit(self, arguments: dict[str, Any], *, webhook_url: str | None = None) -> QueuedJob:
        self.calls.append(("submit", (arguments, webhook_url)))
        if self._error:
            raise self._error
        return QueuedJob(request_id=self._request_id, webhook_url=webhook_url)

    async def status(self, request_id: str, *, logs: bool = True) -> QueueStatus | QueueStatusWithLogs:
        self.calls.append(("status", (request_id, logs)))
        if self._error:
            raise self._error
        return self._status

    async def result(self, request_id: str) -> ProviderResult:
        self.calls.append(("result", request_id))
        if self._error:
            raise self._error
        return self._output()

    async def aclose(self) -> None:
        self.calls.append(("aclose", None))
