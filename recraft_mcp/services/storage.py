"""Local persistence of generated images.

Remote image URLs returned by the provider are short-lived, so every image of a
finished generation is downloaded into the artifact directory (``images/``
under the working directory by default)::

    images/recraft_v3_{slug}[_{seed}]_{index}_{timestamp}.png

A failed download never aborts the batch: the affected image is reported with
its original URL only and the remaining images are still fetched.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Sequence

import anyio
import httpx

from recraft_mcp.config import Settings
from recraft_mcp.models import MaterializedArtifact, RemoteArtifact
from recraft_mcp.utils.filenames import artifact_filename

logger = logging.getLogger(__name__)


class ArtifactFetchError(Exception):
    """Raised when a single image could not be stored locally."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ArtifactFetcher:
    """Streams one remote image into the artifact directory."""

    _ALLOWED_SCHEMES = ("http", "https")
    _CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        images_dir: Path,
        *,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._images_dir = Path(images_dir)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def images_dir(self) -> Path:
        return self._images_dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ensure_directory(self) -> Path:
        self._images_dir.mkdir(parents=True, exist_ok=True)
        return self._images_dir

    async def fetch(self, url: str, filename: str) -> Path:
        """Download *url* to ``images_dir/filename`` and return the absolute path.

        Raises
        ------
        ArtifactFetchError
            On a non-2xx response, an unsupported URL, a transport error or a
            local disk error. No partial file is left behind.
        """

        try:
            scheme = httpx.URL(url).scheme
        except httpx.InvalidURL as exc:
            raise ArtifactFetchError(f"Invalid image URL: {exc}", url=url) from exc
        if scheme not in self._ALLOWED_SCHEMES:
            raise ArtifactFetchError(f"Unsupported URL scheme: {scheme or '(none)'}", url=url)

        try:
            directory = self.ensure_directory()
        except OSError as exc:
            raise ArtifactFetchError(f"Cannot create image directory: {exc}", url=url) from exc
        file_path = (directory / filename).resolve()

        try:
            async with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise ArtifactFetchError(
                        f"Failed to download image: HTTP {response.status_code}",
                        url=url,
                        status=response.status_code,
                    )
                async with await anyio.open_file(file_path, "wb") as fh:
                    async for chunk in response.aiter_bytes(self._CHUNK_SIZE):
                        await fh.write(chunk)
        except ArtifactFetchError:
            file_path.unlink(missing_ok=True)
            raise
        except (httpx.HTTPError, OSError) as exc:
            file_path.unlink(missing_ok=True)
            raise ArtifactFetchError(str(exc) or exc.__class__.__name__, url=url) from exc

        return file_path

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class BatchMaterializer:
    """Downloads every image of one generation result, keeping order and count."""

    def __init__(self, fetcher: ArtifactFetcher, *, max_concurrency: int = 1) -> None:
        self._fetcher = fetcher
        self._max_concurrency = max(1, max_concurrency)

    @property
    def images_dir(self) -> Path:
        return self._fetcher.images_dir

    async def materialize(
        self,
        prompt: str,
        artifacts: Sequence[RemoteArtifact],
        seed: int | None = None,
    ) -> list[MaterializedArtifact]:
        """Return one :class:`MaterializedArtifact` per input artifact, in input order.

        Never raises; download failures are recorded on the affected entry.
        """

        logger.info("Downloading %d image(s) locally...", len(artifacts))
        if self._max_concurrency == 1:
            return [
                await self._materialize_one(prompt, index, artifact, seed)
                for index, artifact in enumerate(artifacts, start=1)
            ]

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(index: int, artifact: RemoteArtifact) -> MaterializedArtifact:
            async with semaphore:
                return await self._materialize_one(prompt, index, artifact, seed)

        results = await asyncio.gather(
            *(_bounded(index, artifact) for index, artifact in enumerate(artifacts, start=1))
        )
        return list(results)

    async def aclose(self) -> None:
        await self._fetcher.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _materialize_one(
        self,
        prompt: str,
        index: int,
        artifact: RemoteArtifact,
        seed: int | None,
    ) -> MaterializedArtifact:
        filename = artifact_filename(prompt, index, seed)
        try:
            local_path = await self._fetcher.fetch(artifact.url, filename)
        except ArtifactFetchError as exc:
            logger.error("Failed to download image %d: %s", index, exc)
            return MaterializedArtifact(index=index, remote=artifact, filename=filename, error=str(exc))
        except Exception as exc:  # pragma: no cover
            logger.exception("Unexpected error downloading image %d", index)
            return MaterializedArtifact(
                index=index,
                remote=artifact,
                filename=filename,
                error=str(exc) or exc.__class__.__name__,
            )

        logger.info("Downloaded: %s", filename)
        return MaterializedArtifact(index=index, remote=artifact, filename=filename, local_path=local_path)


def build_materializer(settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> BatchMaterializer:
    """Create a materializer writing to the configured artifact directory."""

    fetcher = ArtifactFetcher(
        settings.resolve_images_dir(),
        timeout=settings.http_timeout_s,
        transport=transport,
    )
    return BatchMaterializer(fetcher, max_concurrency=settings.max_concurrent_downloads)
