"""fal.ai queue API client.

Every call goes through the queue endpoints::

    POST {queue_url}/{model}                               submit
    GET  {queue_url}/{owner}/{alias}/requests/{id}/status  status (+ logs)
    GET  {queue_url}/{owner}/{alias}/requests/{id}         result

A synchronous run is a submit followed by status polling until the request is
``COMPLETED``. No retries and no overall deadline: the provider decides how
long a generation takes.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError

from recraft_mcp.config import Settings
from recraft_mcp.models import (
    GenerationResult,
    LogEntry,
    ProviderResult,
    QueuedJob,
    QueueStatus,
    QueueStatusWithLogs,
    decode_queue_status,
)

from .base import ImageProvider, ProviderError, Subscription

logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"
_FAILED_STATUSES = frozenset({"FAILED", "ERROR"})


def app_id(model: str) -> str:
    """Return the ``owner/alias`` part of a model route used by request URLs."""

    parts = [part for part in model.strip("/").split("/") if part]
    if len(parts) < 2:
        raise ValueError(f"Invalid fal model route: {model!r}")
    return "/".join(parts[:2])


class FalProvider(ImageProvider):
    name = "fal"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        queue_url: str = "https://queue.fal.run",
        poll_interval_s: float = 0.5,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._model = model.strip("/")
        self._app_id = app_id(model)
        self._queue_url = queue_url.rstrip("/")
        self._poll_interval_s = poll_interval_s
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": f"Key {api_key}"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "FalProvider":
        if not settings.fal_key:
            raise ValueError("FAL_KEY is required to build the fal provider")
        return cls(
            api_key=settings.fal_key,
            model=settings.fal_model,
            queue_url=settings.fal_queue_url,
            poll_interval_s=settings.poll_interval_s,
            timeout=settings.http_timeout_s,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def subscribe(self, arguments: dict[str, Any]) -> Subscription:
        job = await self.submit(arguments)
        request_id = job.request_id
        return Subscription(
            request_id,
            self._progress(request_id, include_logs=True),
            lambda: self._fetch_result(request_id),
        )

    async def submit(self, arguments: dict[str, Any], *, webhook_url: str | None = None) -> QueuedJob:
        params = {"fal_webhook": webhook_url} if webhook_url else None
        data = await self._request("POST", f"{self._queue_url}/{self._model}", json=arguments, params=params)
        request_id = data.get("request_id")
        if not request_id:
            raise ProviderError(None, "Provider did not return a request id", data)
        logger.debug("Submitted request %s", request_id)
        return QueuedJob(
            request_id=str(request_id),
            webhook_url=webhook_url,
            status_url=data.get("status_url"),
            response_url=data.get("response_url"),
        )

    async def status(self, request_id: str, *, logs: bool = True) -> QueueStatus | QueueStatusWithLogs:
        data = await self._request(
            "GET",
            self._request_url(request_id, "/status"),
            params={"logs": int(logs)},
        )
        return decode_queue_status(data)

    async def result(self, request_id: str) -> ProviderResult:
        async for _ in self._progress(request_id, include_logs=False):
            pass
        return await self._fetch_result(request_id)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request_url(self, request_id: str, suffix: str = "") -> str:
        return f"{self._queue_url}/{self._app_id}/requests/{request_id}{suffix}"

    async def _progress(self, request_id: str, *, include_logs: bool) -> AsyncIterator[LogEntry]:
        """Poll until the request completes, yielding log lines not seen before."""

        seen = 0
        while True:
            current = await self.status(request_id, logs=include_logs)
            if isinstance(current, QueueStatusWithLogs):
                for entry in current.logs[seen:]:
                    yield entry
                seen = max(seen, len(current.logs))
            if current.status == COMPLETED:
                return
            if current.status in _FAILED_STATUSES:
                raise ProviderError(None, f"Request {request_id} ended with status {current.status}")
            await asyncio.sleep(self._poll_interval_s)

    async def _fetch_result(self, request_id: str) -> ProviderResult:
        data = await self._request("GET", self._request_url(request_id))
        try:
            output = GenerationResult.model_validate(data)
        except ValidationError as exc:
            raise ProviderError(None, f"Unexpected result payload: {exc}", data) from exc
        return ProviderResult(request_id=request_id, data=output)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(method, url, json=json, params=params)
        except httpx.HTTPError as exc:
            raise ProviderError(None, str(exc) or exc.__class__.__name__) from exc
        if resp.status_code >= 400:
            try:
                err_json = resp.json()
            except ValueError:
                err_json = None
            raise ProviderError(resp.status_code, _error_message(err_json, resp.text), err_json)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(resp.status_code, "Provider returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise ProviderError(resp.status_code, "Provider returned an unexpected body")
        return data


def _error_message(err_json: Any, fallback: str) -> str:
    if isinstance(err_json, dict) and err_json.get("detail"):
        detail = err_json["detail"]
        if isinstance(detail, list):
            return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
        return str(detail)
    return fallback or "empty response"
