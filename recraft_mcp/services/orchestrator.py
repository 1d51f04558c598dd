"""Job orchestration for the synchronous and queued generation modes."""
from __future__ import annotations

import logging

from recraft_mcp.config import Settings
from recraft_mcp.models import GenerationRequest, QueueSubmission, ToolResult
from recraft_mcp.reports import summary
from recraft_mcp.services.provider import ImageProvider, ProviderError, get_provider
from recraft_mcp.services.storage import BatchMaterializer, build_materializer

logger = logging.getLogger(__name__)


class JobOrchestrator:
    """Runs one tool call against the provider and renders its outcome.

    Calls share nothing but the configuration given at construction. Without a
    credential every operation returns the configuration error and the provider
    is never built or called. Any failure raised while building or calling the
    provider comes back as an error result.
    """

    def __init__(
        self,
        settings: Settings,
        provider: ImageProvider | None = None,
        materializer: BatchMaterializer | None = None,
    ) -> None:
        self._settings = settings
        self._provider = provider
        self._materializer = materializer

    @property
    def configured(self) -> bool:
        return self._settings.credential_configured

    @property
    def provider(self) -> ImageProvider:
        if self._provider is None:
            self._provider = get_provider(self._settings)
        return self._provider

    @property
    def materializer(self) -> BatchMaterializer:
        if self._materializer is None:
            self._materializer = build_materializer(self._settings)
        return self._materializer

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def generate(self, request: GenerationRequest) -> ToolResult:
        if not self.configured:
            return ToolResult.error(summary.CONFIGURATION_ERROR)

        logger.info('Generating image with %s - prompt: "%s"', summary.MODEL_LABEL, request.prompt)
        try:
            subscription = await self.provider.subscribe(request.to_provider_input())
            async for entry in subscription.logs():
                logger.info("[%s] %s", subscription.request_id, entry.message)
            result = await subscription.result()
        except ProviderError as exc:
            logger.error("Error generating image: %s", exc)
            return ToolResult.error(summary.render_failure("generate image with " + summary.MODEL_LABEL, exc))
        except Exception as exc:
            logger.exception("Unexpected error generating image")
            return ToolResult.error(summary.render_failure("generate image with " + summary.MODEL_LABEL, exc))

        artifacts = await self.materializer.materialize(request.prompt, result.data.images, result.data.seed)
        return ToolResult(
            text=summary.render_generation(
                request,
                result,
                artifacts,
                images_dir_label=self.materializer.images_dir.name,
            )
        )

    async def enqueue(self, submission: QueueSubmission) -> ToolResult:
        if not self.configured:
            return ToolResult.error(summary.CONFIGURATION_ERROR)

        logger.info('Submitting queue request for %s - prompt: "%s"', summary.MODEL_LABEL, submission.prompt)
        try:
            job = await self.provider.submit(
                submission.to_provider_input(),
                webhook_url=submission.webhook_url,
            )
        except ProviderError as exc:
            logger.error("Error submitting queue request: %s", exc)
            return ToolResult.error(summary.render_failure("submit queue request for " + summary.MODEL_LABEL, exc))
        except Exception as exc:
            logger.exception("Unexpected error submitting queue request")
            return ToolResult.error(summary.render_failure("submit queue request for " + summary.MODEL_LABEL, exc))

        # TODO: persist the prompt next to the request id so queue results can be named after it
        return ToolResult(text=summary.render_submission(job, submission.prompt))

    async def status(self, request_id: str, include_logs: bool = True) -> ToolResult:
        if not self.configured:
            return ToolResult.error(summary.CONFIGURATION_ERROR)

        logger.info("Checking status for request: %s", request_id)
        try:
            current = await self.provider.status(request_id, logs=include_logs)
        except ProviderError as exc:
            logger.error("Error checking queue status: %s", exc)
            return ToolResult.error(summary.render_failure("check queue status", exc))
        except Exception as exc:
            logger.exception("Unexpected error checking queue status")
            return ToolResult.error(summary.render_failure("check queue status", exc))
        return ToolResult(text=summary.render_status(request_id, current))

    async def result(self, request_id: str) -> ToolResult:
        if not self.configured:
            return ToolResult.error(summary.CONFIGURATION_ERROR)

        logger.info("Getting result for request: %s", request_id)
        try:
            result = await self.provider.result(request_id)
        except ProviderError as exc:
            logger.error("Error getting queue result: %s", exc)
            return ToolResult.error(summary.render_failure("get queue result", exc))
        except Exception as exc:
            logger.exception("Unexpected error getting queue result")
            return ToolResult.error(summary.render_failure("get queue result", exc))

        artifacts = await self.materializer.materialize(
            queue_result_label(request_id),
            result.data.images,
            result.data.seed,
        )
        return ToolResult(
            text=summary.render_queue_result(
                request_id,
                result,
                artifacts,
                images_dir_label=self.materializer.images_dir.name,
            )
        )

    async def aclose(self) -> None:
        if self._provider is not None:
            await self._provider.aclose()
        if self._materializer is not None:
            await self._materializer.aclose()


def queue_result_label(request_id: str) -> str:
    """Prompt stand-in used to name images fetched by request id."""

    return f"queue_result_{request_id}"
