from __future__ import annotations

import logging
import signal
import sys
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable

from mcp.server.fastmcp import FastMCP

from recraft_mcp import __version__
from recraft_mcp.config import Settings, get_settings
from recraft_mcp.handlers.tools import register_tools
from recraft_mcp.services.orchestrator import JobOrchestrator

logger = logging.getLogger(__name__)

SERVER_NAME = "fal-recraft-v3-server"


def configure_logging(level: str = "INFO") -> None:
    # stdout carries the protocol, diagnostics go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def orchestrator_lifespan(
    orchestrator: JobOrchestrator,
) -> Callable[[FastMCP], AbstractAsyncContextManager[None]]:
    """Server lifespan that releases the orchestrator's HTTP clients on shutdown."""

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await orchestrator.aclose()

    return lifespan


def create_server(settings: Settings | None = None) -> FastMCP:
    settings = settings or get_settings()
    if not settings.credential_configured:
        logger.error("FAL_KEY environment variable is required")
        logger.error("Please set your fal.ai API key: export FAL_KEY=your_api_key_here")

    orchestrator = JobOrchestrator(settings)
    server = FastMCP(SERVER_NAME, lifespan=orchestrator_lifespan(orchestrator))
    # advertised in the initialize handshake
    server._mcp_server.version = __version__
    register_tools(server, orchestrator)
    return server


def _handle_signal(signum: int, _frame) -> None:
    logger.info("Received %s, shutting down gracefully...", signal.Signals(signum).name)
    sys.exit(0)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        create_server(settings).run("stdio")
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
