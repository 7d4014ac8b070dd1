"""Main Litestar application for whiteboard-relay.

This module provides the application factory used to run whiteboard-relay
as a standalone server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar import Litestar
from litestar.config.cors import CORSConfig
from litestar.openapi import OpenAPIConfig

from whiteboard_relay import __version__
from whiteboard_relay.core.error_handling import get_exception_handlers
from whiteboard_relay.core.logging import CorrelationIdMiddleware, RequestLoggingMiddleware, configure_logging
from whiteboard_relay.core.settings import RelaySettings
from whiteboard_relay.plugin import RelayConfig, RelayPlugin

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from whiteboard_relay.services.relay import RelayService


@asynccontextmanager
async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
    """Log startup and shutdown with the relay's final counters."""
    logger = structlog.get_logger(__name__)
    logger.info("Relay server starting", version=__version__)

    yield

    service = getattr(app.state, "relay_service", None)
    if service is not None:
        logger.info("Relay server stopped", **service.stats().to_dict())


def create_app(
    settings: RelaySettings | None = None,
    *,
    service: RelayService | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        settings: Server settings. If None, loaded from the environment.
        service: Pre-built RelayService to install, mainly for tests.

    Returns:
        Configured Litestar application instance.
    """
    settings = settings or RelaySettings.from_env()

    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    plugin = RelayPlugin(
        RelayConfig(
            service=service,
            static_dir=settings.static_dir,
            room_id_length=settings.room_id_length,
        )
    )

    return Litestar(
        plugins=[plugin],
        debug=settings.debug,
        lifespan=[lifespan],
        middleware=[CorrelationIdMiddleware, RequestLoggingMiddleware],
        exception_handlers=get_exception_handlers(),
        cors_config=CORSConfig(allow_origins=settings.cors_origins, allow_methods=["GET", "POST"]),
        openapi_config=OpenAPIConfig(
            title="whiteboard-relay API",
            version=__version__,
            description="Room coordination and event relay for teacher/student whiteboards",
            path="/schema",
            use_handler_docstrings=True,
        ),
    )
