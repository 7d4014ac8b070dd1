"""Litestar plugin for whiteboard-relay integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from whiteboard_relay.services.relay import RelayService

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

logger = structlog.get_logger(__name__)


@dataclass
class RelayConfig:
    """Configuration for the relay plugin.

    Attributes:
        service: Pre-built RelayService. If None, a new one is created, so
            every app gets its own isolated rooms and connections.
        enable_api: Whether to mount the room HTTP API. Defaults to True.
        api_path: Base path for the room API. Defaults to "/api".
        ws_path: Base path for the WebSocket endpoint. The endpoint itself
            is ``{ws_path}/relay``. Defaults to "/ws".
        enable_stats: Whether to mount ``/stats``. Defaults to True.
        static_dir: Directory of static client files. Defaults to None
            (not served).
        static_path: Mount point for ``static_dir``. Defaults to "/static".
        room_id_length: Length of server-generated room codes.

    Example:
        >>> config = RelayConfig(ws_path="/socket", api_path="/api/v1")
    """

    service: RelayService | None = field(default=None)
    enable_api: bool = True
    api_path: str = "/api"
    ws_path: str = "/ws"
    enable_stats: bool = True
    static_dir: str | None = None
    static_path: str = "/static"
    room_id_length: int = 6


class RelayPlugin(InitPluginProtocol):
    """Litestar plugin that wires a RelayService and its routes into an app.

    The service is registered for dependency injection as ``relay_service``
    and stored on ``app.state.relay_service`` for the health checks and the
    shutdown log.

    Example:
        >>> from litestar import Litestar
        >>> from whiteboard_relay import RelayConfig, RelayPlugin
        >>>
        >>> app = Litestar(plugins=[RelayPlugin(RelayConfig())])

        Accessing the service in your own handlers:

        >>> from litestar import get
        >>> from whiteboard_relay import RelayService
        >>>
        >>> @get("/rooms/count")
        ... async def room_count(relay_service: RelayService) -> dict:
        ...     return {"count": len(relay_service.directory)}
    """

    def __init__(self, config: RelayConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Plugin configuration. If None, RelayConfig defaults are used.
        """
        self._config = config or RelayConfig()
        self._service: RelayService | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Create the relay service and mount its routes.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        from whiteboard_relay.realtime.handler import create_websocket_handler
        from whiteboard_relay.web.health import HealthController
        from whiteboard_relay.web.router import create_router

        self._service = self._config.service or RelayService(room_id_length=self._config.room_id_length)
        app_config.state["relay_service"] = self._service

        def provide_relay_service() -> RelayService:
            """Dependency provider for RelayService.

            Returns:
                The initialized RelayService instance.
            """
            if self._service is None:
                msg = "Service not initialized"
                raise RuntimeError(msg)
            return self._service

        app_config.dependencies["relay_service"] = Provide(provide_relay_service, sync_to_thread=False)

        app_config.route_handlers.append(HealthController)
        app_config.route_handlers.append(create_websocket_handler(path=self._config.ws_path, service=self._service))

        if self._config.enable_api:
            app_config.route_handlers.append(create_router(path=self._config.api_path))

        if self._config.enable_stats:
            from whiteboard_relay.web.stats_controller import StatsController

            app_config.route_handlers.append(StatsController)

        if self._config.static_dir:
            static_dir = Path(self._config.static_dir)
            if static_dir.is_dir():
                from litestar.static_files import create_static_files_router

                app_config.route_handlers.append(
                    create_static_files_router(
                        path=self._config.static_path,
                        directories=[static_dir],
                        html_mode=True,
                        name="static",
                    )
                )
            else:
                logger.warning("Static directory not found, not serving client files", static_dir=str(static_dir))

        logger.debug(
            "Relay plugin initialized",
            ws_path=f"{self._config.ws_path}/relay",
            api_enabled=self._config.enable_api,
        )
        return app_config

    @property
    def service(self) -> RelayService:
        """Get the initialized relay service.

        Raises:
            RuntimeError: If the plugin has not been initialized yet
                (on_app_init not called).
        """
        if self._service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._service
