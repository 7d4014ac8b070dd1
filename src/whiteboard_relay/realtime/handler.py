"""WebSocket transport for the relay."""

from __future__ import annotations

import structlog
from litestar import Router, WebSocket, websocket

from whiteboard_relay.exceptions import InvalidEventError
from whiteboard_relay.realtime.events import Envelope, ErrorMessage
from whiteboard_relay.services.relay import RelayService

logger = structlog.get_logger(__name__)


class RelayWebSocketHandler:
    """Runs WebSocket sessions against a relay service.

    Frames from a single socket are handled strictly one after another, which
    is what gives each connection FIFO ordering of its events.
    """

    def __init__(self, service: RelayService) -> None:
        """Initialize the handler.

        Args:
            service: The relay service that owns all room and connection state.
        """
        self._service = service

    async def handle_connection(self, socket: WebSocket) -> None:
        """Accept a socket and serve it until the transport closes.

        Args:
            socket: The WebSocket connection.
        """
        await socket.accept()
        connection_id = await self._service.connect(socket)
        structlog.contextvars.bind_contextvars(connection_id=connection_id)

        try:
            await self._receive_loop(socket, connection_id)
        except Exception:
            logger.exception("WebSocket error", connection_id=connection_id)
        finally:
            await self._service.disconnect(connection_id)
            structlog.contextvars.unbind_contextvars("connection_id")

    async def _receive_loop(self, socket: WebSocket, connection_id: str) -> None:
        """Decode and dispatch frames until the client goes away.

        Args:
            socket: The WebSocket connection.
            connection_id: ID assigned by the registry.
        """
        async for frame in socket.iter_data():
            try:
                envelope = Envelope.from_frame(frame)
            except InvalidEventError as e:
                await self._send_error(socket, e.code, str(e))
                continue

            if not self._service.accepts(envelope.event):
                await self._send_error(socket, "unknown_event", f"Unknown event: {envelope.event}")
                continue

            try:
                await self._service.dispatch(connection_id, envelope)
            except Exception:
                logger.exception(
                    "Error handling event",
                    event_name=envelope.event,
                    connection_id=connection_id,
                )
                await self._send_error(socket, "internal_error", "Internal server error")

    async def _send_error(self, socket: WebSocket, code: str, message: str) -> None:
        """Send an ``error`` event to the client.

        Args:
            socket: The WebSocket connection.
            code: Error code.
            message: Error message.
        """
        logger.warning("Rejected frame", code=code, detail=message)
        await socket.send_json(ErrorMessage(code=code, message=message).to_envelope().to_dict())


def create_websocket_handler(path: str, service: RelayService) -> Router:
    """Create a WebSocket router for the relay.

    Args:
        path: Base path for WebSocket routes. The endpoint is ``{path}/relay``.
        service: The relay service sessions run against.

    Returns:
        A Litestar Router with the relay WebSocket handler.
    """
    handler = RelayWebSocketHandler(service)

    @websocket(path="/relay")
    async def relay_websocket(socket: WebSocket) -> None:
        """WebSocket endpoint for teacher/student collaboration.

        Args:
            socket: The WebSocket connection.
        """
        await handler.handle_connection(socket)

    return Router(path=path, route_handlers=[relay_websocket], tags=["WebSocket"])
