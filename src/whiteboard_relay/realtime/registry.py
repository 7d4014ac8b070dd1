"""Connection registry: live transport sessions and their ephemeral identities."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator

    from litestar import WebSocket

    from whiteboard_relay.realtime.events import Envelope

logger = structlog.get_logger(__name__)


@dataclass
class Connection:
    """A live transport session."""

    connection_id: str
    socket: WebSocket
    username: str | None = None
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``user_list`` entry shape."""
        return {"id": self.connection_id, "username": self.username}


class ConnectionRegistry:
    """Tracks every live connection.

    Registration order is preserved and is the order fan-out visits
    recipients. All methods except ``send`` are synchronous and never
    suspend, so callers on the event loop see each mutation complete
    atomically.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def register(self, socket: WebSocket) -> str:
        """Register a freshly opened transport.

        Args:
            socket: The accepted WebSocket.

        Returns:
            A new connection ID, never reused for the life of the process.
        """
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = Connection(connection_id=connection_id, socket=socket)
        logger.info("Connection registered", connection_id=connection_id, total_connections=len(self))
        return connection_id

    def set_username(self, connection_id: str, name: str) -> None:
        """Attach a display name to a connection. Unknown IDs are ignored."""
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.username = name

    def unregister(self, connection_id: str) -> None:
        """Forget a connection. Safe to call for unknown or already removed IDs."""
        if self._connections.pop(connection_id, None) is not None:
            logger.info("Connection unregistered", connection_id=connection_id, total_connections=len(self))

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def connections(self) -> list[Connection]:
        """Snapshot of live connections in registration order."""
        return list(self._connections.values())

    def user_list(self) -> list[dict[str, Any]]:
        """Connections that announced a username, as ``{id, username}`` dicts."""
        return [c.to_dict() for c in self._connections.values() if c.username is not None]

    async def send(self, connection_id: str, envelope: Envelope) -> bool:
        """Send an envelope to one connection.

        Delivery is best-effort: a closed or failing transport is logged and
        reported as ``False``, never raised.

        Returns:
            True if the frame was handed to the transport.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            return False

        try:
            await connection.socket.send_json(envelope.to_dict())
        except Exception:
            logger.exception(
                "Failed to send event",
                connection_id=connection_id,
                event_name=envelope.event,
            )
            return False
        return True

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.connections())
