"""Relay service: owns all relay state and implements the inbound event contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from whiteboard_relay.realtime.events import (
    ConnectedMessage,
    Envelope,
    EventName,
    JoinRoomRequest,
    RoomLeftMessage,
    UserListMessage,
    room_id_from_payload,
)
from whiteboard_relay.realtime.reconciler import DisconnectReconciler
from whiteboard_relay.realtime.registry import ConnectionRegistry
from whiteboard_relay.realtime.relay import EventRelay
from whiteboard_relay.rooms.directory import RoomDirectory
from whiteboard_relay.rooms.membership import JoinOutcome, MembershipProtocol

if TYPE_CHECKING:
    from litestar import WebSocket

    from whiteboard_relay.rooms.directory import RemovalResult

logger = structlog.get_logger(__name__)


@dataclass
class RelayStats:
    """Point-in-time counters for the stats and health endpoints."""

    connections: int
    rooms: int
    students: int
    named_users: int
    events_relayed: int

    def to_dict(self) -> dict[str, int]:
        return {
            "connections": self.connections,
            "rooms": self.rooms,
            "students": self.students,
            "named_users": self.named_users,
            "events_relayed": self.events_relayed,
        }


class RelayService:
    """One isolated relay instance.

    Builds and owns the connection registry, room directory, membership
    protocol, event relay and disconnect reconciler. Handlers receive the
    service through dependency injection; nothing is module-global, so tests
    can run as many independent instances as they like.

    Each ``on_*`` method does its bookkeeping synchronously before the first
    ``await``, so state changes from one inbound event are complete before
    any other handler can run.
    """

    def __init__(self, *, room_id_length: int = 6) -> None:
        """Initialize the service.

        Args:
            room_id_length: Length of server-generated room codes.
        """
        self.room_id_length = room_id_length
        self.registry = ConnectionRegistry()
        self.directory = RoomDirectory()
        self.membership = MembershipProtocol(self.directory)
        self.relay = EventRelay(self.registry, self.membership)
        self.reconciler = DisconnectReconciler(self.registry, self.membership, self.relay)

        self._handlers = {
            EventName.VALIDATE_ROOM: self.on_validate_room,
            EventName.JOIN_ROOM: self.on_join_room,
            EventName.LEAVE_ROOM: self.on_leave_room,
            EventName.USER_JOIN: self.on_user_join,
        }

    # Connection lifecycle

    async def connect(self, socket: WebSocket) -> str:
        """Register an accepted socket and tell the client its ID."""
        connection_id = self.registry.register(socket)
        await self.registry.send(connection_id, ConnectedMessage(connection_id).to_envelope())
        return connection_id

    async def disconnect(self, connection_id: str) -> RemovalResult:
        """Transport closed: hand over to the reconciler."""
        return await self.reconciler.reconcile(connection_id)

    # Inbound events

    def accepts(self, event: str) -> bool:
        """Whether ``event`` is a known inbound event."""
        return event in self._handlers or self.relay.handles(event)

    async def dispatch(self, connection_id: str, envelope: Envelope) -> None:
        """Route an inbound envelope to its handler.

        Callers should check ``accepts`` first; unknown events are ignored here.
        """
        handler = self._handlers.get(envelope.event)
        if handler is not None:
            await handler(connection_id, envelope.data)
        elif self.relay.handles(envelope.event):
            await self.relay.relay(connection_id, envelope.event, envelope.data)

    async def on_validate_room(self, connection_id: str, data: Any) -> None:
        """Reply ``room_validation`` for a pre-join check."""
        room_id = room_id_from_payload(data)
        reply = self.membership.validate_room(room_id)
        logger.debug("Room validated", connection_id=connection_id, room_id=room_id, valid=reply.valid)
        await self.registry.send(connection_id, reply.to_envelope())

    async def on_join_room(self, connection_id: str, data: Any) -> JoinOutcome:
        """Join a room as teacher or student and reply to the joiner."""
        request = JoinRoomRequest.from_payload(data)
        outcome = self.membership.join_room(connection_id, request.room_id, is_teacher=request.is_teacher)
        if outcome.joined and request.username:
            self.registry.set_username(connection_id, request.username)

        await self._notify_teardown(outcome.left)
        await self.registry.send(connection_id, outcome.reply.to_envelope())
        return outcome

    async def on_leave_room(self, connection_id: str, data: Any = None) -> RemovalResult:
        """Explicit leave. A leaving teacher closes the room."""
        result = self.membership.leave_room(connection_id)
        await self._notify_teardown(result)
        await self.registry.send(connection_id, RoomLeftMessage(result.removed_room_id).to_envelope())
        return result

    async def on_user_join(self, connection_id: str, data: Any) -> None:
        """Record a username and broadcast the roster to every connection."""
        username = data.get("username") if isinstance(data, dict) else data
        if username is None:
            return
        self.registry.set_username(connection_id, str(username))
        await self.relay.broadcast_all(UserListMessage(self.registry.user_list()).to_envelope())

    async def _notify_teardown(self, result: RemovalResult) -> None:
        if not result.was_teacher:
            return
        await self.relay.send_to(result.members, Envelope(EventName.TEACHER_DISCONNECTED))
        logger.info("Room closed by teacher", room_id=result.removed_room_id, notified=len(result.members))

    # Queries

    def new_room_id(self) -> str:
        """A fresh, currently unused room code."""
        return self.directory.generate_room_id(self.room_id_length)

    def stats(self) -> RelayStats:
        rooms = self.directory.rooms()
        return RelayStats(
            connections=len(self.registry),
            rooms=len(rooms),
            students=sum(len(room.students) for room in rooms),
            named_users=len(self.registry.user_list()),
            events_relayed=self.relay.events_relayed,
        )
