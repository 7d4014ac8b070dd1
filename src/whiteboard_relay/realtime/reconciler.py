"""Disconnect reconciler: clean up after a transport closes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from whiteboard_relay.realtime.events import Envelope, EventName, UserListMessage

if TYPE_CHECKING:
    from whiteboard_relay.realtime.registry import ConnectionRegistry
    from whiteboard_relay.realtime.relay import EventRelay
    from whiteboard_relay.rooms.directory import RemovalResult
    from whiteboard_relay.rooms.membership import MembershipProtocol

logger = structlog.get_logger(__name__)


class DisconnectReconciler:
    """Evicts a departed connection and notifies whoever needs to know.

    Delivery of notifications is fire-and-forget. Reconciling a connection
    that is already gone does nothing.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        membership: MembershipProtocol,
        relay: EventRelay,
    ) -> None:
        self._registry = registry
        self._membership = membership
        self._relay = relay

    async def reconcile(self, connection_id: str) -> RemovalResult:
        """Run the disconnect path for ``connection_id``.

        1. Remove the connection from its room (deleting the room if it was
           the teacher).
        2. If it was the teacher, send ``teacher_disconnected`` to every
           remaining member of the deleted room. Student departures are not
           announced.
        3. Unregister the connection.
        4. If it had announced a username, broadcast the updated ``user_list``.

        Returns:
            What was removed from the room directory.
        """
        connection = self._registry.get(connection_id)
        result = self._membership.leave_room(connection_id)

        if result.was_teacher:
            await self._relay.send_to(result.members, Envelope(EventName.TEACHER_DISCONNECTED))
            logger.info(
                "Teacher disconnected, room closed",
                connection_id=connection_id,
                room_id=result.removed_room_id,
                notified=len(result.members),
            )
        elif result.removed:
            logger.info(
                "Student disconnected",
                connection_id=connection_id,
                room_id=result.removed_room_id,
            )

        self._registry.unregister(connection_id)

        if connection is not None and connection.username is not None:
            await self._relay.broadcast_all(UserListMessage(self._registry.user_list()).to_envelope())

        return result
