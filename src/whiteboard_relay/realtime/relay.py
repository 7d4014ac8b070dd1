"""Event relay: fan drawing events out to the right audience."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from whiteboard_relay.core.types import Audience
from whiteboard_relay.realtime.events import Envelope, EventName

if TYPE_CHECKING:
    from whiteboard_relay.realtime.registry import ConnectionRegistry
    from whiteboard_relay.rooms.membership import MembershipProtocol

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Route:
    """Routing policy for one relayed event.

    Attributes:
        audience: Who receives the event.
        tag_sender: Add the sender's connection ID to the payload as ``userId``.
    """

    audience: Audience
    tag_sender: bool = False


ROUTES: dict[str, Route] = {
    EventName.DRAW: Route(Audience.ROOM_EXCEPT_SENDER, tag_sender=True),
    EventName.DELETE_STROKE: Route(Audience.ROOM_EXCEPT_SENDER),
    EventName.CLEAR: Route(Audience.ROOM_EXCEPT_SENDER, tag_sender=True),
    EventName.MOVE_ELEMENT: Route(Audience.ROOM_EXCEPT_SENDER),
    EventName.ADD_IMAGE: Route(Audience.ROOM_EXCEPT_SENDER),
    # Not room-scoped: every connection, sender included, sees element deletions.
    EventName.DELETE_ELEMENT: Route(Audience.ALL_CONNECTIONS),
}


def tag_payload(payload: Any, sender_id: str) -> dict[str, Any]:
    """Return a copy of ``payload`` with ``userId`` set to the sender.

    Non-object payloads are wrapped as ``{"data": payload}``; a missing
    payload becomes ``{"userId": sender_id}``.
    """
    if payload is None:
        return {"userId": sender_id}
    if isinstance(payload, dict):
        return {**payload, "userId": sender_id}
    return {"data": payload, "userId": sender_id}


class EventRelay:
    """Forwards application events without interpreting their payloads.

    The sender's room is looked up in the membership index at the moment
    each event arrives, so a connection that has left its room is treated
    as roomless and its room-scoped events reach nobody.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        membership: MembershipProtocol,
        routes: dict[str, Route] | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            registry: Live connections, used for sending.
            membership: Source of the connection -> room index.
            routes: Routing table. Defaults to ``ROUTES``.
        """
        self._registry = registry
        self._membership = membership
        self._routes = dict(ROUTES if routes is None else routes)
        self.events_relayed = 0

    def handles(self, event: str) -> bool:
        """Whether ``event`` has a relay route."""
        return event in self._routes

    def audience_for(self, sender_id: str, event: str) -> list[str]:
        """Resolve the recipients of ``event`` sent by ``sender_id``.

        Returns:
            Recipient connection IDs in registration order. Empty for unknown
            events and for room-scoped events from roomless senders.
        """
        route = self._routes.get(event)
        if route is None:
            return []

        if route.audience is Audience.ALL_CONNECTIONS:
            return [c.connection_id for c in self._registry.connections()]

        room_id = self._membership.room_of(sender_id)
        if room_id is None:
            return []
        members = set(self._membership.members_of(room_id))
        return [
            c.connection_id
            for c in self._registry.connections()
            if c.connection_id in members and c.connection_id != sender_id
        ]

    async def relay(self, sender_id: str, event: str, payload: Any = None) -> list[str]:
        """Relay an inbound event from ``sender_id``.

        Args:
            sender_id: The sending connection.
            event: The event name; must have a route.
            payload: The payload, forwarded untouched apart from sender tagging.

        Returns:
            The connection IDs the event was sent to.
        """
        route = self._routes.get(event)
        if route is None:
            logger.warning("No route for event", event_name=event, connection_id=sender_id)
            return []

        recipients = self.audience_for(sender_id, event)
        if not recipients:
            logger.debug("Event dropped, no audience", event_name=event, connection_id=sender_id)
            return []

        data = tag_payload(payload, sender_id) if route.tag_sender else payload
        envelope = Envelope(event, data)
        for connection_id in recipients:
            await self._registry.send(connection_id, envelope)

        self.events_relayed += 1
        logger.debug(
            "Event relayed",
            event_name=event,
            connection_id=sender_id,
            room_id=self._membership.room_of(sender_id),
            recipients=len(recipients),
        )
        return recipients

    async def send_to(self, connection_ids: list[str] | set[str] | frozenset[str], envelope: Envelope) -> None:
        """Send one envelope to each listed connection, in registration order."""
        targets = set(connection_ids)
        for connection in self._registry.connections():
            if connection.connection_id in targets:
                await self._registry.send(connection.connection_id, envelope)

    async def send_to_room(self, room_id: str, envelope: Envelope, exclude: str | None = None) -> None:
        """Send an envelope to every connection indexed into ``room_id``."""
        members = {cid for cid in self._membership.members_of(room_id) if cid != exclude}
        await self.send_to(members, envelope)

    async def broadcast_all(self, envelope: Envelope) -> None:
        """Send an envelope to every live connection."""
        for connection in self._registry.connections():
            await self._registry.send(connection.connection_id, envelope)
