"""Room directory and membership protocol."""

from __future__ import annotations

from whiteboard_relay.rooms.directory import RemovalResult, Room, RoomDirectory
from whiteboard_relay.rooms.membership import JoinOutcome, MembershipProtocol

__all__ = [
    "JoinOutcome",
    "MembershipProtocol",
    "RemovalResult",
    "Room",
    "RoomDirectory",
]
