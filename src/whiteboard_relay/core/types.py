"""Core type definitions for whiteboard-relay."""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Role a connection holds inside a room."""

    TEACHER = "teacher"
    STUDENT = "student"


class MembershipState(StrEnum):
    """Per-connection room membership state."""

    UNJOINED = "unjoined"
    JOINING = "joining"
    JOINED = "joined"


class Audience(StrEnum):
    """Who receives a relayed event."""

    ROOM_EXCEPT_SENDER = "room_except_sender"
    ALL_CONNECTIONS = "all_connections"
