"""Event names, the wire envelope and outbound message types.

Every WebSocket frame, in either direction, is a JSON object of the form
``{"event": <name>, "data": <payload>}``. ``data`` is omitted for events that
carry no payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from whiteboard_relay.exceptions import InvalidEventError


class EventName(StrEnum):
    """Names of the events exchanged with clients."""

    # Client -> Server
    VALIDATE_ROOM = "validate_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    USER_JOIN = "user_join"

    # Relayed in both directions
    DRAW = "draw"
    DELETE_STROKE = "delete_stroke"
    CLEAR = "clear"
    MOVE_ELEMENT = "move_element"
    DELETE_ELEMENT = "delete_element"
    ADD_IMAGE = "add_image"

    # Server -> Client
    CONNECTED = "connected"
    ROOM_VALIDATION = "room_validation"
    ROOM_JOINED = "room_joined"
    ROOM_LEFT = "room_left"
    TEACHER_DISCONNECTED = "teacher_disconnected"
    USER_LIST = "user_list"
    ERROR = "error"


@dataclass
class Envelope:
    """A single named event with its JSON-serializable payload."""

    event: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        if self.data is None:
            return {"event": self.event}
        return {"event": self.event, "data": self.data}

    @classmethod
    def from_frame(cls, frame: str | bytes | dict[str, Any]) -> Envelope:
        """Decode an inbound frame.

        Args:
            frame: Raw text/bytes frame, or an already-decoded dictionary.

        Returns:
            The decoded envelope.

        Raises:
            InvalidEventError: If the frame is not JSON, not an object, or has no event name.
        """
        if isinstance(frame, (str, bytes)):
            try:
                frame = json.loads(frame)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise InvalidEventError("invalid_json", "Invalid JSON message") from exc

        if not isinstance(frame, dict):
            raise InvalidEventError("invalid_frame", "Message must be a JSON object")

        event = frame.get("event")
        if not event or not isinstance(event, str):
            raise InvalidEventError("missing_event", "Event name is required")

        return cls(event=event, data=frame.get("data"))


@dataclass
class JoinRoomRequest:
    """Decoded ``join_room`` payload."""

    room_id: str
    is_teacher: bool = False
    username: str | None = None

    @classmethod
    def from_payload(cls, data: Any) -> JoinRoomRequest:
        """Build a request from a loosely-shaped client payload.

        Missing or non-object payloads decode to an empty room ID, which the
        membership protocol rejects.
        """
        if not isinstance(data, dict):
            return cls(room_id="")
        username = data.get("username")
        return cls(
            room_id=str(data.get("roomId") or ""),
            is_teacher=data.get("isTeacher") is True,
            username=str(username) if username else None,
        )


def room_id_from_payload(data: Any) -> str:
    """Extract ``roomId`` from a ``validate_room`` payload."""
    if isinstance(data, dict):
        return str(data.get("roomId") or "")
    return ""


@dataclass
class RoomValidationMessage:
    """Answer to a room check, or the rejection of a student join."""

    valid: bool

    def to_envelope(self) -> Envelope:
        return Envelope(EventName.ROOM_VALIDATION, {"valid": self.valid})


@dataclass
class RoomJoinedMessage:
    """Sent to a connection that successfully joined a room."""

    room_id: str
    is_teacher: bool

    def to_envelope(self) -> Envelope:
        return Envelope(EventName.ROOM_JOINED, {"roomId": self.room_id, "isTeacher": self.is_teacher})


@dataclass
class RoomLeftMessage:
    """Sent to a connection after an explicit leave."""

    room_id: str | None

    def to_envelope(self) -> Envelope:
        return Envelope(EventName.ROOM_LEFT, {"roomId": self.room_id})


@dataclass
class ConnectedMessage:
    """Tells a freshly accepted connection its ephemeral ID."""

    connection_id: str

    def to_envelope(self) -> Envelope:
        return Envelope(EventName.CONNECTED, {"id": self.connection_id})


@dataclass
class UserListMessage:
    """Roster of every connection that announced a username."""

    users: list[dict[str, Any]] = field(default_factory=list)

    def to_envelope(self) -> Envelope:
        return Envelope(EventName.USER_LIST, self.users)


@dataclass
class ErrorMessage:
    """Envelope-level error reported back to the sender."""

    code: str
    message: str
    details: dict[str, Any] | None = None

    def to_envelope(self) -> Envelope:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return Envelope(EventName.ERROR, data)
