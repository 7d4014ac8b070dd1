"""Custom exceptions for whiteboard-relay."""

from __future__ import annotations


class RelayError(Exception):
    """Base exception class for all whiteboard-relay errors."""


class RoomNotFoundError(RelayError):
    """Raised when a room with the specified ID does not exist.

    Attributes:
        room_id: The ID of the room that was not found.
    """

    def __init__(self, room_id: str) -> None:
        """Initialize the exception with the room ID.

        Args:
            room_id: The ID of the room that was not found.
        """
        self.room_id = room_id
        super().__init__(f"Room with ID {room_id} not found")


class InvalidEventError(RelayError):
    """Raised when an inbound frame cannot be decoded into an event envelope.

    Attributes:
        code: Short machine-readable error code sent back to the client.
    """

    def __init__(self, code: str, message: str) -> None:
        """Initialize the exception.

        Args:
            code: Machine-readable error code.
            message: Description of why the frame was rejected.
        """
        self.code = code
        super().__init__(message)
