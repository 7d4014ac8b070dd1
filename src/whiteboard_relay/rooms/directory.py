"""Room directory: room IDs mapped to teacher and student membership."""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from whiteboard_relay.exceptions import RoomNotFoundError

logger = structlog.get_logger(__name__)

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class Room:
    """A named collaboration session with one teacher and any number of students."""

    room_id: str
    teacher_id: str | None = None
    students: set[str] = field(default_factory=set)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_teacher(self) -> bool:
        return self.teacher_id is not None

    def members(self) -> set[str]:
        """Teacher and students together."""
        if self.teacher_id is None:
            return set(self.students)
        return self.students | {self.teacher_id}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "roomId": self.room_id,
            "teacherId": self.teacher_id,
            "studentCount": len(self.students),
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of removing a connection from whatever room it belonged to.

    Attributes:
        removed_room_id: The room the connection was removed from, or None.
        was_teacher: True if the connection was that room's teacher, in which
            case the room itself is gone.
        members: Connections still in the room after the removal. For a
            teacher removal these are the students of the deleted room.
    """

    removed_room_id: str | None = None
    was_teacher: bool = False
    members: frozenset[str] = frozenset()

    @property
    def removed(self) -> bool:
        return self.removed_room_id is not None


class RoomDirectory:
    """In-memory room store.

    A room only ever comes into existence through ``create_or_get_as_teacher``
    and disappears as soon as its teacher is removed.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def create_or_get_as_teacher(self, room_id: str, connection_id: str) -> Room:
        """Create a room for a teacher, or hand an existing one to a new teacher.

        A second teacher joining an existing room overwrites the previous
        teacher (last writer wins).

        Args:
            room_id: The room to create or take over.
            connection_id: The teacher's connection ID.

        Returns:
            The room.
        """
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id, teacher_id=connection_id)
            self._rooms[room_id] = room
            logger.info("Room created", room_id=room_id, teacher_id=connection_id, total_rooms=len(self))
            return room

        if room.teacher_id != connection_id:
            logger.warning(
                "Room teacher overwritten",
                room_id=room_id,
                previous_teacher_id=room.teacher_id,
                teacher_id=connection_id,
            )
            room.teacher_id = connection_id
            room.students.discard(connection_id)
        return room

    def is_valid_for_student(self, room_id: str) -> bool:
        """Whether a student may join ``room_id`` right now."""
        room = self._rooms.get(room_id)
        return room is not None and room.has_teacher

    def add_student(self, room_id: str, connection_id: str) -> None:
        """Add a student to a room. Does nothing if the room is not joinable."""
        if not self.is_valid_for_student(room_id):
            return
        self._rooms[room_id].students.add(connection_id)

    def remove_connection(self, connection_id: str) -> RemovalResult:
        """Evict a connection from the room it belongs to.

        Scans all rooms. A teacher's room is deleted outright; a student is
        dropped from the student set. Unknown connections yield an empty result.
        """
        for room_id, room in self._rooms.items():
            if room.teacher_id == connection_id:
                del self._rooms[room_id]
                logger.info(
                    "Room removed",
                    room_id=room_id,
                    reason="teacher_left",
                    orphaned_students=len(room.students),
                )
                return RemovalResult(room_id, was_teacher=True, members=frozenset(room.students))

            if connection_id in room.students:
                room.students.discard(connection_id)
                logger.info("Student removed from room", room_id=room_id, connection_id=connection_id)
                return RemovalResult(room_id, was_teacher=False, members=frozenset(room.members()))

        return RemovalResult()

    def get(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def require(self, room_id: str) -> Room:
        """Get a room or raise.

        Raises:
            RoomNotFoundError: If the room does not exist.
        """
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def rooms(self) -> list[Room]:
        return list(self._rooms.values())

    def generate_room_id(self, length: int = 6) -> str:
        """Generate an unused room code of uppercase letters and digits."""
        while True:
            code = "".join(random.choices(ROOM_ID_ALPHABET, k=length))
            if code not in self._rooms:
                return code

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms
