"""Room membership protocol: validated join and leave transitions.

The protocol owns the ``connection_id -> room_id`` index that the event relay
consults to route room-scoped events.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

import structlog

from whiteboard_relay.core.types import MembershipState, Role
from whiteboard_relay.realtime.events import RoomJoinedMessage, RoomValidationMessage
from whiteboard_relay.rooms.directory import RemovalResult

if TYPE_CHECKING:
    from whiteboard_relay.rooms.directory import RoomDirectory

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class JoinOutcome:
    """Result of a ``join_room`` transition.

    Attributes:
        reply: The message to send back to the joining connection.
        joined: Whether the connection is now a member of ``room_id``.
        room_id: The requested room.
        role: The role taken, or None when the join was rejected.
        left: Removal from a previous room, if the join replaced one.
    """

    reply: RoomJoinedMessage | RoomValidationMessage
    joined: bool
    room_id: str
    role: Role | None = None
    left: RemovalResult = RemovalResult()


class MembershipProtocol:
    """Validates and executes join and leave transitions.

    Each connection moves through ``UNJOINED -> JOINING -> JOINED`` and back to
    ``UNJOINED`` on leave or disconnect. A connection belongs to at most one
    room at a time.

    ``join_room`` runs to completion without suspending, so ``JOINING`` only
    exists inside that call and ``state_of`` never reports it.
    """

    def __init__(self, directory: RoomDirectory) -> None:
        """Initialize the protocol.

        Args:
            directory: The room directory this protocol mutates.
        """
        self._directory = directory
        self._room_index: dict[str, str] = {}
        self._roles: dict[str, Role] = {}

    def validate_room(self, room_id: str) -> RoomValidationMessage:
        """Advisory check: would a student join to ``room_id`` succeed right now."""
        return RoomValidationMessage(valid=bool(room_id) and self._directory.is_valid_for_student(room_id))

    def join_room(self, connection_id: str, room_id: str, *, is_teacher: bool) -> JoinOutcome:
        """Join ``room_id`` as teacher or student.

        A teacher join always succeeds and creates the room if needed. A
        student join succeeds only for a room that already has a teacher; on
        failure nothing is mutated and any current membership is kept.

        A successful join by a connection already in a different room, or in
        the same room under a different role, first leaves that membership.

        Args:
            connection_id: The joining connection.
            room_id: The room to join.
            is_teacher: Join as the room's teacher.

        Returns:
            The outcome, including the reply for the joining connection.
        """
        role = Role.TEACHER if is_teacher else Role.STUDENT
        if not self._can_join(connection_id, room_id, role):
            logger.info(
                "Join rejected",
                connection_id=connection_id,
                room_id=room_id,
                role=role.value,
            )
            return JoinOutcome(reply=RoomValidationMessage(valid=False), joined=False, room_id=room_id)

        left = RemovalResult()
        current = self._room_index.get(connection_id)
        if current is not None and (current != room_id or self._roles.get(connection_id) is not role):
            left = self.leave_room(connection_id)

        if role is Role.TEACHER:
            self._directory.create_or_get_as_teacher(room_id, connection_id)
        else:
            self._directory.add_student(room_id, connection_id)

        self._room_index[connection_id] = room_id
        self._roles[connection_id] = role
        logger.info("Joined room", connection_id=connection_id, room_id=room_id, role=role.value)
        return JoinOutcome(
            reply=RoomJoinedMessage(room_id=room_id, is_teacher=is_teacher),
            joined=True,
            room_id=room_id,
            role=role,
            left=left,
        )

    def _can_join(self, connection_id: str, room_id: str, role: Role) -> bool:
        if not room_id:
            return False
        if role is Role.TEACHER:
            return True
        room = self._directory.get(room_id)
        # A teacher rejoining its own room as a student would close it first.
        return room is not None and room.has_teacher and room.teacher_id != connection_id

    def leave_room(self, connection_id: str) -> RemovalResult:
        """Remove a connection from its room, tearing the room down for a teacher.

        Safe to call for connections that are not in any room.
        """
        self._room_index.pop(connection_id, None)
        self._roles.pop(connection_id, None)
        result = self._directory.remove_connection(connection_id)
        if not result.was_teacher:
            return result

        # Everyone still indexed into the deleted room is now roomless.
        orphans = frozenset(self.members_of(result.removed_room_id))
        for member in orphans:
            del self._room_index[member]
            self._roles.pop(member, None)
        return replace(result, members=result.members | orphans)

    def room_of(self, connection_id: str) -> str | None:
        """The room a connection currently belongs to, if any."""
        return self._room_index.get(connection_id)

    def role_of(self, connection_id: str) -> Role | None:
        return self._roles.get(connection_id)

    def state_of(self, connection_id: str) -> MembershipState:
        if connection_id in self._room_index:
            return MembershipState.JOINED
        return MembershipState.UNJOINED

    def members_of(self, room_id: str) -> list[str]:
        """Connections indexed into ``room_id``."""
        return [cid for cid, rid in self._room_index.items() if rid == room_id]
