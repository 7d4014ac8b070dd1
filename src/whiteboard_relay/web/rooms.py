"""Room API: read-only views of the directory and room code generation."""

from __future__ import annotations

from typing import Any, ClassVar

import structlog
from litestar import Controller, get, post

from whiteboard_relay.services.relay import RelayService

logger = structlog.get_logger(__name__)


class RoomController(Controller):
    """Controller for room endpoints."""

    path = "/rooms"
    tags: ClassVar[list[str]] = ["Rooms"]

    @get("/")
    async def list_rooms(self, relay_service: RelayService) -> list[dict[str, Any]]:
        """List active rooms with their teacher and student count."""
        return [room.to_dict() for room in relay_service.directory.rooms()]

    @post("/code")
    async def create_room_code(self, relay_service: RelayService) -> dict[str, str]:
        """Return a room code that is not in use right now.

        The room itself only comes into existence when a teacher joins it.
        """
        room_id = relay_service.new_room_id()
        logger.debug("Room code generated", room_id=room_id)
        return {"roomId": room_id}

    @get("/{room_id:str}")
    async def get_room(self, relay_service: RelayService, room_id: str) -> dict[str, Any]:
        """Describe one room.

        Raises:
            RoomNotFoundError: If the room does not exist (rendered as 404).
        """
        room = relay_service.directory.require(room_id)
        return {**room.to_dict(), "valid": relay_service.directory.is_valid_for_student(room_id)}

    @get("/{room_id:str}/validation")
    async def validate_room(self, relay_service: RelayService, room_id: str) -> dict[str, bool]:
        """HTTP twin of the ``validate_room`` event."""
        return {"valid": relay_service.membership.validate_room(room_id).valid}
