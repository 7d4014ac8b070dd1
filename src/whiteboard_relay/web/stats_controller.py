"""Stats API for relay counters."""

from __future__ import annotations

from typing import ClassVar

from litestar import Controller, get

from whiteboard_relay.services.relay import RelayService


class StatsController(Controller):
    """Controller for relay statistics."""

    path = "/stats"
    tags: ClassVar[list[str]] = ["Stats"]

    @get("/")
    async def get_stats(self, relay_service: RelayService) -> dict[str, int]:
        """Get current relay statistics.

        Returns:
            Live connection, room and student counts, plus the number of events
            relayed since startup.
        """
        return relay_service.stats().to_dict()
