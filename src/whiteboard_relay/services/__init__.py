"""Service layer for whiteboard-relay."""

from __future__ import annotations

from whiteboard_relay.services.relay import RelayService, RelayStats

__all__ = ["RelayService", "RelayStats"]
