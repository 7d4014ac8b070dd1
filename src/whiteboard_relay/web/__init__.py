"""HTTP routes for whiteboard-relay."""

from whiteboard_relay.web.health import HealthController
from whiteboard_relay.web.rooms import RoomController
from whiteboard_relay.web.router import create_router
from whiteboard_relay.web.stats_controller import StatsController

__all__ = ["HealthController", "RoomController", "StatsController", "create_router"]
