"""Router configuration for the whiteboard-relay HTTP API."""

from __future__ import annotations

from litestar import Router

from whiteboard_relay.web.rooms import RoomController


def create_router(path: str = "/api") -> Router:
    """Create the whiteboard-relay API router.

    Args:
        path: The base path for all API routes. Defaults to "/api".

    Returns:
        A configured Router instance.

    Example:
        >>> router = create_router("/api/v1")
        >>> app = Litestar(route_handlers=[router])
    """
    return Router(path=path, route_handlers=[RoomController])
