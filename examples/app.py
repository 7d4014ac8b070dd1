"""Minimal example embedding whiteboard-relay in an existing Litestar app.

This example demonstrates how to add the relay to your own application
using the plugin instead of the standalone ``create_app`` factory.

The application will:
    - Create a fresh RelayService for this app
    - Mount the relay WebSocket at /classroom/relay
    - Mount the room API at /api/v1/rooms

Running the Application:
    python examples/app.py

Then visit:
    - http://127.0.0.1:8000/schema - OpenAPI documentation
    - http://127.0.0.1:8000/api/v1/rooms - Active rooms

Example Usage:
    # Get an unused room code for a teacher
    curl -X POST http://127.0.0.1:8000/api/v1/rooms/code

    # Check whether students can join it yet
    curl http://127.0.0.1:8000/api/v1/rooms/{room_id}/validation

    # Connect a client and join as teacher
    websocat ws://127.0.0.1:8000/classroom/relay
    {"event": "join_room", "data": {"roomId": "ABC123", "isTeacher": true}}
"""

from __future__ import annotations

from litestar import Litestar, get

from whiteboard_relay import RelayConfig, RelayPlugin
from whiteboard_relay.core.logging import configure_logging

configure_logging(debug=True)


@get("/")
async def index() -> dict[str, str]:
    """Point clients at the relay."""
    return {"relay": "/classroom/relay"}


app = Litestar(
    route_handlers=[index],
    plugins=[
        RelayPlugin(
            RelayConfig(
                # Mount the room API under a versioned prefix
                api_path="/api/v1",
                # WebSocket endpoint becomes /classroom/relay
                ws_path="/classroom",
                # Counters are internal here
                enable_stats=False,
            )
        )
    ],
    debug=True,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
