"""whiteboard-relay: room coordination and event relay for shared whiteboards.

One teacher connection creates a room; student connections join it. Drawing
events sent by any member are fanned out to the other members of the same
room, and the room is torn down the moment its teacher goes away.

Key Components:
    - Realtime: ConnectionRegistry, EventRelay, DisconnectReconciler
    - Rooms: RoomDirectory, MembershipProtocol
    - Services: RelayService (owns one isolated set of relay state)
    - Plugin: RelayPlugin for mounting the relay on a Litestar app

Quick Start:
    >>> from litestar import Litestar
    >>> from whiteboard_relay import RelayConfig, RelayPlugin
    >>>
    >>> app = Litestar(plugins=[RelayPlugin(RelayConfig())])

Or run the standalone server:

    $ PORT=3000 python -m whiteboard_relay
"""

from __future__ import annotations

__version__ = "0.1.0"

from whiteboard_relay.exceptions import (  # noqa: E402
    InvalidEventError,
    RelayError,
    RoomNotFoundError,
)
from whiteboard_relay.plugin import RelayConfig, RelayPlugin  # noqa: E402
from whiteboard_relay.realtime import (  # noqa: E402
    ConnectionRegistry,
    DisconnectReconciler,
    Envelope,
    EventName,
    EventRelay,
)
from whiteboard_relay.rooms import MembershipProtocol, Room, RoomDirectory  # noqa: E402
from whiteboard_relay.services import RelayService  # noqa: E402

__all__ = [
    "ConnectionRegistry",
    "DisconnectReconciler",
    "Envelope",
    "EventName",
    "EventRelay",
    "InvalidEventError",
    "MembershipProtocol",
    "RelayConfig",
    "RelayError",
    "RelayPlugin",
    "RelayService",
    "Room",
    "RoomDirectory",
    "RoomNotFoundError",
    "__version__",
]
