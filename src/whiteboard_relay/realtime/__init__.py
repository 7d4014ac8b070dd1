"""Real-time module for whiteboard-relay.

Connection tracking, the wire envelope, event fan-out and disconnect handling.
The WebSocket endpoint itself lives in ``whiteboard_relay.realtime.handler``.
"""

from __future__ import annotations

from whiteboard_relay.realtime.events import (
    ConnectedMessage,
    Envelope,
    ErrorMessage,
    EventName,
    JoinRoomRequest,
    RoomJoinedMessage,
    RoomLeftMessage,
    RoomValidationMessage,
    UserListMessage,
)
from whiteboard_relay.realtime.reconciler import DisconnectReconciler
from whiteboard_relay.realtime.registry import Connection, ConnectionRegistry
from whiteboard_relay.realtime.relay import ROUTES, EventRelay, Route

__all__ = [
    "ROUTES",
    "ConnectedMessage",
    "Connection",
    "ConnectionRegistry",
    "DisconnectReconciler",
    "Envelope",
    "ErrorMessage",
    "EventName",
    "EventRelay",
    "JoinRoomRequest",
    "Route",
    "RoomJoinedMessage",
    "RoomLeftMessage",
    "RoomValidationMessage",
    "UserListMessage",
]
