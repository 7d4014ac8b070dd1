"""Core types, logging and error handling for whiteboard-relay."""

from whiteboard_relay.core.types import Audience, MembershipState, Role

__all__ = [
    "Audience",
    "MembershipState",
    "Role",
]
