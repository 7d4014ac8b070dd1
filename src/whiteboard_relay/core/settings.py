"""Process-level settings for running whiteboard-relay as a server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass
class RelaySettings:
    """Server settings.

    Attributes:
        host: Interface to bind.
        port: Port to bind.
        debug: Debug mode and debug-level logging.
        json_logs: Emit JSON logs instead of colored console output.
        static_dir: Directory of static client files to serve, if any.
        cors_origins: Origins allowed by CORS.
        room_id_length: Length of server-generated room codes.
    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    debug: bool = False
    json_logs: bool = False
    static_dir: str | None = None
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    room_id_length: int = 6

    @classmethod
    def from_env(cls) -> RelaySettings:
        """Create settings from environment variables.

        Environment variables:
            HOST: Bind interface (default: 0.0.0.0).
            PORT: Bind port (default: 3000).
            RELAY_DEBUG: "true" enables debug mode.
            RELAY_JSON_LOGS: "true" switches to JSON logs.
            RELAY_STATIC_DIR: Directory of static files to serve at "/static".
            RELAY_CORS_ORIGINS: Comma-separated allowed origins (default: "*").
            RELAY_ROOM_ID_LENGTH: Length of generated room codes (default: 6).

        Returns:
            RelaySettings configured from environment.
        """
        origins = os.environ.get("RELAY_CORS_ORIGINS", "*")
        return cls(
            host=os.environ.get("HOST", "0.0.0.0"),  # noqa: S104
            port=int(os.environ.get("PORT", "3000")),
            debug=_env_flag("RELAY_DEBUG"),
            json_logs=_env_flag("RELAY_JSON_LOGS"),
            static_dir=os.environ.get("RELAY_STATIC_DIR") or None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            room_id_length=int(os.environ.get("RELAY_ROOM_ID_LENGTH", "6")),
        )
