"""Run the relay server: ``python -m whiteboard_relay``."""

from __future__ import annotations

import uvicorn

from whiteboard_relay.app import create_app
from whiteboard_relay.core.settings import RelaySettings


def main() -> None:
    """Start uvicorn with settings from the environment."""
    settings = RelaySettings.from_env()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
