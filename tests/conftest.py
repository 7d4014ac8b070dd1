"""Pytest configuration and fixtures for whiteboard-relay tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from whiteboard_relay.app import create_app
from whiteboard_relay.core.settings import RelaySettings
from whiteboard_relay.services.relay import RelayService


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


# Service fixtures


@pytest.fixture
def service() -> RelayService:
    """Create a fresh RelayService instance for each test."""
    return RelayService()


@pytest.fixture
def mock_socket() -> Callable[[], MagicMock]:
    """Factory for fake WebSockets that record every frame sent to them."""

    def factory() -> MagicMock:
        socket = MagicMock()
        socket.send_json = AsyncMock()
        return socket

    return factory


# App fixtures


@pytest.fixture
def app(service: RelayService) -> Litestar:
    """Create the relay application around the test's service."""
    return create_app(RelaySettings(), service=service)


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient]:
    """Create a test client for the app."""
    with TestClient(app=app) as client:
        yield client
