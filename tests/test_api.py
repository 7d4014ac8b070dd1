"""Tests for the HTTP endpoints."""

from __future__ import annotations

from litestar import Litestar
from litestar.testing import TestClient

from whiteboard_relay.rooms.directory import ROOM_ID_ALPHABET
from whiteboard_relay.services.relay import RelayService
from whiteboard_relay.web.health import HealthController


class TestHealthAPI:
    """Tests for health and readiness checks."""

    def test_health(self, client: TestClient) -> None:
        """Test the liveness check."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        names = {c["name"] for c in data["components"]}
        assert names == {"application", "relay"}

    def test_health_reports_relay_counts(self, client: TestClient, service: RelayService) -> None:
        """Test that the relay component reports live counts."""
        service.membership.join_room("t1", "R1", is_teacher=True)

        data = client.get("/health").json()

        relay = next(c for c in data["components"] if c["name"] == "relay")
        assert relay["details"] == {"connections": 0, "rooms": 1}

    def test_ready(self, client: TestClient) -> None:
        """Test the readiness check."""
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_without_relay_service(self) -> None:
        """Test that both checks fail when no relay service is registered."""
        app = Litestar(route_handlers=[HealthController])

        with TestClient(app=app) as client:
            health = client.get("/health").json()
            ready = client.get("/ready").json()

        assert health["status"] == "unhealthy"
        relay = next(c for c in health["components"] if c["name"] == "relay")
        assert relay["status"] == "unhealthy"
        assert ready["ready"] is False
        assert ready["checks"] == {"application": True, "relay": False}


class TestStatsAPI:
    """Tests for the stats endpoint."""

    def test_stats_empty(self, client: TestClient) -> None:
        """Test stats of a fresh relay."""
        response = client.get("/stats")
        assert response.status_code == 200
        assert response.json() == {
            "connections": 0,
            "rooms": 0,
            "students": 0,
            "named_users": 0,
            "events_relayed": 0,
        }


class TestRoomsAPI:
    """Tests for room endpoints."""

    def test_list_rooms_empty(self, client: TestClient) -> None:
        """Test listing rooms when there are none."""
        response = client.get("/api/rooms")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_rooms(self, client: TestClient, service: RelayService) -> None:
        """Test listing active rooms."""
        service.membership.join_room("t1", "R1", is_teacher=True)
        service.membership.join_room("s1", "R1", is_teacher=False)

        rooms = client.get("/api/rooms").json()

        assert len(rooms) == 1
        assert rooms[0]["roomId"] == "R1"
        assert rooms[0]["teacherId"] == "t1"
        assert rooms[0]["studentCount"] == 1

    def test_create_room_code(self, client: TestClient, service: RelayService) -> None:
        """Test that a generated code is unused and does not create a room."""
        response = client.post("/api/rooms/code")
        assert response.status_code == 201
        room_id = response.json()["roomId"]
        assert len(room_id) == 6
        assert set(room_id) <= set(ROOM_ID_ALPHABET)
        assert room_id not in service.directory

    def test_get_room(self, client: TestClient, service: RelayService) -> None:
        """Test describing an existing room."""
        service.membership.join_room("t1", "R1", is_teacher=True)

        response = client.get("/api/rooms/R1")

        assert response.status_code == 200
        assert response.json()["roomId"] == "R1"
        assert response.json()["valid"] is True

    def test_get_room_not_found(self, client: TestClient) -> None:
        """Test describing a room that does not exist."""
        response = client.get("/api/rooms/NOPE", headers={"X-Correlation-ID": "req-42"})

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "room_not_found"
        assert data["correlation_id"] == "req-42"

    def test_validation_endpoint(self, client: TestClient, service: RelayService) -> None:
        """Test the HTTP room check."""
        assert client.get("/api/rooms/R1/validation").json() == {"valid": False}

        service.membership.join_room("t1", "R1", is_teacher=True)

        assert client.get("/api/rooms/R1/validation").json() == {"valid": True}

    def test_unknown_route(self, client: TestClient) -> None:
        """Test that router 404s use the structured error body."""
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"
