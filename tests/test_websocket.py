"""Tests for the relay WebSocket endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from whiteboard_relay.services.relay import RelayService

if TYPE_CHECKING:
    from litestar.testing import TestClient
    from litestar.testing.websocket_test_session import WebSocketTestSession

WS_PATH = "/ws/relay"


def connect(session: WebSocketTestSession) -> str:
    """Consume the greeting and return the connection ID."""
    message = session.receive_json()
    assert message["event"] == "connected"
    return message["data"]["id"]


def join(session: WebSocketTestSession, room_id: str, *, is_teacher: bool) -> dict[str, Any]:
    session.send_json({"event": "join_room", "data": {"roomId": room_id, "isTeacher": is_teacher}})
    return session.receive_json()


def round_trip(session: WebSocketTestSession) -> dict[str, Any]:
    """Round-trip a validate_room so everything sent before it has been handled."""
    session.send_json({"event": "validate_room", "data": {"roomId": "__sync__"}})
    return session.receive_json()


class TestConnection:
    """Tests for connection setup and frame handling."""

    def test_connected_greeting(self, client: TestClient, service: RelayService) -> None:
        """Test that the first frame tells the client its ID."""
        with client.websocket_connect(WS_PATH) as ws:
            connection_id = connect(ws)
            assert connection_id in service.registry

    def test_invalid_json(self, client: TestClient) -> None:
        """Test that malformed frames get an error and keep the socket open."""
        with client.websocket_connect(WS_PATH) as ws:
            connect(ws)
            ws.send_text("{nope")
            message = ws.receive_json()
            assert message["event"] == "error"
            assert message["data"]["code"] == "invalid_json"

            assert round_trip(ws)["event"] == "room_validation"

    def test_missing_event(self, client: TestClient) -> None:
        """Test that a frame without an event name is rejected."""
        with client.websocket_connect(WS_PATH) as ws:
            connect(ws)
            ws.send_json({"data": {"roomId": "R1"}})
            assert ws.receive_json()["data"]["code"] == "missing_event"

    def test_unknown_event(self, client: TestClient) -> None:
        """Test that unknown events are reported to the sender."""
        with client.websocket_connect(WS_PATH) as ws:
            connect(ws)
            ws.send_json({"event": "teleport", "data": {}})
            message = ws.receive_json()
            assert message["event"] == "error"
            assert message["data"]["code"] == "unknown_event"


class TestRoomFlow:
    """End-to-end room lifecycle over real WebSocket sessions."""

    def test_validate_unknown_room(self, client: TestClient) -> None:
        """Test probing a room that does not exist."""
        with client.websocket_connect(WS_PATH) as ws:
            connect(ws)
            ws.send_json({"event": "validate_room", "data": {"roomId": "ABC123"}})
            assert ws.receive_json() == {"event": "room_validation", "data": {"valid": False}}

    def test_student_join_unknown_room(self, client: TestClient, service: RelayService) -> None:
        """Test that students cannot create rooms."""
        with client.websocket_connect(WS_PATH) as ws:
            connect(ws)
            assert join(ws, "ABC123", is_teacher=False) == {"event": "room_validation", "data": {"valid": False}}
            assert len(service.directory) == 0

    def test_teacher_and_student_draw(self, client: TestClient) -> None:
        """Test a teacher and student exchanging strokes."""
        with client.websocket_connect(WS_PATH) as teacher, client.websocket_connect(WS_PATH) as student:
            teacher_id = connect(teacher)
            student_id = connect(student)

            assert join(teacher, "ABC123", is_teacher=True) == {
                "event": "room_joined",
                "data": {"roomId": "ABC123", "isTeacher": True},
            }
            student.send_json({"event": "validate_room", "data": {"roomId": "ABC123"}})
            assert student.receive_json() == {"event": "room_validation", "data": {"valid": True}}
            assert join(student, "ABC123", is_teacher=False)["event"] == "room_joined"

            teacher.send_json({"event": "draw", "data": {"points": [[0, 0], [1, 1]]}})
            assert student.receive_json() == {
                "event": "draw",
                "data": {"points": [[0, 0], [1, 1]], "userId": teacher_id},
            }

            student.send_json({"event": "clear"})
            assert teacher.receive_json() == {"event": "clear", "data": {"userId": student_id}}

    def test_no_echo_and_no_cross_room_traffic(self, client: TestClient) -> None:
        """Test that a stroke reaches neither its sender nor another room."""
        with (
            client.websocket_connect(WS_PATH) as teacher_a,
            client.websocket_connect(WS_PATH) as student_a,
            client.websocket_connect(WS_PATH) as teacher_b,
        ):
            for ws in (teacher_a, student_a, teacher_b):
                connect(ws)
            join(teacher_a, "A", is_teacher=True)
            join(student_a, "A", is_teacher=False)
            join(teacher_b, "B", is_teacher=True)

            teacher_a.send_json({"event": "move_element", "data": {"id": "e1", "x": 3}})
            assert student_a.receive_json() == {"event": "move_element", "data": {"id": "e1", "x": 3}}

            # Nothing queued ahead of the round trip replies.
            assert round_trip(teacher_a)["event"] == "room_validation"
            assert round_trip(teacher_b)["event"] == "room_validation"

    def test_delete_element_reaches_everyone(self, client: TestClient) -> None:
        """Test that element deletions go to every connection, sender included."""
        with (
            client.websocket_connect(WS_PATH) as teacher,
            client.websocket_connect(WS_PATH) as outsider,
        ):
            connect(teacher)
            connect(outsider)
            join(teacher, "A", is_teacher=True)

            teacher.send_json({"event": "delete_element", "data": {"id": "e7"}})

            assert teacher.receive_json() == {"event": "delete_element", "data": {"id": "e7"}}
            assert outsider.receive_json() == {"event": "delete_element", "data": {"id": "e7"}}

    def test_teacher_leave_closes_room(self, client: TestClient) -> None:
        """Test that a teacher leaving notifies students and invalidates the room."""
        with client.websocket_connect(WS_PATH) as teacher, client.websocket_connect(WS_PATH) as student:
            connect(teacher)
            connect(student)
            join(teacher, "ABC123", is_teacher=True)
            join(student, "ABC123", is_teacher=False)

            teacher.send_json({"event": "leave_room"})
            assert teacher.receive_json() == {"event": "room_left", "data": {"roomId": "ABC123"}}
            assert student.receive_json() == {"event": "teacher_disconnected"}

            student.send_json({"event": "validate_room", "data": {"roomId": "ABC123"}})
            assert student.receive_json() == {"event": "room_validation", "data": {"valid": False}}

    def test_user_join_roster(self, client: TestClient) -> None:
        """Test that user_join broadcasts the roster to every connection."""
        with client.websocket_connect(WS_PATH) as first, client.websocket_connect(WS_PATH) as second:
            first_id = connect(first)
            connect(second)

            first.send_json({"event": "user_join", "data": "Ann"})

            expected = {"event": "user_list", "data": [{"id": first_id, "username": "Ann"}]}
            assert first.receive_json() == expected
            assert second.receive_json() == expected

    def test_teacher_keeps_drawing(self, client: TestClient, service: RelayService) -> None:
        """Test that the teacher's session survives relaying several strokes."""
        with client.websocket_connect(WS_PATH) as teacher, client.websocket_connect(WS_PATH) as student:
            teacher_id = connect(teacher)
            connect(student)
            join(teacher, "ABC123", is_teacher=True)
            join(student, "ABC123", is_teacher=False)

            teacher.send_json({"event": "draw", "data": {"points": [[0, 0]]}})
            teacher.send_json({"event": "draw", "data": {"points": [[1, 1]]}})

            assert student.receive_json() == {"event": "draw", "data": {"points": [[0, 0]], "userId": teacher_id}}
            assert student.receive_json() == {"event": "draw", "data": {"points": [[1, 1]], "userId": teacher_id}}

            # A live teacher still answers, and the student was not told the room closed.
            assert round_trip(teacher)["event"] == "room_validation"
            assert round_trip(student)["event"] == "room_validation"
            assert service.directory.get("ABC123").teacher_id == teacher_id
            assert service.relay.events_relayed == 2

    def test_teacher_cannot_rejoin_own_room_as_student(self, client: TestClient, service: RelayService) -> None:
        """Test that a teacher joining its own room as a student is rejected without side effects."""
        with client.websocket_connect(WS_PATH) as teacher, client.websocket_connect(WS_PATH) as student:
            teacher_id = connect(teacher)
            connect(student)
            join(teacher, "ABC123", is_teacher=True)
            join(student, "ABC123", is_teacher=False)

            assert join(teacher, "ABC123", is_teacher=False) == {
                "event": "room_validation",
                "data": {"valid": False},
            }

            assert round_trip(student) == {"event": "room_validation", "data": {"valid": False}}
            room = service.directory.get("ABC123")
            assert room.teacher_id == teacher_id
            assert len(room.students) == 1


class TestDisconnect:
    """Tests for transport close handling."""

    def test_teacher_disconnect_closes_room(self, client: TestClient, service: RelayService) -> None:
        """Test that a teacher's socket closing notifies students and removes the room."""
        with client.websocket_connect(WS_PATH) as student:
            connect(student)
            with client.websocket_connect(WS_PATH) as teacher:
                teacher_id = connect(teacher)
                join(teacher, "ABC123", is_teacher=True)
                join(student, "ABC123", is_teacher=False)

            assert student.receive_json() == {"event": "teacher_disconnected"}
            assert teacher_id not in service.registry
            assert "ABC123" not in service.directory

    def test_student_disconnect_keeps_room(self, client: TestClient, service: RelayService) -> None:
        """Test that a student leaving by closing its socket only removes that student."""
        with client.websocket_connect(WS_PATH) as teacher:
            connect(teacher)
            join(teacher, "ABC123", is_teacher=True)
            with client.websocket_connect(WS_PATH) as student:
                student_id = connect(student)
                join(student, "ABC123", is_teacher=False)

            assert round_trip(teacher)["event"] == "room_validation"
            assert student_id not in service.registry
            room = service.directory.get("ABC123")
            assert room is not None
            assert student_id not in room.students
