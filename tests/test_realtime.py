from fastapi.testclient import TestClient

from parlour.realtime.broadcaster import ADMIN_ROOM


def _punch(client: TestClient, employee_id, action: str):
    return client.post(
        "/api/v1/attendance/punch",
        json={"employeeId": str(employee_id), "action": action},
    )


def test_ping_and_unknown_events(app) -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("ping")
            assert ws.receive_json() == {"event": "pong"}

            ws.send_text('{"event": "dance"}')
            message = ws.receive_json()
            assert message["event"] == "error"


def test_admin_room_receives_attendance_updates(app, employee) -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "join_admin"})
            assert ws.receive_json() == {"event": "admin_joined"}
            assert app.state.broadcaster.room_size(ADMIN_ROOM) == 1

            response = _punch(client, employee.id, "punch_in")
            assert response.status_code == 201

            message = ws.receive_json()
            assert message["event"] == "attendance_update"
            assert message["data"]["attendance"]["id"] == response.json()["attendance"]["id"]
            assert message["data"]["attendance"]["action"] == "punch_in"
            assert message["data"]["employee"]["id"] == str(employee.id)
            assert message["data"]["employee"]["isCheckedIn"] is True

        assert app.state.broadcaster.room_size(ADMIN_ROOM) == 0
        assert len(app.state.broadcaster.connections) == 0


def test_rejected_punch_and_left_clients_get_nothing(app, employee) -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("join_admin")
            assert ws.receive_json() == {"event": "admin_joined"}

            # Rejected: nothing is broadcast, so the next message is the pong
            assert _punch(client, employee.id, "punch_out").status_code == 400
            ws.send_text("ping")
            assert ws.receive_json() == {"event": "pong"}

            ws.send_text("leave_admin")
            assert ws.receive_json() == {"event": "admin_left"}
            assert _punch(client, employee.id, "punch_in").status_code == 201
            ws.send_text("ping")
            assert ws.receive_json() == {"event": "pong"}


def test_connection_without_join_gets_nothing(app, employee) -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as watcher, client.websocket_connect("/ws") as admin:
            admin.send_text("join_admin")
            assert admin.receive_json() == {"event": "admin_joined"}

            assert _punch(client, employee.id, "punch_in").status_code == 201
            assert admin.receive_json()["event"] == "attendance_update"

            watcher.send_text("ping")
            assert watcher.receive_json() == {"event": "pong"}


def test_binary_frame_gets_error_and_connection_survives(app) -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_bytes(b"join_admin")
            message = ws.receive_json()
            assert message["event"] == "error"
            assert message["data"]["detail"] == "Control messages must be text frames"

            ws.send_text("ping")
            assert ws.receive_json() == {"event": "pong"}
