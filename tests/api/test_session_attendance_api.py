from datetime import timedelta

from fastapi.testclient import TestClient

from tests.utils.auth import auth_headers
from tests.utils.session import add_attendance, attendance_statuses, create_random_session, notifications


def _finished_session(session_factory) -> str:
    session_id = create_random_session(
        session_factory, max_participants=5, starts_in=-timedelta(hours=2), created_by="host_1"
    )
    add_attendance(session_factory, session_id, "user_a")
    add_attendance(session_factory, session_id, "user_b")
    return session_id


def test_host_gets_attendance_roster(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.get(f"/api/v1/sessions/{session_id}/attendance", headers=auth_headers("host_1"))

    assert response.status_code == 200
    content = response.json()
    assert content["session_id"] == session_id
    assert content["is_past"] is True
    assert sorted(p["user_id"] for p in content["participants"]) == ["user_a", "user_b"]


def test_participant_cannot_see_roster(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.get(f"/api/v1/sessions/{session_id}/attendance", headers=auth_headers("user_a"))

    assert response.status_code == 403
    assert response.json()["code"] == "NOT_SESSION_HOST"


def test_host_marks_attendance(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.post(
        f"/api/v1/sessions/{session_id}/attendance",
        headers=auth_headers("host_1"),
        json={"attendees": [
            {"user_id": "user_a", "attended": True},
            {"user_id": "user_b", "attended": False},
        ]},
    )

    assert response.status_code == 200
    content = response.json()
    assert content["message"] == "Attendance marked successfully"
    assert {u["user_id"]: u["status"] for u in content["updates"]} == {
        "user_a": "ATTENDED",
        "user_b": "NO_SHOW",
    }
    assert attendance_statuses(session_factory, session_id) == {
        "user_a": "ATTENDED",
        "user_b": "NO_SHOW",
    }
    assert [n.user_id for n in notifications(session_factory)] == ["user_b"]


def test_fail_to_mark_attendance_twice(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)
    url = f"/api/v1/sessions/{session_id}/attendance"
    body = {"attendees": [{"user_id": "user_a", "attended": True}]}
    assert client.post(url, headers=auth_headers("host_1"), json=body).status_code == 200

    response = client.post(url, headers=auth_headers("host_1"), json=body)

    assert response.status_code == 400
    assert response.json()["code"] == "ATTENDANCE_ALREADY_MARKED"


def test_fail_to_mark_future_session(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, created_by="host_1")
    add_attendance(session_factory, session_id, "user_a")

    response = client.post(
        f"/api/v1/sessions/{session_id}/attendance",
        headers=auth_headers("host_1"),
        json={"attendees": [{"user_id": "user_a", "attended": True}]},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "SESSION_NOT_STARTED"


def test_fail_to_mark_unknown_participant(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.post(
        f"/api/v1/sessions/{session_id}/attendance",
        headers=auth_headers("host_1"),
        json={"attendees": [{"user_id": "stranger", "attended": True}]},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "NOT_PARTICIPANT"


def test_mark_attendance_requires_attendees(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.post(
        f"/api/v1/sessions/{session_id}/attendance",
        headers=auth_headers("host_1"),
        json={"attendees": []},
    )

    assert response.status_code == 422


def test_fail_to_mark_same_attendee_twice_in_one_request(client: TestClient, session_factory) -> None:
    session_id = _finished_session(session_factory)

    response = client.post(
        f"/api/v1/sessions/{session_id}/attendance",
        headers=auth_headers("host_1"),
        json={"attendees": [
            {"user_id": "user_b", "attended": False},
            {"user_id": "user_b", "attended": False},
        ]},
    )

    assert response.status_code == 422
    assert attendance_statuses(session_factory, session_id)["user_b"] == "REGISTERED"
    assert notifications(session_factory) == []
