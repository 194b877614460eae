from datetime import timedelta

from fastapi.testclient import TestClient

from tests.utils.auth import auth_headers
from tests.utils.session import add_attendance, create_random_session, waitlist_entries


def test_join_waitlist(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)

    first = client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_a"))
    second = client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_b"))

    assert first.status_code == 201
    assert second.status_code == 201
    content = second.json()
    assert content["success"] is True
    assert content["message"] == "You're #2 on the waitlist"
    assert content["position"] == 2
    assert content["waitlist"]["user_id"] == "user_b"
    assert content["waitlist"]["notified"] is False


def test_fail_to_join_waitlist_twice(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)
    headers = auth_headers("user_a")
    assert client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=headers).status_code == 201

    response = client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=headers)

    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_ON_WAITLIST"


def test_fail_to_join_waitlist_of_unknown_session(client: TestClient) -> None:
    response = client.post("/api/v1/sessions/ses_missing/waitlist", headers=auth_headers("user_a"))

    assert response.status_code == 404
    assert response.json()["code"] == "SESSION_NOT_FOUND"


def test_join_waitlist_requires_authentication(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)

    response = client.post(f"/api/v1/sessions/{session_id}/waitlist")

    assert response.status_code == 401


def test_leave_waitlist(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)
    headers = auth_headers("user_a")
    client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=headers)

    response = client.delete(f"/api/v1/sessions/{session_id}/waitlist", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Removed from waitlist"}
    assert waitlist_entries(session_factory, session_id) == []


def test_fail_to_leave_waitlist_when_not_on_it(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)

    response = client.delete(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_a"))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_ON_WAITLIST"


def test_get_waitlist_with_position(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)
    for user_id in ("user_a", "user_b", "user_c"):
        client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers(user_id))

    response = client.get(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_b"))

    assert response.status_code == 200
    content = response.json()
    assert content["count"] == 3
    assert content["userPosition"] == 2
    assert [e["user_id"] for e in content["waitlist"]] == ["user_a", "user_b", "user_c"]
    assert [e["position"] for e in content["waitlist"]] == [1, 2, 3]


def test_get_waitlist_anonymously(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)
    client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_a"))

    response = client.get(f"/api/v1/sessions/{session_id}/waitlist")

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["userPosition"] is None


def test_get_waitlist_of_unknown_session(client: TestClient) -> None:
    response = client.get("/api/v1/sessions/ses_missing/waitlist")

    assert response.status_code == 404


def test_fail_to_join_waitlist_of_started_session(client: TestClient, session_factory) -> None:
    session_id = create_random_session(
        session_factory, max_participants=1, starts_in=-timedelta(hours=1)
    )

    response = client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_a"))

    assert response.status_code == 400
    assert response.json()["code"] == "SESSION_PAST"
    assert waitlist_entries(session_factory, session_id) == []


def test_fail_to_join_waitlist_while_attending(client: TestClient, session_factory) -> None:
    session_id = create_random_session(session_factory, max_participants=1)
    add_attendance(session_factory, session_id, "user_a")

    response = client.post(f"/api/v1/sessions/{session_id}/waitlist", headers=auth_headers("user_a"))

    assert response.status_code == 400
    assert response.json() == {
        "detail": "You are already attending this session",
        "code": "ALREADY_ATTENDING",
    }
