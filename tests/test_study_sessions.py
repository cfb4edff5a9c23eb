import pytest


def create_session(client, start, end=None, **fields):
    payload = {"title": "Reading", "startTime": start, "endTime": end or start, **fields}
    response = client.post("/api/study-sessions", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_create_session_stamps_owner(alice, bob):
    session = create_session(
        alice, "2026-03-10T09:00:00Z", "2026-03-10T10:30:00Z", userId=bob.user["id"]
    )
    assert session["userId"] == alice.user["id"]
    assert session["completed"] is False
    assert session["startTime"] == "2026-03-10T09:00:00.000Z"


def test_end_before_start_is_stored_as_given(alice):
    session = create_session(alice, "2026-03-10T10:00:00Z", "2026-03-10T09:00:00Z")
    assert session["endTime"] == "2026-03-10T09:00:00.000Z"


def test_session_requires_times(alice):
    response = alice.post("/api/study-sessions", json={"title": "No times"})
    assert response.status_code == 400


@pytest.mark.parametrize("path", ["/api/study-sessions/day", "/api/study-sessions"])
def test_day_bounds(alice, bob, path):
    create_session(alice, "2026-03-10T23:59:59.999Z", title="last millisecond")
    create_session(alice, "2026-03-11T00:00:00.000Z", title="next midnight")
    create_session(alice, "2026-03-10T12:00:00.000Z", title="noon")
    create_session(alice, "2026-03-10T00:00:00.000Z", title="midnight")
    create_session(alice, "2026-03-09T23:59:59.999Z", title="day before")
    create_session(bob, "2026-03-10T12:00:00.000Z", title="not mine")

    response = alice.get(f"{path}?date=2026-03-10T15:30:00.000Z")
    assert response.status_code == 200
    titles = [s["title"] for s in response.get_json()]
    assert titles == ["midnight", "noon", "last millisecond"]


def test_day_accepts_plain_date(alice):
    create_session(alice, "2026-03-10T08:00:00Z")
    response = alice.get("/api/study-sessions/day?date=2026-03-10")
    assert len(response.get_json()) == 1


def test_day_rejects_garbage(alice):
    response = alice.get("/api/study-sessions/day?date=not-a-date")
    assert response.status_code == 400


def test_list_without_date_returns_everything(alice):
    create_session(alice, "2026-03-10T08:00:00Z")
    create_session(alice, "2026-04-10T08:00:00Z")
    assert len(alice.get("/api/study-sessions").get_json()) == 2


def test_update_and_ownership(alice, bob):
    session = create_session(alice, "2026-03-10T08:00:00Z")

    response = alice.put(f"/api/study-sessions/{session['id']}", json={"completed": True})
    assert response.status_code == 200
    assert response.get_json()["completed"] is True

    assert bob.put(f"/api/study-sessions/{session['id']}", json={"completed": False}).status_code == 403
    assert bob.get(f"/api/study-sessions/{session['id']}").status_code == 403
    assert alice.get("/api/study-sessions/9999").status_code == 404
    assert alice.delete(f"/api/study-sessions/{session['id']}").status_code == 204
