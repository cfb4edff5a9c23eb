from datetime import timedelta

import pytest

from conftest import register, PASSWORD
from mindsync.dates import to_dt, to_iso, utcnow


def create_task(client, due_in=None, **fields):
    payload = {"name": "Problem set", "taskType": "assignment", **fields}
    if due_in is not None:
        payload["dueDate"] = to_iso(utcnow() + due_in)
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()

# ----------------------------------------------------
#                  CRUD
# ----------------------------------------------------

def test_create_task_defaults_and_owner(alice, bob):
    task = create_task(alice, userId=bob.user["id"])
    assert task["userId"] == alice.user["id"]
    assert task["priority"] == "medium"
    assert task["status"] == "incomplete"
    assert task["dueDate"] is None


def test_task_type_is_validated(alice):
    response = alice.post("/api/tasks", json={"name": "Essay", "taskType": "essay"})
    assert response.status_code == 400
    assert '"taskType"' in response.get_json()["message"]


def test_toggle_status(alice):
    task = create_task(alice)
    response = alice.put(f"/api/tasks/{task['id']}", json={"status": "complete"})
    assert response.status_code == 200
    assert response.get_json()["status"] == "complete"
    assert response.get_json()["name"] == "Problem set"


def test_delete_task(alice, bob):
    task = create_task(alice)
    assert bob.delete(f"/api/tasks/{task['id']}").status_code == 403
    assert alice.delete(f"/api/tasks/{task['id']}").status_code == 204
    assert alice.get(f"/api/tasks/{task['id']}").status_code == 404


def test_task_course_must_be_owned(alice, bob):
    course = bob.post("/api/courses", json={"name": "Bob's"}).get_json()

    response = alice.post("/api/tasks", json={
        "name": "Sneaky", "taskType": "quiz", "courseId": course["id"],
    })
    assert response.status_code == 403
    assert response.get_json()["message"] == "Invalid course ID"

    task = create_task(alice)
    response = alice.put(f"/api/tasks/{task['id']}", json={"courseId": course["id"]})
    assert response.status_code == 403
    assert response.get_json()["message"] == "Invalid course ID"


def test_task_course_must_exist(alice):
    response = alice.post("/api/tasks", json={"name": "Orphan", "taskType": "quiz", "courseId": 9999})
    assert response.status_code == 403

# ----------------------------------------------------
#                  FILTERS
# ----------------------------------------------------

def test_filter_by_type(alice):
    create_task(alice, name="HW", taskType="assignment")
    create_task(alice, name="Midterm", taskType="exam")

    by_route = alice.get("/api/tasks/type/exam").get_json()
    by_query = alice.get("/api/tasks?type=exam").get_json()
    assert [t["name"] for t in by_route] == ["Midterm"]
    assert by_query == by_route

    assert alice.get("/api/tasks/type/essay").status_code == 400


def test_tasks_for_course(alice, bob):
    course = alice.post("/api/courses", json={"name": "Physics"}).get_json()
    create_task(alice, name="Lab report", courseId=course["id"])
    create_task(alice, name="Unrelated")

    response = alice.get(f"/api/tasks/course/{course['id']}")
    assert response.status_code == 200
    assert [t["name"] for t in response.get_json()] == ["Lab report"]

    assert alice.get("/api/tasks/course/9999").status_code == 404
    assert bob.get(f"/api/tasks/course/{course['id']}").status_code == 403


def test_upcoming_window_and_order(alice, bob):
    create_task(alice, due_in=timedelta(days=3), name="in 3 days")
    create_task(alice, due_in=timedelta(days=-1), name="yesterday")
    create_task(alice, due_in=timedelta(days=8), name="in 8 days")
    create_task(alice, due_in=timedelta(days=1), name="tomorrow")
    create_task(alice, name="no due date")
    create_task(bob, due_in=timedelta(days=2), name="not mine")

    upcoming = alice.get("/api/tasks/upcoming").get_json()
    assert [t["name"] for t in upcoming] == ["tomorrow", "in 3 days"]

    due_dates = [to_dt(t["dueDate"]) for t in upcoming]
    assert due_dates == sorted(due_dates)


def test_upcoming_days_parameter(alice):
    create_task(alice, due_in=timedelta(days=1), name="tomorrow")
    create_task(alice, due_in=timedelta(days=8), name="in 8 days")

    names = [t["name"] for t in alice.get("/api/tasks/upcoming?days=10").get_json()]
    assert names == ["tomorrow", "in 8 days"]

    assert alice.get("/api/tasks/upcoming?days=0").get_json() == []


@pytest.mark.parametrize("days", ["abc", "1.5", "-1"])
def test_upcoming_rejects_bad_days(alice, days):
    response = alice.get(f"/api/tasks/upcoming?days={days}")
    assert response.status_code == 400

# ----------------------------------------------------
#                  END TO END
# ----------------------------------------------------

def test_register_login_course_task_upcoming(app):
    web = app.test_client()
    assert register(web, "dana").status_code == 201
    assert web.post("/api/auth/logout").status_code == 200

    response = web.post("/api/auth/login", json={"username": "dana", "password": PASSWORD})
    assert response.status_code == 200

    course = web.post("/api/courses", json={"name": "Chemistry"}).get_json()
    task = create_task(web, due_in=timedelta(days=1), name="Titration lab", courseId=course["id"])

    upcoming = web.get("/api/tasks/upcoming").get_json()
    assert [t["id"] for t in upcoming] == [task["id"]]
    assert upcoming[0]["courseId"] == course["id"]


def test_upcoming_rejects_window_past_calendar_end(alice):
    response = alice.get("/api/tasks/upcoming?days=3000000")
    assert response.status_code == 400
    assert response.get_json()["message"] == "days is too large"


@pytest.mark.parametrize("due_date", ["99999999999999999999", "not a date", "2026-13-45"])
def test_malformed_due_date_is_rejected(alice, due_date):
    response = alice.post("/api/tasks", json={
        "name": "Broken", "taskType": "exam", "dueDate": due_date,
    })
    assert response.status_code == 400
    assert response.get_json()["message"].startswith("Validation error:")
    assert '"dueDate"' in response.get_json()["message"]
    assert alice.get("/api/tasks").get_json() == []
