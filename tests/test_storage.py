from datetime import datetime, timedelta

import pytest

from mindsync.storage import BACKENDS, init_storage
from mindsync.storage.database import DatabaseStorage
from mindsync.storage.memory import MemoryStorage


@pytest.fixture(params=["database", "memory"])
def storage(request, db_app):
    """Every contract test runs against both backends."""
    with db_app.app_context():
        if request.param == "database":
            yield DatabaseStorage()
        else:
            yield MemoryStorage()


@pytest.fixture
def user(storage):
    return storage.create_user({
        "username": "alice", "email": "alice@example.com", "full_name": "Alice", "password": "x.y",
    })


NOW = datetime(2026, 3, 10, 12, 0, 0)

# ----------------------------------------------------
#                  USERS AND CRUD
# ----------------------------------------------------

def test_user_lookup(storage, user):
    assert user["id"] is not None
    assert isinstance(user["created_at"], datetime)
    assert storage.get_user(user["id"])["username"] == "alice"
    assert storage.get_user_by_username("alice")["id"] == user["id"]
    assert storage.get_user_by_email("alice@example.com")["id"] == user["id"]
    assert storage.get_user(9999) is None
    assert storage.get_user_by_username("nobody") is None


def test_create_applies_defaults(storage, user):
    task = storage.create("tasks", {"user_id": user["id"], "name": "HW", "task_type": "quiz"})
    assert task["priority"] == "medium"
    assert task["status"] == "incomplete"
    assert task["course_id"] is None


def test_update_merges_and_delete_removes(storage, user):
    goal = storage.create("goals", {"user_id": user["id"], "title": "Read"})
    updated = storage.update("goals", goal["id"], {"completed": True})
    assert updated["completed"] is True
    assert updated["title"] == "Read"

    assert storage.delete("goals", goal["id"]) is True
    assert storage.get("goals", goal["id"]) is None
    assert storage.delete("goals", goal["id"]) is False
    assert storage.update("goals", goal["id"], {"completed": False}) is None


def test_records_are_copies(storage, user):
    course = storage.create("courses", {"user_id": user["id"], "name": "Art"})
    course["name"] = "Changed locally"
    assert storage.get("courses", course["id"])["name"] == "Art"


def test_list_is_scoped_to_user(storage, user):
    other = storage.create_user({
        "username": "bob", "email": "bob@example.com", "full_name": "Bob", "password": "x.y",
    })
    storage.create("courses", {"user_id": user["id"], "name": "Mine"})
    storage.create("courses", {"user_id": other["id"], "name": "Theirs"})
    assert [c["name"] for c in storage.list("courses", user["id"])] == ["Mine"]

# ----------------------------------------------------
#                  QUERIES
# ----------------------------------------------------

def test_active_term_first_match(storage, user):
    storage.create("terms", {
        "user_id": user["id"], "name": "Past",
        "start_date": NOW - timedelta(days=100), "end_date": NOW - timedelta(days=1),
    })
    first = storage.create("terms", {
        "user_id": user["id"], "name": "A",
        "start_date": NOW - timedelta(days=10), "end_date": NOW + timedelta(days=10),
    })
    storage.create("terms", {
        "user_id": user["id"], "name": "B",
        "start_date": NOW - timedelta(days=5), "end_date": NOW + timedelta(days=5),
    })
    assert storage.get_active_term(user["id"], NOW)["id"] == first["id"]
    assert storage.get_active_term(user["id"], NOW + timedelta(days=50)) is None


def test_upcoming_tasks(storage, user):
    def task(name, offset):
        return storage.create("tasks", {
            "user_id": user["id"], "name": name, "task_type": "assignment",
            "due_date": NOW + offset if offset is not None else None,
        })

    task("late", timedelta(days=7, seconds=1))
    task("edge", timedelta(days=7))
    task("soon", timedelta(hours=1))
    task("now", timedelta(0))
    task("past", timedelta(seconds=-1))
    task("undated", None)

    names = [t["name"] for t in storage.get_upcoming_tasks(user["id"], now=NOW)]
    assert names == ["now", "soon", "edge"]
    assert [t["name"] for t in storage.get_upcoming_tasks(user["id"], days=0, now=NOW)] == ["now"]


def test_tasks_by_type_and_course(storage, user):
    storage.create("tasks", {"user_id": user["id"], "name": "A", "task_type": "exam", "course_id": 1})
    storage.create("tasks", {"user_id": user["id"], "name": "B", "task_type": "quiz", "course_id": 2})

    assert [t["name"] for t in storage.get_tasks_by_type(user["id"], "exam")] == ["A"]
    assert [t["name"] for t in storage.get_tasks_by_course(user["id"], 2)] == ["B"]
    assert storage.get_tasks_by_type(user["id"] + 1, "exam") == []


def test_study_sessions_for_day(storage, user):
    def session(title, start):
        storage.create("study_sessions", {
            "user_id": user["id"], "title": title, "start_time": start, "end_time": start,
        })

    midnight = datetime(2026, 3, 10)
    session("last", midnight + timedelta(days=1, milliseconds=-1))
    session("first", midnight)
    session("next day", midnight + timedelta(days=1))
    session("day before", midnight - timedelta(milliseconds=1))

    titles = [s["title"] for s in storage.get_study_sessions_for_day(user["id"], "2026-03-10T18:00:00Z")]
    assert titles == ["first", "last"]

    with pytest.raises(ValueError):
        storage.get_study_sessions_for_day(user["id"], "garbage")

# ----------------------------------------------------
#                  SETTINGS AND STATS
# ----------------------------------------------------

def test_settings_rows(storage, user):
    assert storage.get_settings(user["id"]) is None
    assert storage.update_settings(user["id"], {"dark_mode": True}) is None

    created = storage.create_settings(user["id"])
    assert created["dark_mode"] is False
    assert created["email_notifications"] is True

    updated = storage.update_settings(user["id"], {"dark_mode": True})
    assert updated["dark_mode"] is True
    assert storage.get_settings(user["id"])["dark_mode"] is True


def test_user_stats_rows(storage, user):
    assert storage.get_user_stats(user["id"]) is None

    created = storage.create_user_stats(user["id"], {"streak_days": 2})
    assert created["streak_days"] == 2
    assert created["weekly_study_goal"] == 10

    updated = storage.update_user_stats(user["id"], {"weekly_hours_studied": 5})
    assert updated["weekly_hours_studied"] == 5
    assert updated["streak_days"] == 2

# ----------------------------------------------------
#                  BACKEND SELECTION
# ----------------------------------------------------

def test_backends_are_registered():
    assert set(BACKENDS) == {"database", "memory"}


def test_unknown_backend_is_rejected(db_app):
    db_app.config["STORAGE_BACKEND"] = "redis"
    with pytest.raises(RuntimeError):
        init_storage(db_app)
