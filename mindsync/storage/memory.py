"""Process-local storage kept in dicts.

Meant for development and tests: nothing survives a restart and nothing is
shared between worker processes. Records are copied on the way in and out so
callers never hold a reference into the store.
"""
import itertools
from collections import defaultdict

from ..consts import RESOURCES, RESOURCE_DEFAULTS, DEFAULT_SETTINGS, DEFAULT_USER_STATS
from ..dates import utcnow
from .base import Storage


def _copy(record):
    return dict(record) if record is not None else None


class MemoryStorage(Storage):
    name = "memory"

    def __init__(self):
        self._users = {}
        self._rows = {resource: {} for resource in RESOURCES}
        self._settings = {}     # user_id -> record
        self._user_stats = {}   # user_id -> record
        self._ids = defaultdict(lambda: itertools.count(1))

    def _owned(self, resource, user_id):
        return [row for row in self._rows[resource].values() if row["user_id"] == user_id]

    # --- users ---

    def get_user(self, user_id):
        return _copy(self._users.get(user_id))

    def get_user_by_username(self, username):
        return _copy(next((u for u in self._users.values() if u["username"] == username), None))

    def get_user_by_email(self, email):
        return _copy(next((u for u in self._users.values() if u["email"] == email), None))

    def create_user(self, data):
        user = dict(data, id=next(self._ids["users"]), created_at=utcnow())
        self._users[user["id"]] = user
        return _copy(user)

    # --- owned resources ---

    def list(self, resource, user_id):
        return [_copy(row) for row in self._owned(resource, user_id)]

    def get(self, resource, record_id):
        return _copy(self._rows[resource].get(record_id))

    def create(self, resource, data):
        row = dict(RESOURCE_DEFAULTS[resource])
        row.update(data)
        row["id"] = next(self._ids[resource])
        self._rows[resource][row["id"]] = row
        return _copy(row)

    def update(self, resource, record_id, changes):
        row = self._rows[resource].get(record_id)
        if row is None:
            return None
        row.update(changes)
        return _copy(row)

    def delete(self, resource, record_id):
        return self._rows[resource].pop(record_id, None) is not None

    # --- resource-specific queries ---

    def get_active_term(self, user_id, now):
        for term in self._owned("terms", user_id):
            if term["start_date"] <= now <= term["end_date"]:
                return _copy(term)
        return None

    def get_tasks_by_type(self, user_id, task_type):
        return [_copy(t) for t in self._owned("tasks", user_id) if t["task_type"] == task_type]

    def get_tasks_by_course(self, user_id, course_id):
        return [_copy(t) for t in self._owned("tasks", user_id) if t["course_id"] == course_id]

    def get_tasks_due_between(self, user_id, start, end):
        tasks = [
            t for t in self._owned("tasks", user_id)
            if t["due_date"] is not None and start <= t["due_date"] <= end
        ]
        tasks.sort(key=lambda t: (t["due_date"], t["id"]))
        return [_copy(t) for t in tasks]

    def get_study_sessions_between(self, user_id, start, end):
        sessions = [
            s for s in self._owned("study_sessions", user_id)
            if start <= s["start_time"] <= end
        ]
        sessions.sort(key=lambda s: (s["start_time"], s["id"]))
        return [_copy(s) for s in sessions]

    # --- settings and statistics ---

    def _create_single(self, table, kind, defaults, user_id, data):
        record = dict(defaults)
        record.update(data or {})
        record.update(id=next(self._ids[kind]), user_id=user_id)
        table[user_id] = record
        return _copy(record)

    def get_settings(self, user_id):
        return _copy(self._settings.get(user_id))

    def create_settings(self, user_id, data=None):
        return self._create_single(self._settings, "settings", DEFAULT_SETTINGS, user_id, data)

    def update_settings(self, user_id, changes):
        settings = self._settings.get(user_id)
        if settings is None:
            return None
        settings.update(changes)
        return _copy(settings)

    def get_user_stats(self, user_id):
        return _copy(self._user_stats.get(user_id))

    def create_user_stats(self, user_id, data=None):
        return self._create_single(self._user_stats, "user_stats", DEFAULT_USER_STATS, user_id, data)

    def update_user_stats(self, user_id, changes):
        stats = self._user_stats.get(user_id)
        if stats is None:
            return None
        stats.update(changes)
        return _copy(stats)
