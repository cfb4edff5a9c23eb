"""HTTP client for the MindSync API with a small query cache.

Reads go through :meth:`ApiClient.query` and are cached per path and query
parameters until a mutation marks them stale. Every mutation names the paths
it invalidates, so the next read of those paths goes back to the server.
The client is meant for one thread; when two requests for the same key race,
whichever finishes last is what the cache keeps.
"""
import logging

import requests

from .utils import serialize

logger = logging.getLogger(__name__)

# Marker for "nothing usable in the cache"; cached data may itself be None
MISSING = object()

COURSE_PATHS = ("/api/courses",)
TERM_PATHS = ("/api/terms", "/api/terms/active")
TASK_PATHS = ("/api/tasks", "/api/tasks/upcoming")
STUDY_SESSION_PATHS = ("/api/study-sessions", "/api/study-sessions/day")
GOAL_PATHS = ("/api/goals",)


class ApiError(Exception):
    """A non-2xx answer from the server."""

    def __init__(self, status, message):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class QueryCache:
    """
    Cached query results keyed by ``(path, params)``.

    ``params`` is normalized to a sorted tuple of ``(name, str(value))``
    pairs, leaving out ``None`` values, so ``{"days": 7}`` and
    ``{"days": "7"}`` share an entry while different paths never do.
    """

    def __init__(self):
        self._entries = {}

    @staticmethod
    def key(path, params=None):
        pairs = ((name, str(value)) for name, value in (params or {}).items() if value is not None)
        return path, tuple(sorted(pairs))

    def get(self, path, params=None):
        """Cached data, or ``MISSING`` if the key is absent or stale."""
        entry = self._entries.get(self.key(path, params))
        if entry is None or entry["stale"]:
            return MISSING
        return entry["data"]

    def set(self, path, params, data):
        self._entries[self.key(path, params)] = {"data": data, "stale": False}

    def is_stale(self, path, params=None):
        entry = self._entries.get(self.key(path, params))
        return entry is not None and entry["stale"]

    def invalidate(self, path):
        """Mark every entry for exactly ``path`` stale, whatever its params."""
        for (entry_path, _), entry in self._entries.items():
            if entry_path == path:
                entry["stale"] = True

    def invalidate_prefix(self, prefix):
        """Mark every entry whose path starts with ``prefix`` stale."""
        for (entry_path, _), entry in self._entries.items():
            if entry_path.startswith(prefix):
                entry["stale"] = True

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)


class ApiClient:
    """
    Talks to a MindSync server on behalf of one logged-in user.

    Args:
        base_url (str): Server origin, e.g. ``http://localhost:5000``.
        http: A ``requests.Session`` or an object with the same ``request``
            method. The session keeps the ``sessionId`` cookie between calls.
    """

    def __init__(self, base_url="", http=None):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.cache = QueryCache()

    # -------------------------------
    # Transport
    # -------------------------------

    def _send(self, method, path, params=None, payload=None):
        kwargs = {}
        if params:
            kwargs["params"] = {name: value for name, value in params.items() if value is not None}
        if payload is not None:
            kwargs["json"] = serialize(payload)
        return self.http.request(method, self.base_url + path, **kwargs)

    @staticmethod
    def _raise_for_status(response):
        if response.ok:
            return
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message")
        raise ApiError(response.status_code, message or response.text or str(response.status_code))

    @staticmethod
    def _body(response):
        if response.status_code == 204 or not response.text:
            return None
        return response.json()

    def query(self, path, params=None, on_unauthorized="throw"):
        """
        GET ``path``, answering from the cache when a fresh entry exists.

        Args:
            path (str): API path starting with ``/api``.
            params (dict): Query parameters; part of the cache key.
            on_unauthorized (str): ``"throw"`` raises :class:`ApiError` on
                401/403, ``"return_none"`` answers ``None`` instead.

        Returns:
            The decoded JSON body.
        """
        if on_unauthorized not in ("throw", "return_none"):
            raise ValueError(f"on_unauthorized must be 'throw' or 'return_none', not {on_unauthorized!r}")

        cached = self.cache.get(path, params)
        if cached is not MISSING:
            return cached

        logger.debug("Fetching %s %s", path, params or "")
        response = self._send("GET", path, params=params)
        if on_unauthorized == "return_none" and response.status_code in (401, 403):
            self.cache.set(path, params, None)
            return None
        self._raise_for_status(response)

        data = self._body(response)
        self.cache.set(path, params, data)
        return data

    def mutate(self, method, path, payload=None, invalidates=()):
        """
        Send a write request, then mark ``invalidates`` stale.

        The cache is only touched when the server accepted the write.
        """
        response = self._send(method, path, payload=payload)
        self._raise_for_status(response)
        for stale_path in invalidates:
            self.cache.invalidate(stale_path)
        return self._body(response)

    # -------------------------------
    # Authentication
    # -------------------------------

    def register(self, username, email, password, full_name):
        user = self.mutate(
            "POST",
            "/api/auth/register",
            {"username": username, "email": email, "password": password, "full_name": full_name},
        )
        self.cache.clear()
        return user

    def login(self, username, password):
        user = self.mutate("POST", "/api/auth/login", {"username": username, "password": password})
        self.cache.clear()
        return user

    def logout(self):
        try:
            return self.mutate("POST", "/api/auth/logout")
        finally:
            self.cache.clear()

    def session(self):
        """The logged-in user, or None."""
        return self.query("/api/auth/session", on_unauthorized="return_none")

    # -------------------------------
    # Courses and terms
    # -------------------------------

    def courses(self):
        return self.query("/api/courses")

    def course(self, course_id):
        return self.query(f"/api/courses/{course_id}")

    def create_course(self, **fields):
        return self.mutate("POST", "/api/courses", fields, invalidates=COURSE_PATHS)

    def update_course(self, course_id, **changes):
        result = self.mutate("PUT", f"/api/courses/{course_id}", changes, invalidates=COURSE_PATHS)
        self.cache.invalidate(f"/api/courses/{course_id}")
        return result

    def delete_course(self, course_id):
        self.mutate("DELETE", f"/api/courses/{course_id}", invalidates=COURSE_PATHS)
        self.cache.invalidate(f"/api/courses/{course_id}")
        self.cache.invalidate(f"/api/tasks/course/{course_id}")

    def terms(self):
        return self.query("/api/terms")

    def active_term(self):
        """The term running now, or None when there is none."""
        try:
            return self.query("/api/terms/active")
        except ApiError as e:
            if e.status == 404:
                return None
            raise

    def create_term(self, **fields):
        return self.mutate("POST", "/api/terms", fields, invalidates=TERM_PATHS)

    def update_term(self, term_id, **changes):
        return self.mutate("PUT", f"/api/terms/{term_id}", changes, invalidates=TERM_PATHS)

    def delete_term(self, term_id):
        self.mutate("DELETE", f"/api/terms/{term_id}", invalidates=TERM_PATHS)

    # -------------------------------
    # Tasks
    # -------------------------------

    def tasks(self, task_type=None):
        return self.query("/api/tasks", {"type": task_type})

    def tasks_for_course(self, course_id):
        return self.query(f"/api/tasks/course/{course_id}")

    def upcoming_tasks(self, days=None):
        return self.query("/api/tasks/upcoming", {"days": days})

    def _task_write(self, method, path, payload=None):
        result = self.mutate(method, path, payload, invalidates=TASK_PATHS)
        # Per-type, per-course and single-task reads
        self.cache.invalidate_prefix("/api/tasks/")
        return result

    def create_task(self, **fields):
        return self._task_write("POST", "/api/tasks", fields)

    def update_task(self, task_id, **changes):
        return self._task_write("PUT", f"/api/tasks/{task_id}", changes)

    def toggle_task(self, task):
        """Flip a task between complete and incomplete."""
        status = "incomplete" if task["status"] == "complete" else "complete"
        return self.update_task(task["id"], status=status)

    def delete_task(self, task_id):
        self._task_write("DELETE", f"/api/tasks/{task_id}")

    # -------------------------------
    # Study sessions
    # -------------------------------

    def study_sessions(self):
        return self.query("/api/study-sessions")

    def study_sessions_for_day(self, day):
        """Sessions starting on ``day`` (a date, datetime or ISO string)."""
        if hasattr(day, "isoformat"):
            day = day.isoformat()
        return self.query("/api/study-sessions/day", {"date": day})

    def create_study_session(self, **fields):
        return self.mutate("POST", "/api/study-sessions", fields, invalidates=STUDY_SESSION_PATHS)

    def update_study_session(self, session_id, **changes):
        return self.mutate(
            "PUT", f"/api/study-sessions/{session_id}", changes, invalidates=STUDY_SESSION_PATHS
        )

    def delete_study_session(self, session_id):
        self.mutate("DELETE", f"/api/study-sessions/{session_id}", invalidates=STUDY_SESSION_PATHS)

    # -------------------------------
    # Goals
    # -------------------------------

    def goals(self):
        return self.query("/api/goals")

    def create_goal(self, **fields):
        return self.mutate("POST", "/api/goals", fields, invalidates=GOAL_PATHS)

    def toggle_goal(self, goal):
        return self.mutate(
            "PUT", f"/api/goals/{goal['id']}", {"completed": not goal["completed"]}, invalidates=GOAL_PATHS
        )

    def delete_goal(self, goal_id):
        self.mutate("DELETE", f"/api/goals/{goal_id}", invalidates=GOAL_PATHS)

    # -------------------------------
    # Settings and statistics
    # -------------------------------

    def settings(self):
        return self.query("/api/settings")

    def update_settings(self, **changes):
        return self.mutate("PUT", "/api/settings", changes, invalidates=("/api/settings",))

    def user_stats(self):
        return self.query("/api/user-stats")

    def update_user_stats(self, **changes):
        return self.mutate("PUT", "/api/user-stats", changes, invalidates=("/api/user-stats",))
