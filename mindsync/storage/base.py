"""The storage interface every backend implements.

Records cross this boundary as plain dicts keyed by snake_case column name.
Datetimes are naive UTC. Lookups that find nothing return None; ``delete``
returns whether a row was removed.
"""
from abc import ABC, abstractmethod
from datetime import timedelta

from ..consts import UPCOMING_TASK_DAYS
from ..dates import day_bounds, utcnow


class Storage(ABC):
    name = None

    # --- users ---

    @abstractmethod
    def get_user(self, user_id):
        """Return a user by primary key."""

    @abstractmethod
    def get_user_by_username(self, username):
        pass

    @abstractmethod
    def get_user_by_email(self, email):
        pass

    @abstractmethod
    def create_user(self, data):
        """Persist a new user; ``created_at`` is stamped by the backend."""

    # --- owned resources: courses, terms, tasks, study_sessions, goals ---

    @abstractmethod
    def list(self, resource, user_id):
        """All rows of ``resource`` owned by ``user_id``."""

    @abstractmethod
    def get(self, resource, record_id):
        pass

    @abstractmethod
    def create(self, resource, data):
        """Insert a row, filling column defaults for missing fields."""

    @abstractmethod
    def update(self, resource, record_id, changes):
        """Merge ``changes`` over the row and return it, or None if absent."""

    @abstractmethod
    def delete(self, resource, record_id):
        pass

    # --- resource-specific queries ---

    @abstractmethod
    def get_active_term(self, user_id, now):
        """First term of the user whose [start_date, end_date] contains ``now``."""

    @abstractmethod
    def get_tasks_by_type(self, user_id, task_type):
        pass

    @abstractmethod
    def get_tasks_by_course(self, user_id, course_id):
        pass

    @abstractmethod
    def get_tasks_due_between(self, user_id, start, end):
        """Tasks due in [start, end], ascending by due date."""

    @abstractmethod
    def get_study_sessions_between(self, user_id, start, end):
        """Study sessions starting in [start, end], ascending by start time."""

    def get_upcoming_tasks(self, user_id, days=UPCOMING_TASK_DAYS, now=None):
        now = now or utcnow()
        return self.get_tasks_due_between(user_id, now, now + timedelta(days=days))

    def get_study_sessions_for_day(self, user_id, day):
        start, end = day_bounds(day)
        return self.get_study_sessions_between(user_id, start, end)

    # --- one-row-per-user records: settings, user_stats ---

    @abstractmethod
    def get_settings(self, user_id):
        pass

    @abstractmethod
    def create_settings(self, user_id, data=None):
        pass

    @abstractmethod
    def update_settings(self, user_id, changes):
        pass

    @abstractmethod
    def get_user_stats(self, user_id):
        pass

    @abstractmethod
    def create_user_stats(self, user_id, data=None):
        pass

    @abstractmethod
    def update_user_stats(self, user_id, changes):
        pass
