"""SQLAlchemy-backed storage.

Each method issues its own statements and commits; nothing spans more than
one call.
"""
from ..extensions import db
from ..models import User, Course, Term, Task, StudySession, Goal, Settings, UserStats
from .base import Storage

MODELS = {
    "courses": Course,
    "terms": Term,
    "tasks": Task,
    "study_sessions": StudySession,
    "goals": Goal,
}


def _as_dict(row):
    return row.to_dict() if row is not None else None


class DatabaseStorage(Storage):
    name = "database"

    # --- users ---

    def get_user(self, user_id):
        return _as_dict(db.session.get(User, user_id))

    def get_user_by_username(self, username):
        return _as_dict(User.query.filter_by(username=username).first())

    def get_user_by_email(self, email):
        return _as_dict(User.query.filter_by(email=email).first())

    def create_user(self, data):
        user = User(**data)
        db.session.add(user)
        db.session.commit()  # Commit to get user.id
        return user.to_dict()

    # --- owned resources ---

    def list(self, resource, user_id):
        model = MODELS[resource]
        rows = model.query.filter_by(user_id=user_id).order_by(model.id).all()
        return [row.to_dict() for row in rows]

    def get(self, resource, record_id):
        return _as_dict(db.session.get(MODELS[resource], record_id))

    def create(self, resource, data):
        row = MODELS[resource](**data)
        db.session.add(row)
        db.session.commit()
        return row.to_dict()

    def update(self, resource, record_id, changes):
        row = db.session.get(MODELS[resource], record_id)
        if row is None:
            return None
        for key, value in changes.items():
            setattr(row, key, value)
        db.session.commit()
        return row.to_dict()

    def delete(self, resource, record_id):
        row = db.session.get(MODELS[resource], record_id)
        if row is None:
            return False
        db.session.delete(row)
        db.session.commit()
        return True

    # --- resource-specific queries ---

    def get_active_term(self, user_id, now):
        term = (
            Term.query.filter(
                Term.user_id == user_id,
                Term.start_date <= now,
                Term.end_date >= now,
            )
            .order_by(Term.id)
            .first()
        )
        return _as_dict(term)

    def get_tasks_by_type(self, user_id, task_type):
        rows = Task.query.filter_by(user_id=user_id, task_type=task_type).order_by(Task.id).all()
        return [row.to_dict() for row in rows]

    def get_tasks_by_course(self, user_id, course_id):
        rows = Task.query.filter_by(user_id=user_id, course_id=course_id).order_by(Task.id).all()
        return [row.to_dict() for row in rows]

    def get_tasks_due_between(self, user_id, start, end):
        rows = (
            Task.query.filter(
                Task.user_id == user_id,
                Task.due_date >= start,
                Task.due_date <= end,
            )
            .order_by(Task.due_date, Task.id)
            .all()
        )
        return [row.to_dict() for row in rows]

    def get_study_sessions_between(self, user_id, start, end):
        rows = (
            StudySession.query.filter(
                StudySession.user_id == user_id,
                StudySession.start_time >= start,
                StudySession.start_time <= end,
            )
            .order_by(StudySession.start_time, StudySession.id)
            .all()
        )
        return [row.to_dict() for row in rows]

    # --- settings and statistics ---

    def get_settings(self, user_id):
        return _as_dict(Settings.query.filter_by(user_id=user_id).first())

    def create_settings(self, user_id, data=None):
        settings = Settings(user_id=user_id, **(data or {}))
        db.session.add(settings)
        db.session.commit()
        return settings.to_dict()

    def update_settings(self, user_id, changes):
        settings = Settings.query.filter_by(user_id=user_id).first()
        if settings is None:
            return None
        for key, value in changes.items():
            setattr(settings, key, value)
        db.session.commit()
        return settings.to_dict()

    def get_user_stats(self, user_id):
        return _as_dict(UserStats.query.filter_by(user_id=user_id).first())

    def create_user_stats(self, user_id, data=None):
        stats = UserStats(user_id=user_id, **(data or {}))
        db.session.add(stats)
        db.session.commit()
        return stats.to_dict()

    def update_user_stats(self, user_id, changes):
        stats = UserStats.query.filter_by(user_id=user_id).first()
        if stats is None:
            return None
        for key, value in changes.items():
            setattr(stats, key, value)
        db.session.commit()
        return stats.to_dict()
