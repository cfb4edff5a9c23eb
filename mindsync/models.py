from .extensions import db
from .consts import DEFAULT_COURSE_COLOR
from .dates import utcnow


class SerializerMixin:
    """Plain-dict view of a row, keyed by column name."""

    def to_dict(self):
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}


# -------------------------------
# User authentication and profile
# -------------------------------

class User(SerializerMixin, db.Model):
    """
    Stores user authentication and profile information.

    Attributes:
        id (int): Primary key.
        username (str): Unique username for login.
        email (str): Unique email address.
        full_name (str): Display name.
        password (str): PBKDF2 hash in "key.salt" form, never sent to clients.
        created_at (datetime): Registration time (UTC).
    """
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    full_name = db.Column(db.String(200), nullable=False)
    password = db.Column(db.String(200), nullable=False)  # Hashed password
    created_at = db.Column(db.DateTime, default=utcnow)

# -------------------------------
# Courses and terms
# -------------------------------

class Course(SerializerMixin, db.Model):
    """
    A course the user is taking.

    Attributes:
        progress (int): Completion percentage, 0-100.
        term_id (int): Optional link to a Term of the same user.
    """
    __tablename__ = "courses"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    instructor = db.Column(db.String(200), nullable=True)
    description = db.Column(db.Text, nullable=True)
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)
    color = db.Column(db.String(7), default=DEFAULT_COURSE_COLOR)
    progress = db.Column(db.Integer, default=0)
    grade = db.Column(db.String(20), nullable=True)
    term_id = db.Column(db.Integer, nullable=True)


class Term(SerializerMixin, db.Model):
    """
    An academic term. "Active" means the date range contains today; more than
    one term may overlap.
    """
    __tablename__ = "terms"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, default=True)

# -------------------------------
# Tasks, study sessions and goals
# -------------------------------

class Task(SerializerMixin, db.Model):
    """
    Assignments, projects, exams and quizzes.

    Attributes:
        task_type (str): "assignment", "project", "exam" or "quiz".
        priority (str): "high", "medium" or "low".
        status (str): "complete" or "incomplete".
    """
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.DateTime, nullable=True, index=True)
    course_id = db.Column(db.Integer, nullable=True)
    task_type = db.Column(db.String(20), nullable=False)
    priority = db.Column(db.String(10), default="medium")
    status = db.Column(db.String(20), default="incomplete")
    estimated_hours = db.Column(db.Integer, nullable=True)


class StudySession(SerializerMixin, db.Model):
    """A planned block of study time. end_time is not checked against start_time."""
    __tablename__ = "study_sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(300), nullable=False)
    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False)
    course_id = db.Column(db.Integer, nullable=True)
    location = db.Column(db.String(200), nullable=True)
    completed = db.Column(db.Boolean, default=False)


class Goal(SerializerMixin, db.Model):
    __tablename__ = "goals"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(300), nullable=False)
    completed = db.Column(db.Boolean, default=False)
    due_date = db.Column(db.DateTime, nullable=True)
    course_id = db.Column(db.Integer, nullable=True)

# -------------------------------
# Per-user settings and statistics (one row each)
# -------------------------------

class Settings(SerializerMixin, db.Model):
    """Display and notification preferences."""
    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    dark_mode = db.Column(db.Boolean, default=False)
    email_notifications = db.Column(db.Boolean, default=True)
    study_reminders = db.Column(db.Boolean, default=True)
    deadline_reminders = db.Column(db.Boolean, default=True)


class UserStats(SerializerMixin, db.Model):
    """
    Study statistics shown on the dashboard.

    Attributes:
        weekly_study_goal (int): Target hours per week.
        improvement (int): Change in overall progress, in percentage points.
        overall_progress (int): Overall completion percentage.
    """
    __tablename__ = "user_stats"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    total_hours_studied = db.Column(db.Integer, default=0)
    total_tasks_completed = db.Column(db.Integer, default=0)
    streak_days = db.Column(db.Integer, default=0)
    last_study_date = db.Column(db.DateTime, nullable=True)
    weekly_study_goal = db.Column(db.Integer, default=10)
    weekly_hours_studied = db.Column(db.Integer, default=0)
    improvement = db.Column(db.Integer, default=0)
    overall_progress = db.Column(db.Integer, default=0)
