"""Pydantic request schemas used by the API.

Clients send camelCase keys (``dueDate``); handlers get snake_case dicts ready
for storage. Unknown keys are dropped, which is how a client-supplied
``userId`` never reaches storage. Update schemas leave every field optional;
a field that may not be null is typed without ``Optional`` so an explicit
``null`` is rejected while omitting it is fine.
"""
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .dates import to_dt
from .errors import ValidationError


def _coerce_datetime(value):
    if isinstance(value, (str, datetime)):
        try:
            return to_dt(value)
        except OverflowError as e:
            # dateutil overflows on long digit strings; pydantic only reports ValueError
            raise ValueError(f"Invalid datetime: {e}") from None
    return value


# ISO 8601 in, naive UTC out
UtcDateTime = Annotated[datetime, BeforeValidator(_coerce_datetime), AfterValidator(to_dt)]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
TaskType = Literal["assignment", "project", "exam", "quiz"]
Priority = Literal["high", "medium", "low"]
Status = Literal["complete", "incomplete"]
Percent = Annotated[int, Field(ge=0, le=100)]
Count = Annotated[int, Field(ge=0)]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def validate_payload(schema, payload):
    """
    Validate a decoded JSON body against ``schema``.

    Returns:
        dict: Only the fields the client sent, keyed by snake_case name.

    Raises:
        ValidationError: If the body is not a JSON object.
        pydantic.ValidationError: If a field is missing or malformed.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return schema.model_validate(payload).model_dump(exclude_unset=True)

# -------------------------------
# Authentication
# -------------------------------

class RegisterIn(ApiModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=1)
    full_name: str = Field(min_length=1, max_length=200)


class LoginIn(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

# -------------------------------
# Courses and terms
# -------------------------------

class CourseIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    instructor: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[UtcDateTime] = None
    end_date: Optional[UtcDateTime] = None
    color: str = None
    progress: Percent = None
    grade: Optional[str] = None
    term_id: Optional[int] = None


class CourseUpdate(CourseIn):
    name: str = Field(None, min_length=1, max_length=200)


class TermIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    start_date: UtcDateTime
    end_date: UtcDateTime
    is_active: bool = None


class TermUpdate(TermIn):
    name: str = Field(None, min_length=1, max_length=200)
    start_date: UtcDateTime = None
    end_date: UtcDateTime = None

# -------------------------------
# Tasks, study sessions and goals
# -------------------------------

class TaskIn(ApiModel):
    name: str = Field(min_length=1, max_length=300)
    description: Optional[str] = None
    due_date: Optional[UtcDateTime] = None
    course_id: Optional[int] = None
    task_type: TaskType
    priority: Priority = None
    status: Status = None
    estimated_hours: Optional[Count] = None


class TaskUpdate(TaskIn):
    name: str = Field(None, min_length=1, max_length=300)
    task_type: TaskType = None


class StudySessionIn(ApiModel):
    title: str = Field(min_length=1, max_length=300)
    start_time: UtcDateTime
    end_time: UtcDateTime
    course_id: Optional[int] = None
    location: Optional[str] = None
    completed: bool = None


class StudySessionUpdate(StudySessionIn):
    title: str = Field(None, min_length=1, max_length=300)
    start_time: UtcDateTime = None
    end_time: UtcDateTime = None


class GoalIn(ApiModel):
    title: str = Field(min_length=1, max_length=300)
    completed: bool = None
    due_date: Optional[UtcDateTime] = None
    course_id: Optional[int] = None


class GoalUpdate(GoalIn):
    title: str = Field(None, min_length=1, max_length=300)

# -------------------------------
# Settings and statistics
# -------------------------------

class SettingsUpdate(ApiModel):
    dark_mode: bool = None
    email_notifications: bool = None
    study_reminders: bool = None
    deadline_reminders: bool = None


class UserStatsUpdate(ApiModel):
    total_hours_studied: Count = None
    total_tasks_completed: Count = None
    streak_days: Count = None
    last_study_date: Optional[UtcDateTime] = None
    weekly_study_goal: Count = None
    weekly_hours_studied: Count = None
    improvement: int = None
    overall_progress: Percent = None
