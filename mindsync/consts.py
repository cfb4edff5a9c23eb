from datetime import timedelta

DEFAULT_COURSE_COLOR = "#5C6DF3"
UPCOMING_TASK_DAYS = 7                  # Default window for /api/tasks/upcoming
END_OF_DAY = timedelta(days=1, microseconds=-1000)  # 23:59:59.999 after midnight

TASK_TYPES = ("assignment", "project", "exam", "quiz")
TASK_PRIORITIES = ("high", "medium", "low")
TASK_STATUSES = ("complete", "incomplete")

# Resource names shared by the storage backends and the routes
RESOURCES = ("courses", "terms", "tasks", "study_sessions", "goals")

# Column defaults applied when a row is created without the field
RESOURCE_DEFAULTS = {
    "courses": {
        "instructor": None,
        "description": None,
        "start_date": None,
        "end_date": None,
        "color": DEFAULT_COURSE_COLOR,
        "progress": 0,
        "grade": None,
        "term_id": None,
    },
    "terms": {
        "is_active": True,
    },
    "tasks": {
        "description": None,
        "due_date": None,
        "course_id": None,
        "priority": "medium",
        "status": "incomplete",
        "estimated_hours": None,
    },
    "study_sessions": {
        "course_id": None,
        "location": None,
        "completed": False,
    },
    "goals": {
        "completed": False,
        "due_date": None,
        "course_id": None,
    },
}

DEFAULT_SETTINGS = {
    "dark_mode": False,             # Light theme unless the user opts in
    "email_notifications": True,
    "study_reminders": True,
    "deadline_reminders": True,
}

DEFAULT_USER_STATS = {
    "total_hours_studied": 0,
    "total_tasks_completed": 0,
    "streak_days": 0,
    "last_study_date": None,
    "weekly_study_goal": 10,        # Hours per week
    "weekly_hours_studied": 0,
    "improvement": 0,
    "overall_progress": 0,
}
