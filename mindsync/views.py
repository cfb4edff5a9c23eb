# Import standard libraries for date handling
import math
from datetime import date, datetime, timedelta

# Import the date helpers shared with the server
from .dates import to_dt, utcnow

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

DEFAULT_WEEKLY_GOAL = 10  # Hours, used when the stats row has no goal


# -------------------------------
# Display helpers
# -------------------------------

def format_date(value, fmt="MMM dd, yyyy"):
    """
    Format a date for display.

    Supported formats: ``MMM dd, yyyy`` (default), ``MMMM dd, yyyy``,
    ``dd/MM/yyyy``, ``yyyy-MM-dd`` and ``EEEE, MMMM dd, yyyy``; anything else
    falls back to the default. Unparseable input gives ``"Invalid date"``.
    """
    try:
        d = to_dt(value)
    except (TypeError, ValueError, OverflowError):
        return "Invalid date"
    if d is None:
        return "Invalid date"

    formats = {
        "MMM dd, yyyy": f"{MONTHS[d.month - 1]} {d.day}, {d.year}",
        "MMMM dd, yyyy": f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}",
        "dd/MM/yyyy": f"{d.day:02d}/{d.month:02d}/{d.year}",
        "yyyy-MM-dd": f"{d.year}-{d.month:02d}-{d.day:02d}",
        "EEEE, MMMM dd, yyyy": f"{WEEKDAYS[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}",
    }
    return formats.get(fmt, formats["MMM dd, yyyy"])


def get_initials(name):
    """First letter of every word, upper-cased: ``"ada love lace"`` -> ``"ALL"``."""
    if not name:
        return ""
    return "".join(part[0] for part in name.split(" ") if part).upper()


def get_contrast_color(hex_color):
    """
    Black or white text for a ``#RRGGBB`` background, by perceived luminance.
    Anything that is not a 7-character hex color gets black.
    """
    if not hex_color or not hex_color.startswith("#") or len(hex_color) != 7:
        return "#000000"
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        return "#000000"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#FFFFFF"


def truncate_text(text, max_length):
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def greeting(now=None):
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"


def percent(part, whole):
    """``part`` of ``whole`` in percent, rounded half up; 0 for an empty whole."""
    if not whole:
        return 0
    return math.floor(part / whole * 100 + 0.5)


def _as_day(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return to_dt(value).date()


def _time_range(item):
    start, end = to_dt(item["startTime"]), to_dt(item["endTime"])
    return f"{start:%H:%M} - {end:%H:%M}"


def _sort_by_date(items, field):
    # Items without the date go last
    return sorted(items, key=lambda item: (item.get(field) is None, to_dt(item[field]) if item.get(field) else None))


def _deadline(task, now, courses_by_id):
    due = to_dt(task["dueDate"]) if task.get("dueDate") else None
    days_left = (due.date() - now.date()).days if due else None
    priority = task.get("priority") or "medium"
    return {
        **task,
        "courseName": courses_by_id.get(task.get("courseId"), {}).get("name"),
        "dueLabel": format_date(due) if due else "No due date",
        "daysLeft": days_left,
        "overdue": due is not None and due < now and task.get("status") != "complete",
        "priorityLabel": f"{priority.capitalize()} Priority",
    }

# -------------------------------
# Page view-models
# -------------------------------

def dashboard(client, now=None):
    """
    Everything the dashboard renders, built from the client's queries.

    Args:
        client (ApiClient): A logged-in client.
        now (datetime): Naive UTC "now"; defaults to the current time.

    Returns:
        dict: ``greeting``, ``statCards``, ``analytics``, ``courseProgress``,
        ``weeklyGoals``, ``todaySchedule`` and ``upcomingDeadlines``.
    """
    now = now or utcnow()
    user = client.session() or {}
    stats = client.user_stats() or {}
    courses = client.courses()
    goals = client.goals()
    sessions = client.study_sessions_for_day(now.date())
    upcoming = client.upcoming_tasks()

    first_name = (user.get("fullName") or "").split(" ")[0] or "Student"

    # --- Statistics ---
    weekly_hours = stats.get("weeklyHoursStudied") or 0
    raw_goal = stats.get("weeklyStudyGoal")
    weekly_goal = raw_goal or DEFAULT_WEEKLY_GOAL
    weekly_percent = min(100, weekly_hours / weekly_goal * 100)
    total_hours = stats.get("totalHoursStudied") or 0
    tasks_completed = stats.get("totalTasksCompleted") or 0
    streak = stats.get("streakDays") or 0
    improvement = stats.get("improvement") or 0
    overall = stats.get("overallProgress") or 0

    stat_cards = [
        {"title": "Study Time", "value": f"{weekly_hours} hrs", "subtitle": "this week"},
        {"title": "Weekly Goal", "value": f"{weekly_goal} hrs", "subtitle": "target"},
        {"title": "Progress", "value": f"{overall}%", "subtitle": "overall completion"},
    ]
    analytics = [
        {
            "title": "Total Study Hours",
            "value": str(total_hours),
            "change": f"{weekly_hours} this week",
            "positive": True,
            "percentage": weekly_percent,
        },
        {
            "title": "Tasks Completed",
            "value": str(tasks_completed),
            "change": f"{streak} day streak",
            "positive": streak > 0,
            "percentage": 100 if tasks_completed else 0,
        },
        {
            "title": "Weekly Progress",
            "value": f"{weekly_percent:.0f}%" if raw_goal else "0%",
            "change": f"{weekly_goal} hr goal",
            "positive": weekly_hours / weekly_goal >= 0.5,
            "percentage": weekly_percent,
        },
        {
            "title": "Overall Progress",
            "value": f"{overall}%",
            "change": f"{'+' if improvement > 0 else ''}{improvement}% improvement",
            "positive": improvement >= 0,
            "percentage": min(100, overall),
        },
    ]

    # --- Courses and goals ---
    course_progress = [
        {
            "id": course["id"],
            "name": course["name"],
            "progress": course.get("progress") or 0,
            "color": course.get("color"),
            "textColor": get_contrast_color(course.get("color")),
        }
        for course in courses
    ]
    completed_goals = sum(1 for goal in goals if goal.get("completed"))

    # --- Today's plan and deadlines ---
    today = [
        {**item, "timeRange": _time_range(item)}
        for item in sorted(sessions, key=lambda item: to_dt(item["startTime"]))
    ]
    courses_by_id = {course["id"]: course for course in courses}
    deadlines = [_deadline(task, now, courses_by_id) for task in _sort_by_date(upcoming, "dueDate")]

    return {
        "greeting": f"{greeting(now)}, {first_name}!",
        "statCards": stat_cards,
        "analytics": analytics,
        "courseProgress": course_progress,
        "weeklyGoals": {
            "items": goals,
            "completed": completed_goals,
            "total": len(goals),
            "percent": percent(completed_goals, len(goals)),
        },
        "todaySchedule": today,
        "upcomingDeadlines": deadlines,
    }


def courses_page(client):
    """Course cards with readable text colors, plus the term running now."""
    courses = [
        {**course, "textColor": get_contrast_color(course.get("color"))}
        for course in client.courses()
    ]
    return {"courses": courses, "activeTerm": client.active_term()}


def assignments_page(client, task_type=None, now=None):
    """
    Task list, optionally for one task type, earliest due date first.

    Counts are over the shown tasks.
    """
    now = now or utcnow()
    courses_by_id = {course["id"]: course for course in client.courses()}
    tasks = [_deadline(task, now, courses_by_id) for task in _sort_by_date(client.tasks(task_type), "dueDate")]
    complete = sum(1 for task in tasks if task.get("status") == "complete")
    return {
        "filter": task_type,
        "tasks": tasks,
        "counts": {"all": len(tasks), "complete": complete, "incomplete": len(tasks) - complete},
    }


def schedule_page(client, day=None, view="day"):
    """
    Study sessions for one day, or for the Monday-to-Sunday week around it.

    Args:
        client (ApiClient): A logged-in client.
        day (date | datetime | str): The day to show; defaults to today.
        view (str): ``"day"`` or ``"week"``.
    """
    if view not in ("day", "week"):
        raise ValueError(f"view must be 'day' or 'week', not {view!r}")
    day = _as_day(day) if day is not None else utcnow().date()
    days = [day]
    if view == "week":
        week_start = day - timedelta(days=day.weekday())
        days = [week_start + timedelta(days=offset) for offset in range(7)]

    columns = []
    for current in days:
        sessions = sorted(client.study_sessions_for_day(current), key=lambda item: to_dt(item["startTime"]))
        hours = sum(
            (to_dt(item["endTime"]) - to_dt(item["startTime"])).total_seconds() / 3600
            for item in sessions
        )
        columns.append({
            "day": current.isoformat(),
            "title": format_date(current, "EEEE, MMMM dd, yyyy"),
            "sessions": [{**item, "timeRange": _time_range(item)} for item in sessions],
            "totalHours": round(hours, 1),
        })

    return {
        "view": view,
        "previous": (day - timedelta(days=1 if view == "day" else 7)).isoformat(),
        "next": (day + timedelta(days=1 if view == "day" else 7)).isoformat(),
        "days": columns,
    }


def settings_page(client):
    user = client.session() or {}
    return {
        "user": user,
        "initials": get_initials(user.get("fullName")),
        "settings": client.settings(),
    }
