# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import TaskIn, TaskUpdate, validate_payload
from ..consts import TASK_TYPES, UPCOMING_TASK_DAYS
from ..errors import ValidationError
from ..utils import login_required, load_owned, check_reference, serialize

# Define the blueprint for task-related API routes
tasks_bp = Blueprint("tasks", __name__)


def _task_type(value):
    if value not in TASK_TYPES:
        raise ValidationError(f"Unknown task type {value!r}")
    return value


@tasks_bp.route("", methods=["GET"])
@login_required
def list_tasks(user):
    """
    Fetch the logged-in user's tasks, optionally only one ``?type=``.

    Returns:
        JSON: List of tasks.
    """
    task_type = request.args.get("type")
    storage = get_storage()
    if task_type:
        tasks = storage.get_tasks_by_type(user["id"], _task_type(task_type))
    else:
        tasks = storage.list("tasks", user["id"])
    return jsonify([serialize(task) for task in tasks]), 200


@tasks_bp.route("/type/<task_type>", methods=["GET"])
@login_required
def list_tasks_by_type(user, task_type):
    tasks = get_storage().get_tasks_by_type(user["id"], _task_type(task_type))
    return jsonify([serialize(task) for task in tasks]), 200


@tasks_bp.route("/course/<int:course_id>", methods=["GET"])
@login_required
def list_tasks_by_course(user, course_id):
    """
    Tasks of one of the user's courses.

    Args:
        course_id (int): The course to list tasks for.

    Returns:
        JSON: List of tasks, or 404/403 for a missing or foreign course.
    """
    load_owned("courses", course_id, user, "Course")
    tasks = get_storage().get_tasks_by_course(user["id"], course_id)
    return jsonify([serialize(task) for task in tasks]), 200


@tasks_bp.route("/upcoming", methods=["GET"])
@login_required
def list_upcoming_tasks(user):
    """
    Tasks due between now and ``?days=`` days from now (default 7).

    Returns:
        JSON: Tasks ordered by due date, earliest first.
    """
    raw_days = request.args.get("days")
    days = UPCOMING_TASK_DAYS
    if raw_days is not None:
        try:
            days = int(raw_days)
        except ValueError:
            raise ValidationError("days must be an integer") from None
        if days < 0:
            raise ValidationError("days must not be negative")

    try:
        tasks = get_storage().get_upcoming_tasks(user["id"], days)
    except OverflowError:
        # now + days runs past datetime.max
        raise ValidationError("days is too large") from None
    return jsonify([serialize(task) for task in tasks]), 200


@tasks_bp.route("", methods=["POST"])
@login_required
def create_task(user):
    """
    Create a task owned by the logged-in user.

    If a ``courseId`` is provided it must belong to the user.

    Returns:
        JSON: The created task and status code 201.
    """
    data = validate_payload(TaskIn, request.get_json(silent=True))
    data["user_id"] = user["id"]
    check_reference("courses", data.get("course_id"), user, "Invalid course ID")

    task = get_storage().create("tasks", data)
    return jsonify(serialize(task)), 201


@tasks_bp.route("/<int:task_id>", methods=["GET"])
@login_required
def get_task(user, task_id):
    task = load_owned("tasks", task_id, user, "Task")
    return jsonify(serialize(task)), 200


@tasks_bp.route("/<int:task_id>", methods=["PUT"])
@login_required
def update_task(user, task_id):
    """
    Merge the provided fields over an existing task (e.g. toggling ``status``).

    Returns:
        JSON: The updated task, or 404/403.
    """
    load_owned("tasks", task_id, user, "Task")
    changes = validate_payload(TaskUpdate, request.get_json(silent=True))
    # If courseId is being updated, ensure it belongs to the user
    check_reference("courses", changes.get("course_id"), user, "Invalid course ID")

    task = get_storage().update("tasks", task_id, changes)
    return jsonify(serialize(task)), 200


@tasks_bp.route("/<int:task_id>", methods=["DELETE"])
@login_required
def delete_task(user, task_id):
    load_owned("tasks", task_id, user, "Task")
    get_storage().delete("tasks", task_id)
    return "", 204
