# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import StudySessionIn, StudySessionUpdate, validate_payload
from ..dates import utcnow
from ..errors import ValidationError
from ..utils import login_required, load_owned, check_reference, serialize

# Define the blueprint for study-session API routes
study_sessions_bp = Blueprint("study_sessions", __name__)


def _sessions_for_day(user, date_str):
    storage = get_storage()
    try:
        return storage.get_study_sessions_for_day(user["id"], date_str or utcnow())
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid date {date_str!r}") from None


@study_sessions_bp.route("", methods=["GET"])
@login_required
def list_study_sessions(user):
    """
    Fetch the logged-in user's study sessions.

    With ``?date=<ISO 8601>`` only the sessions starting on that calendar
    day (00:00:00.000 to 23:59:59.999 UTC) are returned, ordered by start.

    Returns:
        JSON: List of study sessions.
    """
    date_str = request.args.get("date")
    if date_str:
        sessions = _sessions_for_day(user, date_str)
    else:
        sessions = get_storage().list("study_sessions", user["id"])
    return jsonify([serialize(s) for s in sessions]), 200


@study_sessions_bp.route("/day", methods=["GET"])
@login_required
def list_study_sessions_for_day(user):
    """Sessions of ``?date=`` (default today), ordered by start time."""
    sessions = _sessions_for_day(user, request.args.get("date"))
    return jsonify([serialize(s) for s in sessions]), 200


@study_sessions_bp.route("", methods=["POST"])
@login_required
def create_study_session(user):
    """
    Create a study session owned by the logged-in user.

    If a ``courseId`` is provided it must belong to the user. The end time
    is stored as given, even if it is before the start.

    Returns:
        JSON: The created session and status code 201.
    """
    data = validate_payload(StudySessionIn, request.get_json(silent=True))
    data["user_id"] = user["id"]
    check_reference("courses", data.get("course_id"), user, "Invalid course ID")

    study_session = get_storage().create("study_sessions", data)
    return jsonify(serialize(study_session)), 201


@study_sessions_bp.route("/<int:session_id>", methods=["GET"])
@login_required
def get_study_session(user, session_id):
    study_session = load_owned("study_sessions", session_id, user, "Study session")
    return jsonify(serialize(study_session)), 200


@study_sessions_bp.route("/<int:session_id>", methods=["PUT"])
@login_required
def update_study_session(user, session_id):
    load_owned("study_sessions", session_id, user, "Study session")
    changes = validate_payload(StudySessionUpdate, request.get_json(silent=True))
    check_reference("courses", changes.get("course_id"), user, "Invalid course ID")

    study_session = get_storage().update("study_sessions", session_id, changes)
    return jsonify(serialize(study_session)), 200


@study_sessions_bp.route("/<int:session_id>", methods=["DELETE"])
@login_required
def delete_study_session(user, session_id):
    load_owned("study_sessions", session_id, user, "Study session")
    get_storage().delete("study_sessions", session_id)
    return "", 204
