# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import CourseIn, CourseUpdate, validate_payload
from ..utils import login_required, load_owned, check_reference, serialize

# Define the blueprint for course-related API routes
courses_bp = Blueprint("courses", __name__)


@courses_bp.route("", methods=["GET"])
@login_required
def list_courses(user):
    """
    Fetch all courses of the logged-in user.

    Returns:
        JSON: List of courses.
    """
    courses = get_storage().list("courses", user["id"])
    return jsonify([serialize(course) for course in courses]), 200


@courses_bp.route("", methods=["POST"])
@login_required
def create_course(user):
    """
    Create a course owned by the logged-in user.

    The owner is always the session user; a ``termId`` must name one of
    the user's own terms.

    Returns:
        JSON: The created course and status code 201.
    """
    data = validate_payload(CourseIn, request.get_json(silent=True))
    data["user_id"] = user["id"]
    check_reference("terms", data.get("term_id"), user, "Invalid term ID")

    course = get_storage().create("courses", data)
    return jsonify(serialize(course)), 201


@courses_bp.route("/<int:course_id>", methods=["GET"])
@login_required
def get_course(user, course_id):
    course = load_owned("courses", course_id, user, "Course")
    return jsonify(serialize(course)), 200


@courses_bp.route("/<int:course_id>", methods=["PUT"])
@login_required
def update_course(user, course_id):
    """
    Merge the provided fields over an existing course.

    Args:
        course_id (int): The ID of the course to update.

    Returns:
        JSON: The updated course, or 404/403.
    """
    load_owned("courses", course_id, user, "Course")
    changes = validate_payload(CourseUpdate, request.get_json(silent=True))
    check_reference("terms", changes.get("term_id"), user, "Invalid term ID")

    course = get_storage().update("courses", course_id, changes)
    return jsonify(serialize(course)), 200


@courses_bp.route("/<int:course_id>", methods=["DELETE"])
@login_required
def delete_course(user, course_id):
    """
    Delete a course. Tasks and sessions that reference it are left as they are.

    Returns:
        Empty response with status code 204.
    """
    load_owned("courses", course_id, user, "Course")
    get_storage().delete("courses", course_id)
    return "", 204
