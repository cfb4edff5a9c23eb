# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import GoalIn, GoalUpdate, validate_payload
from ..utils import login_required, load_owned, check_reference, serialize

# Define the blueprint for weekly-goal API routes
goals_bp = Blueprint("goals", __name__)


@goals_bp.route("", methods=["GET"])
@login_required
def list_goals(user):
    goals = get_storage().list("goals", user["id"])
    return jsonify([serialize(goal) for goal in goals]), 200


@goals_bp.route("", methods=["POST"])
@login_required
def create_goal(user):
    """
    Create a goal owned by the logged-in user.

    Returns:
        JSON: The created goal and status code 201.
    """
    data = validate_payload(GoalIn, request.get_json(silent=True))
    data["user_id"] = user["id"]
    check_reference("courses", data.get("course_id"), user, "Invalid course ID")

    goal = get_storage().create("goals", data)
    return jsonify(serialize(goal)), 201


@goals_bp.route("/<int:goal_id>", methods=["GET"])
@login_required
def get_goal(user, goal_id):
    goal = load_owned("goals", goal_id, user, "Goal")
    return jsonify(serialize(goal)), 200


@goals_bp.route("/<int:goal_id>", methods=["PUT"])
@login_required
def update_goal(user, goal_id):
    """
    Merge the provided fields over a goal; the dashboard uses this to tick
    goals off with ``{"completed": true}``.
    """
    load_owned("goals", goal_id, user, "Goal")
    changes = validate_payload(GoalUpdate, request.get_json(silent=True))
    check_reference("courses", changes.get("course_id"), user, "Invalid course ID")

    goal = get_storage().update("goals", goal_id, changes)
    return jsonify(serialize(goal)), 200


@goals_bp.route("/<int:goal_id>", methods=["DELETE"])
@login_required
def delete_goal(user, goal_id):
    load_owned("goals", goal_id, user, "Goal")
    get_storage().delete("goals", goal_id)
    return "", 204
