# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import TermIn, TermUpdate, validate_payload
from ..dates import utcnow
from ..errors import NotFound
from ..utils import login_required, load_owned, serialize

# Define the blueprint for term-related API routes
terms_bp = Blueprint("terms", __name__)


@terms_bp.route("", methods=["GET"])
@login_required
def list_terms(user):
    terms = get_storage().list("terms", user["id"])
    return jsonify([serialize(term) for term in terms]), 200


@terms_bp.route("", methods=["POST"])
@login_required
def create_term(user):
    """
    Create a term owned by the logged-in user.

    Returns:
        JSON: The created term and status code 201.
    """
    data = validate_payload(TermIn, request.get_json(silent=True))
    data["user_id"] = user["id"]
    term = get_storage().create("terms", data)
    return jsonify(serialize(term)), 201


@terms_bp.route("/active", methods=["GET"])
@login_required
def get_active_term(user):
    """
    The user's term whose date range contains the current time.

    Overlapping terms are allowed; the first one created wins.

    Returns:
        JSON: The active term, or 404 if none contains today.
    """
    term = get_storage().get_active_term(user["id"], utcnow())
    if term is None:
        raise NotFound("No active term found")
    return jsonify(serialize(term)), 200


@terms_bp.route("/<int:term_id>", methods=["GET"])
@login_required
def get_term(user, term_id):
    term = load_owned("terms", term_id, user, "Term")
    return jsonify(serialize(term)), 200


@terms_bp.route("/<int:term_id>", methods=["PUT"])
@login_required
def update_term(user, term_id):
    load_owned("terms", term_id, user, "Term")
    changes = validate_payload(TermUpdate, request.get_json(silent=True))
    term = get_storage().update("terms", term_id, changes)
    return jsonify(serialize(term)), 200


@terms_bp.route("/<int:term_id>", methods=["DELETE"])
@login_required
def delete_term(user, term_id):
    load_owned("terms", term_id, user, "Term")
    get_storage().delete("terms", term_id)
    return "", 204
