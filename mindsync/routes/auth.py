# Import Flask modules for routing, sessions and JSON responses
from flask import Blueprint, request, jsonify, session, current_app
from sqlalchemy.exc import IntegrityError

# Import the storage lookup, credential service and request schemas
from ..storage import get_storage
from ..passwords import hash_password, verify_password
from ..schemas import RegisterIn, LoginIn, validate_payload
from ..errors import Conflict, Unauthorized
from ..utils import current_user, login_user, public_user
from ..consts import DEFAULT_SETTINGS, DEFAULT_USER_STATS
from ..extensions import db

# Define the authentication blueprint for all auth-related routes
auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Register route: Handles new user sign-up.

    Validates the payload, rejects a taken username or email, creates the
    User with a hashed password, initializes zeroed UserStats and default
    Settings, and logs the new user in.

    Returns:
        JSON: The created user without its password and status code 201.
    """
    data = validate_payload(RegisterIn, request.get_json(silent=True))
    storage = get_storage()

    # Check if username is already taken
    if storage.get_user_by_username(data["username"]):
        raise Conflict("Username already exists")

    # Check if email is already registered
    if storage.get_user_by_email(data["email"]):
        raise Conflict("Email already exists")

    data["password"] = hash_password(data["password"])
    try:
        user = storage.create_user(data)
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.session.rollback()
        raise Conflict("Username or email already exists") from None

    # Per-user rows the dashboard and settings pages expect
    storage.create_user_stats(user["id"], DEFAULT_USER_STATS)
    storage.create_settings(user["id"], DEFAULT_SETTINGS)

    login_user(user)
    current_app.logger.info("Registered user %s", user["id"])
    return jsonify(public_user(user)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Login route: Verifies credentials and starts a session.

    Returns:
        JSON: The user without its password, or 401 on bad credentials.
    """
    data = validate_payload(LoginIn, request.get_json(silent=True))
    user = get_storage().get_user_by_username(data["username"])

    # Check if user exists and password hash matches
    if user is None or not verify_password(data["password"], user["password"]):
        current_app.logger.warning("Failed login for username %r", data["username"])
        raise Unauthorized("Invalid username or password")

    login_user(user)
    current_app.logger.info("User %s logged in", user["id"])
    return jsonify(public_user(user)), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """
    Logout route: Destroys the session; the session store row and the cookie
    are removed when the response is sent.
    """
    user_id = session.get("user_id")
    session.clear()
    if user_id is not None:
        current_app.logger.info("User %s logged out", user_id)
    return jsonify({"message": "Logged out successfully"}), 200


@auth_bp.route("/session", methods=["GET"])
def current_session():
    """
    Current session: the logged-in user, or 401 when there is none.
    """
    user = current_user()
    if user is None:
        raise Unauthorized("Not authenticated")
    return jsonify(public_user(user)), 200
