# Standard library imports
from functools import wraps
from flask import session, g, jsonify, current_app
from datetime import date, datetime

# Application-specific imports
from .dates import to_iso
from .errors import Forbidden, NotFound
from .storage import get_storage


def login_required(f):
    """
    Decorator to ensure a user is logged in and exists in storage.

    - Returns 401 JSON error if there is no session or the user is gone.
    - Resolves the session's user id once per request (kept on ``g.user``).
    - Passes the user record as the first argument to the decorated view.

    Args:
        f (function): The view function to wrap.

    Returns:
        function: The decorated function.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify({"message": "Unauthorized"}), 401
        return f(user, *args, **kwargs)

    return decorated_function


def current_user():
    """
    Return the user record for this request's session, or None.

    A session pointing at a user that no longer exists is cleared.
    """
    if "user" in g:
        return g.user

    user = None
    user_id = session.get("user_id")
    if user_id is not None:
        user = get_storage().get_user(user_id)
        if user is None:
            current_app.logger.warning("Session references missing user %s", user_id)
            session.clear()
    g.user = user
    return user


def login_user(user):
    """
    Start a fresh session for ``user``.

    The server-side session gets a new id, so an id handed out before login
    (or to the previous user of the browser) is no longer valid.
    """
    session.clear()
    session["user_id"] = user["id"]
    current_app.session_interface.regenerate(session)
    g.user = user


def public_user(user):
    """User record without the password hash."""
    return serialize({key: value for key, value in user.items() if key != "password"})


def to_camel(name):
    """snake_case -> camelCase, e.g. ``due_date`` -> ``dueDate``."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def serialize(record):
    """Record or payload -> JSON-ready dict with camelCase keys and ISO dates."""
    result = {}
    for key, value in record.items():
        if isinstance(value, datetime):
            value = to_iso(value)
        elif isinstance(value, date):
            value = value.isoformat()
        result[to_camel(key)] = value
    return result


def load_owned(resource, record_id, user, label):
    """
    Fetch a row and make sure ``user`` owns it.

    Raises:
        NotFound: If the row does not exist.
        Forbidden: If it belongs to someone else.
    """
    record = get_storage().get(resource, record_id)
    if record is None:
        raise NotFound(f"{label} not found")
    if record["user_id"] != user["id"]:
        current_app.logger.warning(
            "User %s denied access to %s %s", user["id"], resource, record_id
        )
        raise Forbidden()
    return record


def check_reference(resource, record_id, user, message):
    """Reject a payload that points at a row the user does not own."""
    if record_id is None:
        return
    record = get_storage().get(resource, record_id)
    if record is None or record["user_id"] != user["id"]:
        raise Forbidden(message)
