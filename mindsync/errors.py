"""Error taxonomy and the JSON error responders.

Route code raises an :class:`ApiError` subclass; the handlers registered by
:func:`register_error_handlers` turn it into ``{"message": ...}`` with the
matching status code.
"""
from flask import jsonify, current_app
from pydantic import ValidationError as SchemaError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    # Duplicate username/email is answered like any other bad registration
    status_code = 400
    default_message = "Already exists"


class InternalError(ApiError):
    status_code = 500


def format_schema_error(error):
    """
    Turn a pydantic validation error into one readable line.

    Example: ``Validation error: Field required at "name"; Input should be
    'high', 'medium' or 'low' at "priority"``
    """
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        if location:
            parts.append(f'{item["msg"]} at "{location}"')
        else:
            parts.append(item["msg"])
    return "Validation error: " + "; ".join(parts)


def register_error_handlers(app):
    """Attach the JSON error responders to ``app``."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            db.session.rollback()
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(SchemaError)
    def handle_schema_error(error):
        return jsonify({"message": format_schema_error(error)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Roll back the database session to avoid invalid states
        db.session.rollback()
        current_app.logger.exception("Unhandled error: %s", error)
        return jsonify({"message": "Internal server error"}), 500
