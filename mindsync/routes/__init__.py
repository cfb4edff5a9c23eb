from flask import Blueprint, jsonify

from .auth import auth_bp                     # Register, login, logout, current session
from .courses import courses_bp               # Courses API
from .terms import terms_bp                   # Terms API
from .tasks import tasks_bp                   # Tasks API (incl. upcoming)
from .study_sessions import study_sessions_bp # Study sessions API (incl. per day)
from .goals import goals_bp                   # Weekly goals API
from .settings import settings_bp, user_stats_bp  # One-row-per-user records
from ..storage import get_storage

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """Unauthenticated liveness check."""
    return jsonify({"status": "ok", "storage": get_storage().name}), 200


def register_blueprints(app):
    """
    Register all Flask blueprints with their respective URL prefixes.

    Args:
        app (Flask): The Flask application instance.
    """
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(courses_bp, url_prefix="/api/courses")
    app.register_blueprint(terms_bp, url_prefix="/api/terms")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
    app.register_blueprint(study_sessions_bp, url_prefix="/api/study-sessions")
    app.register_blueprint(goals_bp, url_prefix="/api/goals")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(user_stats_bp, url_prefix="/api/user-stats")
    app.register_blueprint(health_bp, url_prefix="/api")
