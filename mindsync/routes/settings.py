# Import Flask modules for routing and JSON responses
from flask import Blueprint, request, jsonify

# Import application storage, schemas and utilities
from ..storage import get_storage
from ..schemas import SettingsUpdate, UserStatsUpdate, validate_payload
from ..consts import DEFAULT_SETTINGS, DEFAULT_USER_STATS
from ..utils import login_required, serialize

# Define the blueprints for the one-row-per-user records
settings_bp = Blueprint("settings", __name__)
user_stats_bp = Blueprint("user_stats", __name__)


@settings_bp.route("", methods=["GET"])
@login_required
def get_settings(user):
    """
    The user's display and notification settings.

    Users registered before settings existed get the defaults created on
    first read.

    Returns:
        JSON: The settings record.
    """
    storage = get_storage()
    settings = storage.get_settings(user["id"])
    if settings is None:
        settings = storage.create_settings(user["id"], DEFAULT_SETTINGS)
    return jsonify(serialize(settings)), 200


@settings_bp.route("", methods=["PUT"])
@login_required
def update_settings(user):
    """
    Update some or all settings, creating the row first if it is missing.

    Returns:
        JSON: The updated settings record.
    """
    changes = validate_payload(SettingsUpdate, request.get_json(silent=True))
    storage = get_storage()
    settings = storage.update_settings(user["id"], changes)
    if settings is None:
        settings = storage.create_settings(user["id"], {**DEFAULT_SETTINGS, **changes})
    return jsonify(serialize(settings)), 200


@user_stats_bp.route("", methods=["GET"])
@login_required
def get_user_stats(user):
    """
    The user's study statistics; a zeroed row is created if none exists yet.

    Returns:
        JSON: The statistics record.
    """
    storage = get_storage()
    stats = storage.get_user_stats(user["id"])
    if stats is None:
        # Create default stats if none exist
        stats = storage.create_user_stats(user["id"], DEFAULT_USER_STATS)
    return jsonify(serialize(stats)), 200


@user_stats_bp.route("", methods=["PUT"])
@login_required
def update_user_stats(user):
    """
    Update some or all statistics, creating the row first if it is missing.

    Returns:
        JSON: The updated statistics record.
    """
    changes = validate_payload(UserStatsUpdate, request.get_json(silent=True))
    storage = get_storage()
    stats = storage.update_user_stats(user["id"], changes)
    if stats is None:
        stats = storage.create_user_stats(user["id"], {**DEFAULT_USER_STATS, **changes})
    return jsonify(serialize(stats)), 200
