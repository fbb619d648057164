from __future__ import annotations

import logging
import math
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    OutOfRange,
    StoreUnavailable,
    TooEarly,
    ValidationError,
)

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "message": "Administrators only"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.STAFF.value))


def payload() -> dict:
    """Request body as a dict, from JSON or form data."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def register_error_handlers(app: Flask) -> None:
    """Rule violations -> 400/401/403, storage outage -> 503."""

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        body = {"success": False, "message": str(e)}
        if isinstance(e, OutOfRange):
            body["distance"] = round(e.distance, 1) if math.isfinite(e.distance) else None
            body["radius"] = e.radius
        if isinstance(e, TooEarly):
            body["threshold_hour"] = e.threshold_hour
        return jsonify(body), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"success": False, "message": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return jsonify({"success": False, "message": str(e)}), 403

    @app.errorhandler(StoreUnavailable)
    def _store(e: StoreUnavailable):
        logger.error("Storage unavailable: %s", e, exc_info=e)
        return jsonify({"success": False, "message": "The system is temporarily unavailable, please try again"}), 503
