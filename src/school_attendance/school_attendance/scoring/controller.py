from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.geo import GeoPoint
from ..common.serialization import to_dict
from ..common.web import admin_required, current_user_id, login_required
from ..core.constants import DEFAULT_LEADERBOARD_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/leaderboard", methods=["GET"], endpoint="public_leaderboard")
    def public_leaderboard():
        config = container.config_service.get()
        entries = container.score_service.leaderboard()
        return jsonify(
            {
                "success": True,
                "school_name": config.school_name,
                "leaders": [to_dict(e, exclude=("additional_roles",)) for e in entries],
            }
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        lat = request.args.get("lat", type=float)
        lng = request.args.get("lng", type=float)
        position = GeoPoint(latitude=lat, longitude=lng) if lat is not None and lng is not None else None

        data = container.score_service.dashboard(current_user_id(), position=position)
        return jsonify({"success": True, "dashboard": to_dict(data)})

    @app.route("/admin/leaderboard", methods=["GET"], endpoint="admin_leaderboard")
    @admin_required
    def admin_leaderboard():
        role = request.args.get("role") or None
        limit = request.args.get("limit", default=DEFAULT_LEADERBOARD_LIMIT, type=int)
        entries = container.score_service.leaderboard(role, limit=limit)
        return jsonify(
            {
                "success": True,
                "categories": list(container.score_service.role_categories()),
                "leaders": [to_dict(e) for e in entries],
            }
        )
