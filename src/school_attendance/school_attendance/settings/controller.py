from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serialization import to_dict
from ..common.web import admin_required, current_role, login_required, payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/config", methods=["GET"], endpoint="public_config")
    @login_required
    def public_config():
        return jsonify({"success": True, "config": to_dict(container.config_service.get())})

    @app.route("/admin/config", methods=["GET", "POST"], endpoint="admin_config")
    @admin_required
    def admin_config():
        if request.method == "GET":
            return jsonify({"success": True, "config": to_dict(container.config_service.get())})

        candidate = container.config_service.merge_form(payload())
        saved = container.config_service.save(current_role=current_role(), candidate=candidate)
        return jsonify({"success": True, "message": "Settings saved", "config": to_dict(saved)})
