from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.serialization import to_dict
from ..common.validators import split_list
from ..common.web import admin_required, current_role, payload
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def _as_list(value) -> list | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return list(split_list(str(value)))


def _as_bool(value) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _user_dict(user) -> dict:
    return to_dict(user, exclude=("password_hash",))


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return jsonify({"success": True, "user": to_dict(s_user)})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"})

    @app.route("/admin/users", methods=["GET", "POST"], endpoint="admin_users")
    @admin_required
    def admin_users():
        if request.method == "GET":
            return jsonify({"success": True, "users": [_user_dict(u) for u in container.user_service.list_users()]})

        data = payload()
        try:
            role = Role(data.get("role") or Role.STAFF.value)
        except ValueError:
            raise ValidationError("Invalid account role")

        user_id = container.user_service.create_account(
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=role,
            employee_number=data.get("employee_number"),
            subjects=_as_list(data.get("subjects")) or [],
            additional_roles=_as_list(data.get("additional_roles")) or [],
            specific_active_days=_as_list(data.get("specific_active_days")) or [],
        )
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/admin/users/<int:user_id>", methods=["POST"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        data = payload()
        user = container.user_service.update_account(
            user_id=user_id,
            full_name=data.get("full_name"),
            username=data.get("username"),
            password=data.get("password"),
            employee_number=data.get("employee_number"),
            subjects=_as_list(data.get("subjects")),
            additional_roles=_as_list(data.get("additional_roles")),
            specific_active_days=_as_list(data.get("specific_active_days")),
            is_active=_as_bool(data.get("is_active")),
        )
        return jsonify({"success": True, "user": _user_dict(user)})

    @app.route("/admin/users/<int:user_id>/delete", methods=["POST"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return jsonify({"success": True, "message": "User deleted"})

    @app.route("/admin/users/<int:user_id>/active", methods=["POST"], endpoint="set_user_active")
    @admin_required
    def set_user_active(user_id: int):
        is_active = _as_bool(payload().get("is_active"))
        if is_active is None:
            raise ValidationError("is_active is required")
        container.user_service.set_active(current_role=current_role(), user_id=user_id, is_active=is_active)
        return jsonify({"success": True})

    @app.route("/admin/users/import", methods=["POST"], endpoint="import_users")
    @admin_required
    def import_users():
        upload = request.files.get("file")
        if upload is not None:
            text = upload.stream.read().decode("utf-8-sig")
        else:
            text = request.get_data(as_text=True)
        if not text.strip():
            raise ValidationError("CSV file is empty")

        count = container.user_service.import_csv(text)
        return jsonify({"success": True, "imported": count, "message": f"Imported {count} staff"})

    @app.route("/admin/users/template.csv", methods=["GET"], endpoint="users_csv_template")
    @admin_required
    def users_csv_template():
        return app.response_class(
            container.user_service.csv_template().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=staff_template.csv"},
        )
