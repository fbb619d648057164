from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_month
from ..common.serialization import to_dict
from ..common.validators import parse_coordinate
from ..common.web import admin_required, current_role, current_user_id, login_required, payload
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container


def _coordinate(data: dict, name: str, limit: float) -> float:
    return parse_coordinate(data.get(name), name, limit)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        data = payload()
        record = container.attendance_service.check_in(
            current_user_id(),
            latitude=_coordinate(data, "latitude", 90),
            longitude=_coordinate(data, "longitude", 180),
        )
        return jsonify({"success": True, "message": "Checked in", "record": to_dict(record)}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        record = container.attendance_service.check_out(current_user_id())
        return jsonify({"success": True, "message": "Checked out", "record": to_dict(record)}), 200

    @app.route("/api/attendance/excuse", methods=["POST"], endpoint="excuse")
    @login_required
    def excuse():
        data = payload()
        record = container.attendance_service.file_excuse(
            current_user_id(),
            reason=data.get("reason", ""),
            substitution_link=data.get("substitution_link"),
        )
        return jsonify({"success": True, "message": "Excuse submitted", "record": to_dict(record)}), 201

    @app.route("/api/attendance/task", methods=["POST"], endpoint="report_task")
    @login_required
    def report_task():
        record = container.attendance_service.report_task(current_user_id(), role=payload().get("role", ""))
        return jsonify({"success": True, "message": "Task reported", "record": to_dict(record)}), 201

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        start = end = None
        month = request.args.get("month")
        if month:
            try:
                start, end = parse_month(month)
            except ValueError:
                raise ValidationError("month must be YYYY-MM")
        user_id = request.args.get("user_id", type=int)

        records = container.attendance_service.list_records(start=start, end=end, user_id=user_id)
        return jsonify({"success": True, "records": [to_dict(r) for r in records]})

    @app.route("/admin/attendance/<int:attendance_id>/status", methods=["POST"], endpoint="admin_override_status")
    @admin_required
    def admin_override_status(attendance_id: int):
        try:
            status = AttendanceStatus(str(payload().get("status", "")).upper())
        except ValueError:
            raise ValidationError("Unknown attendance status")

        record = container.attendance_service.override_status(
            current_role=current_role(),
            attendance_id=attendance_id,
            status=status,
        )
        return jsonify({"success": True, "record": to_dict(record)})

    @app.route("/admin/attendance/<int:attendance_id>/recompute", methods=["POST"], endpoint="admin_recompute_points")
    @admin_required
    def admin_recompute_points(attendance_id: int):
        record = container.attendance_service.recompute_points(current_role=current_role(), attendance_id=attendance_id)
        return jsonify({"success": True, "record": to_dict(record)})
