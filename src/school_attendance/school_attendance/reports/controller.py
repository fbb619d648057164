from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local, parse_month
from ..common.serialization import to_dict
from ..common.web import admin_required
from ..core.exceptions import ValidationError
from ..container import Container
from .excel import DETAIL_COLUMNS, report_to_xlsx


def register(app: Flask, container: Container) -> None:
    def _build_report():
        month = request.args.get("month") or now_local().strftime("%Y-%m")
        user_id = request.args.get("user_id", type=int)
        try:
            parse_month(month)
        except ValueError:
            raise ValidationError("month must be YYYY-MM")
        return container.report_service.build(month=month, user_id=user_id)

    @app.route("/admin/report", methods=["GET"], endpoint="admin_report")
    @admin_required
    def admin_report():
        return jsonify({"success": True, "report": to_dict(_build_report())})

    @app.route("/admin/report.xlsx", methods=["GET"], endpoint="admin_report_xlsx")
    @admin_required
    def admin_report_xlsx():
        report = _build_report()
        return send_file(
            report_to_xlsx(report),
            download_name=f"attendance_report_{report.month}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route("/admin/report.csv", methods=["GET"], endpoint="admin_report_csv")
    @admin_required
    def admin_report_csv():
        report = _build_report()

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=DETAIL_COLUMNS)
        writer.writeheader()
        for row in report.details:
            writer.writerow(row)

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_report_{report.month}.csv"},
        )
