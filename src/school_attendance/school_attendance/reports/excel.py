from __future__ import annotations

import io

import pandas as pd

from .service import MonthlyReport

DETAIL_COLUMNS = [
    "date", "full_name", "employee_number", "roles", "type",
    "check_in", "check_out", "status", "points", "notes", "distance",
]
TASK_COLUMNS = ["date", "full_name", "roles", "task", "reported_at", "points"]


def report_to_xlsx(report: MonthlyReport) -> io.BytesIO:
    """Render the report into an in-memory workbook (Matrix / Daily Detail / Tasks sheets)."""
    matrix_columns = (
        ["full_name", "employee_number", "roles"]
        + [str(d) for d in range(1, report.days + 1)]
        + ["total_present", "total_points"]
    )

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(report.matrix, columns=matrix_columns).to_excel(writer, index=False, sheet_name="Matrix")
        pd.DataFrame(report.details, columns=DETAIL_COLUMNS).to_excel(writer, index=False, sheet_name="Daily Detail")
        pd.DataFrame(report.tasks, columns=TASK_COLUMNS).to_excel(writer, index=False, sheet_name="Tasks")

    output.seek(0)
    return output
