from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_month
from ..core.enums import AttendanceStatus, AttendanceType, Role
from ..users.model import User
from ..users.repository import UserRepository

STATUS_CODES = {
    AttendanceStatus.PRESENT: "P",
    AttendanceStatus.LATE: "L",
    AttendanceStatus.EXCUSED: "E",
    AttendanceStatus.ABSENT: "A",
}
_ATTENDED = {AttendanceStatus.PRESENT, AttendanceStatus.LATE}


@dataclass(frozen=True)
class MonthlyReport:
    month: str
    days: int
    matrix: list[dict]
    details: list[dict]
    tasks: list[dict]


def _fmt_time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M:%S") if value else "-"


def _roles_label(user: Optional[User]) -> str:
    if not user or not user.additional_roles:
        return "Subject teacher"
    return ", ".join(user.additional_roles)


class MonthlyReportService:
    """Monthly attendance report: status matrix, daily detail and task reports."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def build(self, *, month: str, user_id: Optional[int] = None) -> MonthlyReport:
        first, last = parse_month(month)
        records = self._attendance.find_all(start_date=first, end_date=last, user_id=user_id)
        users = [u for u in self._users.list_all() if user_id is None or u.user_id == user_id]
        by_id = {u.user_id: u for u in users}

        main = [r for r in records if r.type == AttendanceType.MAIN]
        status_by_day: dict[tuple[int, date], AttendanceStatus] = {(r.user_id, r.work_date): r.status for r in main}

        matrix: list[dict] = []
        for u in users:
            if u.role != Role.STAFF:
                continue
            row: dict = {
                "full_name": u.full_name,
                "employee_number": u.employee_number or "",
                "roles": _roles_label(u),
            }
            for day in range(1, last.day + 1):
                status = status_by_day.get((u.user_id, first.replace(day=day)))
                row[str(day)] = STATUS_CODES.get(status, "-") if status else "-"
            mine = [r for r in main if r.user_id == u.user_id]
            row["total_present"] = sum(1 for r in mine if r.status in _ATTENDED)
            row["total_points"] = sum(r.points for r in mine)
            matrix.append(row)

        def _name(user_id_: int) -> str:
            u = by_id.get(user_id_)
            return u.full_name if u else str(user_id_)

        details = [
            {
                "date": r.work_date.strftime("%Y-%m-%d"),
                "full_name": _name(r.user_id),
                "employee_number": (by_id[r.user_id].employee_number or "") if r.user_id in by_id else "",
                "roles": _roles_label(by_id.get(r.user_id)),
                "type": r.type.value,
                "check_in": _fmt_time(r.check_in_time),
                "check_out": _fmt_time(r.check_out_time),
                "status": r.status.value,
                "points": r.points,
                "notes": r.notes or "-",
                "distance": f"{int(r.distance_meters + 0.5)}m",
            }
            for r in sorted(main, key=lambda r: (r.work_date, _name(r.user_id)))
        ]

        tasks = [
            {
                "date": r.work_date.strftime("%Y-%m-%d"),
                "full_name": _name(r.user_id),
                "roles": _roles_label(by_id.get(r.user_id)),
                "task": r.notes or "",
                "reported_at": _fmt_time(r.check_in_time),
                "points": r.points,
            }
            for r in sorted(
                (r for r in records if r.type == AttendanceType.ADDITIONAL),
                key=lambda r: (r.work_date, _name(r.user_id)),
            )
        ]

        return MonthlyReport(month=month, days=last.day, matrix=matrix, details=details, tasks=tasks)
