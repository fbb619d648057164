from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus, AttendanceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, type, check_in_time, check_out_time, status,
    location_lat, location_lng, distance_meters, points, notes, substitution_link
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        type=AttendanceType(r["type"]),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        location_lat=float(r.get("location_lat") or 0),
        location_lng=float(r.get("location_lng") or 0),
        distance_meters=float(r.get("distance_meters") or 0),
        points=int(r.get("points") or 0),
        notes=r.get("notes"),
        substitution_link=r.get("substitution_link"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(
        self, user_id: int, work_date: date, type_: AttendanceType = AttendanceType.MAIN
    ) -> Optional[AttendanceRecord]:
        rows = self.list_for_user_and_date(user_id, work_date, type_)
        return rows[0] if rows else None

    def list_for_user_and_date(self, user_id: int, work_date: date, type_: AttendanceType) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s AND type=%s
                ORDER BY attendance_id ASC
                """,
                (user_id, work_date, type_.value),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        type_: Optional[AttendanceType] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if type_ is not None:
            clauses.append("type=%s")
            params.append(type_.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, type, task_key, check_in_time, check_out_time, status,
                        location_lat, location_lng, distance_meters, points, notes, substitution_link
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        record.work_date,
                        record.type.value,
                        record.task_key,
                        record.check_in_time,
                        record.check_out_time,
                        record.status.value,
                        record.location_lat,
                        record.location_lng,
                        record.distance_meters,
                        int(record.points),
                        record.notes,
                        record.substitution_link,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            # uq_attendance_day: another request inserted the same entry first.
            return None

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, points: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, points=%s
                WHERE attendance_id=%s
                """,
                (status.value, int(points), int(attendance_id)),
            )
            return cur.rowcount > 0
