from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, AttendanceType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(
        self, user_id: int, work_date: date, type_: AttendanceType = AttendanceType.MAIN
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_and_date(self, user_id: int, work_date: date, type_: AttendanceType) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        type_: Optional[AttendanceType] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records matching every given filter, newest date first."""
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        """Insert atomically unless (user, date, type, task_key) exists.

        Returns the new id, or None when a matching row already exists.
        """
        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Set check_out_time only while it is still empty."""
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, points: int) -> bool:
        """Admin-only override."""
        raise NotImplementedError
