from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, AttendanceType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance entry for a user on a day.

    A MAIN record with ``check_in_time=None`` and status EXCUSED is an excused
    absence filed in advance. ``attendance_id`` is None until the record is
    persisted.
    """

    user_id: int
    work_date: date
    type: AttendanceType
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    location_lat: float = 0.0
    location_lng: float = 0.0
    distance_meters: float = 0.0
    points: int = 0
    notes: Optional[str] = None
    substitution_link: Optional[str] = None
    attendance_id: Optional[int] = None

    @property
    def task_key(self) -> str:
        """Uniqueness key within (user, date, type): the role label for ADDITIONAL rows."""
        if self.type == AttendanceType.ADDITIONAL:
            return self.notes or ""
        return ""
