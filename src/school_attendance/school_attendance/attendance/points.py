from __future__ import annotations

from ..core.constants import POINTS_ADDITIONAL_TASK, POINTS_LATE, POINTS_PRESENT
from ..core.enums import AttendanceStatus, AttendanceType


def calculate_points(status: AttendanceStatus, type_: AttendanceType) -> int:
    """Scoring rule: task reports earn a flat bonus, main attendance earns by status."""
    if type_ == AttendanceType.ADDITIONAL:
        return POINTS_ADDITIONAL_TASK
    return {
        AttendanceStatus.PRESENT: POINTS_PRESENT,
        AttendanceStatus.LATE: POINTS_LATE,
    }.get(status, 0)
