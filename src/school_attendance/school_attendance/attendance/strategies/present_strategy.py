from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus, AttendanceType
from ...settings.model import SchoolConfig
from ..points import calculate_points
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in during the opening hour."""

    def decide_checkin(self, *, now: datetime, config: SchoolConfig) -> StatusDecision:
        status = AttendanceStatus.PRESENT
        return StatusDecision(status=status, points=calculate_points(status, AttendanceType.MAIN))
