from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.exceptions import TooEarly
from ..settings.model import SchoolConfig
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the hour model.

    There is no late cut-off: any hour after ``start_hour`` (including after
    ``end_hour``) is LATE.
    """

    def for_checkin(self, *, now: datetime, config: SchoolConfig) -> AttendanceStrategy:
        if now.hour < config.start_hour:
            raise TooEarly(config.start_hour, f"Check-in is not open yet, it starts at {config.start_hour:02d}:00")
        if now.hour == config.start_hour:
            return PresentStrategy()
        return LateStrategy()
