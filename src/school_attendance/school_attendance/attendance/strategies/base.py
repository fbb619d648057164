from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.model import SchoolConfig


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    points: int


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a check-in status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, config: SchoolConfig) -> StatusDecision:
        raise NotImplementedError
