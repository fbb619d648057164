from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..common.geo import GeoPoint, distance_meters
from ..core.enums import AttendanceStatus, AttendanceType
from ..core.exceptions import (
    AlreadyCheckedIn,
    DuplicateTask,
    NotEligibleForCheckout,
    OutOfRange,
    TooEarly,
)
from ..settings.model import SchoolConfig
from ..users.model import User
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .points import calculate_points

_CLOSED_FOR_THE_DAY = {AttendanceStatus.EXCUSED, AttendanceStatus.ABSENT}


def determine_working_day(user: User, config: SchoolConfig, weekday: int) -> bool:
    """Whether ``weekday`` (0=Sunday) is a scheduled day for this user.

    A non-empty per-user override replaces the school default. Informational
    only: attendance is still accepted on other days.
    """
    days = user.specific_active_days if user.specific_active_days else config.active_days
    return weekday in days


@dataclass
class AttendanceEngine:
    """Eligibility, status and points for one attendance action.

    Pure: every call gets ``now`` and the config explicitly and returns the
    record to persist; nothing is written here.
    """

    strategy_factory: AttendanceStrategyFactory = field(default_factory=AttendanceStrategyFactory)
    distance: Callable[[GeoPoint, GeoPoint], float] = distance_meters

    def evaluate_check_in(
        self,
        *,
        user: User,
        now: datetime,
        position: GeoPoint,
        config: SchoolConfig,
        existing_today: Optional[AttendanceRecord],
    ) -> AttendanceRecord:
        if existing_today is not None:
            raise AlreadyCheckedIn()

        distance = self.distance(position, config.center)
        # NaN compares false both ways, so test for inclusion.
        if not distance <= config.radius_meters:
            raise OutOfRange(distance, config.radius_meters)

        decision = self.strategy_factory.for_checkin(now=now, config=config).decide_checkin(now=now, config=config)

        return AttendanceRecord(
            user_id=user.user_id,
            work_date=now.date(),
            type=AttendanceType.MAIN,
            status=decision.status,
            check_in_time=now,
            check_out_time=None,
            location_lat=position.latitude,
            location_lng=position.longitude,
            distance_meters=distance,
            points=decision.points,
        )

    def evaluate_check_out(
        self,
        *,
        record: Optional[AttendanceRecord],
        now: datetime,
        config: SchoolConfig,
    ) -> AttendanceRecord:
        if (
            record is None
            or record.type != AttendanceType.MAIN
            or record.check_in_time is None
            or record.check_out_time is not None
            or record.status in _CLOSED_FOR_THE_DAY
        ):
            raise NotEligibleForCheckout()

        if now.hour < config.min_check_out_hour:
            raise TooEarly(
                config.min_check_out_hour,
                f"Too early to check out, check-out opens at {config.min_check_out_hour:02d}:00",
            )

        # Status and points stay as decided at check-in.
        return replace(record, check_out_time=now)

    def file_excuse(
        self,
        *,
        user: User,
        now: datetime,
        reason: str,
        substitution_link: Optional[str],
        existing_today: Optional[AttendanceRecord],
    ) -> AttendanceRecord:
        if existing_today is not None:
            raise AlreadyCheckedIn()

        return AttendanceRecord(
            user_id=user.user_id,
            work_date=now.date(),
            type=AttendanceType.MAIN,
            status=AttendanceStatus.EXCUSED,
            points=calculate_points(AttendanceStatus.EXCUSED, AttendanceType.MAIN),
            notes=reason,
            substitution_link=substitution_link,
        )

    def report_additional_task(
        self,
        *,
        user: User,
        now: datetime,
        role_label: str,
        reported_roles: Iterable[str],
    ) -> AttendanceRecord:
        if role_label in set(reported_roles):
            raise DuplicateTask(role_label)

        return AttendanceRecord(
            user_id=user.user_id,
            work_date=now.date(),
            type=AttendanceType.ADDITIONAL,
            status=AttendanceStatus.PRESENT,
            check_in_time=now,
            check_out_time=now,
            points=calculate_points(AttendanceStatus.PRESENT, AttendanceType.ADDITIONAL),
            notes=role_label,
        )

    @staticmethod
    def override_status(record: AttendanceRecord, new_status: AttendanceStatus) -> AttendanceRecord:
        """Admin override. Points are left as they were."""
        return replace(record, status=new_status)

    @staticmethod
    def recompute_points(record: AttendanceRecord) -> AttendanceRecord:
        return replace(record, points=calculate_points(record.status, record.type))
