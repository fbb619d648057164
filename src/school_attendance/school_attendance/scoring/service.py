from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.engine import determine_working_day
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import js_weekday, now_local
from ..common.geo import GeoPoint, distance_meters
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LEADERBOARD_LIMIT, LOW_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceType, Role
from ..core.exceptions import ValidationError
from ..settings.service import SchoolConfigService
from ..users.repository import UserRepository
from .aggregator import LeaderboardEntry, attendance_rate, leaderboard, total_points


@dataclass(frozen=True)
class Dashboard:
    """Read-model for the personal dashboard."""

    user_id: int
    full_name: str
    today: date
    today_record: Optional[AttendanceRecord]
    tasks_done: tuple[str, ...]
    tasks_pending: tuple[str, ...]
    history: list[AttendanceRecord]
    total_points: int
    attendance_rate: int
    low_attendance: bool
    is_working_day: bool
    distance_meters: Optional[float] = None
    in_range: Optional[bool] = None


class ScoreService:
    """Read-only summaries: dashboard, leaderboards."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, configs: SchoolConfigService):
        self._attendance = attendance
        self._users = users
        self._configs = configs

    def dashboard(
        self,
        user_id: int,
        *,
        today: date | None = None,
        position: GeoPoint | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Dashboard:
        today = today or now_local().date()
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        config = self._configs.get()

        records = self._attendance.find_all(user_id=user_id)
        main = sorted(
            (r for r in records if r.type == AttendanceType.MAIN),
            key=lambda r: r.work_date,
            reverse=True,
        )
        today_record = next((r for r in main if r.work_date == today), None)
        tasks_done = tuple(
            r.notes or "" for r in records if r.type == AttendanceType.ADDITIONAL and r.work_date == today
        )
        rate = attendance_rate(main)

        distance = in_range = None
        if position is not None:
            distance = distance_meters(position, config.center)
            in_range = distance <= config.radius_meters

        return Dashboard(
            user_id=user.user_id,
            full_name=user.full_name,
            today=today,
            today_record=today_record,
            tasks_done=tasks_done,
            tasks_pending=tuple(role for role in user.additional_roles if role not in tasks_done),
            history=main[:history_limit],
            total_points=total_points(user_id, records),
            attendance_rate=rate,
            low_attendance=rate < LOW_ATTENDANCE_THRESHOLD,
            is_working_day=determine_working_day(user, config, js_weekday(today)),
            distance_meters=distance,
            in_range=in_range,
        )

    def leaderboard(
        self,
        role_filter: Optional[str] = None,
        *,
        limit: int = DEFAULT_LEADERBOARD_LIMIT,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[LeaderboardEntry]:
        records = self._attendance.find_all(start_date=start, end_date=end, type_=AttendanceType.MAIN)
        return leaderboard(records, self._users.list_all(), role_filter, limit)

    def role_categories(self) -> Sequence[str]:
        """Distinct additional roles held by staff, for leaderboard tabs."""
        roles: set[str] = set()
        for u in self._users.list_all():
            if u.role == Role.STAFF:
                roles.update(u.additional_roles)
        return sorted(roles)
