from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.geo import GeoPoint
from ..core.enums import AttendanceStatus, AttendanceType, Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    DuplicateTask,
    NotEligibleForCheckout,
    ValidationError,
)
from ..settings.service import SchoolConfigService
from ..users.model import User
from ..users.repository import UserRepository
from .engine import AttendanceEngine
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: check-in, check-out, excuse, task report, admin overrides.

    Reads the stores, asks the engine for a decision, persists the result.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        configs: SchoolConfigService,
        *,
        engine: AttendanceEngine | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._configs = configs
        self._engine = engine or AttendanceEngine()

    def _get_active_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        if not user.is_active:
            raise ValidationError("This account is inactive")
        return user

    def check_in(self, user_id: int, *, latitude: float, longitude: float, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        user = self._get_active_user(user_id)
        config = self._configs.get()
        existing = self._attendance.get_for_user_and_date(user_id, now.date(), AttendanceType.MAIN)

        try:
            record = self._engine.evaluate_check_in(
                user=user,
                now=now,
                position=GeoPoint(latitude=float(latitude), longitude=float(longitude)),
                config=config,
                existing_today=existing,
            )
        except ValidationError as e:
            logger.info("Check-in rejected for user %s: %s", user_id, e)
            raise

        new_id = self._attendance.create_if_absent(record)
        if new_id is None:
            raise AlreadyCheckedIn()

        logger.info(
            "User %s checked in at %s: %s (+%s pts, %.0fm)",
            user_id,
            now.strftime("%H:%M"),
            record.status.value,
            record.points,
            record.distance_meters,
        )
        return replace(record, attendance_id=new_id)

    def check_out(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        self._get_active_user(user_id)
        config = self._configs.get()
        record = self._attendance.get_for_user_and_date(user_id, now.date(), AttendanceType.MAIN)

        try:
            updated = self._engine.evaluate_check_out(record=record, now=now, config=config)
        except ValidationError as e:
            logger.info("Check-out rejected for user %s: %s", user_id, e)
            raise

        if not self._attendance.update_checkout(attendance_id=updated.attendance_id, check_out_time=now):
            raise NotEligibleForCheckout()

        logger.info("User %s checked out at %s", user_id, now.strftime("%H:%M"))
        return updated

    def file_excuse(
        self,
        user_id: int,
        *,
        reason: str,
        substitution_link: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        user = self._get_active_user(user_id)
        existing = self._attendance.get_for_user_and_date(user_id, now.date(), AttendanceType.MAIN)

        record = self._engine.file_excuse(
            user=user,
            now=now,
            reason=(reason or "").strip() or None,
            substitution_link=(substitution_link or "").strip() or None,
            existing_today=existing,
        )

        new_id = self._attendance.create_if_absent(record)
        if new_id is None:
            raise AlreadyCheckedIn()

        logger.info("User %s filed an excuse for %s", user_id, record.work_date)
        return replace(record, attendance_id=new_id)

    def report_task(self, user_id: int, *, role: str, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        user = self._get_active_user(user_id)
        role = (role or "").strip()
        if role not in user.additional_roles:
            raise ValidationError(f"'{role}' is not one of your additional roles")

        reported = [r.notes or "" for r in self.tasks_for_day(user_id, now.date())]
        record = self._engine.report_additional_task(user=user, now=now, role_label=role, reported_roles=reported)

        new_id = self._attendance.create_if_absent(record)
        if new_id is None:
            raise DuplicateTask(role)

        logger.info("User %s reported task '%s' (+%s pts)", user_id, role, record.points)
        return replace(record, attendance_id=new_id)

    def override_status(self, *, current_role: Role, attendance_id: int, status: AttendanceStatus) -> AttendanceRecord:
        """Admin override of the status. Points are not recomputed."""
        record = self._get_for_admin(current_role, attendance_id)
        updated = self._engine.override_status(record, status)
        self._attendance.update_status(attendance_id=attendance_id, status=updated.status, points=updated.points)
        logger.info("Record %s status %s -> %s (points kept at %s)", attendance_id, record.status.value, status.value, updated.points)
        return updated

    def recompute_points(self, *, current_role: Role, attendance_id: int) -> AttendanceRecord:
        record = self._get_for_admin(current_role, attendance_id)
        updated = self._engine.recompute_points(record)
        self._attendance.update_status(attendance_id=attendance_id, status=updated.status, points=updated.points)
        logger.info("Record %s points %s -> %s", attendance_id, record.points, updated.points)
        return updated

    def _get_for_admin(self, current_role: Role, attendance_id: int) -> AttendanceRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise ValidationError("Attendance record does not exist")
        return record

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, today, AttendanceType.MAIN)

    def tasks_for_day(self, user_id: int, day: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user_and_date(user_id, day, AttendanceType.ADDITIONAL)

    def list_records(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
        type_: Optional[AttendanceType] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.find_all(start_date=start, end_date=end, user_id=user_id, type_=type_)
