from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, AttendanceType, Role
from src.school_attendance.school_attendance.settings.model import SchoolConfig
from src.school_attendance.school_attendance.users.model import User


def make_user(user_id: int = 1, **kwargs) -> User:
    defaults = dict(
        user_id=user_id,
        username=f"user{user_id}",
        full_name=f"User {user_id}",
        password_hash="CHANGE_ME",
        role=Role.STAFF,
    )
    defaults.update(kwargs)
    return User(**defaults)


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self._by_id, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: (u.full_name, u.user_id))

    def create_user(self, *, username, full_name, password_hash, role, employee_number=None,
                    subjects=(), additional_roles=(), specific_active_days=frozenset()) -> int:
        user_id = self._next_id
        self._next_id += 1
        self._by_id[user_id] = User(
            user_id=user_id,
            username=username,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            employee_number=employee_number,
            subjects=tuple(subjects),
            additional_roles=tuple(additional_roles),
            specific_active_days=frozenset(specific_active_days),
        )
        return user_id

    def update_user(self, user: User) -> bool:
        if user.user_id not in self._by_id:
            return False
        self._by_id[user.user_id] = user
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(user_id, None) is not None

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        user = self._by_id.get(user_id)
        if not user:
            return False
        self._by_id[user_id] = replace(user, is_active=is_active)
        return True


class InMemoryAttendance:
    """Enforces the same unique key as attendance_records.uq_attendance_day."""

    def __init__(self, records=()):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0
        for r in records:
            self.create_if_absent(r)

    def _key(self, r: AttendanceRecord):
        return (r.user_id, r.work_date, r.type, r.task_key)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_for_user_and_date(self, user_id: int, work_date: date, type_=AttendanceType.MAIN):
        rows = self.list_for_user_and_date(user_id, work_date, type_)
        return rows[0] if rows else None

    def list_for_user_and_date(self, user_id: int, work_date: date, type_: AttendanceType):
        return [r for r in self._by_id.values() if r.user_id == user_id and r.work_date == work_date and r.type == type_]

    def find_all(self, *, start_date=None, end_date=None, user_id=None, type_=None):
        rows = [
            r
            for r in self._by_id.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (user_id is None or r.user_id == user_id)
            and (type_ is None or r.type == type_)
        ]
        rows.sort(key=lambda r: r.attendance_id)
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        if any(self._key(r) == self._key(record) for r in self._by_id.values()):
            return None
        self._id += 1
        self._by_id[self._id] = replace(record, attendance_id=self._id)
        return self._id

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        r = self._by_id.get(attendance_id)
        if not r or r.check_out_time is not None:
            return False
        self._by_id[attendance_id] = replace(r, check_out_time=check_out_time)
        return True

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, points: int) -> bool:
        r = self._by_id.get(attendance_id)
        if not r:
            return False
        self._by_id[attendance_id] = replace(r, status=status, points=points)
        return True


class InMemoryConfigs:
    def __init__(self, config: Optional[SchoolConfig] = None):
        self.config = config
        self.writes = 0

    def read(self) -> Optional[SchoolConfig]:
        return self.config

    def write(self, config: SchoolConfig) -> None:
        self.config = config
        self.writes += 1
