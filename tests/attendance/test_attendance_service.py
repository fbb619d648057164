from datetime import datetime

import pytest

from src.school_attendance.school_attendance.attendance.engine import AttendanceEngine
from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, AttendanceType, Role
from src.school_attendance.school_attendance.core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    DuplicateTask,
    NotEligibleForCheckout,
    OutOfRange,
    TooEarly,
    ValidationError,
)
from src.school_attendance.school_attendance.settings.model import SchoolConfig
from src.school_attendance.school_attendance.settings.service import SchoolConfigService
from tests.fakes import InMemoryAttendance, InMemoryConfigs, InMemoryUsers, make_user

CONFIG = SchoolConfig(latitude=0.0, longitude=0.0, radius_meters=50, start_hour=6, min_check_out_hour=14, end_hour=17)
DAY = datetime(2026, 3, 2)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


def build(users=None, distance: float = 10.0):
    attendance = InMemoryAttendance()
    users = InMemoryUsers(users or [make_user(1, additional_roles=("homeroom", "scouts"))])
    service = AttendanceService(
        attendance,
        users,
        SchoolConfigService(InMemoryConfigs(CONFIG)),
        engine=AttendanceEngine(distance=lambda a, b: distance),
    )
    return service, attendance, users


def test_check_in_persists_record_with_id():
    service, attendance, _ = build()

    rec = service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 30))

    assert rec.attendance_id is not None
    assert attendance.get_by_id(rec.attendance_id).status == AttendanceStatus.PRESENT
    assert service.get_today_record(1, DAY.date()) == rec


def test_check_in_rejections_write_nothing():
    service, attendance, _ = build(distance=120.0)

    with pytest.raises(OutOfRange):
        service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 30))
    assert attendance.find_all() == []


def test_double_check_in_is_rejected():
    service, _, _ = build()
    service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 30))

    with pytest.raises(AlreadyCheckedIn):
        service.check_in(1, latitude=0.0, longitude=0.0, now=at(7, 30))


def test_inactive_user_cannot_check_in():
    service, _, _ = build(users=[make_user(1, is_active=False)])

    with pytest.raises(ValidationError):
        service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 30))


def test_check_out_flow():
    service, attendance, _ = build()
    rec = service.check_in(1, latitude=0.0, longitude=0.0, now=at(8))

    with pytest.raises(TooEarly):
        service.check_out(1, now=at(13, 59))

    out = service.check_out(1, now=at(15))
    assert out.check_out_time == at(15)
    assert attendance.get_by_id(rec.attendance_id).check_out_time == at(15)
    assert attendance.get_by_id(rec.attendance_id).status == AttendanceStatus.LATE

    with pytest.raises(NotEligibleForCheckout):
        service.check_out(1, now=at(16))


def test_check_out_without_check_in():
    service, _, _ = build()
    with pytest.raises(NotEligibleForCheckout):
        service.check_out(1, now=at(15))


def test_excuse_blocks_check_in_and_check_out():
    service, _, _ = build()
    rec = service.file_excuse(1, reason="  Family event ", substitution_link="", now=at(5))

    assert rec.status == AttendanceStatus.EXCUSED
    assert rec.notes == "Family event"
    assert rec.substitution_link is None

    with pytest.raises(AlreadyCheckedIn):
        service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 30))
    with pytest.raises(NotEligibleForCheckout):
        service.check_out(1, now=at(15))


def test_tasks_once_per_role_per_day():
    service, _, _ = build()

    service.report_task(1, role="homeroom", now=at(9))
    service.report_task(1, role="scouts", now=at(9, 5))
    with pytest.raises(DuplicateTask):
        service.report_task(1, role="homeroom", now=at(10))

    tasks = service.tasks_for_day(1, DAY.date())
    assert sorted(t.notes for t in tasks) == ["homeroom", "scouts"]
    assert all(t.type == AttendanceType.ADDITIONAL and t.points == 5 for t in tasks)


def test_task_role_must_be_held_by_user():
    service, _, _ = build()
    with pytest.raises(ValidationError):
        service.report_task(1, role="librarian", now=at(9))


def test_task_and_main_attendance_are_independent():
    service, _, _ = build()
    service.report_task(1, role="homeroom", now=at(5))

    rec = service.check_in(1, latitude=0.0, longitude=0.0, now=at(6))
    assert rec.status == AttendanceStatus.PRESENT


def test_override_then_recompute():
    service, attendance, _ = build()
    rec = service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 10))

    service.override_status(current_role=Role.ADMIN, attendance_id=rec.attendance_id, status=AttendanceStatus.LATE)
    assert attendance.get_by_id(rec.attendance_id).points == 10

    service.recompute_points(current_role=Role.ADMIN, attendance_id=rec.attendance_id)
    assert attendance.get_by_id(rec.attendance_id).points == 5


def test_override_requires_admin():
    service, _, _ = build()
    rec = service.check_in(1, latitude=0.0, longitude=0.0, now=at(6, 10))

    with pytest.raises(AuthorizationError):
        service.override_status(current_role=Role.STAFF, attendance_id=rec.attendance_id, status=AttendanceStatus.ABSENT)


def test_override_unknown_record():
    service, _, _ = build()
    with pytest.raises(ValidationError):
        service.recompute_points(current_role=Role.ADMIN, attendance_id=999)


def test_deactivated_user_cannot_check_out():
    service, _, users = build()
    service.check_in(1, latitude=0.0, longitude=0.0, now=at(8))
    users.set_active(1, is_active=False)

    with pytest.raises(ValidationError):
        service.check_out(1, now=at(15))
