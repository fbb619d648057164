from datetime import date

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.common.geo import GeoPoint
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, AttendanceType, Role
from src.school_attendance.school_attendance.scoring.service import ScoreService
from src.school_attendance.school_attendance.settings.model import SchoolConfig
from src.school_attendance.school_attendance.settings.service import SchoolConfigService
from tests.fakes import InMemoryAttendance, InMemoryConfigs, InMemoryUsers, make_user

TODAY = date(2026, 3, 4)  # Wednesday


def record(user_id, day, status, points, type_=AttendanceType.MAIN, notes=None):
    return AttendanceRecord(
        user_id=user_id, work_date=date(2026, 3, day), type=type_, status=status, points=points, notes=notes
    )


def build():
    users = InMemoryUsers(
        [
            make_user(1, full_name="Ana", additional_roles=("homeroom", "scouts")),
            make_user(2, full_name="Budi", additional_roles=("library",), specific_active_days=frozenset({6})),
            make_user(9, full_name="Admin", role=Role.ADMIN, additional_roles=("ignored",)),
        ]
    )
    attendance = InMemoryAttendance(
        [
            record(1, 2, AttendanceStatus.ABSENT, 0),
            record(1, 3, AttendanceStatus.ABSENT, 0),
            record(1, 4, AttendanceStatus.PRESENT, 10),
            record(1, 4, AttendanceStatus.PRESENT, 5, AttendanceType.ADDITIONAL, "homeroom"),
            record(2, 2, AttendanceStatus.LATE, 5),
        ]
    )
    configs = SchoolConfigService(InMemoryConfigs(SchoolConfig(latitude=0.0, longitude=0.0, radius_meters=50)))
    return ScoreService(attendance, users, configs)


def test_dashboard_summary():
    board = build().dashboard(1, today=TODAY)

    assert board.today_record.status == AttendanceStatus.PRESENT
    assert board.tasks_done == ("homeroom",)
    assert board.tasks_pending == ("scouts",)
    assert board.total_points == 15
    assert board.attendance_rate == 33
    assert board.low_attendance is True
    assert board.is_working_day is True
    assert [r.work_date.day for r in board.history] == [4, 3, 2]
    assert board.distance_meters is None and board.in_range is None


def test_dashboard_uses_user_specific_days():
    board = build().dashboard(2, today=TODAY)
    assert board.is_working_day is False
    assert board.today_record is None
    assert board.low_attendance is False


def test_dashboard_distance_preview():
    board = build().dashboard(1, today=TODAY, position=GeoPoint(0.0, 0.0))
    assert board.distance_meters == 0
    assert board.in_range is True

    far = build().dashboard(1, today=TODAY, position=GeoPoint(0.01, 0.0))
    assert far.in_range is False


def test_leaderboard_and_categories():
    service = build()

    assert [e.user_id for e in service.leaderboard()] == [1, 2]
    assert [e.user_id for e in service.leaderboard("library")] == [2]
    assert list(service.role_categories()) == ["homeroom", "library", "scouts"]


def test_leaderboard_date_window():
    service = build()
    board = service.leaderboard(start=date(2026, 3, 2), end=date(2026, 3, 2))
    assert [(e.user_id, e.total_points) for e in board] == [(2, 5), (1, 0)]
