from datetime import datetime

import pytest

from src.school_attendance.school_attendance.attendance.factory import AttendanceStrategyFactory
from src.school_attendance.school_attendance.attendance.points import calculate_points
from src.school_attendance.school_attendance.attendance.strategies.late_strategy import LateStrategy
from src.school_attendance.school_attendance.attendance.strategies.present_strategy import PresentStrategy
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, AttendanceType
from src.school_attendance.school_attendance.core.exceptions import TooEarly
from src.school_attendance.school_attendance.settings.model import SchoolConfig

CONFIG = SchoolConfig(start_hour=7, min_check_out_hour=13, end_hour=16)


def test_factory_checkin_within_start_hour_is_present():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2026, 1, 5, 7, 59, 59), config=CONFIG)
    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_after_start_hour_is_late():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2026, 1, 5, 8, 0), config=CONFIG)
    assert isinstance(strategy, LateStrategy)


def test_factory_rejects_checkin_before_start_hour():
    with pytest.raises(TooEarly):
        AttendanceStrategyFactory().for_checkin(now=datetime(2026, 1, 5, 6, 59), config=CONFIG)


@pytest.mark.parametrize(
    "status,type_,expected",
    [
        (AttendanceStatus.PRESENT, AttendanceType.MAIN, 10),
        (AttendanceStatus.LATE, AttendanceType.MAIN, 5),
        (AttendanceStatus.EXCUSED, AttendanceType.MAIN, 0),
        (AttendanceStatus.ABSENT, AttendanceType.MAIN, 0),
        (AttendanceStatus.PRESENT, AttendanceType.ADDITIONAL, 5),
    ],
)
def test_points_rule(status, type_, expected):
    assert calculate_points(status, type_) == expected
