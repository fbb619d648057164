import pytest

from src.school_attendance.school_attendance.core.exceptions import InvalidTimeWindow, ValidationError
from src.school_attendance.school_attendance.settings.model import SchoolConfig
from src.school_attendance.school_attendance.settings.validation import validate_config, validate_for_save


def test_defaults_are_valid():
    config = SchoolConfig()
    assert validate_for_save(config) is config
    assert config.active_days == frozenset({1, 2, 3, 4, 5})


@pytest.mark.parametrize("hours", [(14, 14, 17), (6, 17, 17), (15, 14, 17), (6, 14, 13)])
def test_time_window_must_be_strictly_increasing(hours):
    start, min_out, end = hours
    with pytest.raises(InvalidTimeWindow):
        validate_config(SchoolConfig(start_hour=start, min_check_out_hour=min_out, end_hour=end))


@pytest.mark.parametrize(
    "changes",
    [
        {"radius_meters": 0},
        {"latitude": 91.0},
        {"longitude": -181.0},
        {"end_hour": 24},
        {"active_days": frozenset({7})},
    ],
)
def test_field_checks(changes):
    with pytest.raises(ValidationError):
        validate_for_save(SchoolConfig(**changes))


def test_every_strictly_ordered_window_is_accepted():
    hours = range(24)
    for start in hours:
        for min_out in hours:
            for end in hours:
                config = SchoolConfig(start_hour=start, min_check_out_hour=min_out, end_hour=end)
                if start < min_out < end:
                    assert validate_config(config) is config
                else:
                    with pytest.raises(InvalidTimeWindow):
                        validate_config(config)
