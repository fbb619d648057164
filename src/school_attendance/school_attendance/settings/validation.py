from __future__ import annotations

from ..common.validators import require_in_range
from ..core.exceptions import InvalidTimeWindow, ValidationError
from .model import SchoolConfig


def validate_config(candidate: SchoolConfig) -> SchoolConfig:
    """Reject a configuration unless start_hour < min_check_out_hour < end_hour."""
    if not (candidate.start_hour < candidate.min_check_out_hour < candidate.end_hour):
        raise InvalidTimeWindow()
    return candidate


def validate_for_save(candidate: SchoolConfig) -> SchoolConfig:
    """Field checks applied by the admin form before the time window rule."""
    for name in ("start_hour", "min_check_out_hour", "end_hour"):
        require_in_range(getattr(candidate, name), name, 0, 23)
    if candidate.radius_meters is None or candidate.radius_meters <= 0:
        raise ValidationError("radius_meters must be a positive number")
    require_in_range(candidate.latitude, "latitude", -90, 90)
    require_in_range(candidate.longitude, "longitude", -180, 180)
    if any(not 0 <= d <= 6 for d in candidate.active_days):
        raise ValidationError("active_days must be weekday indices 0-6")
    return validate_config(candidate)
