from __future__ import annotations

import math
from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_in_range(value: float, field_name: str, low: float, high: float) -> float:
    if value is None or not (low <= value <= high):
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def parse_weekdays(values: Iterable[int | str]) -> frozenset[int]:
    days: set[int] = set()
    for v in values:
        try:
            day = int(v)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid weekday: {v!r}")
        if not 0 <= day <= 6:
            raise ValidationError(f"Invalid weekday: {v!r}")
        days.add(day)
    return frozenset(days)


def split_list(value: str | None) -> tuple[str, ...]:
    """Split a ';' or ',' separated cell into trimmed, non-empty items."""
    if not value:
        return ()
    sep = ";" if ";" in value else ","
    return tuple(item.strip() for item in value.split(sep) if item.strip())


def parse_coordinate(value, field_name: str, limit: float) -> float:
    """Finite float within +/-limit degrees."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Location unavailable, please enable GPS")
    if not math.isfinite(number):
        raise ValidationError("Location unavailable, please enable GPS")
    return require_in_range(number, field_name, -limit, limit)
