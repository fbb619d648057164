from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def to_dict(obj: Any, *, exclude: tuple[str, ...] = ()) -> dict:
    """JSON-friendly dict for a domain dataclass (enums by value, dates ISO, sets sorted)."""
    if not is_dataclass(obj):
        raise TypeError(f"Expected a dataclass instance, got {type(obj)!r}")
    return {k: _plain(v) for k, v in asdict(obj).items() if k not in exclude}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value
