from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> tuple[date, date]:
    """Parse YYYY-MM into the first and last day of that month."""
    first = datetime.strptime(value, "%Y-%m").date()
    last = first.replace(day=monthrange(first.year, first.month)[1])
    return first, last


def js_weekday(d: date) -> int:
    """Weekday index with 0=Sunday ... 6=Saturday."""
    return (d.weekday() + 1) % 7


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
