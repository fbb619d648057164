from __future__ import annotations

from dataclasses import dataclass, field

from ..common.geo import GeoPoint


@dataclass(frozen=True)
class SchoolConfig:
    """School-wide attendance rules (one row per deployment).

    Hours use the integer 0-23 model: check-in opens at ``start_hour``,
    check-out opens at ``min_check_out_hour``. ``active_days`` uses
    0=Sunday ... 6=Saturday.
    """

    school_name: str = "My School"
    school_address: str = "-"
    latitude: float = -6.2
    longitude: float = 106.8
    radius_meters: int = 50
    start_hour: int = 6
    min_check_out_hour: int = 14
    end_hour: int = 17
    active_days: frozenset[int] = field(default_factory=lambda: frozenset({1, 2, 3, 4, 5}))

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)
