from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6371e3


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle (haversine) distance between two points, in meters.

    NaN when any coordinate is not finite.
    """
    if not all(math.isfinite(v) for v in (a.latitude, a.longitude, b.latitude, b.longitude)):
        return math.nan
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
