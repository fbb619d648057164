from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SchoolConfig
from .repository import SchoolConfigRepository


def _days_to_str(days) -> str:
    return ",".join(str(d) for d in sorted(days))


def _days_from_str(value: Optional[str]) -> frozenset[int]:
    if not value:
        return frozenset()
    return frozenset(int(p) for p in str(value).split(",") if p.strip())


class MySQLSchoolConfigRepository(SchoolConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def read(self) -> Optional[SchoolConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT school_name, school_address, latitude, longitude, radius_meters,
                       start_hour, min_check_out_hour, end_hour, active_days
                FROM school_config
                ORDER BY config_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return SchoolConfig(
                school_name=r["school_name"],
                school_address=r.get("school_address") or "-",
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                radius_meters=int(r["radius_meters"]),
                start_hour=int(r["start_hour"]),
                min_check_out_hour=int(r["min_check_out_hour"]),
                end_hour=int(r["end_hour"]),
                active_days=_days_from_str(r.get("active_days")),
            )

    def write(self, config: SchoolConfig) -> None:
        params = (
            config.school_name,
            config.school_address,
            config.latitude,
            config.longitude,
            int(config.radius_meters),
            int(config.start_hour),
            int(config.min_check_out_hour),
            int(config.end_hour),
            _days_to_str(config.active_days),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            # Single-row table: config_id is always 1.
            cur.execute(
                """
                INSERT INTO school_config(
                    config_id, school_name, school_address, latitude, longitude, radius_meters,
                    start_hour, min_check_out_hour, end_hour, active_days
                )
                VALUES(1,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    school_name=VALUES(school_name),
                    school_address=VALUES(school_address),
                    latitude=VALUES(latitude),
                    longitude=VALUES(longitude),
                    radius_meters=VALUES(radius_meters),
                    start_hour=VALUES(start_hour),
                    min_check_out_hour=VALUES(min_check_out_hour),
                    end_hour=VALUES(end_hour),
                    active_days=VALUES(active_days)
                """,
                params,
            )
