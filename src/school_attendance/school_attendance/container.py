from __future__ import annotations

from dataclasses import dataclass

from .attendance.engine import AttendanceEngine
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import MonthlyReportService
from .scoring.service import ScoreService
from .settings.mysql_settings_repository import MySQLSchoolConfigRepository
from .settings.repository import SchoolConfigRepository
from .settings.service import SchoolConfigService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    config_repo: SchoolConfigRepository

    auth_service: AuthService
    user_service: UserService
    config_service: SchoolConfigService
    attendance_service: AttendanceService
    score_service: ScoreService
    report_service: MonthlyReportService


def build_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    config_repo: SchoolConfigRepository,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    config_service = SchoolConfigService(config_repo)
    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        config_repo=config_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        config_service=config_service,
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            config_service,
            engine=AttendanceEngine(strategy_factory=AttendanceStrategyFactory()),
        ),
        score_service=ScoreService(attendance_repo, users_repo, config_service),
        report_service=MonthlyReportService(attendance_repo, users_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        config_repo=MySQLSchoolConfigRepository(conn),
    )
