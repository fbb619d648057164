from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"


class AttendanceType(str, Enum):
    """Main = the daily check-in/check-out cycle; Additional = a role-linked duty report."""

    MAIN = "MAIN"
    ADDITIONAL = "ADDITIONAL"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"
    ABSENT = "ABSENT"
