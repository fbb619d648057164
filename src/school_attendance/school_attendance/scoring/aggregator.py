from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import DEFAULT_LEADERBOARD_LIMIT, LEADERBOARD_ALL_STAFF
from ..core.enums import AttendanceStatus, AttendanceType, Role
from ..users.model import User

_ATTENDED = {AttendanceStatus.PRESENT, AttendanceStatus.LATE}


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: int
    full_name: str
    total_points: int
    attendance_count: int
    additional_roles: tuple[str, ...] = ()


def total_points(user_id: int, records: Iterable[AttendanceRecord]) -> int:
    """Running total for one user, main attendance and task reports included."""
    return sum(r.points for r in records if r.user_id == user_id)


def leaderboard(
    records: Iterable[AttendanceRecord],
    users: Sequence[User],
    role_filter: Optional[str] = None,
    limit: int = DEFAULT_LEADERBOARD_LIMIT,
) -> list[LeaderboardEntry]:
    """Staff ranked by MAIN points, highest first.

    ``role_filter`` of None or ``"all"`` keeps every staff member; any other
    label keeps only staff holding that additional role. Ties keep the order
    of ``users``.
    """
    points: dict[int, int] = {}
    counts: dict[int, int] = {}
    for r in records:
        if r.type != AttendanceType.MAIN:
            continue
        points[r.user_id] = points.get(r.user_id, 0) + r.points
        counts[r.user_id] = counts.get(r.user_id, 0) + 1

    show_all = role_filter in (None, "", LEADERBOARD_ALL_STAFF)
    entries = [
        LeaderboardEntry(
            user_id=u.user_id,
            full_name=u.full_name,
            total_points=points.get(u.user_id, 0),
            attendance_count=counts.get(u.user_id, 0),
            additional_roles=tuple(u.additional_roles),
        )
        for u in users
        if u.role == Role.STAFF and (show_all or role_filter in u.additional_roles)
    ]
    entries.sort(key=lambda e: e.total_points, reverse=True)
    return entries[: max(int(limit), 0)]


def attendance_rate(records: Iterable[AttendanceRecord]) -> int:
    """Percent of MAIN entries that are Present or Late, rounded half up; 100 for no history."""
    main = [r for r in records if r.type == AttendanceType.MAIN]
    if not main:
        return 100
    attended = sum(1 for r in main if r.status in _ATTENDED)
    return (200 * attended + len(main)) // (2 * len(main))
