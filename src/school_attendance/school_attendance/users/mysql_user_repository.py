from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, join_list, split_list
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, username, full_name, password_hash, role, is_active,
    employee_number, subjects, additional_roles, specific_active_days
"""


def _days_to_str(days) -> Optional[str]:
    return ",".join(str(d) for d in sorted(days)) or None


def _to_user(r: Dict[str, Any]) -> User:
    days = r.get("specific_active_days")
    return User(
        user_id=int(r["user_id"]),
        username=r["username"],
        full_name=r["full_name"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", True)),
        employee_number=r.get("employee_number"),
        subjects=split_list(r.get("subjects")),
        additional_roles=split_list(r.get("additional_roles")),
        specific_active_days=frozenset(int(d) for d in str(days).split(",") if d.strip()) if days else frozenset(),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY full_name ASC, user_id ASC")
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        username: str,
        full_name: str,
        password_hash: str,
        role: Role,
        employee_number: Optional[str] = None,
        subjects: Sequence[str] = (),
        additional_roles: Sequence[str] = (),
        specific_active_days: frozenset[int] = frozenset(),
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, full_name, password_hash, role, is_active,
                                  employee_number, subjects, additional_roles, specific_active_days)
                VALUES(%s,%s,%s,%s,1,%s,%s,%s,%s)
                """,
                (
                    username,
                    full_name,
                    password_hash,
                    role.value,
                    employee_number,
                    join_list(subjects),
                    join_list(additional_roles),
                    _days_to_str(specific_active_days),
                ),
            )
            return int(cur.lastrowid)

    def update_user(self, user: User) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET username=%s, full_name=%s, password_hash=%s, role=%s, is_active=%s,
                    employee_number=%s, subjects=%s, additional_roles=%s, specific_active_days=%s
                WHERE user_id=%s
                """,
                (
                    user.username,
                    user.full_name,
                    user.password_hash,
                    user.role.value,
                    1 if user.is_active else 0,
                    user.employee_number,
                    join_list(user.subjects),
                    join_list(user.additional_roles),
                    _days_to_str(user.specific_active_days),
                    user.user_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0
