from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff or admin account with its attendance policy overrides.

    ``specific_active_days`` (0=Sunday ... 6=Saturday) replaces the school-wide
    schedule for this user when non-empty.
    """

    user_id: int
    username: str
    full_name: str
    password_hash: str
    role: Role
    is_active: bool = True
    employee_number: Optional[str] = None
    subjects: tuple[str, ...] = ()
    additional_roles: tuple[str, ...] = ()
    specific_active_days: frozenset[int] = frozenset()
