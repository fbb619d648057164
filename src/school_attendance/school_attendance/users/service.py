from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import parse_weekdays, require_min_length, require_non_empty, split_list
from ..core.constants import DEFAULT_IMPORT_PASSWORD, MAX_ROLE_LABEL_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

CSV_HEADER = ["full_name", "username", "password", "employee_number", "subjects", "additional_roles"]
CSV_EXAMPLE = ["Jane Doe", "jane", "secret1", "12345678", "Mathematics", "homeroom"]


def _role_labels(values: Iterable[str]) -> tuple[str, ...]:
    labels = tuple(r.strip() for r in values if r.strip())
    for label in labels:
        if len(label) > MAX_ROLE_LABEL_LENGTH:
            raise ValidationError(f"Role labels must be at most {MAX_ROLE_LABEL_LENGTH} characters")
    return labels


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Wrong username or password, or the account is inactive")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Wrong username or password, or the account is inactive")

        logger.info("User %s logged in", user.username)
        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: manage staff accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        return user

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def create_account(
        self,
        *,
        full_name: str,
        username: str,
        password: str = "",
        role: Role = Role.STAFF,
        employee_number: Optional[str] = None,
        subjects: Iterable[str] = (),
        additional_roles: Iterable[str] = (),
        specific_active_days: Iterable[int] = (),
    ) -> int:
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        password = password or DEFAULT_IMPORT_PASSWORD
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be created from this screen")

        user_id = self._users.create_user(
            username=username,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
            employee_number=(employee_number or "").strip() or None,
            subjects=tuple(s.strip() for s in subjects if s.strip()),
            additional_roles=_role_labels(additional_roles),
            specific_active_days=parse_weekdays(specific_active_days),
        )
        logger.info("Created %s account %s (id=%s)", role.value, username, user_id)
        return user_id

    def update_account(
        self,
        *,
        user_id: int,
        full_name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        employee_number: Optional[str] = None,
        subjects: Optional[Iterable[str]] = None,
        additional_roles: Optional[Iterable[str]] = None,
        specific_active_days: Optional[Iterable[int]] = None,
        is_active: Optional[bool] = None,
    ) -> User:
        """Apply the given fields; omitted fields keep their value, an empty password keeps the old one."""
        user = self.get(user_id)
        changes: dict = {}

        if full_name is not None:
            changes["full_name"] = require_non_empty(full_name, "Full name")
        if username is not None:
            username = require_non_empty(username, "Username")
            other = self._users.get_by_username(username)
            if other and other.user_id != user.user_id:
                raise ValidationError("Username already exists")
            changes["username"] = username
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(password)
        if employee_number is not None:
            changes["employee_number"] = employee_number.strip() or None
        if subjects is not None:
            changes["subjects"] = tuple(s.strip() for s in subjects if s.strip())
        if additional_roles is not None:
            changes["additional_roles"] = _role_labels(additional_roles)
        if specific_active_days is not None:
            changes["specific_active_days"] = parse_weekdays(specific_active_days)
        if is_active is not None:
            if user.role == Role.ADMIN and not is_active:
                raise ValidationError("Admin accounts cannot be deactivated")
            changes["is_active"] = bool(is_active)

        updated = replace(user, **changes)
        self._users.update_user(updated)
        logger.info("Updated account %s (id=%s)", updated.username, updated.user_id)
        return updated

    def set_active(self, *, current_role: Role, user_id: int, is_active: bool) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        user = self.get(user_id)
        if user.role == Role.ADMIN and not is_active:
            raise ValidationError("Admin accounts cannot be deactivated")
        self._users.set_active(user_id, is_active=is_active)
        logger.info("Account %s active=%s", user.username, is_active)

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        user = self.get(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._users.delete_by_id(user_id):
            raise ValidationError("Failed to delete user")
        logger.info("Deleted account %s (id=%s)", user.username, user_id)

    def import_csv(self, text: str) -> int:
        """Create staff accounts from CSV text (header row first).

        Rows with fewer than two columns are skipped; rows that fail validation
        (e.g. duplicate username) are skipped and logged.
        """
        reader = csv.reader(io.StringIO(text))
        next(reader, None)

        count = 0
        for line_no, cols in enumerate(reader, start=2):
            cols = [c.strip() for c in cols]
            if len(cols) < 2 or not cols[0] or not cols[1]:
                continue
            cols += [""] * (len(CSV_HEADER) - len(cols))
            try:
                self.create_account(
                    full_name=cols[0],
                    username=cols[1],
                    password=cols[2],
                    employee_number=cols[3],
                    subjects=split_list(cols[4]),
                    additional_roles=split_list(cols[5]),
                )
            except ValidationError as e:
                logger.info("Skipping CSV line %s: %s", line_no, e)
                continue
            count += 1

        logger.info("Imported %s staff accounts from CSV", count)
        return count

    @staticmethod
    def csv_template() -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerow(CSV_EXAMPLE)
        return out.getvalue()
