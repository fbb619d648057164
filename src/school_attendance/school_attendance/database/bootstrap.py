"""Schema and demo-account setup for a fresh MySQL database."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import join_list

logger = logging.getLogger(__name__)

# schema.sql names its own database; the configured one wins.
_DB_SELECTION = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$", re.IGNORECASE | re.MULTILINE)

DEMO_USERS = (
    # full_name, username, password, role, additional_roles
    ("Admin Demo", "admin", "admin123", "admin", ()),
    ("Demo Teacher", "teacher", "staff123", "staff", ("homeroom",)),
)


def split_statements(sql: str) -> Iterator[str]:
    """Yield the ';'-terminated statements of a SQL script.

    Full-line ``--`` comments are dropped; semicolons inside quoted literals
    do not end a statement.
    """
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    statement: list[str] = []
    quote = None
    prev = ""
    for ch in "\n".join(lines):
        if quote:
            if ch == quote and prev != "\\":
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            text = "".join(statement).strip()
            statement = []
            prev = ch
            if text:
                yield text
            continue
        statement.append(ch)
        prev = ch

    text = "".join(statement).strip()
    if text:
        yield text


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if missing and run schema.sql against it."""
    config = DBConfig.from_settings(db_config)
    ensure_database_exists(config)
    sql = _DB_SELECTION.sub("", Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for statement in split_statements(sql):
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s to %s", schema_path, config.describe())


def ensure_demo_users(db_config: dict) -> None:
    """Create or reset the demo admin and teacher accounts."""
    config = DBConfig.from_settings(db_config)
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for full_name, username, password, role, roles in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (full_name, username, password_hash, role, additional_roles, is_active)
                VALUES (%s, %s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name),
                    password_hash=VALUES(password_hash),
                    role=VALUES(role),
                    additional_roles=VALUES(additional_roles),
                    is_active=1
                """,
                (full_name, username, generate_password_hash(password), role, join_list(roles)),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ready on %s", config.describe())


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_settings(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
