from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreUnavailable
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Open a connection + cursor, commit on success, roll back on error.

    Driver errors surface as StoreUnavailable, except IntegrityError which
    repositories use to detect unique-key conflicts.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreUnavailable(f"Database connection failed: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError:
        conn.rollback()
        raise
    except mysql.connector.Error as e:
        conn.rollback()
        raise StoreUnavailable(f"Database error: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def join_list(values) -> str:
    """Store a tuple of labels in a TEXT column."""
    return ";".join(v.strip() for v in values if v and v.strip())


def split_list(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(p.strip() for p in str(value).split(";") if p.strip())
