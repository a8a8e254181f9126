from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.constants import MYSQL_DUPLICATE_KEY_ERRNO, MYSQL_FOREIGN_KEY_ERRNOS
from ..core.exceptions import DuplicateRecordError, ReferencedRecordError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, rollback on any error.

    Unique-key violations surface as DuplicateRecordError and foreign-key
    violations as ReferencedRecordError, so services can react to them without
    importing the driver.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == MYSQL_DUPLICATE_KEY_ERRNO:
            raise DuplicateRecordError(str(e.msg)) from e
        if e.errno in MYSQL_FOREIGN_KEY_ERRNOS:
            raise ReferencedRecordError(str(e.msg)) from e
        raise
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


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def build_set_clause(patch: Dict[str, Any], allowed: Dict[str, str]) -> tuple[str, list[Any]]:
    """Turn a partial update into `col=%s, ...` plus params.

    `allowed` maps patch keys to column names; unknown keys are ignored.
    """

    parts: list[str] = []
    params: list[Any] = []
    for key, column in allowed.items():
        if key in patch:
            parts.append(f"{column}=%s")
            params.append(patch[key])
    return ", ".join(parts), params
