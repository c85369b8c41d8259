from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import TIME_FORMAT
from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Commits when the block exits cleanly and rolls back on any exception.
    Driver errors come out as StoreUnavailableError; domain errors raised
    inside the block propagate unchanged.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Cannot connect to the database: %s", e)
        raise StoreUnavailableError("Database is unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        _safe_rollback(conn)
        logger.exception("Database operation failed")
        raise StoreUnavailableError("Database operation failed") from e
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("Rollback failed; the connection is closed without commit")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or 'HH:MM[:SS]' depending
    on the connector (C extension vs pure Python); fold them into `time`."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        return time(*divmod(minutes, 60), seconds)

    if isinstance(value, str):
        fields = [int(p) for p in value.strip().split(":") if p]
        if len(fields) not in (2, 3):
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*fields)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def mysql_time_to_hhmm(value: Any) -> Optional[str]:
    t = normalize_mysql_time(value)
    return t.strftime(TIME_FORMAT) if t is not None else None


def is_duplicate_key(error: mysql.connector.Error) -> bool:
    return error.errno == errorcode.ER_DUP_ENTRY
