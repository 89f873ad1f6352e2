from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield `(conn, cursor)`; commit on success, roll back on error.

    Connector errors escaping the block are re-raised as `StoreUnavailable`.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("MySQL connect failed: %s", exc)
        raise StoreUnavailable(f"Database unavailable: {exc}", backend="mysql") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _safe_rollback(conn)
        logger.error("MySQL operation failed: %s", exc)
        raise StoreUnavailable(f"Database error: {exc}", backend="mysql") from exc
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("MySQL rollback failed", exc_info=True)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_mysql_datetime(value: datetime) -> datetime:
    """DATETIME columns hold naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_mysql_datetime(value: Any) -> datetime:
    """Normalize DATETIME values across connector implementations.

    mysql-connector can return DATETIME as:
    - datetime.datetime (naive, stored as UTC)
    - string (e.g. '2024-03-01 01:00:00.123456')
    """

    if isinstance(value, datetime):
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)

    if isinstance(value, str):
        return datetime.fromisoformat(value.strip()).replace(tzinfo=timezone.utc)

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")


def iso_date(value: Any) -> str:
    """DATE columns come back as datetime.date (or str with some connectors)."""
    return value.isoformat() if hasattr(value, "isoformat") else str(value)
