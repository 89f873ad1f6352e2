from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.validators import clamp_limit
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_mysql_datetime, iso_date, to_mysql_datetime
from ..ticks.model import Tick
from .repository import AttendanceStore

logger = logging.getLogger(__name__)

_TICK_COLUMNS = "employee, tick_date, slot, tick_timestamp, ip, user_agent"


def _row_to_tick(r: dict) -> Tick:
    return Tick(
        employee=r["employee"],
        date=iso_date(r["tick_date"]),
        slot=r["slot"],
        timestamp=from_mysql_datetime(r["tick_timestamp"]),
        ip=r.get("ip") or "",
        user_agent=r.get("user_agent") or "",
    )


class MySQLAttendanceStore(AttendanceStore):
    """Relational backend. Uniqueness comes from `uq_ticks_employee_date_slot`."""

    backend = "mysql"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_employee_names(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT name FROM employees ORDER BY name ASC")
            return [r["name"] for r in fetchall(cur)]

    def employee_exists(self, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM employees WHERE name=%s", (name,))
            return fetchone(cur) is not None

    def ticks_for(self, employee: str, date: str) -> Sequence[Tick]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TICK_COLUMNS}
                FROM ticks
                WHERE employee=%s AND tick_date=%s
                ORDER BY tick_timestamp ASC, tick_id ASC
                """,
                (employee, date),
            )
            return [_row_to_tick(r) for r in fetchall(cur)]

    def ticks_history(
        self,
        employee: str,
        date: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[Tick]:
        clauses = ["employee=%s"]
        params: list[object] = [employee]
        if date:
            clauses.append("tick_date=%s")
            params.append(date)
        params.append(clamp_limit(limit))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TICK_COLUMNS}
                FROM ticks
                WHERE {where}
                ORDER BY tick_timestamp DESC, tick_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_tick(r) for r in fetchall(cur)]

    def insert_tick_if_absent(self, tick: Tick) -> Optional[Tick]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"""
                    INSERT INTO ticks({_TICK_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        tick.employee,
                        tick.date,
                        tick.slot,
                        to_mysql_datetime(tick.timestamp),
                        tick.ip,
                        tick.user_agent,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno != errorcode.ER_DUP_ENTRY:
                    raise
                logger.info("Duplicate tick %s/%s/%s rejected by unique key", tick.employee, tick.date, tick.slot)
                return None
            return tick

    def seed_default_employees_if_empty(self, names: Iterable[str]) -> int:
        names = [n.strip() for n in names if n and n.strip()]
        if not names:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM employees LIMIT 1")
            if fetchone(cur) is not None:
                return 0
            # INSERT IGNORE keeps concurrent first starts from colliding.
            cur.executemany("INSERT IGNORE INTO employees(name) VALUES(%s)", [(n,) for n in names])
            inserted = max(int(cur.rowcount or 0), 0)
        logger.info("Seeded %d default employees", inserted)
        return inserted

    def count_ticks(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM ticks")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def all_ticks_sorted(self) -> Sequence[Tick]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TICK_COLUMNS}
                FROM ticks
                ORDER BY tick_date ASC, employee ASC, slot ASC
                """
            )
            return [_row_to_tick(r) for r in fetchall(cur)]

    def close(self) -> None:
        self._conn_factory.close()
