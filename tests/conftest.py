from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import pytest

from attendance_tick.common.datetime_utils import TimeNormalizer
from attendance_tick.core.exceptions import StoreUnavailable
from attendance_tick.slots.catalog import SlotCatalog
from attendance_tick.ticks.model import Tick
from attendance_tick.ticks.rules import TickEligibilityRule
from attendance_tick.ticks.service import TickService

PHNOM_PENH = "Asia/Phnom_Penh"
ICT = timezone(timedelta(hours=7))


def phnom_penh(y: int, m: int, d: int, hh: int, mm: int, ss: int = 0) -> datetime:
    """Local Phnom Penh wall-clock (fixed UTC+7) as an aware UTC instant."""
    return datetime(y, m, d, hh, mm, ss, tzinfo=ICT).astimezone(timezone.utc)


class InMemoryStore:
    """AttendanceStore fake. The lock makes insert a single atomic check-and-write."""

    backend = "memory"

    def __init__(self, employees: Iterable[str] = ()):
        self.employees: set[str] = set(employees)
        self.ticks: dict[tuple[str, str, str], Tick] = {}
        self.writes = 0
        self.down = False
        self.closed = False
        self._lock = threading.Lock()

    def _check(self) -> None:
        if self.down:
            raise StoreUnavailable("memory store down", backend="memory")

    def list_employee_names(self):
        self._check()
        return sorted(self.employees)

    def employee_exists(self, name: str) -> bool:
        self._check()
        return name in self.employees

    def ticks_for(self, employee: str, date: str):
        self._check()
        rows = [t for t in self.ticks.values() if t.employee == employee and t.date == date]
        return sorted(rows, key=lambda t: t.timestamp)

    def ticks_history(self, employee: str, date: Optional[str] = None, limit: int = 200):
        self._check()
        rows = [t for t in self.ticks.values() if t.employee == employee and (not date or t.date == date)]
        rows.sort(key=lambda t: t.timestamp, reverse=True)
        return rows[: max(1, min(500, limit))]

    def insert_tick_if_absent(self, tick: Tick) -> Optional[Tick]:
        self._check()
        key = (tick.employee, tick.date, tick.slot)
        with self._lock:
            if key in self.ticks:
                return None
            self.ticks[key] = tick
            self.writes += 1
            return tick

    def seed_default_employees_if_empty(self, names: Iterable[str]) -> int:
        self._check()
        if self.employees:
            return 0
        self.employees.update(names)
        return len(self.employees)

    def count_ticks(self) -> int:
        self._check()
        return len(self.ticks)

    def all_ticks_sorted(self):
        self._check()
        return sorted(self.ticks.values(), key=lambda t: (t.date, t.employee, t.slot))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fixed_now():
    # 2024-03-01 08:00:00 local Phnom Penh
    return datetime(2024, 3, 1, 1, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def normalizer():
    return TimeNormalizer(PHNOM_PENH)


@pytest.fixture
def catalog():
    return SlotCatalog.default()


@pytest.fixture
def rule(catalog, normalizer):
    return TickEligibilityRule(catalog, normalizer, early_minutes=5)


@pytest.fixture
def store():
    return InMemoryStore(["Heang", "Riya", "Kdey"])


@pytest.fixture
def service(store, rule, normalizer, catalog, fixed_now):
    return TickService(store, rule, normalizer, catalog, clock=lambda: fixed_now)


@pytest.fixture
def local_time():
    return phnom_penh


@pytest.fixture
def make_store():
    return InMemoryStore
