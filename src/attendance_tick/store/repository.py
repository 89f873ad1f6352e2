from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..ticks.model import Tick


class AttendanceStore(Protocol):
    """Persistence contract for employees and ticks.

    Note (DIP): services depend on this interface, never on a concrete backend.
    Any backend fault is raised as `StoreUnavailable`.
    """

    def list_employee_names(self) -> Sequence[str]:
        raise NotImplementedError

    def employee_exists(self, name: str) -> bool:
        raise NotImplementedError

    def ticks_for(self, employee: str, date: str) -> Sequence[Tick]:
        """All ticks for the pair, oldest first."""

        raise NotImplementedError

    def ticks_history(
        self,
        employee: str,
        date: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[Tick]:
        """Up to `limit` (clamped to 1..500) ticks, newest first."""

        raise NotImplementedError

    def insert_tick_if_absent(self, tick: Tick) -> Optional[Tick]:
        """Single atomic conditional write on (employee, date, slot).

        Returns the stored tick, or None when one already exists.
        """

        raise NotImplementedError

    def seed_default_employees_if_empty(self, names: Iterable[str]) -> int:
        raise NotImplementedError

    def count_ticks(self) -> int:
        raise NotImplementedError

    def all_ticks_sorted(self) -> Sequence[Tick]:
        """Every tick ordered by (date, employee, slot)."""

        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
