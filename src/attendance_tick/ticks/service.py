from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import TimeNormalizer, as_utc, to_iso_utc, utc_now
from ..common.validators import clamp_limit, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import TickOutcome
from ..core.exceptions import DomainError, StoreUnavailable, TooEarly, UnknownEmployee
from ..slots.catalog import SlotCatalog
from ..store.repository import AttendanceStore
from .model import Tick, TickResult
from .rules import TickEligibilityRule

logger = logging.getLogger(__name__)


class TickService:
    """Orchestrates a tick: validate, check timing, check employee, write once.

    `record_tick` never raises for the documented rejection kinds; it folds
    them into a `TickResult`. Read helpers let `StoreUnavailable` propagate.
    """

    def __init__(
        self,
        store: AttendanceStore,
        rule: TickEligibilityRule,
        normalizer: TimeNormalizer,
        catalog: SlotCatalog,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._rule = rule
        self._normalizer = normalizer
        self._catalog = catalog
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_utc(now or self._clock())

    def record_tick(
        self,
        employee: str,
        slot: str,
        *,
        now: datetime | None = None,
        client_ip: str = "",
        user_agent: str = "",
    ) -> TickResult:
        try:
            record = self._insert(employee, slot, now=self._now(now), client_ip=client_ip, user_agent=user_agent)
        except TooEarly as exc:
            logger.info("Tick rejected for %r slot %r: too early (opens %s)", employee, slot, to_iso_utc(exc.earliest))
            return TickResult(
                outcome=exc.outcome,
                message=str(exc),
                earliest=exc.earliest,
                slot_time=exc.slot_time,
            )
        except StoreUnavailable as exc:
            logger.error("Tick for %r slot %r failed: %s", employee, slot, exc, exc_info=True)
            return TickResult(outcome=exc.outcome, message="Storage unavailable, try again later")
        except DomainError as exc:
            logger.info("Tick rejected for %r slot %r: %s", employee, slot, exc)
            return TickResult(outcome=exc.outcome, message=str(exc))

        if record is None:
            return TickResult(outcome=TickOutcome.DUPLICATE, message="Already ticked for this slot today")

        logger.info("Tick recorded: %s %s %s", record.employee, record.date, record.slot)
        return TickResult(outcome=TickOutcome.OK, record=record)

    def _insert(self, employee: str, slot: str, *, now: datetime, client_ip: str, user_agent: str) -> Optional[Tick]:
        employee = require_non_empty(employee, "employee")
        slot = require_non_empty(slot, "slot")

        parts = self._normalizer.local_parts(now)
        eligibility = self._rule.evaluate(now, slot, parts)
        if not eligibility.allowed:
            raise TooEarly(
                f"Too early for this slot. You can tick {self._rule.early_minutes} minutes before the slot time.",
                earliest=eligibility.earliest,
                slot_time=eligibility.slot_time,
            )

        if not self._store.employee_exists(employee):
            raise UnknownEmployee("Unknown employee")

        tick = Tick(
            employee=employee,
            date=parts.iso_date(),
            slot=slot,
            timestamp=now,
            ip=client_ip or "",
            user_agent=user_agent or "",
        )
        return self._store.insert_tick_if_absent(tick)

    def ticks_today(self, employee: str, *, now: datetime | None = None) -> tuple[str, Sequence[Tick]]:
        employee = require_non_empty(employee, "employee")
        today = self._normalizer.local_date(self._now(now))
        return today, self._store.ticks_for(employee, today)

    def history(
        self,
        employee: str,
        *,
        date: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[Tick]:
        employee = require_non_empty(employee, "employee")
        return self._store.ticks_history(employee, date, clamp_limit(limit))

    def list_employees(self) -> Sequence[str]:
        return self._store.list_employee_names()

    def seed_default_employees(self, names: Iterable[str]) -> int:
        return self._store.seed_default_employees_if_empty(names)

    def meta(self, *, now: datetime | None = None) -> dict:
        """Everything a client needs to render slot state without re-deriving rules."""
        now = self._now(now)
        parts = self._normalizer.local_parts(now)
        return {
            "serverTime": to_iso_utc(now),
            "localDate": parts.iso_date(),
            "allowedNow": self._rule.is_date_allowed(now, parts),
            "slots": self._catalog.as_dicts(),
            "rules": {
                "days": self._rule.date_policy.label,
                "earlyMinutes": self._rule.early_minutes,
                "timeZone": self._normalizer.tz_name,
            },
        }
