from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import as_utc, to_iso_utc
from ..core.enums import TickOutcome


@dataclass(frozen=True)
class Tick:
    """Domain entity: one attendance punch. Immutable once written."""

    employee: str
    date: str
    slot: str
    timestamp: datetime
    ip: str = ""
    user_agent: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))

    def to_dict(self) -> dict:
        return {
            "employee": self.employee,
            "date": self.date,
            "slot": self.slot,
            "timestamp": to_iso_utc(self.timestamp),
            "ip": self.ip,
            "userAgent": self.user_agent,
        }


@dataclass(frozen=True)
class Eligibility:
    allowed: bool
    earliest: datetime
    slot_time: datetime


@dataclass(frozen=True)
class TickResult:
    """Structured outcome of `TickService.record_tick`."""

    outcome: TickOutcome
    record: Optional[Tick] = None
    message: str = ""
    earliest: Optional[datetime] = None
    slot_time: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.outcome == TickOutcome.OK

    def to_dict(self) -> dict:
        if self.ok and self.record is not None:
            return {"ok": True, "record": self.record.to_dict()}

        out: dict = {"ok": False, "error": self.message, "code": self.outcome.value}
        if self.earliest is not None:
            out["earliest"] = to_iso_utc(self.earliest)
        if self.slot_time is not None:
            out["slotTime"] = to_iso_utc(self.slot_time)
        return out
