from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import LocalParts, TimeNormalizer, as_utc
from ..core.constants import DEFAULT_EARLY_MINUTES
from ..core.exceptions import DateNotAllowed, UnknownSlot
from ..slots.catalog import SlotCatalog
from .model import Eligibility
from .policies.base import DatePolicy
from .policies.every_day import EveryDayPolicy


class TickEligibilityRule:
    """Decides whether a slot may be ticked at a given instant.

    A slot opens `early_minutes` before its local time and never closes for
    the rest of that local day. Pure: no I/O, no state beyond configuration.
    """

    def __init__(
        self,
        catalog: SlotCatalog,
        normalizer: TimeNormalizer,
        *,
        date_policy: DatePolicy | None = None,
        early_minutes: int = DEFAULT_EARLY_MINUTES,
    ):
        if int(early_minutes) < 0:
            raise ValueError("early_minutes must be >= 0")
        self._catalog = catalog
        self._normalizer = normalizer
        self._date_policy = date_policy or EveryDayPolicy()
        self._early_minutes = int(early_minutes)

    @property
    def early_minutes(self) -> int:
        return self._early_minutes

    @property
    def date_policy(self) -> DatePolicy:
        return self._date_policy

    def is_date_allowed(self, now: datetime, parts: Optional[LocalParts] = None) -> bool:
        parts = parts or self._normalizer.local_parts(now)
        return self._date_policy.is_allowed(now=as_utc(now), parts=parts)

    def evaluate(self, now: datetime, slot_key: str, parts: Optional[LocalParts] = None) -> Eligibility:
        slot = self._catalog.get(slot_key)
        if slot is None:
            raise UnknownSlot("Invalid slot")

        now = as_utc(now)
        parts = parts or self._normalizer.local_parts(now)
        if not self.is_date_allowed(now, parts):
            raise DateNotAllowed("Not allowed today")

        slot_time = self._normalizer.zoned_instant(parts, slot.hour, slot.minute)
        earliest = slot_time - timedelta(minutes=self._early_minutes)
        return Eligibility(allowed=now >= earliest, earliest=earliest, slot_time=slot_time)
