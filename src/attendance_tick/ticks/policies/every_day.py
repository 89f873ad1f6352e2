from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import LocalParts
from .base import DatePolicy


class EveryDayPolicy(DatePolicy):
    """Every calendar day is open for ticking."""

    label = "Every day"

    def is_allowed(self, *, now: datetime, parts: LocalParts) -> bool:
        return True
