from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...common.datetime_utils import LocalParts


class DatePolicy(ABC):
    """Strategy Pattern: decide whether a calendar day accepts ticks at all."""

    #: Human readable description surfaced in metadata (`rules.days`).
    label: str = ""

    @abstractmethod
    def is_allowed(self, *, now: datetime, parts: LocalParts) -> bool:
        raise NotImplementedError
