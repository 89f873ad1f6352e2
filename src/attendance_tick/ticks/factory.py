from __future__ import annotations

from dataclasses import dataclass

from .policies.base import DatePolicy
from .policies.every_day import EveryDayPolicy


@dataclass
class DatePolicyFactory:
    """Factory Pattern: resolve the configured date policy by name."""

    def create(self, name: str) -> DatePolicy:
        key = (name or "every_day").strip().lower().replace("-", "_")
        if key == "every_day":
            return EveryDayPolicy()
        raise ValueError(f"Unknown date policy: {name!r}")
