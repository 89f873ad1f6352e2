from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..core.constants import DEFAULT_SLOTS
from .model import Slot


class SlotCatalog:
    """Ordered, immutable set of tickable slots.

    Order is the configured display order; keys are not assumed to sort.
    """

    def __init__(self, slots: Iterable[Slot]):
        self._slots = tuple(slots)
        if not self._slots:
            raise ValueError("Slot catalog cannot be empty")

        self._by_key = {}
        for slot in self._slots:
            if slot.key in self._by_key:
                raise ValueError(f"Duplicate slot key {slot.key!r}")
            self._by_key[slot.key] = slot

    @classmethod
    def default(cls) -> "SlotCatalog":
        return cls(Slot(key=k, label=label) for k, label in DEFAULT_SLOTS)

    @classmethod
    def from_config(cls, value: Optional[str]) -> "SlotCatalog":
        """Parse `"08:00=08:00 AM;12:00=12:00 PM"`; a bare key is its own label.

        Empty/None gives the default catalog.
        """
        if not value or not value.strip():
            return cls.default()

        slots = []
        for chunk in value.split(";"):
            chunk = chunk.strip()
            if not chunk:
                continue
            key, sep, label = chunk.partition("=")
            key = key.strip()
            slots.append(Slot(key=key, label=label.strip() if sep and label.strip() else key))
        return cls(slots)

    def get(self, key: str) -> Optional[Slot]:
        return self._by_key.get(key)

    def keys(self) -> list[str]:
        return [s.key for s in self._slots]

    def as_dicts(self) -> list[dict]:
        return [s.as_dict() for s in self._slots]

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)
