from __future__ import annotations

import re
from dataclasses import dataclass

_SLOT_KEY = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class Slot:
    """A named point in the day employees tick at. `key` is local "HH:MM"."""

    key: str
    label: str

    def __post_init__(self) -> None:
        if not _SLOT_KEY.match(self.key):
            raise ValueError(f"Invalid slot key {self.key!r}, expected HH:MM")

    @property
    def hour(self) -> int:
        return int(self.key[:2])

    @property
    def minute(self) -> int:
        return int(self.key[3:])

    def as_dict(self) -> dict:
        return {"key": self.key, "label": self.label}
