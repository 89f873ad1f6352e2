from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

from ..core.constants import EXPORT_FIELDS
from ..store.repository import AttendanceStore
from ..ticks.model import Tick


def write_ticks_csv(ticks: Iterable[Tick]) -> str:
    """Header plus one line per tick in `EXPORT_FIELDS` order.

    Fields containing a comma, quote or newline are quoted with inner quotes
    doubled; lines are joined with "\\n".
    """
    out = io.StringIO()
    writer = csv.DictWriter(
        out,
        fieldnames=list(EXPORT_FIELDS),
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writeheader()
    for tick in ticks:
        writer.writerow(tick.to_dict())
    return out.getvalue()


def read_ticks_csv(text: str) -> list[dict]:
    """Parse an export back into row dicts keyed by `EXPORT_FIELDS`."""
    return list(csv.DictReader(io.StringIO(text, newline="")))


class ReportService:
    def __init__(self, store: AttendanceStore):
        self._store = store

    def total_ticks(self) -> int:
        return self._store.count_ticks()

    def export_rows(self) -> Sequence[Tick]:
        return self._store.all_ticks_sorted()

    def export_csv(self) -> str:
        return write_ticks_csv(self.export_rows())
