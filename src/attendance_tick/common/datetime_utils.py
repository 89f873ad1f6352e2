from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class LocalParts:
    """Calendar fields of an instant as seen in the configured timezone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    def iso_date(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class TimeNormalizer:
    """Converts between absolute instants and local wall-clock fields.

    All conversions go through the named IANA zone, never the host's local
    zone, so behaviour does not depend on where the process is deployed.
    The offset is looked up per date, which keeps DST and historical offset
    changes correct.
    """

    def __init__(self, tz_name: str):
        try:
            self._tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {tz_name!r}") from exc
        self._tz_name = tz_name

    @property
    def tz_name(self) -> str:
        return self._tz_name

    def local_parts(self, instant: datetime) -> LocalParts:
        local = as_utc(instant).astimezone(self._tz)
        return LocalParts(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            second=local.second,
        )

    def zoned_instant(self, parts: LocalParts, hour: int, minute: int, second: int = 0) -> datetime:
        """Absolute (UTC) instant of `hour:minute:second` local time on the date of `parts`."""
        local = datetime(parts.year, parts.month, parts.day, hour, minute, second, tzinfo=self._tz)
        return local.astimezone(timezone.utc)

    def local_date(self, instant: datetime) -> str:
        return self.local_parts(instant).iso_date()


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current instant in UTC.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def to_iso_utc(value: datetime) -> str:
    """ISO-8601 UTC string with millisecond precision, e.g. 2024-03-01T01:00:00.000Z."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()
