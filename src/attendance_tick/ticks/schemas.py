from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import clamp_limit, optional_iso_date, require_non_empty
from ..core.exceptions import InvalidInput


@dataclass(frozen=True)
class TickRequest:
    """Body of `POST /api/tick`."""

    employee: str
    slot: str

    @classmethod
    def from_payload(cls, payload: Any) -> "TickRequest":
        if not isinstance(payload, Mapping):
            raise InvalidInput("Missing employee or slot")
        try:
            return cls(
                employee=require_non_empty(payload.get("employee"), "employee"),
                slot=require_non_empty(payload.get("slot"), "slot"),
            )
        except InvalidInput as exc:
            raise InvalidInput("Missing employee or slot") from exc


@dataclass(frozen=True)
class TodayQuery:
    employee: str

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "TodayQuery":
        return cls(employee=require_non_empty(args.get("employee"), "employee"))


@dataclass(frozen=True)
class HistoryQuery:
    employee: str
    date: Optional[str]
    limit: int

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "HistoryQuery":
        return cls(
            employee=require_non_empty(args.get("employee"), "employee"),
            date=optional_iso_date(args.get("date"), "date"),
            limit=clamp_limit(args.get("limit")),
        )
