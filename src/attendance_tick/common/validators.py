from __future__ import annotations

from typing import Any, Optional

from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT, MIN_HISTORY_LIMIT
from ..core.exceptions import InvalidInput
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"Missing {field_name}")
    return value.strip()


def optional_iso_date(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_iso_date(str(value).strip()).isoformat()
    except ValueError as exc:
        raise InvalidInput(f"{field_name} must be YYYY-MM-DD") from exc


def clamp_limit(value: Any, default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Clamp a user supplied limit into [1, 500]; unparsable or zero falls back to the default."""
    try:
        limit = int(value)
    except (TypeError, ValueError):
        limit = 0
    if not limit:
        limit = default
    return max(MIN_HISTORY_LIMIT, min(MAX_HISTORY_LIMIT, limit))
