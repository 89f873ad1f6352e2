from __future__ import annotations

from datetime import datetime
from typing import Optional

from .enums import TickOutcome


class DomainError(Exception):
    """Base exception for business rule violations."""

    outcome: TickOutcome = TickOutcome.INVALID_INPUT


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidInput(ValidationError):
    """Missing or malformed request fields."""


class UnknownSlot(DomainError):
    outcome = TickOutcome.UNKNOWN_SLOT


class UnknownEmployee(DomainError):
    outcome = TickOutcome.UNKNOWN_EMPLOYEE


class DateNotAllowed(DomainError):
    outcome = TickOutcome.DATE_NOT_ALLOWED


class TooEarly(DomainError):
    """Raised when a slot is ticked before its early window opens."""

    outcome = TickOutcome.TOO_EARLY

    def __init__(self, message: str, *, earliest: datetime, slot_time: datetime):
        super().__init__(message)
        self.earliest = earliest
        self.slot_time = slot_time


class StoreUnavailable(DomainError):
    """Backend fault (connectivity, auth, driver error). The only internal-error class."""

    outcome = TickOutcome.STORE_UNAVAILABLE

    def __init__(self, message: str, *, backend: Optional[str] = None):
        super().__init__(message)
        self.backend = backend
