from __future__ import annotations

from enum import Enum


class TickOutcome(str, Enum):
    """Result kinds of a tick attempt, mapped 1:1 to HTTP statuses by the controller."""

    OK = "OK"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_SLOT = "UNKNOWN_SLOT"
    UNKNOWN_EMPLOYEE = "UNKNOWN_EMPLOYEE"
    DATE_NOT_ALLOWED = "DATE_NOT_ALLOWED"
    TOO_EARLY = "TOO_EARLY"
    DUPLICATE = "DUPLICATE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class StoreBackend(str, Enum):
    MYSQL = "mysql"
    FIRESTORE = "firestore"
