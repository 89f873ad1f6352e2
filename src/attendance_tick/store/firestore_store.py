from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Iterable, Optional, Sequence
from urllib.parse import quote

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from ..common.validators import clamp_limit
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import StoreUnavailable
from ..ticks.model import Tick
from .repository import AttendanceStore

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "attendance-tick"
EMPLOYEES = "employees"
TICKS = "ticks"


@contextmanager
def firestore_call(operation: str):
    """Translate Google client faults into `StoreUnavailable`."""
    try:
        yield
    except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
        logger.error("Firestore %s failed: %s", operation, exc)
        raise StoreUnavailable(f"Firestore unavailable: {exc}", backend="firestore") from exc


def is_document_id(value: str) -> bool:
    """Firestore rejects ids containing "/", "." and "..", `__*__` names and ids over 1500 bytes."""
    if not value or "/" in value or value in {".", ".."}:
        return False
    if value.startswith("__") and value.endswith("__") and len(value) >= 4:
        return False
    return len(value.encode("utf-8")) <= 1500


def tick_document_id(employee: str, date: str, slot: str) -> str:
    """Deterministic id so the (employee, date, slot) key is the document key."""
    return quote(f"{employee}|{date}|{slot}", safe="")


def _doc_to_tick(data: dict) -> Tick:
    return Tick(
        employee=data["employee"],
        date=data["date"],
        slot=data["slot"],
        timestamp=data["timestamp"],
        ip=data.get("ip") or "",
        user_agent=data.get("userAgent") or "",
    )


class FirestoreAttendanceStore(AttendanceStore):
    """Document backend.

    Ticks live at `ticks/{employee|date|slot}`; `create()` fails when the
    document exists, which makes the insert a single conditional write.
    Ordering is applied client-side so no composite indexes are required.
    """

    backend = "firestore"

    def __init__(self, client, *, app=None):
        self._client = client
        self._app = app

    def _employees(self):
        return self._client.collection(EMPLOYEES)

    def _ticks(self):
        return self._client.collection(TICKS)

    def list_employee_names(self) -> Sequence[str]:
        with firestore_call("list employees"):
            docs = self._employees().order_by("name").stream()
            return [d.get("name") for d in docs]

    def employee_exists(self, name: str) -> bool:
        if not is_document_id(name):
            return False
        with firestore_call("employee lookup"):
            return bool(self._employees().document(name).get().exists)

    def _query_ticks(self, employee: str, date: Optional[str]) -> list[Tick]:
        query = self._ticks().where(filter=FieldFilter("employee", "==", employee))
        if date:
            query = query.where(filter=FieldFilter("date", "==", date))
        return [_doc_to_tick(d.to_dict()) for d in query.stream()]

    def ticks_for(self, employee: str, date: str) -> Sequence[Tick]:
        with firestore_call("ticks for day"):
            rows = self._query_ticks(employee, date)
        return sorted(rows, key=lambda t: t.timestamp)

    def ticks_history(
        self,
        employee: str,
        date: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[Tick]:
        with firestore_call("ticks history"):
            rows = self._query_ticks(employee, date)
        rows.sort(key=lambda t: t.timestamp, reverse=True)
        return rows[: clamp_limit(limit)]

    def insert_tick_if_absent(self, tick: Tick) -> Optional[Tick]:
        ref = self._ticks().document(tick_document_id(tick.employee, tick.date, tick.slot))
        data = {
            "employee": tick.employee,
            "date": tick.date,
            "slot": tick.slot,
            "timestamp": tick.timestamp,
            "ip": tick.ip,
            "userAgent": tick.user_agent,
        }
        with firestore_call("tick insert"):
            try:
                ref.create(data)
            except google_exceptions.AlreadyExists:
                logger.info("Duplicate tick %s/%s/%s rejected by create()", tick.employee, tick.date, tick.slot)
                return None
        return tick

    def seed_default_employees_if_empty(self, names: Iterable[str]) -> int:
        names = [n.strip() for n in names if n and is_document_id(n.strip())]
        if not names:
            return 0

        with firestore_call("employee seed"):
            if list(self._employees().limit(1).get()):
                return 0
            batch = self._client.batch()
            for name in names:
                batch.set(self._employees().document(name), {"name": name})
            batch.commit()
        logger.info("Seeded %d default employees", len(names))
        return len(names)

    def count_ticks(self) -> int:
        with firestore_call("tick count"):
            results = self._ticks().count(alias="total").get()
        for group in results:
            for agg in group:
                return int(agg.value)
        return 0

    def all_ticks_sorted(self) -> Sequence[Tick]:
        with firestore_call("tick export"):
            rows = [_doc_to_tick(d.to_dict()) for d in self._ticks().stream()]
        rows.sort(key=lambda t: (t.date, t.employee, t.slot))
        return rows

    def close(self) -> None:
        if self._app is not None:
            firebase_admin.delete_app(self._app)
            self._app = None


def open_firestore_store(*, service_account_json: str = "", project_id: str = "") -> FirestoreAttendanceStore:
    """Initialize a named Firebase app and wrap its Firestore client.

    Uses the service account JSON when given, else Application Default Credentials.
    """
    if service_account_json:
        try:
            cred = credentials.Certificate(json.loads(service_account_json))
        except ValueError as exc:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_JSON is not a valid service account") from exc
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": project_id} if project_id else None
    app = firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)
    return FirestoreAttendanceStore(firestore.client(app), app=app)
