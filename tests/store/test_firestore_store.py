from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from attendance_tick.core.exceptions import StoreUnavailable
from attendance_tick.store import firestore_store
from attendance_tick.store.firestore_store import FirestoreAttendanceStore, tick_document_id
from attendance_tick.ticks.model import Tick


def _tick(slot="12:00", hour=5, date="2024-03-01"):
    return Tick(
        employee="Chi Vorn",
        date=date,
        slot=slot,
        timestamp=datetime(2024, 3, 1, hour, 0, tzinfo=timezone.utc),
        ip="10.0.0.3",
        user_agent="ua, with comma",
    )


def _doc(tick: Tick):
    data = {
        "employee": tick.employee,
        "date": tick.date,
        "slot": tick.slot,
        "timestamp": tick.timestamp,
        "ip": tick.ip,
        "userAgent": tick.user_agent,
    }
    return SimpleNamespace(to_dict=lambda: dict(data))


def test_document_id_is_deterministic_and_path_safe():
    assert tick_document_id("Chi Vorn", "2024-03-01", "12:00") == "Chi%20Vorn%7C2024-03-01%7C12%3A00"
    assert "/" not in tick_document_id("a/b", "2024-03-01", "08:00")


def test_insert_uses_create_on_deterministic_document():
    client = MagicMock()
    store = FirestoreAttendanceStore(client)

    assert store.insert_tick_if_absent(_tick()) == _tick()

    ticks = client.collection.return_value
    ticks.document.assert_called_with(tick_document_id("Chi Vorn", "2024-03-01", "12:00"))
    payload = ticks.document.return_value.create.call_args.args[0]
    assert payload["userAgent"] == "ua, with comma"
    assert payload["timestamp"] == _tick().timestamp


def test_insert_conflict_is_already_exists_signal():
    client = MagicMock()
    client.collection.return_value.document.return_value.create.side_effect = google_exceptions.AlreadyExists("exists")

    assert FirestoreAttendanceStore(client).insert_tick_if_absent(_tick()) is None


def test_backend_errors_become_store_unavailable():
    client = MagicMock()
    client.collection.return_value.document.return_value.create.side_effect = google_exceptions.ServiceUnavailable("down")

    with pytest.raises(StoreUnavailable):
        FirestoreAttendanceStore(client).insert_tick_if_absent(_tick())


def test_history_sorted_descending_and_limited():
    client = MagicMock()
    rows = [_tick("08:00", 1), _tick("17:30", 10), _tick("12:00", 5)]
    client.collection.return_value.where.return_value.stream.return_value = [_doc(t) for t in rows]
    store = FirestoreAttendanceStore(client)

    history = store.ticks_history("Chi Vorn", limit=2)

    assert [t.slot for t in history] == ["17:30", "12:00"]


def test_ticks_for_sorted_ascending():
    client = MagicMock()
    rows = [_tick("17:30", 10), _tick("08:00", 1)]
    client.collection.return_value.where.return_value.where.return_value.stream.return_value = [_doc(t) for t in rows]

    ticks = FirestoreAttendanceStore(client).ticks_for("Chi Vorn", "2024-03-01")

    assert [t.slot for t in ticks] == ["08:00", "17:30"]


def test_count_reads_aggregation_value():
    client = MagicMock()
    client.collection.return_value.count.return_value.get.return_value = [[SimpleNamespace(value=3)]]

    assert FirestoreAttendanceStore(client).count_ticks() == 3


def test_employee_names_with_slash_never_exist():
    client = MagicMock()
    assert FirestoreAttendanceStore(client).employee_exists("a/b") is False
    client.collection.assert_not_called()


def test_seed_only_when_collection_empty():
    client = MagicMock()
    client.collection.return_value.limit.return_value.get.return_value = []
    store = FirestoreAttendanceStore(client)

    assert store.seed_default_employees_if_empty(["Heang", "Riya"]) == 2
    assert client.batch.return_value.set.call_count == 2
    client.batch.return_value.commit.assert_called_once()

    client.collection.return_value.limit.return_value.get.return_value = [object()]
    assert store.seed_default_employees_if_empty(["Heang"]) == 0


def test_close_deletes_firebase_app(monkeypatch):
    deleted = []
    monkeypatch.setattr(firestore_store.firebase_admin, "delete_app", deleted.append)
    app = object()
    store = FirestoreAttendanceStore(MagicMock(), app=app)

    store.close()
    store.close()

    assert deleted == [app]


@pytest.mark.parametrize("name", ["", ".", "..", "__x__", "a/b", "x" * 1501])
def test_reserved_document_ids_are_unknown_employees(name):
    client = MagicMock()

    assert FirestoreAttendanceStore(client).employee_exists(name) is False
    client.collection.assert_not_called()


def test_seed_skips_reserved_document_ids():
    client = MagicMock()
    client.collection.return_value.limit.return_value.get.return_value = []

    assert FirestoreAttendanceStore(client).seed_default_employees_if_empty(["Heang", "..", "__x__"]) == 1
