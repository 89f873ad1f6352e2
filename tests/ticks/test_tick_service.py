from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from attendance_tick.core.enums import TickOutcome
from attendance_tick.ticks.service import TickService


def test_record_tick_success(service, store, fixed_now):
    result = service.record_tick("Heang", "08:00", client_ip="10.0.0.7", user_agent="Mozilla/5.0")

    assert result.ok
    assert result.record.employee == "Heang"
    assert result.record.date == "2024-03-01"
    assert result.record.slot == "08:00"
    assert result.record.timestamp == fixed_now
    assert result.record.ip == "10.0.0.7"
    assert store.writes == 1
    assert result.to_dict()["record"]["timestamp"] == "2024-03-01T01:00:00.000Z"


def test_second_tick_same_day_is_duplicate(service, store, local_time):
    now = local_time(2024, 3, 1, 12, 1)
    first = service.record_tick("Heang", "12:00", now=now)
    second = service.record_tick("Heang", "12:00", now=now + timedelta(minutes=30))

    assert first.ok
    assert second.outcome == TickOutcome.DUPLICATE
    assert second.record is None
    assert store.count_ticks() == 1


def test_same_slot_next_day_is_allowed(service, local_time):
    assert service.record_tick("Heang", "08:00", now=local_time(2024, 3, 1, 8, 0)).ok
    assert service.record_tick("Heang", "08:00", now=local_time(2024, 3, 2, 8, 0)).ok


def test_unknown_employee_writes_nothing(service, store):
    result = service.record_tick("Bob", "08:00")

    assert result.outcome == TickOutcome.UNKNOWN_EMPLOYEE
    assert store.writes == 0


def test_missing_fields_are_invalid_input(service, store):
    assert service.record_tick("", "08:00").outcome == TickOutcome.INVALID_INPUT
    assert service.record_tick("Heang", "  ").outcome == TickOutcome.INVALID_INPUT
    assert store.writes == 0


def test_unknown_slot(service, store):
    assert service.record_tick("Heang", "09:15").outcome == TickOutcome.UNKNOWN_SLOT
    assert store.writes == 0


def test_too_early_carries_window(service, store, local_time):
    result = service.record_tick("Heang", "17:30", now=local_time(2024, 3, 1, 17, 0))

    assert result.outcome == TickOutcome.TOO_EARLY
    assert result.earliest == local_time(2024, 3, 1, 17, 25)
    assert result.slot_time == local_time(2024, 3, 1, 17, 30)
    body = result.to_dict()
    assert body["earliest"] == "2024-03-01T10:25:00.000Z"
    assert body["slotTime"] == "2024-03-01T10:30:00.000Z"
    assert store.writes == 0


def test_too_early_is_checked_before_employee(service, local_time):
    result = service.record_tick("Bob", "17:30", now=local_time(2024, 3, 1, 9, 0))
    assert result.outcome == TickOutcome.TOO_EARLY


def test_store_unavailable_is_a_result(service, store):
    store.down = True

    result = service.record_tick("Heang", "08:00")

    assert result.outcome == TickOutcome.STORE_UNAVAILABLE
    assert not result.ok


def test_concurrent_ticks_yield_exactly_one_success(make_store, rule, normalizer, catalog, fixed_now):
    # The fake's lock stands in for the backend's atomic conditional write: the
    # `uq_ticks_employee_date_slot` unique key on MySQL, `DocumentReference.create`
    # on Firestore. Their conflict mapping is covered in tests/store/.
    store = make_store(["Heang"])
    svc = TickService(store, rule, normalizer, catalog, clock=lambda: fixed_now)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: svc.record_tick("Heang", "08:00"), range(32)))

    outcomes = [r.outcome for r in results]
    assert outcomes.count(TickOutcome.OK) == 1
    assert outcomes.count(TickOutcome.DUPLICATE) == 31
    assert store.count_ticks() == 1


def test_round_trip_through_today_and_history(service, local_time):
    now = local_time(2024, 3, 1, 12, 5, 30)
    written = service.record_tick("Riya", "12:00", now=now).record

    date, today = service.ticks_today("Riya", now=now)
    history = service.history("Riya")

    assert date == "2024-03-01"
    assert today == [written]
    assert history[0].timestamp == now
    assert (history[0].employee, history[0].date, history[0].slot) == ("Riya", "2024-03-01", "12:00")


def test_today_ascending_history_descending(service, local_time):
    for slot, hh, mm in [("08:00", 8, 1), ("12:00", 12, 2), ("12:20", 12, 21), ("17:30", 17, 31)]:
        assert service.record_tick("Kdey", slot, now=local_time(2024, 3, 1, hh, mm)).ok
    assert service.record_tick("Kdey", "08:00", now=local_time(2024, 3, 2, 8, 0)).ok

    _, today = service.ticks_today("Kdey", now=local_time(2024, 3, 1, 18, 0))
    history = service.history("Kdey")

    today_ts = [t.timestamp for t in today]
    history_ts = [t.timestamp for t in history]
    assert len(today_ts) == 4
    assert all(a < b for a, b in zip(today_ts, today_ts[1:]))
    assert len(history_ts) == 5
    assert all(a > b for a, b in zip(history_ts, history_ts[1:]))
    assert [t.date for t in service.history("Kdey", date="2024-03-02")] == ["2024-03-02"]
    assert len(service.history("Kdey", limit=2)) == 2


def test_meta(service):
    meta = service.meta()

    assert meta["localDate"] == "2024-03-01"
    assert meta["serverTime"] == "2024-03-01T01:00:00.000Z"
    assert meta["allowedNow"] is True
    assert [s["key"] for s in meta["slots"]] == ["08:00", "12:00", "12:20", "17:30"]
    assert meta["rules"] == {"days": "Every day", "earlyMinutes": 5, "timeZone": "Asia/Phnom_Penh"}


def test_seed_only_when_empty(make_store, rule, normalizer, catalog):
    empty = TickService(make_store(), rule, normalizer, catalog)
    full = TickService(make_store(["Heang"]), rule, normalizer, catalog)

    assert empty.seed_default_employees(["Heang", "Riya"]) == 2
    assert empty.seed_default_employees(["Other"]) == 0
    assert full.seed_default_employees(["Riya"]) == 0
    assert list(empty.list_employees()) == ["Heang", "Riya"]
