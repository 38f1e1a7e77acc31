from datetime import datetime, timezone

import pytest

from fakes import FakeFeed, make_record

from ponto_exato.core.enums import Collection
from ponto_exato.core.exceptions import ValidationError
from ponto_exato.sync.live_state import CompanyLiveState
from ponto_exato.sync.registry import LiveStateRegistry


def _doc(ts, *, company="ABC123", matricula="1001", record_id=None):
    doc = make_record(datetime(2026, 2, 10, 8, 0), company_code=company, matricula=matricula, record_id=record_id).to_document()
    doc["timestamp"] = ts
    return doc


def test_attach_opens_three_scoped_subscriptions():
    feed = FakeFeed()
    state = CompanyLiveState(feed)

    state.attach("ABC123")

    keys = sorted(s.key for s in feed.active())
    assert keys == sorted(
        [
            (Collection.COMPANIES, "ABC123"),
            (Collection.EMPLOYEES, "ABC123"),
            (Collection.RECORDS, "ABC123"),
        ]
    )
    assert state.is_attached and state.company_code == "ABC123"


def test_attach_requires_company_code():
    with pytest.raises(ValidationError):
        CompanyLiveState(FakeFeed()).attach("  ")


def test_records_are_scoped_coerced_and_sorted_desc():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")

    feed.push(
        Collection.RECORDS,
        [
            _doc("2026-02-10T08:00:00", record_id="a"),
            _doc(datetime(2026, 2, 10, 12, 0), record_id="b"),
            _doc("2026-02-10T13:00:00", company="XYZ999", record_id="foreign"),
            _doc(int(datetime(2026, 2, 9, 18, 0).timestamp() * 1000), record_id="c"),
        ],
    )

    assert [r.id for r in state.records] == ["b", "a", "c"]
    assert all(r.company_code == "ABC123" for r in state.records)


def test_utc_strings_and_backend_timestamps_are_coerced():
    class BackendTimestamp:
        def __init__(self, dt):
            self._dt = dt

        def to_datetime(self):
            return self._dt

    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")

    utc = datetime(2026, 2, 10, 11, 0, tzinfo=timezone.utc)
    feed.push(
        Collection.RECORDS,
        [_doc("2026-02-10T11:00:00Z", record_id="z"), _doc(BackendTimestamp(utc), record_id="t")],
    )

    expected = utc.astimezone().replace(tzinfo=None)
    assert {r.timestamp for r in state.records} == {expected}


def test_error_keeps_previous_snapshot():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")
    feed.push(Collection.RECORDS, [_doc("2026-02-10T08:00:00", record_id="a")])

    feed.fail(Collection.RECORDS, RuntimeError("connection lost"))

    assert [r.id for r in state.records] == ["a"]


def test_reattach_same_code_is_noop():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")
    state.attach("ABC123")

    assert len(feed.subscriptions) == 3
    assert len(feed.active()) == 3


def test_switching_company_tears_down_and_ignores_late_deliveries():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")
    feed.push(Collection.RECORDS, [_doc("2026-02-10T08:00:00", record_id="old")])
    stale_handlers = [h for h in feed.all_handlers if h[1] == Collection.RECORDS]

    state.attach("XYZ999")

    assert state.records == ()
    assert sorted(s.key[1] for s in feed.active()) == ["XYZ999"] * 3

    # A delivery racing the teardown must not leak into the new company.
    _sub, _coll, _code, on_snapshot, _on_error = stale_handlers[0]
    on_snapshot([_doc("2026-02-10T09:00:00", record_id="late")])
    assert state.records == ()


def test_company_and_employee_slices_and_listener():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    changes = []
    state.add_listener(changes.append)
    state.attach("ABC123")

    feed.push(Collection.COMPANIES, [{"id": "ABC123", "name": "Acme"}, {"id": "XYZ999", "name": "Other"}])
    feed.push(
        Collection.EMPLOYEES,
        [
            {"id": "e1", "companyCode": "ABC123", "name": "Ana", "matricula": "1001"},
            {"id": "e2", "companyCode": "XYZ999", "name": "Zé", "matricula": "1001"},
        ],
    )

    assert state.company.name == "Acme"
    assert [e.id for e in state.employees] == ["e1"]
    assert changes == [Collection.COMPANIES, Collection.EMPLOYEES]


def test_detach_unsubscribes_and_clears():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")
    feed.push(Collection.RECORDS, [_doc("2026-02-10T08:00:00")])

    state.detach()

    assert feed.active() == []
    assert state.records == () and not state.is_attached


def test_registry_is_reference_counted():
    feeds = []

    def factory():
        feeds.append(FakeFeed())
        return feeds[-1]

    registry = LiveStateRegistry(factory)
    first = registry.acquire("ABC123")
    second = registry.acquire("ABC123")

    assert first is second
    assert len(feeds) == 1

    registry.release("ABC123")
    assert registry.active_codes() == ["ABC123"]
    registry.release("ABC123")
    assert registry.active_codes() == []
    assert feeds[0].active() == []


def test_registry_shutdown_detaches_everything():
    feed = FakeFeed()
    registry = LiveStateRegistry(lambda: feed)
    registry.get("ABC123")
    registry.acquire("XYZ999")

    registry.shutdown()

    assert feed.active() == []
    assert registry.active_codes() == []


def test_unreadable_employee_and_company_documents_are_skipped():
    feed = FakeFeed()
    state = CompanyLiveState(feed)
    state.attach("ABC123")
    feed.push(Collection.COMPANIES, [{"id": "ABC123", "name": "Acme"}])

    feed.push(
        Collection.EMPLOYEES,
        [
            {"id": "e1", "companyCode": "ABC123", "name": "Ana", "matricula": "1001"},
            {"id": "e2", "companyCode": "ABC123", "name": "Bruno", "matricula": "1002", "weeklyHours": "abc"},
            {"id": "e3", "companyCode": "ABC123", "name": "Caio", "matricula": "1003"},
        ],
    )
    feed.push(Collection.COMPANIES, [{"id": "ABC123", "name": "Acme 2", "config": {"weeklyHours": "abc"}}])

    assert [e.id for e in state.employees] == ["e1", "e3"]
    assert state.company.name == "Acme"
