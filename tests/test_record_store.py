from __future__ import annotations

from datetime import UTC, datetime

import pytest

from devicesync.exceptions import ConflictError
from devicesync.models import RecordKind
from devicesync.services import RecordStore
from devicesync.utils.validation import as_utc


def _call(device: str, number: str, day: int) -> dict:
    return {
        "device": device,
        "number": number,
        "type": "INCOMING",
        "date": f"2026-01-{day:02d}T00:00:00Z",
        "duration": "10",
        "dateValue": datetime(2026, 1, day, tzinfo=UTC),
    }


def test_insert_assigns_server_timestamp(store: RecordStore) -> None:
    before = datetime.now(UTC)
    document = store.insert(RecordKind.LOCATION, {"device": "dev1", "latitude": 1.0, "longitude": 2.0})

    assert document["_id"] is not None
    assert as_utc(document["timestamp"]) >= before.replace(microsecond=0)


def test_insert_keeps_a_supplied_timestamp(store: RecordStore) -> None:
    stamp = datetime(2025, 5, 5, tzinfo=UTC)
    store.insert(RecordKind.LOCATION, {"latitude": 1.0, "longitude": 2.0, "timestamp": stamp})

    (stored,) = store.find_all(RecordKind.LOCATION)
    assert as_utc(stored["timestamp"]) == stamp


def test_identical_content_is_stored_twice(store: RecordStore) -> None:
    record = {"device": "dev1", "latitude": 1.0, "longitude": 2.0}
    store.insert(RecordKind.LOCATION, record)
    store.insert(RecordKind.LOCATION, record)

    assert len(store.find_all(RecordKind.LOCATION)) == 2


def test_insert_many_returns_count_and_skips_empty(store: RecordStore) -> None:
    assert store.insert_many(RecordKind.CALL_LOG, []) == 0
    assert store.insert_many(RecordKind.CALL_LOG, [_call("dev1", "100", 1), _call("dev1", "200", 2)]) == 2
    assert len(store.find_all(RecordKind.CALL_LOG)) == 2


def test_find_all_keeps_insertion_order(store: RecordStore) -> None:
    for day in (3, 1, 2):
        store.insert(RecordKind.CALL_LOG, _call("dev1", str(day), day))

    assert [doc["number"] for doc in store.find_all(RecordKind.CALL_LOG)] == ["3", "1", "2"]


def test_find_by_field_is_exact_match(store: RecordStore) -> None:
    store.insert_many(
        RecordKind.CALL_LOG,
        [_call("dev1", "+100", 1), _call("dev2", "+100", 2), _call("dev1", "+1000", 3)],
    )

    found = store.find_by_field(RecordKind.CALL_LOG, "number", "+100")
    assert sorted(doc["device"] for doc in found) == ["dev1", "dev2"]


def test_find_latest_by_device_uses_date_not_insertion_order(store: RecordStore) -> None:
    store.insert_many(
        RecordKind.CALL_LOG,
        [_call("dev1", "a", 5), _call("dev1", "b", 9), _call("dev1", "c", 2), _call("dev2", "d", 20)],
    )

    latest = store.find_latest_by_device(RecordKind.CALL_LOG, "dev1")
    assert latest is not None
    assert latest["number"] == "b"


def test_find_latest_by_device_none_for_unknown_device(store: RecordStore) -> None:
    store.insert(RecordKind.SMS, {"device": "dev1", "address": "x", "body": "hi", "date": "1",
                                  "dateValue": datetime(2026, 1, 1, tzinfo=UTC)})

    assert store.find_latest_by_device(RecordKind.SMS, "dev2") is None


def test_find_latest_by_device_accepts_another_sort_field(store: RecordStore) -> None:
    store.insert(RecordKind.LOCATION, {"device": "dev1", "latitude": 1.0, "longitude": 1.0,
                                       "timestamp": datetime(2026, 1, 2, tzinfo=UTC)})
    store.insert(RecordKind.LOCATION, {"device": "dev1", "latitude": 2.0, "longitude": 2.0,
                                       "timestamp": datetime(2026, 1, 1, tzinfo=UTC)})

    latest = store.find_latest_by_device(RecordKind.LOCATION, "dev1", sort_field="timestamp")
    assert latest is not None
    assert latest["latitude"] == 1.0


def test_usernames_are_unique(store: RecordStore) -> None:
    store.create_user("operator", "hash-1")

    with pytest.raises(ConflictError):
        store.create_user("operator", "hash-2")

    user = store.find_user("operator")
    assert user is not None
    assert user.passwordHash == "hash-1"


def test_find_user_unknown(store: RecordStore) -> None:
    assert store.find_user("nobody") is None
