import json
from datetime import datetime, timedelta, timezone

import pytest

from currency_converter.db.storage import KeyValueStore
from currency_converter.models import HistoryEntry
from currency_converter.services.history import HistoryStore

from conftest import MemorySlots, history_payload

T0 = datetime(2024, 5, 21, 10, 0, tzinfo=timezone.utc)


def make_entry(n: int) -> HistoryEntry:
    return HistoryEntry(
        from_currency="USD",
        to_currency="PKR",
        amount=float(n),
        result=n * 279.0,
        rate=279.0,
        at=(T0 + timedelta(minutes=n)).isoformat(),
    )


def test_append_prepends_and_persists(slots):
    store = HistoryStore(slots)
    first, second = make_entry(1), make_entry(2)

    store.append(first)
    store.append(second)

    assert store.entries == (second, first)
    persisted = json.loads(slots.data["cc_history_v1"])
    assert [e["id"] for e in persisted] == [second.id, first.id]
    assert persisted[0]["from"] == "USD"
    assert persisted[0]["to"] == "PKR"
    assert persisted[0]["amount"] == 2.0
    assert "at" in persisted[0]


def test_length_after_append_is_capped(slots):
    store = HistoryStore(slots, limit=50)
    for n in range(1, 50):
        store.append(make_entry(n))
        assert len(store) == n

    store.append(make_entry(50))
    assert len(store) == 50
    store.append(make_entry(51))
    assert len(store) == 50


def test_overflow_keeps_most_recent_newest_first(slots):
    store = HistoryStore(slots)
    entries = [make_entry(n) for n in range(1, 76)]
    for e in entries:
        store.append(e)

    expected = tuple(reversed(entries[-50:]))
    assert store.entries == expected
    reloaded = HistoryStore(slots).load()
    assert [e.id for e in reloaded] == [e.id for e in expected]


def test_clear_empties_log_and_reload(slots):
    store = HistoryStore(slots)
    store.append(make_entry(1))

    store.clear()

    assert store.entries == ()
    assert json.loads(slots.data["cc_history_v1"]) == []
    assert HistoryStore(slots).load() == ()


def test_load_missing_slot_is_empty(slots):
    assert HistoryStore(slots).load() == ()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{\"from\": \"USD\"}",
        "null",
        history_payload([{"id": "x", "from": "USD"}]),
    ],
)
def test_load_corrupt_slot_falls_back_to_empty(raw):
    slots = MemorySlots({"cc_history_v1": raw})
    assert HistoryStore(slots).load() == ()


def test_load_unreadable_slot_falls_back_to_empty():
    slots = MemorySlots()
    slots.fail_reads = True
    assert HistoryStore(slots).load() == ()


def test_load_truncates_oversized_log():
    stored = [make_entry(n).model_dump(mode="json", by_alias=True) for n in range(60, 0, -1)]
    slots = MemorySlots({"cc_history_v1": history_payload(stored)})

    loaded = HistoryStore(slots).load()

    assert len(loaded) == 50
    assert loaded[0].amount == 60.0


def test_failed_write_is_swallowed():
    slots = MemorySlots()
    slots.fail_writes = True
    store = HistoryStore(slots)

    store.append(make_entry(1))
    store.clear()

    assert store.entries == ()


def test_entries_are_immutable(slots):
    store = HistoryStore(slots)
    entry = make_entry(1)
    store.append(entry)

    with pytest.raises(Exception):
        store.entries[0].amount = 99.0  # type: ignore[misc]
    assert store.entries[0].amount == 1.0


def test_ids_are_unique():
    ids = {make_entry(1).id for _ in range(500)}
    assert len(ids) == 500


def test_survives_restart_with_sqlite(tmp_path):
    storage = KeyValueStore(tmp_path / "history.sqlite3")
    storage.ensure_schema()
    entry = make_entry(7)
    HistoryStore(storage, key="slot").append(entry)

    reloaded = HistoryStore(KeyValueStore(tmp_path / "history.sqlite3"), key="slot").load()

    assert reloaded == (entry,)
    assert reloaded[0].at == entry.at


@pytest.mark.parametrize(
    "at",
    ["2024-05-21T10:00:00.000Z", 1716285600000, "Tue, 21 May 2024 10:00:00 GMT"],
)
def test_timestamps_persist_exactly_as_received(tmp_path, at):
    storage = KeyValueStore(tmp_path / "history.sqlite3")
    storage.ensure_schema()
    entry = make_entry(1).model_copy(update={"at": at})
    HistoryStore(storage).append(entry)

    raw = json.loads(storage.get("cc_history_v1"))
    reloaded = HistoryStore(KeyValueStore(tmp_path / "history.sqlite3")).load()

    assert raw[0]["at"] == at
    assert reloaded[0].at == at


@pytest.mark.parametrize("at", ["", "   ", float("nan")])
def test_blank_or_non_finite_timestamp_rejected(at):
    with pytest.raises(ValueError):
        HistoryEntry(
            from_currency="USD", to_currency="PKR", amount=1, result=279, rate=279, at=at
        )


def test_invalid_limit_rejected(slots):
    with pytest.raises(ValueError):
        HistoryStore(slots, limit=0)
