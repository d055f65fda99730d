import json
from pathlib import Path

import pytest

from cursor_tracker.cache import CacheEntry, CursorPosition, RecencyCache
from cursor_tracker.errors import PersistenceError
from cursor_tracker.persistence import (
    SAVE_QUIESCENCE_WINDOW,
    JsonFileStore,
    MemoryStore,
    PersistenceGate,
    decode_settings,
    encode_settings,
)
from cursor_tracker.runtime.timers import TimerQueue


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore(MemoryStore):
    def save(self, data) -> None:
        raise PersistenceError("disk full")


def make_gate(store=None, clock=None) -> tuple[PersistenceGate, MemoryStore, FakeClock]:
    clock = clock or FakeClock()
    store = store if store is not None else MemoryStore()
    gate = PersistenceGate(RecencyCache(), store, timers=TimerQueue(clock=clock))
    return gate, store, clock


def record(key: str, line: int, ch: int) -> dict:
    return {"file": key, "cursor": {"line": line, "ch": ch}}


def test_decode_merges_over_empty_default() -> None:
    assert decode_settings(None) == ()
    assert decode_settings({}) == ()
    assert decode_settings({"other": 1}) == ()


def test_decode_skips_malformed_records() -> None:
    data = {
        "fileCursors": [
            record("a.md", 1, 2),
            {"file": "b.md"},
            {"file": "c.md", "cursor": {"line": "x", "ch": 0}},
            {"file": "d.md", "cursor": {"line": True, "ch": 0}},
            "garbage",
            record("e.md", 3, 4),
        ]
    }

    assert decode_settings(data) == (
        CacheEntry("a.md", CursorPosition(1, 2)),
        CacheEntry("e.md", CursorPosition(3, 4)),
    )


def test_encode_uses_line_and_ch_fields() -> None:
    blob = encode_settings([CacheEntry("a.md", CursorPosition(5, 10))])

    assert blob == {"fileCursors": [record("a.md", 5, 10)]}


def test_load_replays_records_oldest_first() -> None:
    store = MemoryStore({"fileCursors": [record("old.md", 1, 1), record("new.md", 2, 2)]})
    gate, _, _ = make_gate(store)

    assert gate.load() == 2

    assert [entry.key for entry in gate.cache.entries_oldest_first()] == [
        "old.md",
        "new.md",
    ]
    assert gate.save() is False


def test_save_twice_writes_once() -> None:
    gate, store, _ = make_gate()
    gate.cache.set("a.md", CursorPosition(1, 1))

    assert gate.save() is True
    assert gate.save() is False
    assert len(store.saves) == 1
    assert gate.write_count == 1


def test_save_detects_recency_reorder() -> None:
    gate, store, _ = make_gate()
    gate.cache.set("a.md", CursorPosition(1, 1))
    gate.cache.set("b.md", CursorPosition(2, 2))
    gate.save()

    gate.cache.get("a.md")

    assert gate.save() is True
    assert [r["file"] for r in store.saves[-1]["fileCursors"]] == ["b.md", "a.md"]


def test_request_save_coalesces_within_window() -> None:
    gate, store, clock = make_gate()

    for i in range(5):
        gate.cache.set(f"doc-{i}.md", CursorPosition(i, 0))
        gate.request_save()
        clock.advance(1.5)

    assert gate.timers.run_due() == []
    assert store.saves == []

    gate.cache.set("late.md", CursorPosition(8, 8))
    clock.now = SAVE_QUIESCENCE_WINDOW
    gate.timers.run_due()

    assert len(store.saves) == 1
    files = [r["file"] for r in store.saves[0]["fileCursors"]]
    assert files == [f"doc-{i}.md" for i in range(5)] + ["late.md"]
    assert gate.pending is False


def test_request_after_fire_opens_new_window() -> None:
    gate, store, clock = make_gate()
    gate.cache.set("a.md", CursorPosition(1, 1))
    gate.request_save()
    clock.advance(SAVE_QUIESCENCE_WINDOW)
    gate.timers.run_due()

    gate.cache.set("a.md", CursorPosition(2, 2))
    gate.request_save()

    assert gate.pending is True
    clock.advance(SAVE_QUIESCENCE_WINDOW)
    gate.timers.run_due()
    assert len(store.saves) == 2


def test_flush_now_cancels_pending_write() -> None:
    gate, store, clock = make_gate()
    gate.cache.set("a.md", CursorPosition(1, 1))
    gate.request_save()

    assert gate.flush_now() is True
    assert gate.pending is False

    clock.advance(SAVE_QUIESCENCE_WINDOW * 2)
    gate.timers.run_due()
    assert len(store.saves) == 1


def test_write_failure_propagates_and_keeps_snapshot() -> None:
    gate, _, _ = make_gate(FailingStore())
    gate.cache.set("a.md", CursorPosition(1, 1))

    with pytest.raises(PersistenceError):
        gate.flush_now()

    assert gate.snapshot == ()
    assert gate.write_count == 0


def test_json_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "cursors.json")
    assert store.load() is None

    store.save({"fileCursors": [record("a.md", 1, 2)]})

    assert store.load() == {"fileCursors": [record("a.md", 1, 2)]}
    assert list((tmp_path / "nested").iterdir()) == [tmp_path / "nested" / "cursors.json"]


def test_json_store_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "cursors.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError) as excinfo:
        JsonFileStore(path).load()

    assert excinfo.value.path == path


def test_json_store_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "cursors.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonFileStore(path).load()


def test_json_store_write_failure_is_wrapped(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "cursors.json")

    with pytest.raises(PersistenceError):
        store.save({"fileCursors": []})
