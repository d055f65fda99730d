"""Translate cache entries to and from the persisted settings blob.

The blob is the tracker's entire persisted configuration::

    {"fileCursors": [{"file": "notes/a.md", "cursor": {"line": 2, "ch": 5}}, ...]}

Records are ordered oldest to newest access so that replaying them through
``RecencyCache.set`` restores the recency order.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from cursor_tracker.cache.models import CacheEntry, CursorPosition
from cursor_tracker.runtime import telemetry

SETTINGS_KEY = "fileCursors"


def default_settings() -> Dict[str, Any]:
    return {SETTINGS_KEY: []}


def encode_entry(entry: CacheEntry) -> Dict[str, Any]:
    return {
        "file": entry.key,
        "cursor": {"line": entry.position.line, "ch": entry.position.ch},
    }


def encode_settings(entries: Iterable[CacheEntry]) -> Dict[str, Any]:
    return {SETTINGS_KEY: [encode_entry(entry) for entry in entries]}


def decode_entry(record: Any) -> Optional[CacheEntry]:
    """Return the entry for ``record`` or ``None`` when it is malformed."""

    if not isinstance(record, Mapping):
        return None
    key = record.get("file")
    cursor = record.get("cursor")
    if not isinstance(key, str) or not isinstance(cursor, Mapping):
        return None
    line = cursor.get("line")
    ch = cursor.get("ch")
    # bool is an int subclass but never a valid coordinate
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (line, ch)):
        return None
    if line < 0 or ch < 0:
        return None
    return CacheEntry(key=key, position=CursorPosition(line=line, ch=ch))


def decode_settings(
    data: Optional[Mapping[str, Any]], *, logger_name: str | None = None
) -> Tuple[CacheEntry, ...]:
    """Merge ``data`` over the empty default and decode its records."""

    settings = default_settings()
    if isinstance(data, Mapping):
        settings.update(data)

    records = settings.get(SETTINGS_KEY)
    if not isinstance(records, list):
        records = []

    entries: List[CacheEntry] = []
    skipped = 0
    for record in records:
        entry = decode_entry(record)
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)

    if skipped:
        telemetry.record_event(
            "persistence.malformed",
            level="warning",
            data={"skipped": skipped, "kept": len(entries)},
            logger_name=logger_name,
        )
    return tuple(entries)


__all__ = [
    "SETTINGS_KEY",
    "decode_entry",
    "decode_settings",
    "default_settings",
    "encode_entry",
    "encode_settings",
]
