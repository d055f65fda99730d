"""Fixed-capacity least-recently-used map of document cursors."""

from __future__ import annotations

from collections import OrderedDict
from typing import Optional, Tuple

from cursor_tracker.runtime import telemetry

from .models import CACHE_CAPACITY, CacheEntry, CursorPosition, DocumentKey


class RecencyCache:
    """Ordered from least to most recently used.

    ``get`` and ``set`` promote the key; ``has`` does not. Overflowing the
    capacity drops the single oldest entry.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._entries: "OrderedDict[DocumentKey, CursorPosition]" = OrderedDict()
        self._logger_name = logger_name

    @property
    def capacity(self) -> int:
        return CACHE_CAPACITY

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, key: DocumentKey) -> bool:
        return key in self._entries

    def get(self, key: DocumentKey) -> Optional[CursorPosition]:
        position = self._entries.get(key)
        if position is not None:
            self._entries.move_to_end(key)
        return position

    def set(self, key: DocumentKey, position: CursorPosition) -> None:
        self._entries[key] = position
        self._entries.move_to_end(key)
        while len(self._entries) > CACHE_CAPACITY:
            evicted, _ = self._entries.popitem(last=False)
            telemetry.record_event(
                "cache.evict",
                level="debug",
                data={"key": evicted, "size": len(self._entries)},
                logger_name=self._logger_name,
            )

    def delete(self, key: DocumentKey) -> bool:
        return self._entries.pop(key, None) is not None

    def entries_oldest_first(self) -> Tuple[CacheEntry, ...]:
        return tuple(
            CacheEntry(key=key, position=position)
            for key, position in self._entries.items()
        )


__all__ = ["RecencyCache"]
