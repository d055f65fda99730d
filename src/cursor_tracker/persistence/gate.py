"""Debounced, change-detecting writes of the recency cache."""

from __future__ import annotations

from typing import Optional, Tuple

from cursor_tracker.cache import CacheEntry, RecencyCache
from cursor_tracker.runtime import telemetry
from cursor_tracker.runtime.timers import TimerQueue

from .codec import decode_settings, encode_settings
from .store import SettingsStore

SAVE_QUIESCENCE_WINDOW = 10.0
SAVE_TIMER = "persistence.save"


class PersistenceGate:
    """Owns the last persisted snapshot and the pending save timer.

    ``request_save`` is a leading-edge debounce: the first request arms a
    timer for the quiescence window and later requests are absorbed until it
    fires. The write itself runs only when the cache differs from the last
    persisted snapshot.
    """

    def __init__(
        self,
        cache: RecencyCache,
        store: SettingsStore,
        *,
        timers: Optional[TimerQueue] = None,
        window: float = SAVE_QUIESCENCE_WINDOW,
        logger_name: str | None = None,
    ) -> None:
        self.cache = cache
        self.store = store
        self.timers = timers or TimerQueue()
        self.window = window
        self._logger_name = logger_name
        self._snapshot: Tuple[CacheEntry, ...] = ()
        self.write_count = 0

    @property
    def pending(self) -> bool:
        return self.timers.is_pending(SAVE_TIMER)

    @property
    def snapshot(self) -> Tuple[CacheEntry, ...]:
        return self._snapshot

    def load(self) -> int:
        """Replay stored records into the cache, oldest first."""

        with telemetry.span("persistence::load", logger_name=self._logger_name):
            entries = decode_settings(
                self.store.load(), logger_name=self._logger_name
            )
            for entry in entries:
                self.cache.set(entry.key, entry.position)
            self._snapshot = entries
        telemetry.record_event(
            "persistence.load",
            data={"entries": len(entries), "cached": len(self.cache)},
            logger_name=self._logger_name,
        )
        return len(entries)

    def request_save(self) -> None:
        if self.pending:
            return
        self.timers.arm(SAVE_TIMER, self.window, self._fire)

    def flush_now(self) -> bool:
        self.timers.cancel(SAVE_TIMER)
        return self.save()

    def save(self) -> bool:
        """Write the cache if it changed; return whether a write happened."""

        entries = self.cache.entries_oldest_first()
        if entries == self._snapshot:
            telemetry.record_event(
                "persistence.skip",
                level="debug",
                data={"entries": len(entries)},
                logger_name=self._logger_name,
            )
            return False

        with telemetry.span(
            "persistence::write",
            logger_name=self._logger_name,
            metadata={"entries": len(entries)},
        ):
            self.store.save(encode_settings(entries))
        self._snapshot = entries
        self.write_count += 1
        telemetry.record_event(
            "persistence.write",
            level="debug",
            data={"entries": len(entries), "writes": self.write_count},
            logger_name=self._logger_name,
        )
        return True

    def _fire(self) -> None:
        # requests arriving from here on open a fresh window
        self.save()


__all__ = ["PersistenceGate", "SAVE_QUIESCENCE_WINDOW", "SAVE_TIMER"]
