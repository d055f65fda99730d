"""Wires host lifecycle events to the cache, session tracker, and gate."""

from __future__ import annotations

from typing import Optional

from cursor_tracker.cache import CursorPosition, DocumentKey, RecencyCache
from cursor_tracker.persistence import PersistenceGate, SettingsStore
from cursor_tracker.runtime import telemetry
from cursor_tracker.runtime.timers import Clock, TimerQueue
from cursor_tracker.session import MoveVerdict, SessionTracker

from . import events
from .events import HostBus
from .host import DocumentHost

RESTORE_RETRY_DELAY = 0.2
RESTORE_TIMER = "session.restore"


class CursorTracker:
    """Restores carets on open and records them on genuine user moves.

    All handlers must be called from one thread in delivery order; the
    tracker owns every piece of mutable state it touches.
    """

    def __init__(
        self,
        host: DocumentHost,
        store: SettingsStore,
        *,
        clock: Optional[Clock] = None,
        logger_name: str | None = "cursor_tracker.lifecycle",
    ) -> None:
        self.host = host
        self._logger_name = logger_name
        self.timers = TimerQueue(clock=clock)
        self.cache = RecencyCache(logger_name=logger_name)
        self.gate = PersistenceGate(
            self.cache, store, timers=self.timers, logger_name=logger_name
        )
        self.session = SessionTracker()
        self.layout_ready = False

    def attach(self, bus: HostBus) -> None:
        """Subscribe the handlers to a host bus (see ``events`` for payloads)."""

        bus.subscribe(events.DOCUMENT_OPEN, self._handle_open)
        bus.subscribe(events.CURSOR_MOVE, self._handle_move)
        bus.subscribe(events.DOCUMENT_RENAME, self._handle_rename)
        bus.subscribe(events.DOCUMENT_DELETE, self._handle_delete)
        bus.subscribe(events.LAYOUT_READY, lambda _payload: self.on_layout_ready())
        bus.subscribe(
            events.SETTINGS_CHANGED,
            lambda _payload: self.on_external_settings_change(),
        )
        bus.subscribe(events.APP_QUIT, lambda _payload: self.on_shutdown())

    def on_init(self) -> int:
        return self.gate.load()

    def on_layout_ready(self) -> None:
        self.layout_ready = True
        if self.session.active_key is not None:
            return
        # loaded after the host already opened a document: take it as is
        key = self.host.active_document()
        if key is None or self.host.active_view() is None:
            return
        self.session.begin(key)
        self.session.settle()
        telemetry.record_event(
            "session.adopt",
            level="debug",
            data={"key": key},
            logger_name=self._logger_name,
        )

    def on_document_opened(self, key: Optional[DocumentKey]) -> None:
        self.timers.cancel(RESTORE_TIMER)
        self.session.begin(key)
        if key is None:
            return

        view = self.host.active_view()
        if view is None or self.host.active_document() != key:
            self.session.settle()
            return

        stored = self.cache.get(key)
        if stored is None:
            self.session.settle()
            return

        current = view.get_cursor()
        if current == stored:
            # moving onto the current caret produces no notification to consume
            self.session.settle()
            return

        if current.is_origin:
            with telemetry.span(
                "lifecycle::restore",
                logger_name=self._logger_name,
                metadata={"key": key, "line": stored.line, "ch": stored.ch},
            ):
                self.session.mark_restoring(stored)
                view.set_cursor(stored)
                view.scroll_into_view(stored)
            telemetry.record_event(
                "session.restore",
                level="debug",
                data={"key": key, "cursor": stored.as_tuple()},
                logger_name=self._logger_name,
            )
            return

        # the caret was already placed meaningfully; it wins over the cache
        self.cache.set(key, current)
        self.gate.request_save()
        self.session.settle()

    def on_cursor_moved(self, key: Optional[DocumentKey], position: CursorPosition) -> None:
        if not self.layout_ready:
            return

        verdict = self.session.consume_move(key, position)
        if verdict is MoveVerdict.STALE:
            telemetry.record_event(
                "session.stale",
                level="debug",
                data={"key": key, "active": self.session.active_key},
                logger_name=self._logger_name,
            )
            return
        if verdict is MoveVerdict.ECHO:
            telemetry.record_event(
                "session.echo",
                level="debug",
                data={"key": key, "cursor": position.as_tuple()},
                logger_name=self._logger_name,
            )
            return
        if verdict is MoveVerdict.RETRY:
            self.timers.arm(RESTORE_TIMER, RESTORE_RETRY_DELAY, self._retry_restore)
            return

        assert key is not None
        if self.cache.get(key) != position:
            self.cache.set(key, position)
            self.gate.request_save()

    def on_document_renamed(self, old_key: DocumentKey, new_key: DocumentKey) -> None:
        self.session.rename(old_key, new_key)
        if not self.cache.has(old_key):
            return
        position = self.cache.get(old_key)
        self.cache.delete(old_key)
        if position is not None:
            self.cache.set(new_key, position)
        self.gate.request_save()
        telemetry.record_event(
            "document.rename",
            data={"old": old_key, "new": new_key},
            logger_name=self._logger_name,
        )

    def on_document_deleted(self, key: DocumentKey) -> None:
        removed = self.cache.delete(key)
        if self.session.is_active(key):
            self.timers.cancel(RESTORE_TIMER)
            self.session.close()
        self.gate.request_save()
        telemetry.record_event(
            "document.delete",
            data={"key": key, "removed": removed},
            logger_name=self._logger_name,
        )

    def on_external_settings_change(self) -> int:
        return self.gate.load()

    def on_shutdown(self) -> bool:
        self.timers.cancel_all()
        return self.gate.flush_now()

    def tick(self) -> list[str]:
        """Run expired timers; persistence failures propagate to the caller."""

        return self.timers.run_due()

    def _handle_open(self, payload: object | None) -> None:
        self.on_document_opened(payload if isinstance(payload, str) else None)

    def _handle_move(self, payload: object | None) -> None:
        if not isinstance(payload, tuple) or len(payload) != 2:
            return
        key, position = payload
        if isinstance(key, str) and isinstance(position, CursorPosition):
            self.on_cursor_moved(key, position)

    def _handle_rename(self, payload: object | None) -> None:
        if not isinstance(payload, tuple) or len(payload) != 2:
            return
        old_key, new_key = payload
        self.on_document_renamed(str(old_key), str(new_key))

    def _handle_delete(self, payload: object | None) -> None:
        if isinstance(payload, str):
            self.on_document_deleted(payload)

    def _retry_restore(self) -> None:
        # read the key at fire time; a rename may have happened since arming
        state = self.session.state
        key = state.active_key
        if key is None or self.session.is_settled or state.target is None:
            return
        view = self.host.active_view()
        if view is None or self.host.active_document() != key:
            self.session.settle()
            return
        self.session.mark_restoring(state.target)
        view.set_cursor(state.target)
        view.scroll_into_view(state.target)
        telemetry.record_event(
            "session.retry",
            level="debug",
            data={"key": key, "attempt": state.restore_attempts},
            logger_name=self._logger_name,
        )


__all__ = ["CursorTracker", "RESTORE_RETRY_DELAY", "RESTORE_TIMER"]
