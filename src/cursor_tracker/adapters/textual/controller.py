"""Adapter that lets a Textual ``TextArea`` drive the cursor tracker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from cursor_tracker.cache import CursorPosition, DocumentKey
from cursor_tracker.errors import PersistenceError
from cursor_tracker.lifecycle import CursorTracker
from cursor_tracker.persistence import SettingsStore
from cursor_tracker.runtime import telemetry
from cursor_tracker.runtime.timers import Clock


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextAreaView:
    """``EditorView`` over any widget exposing ``cursor_location``."""

    def __init__(self, widget: Any) -> None:
        self.widget = widget

    def get_cursor(self) -> CursorPosition:
        return CursorPosition.from_tuple(self.widget.cursor_location)

    def set_cursor(self, position: CursorPosition) -> None:
        self.widget.cursor_location = position.as_tuple()

    def scroll_into_view(self, position: CursorPosition) -> None:
        del position  # the widget scrolls to its own caret
        self.widget.scroll_cursor_visible(center=True)


class TextualCursorAdapter:
    """Plays the document host for a Textual app with one TextArea per document."""

    def __init__(
        self,
        store: SettingsStore,
        hooks: Optional[TextualUIHooks] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self.hooks = hooks or TextualUIHooks()
        self._active_key: Optional[DocumentKey] = None
        self._view: Optional[TextAreaView] = None
        # keyed by id() since widgets are not required to be hashable
        self._widget_keys: Dict[int, DocumentKey] = {}
        self.tracker = CursorTracker(self, store, clock=clock)

    # DocumentHost
    def active_document(self) -> Optional[DocumentKey]:
        return self._active_key

    def active_view(self) -> Optional[TextAreaView]:
        return self._view

    def start(self) -> int:
        loaded = self.tracker.on_init()
        self._log("start ->", loaded=loaded)
        return loaded

    def layout_ready(self) -> None:
        self.tracker.on_layout_ready()
        self._log("layout ready ->")

    def open_document(self, key: Optional[DocumentKey], widget: Any) -> None:
        self._active_key = key
        self._view = TextAreaView(widget) if key is not None else None
        if key is not None:
            self._widget_keys[id(widget)] = key
        self.tracker.on_document_opened(key)
        self._log("open ->", key=key, phase=self.tracker.session.phase.value)

    def selection_changed(
        self, key: Optional[DocumentKey], location: Tuple[int, int]
    ) -> None:
        position = CursorPosition.from_tuple(location)
        self.tracker.on_cursor_moved(key, position)
        self._log("move ->", key=key, cursor=position.as_tuple())

    def widget_selection_changed(
        self, widget: Any, location: Tuple[int, int]
    ) -> Optional[DocumentKey]:
        """Report a move from ``widget``, credited to the document it was opened with."""

        key = self._widget_keys.get(id(widget))
        self.selection_changed(key, location)
        return key

    def rename(self, old_key: DocumentKey, new_key: DocumentKey) -> None:
        if self._active_key == old_key:
            self._active_key = new_key
        for widget_id, key in self._widget_keys.items():
            if key == old_key:
                self._widget_keys[widget_id] = new_key
        self.tracker.on_document_renamed(old_key, new_key)
        self._log("rename ->", old=old_key, new=new_key)

    def delete(self, key: DocumentKey) -> None:
        if self._active_key == key:
            self._active_key = None
            self._view = None
        self._widget_keys = {
            widget_id: widget_key
            for widget_id, widget_key in self._widget_keys.items()
            if widget_key != key
        }
        self.tracker.on_document_deleted(key)
        self._log("delete ->", key=key)

    def tick(self) -> list[str]:
        """Run due timers; a failed background save only degrades to a status line."""

        try:
            return self.tracker.tick()
        except PersistenceError as exc:
            telemetry.record_event(
                "persistence.error",
                level="error",
                data={"reason": str(exc), "path": exc.path},
            )
            self.hooks.update_status(f"cursor positions not saved: {exc}")
            return []

    def close(self) -> bool:
        written = self.tracker.on_shutdown()
        self._log("close ->", written=written)
        return written

    def _log(self, prefix: str, **fields: object) -> None:
        parts = [prefix]
        for key, value in fields.items():
            if value is not None:
                parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["TextAreaView", "TextualCursorAdapter", "TextualUIHooks"]
