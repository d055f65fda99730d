"""Host event names and the bus that delivers them.

Payloads: ``document.open`` carries the key (or ``None`` when the host shows
no document), ``cursor.move`` a ``(key, CursorPosition)`` pair,
``document.rename`` an ``(old_key, new_key)`` pair and ``document.delete``
the key. The remaining events carry nothing.
"""

from __future__ import annotations

from typing import Callable, Dict

DOCUMENT_OPEN = "document.open"
CURSOR_MOVE = "cursor.move"
DOCUMENT_RENAME = "document.rename"
DOCUMENT_DELETE = "document.delete"
LAYOUT_READY = "layout.ready"
SETTINGS_CHANGED = "settings.external_change"
APP_QUIT = "app.quit"


class HostBus:
    """Minimal synchronous event bus; callbacks run in subscription order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "APP_QUIT",
    "CURSOR_MOVE",
    "DOCUMENT_DELETE",
    "DOCUMENT_OPEN",
    "DOCUMENT_RENAME",
    "HostBus",
    "LAYOUT_READY",
    "SETTINGS_CHANGED",
]
