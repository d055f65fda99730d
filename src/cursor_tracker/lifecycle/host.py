"""Protocols describing what the tracker needs from its host editor."""

from __future__ import annotations

from typing import Optional, Protocol

from cursor_tracker.cache.models import CursorPosition, DocumentKey


class EditorView(Protocol):
    """Caret access for the editor currently showing the active document."""

    def get_cursor(self) -> CursorPosition:
        ...

    def set_cursor(self, position: CursorPosition) -> None:
        """Move the caret; hosts are expected to report the move back."""
        ...

    def scroll_into_view(self, position: CursorPosition) -> None:
        ...


class DocumentHost(Protocol):
    """Document store / workspace the tracker queries on open and readiness."""

    def active_document(self) -> Optional[DocumentKey]:
        ...

    def active_view(self) -> Optional[EditorView]:
        ...


__all__ = ["DocumentHost", "EditorView"]
