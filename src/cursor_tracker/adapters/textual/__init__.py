"""Textual host adapter; the runnable app lives in ``app``."""

from .controller import TextAreaView, TextualCursorAdapter, TextualUIHooks

__all__ = ["TextAreaView", "TextualCursorAdapter", "TextualUIHooks"]
