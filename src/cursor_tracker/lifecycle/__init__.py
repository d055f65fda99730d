"""Lifecycle coordination between host events and the cursor cache."""

from .coordinator import RESTORE_RETRY_DELAY, CursorTracker
from .events import HostBus
from .host import DocumentHost, EditorView

__all__ = [
    "CursorTracker",
    "DocumentHost",
    "EditorView",
    "HostBus",
    "RESTORE_RETRY_DELAY",
]
