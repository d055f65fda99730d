"""Exception types raised by the tracker."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CursorTrackerError(RuntimeError):
    """Base class for tracker failures."""


class PersistenceError(CursorTrackerError):
    """Raised when the settings store cannot be read or written."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


__all__ = ["CursorTrackerError", "PersistenceError"]
