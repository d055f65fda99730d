"""Active-document session tracking."""

from .state import (
    MAX_RESTORE_ATTEMPTS,
    MoveVerdict,
    SessionPhase,
    SessionState,
    SessionTracker,
)

__all__ = [
    "MAX_RESTORE_ATTEMPTS",
    "MoveVerdict",
    "SessionPhase",
    "SessionState",
    "SessionTracker",
]
