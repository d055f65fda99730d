"""Per-document session state used to filter restoration echoes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cursor_tracker.cache.models import CursorPosition, DocumentKey

MAX_RESTORE_ATTEMPTS = 3


class SessionPhase(str, Enum):
    IDLE = "idle"
    OPENING = "opening"
    RESTORING = "restoring"
    SETTLED = "settled"


class MoveVerdict(str, Enum):
    """What the coordinator should do with a cursor-move notification."""

    STALE = "stale"
    ECHO = "echo"
    RETRY = "retry"
    ACCEPT = "accept"


@dataclass(slots=True)
class SessionState:
    active_key: Optional[DocumentKey] = None
    phase: SessionPhase = SessionPhase.IDLE
    target: Optional[CursorPosition] = None
    restore_attempts: int = 0

    @property
    def restoration_complete(self) -> bool:
        return self.phase is SessionPhase.SETTLED


class SessionTracker:
    """Tracks the active document and whether its restoration finished.

    The first move notification after an open is never authoritative: it is
    either the echo of our own programmatic move or the widget reporting its
    initial caret. Both look identical to a user move, so it is consumed.
    """

    def __init__(self, *, max_restore_attempts: int = MAX_RESTORE_ATTEMPTS) -> None:
        self.max_restore_attempts = max_restore_attempts
        self.state = SessionState()

    @property
    def active_key(self) -> Optional[DocumentKey]:
        return self.state.active_key

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def is_settled(self) -> bool:
        return self.state.restoration_complete

    def is_active(self, key: Optional[DocumentKey]) -> bool:
        return key is not None and key == self.state.active_key

    def begin(self, key: Optional[DocumentKey]) -> SessionState:
        phase = SessionPhase.OPENING if key is not None else SessionPhase.IDLE
        self.state = SessionState(active_key=key, phase=phase)
        return self.state

    def mark_restoring(self, target: CursorPosition) -> None:
        self.state.phase = SessionPhase.RESTORING
        self.state.target = target
        self.state.restore_attempts += 1

    def settle(self) -> None:
        if self.state.active_key is not None:
            self.state.phase = SessionPhase.SETTLED

    def close(self) -> None:
        self.state = SessionState()

    def rename(self, old_key: DocumentKey, new_key: DocumentKey) -> bool:
        if self.state.active_key != old_key:
            return False
        self.state.active_key = new_key
        return True

    def consume_move(
        self, key: Optional[DocumentKey], position: CursorPosition
    ) -> MoveVerdict:
        if not self.is_active(key):
            return MoveVerdict.STALE
        if self.is_settled:
            return MoveVerdict.ACCEPT

        state = self.state
        if (
            state.phase is SessionPhase.RESTORING
            and position.is_origin
            and state.target is not None
            and not state.target.is_origin
            and state.restore_attempts < self.max_restore_attempts
        ):
            # the widget's initial (0, 0) report landed after our restore
            return MoveVerdict.RETRY

        state.phase = SessionPhase.SETTLED
        return MoveVerdict.ECHO


__all__ = [
    "MAX_RESTORE_ATTEMPTS",
    "MoveVerdict",
    "SessionPhase",
    "SessionState",
    "SessionTracker",
]
