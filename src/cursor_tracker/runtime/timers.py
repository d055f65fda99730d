"""Deadline timers polled by the host event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

Clock = Callable[[], float]


@dataclass
class PendingTimer:
    deadline: float
    callback: Callable[[], None]
    generation: int


class TimerQueue:
    """Named one-shot timers driven by ``run_due``.

    Nothing runs on its own: the host calls ``run_due`` from its event loop
    (Textual's ``set_interval`` in the demo app) so every callback executes on
    the same thread as the event handlers.
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or time.monotonic
        self._pending: Dict[str, PendingTimer] = {}
        self._counter = 0

    def arm(self, name: str, delay: float, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` after ``delay`` seconds, replacing ``name``."""

        self._counter += 1
        self._pending[name] = PendingTimer(
            deadline=self.clock() + delay,
            callback=callback,
            generation=self._counter,
        )

    def cancel(self, name: str) -> bool:
        return self._pending.pop(name, None) is not None

    def cancel_all(self) -> None:
        self._pending.clear()

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def run_due(self) -> List[str]:
        """Fire every expired timer in deadline order; return the fired names."""

        now = self.clock()
        expired = sorted(
            (
                (timer.deadline, name, timer.generation)
                for name, timer in self._pending.items()
                if timer.deadline <= now
            ),
        )
        fired: List[str] = []
        for _deadline, name, generation in expired:
            timer = self._pending.get(name)
            # a callback fired earlier in this pass may have re-armed or cancelled it
            if timer is None or timer.generation != generation:
                continue
            del self._pending[name]
            fired.append(name)
            timer.callback()
        return fired


__all__ = ["Clock", "PendingTimer", "TimerQueue"]
