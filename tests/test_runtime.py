from pathlib import Path
from typing import List

from cursor_tracker.runtime import TimerQueue, TrackerConfig
from cursor_tracker.runtime.config import STORE_FILENAME


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_timers_fire_in_deadline_order() -> None:
    clock = FakeClock()
    timers = TimerQueue(clock=clock)
    fired: List[str] = []
    timers.arm("late", 2.0, lambda: fired.append("late"))
    timers.arm("early", 1.0, lambda: fired.append("early"))

    clock.now = 1.5
    assert timers.run_due() == ["early"]
    clock.now = 2.0
    assert timers.run_due() == ["late"]
    assert fired == ["early", "late"]


def test_rearming_replaces_previous_timer() -> None:
    clock = FakeClock()
    timers = TimerQueue(clock=clock)
    fired: List[str] = []
    timers.arm("save", 1.0, lambda: fired.append("first"))
    timers.arm("save", 3.0, lambda: fired.append("second"))

    clock.now = 1.0
    assert timers.run_due() == []
    clock.now = 3.0
    timers.run_due()
    assert fired == ["second"]


def test_cancel_all_drops_pending() -> None:
    timers = TimerQueue(clock=FakeClock())
    timers.arm("a", 0.0, lambda: None)

    timers.cancel_all()

    assert not timers.is_pending("a")
    assert timers.run_due() == []


def test_config_from_env_overrides() -> None:
    config = TrackerConfig.from_env(
        {
            "CURSOR_TRACKER_STORE": "/tmp/cursors/store.json",
            "CURSOR_TRACKER_TICK_INTERVAL": "0.25",
        }
    )

    assert config.store_path == Path("/tmp/cursors/store.json")
    assert config.tick_interval == 0.25


def test_config_defaults_to_user_config_dir() -> None:
    config = TrackerConfig.from_env({"CURSOR_TRACKER_TICK_INTERVAL": "soon"})

    assert config.store_path.name == STORE_FILENAME
    assert config.tick_interval == 0.5
