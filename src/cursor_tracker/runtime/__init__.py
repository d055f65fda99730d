"""Runtime services: telemetry, timers, configuration."""

from . import telemetry
from .config import TrackerConfig
from .timers import TimerQueue

__all__ = ["TimerQueue", "TrackerConfig", "telemetry"]
