"""Environment-driven settings for hosts embedding the tracker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import appdirs  # type: ignore[import]

from .telemetry import ENV_PREFIX

APP_NAME = "cursor_tracker"
STORE_FILENAME = "cursors.json"


def default_store_path() -> Path:
    return Path(appdirs.user_config_dir(APP_NAME)) / STORE_FILENAME


def _env_float(env: Mapping[str, str], key: str, fallback: float) -> float:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


@dataclass(slots=True)
class TrackerConfig:
    """Where cursors are stored and how often the host polls timers."""

    store_path: Path = field(default_factory=default_store_path)
    tick_interval: float = 0.5

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TrackerConfig":
        source = os.environ if env is None else env
        raw_store = source.get(f"{ENV_PREFIX}STORE")
        store_path = Path(raw_store).expanduser() if raw_store else default_store_path()
        return cls(
            store_path=store_path,
            tick_interval=_env_float(source, "TICK_INTERVAL", 0.5),
        )


__all__ = ["APP_NAME", "STORE_FILENAME", "TrackerConfig", "default_store_path"]
