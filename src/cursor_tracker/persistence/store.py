"""Durable backends for the settings blob."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol

from cursor_tracker.errors import PersistenceError


class SettingsStore(Protocol):
    """Protocol every settings backend implements."""

    def load(self) -> Optional[Mapping[str, Any]]:
        """Return the stored blob, or ``None`` when nothing was saved yet."""
        ...

    def save(self, data: Mapping[str, Any]) -> None:
        """Replace the stored blob; raise ``PersistenceError`` on failure."""
        ...


class JsonFileStore:
    """Stores the blob as a JSON document, replacing the file atomically."""

    def __init__(self, path: os.PathLike[str] | str) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Mapping[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(
                f"Cannot read cursor store {self.path}: {exc}", path=self.path
            ) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"Cursor store {self.path} is not valid JSON: {exc}", path=self.path
            ) from exc
        if not isinstance(data, dict):
            raise PersistenceError(
                f"Cursor store {self.path} does not hold an object", path=self.path
            )
        return data

    def save(self, data: Mapping[str, Any]) -> None:
        payload = json.dumps(dict(data), indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(
                f"Cannot write cursor store {self.path}: {exc}", path=self.path
            ) from exc


class MemoryStore:
    """In-process store that keeps every saved blob."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self.data: Optional[Mapping[str, Any]] = initial
        self.saves: List[Mapping[str, Any]] = []

    def load(self) -> Optional[Mapping[str, Any]]:
        return self.data

    def save(self, data: Mapping[str, Any]) -> None:
        snapshot = json.loads(json.dumps(dict(data)))
        self.data = snapshot
        self.saves.append(snapshot)


__all__ = ["JsonFileStore", "MemoryStore", "SettingsStore"]
