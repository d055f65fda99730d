"""Value types shared by the cache, persistence, and lifecycle layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DocumentKey = str

CACHE_CAPACITY = 50


@dataclass(frozen=True, slots=True)
class CursorPosition:
    """Caret location as (line, ch); bounds are the editor's concern."""

    line: int = 0
    ch: int = 0

    @property
    def is_origin(self) -> bool:
        return self.line == 0 and self.ch == 0

    def as_tuple(self) -> Tuple[int, int]:
        return (self.line, self.ch)

    @classmethod
    def from_tuple(cls, location: Tuple[int, int]) -> "CursorPosition":
        line, ch = location
        return cls(line=int(line), ch=int(ch))


@dataclass(frozen=True, slots=True)
class CacheEntry:
    key: DocumentKey
    position: CursorPosition


__all__ = ["CACHE_CAPACITY", "CacheEntry", "CursorPosition", "DocumentKey"]
