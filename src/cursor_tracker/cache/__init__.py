"""Cursor value types and the bounded recency cache."""

from .models import CACHE_CAPACITY, CacheEntry, CursorPosition, DocumentKey
from .recency import RecencyCache

__all__ = [
    "CACHE_CAPACITY",
    "CacheEntry",
    "CursorPosition",
    "DocumentKey",
    "RecencyCache",
]
