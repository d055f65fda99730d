"""Settings codec, durable stores, and the debounced persistence gate."""

from .codec import SETTINGS_KEY, decode_settings, encode_settings
from .gate import SAVE_QUIESCENCE_WINDOW, PersistenceGate
from .store import JsonFileStore, MemoryStore, SettingsStore

__all__ = [
    "SETTINGS_KEY",
    "SAVE_QUIESCENCE_WINDOW",
    "JsonFileStore",
    "MemoryStore",
    "PersistenceGate",
    "SettingsStore",
    "decode_settings",
    "encode_settings",
]
