"""Remember and restore the caret position of recently visited documents."""

__all__ = [
    "adapters",
    "cache",
    "errors",
    "lifecycle",
    "persistence",
    "runtime",
    "session",
]

__version__ = "0.1.0"
