"""Checkpointed undo/redo history for layered drawings."""

__all__ = [
    "drawing",
    "history",
    "runtime",
]

__version__ = "0.1.0"
