"""Checkpointed undo/redo history and its cursor bookkeeping."""

from .buffer import Combiner, Copier, HistoryBuffer
from .checkpoints import AppendPlan, CursorState, checkpoint_delta, checkpoint_span
from .config import HistoryConfig
from .validation import HistoryRangeError, ensure_position

__all__ = [
    "HistoryBuffer",
    "HistoryConfig",
    "HistoryRangeError",
    "Combiner",
    "Copier",
    "AppendPlan",
    "CursorState",
    "checkpoint_delta",
    "checkpoint_span",
    "ensure_position",
]
