"""Cursor arithmetic shared by history buffers.

Everything in this module is pure bookkeeping over counts: no layer values
are touched here. ``HistoryBuffer`` owns the storage and delegates every
cursor decision to ``CursorState`` so the boundary rules can be tested
without a container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


def checkpoint_delta(old_count: int, new_count: int, gap: int) -> int:
    """Return how a single cursor step moves across checkpoint boundaries.

    ``+1`` when a forward step lands on a multiple of ``gap``, ``-1`` when a
    backward step leaves one, ``0`` otherwise.
    """

    if gap < 1:
        raise ValueError("gap must be at least 1")
    if abs(new_count - old_count) != 1:
        raise ValueError(
            f"cursor steps must move exactly one element ({old_count} -> {new_count})"
        )
    if min(old_count, new_count) < 0:
        raise ValueError("cursor counts cannot be negative")
    if new_count > old_count:
        return 1 if new_count % gap == 0 else 0
    return -1 if old_count % gap == 0 else 0


def checkpoint_span(index: int, gap: int) -> tuple[int, int]:
    """History slice ``[start, stop)`` folded on top of checkpoint ``index - 1``.

    Checkpoint 0 is seeded with element 0, so its span starts at 1.
    """

    if index < 0:
        raise ValueError("checkpoint index cannot be negative")
    start = index * gap
    return (start or 1, (index + 1) * gap)


@dataclass(frozen=True, slots=True)
class AppendPlan:
    """Ordered decision taken before a layer is pushed."""

    truncate: bool
    checkpoint: bool

    @property
    def label(self) -> Literal["append", "checkpoint", "truncate", "truncate+checkpoint"]:
        if self.truncate and self.checkpoint:
            return "truncate+checkpoint"
        if self.truncate:
            return "truncate"
        if self.checkpoint:
            return "checkpoint"
        return "append"


@dataclass(slots=True)
class CursorState:
    """Logical cursors over a history buffer and its checkpoints."""

    history: int = 0
    checkpoints: int = 0
    in_undo: bool = False

    def replay_start(self, gap: int) -> int:
        """First history index not already covered by the last valid checkpoint."""

        return min(self.history, self.checkpoints * gap)

    def plan_append(self, gap: int) -> AppendPlan:
        # A boundary checkpoint that survived truncation is reused; one that was
        # never built (or was undone past) is rebuilt before the push.
        on_boundary = self.history > 0 and self.history % gap == 0
        missing = self.checkpoints < self.history // gap
        return AppendPlan(truncate=self.in_undo, checkpoint=on_boundary and missing)

    def after_append(self, stored_history: int) -> None:
        self.history = stored_history
        self.in_undo = False

    def step_back(self, gap: int) -> bool:
        self.in_undo = True
        if self.history == 0:
            return False

        old = self.history
        self.history -= 1
        delta = checkpoint_delta(old, self.history, gap)
        if delta < 0 and self.checkpoints * gap == old:
            self.checkpoints -= 1
        return True

    def step_forward(self, gap: int, stored_history: int, stored_checkpoints: int) -> bool:
        if not self.in_undo:
            return False
        if self.history >= stored_history:
            # Undo was requested on an exhausted history; nothing lies ahead.
            self.in_undo = False
            return False

        reaches_end = self.history + 1 == stored_history
        old = self.history
        self.history += 1
        if reaches_end:
            self.in_undo = False

        delta = checkpoint_delta(old, self.history, gap)
        if delta > 0 and self.checkpoints < min(stored_checkpoints, self.history // gap):
            self.checkpoints += 1
        return not reaches_end


__all__ = [
    "AppendPlan",
    "CursorState",
    "checkpoint_delta",
    "checkpoint_span",
]
