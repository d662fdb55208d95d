"""Checkpointed undo/redo history buffer."""

from __future__ import annotations

import copy
from collections import deque
from typing import Callable, Deque, Generic, Iterator, Optional, TypeVar

from skribble.runtime.telemetry import record_event

from .checkpoints import CursorState, checkpoint_span
from .config import HistoryConfig
from .validation import ensure_position

T = TypeVar("T")

Combiner = Callable[[T, T], T]
Copier = Callable[[T], T]


class HistoryBuffer(Generic[T]):
    """Append-only layer history with periodic cumulative checkpoints.

    Every ``checkpoint_gap`` layers the buffer stores the fold of all layers so
    far, so ``reduce_to`` replays at most one checkpoint plus ``gap`` layers.
    ``undo``/``redo`` only move cursors; layers past the cursor stay stored
    until the next ``append`` truncates them.

    ``combiner(accumulator, layer)`` must return the folded accumulator. It may
    update a mutable accumulator in place, but must never modify ``layer``.
    """

    def __init__(
        self,
        combiner: Combiner[T],
        *,
        config: Optional[HistoryConfig] = None,
        copier: Copier[T] = copy.deepcopy,
        logger_name: str | None = None,
    ) -> None:
        if not callable(combiner):
            raise TypeError("combiner must be callable")
        self._combine = combiner
        self._copy = copier
        self._config = config or HistoryConfig()
        self._gap = self._config.checkpoint_gap
        self._history: Deque[T] = deque()
        self._checkpoints: Deque[T] = deque()
        self._state = CursorState()
        self._logger_name = logger_name

    @property
    def config(self) -> HistoryConfig:
        return self._config

    @property
    def cursor(self) -> int:
        """Number of layers in the valid (not undone) prefix."""

        return self._state.history

    @property
    def checkpoint_cursor(self) -> int:
        return self._state.checkpoints

    @property
    def in_undo(self) -> bool:
        return self._state.in_undo

    @property
    def underlying(self) -> Deque[T]:
        """Raw layer storage, including undone layers. Ignores the cursors."""

        return self._history

    def __len__(self) -> int:
        return self._state.history

    def __iter__(self) -> Iterator[T]:
        for index in range(self._state.history):
            yield self._history[index]

    def can_undo(self) -> bool:
        return self._state.history > 0

    def can_redo(self) -> bool:
        return self._state.in_undo and self._state.history < len(self._history)

    def append(self, layer: T) -> T:
        plan = self._state.plan_append(self._gap)
        if plan.truncate:
            self._truncate()
        if plan.checkpoint:
            self._build_checkpoint()

        self._history.append(layer)
        self._state.after_append(len(self._history))
        return layer

    def reduce_to(self, accumulator: T) -> T:
        """Fold the valid prefix into ``accumulator`` and return the result."""

        value = accumulator
        checkpoint = self.last_checkpoint()
        if checkpoint is not None:
            value = self._combine(value, checkpoint)
        for index in range(self._state.replay_start(self._gap), self._state.history):
            value = self._combine(value, self._history[index])
        return value

    def visit(self, visitor: Callable[[T], object]) -> None:
        """Call ``visitor`` with the last valid checkpoint, then each newer layer."""

        checkpoint = self.last_checkpoint()
        if checkpoint is not None:
            visitor(checkpoint)
        for index in range(self._state.replay_start(self._gap), self._state.history):
            visitor(self._history[index])

    def last_checkpoint(self) -> Optional[T]:
        if self._state.checkpoints == 0:
            return None
        return self._checkpoints[self._state.checkpoints - 1]

    def last(self) -> T:
        position = ensure_position(self._state.history, self._state.history - 1)
        return self._history[position]

    def undo(self) -> bool:
        """Step one layer back.

        Returns ``False`` when already at the oldest state. Either way the
        buffer is left in undo mode.
        """

        return self._state.step_back(self._gap)

    def redo(self) -> bool:
        """Step one layer forward.

        The return value reports whether *more* redo is available, not whether
        this call did anything: the step that reaches the newest layer still
        moves the cursor, leaves undo mode, and returns ``False``.
        """

        return self._state.step_forward(
            self._gap, len(self._history), len(self._checkpoints)
        )

    def _truncate(self) -> None:
        dropped_layers = len(self._history) - self._state.history
        dropped_checkpoints = len(self._checkpoints) - self._state.checkpoints
        while len(self._history) > self._state.history:
            self._history.pop()
        if self._state.checkpoints == 0:
            self._checkpoints.clear()
        else:
            while len(self._checkpoints) > self._state.checkpoints:
                self._checkpoints.pop()
        self._state.in_undo = False
        record_event(
            "history.truncate",
            level="debug",
            data={
                "layers": dropped_layers,
                "checkpoints": dropped_checkpoints,
                "cursor": self._state.history,
            },
            logger_name=self._logger_name,
        )

    def _build_checkpoint(self) -> None:
        index = self._state.checkpoints
        start, stop = checkpoint_span(index, self._gap)
        if index == 0:
            value = self._copy(self._history[0])
        else:
            value = self._copy(self._checkpoints[index - 1])
        for position in range(start, stop):
            value = self._combine(value, self._history[position])

        self._checkpoints.append(value)
        self._state.checkpoints = len(self._checkpoints)
        record_event(
            "history.checkpoint",
            level="debug",
            data={"index": index, "covers": stop},
            logger_name=self._logger_name,
        )


__all__ = ["HistoryBuffer", "Combiner", "Copier"]
