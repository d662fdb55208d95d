"""Fixed configuration for history buffers."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

ENV_PREFIX = "SKRIBBLE_"
DEFAULT_CHECKPOINT_GAP = 5
DEFAULT_MAX_COUNT = sys.maxsize


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Checkpoint spacing and the (currently unenforced) element ceiling.

    A checkpoint is stored every ``checkpoint_gap`` layers. ``max_count`` is
    kept for callers that want to read it; buffers do not evict when it is
    exceeded.
    """

    checkpoint_gap: int = DEFAULT_CHECKPOINT_GAP
    max_count: int = DEFAULT_MAX_COUNT

    def __post_init__(self) -> None:
        if self.checkpoint_gap < 1:
            raise ValueError("checkpoint_gap must be at least 1")
        if self.max_count <= 1:
            raise ValueError("max_count must be bigger than 1")

    @classmethod
    def from_env(cls) -> "HistoryConfig":
        return cls(
            checkpoint_gap=_env_int("CHECKPOINT_GAP", DEFAULT_CHECKPOINT_GAP),
            max_count=_env_int("MAX_COUNT", DEFAULT_MAX_COUNT),
        )


__all__ = ["HistoryConfig", "DEFAULT_CHECKPOINT_GAP", "DEFAULT_MAX_COUNT"]
