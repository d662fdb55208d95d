"""Contract checks shared across history services."""

from __future__ import annotations


class HistoryRangeError(IndexError):
    """Raised when a caller reads past the valid prefix of a history buffer."""

    def __init__(self, message: str, *, cursor: int | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


def ensure_position(cursor: int, position: int) -> int:
    if position < 0 or position >= cursor:
        raise HistoryRangeError(
            f"Position {position} is outside the valid history [0, {cursor})",
            cursor=cursor,
        )
    return position


__all__ = ["HistoryRangeError", "ensure_position"]
