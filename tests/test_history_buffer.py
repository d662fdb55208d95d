from __future__ import annotations

import operator
import random

import pytest

from skribble.history import HistoryBuffer, HistoryConfig, HistoryRangeError


def make_buffer(gap: int = 3, **kwargs) -> HistoryBuffer[int]:
    return HistoryBuffer(operator.add, config=HistoryConfig(checkpoint_gap=gap), **kwargs)


def make_filled(count: int, gap: int = 3) -> HistoryBuffer[int]:
    buffer = make_buffer(gap)
    for value in range(1, count + 1):
        buffer.append(value)
    return buffer


def test_undo_redo_walk_through_checkpoints() -> None:
    res = make_filled(10)

    assert res.reduce_to(0) == 55
    assert res.last() == 10
    assert res.last_checkpoint() == 45

    assert res.undo() is True
    assert res.last_checkpoint() == 45
    assert res.in_undo

    assert res.undo() is True
    assert res.last_checkpoint() == 21
    assert res.in_undo

    assert res.redo() is True
    assert res.last_checkpoint() == 45
    assert res.in_undo

    assert res.redo() is False
    assert res.last_checkpoint() == 45
    assert res.in_undo is False

    for _ in range(9):
        undo = res.undo()
        assert res.in_undo
    assert undo is True
    assert res.last_checkpoint() is None
    assert res.last() == 1

    assert res.undo() is True
    assert res.reduce_to(0) == 0

    assert res.undo() is False
    assert res.in_undo

    for _ in range(9):
        redo = res.redo()
    assert redo is True
    assert res.in_undo

    assert res.redo() is False
    assert res.in_undo is False
    assert res.last_checkpoint() == 45
    assert res.reduce_to(0) == 55


def test_visit_sees_checkpoint_then_tail() -> None:
    res = make_filled(10)
    seen: list[int] = []

    res.visit(seen.append)

    assert seen == [45, 10]


def test_visit_after_undo_uses_last_valid_checkpoint() -> None:
    res = make_filled(10)
    for _ in range(3):
        res.undo()
    seen: list[int] = []

    res.visit(seen.append)

    assert res.cursor == 7
    assert seen == [21, 7]

    res.undo()
    res.undo()
    seen.clear()

    res.visit(seen.append)

    assert res.cursor == 5
    assert seen == [6, 4, 5]
    assert sum(seen) == res.reduce_to(0)


def test_visit_without_checkpoint_replays_every_layer() -> None:
    res = make_filled(3)
    seen: list[int] = []

    res.visit(seen.append)

    assert seen == [1, 2, 3]
    assert res.last_checkpoint() is None


def test_last_on_empty_history_raises() -> None:
    res = make_buffer()

    with pytest.raises(HistoryRangeError) as info:
        res.last()
    assert isinstance(info.value, IndexError)
    assert info.value.cursor == 0


def test_last_after_undoing_everything_raises() -> None:
    res = make_filled(2)
    res.undo()
    res.undo()

    with pytest.raises(HistoryRangeError):
        res.last()


@pytest.mark.parametrize("gap", [1, 2, 3, 5, 7])
@pytest.mark.parametrize("count", [1, 4, 9, 10, 23])
def test_checkpoint_count_after_plain_appends(gap: int, count: int) -> None:
    res = make_filled(count, gap)

    # Checkpoints are built when the layer *after* a boundary arrives.
    assert res.checkpoint_cursor == (count - 1) // gap
    if count % gap:
        assert res.checkpoint_cursor == count // gap


def test_redo_without_undo_is_a_noop() -> None:
    res = make_filled(4)

    assert res.redo() is False
    assert res.cursor == 4
    assert res.in_undo is False


def test_undo_on_empty_buffer_enters_undo_mode() -> None:
    res = make_buffer()

    assert res.undo() is False
    assert res.in_undo
    assert res.redo() is False
    assert res.in_undo is False

    res.append(7)
    assert res.last() == 7
    assert res.reduce_to(0) == 7


@pytest.mark.parametrize("gap", [1, 2, 3, 4])
def test_undo_then_redo_restores_cursors(gap: int) -> None:
    res = make_filled(13, gap)
    while res.can_undo():
        cursor, checkpoints = res.cursor, res.checkpoint_cursor
        assert res.undo() is True
        res.redo()
        assert (res.cursor, res.checkpoint_cursor) == (cursor, checkpoints)
        res.undo()


def test_append_after_undo_truncates() -> None:
    res = make_filled(10)
    for _ in range(4):
        res.undo()

    stored = res.append(99)

    assert stored == 99
    assert res.last() == 99
    assert len(res) == 7
    assert list(res.underlying) == [1, 2, 3, 4, 5, 6, 99]
    assert res.in_undo is False
    assert res.can_redo() is False
    assert res.redo() is False
    assert res.reduce_to(0) == 21 + 99


def test_truncate_on_boundary_reuses_preserved_checkpoint() -> None:
    res = make_filled(7)
    res.undo()
    assert res.cursor == 6
    assert res.last_checkpoint() == 21

    res.append(100)

    assert res.checkpoint_cursor == 2
    assert res.last_checkpoint() == 21
    for value in (8, 9, 10):
        res.append(value)
    assert res.last_checkpoint() == 21 + 100 + 8 + 9
    assert res.reduce_to(0) == 21 + 100 + 8 + 9 + 10


def test_truncate_rebuilds_checkpoint_that_was_never_stored() -> None:
    res = make_filled(6)
    assert res.last_checkpoint() == 6
    res.undo()

    res.append(50)
    res.append(7)

    assert res.checkpoint_cursor == 2
    assert res.last_checkpoint() == 6 + 4 + 5 + 50
    assert res.reduce_to(0) == 6 + 4 + 5 + 50 + 7


def test_redo_never_points_past_stored_checkpoints() -> None:
    res = make_filled(6)
    for _ in range(4):
        res.undo()
    assert res.checkpoint_cursor == 0

    while res.redo():
        pass

    assert res.cursor == 6
    assert res.checkpoint_cursor == 1
    assert res.last_checkpoint() == 6
    assert res.reduce_to(0) == 21


def test_truncate_after_undoing_to_zero_drops_all_checkpoints() -> None:
    res = make_filled(8)
    while res.undo():
        pass

    res.append(5)

    assert list(res.underlying) == [5]
    assert res.last_checkpoint() is None
    assert res.reduce_to(0) == 5


def test_checkpoints_are_copies_of_layers() -> None:
    res: HistoryBuffer[list[int]] = HistoryBuffer(
        lambda acc, layer: acc + layer, config=HistoryConfig(checkpoint_gap=1)
    )
    first = res.append([1])
    res.append([2])

    checkpoint = res.last_checkpoint()
    assert checkpoint == [1]
    assert checkpoint is not first


def test_reduce_keeps_append_order() -> None:
    res: HistoryBuffer[tuple[str, ...]] = HistoryBuffer(
        operator.add, config=HistoryConfig(checkpoint_gap=2)
    )
    for letter in "abcdefg":
        res.append((letter,))
    res.undo()
    res.undo()

    assert res.reduce_to(("<",)) == ("<", "a", "b", "c", "d", "e")
    assert list(res) == [(letter,) for letter in "abcde"]


@pytest.mark.parametrize("gap", [1, 2, 3, 5, 8])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_reduce_matches_full_fold_on_random_walk(gap: int, seed: int) -> None:
    rng = random.Random(seed)
    res: HistoryBuffer[tuple[int, ...]] = HistoryBuffer(
        operator.add, config=HistoryConfig(checkpoint_gap=gap)
    )
    counter = 0
    for _ in range(300):
        op = rng.choice(["append", "append", "undo", "undo", "redo"])
        if op == "append":
            counter += 1
            res.append((counter,))
        elif op == "undo":
            res.undo()
        else:
            res.redo()

        stored = list(res.underlying)
        expected = tuple(item for layer in stored[: res.cursor] for item in layer)
        assert res.reduce_to(()) == expected
        assert 0 <= res.cursor <= len(stored)
        assert res.checkpoint_cursor * gap <= res.cursor
        checkpoint = res.last_checkpoint()
        if checkpoint is not None:
            covered = stored[: res.checkpoint_cursor * gap]
            assert checkpoint == tuple(item for layer in covered for item in layer)


def test_full_undo_then_redo_signals_frontier_last() -> None:
    res = make_filled(8, gap=2)
    while res.undo():
        pass

    results = []
    while res.in_undo:
        results.append(res.redo())

    assert results == [True] * 7 + [False]
    assert res.cursor == 8


def test_max_count_is_not_enforced() -> None:
    # Bounding behaviour is unspecified: the buffer keeps every layer.
    res = HistoryBuffer(operator.add, config=HistoryConfig(checkpoint_gap=2, max_count=3))
    for value in range(10):
        res.append(value)

    assert len(res.underlying) == 10
    assert res.reduce_to(0) == 45


def test_combiner_must_be_callable() -> None:
    with pytest.raises(TypeError):
        HistoryBuffer(None)  # type: ignore[arg-type]
