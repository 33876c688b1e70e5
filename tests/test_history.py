"""Tests for the undo history stack."""

import numpy as np
import pytest

from canvas import PixelGrid
from color import Color
from history import HistoryStack


def _grid_with(col: int) -> PixelGrid:
    grid = PixelGrid(4, "#FFFFFF")
    grid.set(col, 0, Color(0, 0, 0))
    return grid


class TestHistoryStack:
    def test_empty_stack(self) -> None:
        history = HistoryStack(3)
        assert len(history) == 0
        assert history.peek() is None
        assert history.pop() is None

    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError):
            HistoryStack(0)

    def test_newest_entry_is_on_top(self) -> None:
        history = HistoryStack(3)
        history.record(_grid_with(0))
        history.record(_grid_with(1))
        assert np.array_equal(history.peek(), _grid_with(1).snapshot())

    def test_identical_snapshot_is_not_pushed(self) -> None:
        history = HistoryStack(3)
        assert history.record(_grid_with(0)) is True
        assert history.record(_grid_with(0)) is False
        assert len(history) == 1

    def test_only_the_top_is_compared(self) -> None:
        history = HistoryStack(3)
        history.record(_grid_with(0))
        history.record(_grid_with(1))
        assert history.record(_grid_with(0)) is True
        assert len(history) == 3

    def test_oldest_entries_are_evicted(self) -> None:
        history = HistoryStack(2)
        for col in range(4):
            history.record(_grid_with(col))
        assert len(history) == 2
        assert np.array_equal(history.pop(), _grid_with(3).snapshot())
        assert np.array_equal(history.pop(), _grid_with(2).snapshot())
        assert history.pop() is None

    def test_snapshot_is_detached_from_grid(self) -> None:
        grid = _grid_with(0)
        history = HistoryStack(2)
        history.record(grid)
        grid.set(3, 3, Color(1, 2, 3))
        assert tuple(history.peek()[3, 3]) == (255, 255, 255)

    def test_accepts_raw_arrays(self) -> None:
        history = HistoryStack(2)
        history.record(np.zeros((4, 4, 3), dtype=np.uint8))
        assert not history.peek().flags.writeable
