"""Bounded, de-duplicating undo history of grid snapshots."""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


class HistoryStack:
    """Most-recent-first list of read-only grid snapshots."""

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._snapshots: list[np.ndarray] = []

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self):
        return iter(self._snapshots)

    def record(self, grid) -> bool:
        """Push a snapshot of ``grid`` unless it equals the current top.

        ``grid`` may be a PixelGrid or a snapshot array. Returns True when an
        entry was added.
        """
        snapshot = grid.snapshot() if hasattr(grid, "snapshot") else _freeze(grid)
        top = self.peek()
        if top is not None and np.array_equal(top, snapshot):
            logger.debug("History unchanged, skipping duplicate snapshot")
            return False

        self._snapshots.insert(0, snapshot)
        if len(self._snapshots) > self.capacity:
            del self._snapshots[self.capacity:]
        logger.debug("History recorded, %d/%d entries", len(self), self.capacity)
        return True

    def peek(self) -> Optional[np.ndarray]:
        return self._snapshots[0] if self._snapshots else None

    def pop(self) -> Optional[np.ndarray]:
        if not self._snapshots:
            return None
        return self._snapshots.pop(0)


def _freeze(array: np.ndarray) -> np.ndarray:
    snapshot = np.array(array, dtype=np.uint8, copy=True)
    snapshot.flags.writeable = False
    return snapshot
