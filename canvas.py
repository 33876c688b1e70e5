"""Painting engine: pixel grid, stroke state machine, and undo history."""

import logging
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from brush import BRUSH_SIZES, resolve_footprint
from color import BACKGROUND, DEFAULT_BRUSH_COLOR, Color, as_color, blend_array
from history import HistoryStack
from settings import GRID_SIZE, HISTORY_CAPACITY

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


class OutOfBounds(IndexError):
    def __init__(self, col: int, row: int, size: int):
        super().__init__(f"Cell ({col}, {row}) is outside the {size}x{size} grid")
        self.col = col
        self.row = row


@dataclass(frozen=True)
class PaintSettings:
    """What the brush lays down: color, footprint pattern, and opacity in (0, 1]."""

    color: Color = DEFAULT_BRUSH_COLOR
    pattern: str = BRUSH_SIZES["Tiny"]
    opacity: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "color", as_color(self.color))
        if not 0.0 < self.opacity <= 1.0:
            raise ValueError(f"Opacity must be within (0, 1], got {self.opacity}")


class PixelGrid:
    """Square matrix of colors, stored row-major as an (N, N, 3) uint8 array."""

    def __init__(self, size: int = GRID_SIZE, background=BACKGROUND):
        if size < 1:
            raise ValueError("Grid size must be positive")
        self.size = size
        self.background = as_color(background)
        self._cells = np.empty((size, size, 3), dtype=np.uint8)
        self._cells[:] = self.background

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.size and 0 <= row < self.size

    def _check(self, col: int, row: int):
        if not self.in_bounds(col, row):
            raise OutOfBounds(col, row, self.size)

    def get(self, col: int, row: int) -> Color:
        self._check(col, row)
        return Color(*(int(v) for v in self._cells[row, col]))

    def set(self, col: int, row: int, color):
        self._check(col, row)
        self._cells[row, col] = as_color(color)

    def clone(self) -> "PixelGrid":
        copy = PixelGrid.__new__(PixelGrid)
        copy.size = self.size
        copy.background = self.background
        copy._cells = self._cells.copy()
        return copy

    def snapshot(self) -> np.ndarray:
        """Read-only copy of the cell contents, suitable for history."""
        snapshot = self._cells.copy()
        snapshot.flags.writeable = False
        return snapshot

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def restore(self, snapshot: np.ndarray):
        if snapshot.shape != self._cells.shape:
            raise ValueError(f"Snapshot shape {snapshot.shape} does not match grid")
        self._cells = np.array(snapshot, dtype=np.uint8, copy=True)

    def _commit(self, mask: np.ndarray, colors: np.ndarray):
        # Swap in a fully built array so readers never see a half-applied stroke
        updated = self._cells.copy()
        updated[mask] = colors[mask]
        self._cells = updated


class StrokeSession:
    """Idle/Active state machine for one press-move-release stroke.

    While Active, every stamped cell gets a preview color blended against the
    committed grid, never against an earlier preview, so re-stamping a cell is
    idempotent. ``end`` writes the previews into the grid in one step.
    """

    def __init__(self, grid: PixelGrid):
        self.grid = grid
        self._mask: Optional[np.ndarray] = None
        self._preview: Optional[np.ndarray] = None

    @property
    def active(self) -> bool:
        return self._mask is not None

    def begin(self, col: int, row: int, settings: PaintSettings) -> Optional[frozenset[Cell]]:
        """Start a stroke and stamp at (col, row). Returns None if already Active."""
        if self.active:
            logger.warning("Stroke already active, ignoring begin at (%d, %d)", col, row)
            return None
        footprint = resolve_footprint(settings.pattern)
        size = self.grid.size
        self._mask = np.zeros((size, size), dtype=bool)
        self._preview = np.zeros((size, size, 3), dtype=np.uint8)
        return self._stamp(footprint, col, row, settings)

    def move(self, col: int, row: int, settings: PaintSettings) -> Optional[frozenset[Cell]]:
        """Stamp at (col, row). Returns None when no stroke is active."""
        if not self.active:
            return None
        return self._stamp(resolve_footprint(settings.pattern), col, row, settings)

    def end(self) -> frozenset[Cell]:
        """Commit the stroke and return the cells it touched."""
        if not self.active:
            return frozenset()
        mask, preview = self._mask, self._preview
        self._mask = self._preview = None
        self.grid._commit(mask, preview)
        rows, cols = np.nonzero(mask)
        return frozenset(zip(cols.tolist(), rows.tolist()))

    def _stamp(self, footprint, col: int, row: int, settings: PaintSettings) -> frozenset[Cell]:
        offsets = np.array(footprint.offsets, dtype=np.int64)
        cols = offsets[:, 0] + col
        rows = offsets[:, 1] + row
        size = self.grid.size
        inside = (cols >= 0) & (cols < size) & (rows >= 0) & (rows < size)
        cols, rows = cols[inside], rows[inside]
        if cols.size == 0:
            return frozenset()

        self._mask[rows, cols] = True
        base = self.grid._cells[rows, cols]
        self._preview[rows, cols] = blend_array(base, settings.color, settings.opacity)
        return frozenset(zip(cols.tolist(), rows.tolist()))

    def preview_cell(self, col: int, row: int) -> Optional[Color]:
        if not self.active or not self.grid.in_bounds(col, row) or not self._mask[row, col]:
            return None
        return Color(*(int(v) for v in self._preview[row, col]))

    def overlay(self, array: np.ndarray) -> np.ndarray:
        """Paint the current previews onto an (N, N, 3) array in place."""
        if self.active:
            array[self._mask] = self._preview[self._mask]
        return array


class Canvas:
    """The engine facade driven by pointer input and scripted commands."""

    def __init__(self, size: int = GRID_SIZE, background=BACKGROUND,
                 history_capacity: int = HISTORY_CAPACITY):
        self.grid = PixelGrid(size, background)
        self.stroke = StrokeSession(self.grid)
        self.history = HistoryStack(history_capacity)
        self.state = PaintSettings()

    @property
    def size(self) -> int:
        return self.grid.size

    # --- Strokes ---

    def begin_stroke(self, col: int, row: int,
                     settings: Optional[PaintSettings] = None) -> Optional[frozenset[Cell]]:
        settings = settings or self.state
        footprint = resolve_footprint(settings.pattern)
        if footprint.warning is not None:
            logger.warning("%s", footprint.warning)
        return self.stroke.begin(col, row, settings)

    def move_stroke(self, col: int, row: int,
                    settings: Optional[PaintSettings] = None) -> Optional[frozenset[Cell]]:
        return self.stroke.move(col, row, settings or self.state)

    def end_stroke(self) -> frozenset[Cell]:
        """Commit the active stroke.

        The pre-stroke grid goes onto the history stack, but only when the
        commit changed at least one cell.
        """
        if not self.stroke.active:
            return frozenset()
        before = self.grid.snapshot()
        cells = self.stroke.end()
        if not np.array_equal(before, self.grid._cells):
            self.history.record(before)
        logger.debug("Stroke committed, %d cells touched", len(cells))
        return cells

    def paint_stroke(self, points: list, settings: Optional[PaintSettings] = None) -> frozenset[Cell]:
        """Begin at the first point, move through the rest, and end."""
        if not points:
            return frozenset()
        (col, row), rest = points[0], points[1:]
        if self.begin_stroke(col, row, settings) is None:
            return frozenset()
        for col, row in rest:
            self.move_stroke(col, row, settings)
        return self.end_stroke()

    # --- Reads ---

    def get_cell(self, col: int, row: int) -> Color:
        return self.grid.get(col, row)

    def get_grid_snapshot(self) -> PixelGrid:
        return self.grid.clone()

    def get_preview_cell(self, col: int, row: int) -> Optional[Color]:
        return self.stroke.preview_cell(col, row)

    def composite(self) -> np.ndarray:
        """Grid contents with the active stroke's preview on top, for rendering."""
        return self.stroke.overlay(self.grid.to_array())

    # --- History ---

    def push_history_if_changed(self, grid=None) -> bool:
        return self.history.record(self.grid if grid is None else grid)

    def peek_history(self) -> Optional[np.ndarray]:
        return self.history.peek()

    def pop_history(self) -> Optional[np.ndarray]:
        return self.history.pop()

    def undo(self) -> bool:
        if self.stroke.active:
            logger.info("Undo ignored while a stroke is active")
            return False
        snapshot = self.history.pop()
        if snapshot is None:
            return False
        self.grid.restore(snapshot)
        return True

    # --- Command dispatch ---

    def execute(self, cmd: dict):
        action = cmd.get("action")
        method = getattr(self, f"_do_{action}", None)
        if method is None:
            raise ValueError(f"Unknown action: {action}")
        return method(cmd)

    def _do_set_color(self, cmd: dict):
        self.state = replace(self.state, color=as_color(cmd["color"]))
        return self.state.color.hex

    def _do_set_brush(self, cmd: dict):
        pattern = cmd.get("pattern")
        if pattern is None:
            name = cmd["size"]
            if name not in BRUSH_SIZES:
                raise ValueError(f"Unknown brush size: {name}")
            pattern = BRUSH_SIZES[name]
        # Resolve first so a bad pattern leaves the current brush in place
        footprint = resolve_footprint(pattern)
        self.state = replace(self.state, pattern=pattern)
        return {
            "side": footprint.side,
            "cells": len(footprint.offsets),
            "warning": str(footprint.warning) if footprint.warning else None,
        }

    def _do_set_opacity(self, cmd: dict):
        self.state = replace(self.state, opacity=float(cmd["opacity"]))
        return self.state.opacity

    def _do_begin_stroke(self, cmd: dict):
        cells = self.begin_stroke(cmd["col"], cmd["row"])
        return None if cells is None else sorted(cells)

    def _do_move_stroke(self, cmd: dict):
        cells = self.move_stroke(cmd["col"], cmd["row"])
        return None if cells is None else sorted(cells)

    def _do_end_stroke(self, cmd: dict):
        return sorted(self.end_stroke())

    def _do_paint_stroke(self, cmd: dict):
        return sorted(self.paint_stroke([tuple(p) for p in cmd["points"]]))

    def _do_undo(self, cmd: dict):
        return self.undo()

    def _do_get_cell(self, cmd: dict):
        return self.get_cell(cmd["col"], cmd["row"]).hex

    def _do_get_info(self, cmd: dict):
        return {
            "size": self.size,
            "color": self.state.color.hex,
            "pattern": self.state.pattern,
            "opacity": self.state.opacity,
            "stroke_active": self.stroke.active,
            "history": len(self.history),
            "history_capacity": self.history.capacity,
        }

    def get_pixels_rgb(self, x: int = 0, y: int = 0,
                       w: Optional[int] = None, h: Optional[int] = None) -> list[list[list[int]]]:
        """Return a 2D list of [r, g, b] values (row-major) for the given region."""
        if w is None:
            w = self.size - x
        if h is None:
            h = self.size - y
        # Clamp to grid bounds
        x = max(0, min(x, self.size - 1))
        y = max(0, min(y, self.size - 1))
        w = min(w, self.size - x)
        h = min(h, self.size - y)
        return self.grid.to_array()[y:y + h, x:x + w].tolist()

    def _do_get_pixels(self, cmd: dict):
        return self.get_pixels_rgb(cmd.get("x", 0), cmd.get("y", 0), cmd.get("w"), cmd.get("h"))
