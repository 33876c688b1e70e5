"""Map raw pointer positions to grid cells."""

import math
from typing import NamedTuple


class CellPosition(NamedTuple):
    col: int
    row: int
    in_bounds: bool


def pointer_to_cell(px: float, py: float, cell_size: int, grid_size: int) -> CellPosition:
    """Floor a pointer position (relative to the grid's top-left) to a cell.

    Positions off the grid still map to a cell so a stroke dragged past the
    edge keeps painting the part of its footprint that overlaps the grid.
    """
    col = math.floor(px / cell_size)
    row = math.floor(py / cell_size)
    return CellPosition(col, row, 0 <= col < grid_size and 0 <= row < grid_size)
