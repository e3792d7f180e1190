# solver/grid.py: immutable occupancy grid with bounding-envelope tracking
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from models import Shape


@dataclass(frozen=True)
class PackingGrid:
    width: int
    height: int
    cells: Tuple[Tuple[bool, ...], ...]
    # smallest origin-anchored box covering every placed shape
    widest_row_width: int = 0
    highest_column_height: int = 0


def build_empty_grid(height: int, width: int) -> PackingGrid:
    row = (False,) * width
    return PackingGrid(width=width, height=height, cells=(row,) * height)


def cell_at(grid: PackingGrid, row: int, col: int) -> bool:
    """Occupancy at (row, col); anything outside the grid reads as empty."""
    if 0 <= row < grid.height and 0 <= col < grid.width:
        return grid.cells[row][col]
    return False


def can_place(grid: PackingGrid, shape: Shape, row: int, col: int) -> bool:
    if row < 0 or col < 0:
        return False
    if row + len(shape) > grid.height or col + len(shape[0]) > grid.width:
        return False

    for i, shape_row in enumerate(shape):
        grid_row = grid.cells[row + i]
        for j, filled in enumerate(shape_row):
            if filled and grid_row[col + j]:
                return False
    return True


def place(grid: PackingGrid, shape: Shape, row: int, col: int) -> PackingGrid:
    """
    Return a new grid with ``shape`` OR-ed in at (row, col).

    Callers check :func:`can_place` first.  Rows the shape does not touch are
    shared with ``grid``; they are tuples, so neither grid can alter the other.
    """
    cells = list(grid.cells)
    for i, shape_row in enumerate(shape):
        target = list(cells[row + i])
        for j, filled in enumerate(shape_row):
            if filled:
                target[col + j] = True
        cells[row + i] = tuple(target)

    return PackingGrid(
        width=grid.width,
        height=grid.height,
        cells=tuple(cells),
        widest_row_width=max(grid.widest_row_width, col + len(shape[0])),
        highest_column_height=max(grid.highest_column_height, row + len(shape)),
    )


def occupied_count(grid: PackingGrid) -> int:
    return sum(1 for row in grid.cells for cell in row if cell)


__all__ = ["PackingGrid", "build_empty_grid", "cell_at", "can_place", "place", "occupied_count"]
