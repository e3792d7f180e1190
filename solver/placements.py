# solver/placements.py: lazy, prioritised placement enumeration
from __future__ import annotations

from itertools import chain
from typing import Iterator, Tuple

from models import Present
from solver.grid import PackingGrid, can_place, place


def placements_at(grid: PackingGrid, present: Present, row: int, col: int) -> Iterator[PackingGrid]:
    for shape in present.shape_variations:
        if can_place(grid, shape, row, col):
            yield place(grid, shape, row, col)


def placements_in_range(
    grid: PackingGrid,
    present: Present,
    row_start: int,
    row_end: int,
    col_start: int,
    col_end: int,
) -> Iterator[PackingGrid]:
    """Row-major sweep over the half-open anchor ranges."""
    for row in range(row_start, row_end):
        for col in range(col_start, col_end):
            yield from placements_at(grid, present, row, col)


def envelope_key(grid: PackingGrid) -> Tuple[int, int, int]:
    h, w = grid.highest_column_height, grid.widest_row_width
    return (h * w, h, w)


def _inside_envelope(grid: PackingGrid, present: Present) -> Iterator[PackingGrid]:
    # Sorting needs the whole pass; it is only built once this pass is reached.
    fits = list(
        placements_in_range(grid, present, 0, grid.highest_column_height, 0, grid.widest_row_width)
    )
    fits.sort(key=envelope_key)
    yield from fits


def placements_for_present(grid: PackingGrid, present: Present) -> Iterator[PackingGrid]:
    """
    Every legal way to drop one ``present`` onto ``grid``, best first.

    Given the envelope of what is already placed::

        +-----+-------+
        |###  |       |
        |# 1 #|   2   |
        |  ###|       |
        +-----+-------+
        |      3      |
        +-------------+

    anchors inside the envelope (1) come first, ordered so the placement that
    grows the envelope least leads; then anchors to its right (2); then the
    rows below it (3).  Range limits use the narrowest/shortest variant so a
    rotated variant of a non-square present is never skipped.
    """
    last_col = grid.width - present.min_width
    last_row = grid.height - present.min_height

    return chain(
        _inside_envelope(grid, present),
        placements_in_range(
            grid, present,
            0, grid.highest_column_height,
            grid.widest_row_width, last_col + 1,
        ),
        placements_in_range(
            grid, present,
            grid.highest_column_height, last_row + 1,
            0, last_col + 1,
        ),
    )


__all__ = ["placements_at", "placements_in_range", "placements_for_present", "envelope_key"]
