# shapes.py: shape validation and rotation/reflection variants
from __future__ import annotations

from typing import Any, List, Sequence

from models import InvalidShape, Present, Shape

_FILLED = "#"
_EMPTY = "."


def _row_to_cells(row: Any, index: int) -> tuple:
    if isinstance(row, str):
        bad = set(row) - {_FILLED, _EMPTY}
        if bad:
            raise InvalidShape(f"row {index} has unknown characters: {''.join(sorted(bad))!r}")
        return tuple(c == _FILLED for c in row)
    return tuple(bool(c) for c in row)


def validate_shape(rows: Sequence[Any]) -> Shape:
    """
    Return ``rows`` as an immutable Shape.

    Rows may be strings of ``#``/``.`` or sequences of truthy values.  The
    result must be a non-empty rectangle with at least one filled cell.
    """
    if rows is None or len(rows) == 0:
        raise InvalidShape("shape has no rows")

    shape = tuple(_row_to_cells(row, i) for i, row in enumerate(rows))
    width = len(shape[0])
    if width == 0:
        raise InvalidShape("shape has an empty row")
    for i, row in enumerate(shape):
        if len(row) != width:
            raise InvalidShape(f"ragged shape: row {i} has {len(row)} cells, expected {width}")
    if covered_area(shape) == 0:
        raise InvalidShape("shape covers no cells")
    return shape


def covered_area(shape: Shape) -> int:
    return sum(1 for row in shape for cell in row if cell)


def rotate_clockwise(shape: Shape) -> Shape:
    # column c of the original, read bottom-up, becomes row c
    return tuple(
        tuple(shape[r][c] for r in range(len(shape) - 1, -1, -1))
        for c in range(len(shape[0]))
    )


def flip_vertically(shape: Shape) -> Shape:
    return tuple(reversed(shape))


def compute_shape_variations(shape: Shape) -> List[Shape]:
    """
    Distinct rotations/reflections of ``shape`` in canonical order.

    The vertical flip is considered only when it differs from the original;
    each base orientation contributes itself and three clockwise rotations.
    At most 8 entries.
    """
    bases = [shape]
    flipped = flip_vertically(shape)
    if flipped != shape:
        bases.append(flipped)

    variations: List[Shape] = []
    for base in bases:
        candidate = base
        for _ in range(4):
            if candidate not in variations:
                variations.append(candidate)
            candidate = rotate_clockwise(candidate)
    return variations


def build_present(rows: Sequence[Any], name: str = "") -> Present:
    shape = validate_shape(rows)
    return Present(
        width=len(shape[0]),
        height=len(shape),
        covered_area=covered_area(shape),
        shape_variations=tuple(compute_shape_variations(shape)),
        name=str(name),
    )


def serialise_shape(shape: Shape) -> str:
    return "\n".join("".join(_FILLED if cell else _EMPTY for cell in row) for row in shape)


__all__ = [
    "validate_shape",
    "covered_area",
    "rotate_clockwise",
    "flip_vertically",
    "compute_shape_variations",
    "build_present",
    "serialise_shape",
]
