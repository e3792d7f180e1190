# solver/backtracking.py: depth-first packing search over lazy placements
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from models import Present
from solver.grid import PackingGrid
from solver.placements import placements_for_present


def _next_present_index(counts: Sequence[int]) -> Optional[int]:
    for i, n in enumerate(counts):
        if n > 0:
            return i
    return None


def _take_one(counts: Sequence[int], index: int) -> Tuple[int, ...]:
    rest = list(counts)
    rest[index] -= 1
    return tuple(rest)


def pack_presents(
    grid: PackingGrid,
    presents: Sequence[Present],
    presents_to_fit: Sequence[int],
) -> Iterator[PackingGrid]:
    """
    Lazily yield every fully packed grid reachable from ``grid``.

    Present types are placed in index order, one instance per level; each
    level walks :func:`placements_for_present` best first.  Levels are kept
    on an explicit stack of generators, so nothing past the grid handed to
    the consumer is computed and depth is not tied to the recursion limit.
    """
    if len(presents_to_fit) > len(presents):
        raise ValueError("more present counts than presents")

    index = _next_present_index(presents_to_fit)
    if index is None:
        yield grid
        return

    stack: List[Tuple[Iterator[PackingGrid], Tuple[int, ...]]] = [
        (placements_for_present(grid, presents[index]), _take_one(presents_to_fit, index))
    ]
    while stack:
        fits, remaining = stack[-1]
        child = next(fits, None)
        if child is None:
            stack.pop()
            continue

        index = _next_present_index(remaining)
        if index is None:
            yield child
            continue

        stack.append((placements_for_present(child, presents[index]), _take_one(remaining, index)))


def first_packing(
    grid: PackingGrid,
    presents: Sequence[Present],
    presents_to_fit: Sequence[int],
) -> Optional[PackingGrid]:
    return next(pack_presents(grid, presents, presents_to_fit), None)


__all__ = ["pack_presents", "first_packing"]
