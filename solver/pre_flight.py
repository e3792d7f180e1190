# solver/pre_flight.py
"""
Cheap bounds that settle a region before any search runs.

``run_pre_flight`` returns ``(ok, strategy, reason)`` when one of the bounds
is conclusive, or None to let the caller continue with a full search.
"""
from typing import List, Optional, Sequence, Tuple

from models import Present, TreeRegion


def _counts(region: TreeRegion, presents: Sequence[Present]) -> List[Tuple[Present, int]]:
    if len(region.presents_to_fit) > len(presents):
        raise ValueError(
            f"region {region.label} lists {len(region.presents_to_fit)} present counts "
            f"but only {len(presents)} presents are known"
        )
    return [(presents[i], n) for i, n in enumerate(region.presents_to_fit)]


def total_covered_area(region: TreeRegion, presents: Sequence[Present]) -> int:
    return sum(p.covered_area * n for p, n in _counts(region, presents))


def total_present_count(region: TreeRegion) -> int:
    return sum(region.presents_to_fit)


def estimated_maximum_present_count(region: TreeRegion, presents: Sequence[Present]) -> int:
    """
    How many presents fit when each is treated as the largest bounding box.

    Uses the widest and tallest present across *all* types, e.g. largest 3x1
    in a 10x3 region gives ``(10 // 3) * (3 // 1) = 9``.  Sufficient, not
    necessary.
    """
    if not presents:
        return 0
    largest_w = max(p.width for p in presents)
    largest_h = max(p.height for p in presents)
    return (region.width // largest_w) * (region.height // largest_h)


def run_pre_flight(region: TreeRegion, presents: Sequence[Present]) -> Optional[Tuple[bool, str, str]]:
    covered = total_covered_area(region, presents)
    if covered > region.area:
        return False, "area-bound", f"presents cover {covered} cells, region has {region.area}"

    count = total_present_count(region)
    if count == 0:
        return True, "empty", "no presents requested"

    estimate = estimated_maximum_present_count(region, presents)
    if count <= estimate:
        return True, "grid-bound", f"{count} presents fit a {estimate}-slot bounding-box grid"

    return None


__all__ = [
    "total_covered_area",
    "total_present_count",
    "estimated_maximum_present_count",
    "run_pre_flight",
]
