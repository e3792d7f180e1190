from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple
from ortools.sat.python import cp_model as _cp

from models import Present, Shape, TreeRegion
from config import CFG
from solver.grid import PackingGrid, build_empty_grid, can_place, place

Cell = Tuple[int, int]
# (shape, row, col, covered cells)
Option = Tuple[Shape, int, int, FrozenSet[Cell]]

# ---------------- helpers ----------------

def _shape_cells(shape: Shape, row: int, col: int) -> FrozenSet[Cell]:
    return frozenset(
        (row + i, col + j)
        for i, shape_row in enumerate(shape)
        for j, filled in enumerate(shape_row)
        if filled
    )


def build_options(region: TreeRegion, presents: Sequence[Present]) -> List[List[Option]]:
    """Every in-bounds placement per requested present type, duplicates pruned."""
    empty = build_empty_grid(region.height, region.width)
    opts: List[List[Option]] = []
    for i, count in enumerate(region.presents_to_fit):
        t: List[Option] = []
        if count > 0:
            seen: Set[FrozenSet[Cell]] = set()
            for shape in presents[i].shape_variations:
                for row in range(region.height - len(shape) + 1):
                    for col in range(region.width - len(shape[0]) + 1):
                        if not can_place(empty, shape, row, col):
                            continue
                        cells = _shape_cells(shape, row, col)
                        if cells in seen:
                            continue
                        seen.add(cells)
                        t.append((shape, row, col, cells))
        opts.append(t)
    return opts

# ---------------- main solve ----------------

def try_pack_cp_sat(
    region: TreeRegion,
    presents: Sequence[Present],
    max_seconds: Optional[float] = None,
) -> Tuple[bool, Optional[PackingGrid], Optional[str]]:
    """Exact placement model: each requested instance placed once, no cell covered twice."""
    if len(region.presents_to_fit) > len(presents):
        return False, None, "Bad demand: more present counts than presents"

    options = build_options(region, presents)
    m = _cp.CpModel()

    p = [[m.NewBoolVar(f"p_{i}_{k}") for k in range(len(options[i]))] for i in range(len(options))]
    for i, count in enumerate(region.presents_to_fit):
        if count <= 0:
            continue
        if len(p[i]) < count:
            return False, None, "Proven infeasible under current constraints"
        m.Add(sum(p[i]) == count)

    # --- non-overlap ---
    cell_to_vars: Dict[Cell, List[_cp.IntVar]] = {}
    for i in range(len(options)):
        for k, (_shape, _row, _col, cells) in enumerate(options[i]):
            for cell in cells:
                cell_to_vars.setdefault(cell, []).append(p[i][k])
    for vars_here in cell_to_vars.values():
        if len(vars_here) > 1:
            m.AddAtMostOne(vars_here)

    solver = _cp.CpSolver()
    seconds = CFG.CP_SAT_SECONDS if max_seconds is None else max_seconds
    solver.parameters.max_time_in_seconds = float(seconds)
    solver.parameters.max_memory_in_mb = int(getattr(CFG, "MAX_MEMORY_MB", 2048))
    solver.parameters.num_search_workers = int(getattr(CFG, "WORKERS", 1))
    solver.parameters.random_seed = int(getattr(CFG, "RANDOM_SEED", 0))
    solver.parameters.log_search_progress = False

    res = solver.Solve(m)

    if res in (_cp.OPTIMAL, _cp.FEASIBLE):
        grid = build_empty_grid(region.height, region.width)
        for i in range(len(options)):
            for k, (shape, row, col, _cells) in enumerate(options[i]):
                if solver.BooleanValue(p[i][k]):
                    grid = place(grid, shape, row, col)
        return True, grid, None

    if res == _cp.INFEASIBLE:
        return False, None, "Proven infeasible under current constraints"
    if res == _cp.MODEL_INVALID:
        return False, None, "Model invalid (configuration error)"
    return False, None, "Stopped before solution (timebox)"


__all__ = ["build_options", "try_pack_cp_sat"]
