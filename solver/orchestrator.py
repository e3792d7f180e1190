# Orchestrator: pre-flight bounds, then the configured search backend
from __future__ import annotations

import time
from typing import List, Optional, Sequence

from models import Present, RegionResult, TreeRegion
from config import CFG
from progress import (
    reset, start_timer, set_status, set_puzzle, set_region, record_region, set_done,
    log_event, log_present,
)
from solver.grid import build_empty_grid
from solver.pre_flight import run_pre_flight
from solver.backtracking import first_packing


# ---------- helpers ----------

def _backend(cfg) -> str:
    name = str(getattr(cfg, "SEARCH_BACKEND", "backtracking") or "backtracking").strip().lower()
    return name.replace("_", "-")


def _run_cp_sat(region: TreeRegion, presents: Sequence[Present], cfg) -> Optional[RegionResult]:
    """CP-SAT verdict when conclusive; None when the caller should fall back."""
    from solver.cp_sat import try_pack_cp_sat  # ortools is only loaded on demand

    ok, witness, reason = try_pack_cp_sat(
        region, presents, max_seconds=float(getattr(cfg, "CP_SAT_SECONDS", 30.0))
    )
    if ok:
        return RegionResult(True, "cp-sat", witness=witness)
    if reason and "proven infeasible" in reason.lower():
        return RegionResult(False, "cp-sat", reason=reason)

    log_event("CP-SAT inconclusive", region=region.label, reason=reason)
    return None


def _run_backtracking(region: TreeRegion, presents: Sequence[Present]) -> RegionResult:
    empty = build_empty_grid(region.height, region.width)
    witness = first_packing(empty, presents, region.presents_to_fit)
    if witness is None:
        return RegionResult(False, "backtracking", reason="search space exhausted")
    return RegionResult(True, "backtracking", witness=witness)


# ---------- public entrypoints ----------

def solve_region(region: TreeRegion, presents: Sequence[Present], cfg=CFG) -> RegionResult:
    """
    Decide whether every present listed for ``region`` fits inside it.

    Returns a RegionResult; ``witness`` holds the packed grid whenever a
    search (rather than a bound) settled the answer.
    """
    t0 = time.time()

    verdict = run_pre_flight(region, presents)
    if verdict is not None:
        ok, strategy, reason = verdict
        result = RegionResult(ok, strategy, reason=reason)
    else:
        result = None
        if _backend(cfg) == "cp-sat":
            result = _run_cp_sat(region, presents, cfg)
        if result is None:
            result = _run_backtracking(region, presents)

    result.elapsed_sec = time.time() - t0
    return result


def evaluate(region: TreeRegion, presents: Sequence[Present]) -> bool:
    return solve_region(region, presents).ok


def count_fitting_regions(
    regions: Sequence[TreeRegion],
    presents: Sequence[Present],
    cfg=CFG,
    *,
    puzzle_name: str = "",
) -> List[RegionResult]:
    """Solve every region in order, publishing progress as it goes."""
    reset()
    start_timer()
    set_status("Solving")
    set_puzzle(puzzle_name, len(regions))
    for present in presents:
        log_present(present)

    results: List[RegionResult] = []
    try:
        for i, region in enumerate(regions):
            set_region(f"#{i} {region.label}")
            result = solve_region(region, presents, cfg)
            record_region(result.ok, result.strategy, result.reason)
            results.append(result)
    except Exception as exc:
        set_done(False, reason=f"{type(exc).__name__}: {exc}")
        raise

    fit = sum(1 for r in results if r.ok)
    set_done(True, reason=f"{fit} of {len(results)} regions fit")
    return results


__all__ = ["solve_region", "evaluate", "count_fitting_regions"]
