from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Region-run state shared by the solver and the /progress route
# ------------------------------

PROGRESS_LOCK = threading.Lock()

_LOG_DIR = Path(__file__).resolve().parent / "logs"

STATE_FILE = Path(os.environ.get("PROGRESS_STATE_FILE") or _LOG_DIR / "progress_state.json")
STATE_FILE_TMP = STATE_FILE.with_name(STATE_FILE.name + ".tmp")


def _attempt_logger() -> logging.Logger:
    logger = logging.getLogger("packer.attempt_log")
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(_LOG_DIR / "region_attempts.log", encoding="utf-8")
    except OSError:
        # read-only checkout: run without an attempt log
        return logger
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger


ATTEMPT_LOGGER = _attempt_logger()


def log_event(event: str, **fields: Any) -> None:
    """One attempt-log line: ``event | key=value ...`` (empty fields skipped)."""
    pairs = " ".join(f"{k}={v}" for k, v in fields.items() if v is not None and v != "")
    if pairs:
        ATTEMPT_LOGGER.info("%s | %s", event, pairs)
    else:
        ATTEMPT_LOGGER.info("%s", event)


def log_present(present: Any) -> None:
    log_event(
        "Present loaded",
        name=present.name,
        area=present.covered_area,
        box=f"{present.width}x{present.height}",
        variations=len(present.shape_variations),
    )


_IDLE = {
    "status": "Idle",          # Idle | Solving | Solved | Error
    "puzzle": "",              # source name of the puzzle being solved
    "region": "",              # e.g. "#3 12x5"
    "strategy": "",            # verdict source of the last finished region
    "regions_total": 0,
    "regions_done": 0,
    "regions_fit": 0,
    "percent": 0.0,
    "elapsed": 0.0,
    "message": "",
    "done": False,
    "ok": None,
    "result_url": "",
}

PROGRESS: Dict[str, Any] = dict(_IDLE, run_id=0)

# timing is kept out of PROGRESS so snapshots stay JSON-friendly
_CLOCK: Dict[str, Optional[float]] = {"run": None, "region": None}


def _write_state_locked() -> None:
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        STATE_FILE_TMP.write_text(json.dumps(PROGRESS, separators=(",", ":")), encoding="utf-8")
        STATE_FILE_TMP.replace(STATE_FILE)
    except OSError as e:
        log_event("Progress state not written", error=e)


def _since(started: Optional[float], now: float) -> Optional[float]:
    return None if started is None else max(0.0, now - started)


def _close_region_locked(now: float, outcome: str) -> None:
    if _CLOCK["region"] is None:
        return
    took = _since(_CLOCK["region"], now)
    log_event(
        "Region finished",
        region=PROGRESS["region"],
        strategy=PROGRESS["strategy"],
        duration=f"{took:.2f}s",
        outcome=outcome,
    )
    _CLOCK["region"] = None


def _fmt_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(max(0.0, seconds)), 60)
    if minutes == 0:
        return f"{secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{minutes}m {secs}s" if hours == 0 else f"{hours}h {minutes}m"


# ------------------------------
# Run lifecycle
# ------------------------------

def reset() -> None:
    with PROGRESS_LOCK:
        _close_region_locked(time.time(), "reset")
        PROGRESS.update(_IDLE, run_id=int(PROGRESS["run_id"]) + 1)
        _CLOCK["run"] = None
        log_event("Progress reset", run_id=PROGRESS["run_id"])
        _write_state_locked()


def start_timer() -> None:
    with PROGRESS_LOCK:
        _CLOCK["run"] = time.time()
        PROGRESS["elapsed"] = 0.0
        _write_state_locked()


def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)
        _write_state_locked()


def set_puzzle(name: Any, regions_total: int) -> None:
    with PROGRESS_LOCK:
        PROGRESS.update({
            "puzzle": "" if name is None else str(name),
            "regions_total": max(0, int(regions_total)),
            "regions_done": 0,
            "regions_fit": 0,
            "percent": 0.0,
        })
        log_event("Puzzle loaded", puzzle=PROGRESS["puzzle"], regions=PROGRESS["regions_total"])
        _write_state_locked()


def set_region(label: str) -> None:
    """Mark ``label`` as the region being solved; an unrecorded predecessor is closed as switched."""
    with PROGRESS_LOCK:
        if label == PROGRESS["region"] and _CLOCK["region"] is not None:
            return
        now = time.time()
        _close_region_locked(now, "switch")
        PROGRESS["region"] = label
        PROGRESS["strategy"] = ""
        _CLOCK["region"] = now
        log_event("Region started", region=label)
        _write_state_locked()


def record_region(ok: bool, strategy: str, reason: Optional[str] = None) -> None:
    with PROGRESS_LOCK:
        now = time.time()
        PROGRESS["strategy"] = strategy
        PROGRESS["regions_done"] += 1
        if ok:
            PROGRESS["regions_fit"] += 1
        total = PROGRESS["regions_total"]
        PROGRESS["percent"] = min(100.0, 100.0 * PROGRESS["regions_done"] / total) if total else 0.0
        PROGRESS["elapsed"] = _since(_CLOCK["run"], now) or 0.0
        outcome = "fits" if ok else "does not fit"
        _close_region_locked(now, f"{outcome} ({reason})" if reason else outcome)
        _write_state_locked()


def set_result_url(url: str) -> None:
    with PROGRESS_LOCK:
        PROGRESS["result_url"] = url
        _write_state_locked()


def set_done(ok: Optional[bool] = None, *, reason: Optional[str] = None) -> None:
    """Mark the run complete; ``ok=None`` reports it as solved."""
    ok = True if ok is None else bool(ok)
    with PROGRESS_LOCK:
        now = time.time()
        _close_region_locked(now, "run complete")
        PROGRESS.update({
            "status": "Solved" if ok else "Error",
            "ok": ok,
            "done": True,
            "percent": 100.0,
            "elapsed": _since(_CLOCK["run"], now) or PROGRESS["elapsed"],
        })
        if reason is not None:
            PROGRESS["message"] = str(reason)
        _CLOCK["run"] = None
        log_event(
            "Run finished",
            status=PROGRESS["status"],
            regions_fit=f"{PROGRESS['regions_fit']}/{PROGRESS['regions_total']}",
            duration=f"{PROGRESS['elapsed']:.2f}s",
            message=PROGRESS["message"],
        )
        _write_state_locked()


# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        out = dict(PROGRESS)
        if _CLOCK["run"] is not None:
            out["elapsed"] = _since(_CLOCK["run"], time.time())
        out["elapsed_str"] = _fmt_elapsed(out["elapsed"])
        return out


def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()
