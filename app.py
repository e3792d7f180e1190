# app.py: upload a puzzle, tally the regions whose presents fit
from __future__ import annotations
import os
import sys
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flask import Flask, request, send_from_directory, jsonify, url_for

from solver.orchestrator import count_fitting_regions
from puzzle_parser import parse_puzzle, load_puzzle
from config import CFG
from io_files import write_witness, write_layout_view_html
from render import render_result, serialise_grid
from models import RegionResult, TreeRegion

from progress import (
    as_json as progress_json,
    set_done, set_result_url,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_WITNESS_FULL_PATH, WITNESS_DIR, WITNESS_FILENAME = _resolve_output_paths(
    CFG.WITNESS_OUT, "witness.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

LAST_RESULT: Dict[str, Any] = {
    "ok": False,
    "fit": 0,
    "total": 0,
    "elapsed_str": "0s",
    "regions": [],
    "witness_filename": WITNESS_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

_FORM_HTML = """<!doctype html>
<html><head><meta charset='utf-8'><title>Present Packer</title></head>
<body>
<h1>Present Packer</h1>
<form method='post' action='/solve' enctype='multipart/form-data'>
<p><textarea name='puzzle' rows='20' cols='60' placeholder='0:&#10;###&#10;##.&#10;##.&#10;&#10;4x4: 0 2'></textarea></p>
<p>or upload: <input type='file' name='file'></p>
<p><button type='submit'>Solve</button></p>
</form>
</body></html>"""

app = Flask(__name__)


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    return _FORM_HTML


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _puzzle_text_from_request() -> Tuple[str, str]:
    """Return (text, source name) from a form field, an upload or the raw body."""
    upload = request.files.get("file")
    if upload is not None and upload.filename:
        return upload.read().decode("utf-8"), upload.filename

    text = request.form.get("puzzle")
    if text and text.strip():
        return text, "form"

    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and isinstance(payload.get("puzzle"), str):
        return payload["puzzle"], "json"

    return request.get_data(as_text=True) or "", "body"


def _summarise_region(index: int, region: TreeRegion, result: RegionResult) -> Dict[str, Any]:
    return {
        "index": index,
        "region": region.label,
        "presents_to_fit": list(region.presents_to_fit),
        "ok": result.ok,
        "strategy": result.strategy,
        "reason": result.reason,
        "elapsed_sec": round(result.elapsed_sec, 4),
        "witness": serialise_grid(result.witness) if result.witness is not None else None,
    }


def _write_last_witness(regions: Sequence[TreeRegion], results: Sequence[RegionResult]) -> None:
    """Persist the witness of the last region a search packed, if any."""
    for i in range(len(results) - 1, -1, -1):
        witness = results[i].witness
        if witness is None:
            continue
        label = f"region #{i} {regions[i].label}"
        write_witness(witness, BASE_DIR, label=label)
        svg, legend = render_result(witness)
        write_layout_view_html(svg, legend, BASE_DIR, title=f"Witness for {label}")
        return


@app.route("/solve", methods=["POST"])
def solve():
    t0 = time.time()

    try:
        text, source = _puzzle_text_from_request()
        presents, regions = parse_puzzle(text)
    except ValueError as e:
        reason = f"Bad puzzle: {e}"
        set_done(False, reason=reason)
        return jsonify({"ok": False, "reason": reason}), 400

    if not presents or not regions:
        reason = "Bad puzzle: nothing parsed from request"
        set_done(False, reason=reason)
        return jsonify({"ok": False, "reason": reason}), 400

    try:
        results = count_fitting_regions(regions, presents, puzzle_name=source)
    except ValueError as e:
        return jsonify({"ok": False, "reason": f"Bad puzzle: {e}"}), 400

    if CFG.WRITE_WITNESS:
        _write_last_witness(regions, results)

    summaries = [_summarise_region(i, r, res) for i, (r, res) in enumerate(zip(regions, results))]
    fit = sum(1 for res in results if res.ok)
    LAST_RESULT.update({
        "ok": True,
        "fit": fit,
        "total": len(results),
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "regions": summaries,
        "witness_filename": WITNESS_FILENAME,
        "layout_filename": LAYOUT_FILENAME,
    })
    set_result_url(url_for("result_latest"))
    return jsonify(LAST_RESULT)


@app.route("/result/latest")
def result_latest():
    return jsonify(LAST_RESULT)


@app.route("/download/witness")
def download_witness():
    return send_from_directory(WITNESS_DIR, WITNESS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        app.run(debug=False)
        return 0

    presents, regions = load_puzzle(argv[0])
    results = count_fitting_regions(regions, presents, puzzle_name=os.path.basename(argv[0]))
    print(sum(1 for res in results if res.ok))
    return 0


if __name__ == "__main__":
    sys.exit(main())
