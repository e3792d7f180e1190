"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional

from config import CFG
from render import serialise_grid
from solver.grid import PackingGrid


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_witness(grid: Optional[PackingGrid], base_dir: str, label: str = "") -> str:
    """Write the packed grid as ``#``/``.`` rows to the configured text file."""

    path = _resolve_output_path(base_dir, CFG.WITNESS_OUT, "witness.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        if label:
            f.write(f"{label}\n")
        if grid is None:
            f.write("No witness\n")
        else:
            f.write(serialise_grid(grid) + "\n")
    return path


def write_layout_view_html(svg: str, legend_html: str, base_dir: str, *, title: str = "Witness") -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>{title}</title></head>
<body>
<h1>{title}</h1>
<section>{svg}</section>
<section><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_witness", "write_layout_view_html"]
