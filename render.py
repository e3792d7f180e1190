from typing import Tuple

from solver.grid import PackingGrid

FILLED_COLOR = "rgb(46,125,50)"
EMPTY_COLOR = "rgb(245,245,245)"


def serialise_grid(grid: PackingGrid) -> str:
    return "\n".join("".join("#" if cell else "." for cell in row) for row in grid.cells)


def render_result(grid: PackingGrid, scale: int = 24) -> Tuple[str, str]:
    svg_w = grid.width * scale + 2
    svg_h = grid.height * scale + 2

    cells = []
    for r, row in enumerate(grid.cells):
        for c, filled in enumerate(row):
            cells.append(
                f'<rect x="{c * scale + 1}" y="{r * scale + 1}" width="{scale}" height="{scale}" '
                f'fill="{FILLED_COLOR if filled else EMPTY_COLOR}" stroke="black" stroke-width="0.5"/>'
            )
    frame = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    envelope = (
        f'<rect x="1" y="1" width="{grid.widest_row_width * scale}" height="{grid.highest_column_height * scale}" '
        f'fill="none" stroke="red" stroke-width="1" stroke-dasharray="4 2"/>'
    )
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(cells)}{frame}{envelope}</svg>'
    )

    legend = (
        f"<li><span class='swatch' style='background:{FILLED_COLOR}'></span>occupied</li>"
        f"<li><span class='swatch' style='background:{EMPTY_COLOR}'></span>empty</li>"
        f"<li><span class='swatch' style='border:1px dashed red'></span>"
        f"envelope {grid.widest_row_width}x{grid.highest_column_height}</li>"
    )
    return svg, legend
