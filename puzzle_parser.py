# puzzle_parser.py: present shapes and tree regions from the puzzle text
from __future__ import annotations

import re
from pathlib import Path
from typing import List, Tuple, Union

from models import Present, TreeRegion
from shapes import build_present

_SHAPE_HEADER_RE = re.compile(r"^\s*(?P<name>\d+)\s*:\s*$")
_REGION_RE = re.compile(r"^\s*(?P<w>\d+)\s*[xX]\s*(?P<h>\d+)\s*:(?P<counts>.*)$")


class PuzzleParseError(ValueError):
    pass


def _parse_region(line: str, lineno: int) -> TreeRegion:
    m = _REGION_RE.match(line)
    if not m:
        raise PuzzleParseError(f"line {lineno}: expected '<W>x<H>: counts...', got {line.strip()!r}")
    try:
        counts = tuple(int(tok) for tok in m.group("counts").split())
    except ValueError:
        raise PuzzleParseError(f"line {lineno}: present counts must be integers") from None
    try:
        return TreeRegion(int(m.group("w")), int(m.group("h")), counts)
    except ValueError as e:
        raise PuzzleParseError(f"line {lineno}: {e}") from None


def parse_puzzle(text: str) -> Tuple[List[Present], List[TreeRegion]]:
    """
    Parse shape blocks (``"<index>:"`` then ``#``/``.`` rows up to a blank
    line) and region lines (``"12x5: 1 0 1 0 2 2"``).

    Presents keep their order of appearance; that order is the index every
    region's counts refer to.
    """
    presents: List[Present] = []
    regions: List[TreeRegion] = []

    lines = text.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i].rstrip()
        i += 1
        if not line.strip():
            continue

        header = _SHAPE_HEADER_RE.match(line)
        if header:
            rows: List[str] = []
            while i < len(lines) and lines[i].strip():
                rows.append(lines[i].strip())
                i += 1
            presents.append(build_present(rows, name=header.group("name")))
            continue

        regions.append(_parse_region(line, i))

    return presents, regions


def load_puzzle(path: Union[str, Path]) -> Tuple[List[Present], List[TreeRegion]]:
    with open(path, "r", encoding="utf-8") as fh:
        return parse_puzzle(fh.read())


__all__ = ["PuzzleParseError", "parse_puzzle", "load_puzzle"]
