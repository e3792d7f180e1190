from dataclasses import dataclass
from typing import Any, Optional, Tuple

# Rows of cells, True = filled.
Shape = Tuple[Tuple[bool, ...], ...]


class InvalidShape(ValueError):
    """A shape or present whose cells do not describe a usable polyomino."""


@dataclass(frozen=True)
class Present:
    width: int
    height: int
    covered_area: int
    shape_variations: Tuple[Shape, ...]
    name: str = ""

    def __post_init__(self) -> None:
        if not self.shape_variations:
            raise InvalidShape(f"present {self.name!r} has no shape variations")
        if self.width <= 0 or self.height <= 0 or self.covered_area <= 0:
            raise InvalidShape(f"present {self.name!r} has an empty bounding box")
        first = self.shape_variations[0]
        if (len(first[0]), len(first)) != (self.width, self.height):
            raise InvalidShape(
                f"present {self.name!r}: box {self.width}x{self.height} does not match "
                f"first variation {len(first[0])}x{len(first)}"
            )
        for shape in self.shape_variations:
            area = sum(cell for row in shape for cell in row)
            if area != self.covered_area:
                raise InvalidShape(
                    f"present {self.name!r}: variation covers {area} cells, expected {self.covered_area}"
                )

    @property
    def min_width(self) -> int:
        return min(len(shape[0]) for shape in self.shape_variations)

    @property
    def min_height(self) -> int:
        return min(len(shape) for shape in self.shape_variations)


@dataclass(frozen=True)
class TreeRegion:
    width: int
    height: int
    presents_to_fit: Tuple[int, ...]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Region dimensions must be non-negative")
        if any(int(n) < 0 for n in self.presents_to_fit):
            raise ValueError("Present counts must be non-negative")
        object.__setattr__(self, "presents_to_fit", tuple(int(n) for n in self.presents_to_fit))

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class RegionResult:
    ok: bool
    strategy: str
    reason: Optional[str] = None
    witness: Optional[Any] = None  # solver.grid.PackingGrid
    elapsed_sec: float = 0.0
