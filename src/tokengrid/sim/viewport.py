from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from tokengrid.sim.projection import round_half_up
from tokengrid.sim.resolver import CellResolver
from tokengrid.sim.world import CellCoord, CellState


@dataclass(frozen=True)
class Region:
    """Two opposite corners in continuous cell space, in either order."""

    corner_a: tuple[float, float]
    corner_b: tuple[float, float]

    def cell_bounds(self) -> tuple[CellCoord, CellCoord]:
        """Inclusive (min, max) cells; inverted or zero-area input is normalized."""
        a_i, a_j = round_half_up(self.corner_a[0]), round_half_up(self.corner_a[1])
        b_i, b_j = round_half_up(self.corner_b[0]), round_half_up(self.corner_b[1])
        return (
            CellCoord(min(a_i, b_i), min(a_j, b_j)),
            CellCoord(max(a_i, b_i), max(a_j, b_j)),
        )

    def iter_coords(self) -> Iterator[CellCoord]:
        low, high = self.cell_bounds()
        for i in range(low.i, high.i + 1):
            for j in range(low.j, high.j + 1):
                yield CellCoord(i, j)

    def cell_count(self) -> int:
        low, high = self.cell_bounds()
        return (high.i - low.i + 1) * (high.j - low.j + 1)

    def contains(self, coord: CellCoord) -> bool:
        low, high = self.cell_bounds()
        return low.i <= coord.i <= high.i and low.j <= coord.j <= high.j


def region_around(center: tuple[float, float], half_height: float, half_width: float) -> Region:
    if half_height < 0 or half_width < 0:
        raise ValueError("region half extents must be >= 0")
    i, j = center
    return Region((i + half_height, j - half_width), (i - half_height, j + half_width))


def cells_in_region(resolver: CellResolver, region: Region) -> list[tuple[CellCoord, CellState]]:
    """Resolve every cell of ``region`` in row-major order (i, then j)."""
    return [(coord, resolver.resolve(coord)) for coord in region.iter_coords()]
