from __future__ import annotations

import math
from dataclasses import dataclass

from tokengrid.sim.world import CellCoord

DEFAULT_ORIGIN_LAT = 36.997936938057016
DEFAULT_ORIGIN_LNG = -122.05703507501151
DEFAULT_TILE_DEGREES = 1e-4


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class GridProjection:
    """Maps geographic (lat, lng) onto the cell grid anchored at ``origin``."""

    origin_lat: float = DEFAULT_ORIGIN_LAT
    origin_lng: float = DEFAULT_ORIGIN_LNG
    tile_degrees: float = DEFAULT_TILE_DEGREES

    def __post_init__(self) -> None:
        if self.tile_degrees <= 0.0:
            raise ValueError("tile_degrees must be > 0")

    def latlng_to_grid(self, lat: float, lng: float) -> tuple[float, float]:
        return ((lat - self.origin_lat) / self.tile_degrees, (lng - self.origin_lng) / self.tile_degrees)

    def latlng_to_cell(self, lat: float, lng: float) -> CellCoord:
        i, j = self.latlng_to_grid(lat, lng)
        return CellCoord(round_half_up(i), round_half_up(j))
