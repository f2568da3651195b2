from __future__ import annotations

from enum import Enum

from tokengrid.sim.interaction import PlayerState
from tokengrid.sim.projection import GridProjection
from tokengrid.sim.viewport import Region, region_around
from tokengrid.sim.world import CellCoord


class ViewMode(str, Enum):
    PLAYER_CENTERED = "player"
    FREE_VIEW = "map"


class Direction(Enum):
    """Unit steps as (lat, lng) tile multiples."""

    NORTH = (1, 0)
    SOUTH = (-1, 0)
    WEST = (0, -1)
    EAST = (0, 1)


KEY_DIRECTIONS: dict[str, Direction] = {
    "up": Direction.NORTH,
    "w": Direction.NORTH,
    "down": Direction.SOUTH,
    "s": Direction.SOUTH,
    "left": Direction.WEST,
    "a": Direction.WEST,
    "right": Direction.EAST,
    "d": Direction.EAST,
}


class MovementController:
    """Owns the view mode and decides which center the viewport follows.

    In player mode movement steps the avatar and the view tracks it; in map
    mode movement pans an independent view center and the avatar stays put.
    """

    def __init__(self, player: PlayerState, projection: GridProjection, *, mode: ViewMode = ViewMode.PLAYER_CENTERED) -> None:
        self.player = player
        self.projection = projection
        self.mode = mode
        self._view_lat = player.lat
        self._view_lng = player.lng

    @property
    def view_center(self) -> tuple[float, float]:
        if self.mode == ViewMode.PLAYER_CENTERED:
            return self.player.position
        return (self._view_lat, self._view_lng)

    @property
    def free_view_center(self) -> tuple[float, float]:
        return (self._view_lat, self._view_lng)

    def toggle_mode(self) -> ViewMode:
        # Free view starts where the followed view was; player mode snaps back.
        self._view_lat, self._view_lng = self.player.position
        if self.mode == ViewMode.PLAYER_CENTERED:
            self.mode = ViewMode.FREE_VIEW
        else:
            self.mode = ViewMode.PLAYER_CENTERED
        return self.mode

    def move_by(self, delta_lat: float, delta_lng: float) -> tuple[float, float]:
        """Apply a geographic delta; returns the new view center."""
        if self.mode == ViewMode.PLAYER_CENTERED:
            self.player.lat += delta_lat
            self.player.lng += delta_lng
        else:
            self._view_lat += delta_lat
            self._view_lng += delta_lng
        return self.view_center

    def move(self, direction: Direction) -> tuple[float, float]:
        step_lat, step_lng = direction.value
        step = self.projection.tile_degrees
        return self.move_by(step_lat * step, step_lng * step)

    def player_cell(self) -> CellCoord:
        return self.projection.latlng_to_cell(self.player.lat, self.player.lng)

    def view_center_cell_space(self) -> tuple[float, float]:
        lat, lng = self.view_center
        return self.projection.latlng_to_grid(lat, lng)

    def visible_region(self, half_height: float, half_width: float) -> Region:
        return region_around(self.view_center_cell_space(), half_height, half_width)
