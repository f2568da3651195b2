from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tokengrid.sim.generation import TokenGenerator
from tokengrid.sim.interaction import (
    DEFAULT_INTERACTION_RADIUS,
    DEFAULT_TARGET_VALUE,
    InteractionEngine,
    InteractionResult,
    PlayerState,
)
from tokengrid.sim.movement import Direction, MovementController, ViewMode
from tokengrid.sim.overrides import BlobStore, OverrideStore
from tokengrid.sim.projection import GridProjection
from tokengrid.sim.resolver import CellResolver
from tokengrid.sim.viewport import Region, cells_in_region
from tokengrid.sim.world import CellCoord, CellState

if TYPE_CHECKING:
    from tokengrid.content.config import GameConfig

DEFAULT_VIEW_HALF_HEIGHT = 6
DEFAULT_VIEW_HALF_WIDTH = 10


@dataclass
class GameSession:
    """One play session: persistent overrides plus session-only player state.

    Front ends talk to this object only. Every entry point runs to completion
    synchronously, so a write is visible to the next ``visible_cells`` call.
    """

    overrides: OverrideStore
    generator: TokenGenerator
    projection: GridProjection
    player: PlayerState
    interaction_radius: int = DEFAULT_INTERACTION_RADIUS
    target_value: int = DEFAULT_TARGET_VALUE
    view_half_height: float = DEFAULT_VIEW_HALF_HEIGHT
    view_half_width: float = DEFAULT_VIEW_HALF_WIDTH
    last_result: InteractionResult | None = None
    resolver: CellResolver = field(init=False)
    engine: InteractionEngine = field(init=False)
    controller: MovementController = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = CellResolver(overrides=self.overrides, generator=self.generator)
        self.engine = InteractionEngine(
            resolver=self.resolver,
            overrides=self.overrides,
            projection=self.projection,
            interaction_radius=self.interaction_radius,
            target_value=self.target_value,
        )
        self.controller = MovementController(self.player, self.projection)

    @classmethod
    def start(cls, blob_store: BlobStore, config: GameConfig) -> "GameSession":
        """Load persisted overrides and place the player at the grid origin."""
        projection = GridProjection(
            origin_lat=config.origin_lat,
            origin_lng=config.origin_lng,
            tile_degrees=config.tile_degrees,
        )
        overrides = OverrideStore(blob_store)
        overrides.load_all()
        return cls(
            overrides=overrides,
            generator=TokenGenerator(
                seed=config.seed,
                spawn_probability=config.spawn_probability,
                levels=config.levels,
            ),
            projection=projection,
            player=PlayerState(lat=projection.origin_lat, lng=projection.origin_lng),
            interaction_radius=config.interaction_radius,
            target_value=config.target_value,
            view_half_height=config.view_half_height,
            view_half_width=config.view_half_width,
        )

    @property
    def mode(self) -> ViewMode:
        return self.controller.mode

    def resolve(self, coord: CellCoord) -> CellState:
        return self.resolver.resolve(coord)

    def visible_region(self) -> Region:
        return self.controller.visible_region(self.view_half_height, self.view_half_width)

    def visible_cells(self, region: Region | None = None) -> list[tuple[CellCoord, CellState]]:
        return cells_in_region(self.resolver, region if region is not None else self.visible_region())

    def click(self, coord: CellCoord) -> InteractionResult:
        self.last_result = self.engine.handle_click(coord, self.player)
        return self.last_result

    def move(self, direction: Direction) -> Region:
        self.controller.move(direction)
        return self.visible_region()

    def toggle_mode(self) -> Region:
        self.controller.toggle_mode()
        return self.visible_region()

    def player_cell(self) -> CellCoord:
        return self.controller.player_cell()
