from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tokengrid.sim.overrides import OverrideStore
from tokengrid.sim.projection import GridProjection
from tokengrid.sim.resolver import CellResolver
from tokengrid.sim.world import EMPTY, CellCoord, Occupied

DEFAULT_INTERACTION_RADIUS = 9
DEFAULT_TARGET_VALUE = 256


class Outcome(str, Enum):
    PICKED_UP = "picked_up"
    CRAFTED = "crafted"
    WON = "won"
    REJECTED_TOO_FAR = "rejected_too_far"
    REJECTED_EMPTY = "rejected_empty"
    REJECTED_MISMATCH = "rejected_mismatch"


@dataclass
class PlayerState:
    """Session-only player data; never persisted."""

    lat: float
    lng: float
    holding: int | None = None
    has_won: bool = False

    @property
    def position(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class InteractionResult:
    outcome: Outcome
    coord: CellCoord
    value: int | None = None
    won: bool = False

    @property
    def rejected(self) -> bool:
        return self.outcome in {Outcome.REJECTED_TOO_FAR, Outcome.REJECTED_EMPTY, Outcome.REJECTED_MISMATCH}

    def outcomes(self) -> tuple[Outcome, ...]:
        if self.won:
            return (self.outcome, Outcome.WON)
        return (self.outcome,)


def outcome_message(result: InteractionResult) -> str:
    if result.outcome == Outcome.REJECTED_TOO_FAR:
        return "Too far away!"
    if result.outcome == Outcome.REJECTED_EMPTY:
        return "Nothing to pick up here."
    if result.outcome == Outcome.REJECTED_MISMATCH:
        return "Cannot craft here!"
    if result.outcome == Outcome.PICKED_UP:
        return f"Picked up {result.value}"
    message = f"Crafted {result.value}"
    if result.won:
        message += " - You win!"
    return message


@dataclass
class InteractionEngine:
    """Pickup / craft rules applied to a clicked cell."""

    resolver: CellResolver
    overrides: OverrideStore
    projection: GridProjection
    interaction_radius: int = DEFAULT_INTERACTION_RADIUS
    target_value: int = DEFAULT_TARGET_VALUE

    def player_cell(self, player: PlayerState) -> CellCoord:
        return self.projection.latlng_to_cell(player.lat, player.lng)

    def in_range(self, coord: CellCoord, player: PlayerState) -> bool:
        return coord.chebyshev_distance(self.player_cell(player)) <= self.interaction_radius

    def handle_click(self, coord: CellCoord, player: PlayerState) -> InteractionResult:
        # Distance is measured from the player's cell in both view modes.
        if not self.in_range(coord, player):
            return InteractionResult(Outcome.REJECTED_TOO_FAR, coord)

        state = self.resolver.resolve(coord)

        if player.holding is None:
            if not isinstance(state, Occupied):
                return InteractionResult(Outcome.REJECTED_EMPTY, coord)
            self.overrides.set(coord, EMPTY)
            player.holding = state.value
            return InteractionResult(Outcome.PICKED_UP, coord, value=state.value)

        if not isinstance(state, Occupied) or state.value != player.holding:
            return InteractionResult(Outcome.REJECTED_MISMATCH, coord)

        new_value = player.holding * 2
        self.overrides.set(coord, Occupied(new_value))
        player.holding = None
        won = new_value >= self.target_value and not player.has_won
        if won:
            player.has_won = True
        return InteractionResult(Outcome.CRAFTED, coord, value=new_value, won=won)
