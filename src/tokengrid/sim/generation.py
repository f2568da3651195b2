from __future__ import annotations

import math
from dataclasses import dataclass

from tokengrid.sim.rng import derive_stream_seed, luck
from tokengrid.sim.world import BASE_TOKEN_LEVELS, CellCoord, EMPTY, CellState, Occupied

RNG_TOKEN_STREAM_NAME = "rng_tokens"
DEFAULT_SPAWN_PROBABILITY = 0.15
SPAWN_SALT = "spawn"
VALUE_SALT = "value"


@dataclass(frozen=True)
class TokenGenerator:
    """Pure, seeded decision of which cells start with a token and its level.

    Every answer is a function of ``(seed, i, j)`` only, so the infinite grid
    never has to be stored; player changes live in the override store.
    """

    seed: int = 0
    spawn_probability: float = DEFAULT_SPAWN_PROBABILITY
    levels: tuple[int, ...] = BASE_TOKEN_LEVELS

    def __post_init__(self) -> None:
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ValueError("spawn_probability must be within [0.0, 1.0]")
        if not self.levels:
            raise ValueError("levels must not be empty")

    @property
    def stream_seed(self) -> int:
        return derive_stream_seed(self.seed, RNG_TOKEN_STREAM_NAME)

    def _draw(self, coord: CellCoord, salt: str) -> float:
        return luck(f"{coord.i},{coord.j},{salt}", seed=self.stream_seed)

    def spawn_decision(self, coord: CellCoord) -> bool:
        return self._draw(coord, SPAWN_SALT) < self.spawn_probability

    def spawn_level(self, coord: CellCoord) -> int:
        index = math.floor(self._draw(coord, VALUE_SALT) * len(self.levels))
        return self.levels[min(index, len(self.levels) - 1)]

    def token_at(self, coord: CellCoord) -> int | None:
        if not self.spawn_decision(coord):
            return None
        return self.spawn_level(coord)

    def generated_state(self, coord: CellCoord) -> CellState:
        value = self.token_at(coord)
        return EMPTY if value is None else Occupied(value)
