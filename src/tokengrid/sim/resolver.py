from __future__ import annotations

from dataclasses import dataclass

from tokengrid.sim.generation import TokenGenerator
from tokengrid.sim.overrides import OverrideStore
from tokengrid.sim.world import CellCoord, CellState


@dataclass
class CellResolver:
    """Single read path for cell contents: overrides first, then generation."""

    overrides: OverrideStore
    generator: TokenGenerator

    def resolve(self, coord: CellCoord) -> CellState:
        override = self.overrides.get(coord)
        if override is not None:
            return override
        return self.generator.generated_state(coord)

    def is_overridden(self, coord: CellCoord) -> bool:
        return coord in self.overrides
