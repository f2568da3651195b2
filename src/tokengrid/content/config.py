from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tokengrid.sim.generation import DEFAULT_SPAWN_PROBABILITY
from tokengrid.sim.interaction import DEFAULT_INTERACTION_RADIUS, DEFAULT_TARGET_VALUE
from tokengrid.sim.projection import DEFAULT_ORIGIN_LAT, DEFAULT_ORIGIN_LNG, DEFAULT_TILE_DEGREES
from tokengrid.sim.session import DEFAULT_VIEW_HALF_HEIGHT, DEFAULT_VIEW_HALF_WIDTH
from tokengrid.sim.world import BASE_TOKEN_LEVELS

CONFIG_SCHEMA_VERSION = 1
DEFAULT_CONFIG_PATH = "content/game_config.json"


@dataclass(frozen=True)
class GameConfig:
    seed: int = 0
    spawn_probability: float = DEFAULT_SPAWN_PROBABILITY
    levels: tuple[int, ...] = BASE_TOKEN_LEVELS
    interaction_radius: int = DEFAULT_INTERACTION_RADIUS
    target_value: int = DEFAULT_TARGET_VALUE
    tile_degrees: float = DEFAULT_TILE_DEGREES
    origin_lat: float = DEFAULT_ORIGIN_LAT
    origin_lng: float = DEFAULT_ORIGIN_LNG
    view_half_height: int = DEFAULT_VIEW_HALF_HEIGHT
    view_half_width: int = DEFAULT_VIEW_HALF_WIDTH

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": CONFIG_SCHEMA_VERSION,
            "seed": self.seed,
            "spawn_probability": self.spawn_probability,
            "levels": list(self.levels),
            "interaction_radius": self.interaction_radius,
            "target_value": self.target_value,
            "tile_degrees": self.tile_degrees,
            "origin_lat": self.origin_lat,
            "origin_lng": self.origin_lng,
            "view_half_height": self.view_half_height,
            "view_half_width": self.view_half_width,
        }


def load_game_config_json(path: str | Path) -> GameConfig:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return game_config_from_payload(payload)


def _require_int(payload: dict[str, Any], field_name: str, *, minimum: int) -> int:
    value = payload.get(field_name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"game config must contain integer field: {field_name}")
    if value < minimum:
        raise ValueError(f"game config {field_name} must be >= {minimum}")
    return value


def _require_number(payload: dict[str, Any], field_name: str) -> float:
    value = payload.get(field_name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"game config must contain numeric field: {field_name}")
    return float(value)


def game_config_from_payload(payload: dict[str, Any]) -> GameConfig:
    if not isinstance(payload, dict):
        raise ValueError("game config payload must be an object")

    schema_version = payload.get("schema_version")
    if not isinstance(schema_version, int):
        raise ValueError("game config must contain integer field: schema_version")
    if schema_version != CONFIG_SCHEMA_VERSION:
        raise ValueError(f"unsupported game config schema_version: {schema_version}")

    spawn_probability = _require_number(payload, "spawn_probability")
    if not 0.0 <= spawn_probability <= 1.0:
        raise ValueError("game config spawn_probability must be within [0.0, 1.0]")

    levels_payload = payload.get("levels")
    if not isinstance(levels_payload, list) or not levels_payload:
        raise ValueError("game config must contain non-empty list field: levels")
    levels: list[int] = []
    for index, level in enumerate(levels_payload):
        if isinstance(level, bool) or not isinstance(level, int) or level <= 0:
            raise ValueError(f"game config levels[{index}] must be a positive integer")
        levels.append(level)
    if levels != sorted(set(levels)):
        raise ValueError("game config levels must be strictly increasing")

    tile_degrees = _require_number(payload, "tile_degrees")
    if tile_degrees <= 0.0:
        raise ValueError("game config tile_degrees must be > 0")

    return GameConfig(
        seed=_require_int(payload, "seed", minimum=0),
        spawn_probability=spawn_probability,
        levels=tuple(levels),
        interaction_radius=_require_int(payload, "interaction_radius", minimum=0),
        target_value=_require_int(payload, "target_value", minimum=1),
        tile_degrees=tile_degrees,
        origin_lat=_require_number(payload, "origin_lat"),
        origin_lng=_require_number(payload, "origin_lng"),
        view_half_height=_require_int(payload, "view_half_height", minimum=0),
        view_half_width=_require_int(payload, "view_half_width", minimum=0),
    )
