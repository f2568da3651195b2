from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

BASE_TOKEN_LEVELS = (1, 2, 4, 8)
_CELL_KEY_PATTERN = re.compile(r"(-?[0-9]+),(-?[0-9]+)")


def _require_int(value: Any, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


def require_token_value(value: Any, *, field_name: str = "token value") -> int:
    """Token values are positive integers; bools are rejected explicitly."""
    value = _require_int(value, field_name=field_name)
    if value <= 0:
        raise ValueError(f"{field_name} must be > 0")
    return value


@dataclass(frozen=True, order=True)
class CellCoord:
    """Integer grid cell (i, j); i follows latitude, j follows longitude."""

    i: int
    j: int

    def __post_init__(self) -> None:
        _require_int(self.i, field_name="cell.i")
        _require_int(self.j, field_name="cell.j")

    def key(self) -> str:
        return f"{self.i},{self.j}"

    @classmethod
    def from_key(cls, key: str) -> "CellCoord":
        if not isinstance(key, str):
            raise ValueError("cell key must be a string")
        match = _CELL_KEY_PATTERN.fullmatch(key)
        if match is None:
            raise ValueError(f"invalid cell key: {key!r}")
        return cls(i=int(match.group(1)), j=int(match.group(2)))

    def chebyshev_distance(self, other: "CellCoord") -> int:
        return max(abs(self.i - other.i), abs(self.j - other.j))


@dataclass(frozen=True)
class Empty:
    """A cell with no token, either never spawned or explicitly emptied."""

    def to_payload(self) -> None:
        return None


@dataclass(frozen=True)
class Occupied:
    """A cell holding one token."""

    value: int

    def __post_init__(self) -> None:
        require_token_value(self.value, field_name="occupied.value")

    def to_payload(self) -> int:
        return self.value


CellState = Union[Empty, Occupied]
EMPTY = Empty()


def cell_state_from_payload(value: Any, *, field_name: str = "cell state") -> CellState:
    """Decode the persisted form: ``None`` is Empty, a positive int is Occupied."""
    if value is None:
        return EMPTY
    return Occupied(require_token_value(value, field_name=field_name))

