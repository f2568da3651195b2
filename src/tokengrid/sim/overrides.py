from __future__ import annotations

import json
from typing import Any, Protocol

from tokengrid.sim.world import CellCoord, CellState, Empty, Occupied, cell_state_from_payload

OVERRIDES_BLOB_KEY = "overrides"


class MalformedPersistedState(ValueError):
    """Persisted override data exists but cannot be decoded."""


class BlobStore(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, value: str) -> None: ...


def encode_overrides(entries: dict[CellCoord, CellState]) -> str:
    payload = {coord.key(): state.to_payload() for coord, state in entries.items()}
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def _reject_repeated_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, value in pairs:
        if key in payload:
            raise MalformedPersistedState(f"repeated override key {key!r}")
        payload[key] = value
    return payload


def decode_overrides(raw: str) -> dict[CellCoord, CellState]:
    try:
        payload = json.loads(raw, object_pairs_hook=_reject_repeated_keys)
    except json.JSONDecodeError as exc:
        raise MalformedPersistedState(f"override blob is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedPersistedState("override blob must be an object")

    entries: dict[CellCoord, CellState] = {}
    for key, value in payload.items():
        try:
            coord = CellCoord.from_key(key)
            state = cell_state_from_payload(value, field_name=f"overrides[{key}]")
        except ValueError as exc:
            raise MalformedPersistedState(f"malformed override entry {key!r}: {exc}") from exc
        if coord in entries:
            raise MalformedPersistedState(f"duplicate override cell {coord.key()} (key {key!r})")
        entries[coord] = state
    return entries


class OverrideStore:
    """Sparse record of player-caused cell changes.

    ``Empty`` entries mean a token was removed; absent cells defer to
    generation. Every ``set`` flushes the whole store to the blob store before
    returning.
    """

    def __init__(self, blob_store: BlobStore, *, blob_key: str = OVERRIDES_BLOB_KEY) -> None:
        self.blob_store = blob_store
        self.blob_key = blob_key
        self._entries: dict[CellCoord, CellState] = {}
        self.write_count = 0

    def load_all(self) -> None:
        raw = self.blob_store.load(self.blob_key)
        if raw is None:
            self._entries = {}
            return
        self._entries = decode_overrides(raw)

    def get(self, coord: CellCoord) -> CellState | None:
        return self._entries.get(coord)

    def set(self, coord: CellCoord, state: CellState) -> None:
        if not isinstance(coord, CellCoord):
            raise ValueError("override coord must be a CellCoord")
        if not isinstance(state, (Empty, Occupied)):
            raise ValueError("override state must be Empty or Occupied")
        self._commit({**self._entries, coord: state})

    def clear(self) -> None:
        self._commit({})

    def _commit(self, entries: dict[CellCoord, CellState]) -> None:
        # Memory only changes once the blob store accepted the new payload.
        self.blob_store.save(self.blob_key, encode_overrides(entries))
        self._entries = entries
        self.write_count += 1

    def __contains__(self, coord: object) -> bool:
        return coord in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> list[tuple[CellCoord, CellState]]:
        return [(coord, self._entries[coord]) for coord in sorted(self._entries)]

    def to_dict(self) -> dict[str, Any]:
        return {coord.key(): state.to_payload() for coord, state in self.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any], blob_store: BlobStore) -> "OverrideStore":
        store = cls(blob_store)
        store._entries = decode_overrides(json.dumps(data))
        return store
