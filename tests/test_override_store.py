import json

import pytest

from tokengrid.content.io import MemoryBlobStore
from tokengrid.sim.overrides import OVERRIDES_BLOB_KEY, MalformedPersistedState, OverrideStore
from tokengrid.sim.world import EMPTY, CellCoord, Occupied


class FailingBlobStore(MemoryBlobStore):
    def save(self, key: str, value: str) -> None:
        raise OSError("save failed")


def _loaded_store(blobs: dict[str, str] | None = None) -> tuple[OverrideStore, MemoryBlobStore]:
    blob_store = MemoryBlobStore(blobs)
    store = OverrideStore(blob_store)
    store.load_all()
    return store, blob_store


def test_missing_blob_starts_empty() -> None:
    store, blob_store = _loaded_store()

    assert len(store) == 0
    assert store.get(CellCoord(0, 0)) is None
    assert blob_store.load(OVERRIDES_BLOB_KEY) is None


def test_set_flushes_whole_store_before_returning() -> None:
    store, blob_store = _loaded_store()

    store.set(CellCoord(1, 2), EMPTY)
    assert json.loads(blob_store.blobs[OVERRIDES_BLOB_KEY]) == {"1,2": None}

    store.set(CellCoord(-4, 0), Occupied(16))
    assert json.loads(blob_store.blobs[OVERRIDES_BLOB_KEY]) == {"1,2": None, "-4,0": 16}
    assert store.write_count == 2


def test_empty_override_is_distinct_from_absent_entry() -> None:
    store, _ = _loaded_store()
    store.set(CellCoord(3, 3), EMPTY)

    assert CellCoord(3, 3) in store
    assert store.get(CellCoord(3, 3)) == EMPTY
    assert CellCoord(3, 4) not in store
    assert store.get(CellCoord(3, 4)) is None


def test_set_replaces_existing_entry() -> None:
    store, _ = _loaded_store()
    store.set(CellCoord(0, 0), EMPTY)
    store.set(CellCoord(0, 0), Occupied(4))

    assert store.get(CellCoord(0, 0)) == Occupied(4)
    assert len(store) == 1


def test_round_trip_reproduces_mapping_including_empty_overrides() -> None:
    store, blob_store = _loaded_store()
    store.set(CellCoord(0, 1), EMPTY)
    store.set(CellCoord(-2, -3), Occupied(64))
    store.set(CellCoord(10, -10), Occupied(2))

    reloaded = OverrideStore(blob_store)
    reloaded.load_all()

    assert reloaded.items() == store.items()
    assert reloaded.to_dict() == {"-2,-3": 64, "0,1": None, "10,-10": 2}


def test_from_dict_matches_loaded_store() -> None:
    store = OverrideStore.from_dict({"5,5": None, "-1,2": 8}, MemoryBlobStore())

    assert store.get(CellCoord(5, 5)) == EMPTY
    assert store.get(CellCoord(-1, 2)) == Occupied(8)


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("{not json", "not valid JSON"),
        ("[1, 2]", "must be an object"),
        ('{"1;2": 4}', "malformed override entry"),
        ('{"1,2": 0}', "malformed override entry"),
        ('{"1,2": true}', "malformed override entry"),
        ('{"1,2": "4"}', "malformed override entry"),
        ('{"1,2": 4, "01,2": 8}', "duplicate override cell 1,2"),
        ('{"1,2": 4, "1,2": 8}', "repeated override key '1,2'"),
    ],
)
def test_malformed_blob_is_fatal(raw: str, message: str) -> None:
    store = OverrideStore(MemoryBlobStore({OVERRIDES_BLOB_KEY: raw}))

    with pytest.raises(MalformedPersistedState, match=message):
        store.load_all()


def test_malformed_blob_is_a_value_error() -> None:
    store = OverrideStore(MemoryBlobStore({OVERRIDES_BLOB_KEY: "null"}))

    with pytest.raises(ValueError):
        store.load_all()


def test_clear_persists_empty_store() -> None:
    store, blob_store = _loaded_store({OVERRIDES_BLOB_KEY: '{"1,1": 2}'})
    assert len(store) == 1

    store.clear()

    assert len(store) == 0
    assert blob_store.blobs[OVERRIDES_BLOB_KEY] == "{}"


def test_set_rejects_non_cell_state() -> None:
    store, _ = _loaded_store()

    with pytest.raises(ValueError, match="Empty or Occupied"):
        store.set(CellCoord(0, 0), 4)  # type: ignore[arg-type]
    assert store.write_count == 0


def test_failed_save_leaves_entries_unchanged() -> None:
    store, _ = _loaded_store({OVERRIDES_BLOB_KEY: '{"0,1": 4}'})
    store.blob_store = FailingBlobStore()

    with pytest.raises(OSError, match="save failed"):
        store.set(CellCoord(0, 1), EMPTY)
    with pytest.raises(OSError, match="save failed"):
        store.set(CellCoord(2, 2), Occupied(8))

    assert store.to_dict() == {"0,1": 4}
    assert store.write_count == 0


def test_failed_clear_keeps_entries() -> None:
    store, _ = _loaded_store({OVERRIDES_BLOB_KEY: '{"1,1": 2}'})
    store.blob_store = FailingBlobStore()

    with pytest.raises(OSError, match="save failed"):
        store.clear()

    assert store.get(CellCoord(1, 1)) == Occupied(2)
    assert len(store) == 1
