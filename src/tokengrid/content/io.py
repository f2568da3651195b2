from __future__ import annotations

import os
import re
from pathlib import Path
from tempfile import NamedTemporaryFile

DEFAULT_SAVE_DIR = "saves"
BLOB_SUFFIX = ".json"
_BLOB_KEY_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")


def _write_atomic_text(path: str | Path, serialized: str) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=destination.parent,
            delete=False,
            suffix=".tmp",
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(serialized)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_path, destination)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


class MemoryBlobStore:
    """In-process key/value blobs; used by tests and throwaway sessions."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(blobs or {})

    def load(self, key: str) -> str | None:
        return self.blobs.get(key)

    def save(self, key: str, value: str) -> None:
        self.blobs[key] = value


class JsonFileBlobStore:
    """One file per key under ``root``; each save atomically replaces it."""

    def __init__(self, root: str | Path = DEFAULT_SAVE_DIR) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not _BLOB_KEY_PATTERN.fullmatch(key) or key.startswith("."):
            raise ValueError(f"invalid blob key: {key!r}")
        return self.root / f"{key}{BLOB_SUFFIX}"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def save(self, key: str, value: str) -> None:
        _write_atomic_text(self.path_for(key), value)
