from __future__ import annotations

import hashlib

LUCK_DENOMINATOR = float(1 << 53)


def derive_stream_seed(master_seed: int, stream_name: str) -> int:
    """Derive a deterministic child RNG seed from (master_seed, stream_name)."""
    digest = hashlib.sha256(f"{master_seed}:{stream_name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def luck(key: str, *, seed: int = 0) -> float:
    """Map a string key to a stable float in [0.0, 1.0)."""
    digest = hashlib.sha256(f"{seed}:{key}".encode("utf-8")).digest()
    return (int.from_bytes(digest[:8], byteorder="big", signed=False) >> 11) / LUCK_DENOMINATOR
