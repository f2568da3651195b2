from __future__ import annotations

import hashlib
import json

from tokengrid.sim.overrides import OverrideStore
from tokengrid.sim.session import GameSession


def overrides_hash(store: OverrideStore) -> str:
    encoded = json.dumps(store.to_dict(), sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def session_hash(session: GameSession) -> str:
    payload = {
        "seed": session.generator.seed,
        "mode": session.mode.value,
        "player": {
            "lat": round(session.player.lat, 10),
            "lng": round(session.player.lng, 10),
            "holding": session.player.holding,
            "has_won": session.player.has_won,
        },
        "view_center": [round(value, 10) for value in session.controller.view_center],
        "overrides": session.overrides.to_dict(),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()
