from __future__ import annotations

import hashlib
import json
from typing import Any

from kingmaker.sim.core import Session
from kingmaker.sim.world import WorldState


def _canonical_digest(payload: dict[str, Any]) -> str:
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def world_hash(world: WorldState) -> str:
    return _canonical_digest(world.to_dict())


def session_hash(session: Session) -> str:
    payload = {
        **session.session_payload(),
        "event_trace": session.get_event_trace(),
    }
    return _canonical_digest(payload)
