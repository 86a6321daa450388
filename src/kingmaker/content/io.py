from __future__ import annotations

import json
from pathlib import Path

from kingmaker.content.schema import validate_world_payload
from kingmaker.sim.world import WorldState

DEFAULT_MAP_PATH = "content/worlds/regions_map.json"
FOG_OF_WAR_MAP_PATH = "content/worlds/fog_of_war_map.json"


def load_world_json(path: str | Path) -> WorldState:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    validate_world_payload(payload)
    return WorldState.from_dict(payload)
