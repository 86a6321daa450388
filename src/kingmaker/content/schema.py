from __future__ import annotations

from typing import Any

SUPPORTED_SCHEMA_VERSIONS = {1}
REQUIRED_TILE_FIELDS = {"tile_id", "name", "coord", "region", "kind", "discovered"}
REQUIRED_REGION_FIELDS = {"region_id", "name"}
VALID_TILE_KINDS = {"capital", "wild"}


def _require_int(value: Any, *, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")


def _validate_region_shape(region: Any, *, field_name: str) -> str:
    if not isinstance(region, dict):
        raise ValueError(f"{field_name} must be an object")
    missing = REQUIRED_REGION_FIELDS - set(region.keys())
    if missing:
        raise ValueError(f"{field_name} missing fields: {sorted(missing)}")

    region_id = region["region_id"]
    if not isinstance(region_id, str) or not region_id:
        raise ValueError(f"{field_name}.region_id must be a non-empty string")
    if not isinstance(region["name"], str) or not region["name"]:
        raise ValueError(f"{field_name}.name must be a non-empty string")
    if "hub" in region and not isinstance(region["hub"], bool):
        raise ValueError(f"{field_name}.hub must be a boolean")
    for text_field in ("short_description", "danger_level"):
        if text_field in region and not isinstance(region[text_field], str):
            raise ValueError(f"{field_name}.{text_field} must be a string")
    if "color" in region:
        color = region["color"]
        if not isinstance(color, list) or len(color) != 3:
            raise ValueError(f"{field_name}.color must be a list of three integers")
        for index, channel in enumerate(color):
            _require_int(channel, field_name=f"{field_name}.color[{index}]")
    return region_id


def _validate_tile_shape(tile: Any, *, field_name: str, region_ids: set[str]) -> str:
    if not isinstance(tile, dict):
        raise ValueError(f"{field_name} must be an object")
    missing = REQUIRED_TILE_FIELDS - set(tile.keys())
    if missing:
        raise ValueError(f"{field_name} missing fields: {sorted(missing)}")

    tile_id = tile["tile_id"]
    if not isinstance(tile_id, str) or not tile_id:
        raise ValueError(f"{field_name}.tile_id must be a non-empty string")
    if not isinstance(tile["name"], str):
        raise ValueError(f"{field_name}.name must be a string")

    coord = tile["coord"]
    if not isinstance(coord, dict) or not {"q", "r"} <= coord.keys():
        raise ValueError(f"{field_name} invalid coord")
    _require_int(coord["q"], field_name=f"{field_name}.coord.q")
    _require_int(coord["r"], field_name=f"{field_name}.coord.r")

    if tile["region"] not in region_ids:
        raise ValueError(f"{field_name} unknown region: {tile['region']}")
    if tile["kind"] not in VALID_TILE_KINDS:
        raise ValueError(f"{field_name} invalid kind: {tile['kind']}")
    if not isinstance(tile["discovered"], bool):
        raise ValueError(f"{field_name}.discovered must be a boolean")
    return tile_id


def validate_world_payload(payload: dict[str, Any]) -> None:
    if not isinstance(payload, dict):
        raise ValueError("world payload must be an object")

    schema_version = payload.get("schema_version")
    if schema_version not in SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    regions = payload.get("regions")
    if not isinstance(regions, list) or not regions:
        raise ValueError("world payload must contain non-empty list field: regions")
    region_ids: set[str] = set()
    hub_count = 0
    for index, region in enumerate(regions):
        region_id = _validate_region_shape(region, field_name=f"regions[{index}]")
        if region_id in region_ids:
            raise ValueError(f"duplicate region_id: {region_id}")
        region_ids.add(region_id)
        if region.get("hub", False):
            hub_count += 1
    if hub_count != 1:
        raise ValueError(f"regions must declare exactly one hub, found {hub_count}")

    tiles = payload.get("tiles")
    if not isinstance(tiles, list) or not tiles:
        raise ValueError("world payload must contain non-empty list field: tiles")
    tile_ids: set[str] = set()
    capital_count = 0
    for index, tile in enumerate(tiles):
        tile_id = _validate_tile_shape(tile, field_name=f"tiles[{index}]", region_ids=region_ids)
        if tile_id in tile_ids:
            raise ValueError(f"duplicate tile_id: {tile_id}")
        tile_ids.add(tile_id)
        if tile["kind"] == "capital":
            capital_count += 1
    if capital_count != 1:
        raise ValueError(f"tiles must contain exactly one capital, found {capital_count}")

    party_tile_id = payload.get("party_tile_id")
    if party_tile_id is not None and party_tile_id not in tile_ids:
        raise ValueError(f"party_tile_id references unknown tile: {party_tile_id}")

    capital_name = payload.get("capital_name")
    if capital_name is not None and (not isinstance(capital_name, str) or not capital_name.strip()):
        raise ValueError("capital_name must be a non-empty string when present")
