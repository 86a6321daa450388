from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CAPITAL_TILE_KIND = "capital"
WILD_TILE_KIND = "wild"
TILE_KINDS = {CAPITAL_TILE_KIND, WILD_TILE_KIND}
DEFAULT_CAPITAL_NAME = "CALMAFAR"
CAPITAL_NAME_MAX_LENGTH = 30
RENAME_REASON_EMPTY = "empty"
RENAME_REASON_TOO_LONG = "too-long"
DEFAULT_REGION_COLOR = (74, 103, 65)


def _require_non_empty_str(value: Any, *, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


def _normalize_color(value: Any, *, field_name: str) -> tuple[int, int, int]:
    if value is None:
        return DEFAULT_REGION_COLOR
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{field_name} must be a list of three integers")
    channels: list[int] = []
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise ValueError(f"{field_name} channels must be integers within [0, 255]")
        channels.append(channel)
    return (channels[0], channels[1], channels[2])


@dataclass(frozen=True, order=True)
class HexCoord:
    """Axial hex coordinate (q, r)."""

    q: int
    r: int

    def to_dict(self) -> dict[str, int]:
        return {"q": self.q, "r": self.r}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HexCoord":
        return cls(q=int(data["q"]), r=int(data["r"]))


@dataclass(frozen=True)
class RegionDef:
    region_id: str
    name: str
    hub: bool = False
    short_description: str = ""
    danger_level: str = ""
    color: tuple[int, int, int] = DEFAULT_REGION_COLOR

    def __post_init__(self) -> None:
        _require_non_empty_str(self.region_id, field_name="region.region_id")
        _require_non_empty_str(self.name, field_name="region.name")
        if not isinstance(self.hub, bool):
            raise ValueError("region.hub must be a boolean")

    def to_dict(self) -> dict[str, Any]:
        return {
            "region_id": self.region_id,
            "name": self.name,
            "hub": self.hub,
            "short_description": self.short_description,
            "danger_level": self.danger_level,
            "color": list(self.color),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegionDef":
        return cls(
            region_id=str(data["region_id"]),
            name=str(data.get("name", data["region_id"])),
            hub=bool(data.get("hub", False)),
            short_description=str(data.get("short_description", "")),
            danger_level=str(data.get("danger_level", "")),
            color=_normalize_color(data.get("color"), field_name=f"region[{data['region_id']}].color"),
        )


@dataclass(frozen=True)
class TileRecord:
    """One map tile. Only ``discovered`` changes after load, via ``WorldState``."""

    tile_id: str
    name: str
    coord: HexCoord
    region: str
    kind: str = WILD_TILE_KIND
    discovered: bool = False

    def __post_init__(self) -> None:
        _require_non_empty_str(self.tile_id, field_name="tile.tile_id")
        if not isinstance(self.name, str):
            raise ValueError(f"tile[{self.tile_id}].name must be a string")
        if not isinstance(self.coord, HexCoord):
            raise ValueError(f"tile[{self.tile_id}].coord must be a HexCoord")
        _require_non_empty_str(self.region, field_name=f"tile[{self.tile_id}].region")
        if self.kind not in TILE_KINDS:
            raise ValueError(f"invalid tile kind: {self.kind}")
        if not isinstance(self.discovered, bool):
            raise ValueError(f"tile[{self.tile_id}].discovered must be a boolean")

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "name": self.name,
            "coord": self.coord.to_dict(),
            "region": self.region,
            "kind": self.kind,
            "discovered": self.discovered,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TileRecord":
        return cls(
            tile_id=str(data["tile_id"]),
            name=str(data.get("name", data["tile_id"])),
            coord=HexCoord.from_dict(data["coord"]),
            region=str(data["region"]),
            kind=str(data.get("kind", WILD_TILE_KIND)),
            discovered=bool(data.get("discovered", False)),
        )


@dataclass(frozen=True)
class RenameResult:
    ok: bool
    reason: str | None = None
    name: str | None = None


@dataclass
class WorldState:
    """Tile roster plus party position and the capital display name.

    The roster is fixed after construction: tiles are never added, removed or
    re-keyed, and the only per-tile mutation is the monotonic ``discovered``
    flag set through ``mark_discovered``.
    """

    tiles: dict[str, TileRecord] = field(default_factory=dict)
    regions: dict[str, RegionDef] = field(default_factory=dict)
    party_tile_id: str | None = None
    capital_name: str = DEFAULT_CAPITAL_NAME
    hub_region_id: str = field(init=False, default="")
    capital_tile_id: str = field(init=False, default="")

    def __post_init__(self) -> None:
        if not self.tiles:
            raise ValueError("world must contain at least one tile")
        if not self.regions:
            raise ValueError("world must declare at least one region")

        for region_id, region in self.regions.items():
            if region.region_id != region_id:
                raise ValueError(f"region key mismatch: {region_id} != {region.region_id}")
        hubs = [region.region_id for region in self.regions.values() if region.hub]
        if len(hubs) != 1:
            raise ValueError(f"world must declare exactly one hub region, found {len(hubs)}")
        self.hub_region_id = hubs[0]

        seen_coords: dict[HexCoord, str] = {}
        capitals: list[str] = []
        for tile_id, tile in self.tiles.items():
            if tile.tile_id != tile_id:
                raise ValueError(f"tile key mismatch: {tile_id} != {tile.tile_id}")
            if tile.region not in self.regions:
                raise ValueError(f"tile[{tile_id}] references unknown region: {tile.region}")
            if tile.coord in seen_coords:
                raise ValueError(
                    f"duplicate tile coord ({tile.coord.q},{tile.coord.r}): {seen_coords[tile.coord]}, {tile_id}"
                )
            seen_coords[tile.coord] = tile_id
            if tile.kind == CAPITAL_TILE_KIND:
                capitals.append(tile_id)

        if len(capitals) != 1:
            raise ValueError(f"world must contain exactly one capital tile, found {len(capitals)}")
        self.capital_tile_id = capitals[0]
        if self.tiles[self.capital_tile_id].region != self.hub_region_id:
            raise ValueError(f"capital tile must lie in hub region '{self.hub_region_id}'")

        if self.party_tile_id is None:
            self.party_tile_id = self.capital_tile_id
        if self.party_tile_id not in self.tiles:
            raise ValueError(f"party_tile_id references unknown tile: {self.party_tile_id}")
        if not isinstance(self.capital_name, str) or not self.capital_name.strip():
            raise ValueError("capital_name must be a non-empty string")

    def get_tile(self, tile_id: str) -> TileRecord | None:
        return self.tiles.get(tile_id)

    def capital_tile(self) -> TileRecord:
        return self.tiles[self.capital_tile_id]

    def party_tile(self) -> TileRecord:
        return self.tiles[self.party_tile_id]

    def region(self, region_id: str) -> RegionDef | None:
        return self.regions.get(region_id)

    def is_hub(self, region_id: str) -> bool:
        return region_id == self.hub_region_id

    def tiles_in_region(self, region_id: str) -> tuple[TileRecord, ...]:
        return tuple(tile for tile in self.tiles.values() if tile.region == region_id)

    def mark_discovered(self, tile_id: str) -> None:
        tile = self.tiles.get(tile_id)
        if tile is None or tile.discovered:
            return
        self.tiles[tile_id] = TileRecord(
            tile_id=tile.tile_id,
            name=tile.name,
            coord=tile.coord,
            region=tile.region,
            kind=tile.kind,
            discovered=True,
        )

    def rename_capital(self, new_name: str) -> RenameResult:
        trimmed = new_name.strip()
        if not trimmed:
            return RenameResult(ok=False, reason=RENAME_REASON_EMPTY)
        if len(trimmed) > CAPITAL_NAME_MAX_LENGTH:
            return RenameResult(ok=False, reason=RENAME_REASON_TOO_LONG)
        self.capital_name = trimmed
        return RenameResult(ok=True, name=trimmed)

    def display_name(self, tile: TileRecord) -> str:
        if tile.tile_id == self.capital_tile_id:
            return self.capital_name
        return tile.name

    def display_tiles(self) -> tuple[TileRecord, ...]:
        """Roster as front ends see it, with the capital name override applied."""
        projected: list[TileRecord] = []
        for tile in self.tiles.values():
            if tile.tile_id == self.capital_tile_id:
                tile = TileRecord(
                    tile_id=tile.tile_id,
                    name=self.capital_name,
                    coord=tile.coord,
                    region=tile.region,
                    kind=tile.kind,
                    discovered=tile.discovered,
                )
            projected.append(tile)
        return tuple(projected)

    def to_dict(self) -> dict[str, Any]:
        return {
            "capital_name": self.capital_name,
            "party_tile_id": self.party_tile_id,
            "regions": [self.regions[region_id].to_dict() for region_id in self.regions],
            "tiles": [self.tiles[tile_id].to_dict() for tile_id in self.tiles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorldState":
        regions: dict[str, RegionDef] = {}
        for row in data.get("regions", []):
            region = RegionDef.from_dict(row)
            if region.region_id in regions:
                raise ValueError(f"duplicate region_id: {region.region_id}")
            regions[region.region_id] = region

        tiles: dict[str, TileRecord] = {}
        for row in data.get("tiles", []):
            tile = TileRecord.from_dict(row)
            if tile.tile_id in tiles:
                raise ValueError(f"duplicate tile_id: {tile.tile_id}")
            tiles[tile.tile_id] = tile

        party_tile_id = data.get("party_tile_id")
        return cls(
            tiles=tiles,
            regions=regions,
            party_tile_id=str(party_tile_id) if party_tile_id is not None else None,
            capital_name=str(data.get("capital_name", DEFAULT_CAPITAL_NAME)),
        )
