from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

GLOBAL_SCREEN_KIND = "global"
TILE_DETAIL_SCREEN_KIND = "tile"
CAPITAL_SCREEN_KIND = "capital"


@dataclass(frozen=True)
class GlobalScreen:
    kind = GLOBAL_SCREEN_KIND

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class TileDetailScreen:
    tile_id: str
    kind = TILE_DETAIL_SCREEN_KIND

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "tile_id": self.tile_id}


@dataclass(frozen=True)
class CapitalScreen:
    kind = CAPITAL_SCREEN_KIND

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


Screen = Union[GlobalScreen, TileDetailScreen, CapitalScreen]


@dataclass(frozen=True)
class StayOnGlobalView:
    """Directive for landing on the capital: the overview stays up."""


@dataclass(frozen=True)
class OpenTileDetail:
    tile_id: str


Directive = Union[StayOnGlobalView, OpenTileDetail]


def directive_to_dict(directive: Directive) -> dict[str, Any]:
    if isinstance(directive, OpenTileDetail):
        return {"kind": "open_tile_detail", "tile_id": directive.tile_id}
    return {"kind": "stay_on_global_view"}


class ScreenState:
    """Active-view state machine: Global, TileDetail(tile_id) or Capital.

    TileDetail and Capital never transition into each other directly; both
    routes pass through Global.
    """

    def __init__(self) -> None:
        self.current: Screen = GlobalScreen()

    def apply_directive(self, directive: Directive) -> Screen:
        if isinstance(directive, OpenTileDetail):
            self.current = TileDetailScreen(tile_id=directive.tile_id)
        else:
            self.current = GlobalScreen()
        return self.current

    def enter_capital(self) -> bool:
        if isinstance(self.current, TileDetailScreen):
            return False
        self.current = CapitalScreen()
        return True

    def back_to_global(self) -> Screen:
        self.current = GlobalScreen()
        return self.current
