from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Union

from kingmaker.sim.movement import is_adjacent
from kingmaker.sim.navigation import (
    Directive,
    OpenTileDetail,
    Screen,
    ScreenState,
    StayOnGlobalView,
    directive_to_dict,
)
from kingmaker.sim.world import CAPITAL_TILE_KIND, RenameResult, WorldState

MAX_EVENT_TRACE = 256

MOVE_COMMAND_TYPE = "move"
ENTER_CAPITAL_COMMAND_TYPE = "enter_capital"
BACK_TO_GLOBAL_COMMAND_TYPE = "back_to_global"
RENAME_CAPITAL_COMMAND_TYPE = "rename_capital"
COMMAND_TYPES = {
    MOVE_COMMAND_TYPE,
    ENTER_CAPITAL_COMMAND_TYPE,
    BACK_TO_GLOBAL_COMMAND_TYPE,
    RENAME_CAPITAL_COMMAND_TYPE,
}

MOVE_OUTCOME_EVENT_TYPE = "move_outcome"
SCREEN_CHANGED_EVENT_TYPE = "screen_changed"
CAPITAL_RENAMED_EVENT_TYPE = "capital_renamed"
RENAME_REJECTED_EVENT_TYPE = "rename_rejected"

INVALID_UNKNOWN_TILE = "unknown-tile"
INVALID_NOT_ADJACENT = "not-adjacent"
INVALID_CROSS_REGION = "cross-region"
INVALID_STALE_ORIGIN = "stale-origin"


@dataclass(frozen=True)
class Moved:
    tile_id: str
    directive: Directive
    kind = "moved"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "tile_id": self.tile_id, "directive": directive_to_dict(self.directive)}


@dataclass(frozen=True)
class Invalid:
    reason: str
    kind = "invalid"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "reason": self.reason}


@dataclass(frozen=True)
class NoOp:
    kind = "noop"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


MoveOutcome = Union[Moved, Invalid, NoOp]


@dataclass
class SessionCommand:
    command_type: str
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.command_type, str) or self.command_type not in COMMAND_TYPES:
            raise ValueError(f"unsupported command_type: {self.command_type}")
        if not isinstance(self.params, dict):
            raise ValueError("params must be a dict")
        if self.command_type == MOVE_COMMAND_TYPE:
            to_tile_id = self.params.get("to_tile_id")
            if not isinstance(to_tile_id, str) or not to_tile_id:
                raise ValueError("move command requires non-empty string param: to_tile_id")
            from_tile_id = self.params.get("from_tile_id")
            if from_tile_id is not None and not isinstance(from_tile_id, str):
                raise ValueError("move command param from_tile_id must be a string when present")
        if self.command_type == RENAME_CAPITAL_COMMAND_TYPE and not isinstance(self.params.get("name"), str):
            raise ValueError("rename_capital command requires string param: name")

    def to_dict(self) -> dict[str, Any]:
        return {"command_type": self.command_type, "params": dict(self.params)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionCommand":
        return cls(command_type=data.get("command_type"), params=dict(data.get("params", {})))


class Session:
    """Single owner of mutable game state: world roster, party position, screen.

    Every write goes through ``attempt_move``, ``enter_capital``,
    ``back_to_global`` or ``rename_capital``. Invalid requests come back as
    outcome values; nothing here raises for a rejected move.
    """

    def __init__(self, world: WorldState) -> None:
        self.world = world
        self.screen_state = ScreenState()
        self.input_log: list[SessionCommand] = []
        self.event_trace: list[dict[str, Any]] = []
        self._next_event_seq = 1

    @property
    def screen(self) -> Screen:
        return self.screen_state.current

    @property
    def party_tile_id(self) -> str:
        return self.world.party_tile().tile_id

    def check_move(self, from_tile_id: str, to_tile_id: str) -> MoveOutcome | None:
        """Validate a single step without touching state; ``None`` means legal."""
        if to_tile_id == from_tile_id:
            return NoOp()

        origin = self.world.get_tile(from_tile_id)
        destination = self.world.get_tile(to_tile_id)
        if origin is None or destination is None:
            return Invalid(reason=INVALID_UNKNOWN_TILE)

        if not is_adjacent(origin.coord, destination.coord):
            return Invalid(reason=INVALID_NOT_ADJACENT)

        if (
            origin.region != destination.region
            and not self.world.is_hub(origin.region)
            and not self.world.is_hub(destination.region)
        ):
            return Invalid(reason=INVALID_CROSS_REGION)
        return None

    def _check_origin(self, origin_id: str) -> Invalid | None:
        # The party only ever steps from where it stands.
        if origin_id == self.party_tile_id:
            return None
        if self.world.get_tile(origin_id) is None:
            return Invalid(reason=INVALID_UNKNOWN_TILE)
        return Invalid(reason=INVALID_STALE_ORIGIN)

    def attempt_move(self, to_tile_id: str, *, from_tile_id: str | None = None) -> MoveOutcome:
        origin_id = self.party_tile_id if from_tile_id is None else from_tile_id
        trace_params = {"from_tile_id": origin_id, "to_tile_id": to_tile_id}
        rejection = self._check_origin(origin_id) or self.check_move(origin_id, to_tile_id)
        if rejection is not None:
            self._append_event(MOVE_OUTCOME_EVENT_TYPE, {**trace_params, **rejection.to_dict()})
            return rejection

        destination = self.world.tiles[to_tile_id]
        directive: Directive
        if destination.kind == CAPITAL_TILE_KIND:
            directive = StayOnGlobalView()
        else:
            directive = OpenTileDetail(tile_id=to_tile_id)

        self.world.party_tile_id = to_tile_id
        self.world.mark_discovered(to_tile_id)
        before = self.screen
        after = self.screen_state.apply_directive(directive)

        outcome = Moved(tile_id=to_tile_id, directive=directive)
        self._append_event(MOVE_OUTCOME_EVENT_TYPE, {**trace_params, **outcome.to_dict()})
        self._record_screen_change(before, after)
        return outcome

    def legal_destinations(self) -> tuple[str, ...]:
        origin_id = self.party_tile_id
        return tuple(
            tile_id
            for tile_id in self.world.tiles
            if tile_id != origin_id and self.check_move(origin_id, tile_id) is None
        )

    def enter_capital(self) -> bool:
        if self.party_tile_id != self.world.capital_tile_id:
            return False
        before = self.screen
        if not self.screen_state.enter_capital():
            return False
        self._record_screen_change(before, self.screen)
        return True

    def back_to_global(self) -> Screen:
        before = self.screen
        after = self.screen_state.back_to_global()
        self._record_screen_change(before, after)
        return after

    def rename_capital(self, new_name: str) -> RenameResult:
        result = self.world.rename_capital(new_name)
        if result.ok:
            self._append_event(CAPITAL_RENAMED_EVENT_TYPE, {"name": result.name})
        else:
            self._append_event(RENAME_REJECTED_EVENT_TYPE, {"reason": result.reason})
        return result

    def is_on_capital(self) -> bool:
        return self.party_tile_id == self.world.capital_tile_id

    def apply_command(self, command: SessionCommand | dict[str, Any]) -> Any:
        normalized = command if isinstance(command, SessionCommand) else SessionCommand.from_dict(command)
        self.input_log.append(normalized)
        if normalized.command_type == MOVE_COMMAND_TYPE:
            return self.attempt_move(
                str(normalized.params["to_tile_id"]),
                from_tile_id=normalized.params.get("from_tile_id"),
            )
        if normalized.command_type == ENTER_CAPITAL_COMMAND_TYPE:
            return self.enter_capital()
        if normalized.command_type == BACK_TO_GLOBAL_COMMAND_TYPE:
            return self.back_to_global()
        return self.rename_capital(str(normalized.params["name"]))

    def get_event_trace(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self.event_trace)

    def session_payload(self) -> dict[str, Any]:
        return {
            "world": self.world.to_dict(),
            "screen": self.screen.to_dict(),
            "input_log": [command.to_dict() for command in self.input_log],
        }

    def _record_screen_change(self, before: Screen, after: Screen) -> None:
        if before == after:
            return
        self._append_event(SCREEN_CHANGED_EVENT_TYPE, {"from": before.to_dict(), "to": after.to_dict()})

    def _append_event(self, event_type: str, params: dict[str, Any]) -> None:
        self.event_trace.append({"seq": self._next_event_seq, "event_type": event_type, "params": copy.deepcopy(params)})
        self._next_event_seq += 1
        if len(self.event_trace) > MAX_EVENT_TRACE:
            overflow = len(self.event_trace) - MAX_EVENT_TRACE
            del self.event_trace[:overflow]


def run_replay(initial_world: WorldState, command_log: list[SessionCommand | dict[str, Any]]) -> Session:
    session = Session(world=WorldState.from_dict(initial_world.to_dict()))
    for command in command_log:
        session.apply_command(command)
    return session
