from __future__ import annotations

from typing import Any, Callable

from kingmaker.content.io import DEFAULT_MAP_PATH, load_world_json
from kingmaker.sim.core import Invalid, Moved, MoveOutcome, NoOp, Session, SessionCommand
from kingmaker.sim.navigation import CapitalScreen, TileDetailScreen
from kingmaker.sim.world import HexCoord

KIND_GLYPHS = {"capital": "C", "wild": "."}
UNDISCOVERED_GLYPH = "?"


class AsciiViewer:
    """Read-only projection of session state for terminal display."""

    def render(self, session: Session) -> str:
        world = session.world
        lines: list[str] = [f"screen={session.screen.kind} party={session.party_tile_id}"]

        tiles = sorted(world.display_tiles(), key=lambda t: (t.coord.r, t.coord.q))
        by_row: dict[int, list[str]] = {}
        for tile in tiles:
            glyph = KIND_GLYPHS.get(tile.kind, "?") if tile.discovered else UNDISCOVERED_GLYPH
            marker = "@" if tile.tile_id == session.party_tile_id else " "
            label = tile.name if tile.discovered else "???"
            by_row.setdefault(tile.coord.r, []).append(f"{marker}({tile.coord.q:>2},{tile.coord.r:>2}) {glyph} {label}")

        for r in sorted(by_row):
            lines.append(f"r={r:>2}: " + " | ".join(by_row[r]))

        lines.extend(self.render_screen(session))
        return "\n".join(lines)

    def render_screen(self, session: Session) -> list[str]:
        world = session.world
        screen = session.screen
        if isinstance(screen, TileDetailScreen):
            tile = world.tiles[screen.tile_id]
            region = world.region(tile.region)
            lines = [f"== {world.display_name(tile)} =="]
            if region is not None:
                lines.append(f"region: {region.name} ({region.danger_level or 'unknown danger'})")
                if region.short_description:
                    lines.append(region.short_description)
            return lines
        if isinstance(screen, CapitalScreen):
            return [f"== {world.capital_name} ==", "You stand within the capital walls."]
        if session.is_on_capital():
            return ["(enter) to enter the capital"]
        return []


def describe_outcome(outcome: MoveOutcome) -> str:
    if isinstance(outcome, Moved):
        return f"moved to {outcome.tile_id}"
    if isinstance(outcome, Invalid):
        return f"cannot move: {outcome.reason}"
    if isinstance(outcome, NoOp):
        return "already there"
    return str(outcome)


class SessionController:
    """Small command adapter; issues commands to the session but does not own state."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def move(self, tile_id: str) -> MoveOutcome:
        return self.session.apply_command(SessionCommand("move", {"to_tile_id": tile_id}))

    def goto(self, q: int, r: int) -> MoveOutcome | None:
        target = HexCoord(q, r)
        for tile in self.session.world.tiles.values():
            if tile.coord == target:
                return self.move(tile.tile_id)
        return None

    def enter_capital(self) -> bool:
        return self.session.apply_command(SessionCommand("enter_capital"))

    def back_to_global(self) -> None:
        self.session.apply_command(SessionCommand("back_to_global"))

    def rename_capital(self, name: str) -> Any:
        return self.session.apply_command(SessionCommand("rename_capital", {"name": name}))


def handle_line(raw: str, controller: SessionController, view: AsciiViewer) -> str | None:
    """Run one REPL line; returns the text to print or ``None`` to quit."""
    raw = raw.strip()
    if raw in {"quit", "exit"}:
        return None
    if raw == "show":
        return view.render(controller.session)
    if raw == "reachable":
        return " ".join(controller.session.legal_destinations()) or "<none>"
    if raw == "enter":
        if controller.enter_capital():
            return view.render(controller.session)
        return "not on the capital"
    if raw == "back":
        controller.back_to_global()
        return view.render(controller.session)

    parts = raw.split()
    if len(parts) == 2 and parts[0] == "move":
        outcome = controller.move(parts[1])
        return describe_outcome(outcome) + "\n" + view.render(controller.session)
    if len(parts) == 3 and parts[0] == "goto":
        try:
            q, r = int(parts[1]), int(parts[2])
        except ValueError:
            return "goto expects two integers"
        outcome = controller.goto(q, r)
        if outcome is None:
            return "no tile at that coordinate"
        return describe_outcome(outcome) + "\n" + view.render(controller.session)
    if parts and parts[0] == "rename":
        result = controller.rename_capital(raw[len("rename"):])
        if result.ok:
            return f"capital renamed to {result.name}"
        return f"rename rejected: {result.reason}"
    return "unknown command"


def run_demo(map_path: str = DEFAULT_MAP_PATH, *, input_fn: Callable[[str], str] = input) -> None:
    session = Session(world=load_world_json(map_path))
    view = AsciiViewer()
    controller = SessionController(session)

    print("Kingmaker map. Commands: show | move <tile_id> | goto <q> <r> | reachable | enter | back | rename <name> | quit")
    print(view.render(session))

    while True:
        try:
            raw = input_fn("> ")
        except EOFError:
            break
        reply = handle_line(raw, controller, view)
        if reply is None:
            break
        print(reply)


if __name__ == "__main__":
    run_demo()
