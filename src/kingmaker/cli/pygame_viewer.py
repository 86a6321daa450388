from __future__ import annotations

import argparse
import importlib.metadata
import math
import os
import platform
import sys
from typing import Any

from kingmaker.content.io import DEFAULT_MAP_PATH, load_world_json
from kingmaker.cli.viewer import SessionController, describe_outcome
from kingmaker.sim.core import Session
from kingmaker.sim.hash import world_hash
from kingmaker.sim.movement import axial_to_pixel, hex_polygon_points
from kingmaker.sim.navigation import CapitalScreen, TileDetailScreen
from kingmaker.sim.world import CAPITAL_TILE_KIND, TileRecord, WorldState

HEX_SIZE = 60
WINDOW_SIZE = (1024, 720)
PANEL_HEIGHT = 150
FRAME_RATE = 30
HEADLESS_ENV_VAR = "KINGMAKER_HEADLESS"

CAPITAL_COLOR = (255, 215, 0)
UNDISCOVERED_COLOR = (58, 58, 64)
STROKE_COLOR = (44, 44, 44)
REACHABLE_STROKE_COLOR = (240, 240, 240)
PARTY_COLOR = (200, 40, 40)
BACKGROUND_COLOR = (18, 22, 28)
TEXT_COLOR = (232, 232, 232)

pygame: Any | None = None


def _map_center() -> tuple[float, float]:
    return (WINDOW_SIZE[0] / 2.0, (WINDOW_SIZE[1] - PANEL_HEIGHT) / 2.0)


def _tile_center(tile: TileRecord, center: tuple[float, float]) -> tuple[float, float]:
    x, y = axial_to_pixel(tile.coord, HEX_SIZE)
    return (center[0] + x, center[1] + y)


def _tile_fill_color(world: WorldState, tile: TileRecord) -> tuple[int, int, int]:
    if not tile.discovered:
        return UNDISCOVERED_COLOR
    if tile.kind == CAPITAL_TILE_KIND:
        return CAPITAL_COLOR
    region = world.region(tile.region)
    return region.color if region is not None else UNDISCOVERED_COLOR


def _find_tile_at_pixel(world: WorldState, pixel: tuple[int, int], center: tuple[float, float]) -> str | None:
    """Nearest tile whose inscribed circle contains the pixel."""
    inner_radius = HEX_SIZE * math.sqrt(3.0) / 2.0
    best_id: str | None = None
    best_distance = inner_radius
    for tile in world.tiles.values():
        tile_x, tile_y = _tile_center(tile, center)
        distance = math.hypot(pixel[0] - tile_x, pixel[1] - tile_y)
        if distance <= best_distance:
            best_distance = distance
            best_id = tile.tile_id
    return best_id


def _split_label(name: str, max_length: int = 12) -> list[str]:
    if len(name) <= max_length:
        return [name]
    words = name.split(" ")
    if len(words) < 2:
        return [name[:max_length]]
    mid = math.ceil(len(words) / 2)
    return [" ".join(words[:mid]), " ".join(words[mid:])]


def _panel_lines(session: Session) -> list[str]:
    world = session.world
    party = world.party_tile()
    lines = [f"Party: {world.display_name(party)}"]
    screen = session.screen
    if isinstance(screen, TileDetailScreen):
        tile = world.tiles[screen.tile_id]
        region = world.region(tile.region)
        if region is not None:
            lines.append(f"{region.name}: {region.short_description} [{region.danger_level}]")
        lines.append("Esc: back to map")
    elif isinstance(screen, CapitalScreen):
        lines.append(f"Inside {world.capital_name}. Esc: back to map")
    elif session.is_on_capital():
        lines.append("Enter: enter the capital")
    else:
        lines.append("Click an outlined hex to move")
    return lines


def _draw_map(screen: Any, session: Session, font: Any) -> None:
    center = _map_center()
    reachable = set(session.legal_destinations())
    for tile in session.world.display_tiles():
        tile_center = _tile_center(tile, center)
        points = hex_polygon_points(tile_center, HEX_SIZE)
        pygame.draw.polygon(screen, _tile_fill_color(session.world, tile), points)
        stroke = REACHABLE_STROKE_COLOR if tile.tile_id in reachable else STROKE_COLOR
        pygame.draw.polygon(screen, stroke, points, 2)

        label = tile.name if tile.discovered else "???"
        lines = _split_label(label)
        for index, line in enumerate(lines):
            text = font.render(line, True, TEXT_COLOR if tile.kind != CAPITAL_TILE_KIND else STROKE_COLOR)
            offset_y = (index - (len(lines) - 1) / 2.0) * font.get_linesize()
            screen.blit(text, text.get_rect(center=(tile_center[0], tile_center[1] + offset_y)))

    party_center = _tile_center(session.world.party_tile(), center)
    pygame.draw.circle(screen, PARTY_COLOR, (int(party_center[0]), int(party_center[1] + HEX_SIZE / 2)), 10)


def _draw_panel(screen: Any, session: Session, font: Any, status_message: str | None) -> None:
    top = WINDOW_SIZE[1] - PANEL_HEIGHT
    pygame.draw.rect(screen, (30, 34, 42), pygame.Rect(0, top, WINDOW_SIZE[0], PANEL_HEIGHT))
    lines = _panel_lines(session)
    if status_message:
        lines.append(status_message)
    for index, line in enumerate(lines):
        screen.blit(font.render(line, True, TEXT_COLOR), (16, top + 12 + index * font.get_linesize()))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m kingmaker.cli.pygame_viewer",
        description="Run the Kingmaker pygame map viewer.",
    )
    parser.add_argument(
        "--map-path",
        default=DEFAULT_MAP_PATH,
        help="Path to world roster JSON.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver for CI/testing and exit after one frame.",
    )
    return parser


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[kingmaker.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def _build_viewer_session(map_path: str) -> Session:
    world = load_world_json(map_path)
    print(f"[kingmaker.viewer] loaded path={map_path} tiles={len(world.tiles)} world_hash={world_hash(world)}")
    return Session(world=world)


def _handle_event(event: Any, controller: SessionController) -> tuple[bool, str | None]:
    """Apply one pygame event; returns (keep_running, status_message)."""
    if event.type == pygame.QUIT:
        return False, None
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_RETURN:
            if controller.enter_capital():
                return True, None
            return True, "The party must stand on the capital to enter it."
        if event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            controller.back_to_global()
            return True, None
        if event.key == pygame.K_q:
            return False, None
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        if isinstance(controller.session.screen, CapitalScreen):
            return True, None
        tile_id = _find_tile_at_pixel(controller.session.world, event.pos, _map_center())
        if tile_id is None:
            return True, None
        return True, describe_outcome(controller.move(tile_id))
    return True, None


def run_pygame_viewer(map_path: str = DEFAULT_MAP_PATH, *, headless: bool = False) -> int:
    if headless or _env_flag_enabled(HEADLESS_ENV_VAR):
        headless = True
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[kingmaker.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()

    try:
        session = _build_viewer_session(map_path)
    except (OSError, ValueError) as exc:
        print(f"[kingmaker.viewer] failed to initialize world: {exc}", file=sys.stderr)
        return 1

    pygame_module = _ensure_pygame_imported()
    try:
        pygame_module.init()
    except Exception as exc:
        print(
            "[kingmaker.viewer] failed during pygame.init(): "
            f"{exc}. Hint: verify a working SDL video driver (set SDL_VIDEODRIVER=dummy for headless mode).",
            file=sys.stderr,
        )
        return 1

    try:
        pygame_module.display.set_caption("Kingmaker")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            "[kingmaker.viewer] failed during pygame.display.set_mode(...): "
            f"{exc}. Hint: use --headless or {HEADLESS_ENV_VAR}=1 without a display.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    font = pygame_module.font.Font(None, 20)
    controller = SessionController(session)
    clock = pygame_module.time.Clock()
    status_message: str | None = None
    running = True

    while running:
        for event in pygame_module.event.get():
            running, message = _handle_event(event, controller)
            if message is not None:
                status_message = message
            if not running:
                break

        screen.fill(BACKGROUND_COLOR)
        _draw_map(screen, session, font)
        _draw_panel(screen, session, font, status_message)
        pygame_module.display.flip()

        if headless:
            break
        clock.tick(FRAME_RATE)

    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    raise SystemExit(run_pygame_viewer(map_path=args.map_path, headless=args.headless))


if __name__ == "__main__":
    main()
