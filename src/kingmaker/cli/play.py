from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from kingmaker.cli.pygame_viewer import run_pygame_viewer
from kingmaker.cli.viewer import run_demo
from kingmaker.content.io import DEFAULT_MAP_PATH, FOG_OF_WAR_MAP_PATH

VIEWER_CHOICES = ("pygame", "ascii")
DEFAULT_VIEWER = "pygame"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kingmaker-play", description="Kingmaker map launcher.")
    parser.add_argument("--map-path", default=DEFAULT_MAP_PATH, help="World roster JSON to load at startup.")
    parser.add_argument(
        "--fog-of-war",
        action="store_true",
        help=f"Start from the fog-of-war roster ({FOG_OF_WAR_MAP_PATH}) instead of --map-path.",
    )
    parser.add_argument("--viewer", choices=VIEWER_CHOICES, default=DEFAULT_VIEWER, help="Front end to run.")
    parser.add_argument("--headless", action="store_true", help="Run the pygame startup path in headless mode.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    map_path = FOG_OF_WAR_MAP_PATH if args.fog_of_war else args.map_path
    if not Path(map_path).exists():
        print(f"[kingmaker.play] map not found: {map_path}", file=sys.stderr)
        return 1
    if args.viewer == "ascii":
        try:
            run_demo(map_path)
        except ValueError as exc:
            print(f"[kingmaker.play] failed to initialize world: {exc}", file=sys.stderr)
            return 1
        return 0
    return run_pygame_viewer(map_path=map_path, headless=args.headless)


if __name__ == "__main__":
    raise SystemExit(main())
