"""Preview a generated level as ASCII.

    python -m delve --depth 3 --seed bracketon
    python -m delve --chain maze --width 60 --height 30 --verbose
"""

import argparse
import logging

from . import config
from .environment.generators import CHAIN_NAMES, generate_level
from .environment.generators.base import BuildState

PLAYER_GLYPH = "@"


def render(state: BuildState) -> list[str]:
    """Rows of tile glyphs, with the starting position marked."""
    rows = state.map.to_ascii()
    if state.starting_position is not None:
        x, y = state.starting_position
        rows[y] = rows[y][:x] + PLAYER_GLYPH + rows[y][x + 1 :]
    return rows


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Preview a generated level")
    parser.add_argument(
        "--depth", type=int, default=1, help="Dungeon depth (default: 1)"
    )
    parser.add_argument(
        "--seed",
        type=str,
        default=config.RANDOM_SEED,
        help=f"Master seed (default: {config.RANDOM_SEED})",
    )
    parser.add_argument("--width", type=int, default=config.MAP_WIDTH, help="Map width")
    parser.add_argument(
        "--height", type=int, default=config.MAP_HEIGHT, help="Map height"
    )
    parser.add_argument(
        "--chain",
        choices=CHAIN_NAMES,
        help="Run a named chain instead of the depth's own",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    state = generate_level(
        args.depth,
        width=args.width,
        height=args.height,
        seed=args.seed,
        chain_name=args.chain,
    )

    print(f"{state.map.name} (depth {state.map.depth})")
    for row in render(state):
        print(row)
    print(f"{len(state.spawn_list)} spawns, start at {state.starting_position}")


if __name__ == "__main__":
    main()
