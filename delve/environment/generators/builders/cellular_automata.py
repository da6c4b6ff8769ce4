"""Cellular automata caves.

Every interior tile starts as random noise, then a majority rule is applied
repeatedly: a tile surrounded by more than four walls becomes wall, and so
does a tile with no walls around it, which breaks up wide open floor into
pillars. Anything else becomes floor. Each round reads a frozen copy of the
previous round, so the result never depends on scan order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from delve import config
from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG

_NEIGHBOR_OFFSETS = [
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
]


class CellularAutomataBuilder(InitialBuilder):
    def __init__(
        self,
        iterations: int = config.CA_ITERATIONS,
        floor_roll_threshold: int = config.CA_FLOOR_ROLL_THRESHOLD,
    ) -> None:
        self.iterations = iterations
        self.floor_roll_threshold = floor_roll_threshold

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map

        # Seed row by row so the draw order is fixed
        for y in range(1, game_map.height - 1):
            for x in range(1, game_map.width - 1):
                if roll_d(rng, 100) > self.floor_roll_threshold:
                    game_map.tiles[x, y] = TileTypeID.FLOOR
                else:
                    game_map.tiles[x, y] = TileTypeID.WALL
        state.take_snapshot()

        for _ in range(self.iterations):
            smooth(game_map.tiles)
            state.take_snapshot()


def smooth(tiles: np.ndarray) -> None:
    """Apply one majority-rule round to the interior of a tile grid in place."""
    width, height = tiles.shape
    walls = (tiles == TileTypeID.WALL).astype(np.int8)

    neighbors = np.zeros((width - 2, height - 2), dtype=np.int8)
    for dx, dy in _NEIGHBOR_OFFSETS:
        neighbors += walls[1 + dx : width - 1 + dx, 1 + dy : height - 1 + dy]

    becomes_wall = (neighbors > 4) | (neighbors == 0)
    tiles[1:-1, 1:-1] = np.where(becomes_wall, TileTypeID.WALL, TileTypeID.FLOOR)
