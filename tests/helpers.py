from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from delve.environment.generators.base import BuildState
from delve.environment.map import GameMap
from delve.environment.tile_types import TileTypeID
from delve.types import WorldTilePos
from delve.util.pathfinding import dijkstra_map

ASCII_TILES: dict[str, TileTypeID] = {
    "#": TileTypeID.WALL,
    ".": TileTypeID.FLOOR,
    "_": TileTypeID.WOOD_FLOOR,
    ">": TileTypeID.DOWN_STAIRS,
    ":": TileTypeID.ROAD,
    '"': TileTypeID.GRASS,
    "~": TileTypeID.SHALLOW_WATER,
    "w": TileTypeID.DEEP_WATER,
    ";": TileTypeID.GRAVEL,
}


def make_state(
    width: int = 20,
    height: int = 12,
    depth: int = 1,
    fill: TileTypeID = TileTypeID.WALL,
) -> BuildState:
    """A build state whose map is filled with a single tile type."""
    state = BuildState.create(depth, width, height, name="Test Map")
    state.map.tiles[:] = fill
    return state


def state_from_ascii(rows: Sequence[str], depth: int = 1) -> BuildState:
    """Build a state from rows of ASCII_TILES characters, top row first."""
    height = len(rows)
    width = len(rows[0])
    state = make_state(width, height, depth)
    for y, row in enumerate(rows):
        assert len(row) == width, f"Row {y} is {len(row)} wide, expected {width}"
        for x, ch in enumerate(row):
            state.map.tiles[x, y] = ASCII_TILES[ch]
    return state


def open_room_state(width: int = 20, height: int = 12, depth: int = 1) -> BuildState:
    """Floor everywhere except a one tile wall border."""
    state = make_state(width, height, depth, fill=TileTypeID.FLOOR)
    state.map.tiles[0, :] = TileTypeID.WALL
    state.map.tiles[-1, :] = TileTypeID.WALL
    state.map.tiles[:, 0] = TileTypeID.WALL
    state.map.tiles[:, -1] = TileTypeID.WALL
    return state


def reachable_mask(game_map: GameMap, start: WorldTilePos) -> np.ndarray:
    """Boolean (width, height) mask of tiles reachable from ``start``."""
    game_map.populate_blocked()
    distances = dijkstra_map(game_map, [game_map.xy_idx(*start)])
    return np.isfinite(distances)


class FixedRolls:
    """Stands in for a stream, answering each randint with the next preset value."""

    def __init__(self, values: Sequence[int]) -> None:
        self.values = list(values)
        self.index = 0

    def randint(self, a: int, b: int) -> int:
        value = self.values[self.index]
        assert a <= value <= b, f"Roll {value} outside {a}..{b}"
        self.index += 1
        return value
