"""Cave dressing for the limestone levels.

CaveDecorator scatters gravel, pools and rock formations over an organic
map. CaveTransition turns the right half of a cave level into a dwarven
BSP dungeon, for the level that leads from the caverns into the fortress.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.generators.builders.bsp_dungeon import BspDungeonBuilder
from delve.environment.generators.chain import BuilderChain
from delve.environment.generators.meta.corridors import NearestCorridors
from delve.environment.generators.meta.rooms import (
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
)
from delve.environment.generators.meta.spawning import RoomBasedSpawner
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d
from delve.util.rng import fork

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class CaveDecorator(MetaBuilder):
    """Dress a cave: gravel and shallow pools on the floor, water and rock in
    the walls.

    Floor becomes gravel on a 1-in-6 roll, or shallow water on a 1-in-10
    roll. A wall with exactly two wall neighbours becomes deep water; one
    with a single wall neighbour becomes a stalactite or a stalagmite on a
    1-in-4 roll each. Neighbours are counted on the undecorated map.
    """

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        before = game_map.tiles.copy(order="F")

        for y in range(game_map.height):
            for x in range(game_map.width):
                tile = before[x, y]
                if tile == TileTypeID.FLOOR:
                    if roll_d(rng, 6) == 1:
                        game_map.tiles[x, y] = TileTypeID.GRAVEL
                    elif roll_d(rng, 10) == 1:
                        game_map.tiles[x, y] = TileTypeID.SHALLOW_WATER
                elif tile == TileTypeID.WALL:
                    neighbors = _wall_neighbors(before, x, y)
                    if neighbors == 2:
                        game_map.tiles[x, y] = TileTypeID.DEEP_WATER
                    elif neighbors == 1:
                        match roll_d(rng, 4):
                            case 1:
                                game_map.tiles[x, y] = TileTypeID.STALACTITE
                            case 2:
                                game_map.tiles[x, y] = TileTypeID.STALAGMITE

        game_map.outdoors = False
        state.take_snapshot()


class CaveTransition(MetaBuilder):
    """Replace the right half of the map with a BSP dungeon.

    The dungeon is built by its own chain on a forked stream. Spawns from the
    cave are kept on the left half and the dungeon's room spawns on the
    right half.
    """

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        state.take_snapshot()

        dungeon = self._dungeon_chain(state)
        dungeon.build_map(fork(rng, "map.cave_transition"))
        state.history.extend(dungeon.state.history)

        half = game_map.width // 2
        game_map.tiles[half:, :] = dungeon.state.map.tiles[half:, :]
        state.take_snapshot()

        cave_spawns = [
            (idx, tag) for idx, tag in state.spawn_list if idx % game_map.width < half
        ]
        dungeon_spawns = [
            (idx, tag)
            for idx, tag in dungeon.state.spawn_list
            if idx % game_map.width >= half
        ]
        state.spawn_list = cave_spawns + dungeon_spawns
        logger.debug(
            f"Cave transition kept {len(cave_spawns)} cave and "
            f"{len(dungeon_spawns)} dungeon spawns"
        )

    @staticmethod
    def _dungeon_chain(state: BuildState) -> BuilderChain:
        game_map = state.map
        chain = BuilderChain(
            game_map.depth,
            game_map.width,
            game_map.height,
            show_history=state.show_history,
        )
        chain.start_with(BspDungeonBuilder(connect_rooms=False))
        chain.with_(RoomDrawer())
        chain.with_(RoomSorter(RoomSort.RIGHTMOST))
        chain.with_(NearestCorridors())
        chain.with_(RoomExploder())
        chain.with_(RoomBasedSpawner())
        return chain


def _wall_neighbors(tiles: np.ndarray, x: int, y: int) -> int:
    width, height = tiles.shape
    count = 0
    for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
        if 0 <= nx < width and 0 <= ny < height and tiles[nx, ny] == TileTypeID.WALL:
            count += 1
    return count
