from __future__ import annotations

from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.types import TileIndex
    from delve.util.rng import RNG

DOOR = "Door"


class DoorPlacement(MetaBuilder):
    """Place doors where corridors meet rooms.

    A door goes on a floor tile that is flanked by wall on two opposite
    sides and by floor on the other two, so it plugs a one-tile-wide gap.
    With recorded corridors, the first tile of every corridor longer than two
    tiles is tried. Without them, every qualifying tile gets a door on a
    1-in-3 roll.
    """

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        if state.corridors is not None:
            for corridor in state.corridors:
                # Too short to need a door
                if len(corridor) <= 2:
                    continue
                if self._door_possible(state, corridor[0]):
                    state.spawn_list.append((corridor[0], DOOR))
        else:
            for y in range(game_map.height):
                for x in range(game_map.width):
                    idx = game_map.xy_idx(x, y)
                    if (
                        game_map.tiles[x, y] == TileTypeID.FLOOR
                        and self._door_possible(state, idx)
                        and roll_d(rng, 3) == 1
                    ):
                        state.spawn_list.append((idx, DOOR))

    @staticmethod
    def _door_possible(state: BuildState, idx: TileIndex) -> bool:
        if any(spawn_idx == idx for spawn_idx, _ in state.spawn_list):
            return False

        game_map = state.map
        x, y = game_map.idx_xy(idx)
        # Keep clear of the outermost two rows and columns
        if not (1 < x < game_map.width - 2 and 1 < y < game_map.height - 2):
            return False
        if game_map.tiles[x, y] != TileTypeID.FLOOR:
            return False

        west = game_map.tiles[x - 1, y]
        east = game_map.tiles[x + 1, y]
        north = game_map.tiles[x, y - 1]
        south = game_map.tiles[x, y + 1]

        east_west = (
            west == TileTypeID.FLOOR
            and east == TileTypeID.FLOOR
            and north == TileTypeID.WALL
            and south == TileTypeID.WALL
        )
        north_south = (
            west == TileTypeID.WALL
            and east == TileTypeID.WALL
            and north == TileTypeID.FLOOR
            and south == TileTypeID.FLOOR
        )
        return east_west or north_south
