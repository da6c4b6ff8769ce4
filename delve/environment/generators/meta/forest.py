from __future__ import annotations

from typing import TYPE_CHECKING

from delve.environment.generators.base import (
    BuildState,
    MapGenerationError,
    MetaBuilder,
)
from delve.environment.generators.meta.positions import nearest_walkable
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d
from delve.util.pathfinding import find_path

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.util.rng import RNG


class YellowBrickRoad(MetaBuilder):
    """Lay a road through the forest from the start to the down stairs.

    The road runs along the A* path from the starting position to the
    walkable tile nearest the middle of the east edge, three tiles wide.
    A stream then winds from near one of the eastern corners down to the
    south-west, flooding the floor it crosses.
    """

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        start_x, start_y = state.require_starting_position(self)
        start_idx = game_map.xy_idx(start_x, start_y)

        end_x, end_y = nearest_walkable(
            game_map, (game_map.width - 2, game_map.height // 2)
        )
        end_idx = game_map.xy_idx(end_x, end_y)

        game_map.populate_blocked()
        road = find_path(game_map, start_idx, end_idx)
        if not road.success:
            raise MapGenerationError("No valid path for the road")

        for idx in road.steps:
            x, y = game_map.idx_xy(idx)
            for px, py in ((x, y), (x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
                self._paint_road(game_map, px, py)
        game_map.tiles[end_x, end_y] = TileTypeID.DOWN_STAIRS
        state.take_snapshot()

        self._stream(rng, state)

    @staticmethod
    def _paint_road(game_map: GameMap, x: int, y: int) -> None:
        if x < 1 or x > game_map.width - 2 or y < 1 or y > game_map.height - 2:
            return
        if game_map.tiles[x, y] != TileTypeID.DOWN_STAIRS:
            game_map.tiles[x, y] = TileTypeID.ROAD

    @staticmethod
    def _stream(rng: RNG, state: BuildState) -> None:
        game_map = state.map
        if roll_d(rng, 2) == 1:
            source_anchor = (game_map.width - 1, 1)
            mouth_anchor = (0, game_map.height - 1)
        else:
            source_anchor = (game_map.width - 1, game_map.height - 1)
            mouth_anchor = (1, game_map.height - 1)

        source = game_map.xy_idx(*nearest_walkable(game_map, source_anchor))
        mouth = game_map.xy_idx(*nearest_walkable(game_map, mouth_anchor))

        game_map.populate_blocked()
        stream = find_path(game_map, source, mouth)
        for idx in stream.steps:
            if game_map.tile_at(idx) == TileTypeID.FLOOR:
                game_map.set_tile(idx, TileTypeID.SHALLOW_WATER)
        state.take_snapshot()
