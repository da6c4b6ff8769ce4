from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.tile_types import TileTypeID
from delve.util.pathfinding import dijkstra_map

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class CullUnreachable(MetaBuilder):
    """Wall off every floor tile the starting position cannot reach."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        start_x, start_y = state.require_starting_position(self)

        game_map.populate_blocked()
        distances = dijkstra_map(game_map, [game_map.xy_idx(start_x, start_y)])
        unreachable = (game_map.tiles == TileTypeID.FLOOR) & np.isinf(distances)
        game_map.tiles[unreachable] = TileTypeID.WALL
        dropped = state.remove_unwalkable_spawns()

        logger.debug(
            f"Culled {int(np.count_nonzero(unreachable))} unreachable tiles "
            f"and {dropped} spawns on them"
        )
        state.take_snapshot()
