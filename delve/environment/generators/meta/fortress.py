"""The dwarven fortress level and the dragon that moved into it."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.generators.builders.dla import DLABuilder
from delve.environment.generators.chain import BuilderChain
from delve.environment.generators.meta.positions import nearest_walkable
from delve.environment.tile_types import TileTypeID
from delve.util.rng import fork

if TYPE_CHECKING:
    from delve.util.rng import RNG

DRAGON = "Black Dragon"
DRAGON_CLEARANCE = 25.0


class DragonsLair(MetaBuilder):
    """Gouge an insectoid DLA lair through the fortress.

    Any wall that is floor in a separately generated DLA map becomes floor.
    """

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        state.take_snapshot()

        lair = BuilderChain(
            game_map.depth,
            game_map.width,
            game_map.height,
            show_history=state.show_history,
        )
        lair.start_with(DLABuilder.insectoid())
        lair.build_map(fork(rng, "map.dragons_lair"))
        state.history.extend(lair.state.history)
        state.take_snapshot()

        gouged = (game_map.tiles == TileTypeID.WALL) & (
            lair.state.map.tiles == TileTypeID.FLOOR
        )
        game_map.tiles[gouged] = TileTypeID.FLOOR
        state.take_snapshot()


class DragonSpawner(MetaBuilder):
    """Put the dragon nearest the map centre and clear everything around it."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        dragon_x, dragon_y = nearest_walkable(
            game_map, (game_map.width // 2, game_map.height // 2)
        )

        kept = []
        for idx, tag in state.spawn_list:
            x, y = game_map.idx_xy(idx)
            if math.hypot(x - dragon_x, y - dragon_y) > DRAGON_CLEARANCE:
                kept.append((idx, tag))
        kept.append((game_map.xy_idx(dragon_x, dragon_y), DRAGON))
        state.spawn_list = kept
