"""Spawn population steps.

Room-based chains fill each room from the depth table. Organic chains have
no rooms, so VoronoiSpawning carves the floor into coherent regions with a
seeded noise field and fills each region the same way.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

import numpy as np
import tcod.noise

from delve import config
from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.generators.spawner import spawn_region, spawn_room
from delve.environment.tile_types import TileTypeID
from delve.util.rng import fork

if TYPE_CHECKING:
    from delve.types import TileIndex
    from delve.util.rng import RNG


class RoomBasedSpawner(MetaBuilder):
    """Populate every room except the first, where the player starts."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        for room in state.require_rooms(self)[1:]:
            spawn_room(state.map, rng, room, state.map.depth, state.spawn_list)


class VoronoiSpawning(MetaBuilder):
    """Group floor tiles into noise bands and treat each band as a region.

    The noise field is seeded from a single draw of the chain's stream, so
    the rest of the chain sees the same draw order whatever the map size.
    """

    def __init__(
        self,
        frequency: float = config.SPAWN_NOISE_FREQUENCY,
        bands: int = config.SPAWN_NOISE_BANDS,
    ) -> None:
        self.frequency = frequency
        self.bands = bands

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        noise = tcod.noise.Noise(
            dimensions=2,
            algorithm=tcod.noise.Algorithm.SIMPLEX,
            implementation=tcod.noise.Implementation.SIMPLE,
            seed=fork(rng, "map.voronoi_spawning").getrandbits(31),
        )
        samples = noise[
            tcod.noise.grid(
                shape=(game_map.width, game_map.height),
                scale=self.frequency,
                origin=(0, 0),
                indexing="ij",
            )
        ]
        # Simplex output is in [-1, 1]; quantize it into region ids
        band_ids = np.clip(
            ((samples + 1.0) * 0.5 * self.bands).astype(np.int32), 0, self.bands - 1
        )

        regions: defaultdict[int, list[TileIndex]] = defaultdict(list)
        for y in range(1, game_map.height - 1):
            for x in range(1, game_map.width - 1):
                if game_map.tiles[x, y] == TileTypeID.FLOOR:
                    regions[int(band_ids[x, y])].append(game_map.xy_idx(x, y))

        for band in sorted(regions):
            spawn_region(rng, regions[band], game_map.depth, state.spawn_list)
