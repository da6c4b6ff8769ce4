"""Diffusion-limited aggregation: floor grows by accreting random walkers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.generators.common import Symmetry, paint, stagger
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d
from delve.util.pathfinding import line_between

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.types import WorldTilePos
    from delve.util.rng import RNG


class DLAAlgorithm(Enum):
    WALK_INWARDS = auto()
    WALK_OUTWARDS = auto()
    CENTRAL_ATTRACTOR = auto()


@dataclass(frozen=True)
class DLASettings:
    algorithm: DLAAlgorithm
    brush_size: int
    symmetry: Symmetry
    floor_percent: float


class DLABuilder(InitialBuilder):
    """Grow a seed of floor at the map centre until ``floor_percent`` is reached.

    - Walk inwards: a walker starts somewhere random and staggers until it
      bumps into floor, then paints where it came from.
    - Walk outwards: a walker starts at the centre and staggers until it
      leaves the floor, then paints where it stopped.
    - Central attractor: a walker starts somewhere random and follows a
      straight line to the centre, painting where it was when it hit floor.
    """

    def __init__(self, settings: DLASettings) -> None:
        self.settings = settings

    @classmethod
    def walk_inwards(cls) -> DLABuilder:
        return cls(DLASettings(DLAAlgorithm.WALK_INWARDS, 1, Symmetry.NONE, 0.25))

    @classmethod
    def walk_outwards(cls) -> DLABuilder:
        return cls(DLASettings(DLAAlgorithm.WALK_OUTWARDS, 2, Symmetry.NONE, 0.25))

    @classmethod
    def central_attractor(cls) -> DLABuilder:
        return cls(DLASettings(DLAAlgorithm.CENTRAL_ATTRACTOR, 2, Symmetry.NONE, 0.25))

    @classmethod
    def insectoid(cls) -> DLABuilder:
        return cls(
            DLASettings(DLAAlgorithm.CENTRAL_ATTRACTOR, 2, Symmetry.HORIZONTAL, 0.25)
        )

    @classmethod
    def heavy_erosion(cls) -> DLABuilder:
        return cls(DLASettings(DLAAlgorithm.WALK_INWARDS, 2, Symmetry.NONE, 0.35))

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        settings = self.settings

        start = (game_map.width // 2, game_map.height // 2)
        sx, sy = start
        for x, y in ((sx, sy), (sx - 1, sy), (sx + 1, sy), (sx, sy - 1), (sx, sy + 1)):
            game_map.tiles[x, y] = TileTypeID.FLOOR

        desired_floor_tiles = int(settings.floor_percent * game_map.tile_count)
        floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)

        while floor_tile_count < desired_floor_tiles:
            match settings.algorithm:
                case DLAAlgorithm.WALK_INWARDS:
                    target = self._walk_inwards(rng, game_map)
                case DLAAlgorithm.WALK_OUTWARDS:
                    target = self._walk_outwards(rng, game_map, start)
                case DLAAlgorithm.CENTRAL_ATTRACTOR:
                    target = self._central_attractor(rng, game_map, start)

            paint(game_map, settings.symmetry, settings.brush_size, *target)
            state.take_snapshot()
            floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)

    @staticmethod
    def _random_interior(rng: RNG, game_map: GameMap) -> WorldTilePos:
        return roll_d(rng, game_map.width - 3) + 1, roll_d(rng, game_map.height - 3) + 1

    def _walk_inwards(self, rng: RNG, game_map: GameMap) -> WorldTilePos:
        x, y = self._random_interior(rng, game_map)
        previous = (x, y)
        while game_map.tiles[x, y] == TileTypeID.WALL:
            previous = (x, y)
            x, y = stagger(rng, game_map, x, y)
        return previous

    @staticmethod
    def _walk_outwards(
        rng: RNG, game_map: GameMap, start: WorldTilePos
    ) -> WorldTilePos:
        x, y = start
        while game_map.tiles[x, y] == TileTypeID.FLOOR:
            x, y = stagger(rng, game_map, x, y)
        return x, y

    def _central_attractor(
        self, rng: RNG, game_map: GameMap, start: WorldTilePos
    ) -> WorldTilePos:
        x, y = self._random_interior(rng, game_map)
        previous = (x, y)
        path = line_between((x, y), start)
        while game_map.tiles[x, y] == TileTypeID.WALL and path:
            previous = (x, y)
            x, y = path.pop(0)
        return previous
