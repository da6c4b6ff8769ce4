"""Drunkard's walk: diggers stagger randomly, eroding floor out of solid rock."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.generators.common import Symmetry, paint, stagger
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG


class DrunkSpawnMode(Enum):
    """Where each new digger starts."""

    STARTING_POINT = auto()  # Always the map centre
    RANDOM = auto()  # The centre first, then anywhere


@dataclass(frozen=True)
class DrunkardSettings:
    spawn_mode: DrunkSpawnMode
    drunken_lifetime: int
    floor_percent: float
    brush_size: int = 1
    symmetry: Symmetry = Symmetry.NONE


class DrunkardsWalkBuilder(InitialBuilder):
    """Spawn diggers until ``floor_percent`` of the map is floor.

    Each digger paints its brush at every step, then staggers one tile in a
    random cardinal direction, until its lifetime runs out.
    """

    def __init__(self, settings: DrunkardSettings) -> None:
        self.settings = settings

    @classmethod
    def open_area(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.STARTING_POINT, 400, 0.5))

    @classmethod
    def open_halls(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 400, 0.5))

    @classmethod
    def winding_passages(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4))

    @classmethod
    def fat_passages(cls) -> DrunkardsWalkBuilder:
        return cls(DrunkardSettings(DrunkSpawnMode.RANDOM, 100, 0.4, brush_size=2))

    @classmethod
    def fearful_symmetry(cls) -> DrunkardsWalkBuilder:
        settings = DrunkardSettings(
            DrunkSpawnMode.RANDOM, 100, 0.4, symmetry=Symmetry.BOTH
        )
        return cls(settings)

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        settings = self.settings

        start_x = game_map.width // 2
        start_y = game_map.height // 2
        game_map.tiles[start_x, start_y] = TileTypeID.FLOOR

        desired_floor_tiles = int(settings.floor_percent * game_map.tile_count)
        floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)
        digger_count = 0

        while floor_tile_count < desired_floor_tiles:
            from_start = settings.spawn_mode is DrunkSpawnMode.STARTING_POINT
            if from_start or digger_count == 0:
                drunk_x, drunk_y = start_x, start_y
            else:
                drunk_x = roll_d(rng, game_map.width - 3) + 1
                drunk_y = roll_d(rng, game_map.height - 3) + 1

            did_something = False
            for _ in range(settings.drunken_lifetime):
                if game_map.tiles[drunk_x, drunk_y] == TileTypeID.WALL:
                    did_something = True
                paint(
                    game_map, settings.symmetry, settings.brush_size, drunk_x, drunk_y
                )
                drunk_x, drunk_y = stagger(rng, game_map, drunk_x, drunk_y)

            if did_something:
                state.take_snapshot()

            digger_count += 1
            floor_tile_count = game_map.count_tiles(TileTypeID.FLOOR)
