"""The starting town: a walled district on the shore of a lake.

Generation runs in layers over a fixed left-to-right layout:

1. Grass everywhere.
2. Deep and shallow water along the west edge, with a sine-perturbed
   shoreline and a few wooden piers.
3. The town wall from x=30 eastward, with a gap part way down that a road
   runs through. Gravel fills the inside and is where buildings may go.
4. Up to TOWN_BUILDING_TARGET rectangular buildings, each outlined in wall
   and given one door facing the road gap.
5. A path from every door to the nearest road, then stairs down at the
   east end of the road.
6. Roles by size (pub, temple, smithy...) and their furnishings, plus
   dockers on the piers and townsfolk wandering the gravel.

The layout needs a map at least 40 tiles wide.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import (
    BuildState,
    InitialBuilder,
    MapGenerationError,
)
from delve.environment.generators.buildings import Building, BuildingRole
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from delve.util.dice import Dice, roll_d
from delve.util.pathfinding import find_path

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.types import TileIndex
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

TOWN_WALL_X = 30
TOWN_NAME = "The Town of Bracketon"

# Roles handed out from the largest building down. Everything after these
# is a hovel, except the smallest, which is abandoned.
_ROLES_BY_SIZE = (
    BuildingRole.PUB,
    BuildingRole.TEMPLE,
    BuildingRole.BLACKSMITH,
    BuildingRole.CLOTHIER,
    BuildingRole.ALCHEMIST,
    BuildingRole.PLAYER_HOUSE,
)

# Furnishings placed inside each role's building, in placement order.
BUILDING_CONTENTS: dict[BuildingRole, tuple[str, ...]] = {
    BuildingRole.PUB: (
        "Barkeep",
        "Shady Salesman",
        "Patron",
        "Patron",
        "Keg",
        "Table",
        "Chair",
        "Table",
        "Chair",
    ),
    BuildingRole.TEMPLE: (
        "Priest",
        "Altar",
        "Parishioner",
        "Parishioner",
        "Chair",
        "Chair",
        "Candle",
        "Candle",
    ),
    BuildingRole.BLACKSMITH: (
        "Blacksmith",
        "Anvil",
        "Water Trough",
        "Weapon Rack",
        "Armor Stand",
    ),
    BuildingRole.CLOTHIER: ("Clothier", "Cabinet", "Table", "Loom", "Hide Rack"),
    BuildingRole.ALCHEMIST: (
        "Alchemist",
        "Chemistry Set",
        "Dead Thing",
        "Chair",
        "Table",
    ),
    BuildingRole.PLAYER_HOUSE: ("Mom", "Bed", "Cabinet", "Chair", "Table"),
    BuildingRole.HOVEL: ("Peasant", "Bed", "Chair", "Table"),
}

_PIER_COUNT = Dice("d4+6")
_BUILDING_SIZE = Dice("d8+4")


def _neighbors4(x: int, y: int) -> tuple[tuple[int, int], ...]:
    return ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1))


class TownBuilder(InitialBuilder):
    def __init__(
        self,
        building_target: int = config.TOWN_BUILDING_TARGET,
        max_attempts: int = config.TOWN_BUILDING_ATTEMPTS,
    ) -> None:
        self.building_target = building_target
        self.max_attempts = max_attempts

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map

        self._grass_layer(state)
        self._water_and_piers(rng, state)
        available, wall_gap_y = self._town_walls(rng, state)
        buildings = self._buildings(rng, state, available)
        if not buildings:
            raise MapGenerationError("No room inside the town walls for any building")

        doors = self._add_doors(rng, state, buildings, wall_gap_y)
        self._add_paths(state, doors)

        for y in range(wall_gap_y - 3, wall_gap_y + 4):
            if 0 <= y < game_map.height:
                game_map.tiles[game_map.width - 2, y] = TileTypeID.DOWN_STAIRS

        self._assign_roles(buildings)
        for building in buildings:
            self._furnish(rng, state, building)

        self._spawn_dockers(rng, state)
        self._spawn_townsfolk(rng, state, available)

        state.buildings = buildings
        game_map.visible[:] = True
        state.take_snapshot()

    # -------------------------------------------------------------------------
    # Terrain layers
    # -------------------------------------------------------------------------

    def _grass_layer(self, state: BuildState) -> None:
        state.map.tiles[:] = TileTypeID.GRASS
        state.take_snapshot()

    def _water_and_piers(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        n = roll_d(rng, 65535) / 65535
        water_width: list[int] = []
        for y in range(game_map.height):
            n_water = int(math.sin(n) * 10.0) + 14 + roll_d(rng, 6)
            water_width.append(n_water)
            n += 0.1
            game_map.tiles[: min(n_water, game_map.width), y] = TileTypeID.DEEP_WATER
            game_map.tiles[n_water : min(n_water + 3, game_map.width), y] = (
                TileTypeID.SHALLOW_WATER
            )
        state.take_snapshot()

        for _ in range(_PIER_COUNT.roll(rng)):
            y = roll_d(rng, game_map.height) - 1
            start_x = 2 + roll_d(rng, 6)
            end_x = min(water_width[y] + 4, game_map.width)
            game_map.tiles[start_x:end_x, y] = TileTypeID.BRIDGE
        state.take_snapshot()

    def _town_walls(self, rng: RNG, state: BuildState) -> tuple[set[TileIndex], int]:
        """Build the town wall and gravel yard.

        Returns:
            The tile indices buildings may occupy, and the y of the road gap.
        """
        game_map = state.map
        width, height = game_map.width, game_map.height
        available: set[TileIndex] = set()
        wall_gap_y = roll_d(rng, height - 9) + 5

        for y in range(1, height - 2):
            if not (wall_gap_y - 4 < y < wall_gap_y + 4):
                game_map.tiles[TOWN_WALL_X, y] = TileTypeID.WALL
                game_map.tiles[TOWN_WALL_X - 1, y] = TileTypeID.FLOOR
                game_map.tiles[width - 2, y] = TileTypeID.WALL
                for x in range(TOWN_WALL_X + 1, width - 2):
                    game_map.tiles[x, y] = TileTypeID.GRAVEL
                    if 2 < y < height - 1:
                        available.add(game_map.xy_idx(x, y))
            else:
                game_map.tiles[TOWN_WALL_X:width, y] = TileTypeID.ROAD
        state.take_snapshot()

        game_map.tiles[TOWN_WALL_X : width - 1, 1] = TileTypeID.WALL
        game_map.tiles[TOWN_WALL_X : width - 1, height - 2] = TileTypeID.WALL
        state.take_snapshot()

        return available, wall_gap_y

    # -------------------------------------------------------------------------
    # Buildings
    # -------------------------------------------------------------------------

    def _buildings(
        self, rng: RNG, state: BuildState, available: set[TileIndex]
    ) -> list[Building]:
        game_map = state.map
        buildings: list[Building] = []

        for _ in range(self.max_attempts):
            if len(buildings) >= self.building_target:
                break

            bx = roll_d(rng, game_map.width - 32) + TOWN_WALL_X
            by = roll_d(rng, game_map.height) - 2
            bw = _BUILDING_SIZE.roll(rng)
            bh = _BUILDING_SIZE.roll(rng)
            footprint = Rect(bx, by, bw, bh)
            if not self._fits(game_map, footprint, available):
                continue

            buildings.append(Building(id=len(buildings), footprint=footprint))
            for y in range(by, by + bh):
                for x in range(bx, bx + bw):
                    game_map.tiles[x, y] = TileTypeID.WOOD_FLOOR
                    # Claim the tile and its 4-neighbourhood so buildings never touch
                    available.discard(game_map.xy_idx(x, y))
                    for nx, ny in _neighbors4(x, y):
                        available.discard(game_map.xy_idx(nx, ny))
            state.take_snapshot()

        if len(buildings) < self.building_target:
            logger.warning(
                f"Town only fit {len(buildings)} of {self.building_target} buildings"
            )

        # Outline: floor touching anything that isn't floor becomes wall.
        # Reads a frozen copy so freshly placed walls don't cascade.
        before = game_map.tiles.copy(order="F")
        for y in range(1, game_map.height - 1):
            for x in range(1, game_map.width - 1):
                if before[x, y] != TileTypeID.WOOD_FLOOR:
                    continue
                neighbors = (
                    before[x - 1, y],
                    before[x + 1, y],
                    before[x, y - 1],
                    before[x, y + 1],
                )
                if any(tile != TileTypeID.WOOD_FLOOR for tile in neighbors):
                    game_map.tiles[x, y] = TileTypeID.WALL
        state.take_snapshot()

        return buildings

    @staticmethod
    def _fits(game_map: GameMap, footprint: Rect, available: set[TileIndex]) -> bool:
        for y in range(footprint.y1, footprint.y2):
            for x in range(footprint.x1, footprint.x2):
                if not game_map.in_bounds(x, y):
                    return False
                if game_map.xy_idx(x, y) not in available:
                    return False
        return True

    def _add_doors(
        self,
        rng: RNG,
        state: BuildState,
        buildings: list[Building],
        wall_gap_y: int,
    ) -> list[TileIndex]:
        """Cut one door per building, on the wall facing the road gap."""
        game_map = state.map
        doors: list[TileIndex] = []
        for building in buildings:
            footprint = building.footprint
            door_x = footprint.x1 + 1 + roll_d(rng, footprint.width - 3)
            center_y = footprint.y1 + footprint.height // 2
            if center_y > wall_gap_y:
                door_y = footprint.y1
            else:
                door_y = footprint.y2 - 1

            game_map.tiles[door_x, door_y] = TileTypeID.FLOOR
            idx = game_map.xy_idx(door_x, door_y)
            state.spawn_list.append((idx, "Door"))
            building.door_positions.append((door_x, door_y))
            doors.append(idx)
        state.take_snapshot()
        return doors

    def _add_paths(self, state: BuildState, doors: list[TileIndex]) -> None:
        """Route a road from every door to the nearest existing road tile."""
        game_map = state.map
        roads = [
            game_map.xy_idx(x, y)
            for y in range(game_map.height)
            for x in range(game_map.width)
            if game_map.tiles[x, y] == TileTypeID.ROAD
        ]
        game_map.populate_blocked()

        for door_idx in doors:
            door_x, door_y = game_map.idx_xy(door_idx)

            def distance_sq(
                road_idx: TileIndex, dx: int = door_x, dy: int = door_y
            ) -> int:
                rx, ry = game_map.idx_xy(road_idx)
                return (rx - dx) ** 2 + (ry - dy) ** 2

            destination = min(roads, key=distance_sq)
            path = find_path(game_map, door_idx, destination)
            if not path.success:
                logger.warning(f"No road reachable from door at ({door_x}, {door_y})")
                continue

            for step in path.steps:
                self._pave(game_map, step, roads)
                sx, sy = game_map.idx_xy(step)
                for nx, ny in _neighbors4(sx, sy):
                    if game_map.in_bounds(nx, ny) and game_map.tiles[nx, ny] in (
                        TileTypeID.GRASS,
                        TileTypeID.GRAVEL,
                    ):
                        self._pave(game_map, game_map.xy_idx(nx, ny), roads)
            state.take_snapshot()

    @staticmethod
    def _pave(game_map: GameMap, idx: TileIndex, roads: list[TileIndex]) -> None:
        if game_map.tile_at(idx) != TileTypeID.ROAD:
            game_map.set_tile(idx, TileTypeID.ROAD)
            roads.append(idx)

    # -------------------------------------------------------------------------
    # Roles and population
    # -------------------------------------------------------------------------

    @staticmethod
    def _assign_roles(buildings: list[Building]) -> None:
        """Hand out roles from the largest building to the smallest.

        There is always exactly one player house: when the town has fewer
        buildings than named roles, the smallest building gets it.
        """
        by_size = sorted(buildings, key=lambda b: b.area, reverse=True)
        for rank, building in enumerate(by_size):
            if rank < len(_ROLES_BY_SIZE):
                building.role = _ROLES_BY_SIZE[rank]
            else:
                building.role = BuildingRole.HOVEL

        if len(by_size) < len(_ROLES_BY_SIZE):
            by_size[-1].role = BuildingRole.PLAYER_HOUSE
        elif len(by_size) > len(_ROLES_BY_SIZE):
            by_size[-1].role = BuildingRole.ABANDONED

    def _furnish(self, rng: RNG, state: BuildState, building: Building) -> None:
        game_map = state.map
        player_idx = None
        if building.role is BuildingRole.PLAYER_HOUSE:
            state.starting_position = building.center
            player_idx = game_map.xy_idx(*building.center)

        footprint = building.footprint
        if building.role is BuildingRole.ABANDONED:
            for y in range(footprint.y1, footprint.y2):
                for x in range(footprint.x1, footprint.x2):
                    if game_map.tiles[x, y] != TileTypeID.WOOD_FLOOR:
                        continue
                    if roll_d(rng, 2) == 1:
                        state.spawn_list.append((game_map.xy_idx(x, y), "Rat"))
            return

        to_place = list(BUILDING_CONTENTS[building.role])
        for y in range(footprint.y1, footprint.y2):
            for x in range(footprint.x1, footprint.x2):
                idx = game_map.xy_idx(x, y)
                if (
                    game_map.tiles[x, y] == TileTypeID.WOOD_FLOOR
                    and idx != player_idx
                    and roll_d(rng, 3) == 1
                    and to_place
                ):
                    state.spawn_list.append((idx, to_place.pop(0)))

    def _spawn_dockers(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        for y in range(game_map.height):
            for x in range(game_map.width):
                if game_map.tiles[x, y] == TileTypeID.BRIDGE and roll_d(rng, 6) == 1:
                    match roll_d(rng, 3):
                        case 1:
                            tag = "Dock Worker"
                        case 2:
                            tag = "Wannabe Pirate"
                        case _:
                            tag = "Fisher"
                    state.spawn_list.append((game_map.xy_idx(x, y), tag))

    def _spawn_townsfolk(
        self, rng: RNG, state: BuildState, available: set[TileIndex]
    ) -> None:
        # Sorted so the draw order doesn't depend on set iteration order
        for idx in sorted(available):
            if roll_d(rng, 10) == 1:
                match roll_d(rng, 4):
                    case 1:
                        tag = "Peasant"
                    case 2:
                        tag = "Drunk"
                    case 3:
                        tag = "Dock Worker"
                    case _:
                        tag = "Fisher"
                state.spawn_list.append((idx, tag))
