"""Meta builders that reorder, carve and roughen a chain's rooms.

All of them need a room-based initial builder earlier in the chain and
raise BuilderConfigurationError otherwise.
"""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.generators.common import Symmetry, paint, stagger
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG


class RoomSort(Enum):
    LEFTMOST = auto()
    RIGHTMOST = auto()
    TOPMOST = auto()
    BOTTOMMOST = auto()
    CENTRAL = auto()


class RoomSorter(MetaBuilder):
    """Fix the order later steps visit rooms in.

    Corridor strategies connect rooms in list order, and room-based start and
    stairs placement use the first and last room, so sorting decides the
    overall flow of the level. The sort is stable.
    """

    def __init__(self, sort_by: RoomSort) -> None:
        self.sort_by = sort_by

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        match self.sort_by:
            case RoomSort.LEFTMOST:
                rooms.sort(key=lambda room: room.x1)
            case RoomSort.RIGHTMOST:
                rooms.sort(key=lambda room: room.x2, reverse=True)
            case RoomSort.TOPMOST:
                rooms.sort(key=lambda room: room.y1)
            case RoomSort.BOTTOMMOST:
                rooms.sort(key=lambda room: room.y2, reverse=True)
            case RoomSort.CENTRAL:
                center_x = state.map.width // 2
                center_y = state.map.height // 2

                def distance_to_center(room: Rect) -> float:
                    x, y = room.center()
                    return math.hypot(x - center_x, y - center_y)

                rooms.sort(key=distance_to_center)


class RoomDrawer(MetaBuilder):
    """Carve recorded rooms: a circle on a 1-in-4 roll, otherwise a rectangle."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        for room in state.require_rooms(self):
            if roll_d(rng, 4) == 1:
                self._circle(state, room)
            else:
                self._rectangle(state, room)
            state.take_snapshot()

    @staticmethod
    def _rectangle(state: BuildState, room: Rect) -> None:
        game_map = state.map
        for x, y in room.interior():
            if _is_carvable(state, x, y):
                game_map.tiles[x, y] = TileTypeID.FLOOR

    @staticmethod
    def _circle(state: BuildState, room: Rect) -> None:
        game_map = state.map
        radius = min(room.width, room.height) / 2.0
        center_x, center_y = room.center()
        for y in range(room.y1, room.y2 + 1):
            for x in range(room.x1, room.x2 + 1):
                distance = math.hypot(x - center_x, y - center_y)
                if distance <= radius and _is_carvable(state, x, y):
                    game_map.tiles[x, y] = TileTypeID.FLOOR


def _is_carvable(state: BuildState, x: int, y: int) -> bool:
    # Neither the first nor the last tile of the map is ever carved
    if not state.map.in_bounds(x, y):
        return False
    idx = state.map.xy_idx(x, y)
    return 0 < idx < state.map.tile_count - 1


class RoomExploder(MetaBuilder):
    """Send d20-5 short drunken walks out from each room's centre."""

    DIGGER_LIFETIME = 20

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        for room in state.require_rooms(self):
            n_diggers = roll_d(rng, 20) - 5
            for _ in range(max(n_diggers, 0)):
                x, y = room.center()
                did_something = False
                for _ in range(self.DIGGER_LIFETIME):
                    if game_map.tiles[x, y] == TileTypeID.WALL:
                        did_something = True
                    paint(game_map, Symmetry.NONE, 1, x, y)
                    x, y = stagger(rng, game_map, x, y)
                if did_something:
                    state.take_snapshot()


class RoomCornerRounder(MetaBuilder):
    """Fill in room corners that have walls on exactly two sides."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        for room in state.require_rooms(self):
            self._fill_if_corner(state, room.x1 + 1, room.y1 + 1)
            self._fill_if_corner(state, room.x2, room.y1 + 1)
            self._fill_if_corner(state, room.x1 + 1, room.y2)
            self._fill_if_corner(state, room.x2, room.y2)
            state.take_snapshot()
        # Corridor spawns may sit on a corner that was just filled
        state.remove_unwalkable_spawns()

    @staticmethod
    def _fill_if_corner(state: BuildState, x: int, y: int) -> None:
        game_map = state.map
        if not game_map.in_bounds(x, y):
            return
        neighbor_walls = 0
        for nx, ny in ((x - 1, y), (x, y - 1), (x + 1, y), (x, y + 1)):
            if game_map.in_bounds(nx, ny) and game_map.tiles[nx, ny] == TileTypeID.WALL:
                neighbor_walls += 1
        if neighbor_walls == 2:
            game_map.tiles[x, y] = TileTypeID.WALL
