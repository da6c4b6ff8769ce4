"""Corridor strategies for room-based chains.

Each strategy connects the rooms recorded in the build state and stores the
carved tiles of every corridor in ``state.corridors``, one list per
corridor, so that CorridorSpawner and door placement can use them later.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, MetaBuilder
from delve.environment.generators.common import (
    apply_horizontal_tunnel,
    apply_vertical_tunnel,
    draw_corridor,
)
from delve.environment.generators.spawner import spawn_region
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d
from delve.util.pathfinding import line_between

if TYPE_CHECKING:
    from delve.types import TileIndex
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG


class DoglegCorridors(MetaBuilder):
    """Join each room to the previous one with an L-shaped tunnel."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        corridors: list[list[TileIndex]] = []
        for prev_room, room in zip(rooms, rooms[1:]):
            new_x, new_y = room.center()
            prev_x, prev_y = prev_room.center()
            if rng.randrange(0, 2) == 1:
                corridor = apply_horizontal_tunnel(state.map, prev_x, new_x, prev_y)
                corridor += apply_vertical_tunnel(state.map, prev_y, new_y, new_x)
            else:
                corridor = apply_vertical_tunnel(state.map, prev_y, new_y, prev_x)
                corridor += apply_horizontal_tunnel(state.map, prev_x, new_x, new_y)
            corridors.append(corridor)
            state.take_snapshot()
        state.corridors = corridors


class BspCorridors(MetaBuilder):
    """Join consecutive rooms between random points inside each of them."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        corridors: list[list[TileIndex]] = []
        for room, next_room in zip(rooms, rooms[1:]):
            start_x, start_y = _random_point(rng, room)
            end_x, end_y = _random_point(rng, next_room)
            corridors.append(draw_corridor(state.map, start_x, start_y, end_x, end_y))
            state.take_snapshot()
        state.corridors = corridors


def _random_point(rng: RNG, room: Rect) -> tuple[int, int]:
    x = room.x1 + roll_d(rng, max(abs(room.x1 - room.x2), 1)) - 1
    y = room.y1 + roll_d(rng, max(abs(room.y1 - room.y2), 1)) - 1
    return x, y


def _nearest_unconnected(
    rooms: list[Rect], i: int, connected: set[int]
) -> Rect | None:
    """The room closest to room ``i`` that has not started a corridor yet."""
    center_x, center_y = rooms[i].center()
    best: Rect | None = None
    best_distance = math.inf
    for j, other in enumerate(rooms):
        if j == i or j in connected:
            continue
        other_x, other_y = other.center()
        distance = math.hypot(other_x - center_x, other_y - center_y)
        if distance < best_distance:
            best, best_distance = other, distance
    return best


class NearestCorridors(MetaBuilder):
    """Grow corridors from each room to its nearest not-yet-connected room."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        connected: set[int] = set()
        corridors: list[list[TileIndex]] = []
        for i, room in enumerate(rooms):
            destination = _nearest_unconnected(rooms, i, connected)
            if destination is None:
                continue
            start_x, start_y = room.center()
            end_x, end_y = destination.center()
            corridors.append(draw_corridor(state.map, start_x, start_y, end_x, end_y))
            connected.add(i)
            state.take_snapshot()
        state.corridors = corridors


class StraightLineCorridors(MetaBuilder):
    """Like NearestCorridors, but carving a straight Bresenham line."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        rooms = state.require_rooms(self)
        connected: set[int] = set()
        corridors: list[list[TileIndex]] = []
        for i, room in enumerate(rooms):
            destination = _nearest_unconnected(rooms, i, connected)
            if destination is None:
                continue

            corridor: list[TileIndex] = []
            start = room.center()
            for x, y in [start, *line_between(start, destination.center())]:
                if not game_map.in_bounds(x, y):
                    continue
                if game_map.tiles[x, y] != TileTypeID.FLOOR:
                    game_map.tiles[x, y] = TileTypeID.FLOOR
                    corridor.append(game_map.xy_idx(x, y))
            corridors.append(corridor)
            connected.add(i)
            state.take_snapshot()
        state.corridors = corridors


class CorridorSpawner(MetaBuilder):
    """Treat every recorded corridor as a spawn region."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        for corridor in state.require_corridors(self):
            spawn_region(rng, corridor, state.map.depth, state.spawn_list)
