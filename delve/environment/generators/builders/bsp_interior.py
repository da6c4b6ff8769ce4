"""Binary space partition interior: a building packed wall-to-wall with rooms."""

from __future__ import annotations

from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.generators.common import draw_corridor
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG


class BspInteriorBuilder(InitialBuilder):
    """Recursively bisect the map until every leaf is small, then floor the leaves.

    Each split is horizontal or vertical at random. A half is only split again
    while it is larger than ``min_room_size``, so every leaf ends up smaller
    than twice that size. Leaves are joined in order by corridors.
    """

    def __init__(self, min_room_size: int = config.BSP_INTERIOR_MIN_ROOM_SIZE) -> None:
        self.min_room_size = min_room_size

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        rects: list[Rect] = [Rect(1, 1, game_map.width - 2, game_map.height - 2)]
        self._add_subrects(rng, rects, rects[0])

        rooms = list(rects)
        for room in rooms:
            for y in range(room.y1, room.y2):
                for x in range(room.x1, room.x2):
                    if 0 < x < game_map.width - 1 and 0 < y < game_map.height - 1:
                        game_map.tiles[x, y] = TileTypeID.FLOOR
            state.take_snapshot()

        corridors: list[list[int]] = []
        for room, next_room in zip(rooms, rooms[1:]):
            start_x = room.x1 + roll_d(rng, max(room.width, 1)) - 1
            start_y = room.y1 + roll_d(rng, max(room.height, 1)) - 1
            end_x = next_room.x1 + roll_d(rng, max(next_room.width, 1)) - 1
            end_y = next_room.y1 + roll_d(rng, max(next_room.height, 1)) - 1
            corridors.append(draw_corridor(game_map, start_x, start_y, end_x, end_y))
            state.take_snapshot()

        state.rooms = rooms
        state.corridors = corridors

    def _add_subrects(self, rng: RNG, rects: list[Rect], rect: Rect) -> None:
        """Replace the most recently added rect with its two halves, recursively."""
        if rects:
            rects.pop()

        width = rect.width
        height = rect.height
        half_width = width // 2
        half_height = height // 2

        if roll_d(rng, 4) <= 2:
            # Side by side, leaving a one tile wall between the halves
            first = Rect(rect.x1, rect.y1, half_width - 1, height)
            rects.append(first)
            if half_width > self.min_room_size:
                self._add_subrects(rng, rects, first)
            second = Rect(rect.x1 + half_width, rect.y1, half_width, height)
            rects.append(second)
            if half_width > self.min_room_size:
                self._add_subrects(rng, rects, second)
        else:
            first = Rect(rect.x1, rect.y1, width, half_height - 1)
            rects.append(first)
            if half_height > self.min_room_size:
                self._add_subrects(rng, rects, first)
            second = Rect(rect.x1, rect.y1 + half_height, width, half_height)
            rects.append(second)
            if half_height > self.min_room_size:
                self._add_subrects(rng, rects, second)
