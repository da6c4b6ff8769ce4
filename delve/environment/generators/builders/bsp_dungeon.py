"""Binary space partition dungeon: scattered rectangular rooms.

The map is repeatedly quartered into candidate rectangles. A random room is
cut from a random candidate and kept only if the area around it is still
solid wall, so rooms never touch. Kept rooms are re-partitioned, which makes
the next candidates progressively smaller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.generators.common import (
    apply_horizontal_tunnel,
    apply_room_to_map,
    apply_vertical_tunnel,
)
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

# Candidate rooms must have this much solid wall around their bounds, which
# always leaves at least one wall between neighbouring rooms.
ROOM_MARGIN = 1


class BspDungeonBuilder(InitialBuilder):
    """Carve BSP rooms and record them on the build state.

    Args:
        connect_rooms: Join rooms (sorted by left edge) with L-shaped tunnels.
            Chains that add their own corridor strategy turn this off.
        attempts: Number of room placement attempts.
    """

    def __init__(
        self, connect_rooms: bool = True, attempts: int = config.BSP_ATTEMPTS
    ) -> None:
        self.connect_rooms = connect_rooms
        self.attempts = attempts

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        rects = [Rect(2, 2, game_map.width - 5, game_map.height - 5)]
        self._add_subrects(rects, rects[0])

        rooms: list[Rect] = []
        for _ in range(self.attempts):
            rect = self._get_random_rect(rng, rects)
            candidate = self._get_random_sub_rect(rng, rect)

            if self._is_possible(game_map, candidate):
                apply_room_to_map(game_map, candidate)
                rooms.append(candidate)
                self._add_subrects(rects, rect)
                state.take_snapshot()

        logger.debug(f"BSP placed {len(rooms)} rooms in {self.attempts} attempts")

        if self.connect_rooms:
            rooms.sort(key=lambda room: room.x1)
            corridors: list[list[int]] = []
            for room, next_room in zip(rooms, rooms[1:]):
                corridors.append(self._connect(rng, game_map, room, next_room))
                state.take_snapshot()
            state.corridors = corridors

        state.rooms = rooms

    @staticmethod
    def _add_subrects(rects: list[Rect], rect: Rect) -> None:
        half_width = max(rect.width // 2, 1)
        half_height = max(rect.height // 2, 1)

        rects.append(Rect(rect.x1, rect.y1, half_width, half_height))
        rects.append(Rect(rect.x1, rect.y1 + half_height, half_width, half_height))
        rects.append(Rect(rect.x1 + half_width, rect.y1, half_width, half_height))
        rects.append(
            Rect(rect.x1 + half_width, rect.y1 + half_height, half_width, half_height)
        )

    @staticmethod
    def _get_random_rect(rng: RNG, rects: list[Rect]) -> Rect:
        if len(rects) == 1:
            return rects[0]
        return rects[roll_d(rng, len(rects)) - 1]

    @staticmethod
    def _get_random_sub_rect(rng: RNG, rect: Rect) -> Rect:
        width = max(3, roll_d(rng, min(rect.width, 10)) - 1) + 1
        height = max(3, roll_d(rng, min(rect.height, 10)) - 1) + 1
        x = rect.x1 + roll_d(rng, 6) - 1
        y = rect.y1 + roll_d(rng, 6) - 1
        return Rect(x, y, width, height)

    @staticmethod
    def _is_possible(game_map: GameMap, rect: Rect) -> bool:
        """True if the rect plus its margin lies inside the map on solid wall."""
        for y in range(rect.y1 - ROOM_MARGIN, rect.y2 + ROOM_MARGIN + 1):
            for x in range(rect.x1 - ROOM_MARGIN, rect.x2 + ROOM_MARGIN + 1):
                if x < 1 or y < 1 or x > game_map.width - 2 or y > game_map.height - 2:
                    return False
                if game_map.tiles[x, y] != TileTypeID.WALL:
                    return False
        return True

    @staticmethod
    def _connect(
        rng: RNG, game_map: GameMap, room: Rect, next_room: Rect
    ) -> list[int]:
        """Join random interior points of two rooms with an L-shaped tunnel."""
        start_x = room.x1 + roll_d(rng, room.width)
        start_y = room.y1 + roll_d(rng, room.height)
        end_x = next_room.x1 + roll_d(rng, next_room.width)
        end_y = next_room.y1 + roll_d(rng, next_room.height)

        if roll_d(rng, 2) == 1:
            corridor = apply_horizontal_tunnel(game_map, start_x, end_x, start_y)
            corridor += apply_vertical_tunnel(game_map, start_y, end_y, end_x)
        else:
            corridor = apply_vertical_tunnel(game_map, start_y, end_y, start_x)
            corridor += apply_horizontal_tunnel(game_map, start_x, end_x, end_y)
        return corridor
