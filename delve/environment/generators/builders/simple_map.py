"""Scattered non-overlapping rooms, left for later steps to carve and connect."""

from __future__ import annotations

from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import BuildState, InitialBuilder
from delve.util.coordinates import Rect
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG


class SimpleMapBuilder(InitialBuilder):
    """Record up to ``max_rooms`` random rectangles that do not intersect.

    Only the rooms list is produced. Pair this with RoomDrawer and a corridor
    strategy.
    """

    def __init__(
        self,
        max_rooms: int = config.SIMPLE_MAX_ROOMS,
        min_size: int = config.SIMPLE_MIN_ROOM_SIZE,
        max_size: int = config.SIMPLE_MAX_ROOM_SIZE,
    ) -> None:
        self.max_rooms = max_rooms
        self.min_size = min_size
        self.max_size = max_size

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        rooms: list[Rect] = []

        for _ in range(self.max_rooms):
            w = rng.randrange(self.min_size, self.max_size)
            h = rng.randrange(self.min_size, self.max_size)
            x = roll_d(rng, game_map.width - w - 1) - 1
            y = roll_d(rng, game_map.height - h - 1) - 1
            new_room = Rect(x, y, w, h)
            if not any(new_room.intersects(other) for other in rooms):
                rooms.append(new_room)

        state.rooms = rooms
