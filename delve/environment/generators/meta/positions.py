"""Meta builders that choose where the player enters and leaves a level.

Anchored steps resolve one of nine map anchors (left/centre/right by
top/centre/bottom) to the walkable tile closest to it by squared distance.
Ties go to the lowest tile index.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from delve.environment.generators.base import (
    BuildState,
    MapGenerationError,
    MetaBuilder,
)
from delve.environment.tile_types import TileTypeID
from delve.util.pathfinding import dijkstra_map

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.types import WorldTilePos
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class XStart(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class YStart(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


# Exits are anchored on the same nine points
XEnd = XStart
YEnd = YStart


def anchor_point(game_map: GameMap, x: XStart, y: YStart) -> WorldTilePos:
    match x:
        case XStart.LEFT:
            seed_x = 1
        case XStart.CENTER:
            seed_x = game_map.width // 2
        case XStart.RIGHT:
            seed_x = game_map.width - 2

    match y:
        case YStart.TOP:
            seed_y = 1
        case YStart.CENTER:
            seed_y = game_map.height // 2
        case YStart.BOTTOM:
            seed_y = game_map.height - 2

    return seed_x, seed_y


def nearest_walkable(game_map: GameMap, target: WorldTilePos) -> WorldTilePos:
    """Find the walkable tile closest to ``target``.

    Raises:
        MapGenerationError: If the map has no walkable tile at all.
    """
    walkable = game_map.walkable
    if not walkable.any():
        raise MapGenerationError(f"No walkable tile on {game_map.name!r} to anchor to")

    xs, ys = np.indices((game_map.width, game_map.height))
    distance_sq = (xs - target[0]) ** 2 + (ys - target[1]) ** 2
    distance_sq = np.where(walkable, distance_sq, np.iinfo(np.int64).max)
    # Fortran ravel walks x fastest, matching tile index order
    flat = int(np.argmin(distance_sq.ravel(order="F")))
    return game_map.idx_xy(flat)


class AreaStartingPosition(MetaBuilder):
    """Start on the walkable tile nearest a map anchor."""

    def __init__(self, x: XStart, y: YStart) -> None:
        self.x = x
        self.y = y

    def build_map(self, rng: RNG, state: BuildState) -> None:
        anchor = anchor_point(state.map, self.x, self.y)
        state.starting_position = nearest_walkable(state.map, anchor)


class AreaEndingPosition(MetaBuilder):
    """Put the down stairs on the walkable tile nearest a map anchor."""

    def __init__(self, x: XEnd, y: YEnd) -> None:
        self.x = x
        self.y = y

    def build_map(self, rng: RNG, state: BuildState) -> None:
        anchor = anchor_point(state.map, self.x, self.y)
        stairs_x, stairs_y = nearest_walkable(state.map, anchor)
        state.map.tiles[stairs_x, stairs_y] = TileTypeID.DOWN_STAIRS
        state.take_snapshot()


class RoomBasedStartingPosition(MetaBuilder):
    """Start at the centre of the first room."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        state.starting_position = rooms[0].center()


class RoomBasedStairs(MetaBuilder):
    """Put the down stairs at the centre of the last room."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        rooms = state.require_rooms(self)
        stairs_x, stairs_y = rooms[-1].center()
        state.map.tiles[stairs_x, stairs_y] = TileTypeID.DOWN_STAIRS
        state.take_snapshot()


class DistantExit(MetaBuilder):
    """Put the down stairs on the reachable floor farthest from the start."""

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        start_x, start_y = state.require_starting_position(self)

        game_map.populate_blocked()
        distances = dijkstra_map(game_map, [game_map.xy_idx(start_x, start_y)])
        candidates = np.where(
            (game_map.tiles == TileTypeID.FLOOR) & np.isfinite(distances),
            distances,
            -1.0,
        )
        flat = int(np.argmax(candidates.ravel(order="F")))
        stairs_x, stairs_y = game_map.idx_xy(flat)
        if candidates[stairs_x, stairs_y] <= 0.0:
            logger.warning("No reachable floor away from the start for the exit")
            return

        game_map.tiles[stairs_x, stairs_y] = TileTypeID.DOWN_STAIRS
        state.take_snapshot()
