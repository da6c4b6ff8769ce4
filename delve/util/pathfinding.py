"""Graph primitives over a generated map.

Every tile is a node. A walkable tile connects to up to 8 neighbours: the 4
cardinal steps cost the movement cost of the tile being left and the 4
diagonal steps cost that times ``config.DIAGONAL_COST_MULTIPLIER``. Blocked
tiles and tiles off the grid are never entered.

The weighted flood fill (``dijkstra_map``) used for culling and exit placement
follows this model exactly. The A* search (``find_path``) used to route roads
and streams runs on ``tcod.path.AStar``, which charges the cost of the tile
being entered instead, so a path's total differs from the flood distance by
the end tile's cost minus the start tile's cost.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import tcod.los
import tcod.path

from delve import config
from delve.environment import tile_types
from delve.types import TileIndex, WorldTilePos

if TYPE_CHECKING:
    from delve.environment.map import GameMap


# (dx, dy, is_diagonal) in the order exits are reported
_NEIGHBOR_OFFSETS: tuple[tuple[int, int, bool], ...] = (
    (-1, 0, False),
    (1, 0, False),
    (0, -1, False),
    (0, 1, False),
    (-1, -1, True),
    (1, -1, True),
    (-1, 1, True),
    (1, 1, True),
)


@dataclass
class NavigationPath:
    """Result of an A* search.

    ``steps`` lists the tile indices walked, excluding the start. A search
    from a tile to itself succeeds with no steps.
    """

    success: bool
    steps: list[TileIndex] = field(default_factory=list)


def get_available_exits(
    game_map: GameMap, idx: TileIndex
) -> list[tuple[TileIndex, float]]:
    """List the (neighbour index, step cost) pairs reachable from a tile.

    Relies on ``game_map.blocked``; call ``populate_blocked()`` first.
    """
    x, y = game_map.idx_xy(idx)
    tile_cost = tile_types.get_move_cost(game_map.tiles[x, y])
    exits: list[tuple[TileIndex, float]] = []
    for dx, dy, diagonal in _NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if not game_map.is_exit_valid(nx, ny):
            continue
        cost = tile_cost
        if diagonal:
            cost *= config.DIAGONAL_COST_MULTIPLIER
        exits.append((game_map.xy_idx(nx, ny), cost))
    return exits


def dijkstra_map(
    game_map: GameMap,
    starts: Iterable[TileIndex],
    max_depth: float = config.MAX_PATHING_DISTANCE,
) -> np.ndarray:
    """Flood outward from the start tiles, recording the cheapest path cost.

    Args:
        game_map: The map to flood. Its ``blocked`` buffer must be current.
        starts: Origin tile indices, all at distance 0.
        max_depth: Tiles whose accumulated cost would exceed this stay unreached.

    Returns:
        A float64 array of shape (width, height) indexed ``[x, y]``. Tiles the
        flood never reached hold ``config.UNREACHABLE_DISTANCE``.
    """
    distances = np.full(
        (game_map.width, game_map.height),
        config.UNREACHABLE_DISTANCE,
        dtype=np.float64,
        order="F",
    )
    frontier: list[tuple[float, TileIndex]] = []
    for start in starts:
        distances[game_map.idx_xy(start)] = 0.0
        frontier.append((0.0, start))
    heapq.heapify(frontier)

    while frontier:
        distance, idx = heapq.heappop(frontier)
        if distance > distances[game_map.idx_xy(idx)]:
            continue  # Stale entry
        for exit_idx, cost in get_available_exits(game_map, idx):
            new_distance = distance + cost
            if new_distance > max_depth:
                continue
            exit_pos = game_map.idx_xy(exit_idx)
            if new_distance < distances[exit_pos]:
                distances[exit_pos] = new_distance
                heapq.heappush(frontier, (new_distance, exit_idx))

    return distances


def find_path(game_map: GameMap, start: TileIndex, end: TileIndex) -> NavigationPath:
    """
    Calculates a path between two tiles using A*.

    Blocked tiles are impassable; every other tile costs its movement cost to
    enter, times config.DIAGONAL_COST_MULTIPLIER for diagonal steps. This is
    tcod's convention and differs from ``get_available_exits``, which charges
    the tile being left. Only the route matters to callers. Relies on
    ``game_map.blocked``; call ``populate_blocked()`` first.

    Args:
        game_map: The map to search.
        start: Tile index to start from.
        end: Tile index to reach.

    Returns:
        A NavigationPath whose steps exclude the start tile. ``success`` is
        False when the end cannot be reached.
    """
    if start == end:
        return NavigationPath(success=True)

    cost = np.where(game_map.blocked, 0.0, game_map.move_cost).astype(np.float32)
    astar = tcod.path.AStar(cost=cost, diagonal=config.DIAGONAL_COST_MULTIPLIER)

    sx, sy = game_map.idx_xy(start)
    ex, ey = game_map.idx_xy(end)
    path: list[WorldTilePos] = astar.get_path(sx, sy, ex, ey)
    if not path:
        return NavigationPath(success=False)

    return NavigationPath(
        success=True, steps=[game_map.xy_idx(int(x), int(y)) for x, y in path]
    )


def line_between(start: WorldTilePos, end: WorldTilePos) -> list[WorldTilePos]:
    """Tiles on the Bresenham line from start to end, excluding the start."""
    points = tcod.los.bresenham(start, end)
    return [(int(x), int(y)) for x, y in points[1:]]
