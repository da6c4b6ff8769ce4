"""Carving helpers shared by the builders.

Tunnels and corridors return the indices of the tiles they turned into
floor, so corridor strategies can record them for later spawning and door
placement.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.types import TileIndex, WorldTilePos
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG


class Symmetry(Enum):
    """Mirroring applied when painting floor."""

    NONE = auto()
    HORIZONTAL = auto()
    VERTICAL = auto()
    BOTH = auto()


def _carve(game_map: GameMap, x: int, y: int) -> TileIndex | None:
    """Turn one in-bounds tile to floor, returning its index if it changed."""
    if not game_map.in_bounds(x, y):
        return None
    if game_map.tiles[x, y] == TileTypeID.FLOOR:
        return None
    game_map.tiles[x, y] = TileTypeID.FLOOR
    return game_map.xy_idx(x, y)


def apply_room_to_map(game_map: GameMap, room: Rect) -> None:
    """Carve a rectangular room's interior to floor."""
    for x, y in room.interior():
        if game_map.in_bounds(x, y):
            game_map.tiles[x, y] = TileTypeID.FLOOR


def apply_horizontal_tunnel(
    game_map: GameMap, x1: int, x2: int, y: int
) -> list[TileIndex]:
    corridor: list[TileIndex] = []
    for x in range(min(x1, x2), max(x1, x2) + 1):
        carved = _carve(game_map, x, y)
        if carved is not None:
            corridor.append(carved)
    return corridor


def apply_vertical_tunnel(
    game_map: GameMap, y1: int, y2: int, x: int
) -> list[TileIndex]:
    corridor: list[TileIndex] = []
    for y in range(min(y1, y2), max(y1, y2) + 1):
        carved = _carve(game_map, x, y)
        if carved is not None:
            corridor.append(carved)
    return corridor


def draw_corridor(
    game_map: GameMap, x1: int, y1: int, x2: int, y2: int
) -> list[TileIndex]:
    """Walk from (x1, y1) to (x2, y2), closing the x gap first, then y."""
    corridor: list[TileIndex] = []
    x, y = x1, y1
    while x != x2 or y != y2:
        if x < x2:
            x += 1
        elif x > x2:
            x -= 1
        elif y < y2:
            y += 1
        else:
            y -= 1

        carved = _carve(game_map, x, y)
        if carved is not None:
            corridor.append(carved)
    return corridor


def paint(
    game_map: GameMap, mode: Symmetry, brush_size: int, x: int, y: int
) -> None:
    """Paint floor at (x, y), mirrored across the map centre per ``mode``."""
    center_x = game_map.width // 2
    center_y = game_map.height // 2

    match mode:
        case Symmetry.NONE:
            apply_paint(game_map, brush_size, x, y)
        case Symmetry.HORIZONTAL:
            if x == center_x:
                apply_paint(game_map, brush_size, x, y)
            else:
                dist_x = abs(center_x - x)
                apply_paint(game_map, brush_size, center_x + dist_x, y)
                apply_paint(game_map, brush_size, center_x - dist_x, y)
        case Symmetry.VERTICAL:
            if y == center_y:
                apply_paint(game_map, brush_size, x, y)
            else:
                dist_y = abs(center_y - y)
                apply_paint(game_map, brush_size, x, center_y + dist_y)
                apply_paint(game_map, brush_size, x, center_y - dist_y)
        case Symmetry.BOTH:
            dist_x = abs(center_x - x)
            dist_y = abs(center_y - y)
            apply_paint(game_map, brush_size, center_x + dist_x, center_y + dist_y)
            apply_paint(game_map, brush_size, center_x - dist_x, center_y + dist_y)
            apply_paint(game_map, brush_size, center_x + dist_x, center_y - dist_y)
            apply_paint(game_map, brush_size, center_x - dist_x, center_y - dist_y)


def apply_paint(game_map: GameMap, brush_size: int, x: int, y: int) -> None:
    """Paint a single tile, or a square brush clipped to the map interior."""
    if brush_size == 1:
        _carve(game_map, x, y)
        return

    half_brush = brush_size // 2
    for brush_y in range(y - half_brush, y + half_brush):
        for brush_x in range(x - half_brush, x + half_brush):
            if 1 < brush_x < game_map.width - 1 and 1 < brush_y < game_map.height - 1:
                game_map.tiles[brush_x, brush_y] = TileTypeID.FLOOR


def stagger(rng: RNG, game_map: GameMap, x: int, y: int) -> WorldTilePos:
    """Move one step in a random cardinal direction, staying off the border."""
    match roll_d(rng, 4):
        case 1:
            if x > 2:
                x -= 1
        case 2:
            if x < game_map.width - 2:
                x += 1
        case 3:
            if y > 2:
                y -= 1
        case _:
            if y < game_map.height - 2:
                y += 1
    return x, y
