from __future__ import annotations

import math

import numpy as np

from delve.environment import tile_types
from delve.environment.tile_types import TileTypeID
from delve.types import TileCoord, TileIndex, WorldTilePos
from delve.util import pathfinding


class GameMap:
    """A generated level: the tile grid plus visibility and reachability state.

    All per-tile arrays have shape (width, height) in Fortran order and are
    indexed ``[x, y]``. Builders that work with flat indices use ``xy_idx`` and
    ``idx_xy``; the flat index is ``y * width + x``.
    """

    def __init__(
        self,
        depth: int,
        width: TileCoord,
        height: TileCoord,
        name: str = "New Map",
    ) -> None:
        self.depth = depth
        self.width: TileCoord = width
        self.height: TileCoord = height
        self.name = name
        self.outdoors = True

        self.tiles = np.full(
            (width, height), fill_value=TileTypeID.WALL, dtype=np.uint8, order="F"
        )

        # Which tiles have been seen at some point, and which are seen right now.
        self.revealed = np.full(
            (width, height), fill_value=False, dtype=bool, order="F"
        )
        self.visible = np.full((width, height), fill_value=False, dtype=bool, order="F")

        # Derived from walkability by populate_blocked(); pathing reads this.
        self.blocked = np.full((width, height), fill_value=False, dtype=bool, order="F")

        # Tile indices that block sight regardless of the tile type.
        self.view_blocked: set[TileIndex] = set()
        self.bloodstains: set[TileIndex] = set()

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def xy_idx(self, x: TileCoord, y: TileCoord) -> TileIndex:
        return y * self.width + x

    def idx_xy(self, idx: TileIndex) -> WorldTilePos:
        return idx % self.width, idx // self.width

    def in_bounds(self, x: TileCoord, y: TileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def tile_count(self) -> int:
        return self.width * self.height

    def tile_at(self, idx: TileIndex) -> TileTypeID:
        x, y = self.idx_xy(idx)
        return TileTypeID(self.tiles[x, y])

    def set_tile(self, idx: TileIndex, tile: TileTypeID) -> None:
        x, y = self.idx_xy(idx)
        self.tiles[x, y] = tile

    # -------------------------------------------------------------------------
    # Tile properties
    # -------------------------------------------------------------------------

    @property
    def walkable(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means tile is walkable.

        Not cached: builders rewrite tiles constantly during generation.
        """
        return tile_types.get_walkable_map(self.tiles)

    @property
    def transparent(self) -> np.ndarray:
        """Boolean array of shape (width, height) where True means the tile does
        not block sight. Indices in ``view_blocked`` are always opaque."""
        transparent = tile_types.get_transparent_map(self.tiles)
        for idx in self.view_blocked:
            transparent[self.idx_xy(idx)] = False
        return transparent

    @property
    def move_cost(self) -> np.ndarray:
        """Float32 array of per-tile cardinal step costs."""
        return tile_types.get_move_cost_map(self.tiles)

    def count_tiles(self, tile: TileTypeID) -> int:
        return int(np.count_nonzero(self.tiles == tile))

    # -------------------------------------------------------------------------
    # Reachability
    # -------------------------------------------------------------------------

    def populate_blocked(self) -> None:
        """Recompute the blocked buffer from tile walkability."""
        self.blocked = np.asfortranarray(~self.walkable)

    def is_exit_valid(self, x: TileCoord, y: TileCoord) -> bool:
        if not self.in_bounds(x, y):
            return False
        return not self.blocked[x, y]

    def get_available_exits(self, idx: TileIndex) -> list[tuple[TileIndex, float]]:
        return pathfinding.get_available_exits(self, idx)

    def get_pathing_distance(self, idx1: TileIndex, idx2: TileIndex) -> float:
        """Straight-line distance between two tiles, used as the A* heuristic."""
        x1, y1 = self.idx_xy(idx1)
        x2, y2 = self.idx_xy(idx2)
        return math.hypot(x1 - x2, y1 - y2)

    # -------------------------------------------------------------------------
    # Copying
    # -------------------------------------------------------------------------

    def copy(self) -> GameMap:
        """Return an independent deep copy of this map."""
        clone = GameMap(self.depth, self.width, self.height, self.name)
        clone.outdoors = self.outdoors
        clone.tiles = self.tiles.copy(order="F")
        clone.revealed = self.revealed.copy(order="F")
        clone.visible = self.visible.copy(order="F")
        clone.blocked = self.blocked.copy(order="F")
        clone.view_blocked = set(self.view_blocked)
        clone.bloodstains = set(self.bloodstains)
        return clone

    def to_ascii(self) -> list[str]:
        """Render the tile grid as rows of preview glyphs, top row first."""
        glyphs = tile_types.get_glyph_map(self.tiles)
        return [
            "".join(chr(glyphs[x, y]) for x in range(self.width))
            for y in range(self.height)
        ]
