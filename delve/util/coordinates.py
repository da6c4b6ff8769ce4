"""Room rectangles in tile coordinates."""

from __future__ import annotations

from collections.abc import Iterator

from delve.types import TileCoord, WorldTilePos


class Rect:
    """Rectangle/bounding box in tile coordinates.

    Rooms carve their interior as the tiles x1+1..=x2, y1+1..=y2, so the
    (x1, y1) row and column are always left as a wall border.
    """

    def __init__(self, x: TileCoord, y: TileCoord, w: TileCoord, h: TileCoord) -> None:
        self.x1: TileCoord = x
        self.y1: TileCoord = y
        self.x2: TileCoord = x + w
        self.y2: TileCoord = y + h

    @property
    def width(self) -> TileCoord:
        return self.x2 - self.x1

    @property
    def height(self) -> TileCoord:
        return self.y2 - self.y1

    @property
    def area(self) -> int:
        return self.width * self.height

    def center(self) -> tuple[int, int]:
        return (int((self.x1 + self.x2) / 2), int((self.y1 + self.y2) / 2))

    def intersects(self, other: Rect) -> bool:
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterator[WorldTilePos]:
        """Yield the tiles a carved room occupies (x1+1..=x2, y1+1..=y2)."""
        for y in range(self.y1 + 1, self.y2 + 1):
            for x in range(self.x1 + 1, self.x2 + 1):
                yield x, y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (
            other.x1,
            other.y1,
            other.x2,
            other.y2,
        )

    def __repr__(self) -> str:
        return f"Rect(x1={self.x1}, y1={self.y1}, x2={self.x2}, y2={self.y2})"
