"""Building dataclass for the semantic layer over town generation.

The town builder places plain rectangles of floor and walls. A Building keeps
what those rectangles mean: which role the building plays in town, where its
footprint lies and where its door was cut.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from delve.types import WorldTilePos
from delve.util.coordinates import Rect


class BuildingRole(Enum):
    """What a town building is used for, assigned by size."""

    PUB = "Pub"
    TEMPLE = "Temple"
    BLACKSMITH = "Blacksmith"
    CLOTHIER = "Clothier"
    ALCHEMIST = "Alchemist"
    PLAYER_HOUSE = "Player House"
    HOVEL = "Hovel"
    ABANDONED = "Abandoned House"


@dataclass
class Building:
    """A single walled building.

    Attributes:
        id: Index of the building in placement order.
        role: What the building is used for, once roles are assigned.
        footprint: The outer bounds of the building including walls.
        door_positions: (x, y) positions where doors are placed.
    """

    id: int
    footprint: Rect
    role: BuildingRole | None = None
    door_positions: list[WorldTilePos] = field(default_factory=list)

    @property
    def area(self) -> int:
        return self.footprint.width * self.footprint.height

    @property
    def center(self) -> WorldTilePos:
        return (
            self.footprint.x1 + self.footprint.width // 2,
            self.footprint.y1 + self.footprint.height // 2,
        )
