"""Spawn tables and the helpers that fill rooms and regions with content.

Content is described only by name. Turning a tag into an actual monster,
item or prop is the entity layer's job, once the chain's spawn list is
drained with ``BuilderChain.spawn_entities``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from delve import config
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.types import SpawnEntry, TileIndex
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG

# Rolled by a table when nothing should spawn.
NOTHING = "None"


# =============================================================================
# WEIGHTED TABLES
# =============================================================================


@dataclass
class RandomTable:
    """A weighted roll over named entries. Entries of weight 0 never come up."""

    entries: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total_weight(self) -> int:
        return sum(weight for _, weight in self.entries)

    def add(self, name: str, weight: int) -> RandomTable:
        if weight > 0:
            self.entries.append((name, weight))
        return self

    def roll(self, rng: RNG) -> str:
        """Pick an entry with probability proportional to its weight.

        Returns:
            The entry name, or NOTHING for an empty table.
        """
        total = self.total_weight
        if total == 0:
            return NOTHING

        roll = roll_d(rng, total) - 1
        for name, weight in self.entries:
            if roll < weight:
                return name
            roll -= weight
        return NOTHING


@dataclass(frozen=True)
class SpawnTableEntry:
    """One line of the depth spawn table.

    Attributes:
        name: Content tag handed to the entity layer.
        weight: Base weight of the entry.
        min_depth: Shallowest depth the entry appears at.
        max_depth: Deepest depth the entry appears at.
        add_depth_to_weight: Whether deeper levels make the entry more common.
    """

    name: str
    weight: int
    min_depth: int = 0
    max_depth: int = 100
    add_depth_to_weight: bool = False


SPAWN_TABLE: tuple[SpawnTableEntry, ...] = (
    SpawnTableEntry("Goblin", 10, 0, 100),
    SpawnTableEntry("Kobold", 15, 0, 3),
    SpawnTableEntry("Rat", 4, 0, 2),
    SpawnTableEntry("Orc", 1, 3, 100, add_depth_to_weight=True),
    SpawnTableEntry("Bandit", 9, 2, 5),
    SpawnTableEntry("Orc Leader", 1, 6, 100, add_depth_to_weight=True),
    SpawnTableEntry("Dark Elf", 1, 8, 100, add_depth_to_weight=True),
    SpawnTableEntry("Health Potion", 7, 0, 100),
    SpawnTableEntry("Rations", 10, 0, 100),
    SpawnTableEntry("Magic Missile Scroll", 4, 0, 100),
    SpawnTableEntry("Fireball Scroll", 2, 0, 100, add_depth_to_weight=True),
    SpawnTableEntry("Confusion Scroll", 2, 0, 100, add_depth_to_weight=True),
    SpawnTableEntry("Magic Mapping Scroll", 2, 0, 100),
    SpawnTableEntry("Dagger", 3, 0, 100),
    SpawnTableEntry("Shield", 3, 0, 100),
    SpawnTableEntry("Longsword", 1, 1, 100, add_depth_to_weight=True),
    SpawnTableEntry("Tower Shield", 1, 1, 100, add_depth_to_weight=True),
    SpawnTableEntry("Bear Trap", 5, 0, 100),
    SpawnTableEntry("Dart Trap", 2, 3, 100, add_depth_to_weight=True),
)


def spawn_table_for_depth(depth: int) -> RandomTable:
    """Build the weighted table of everything that can appear at ``depth``."""
    table = RandomTable()
    for entry in SPAWN_TABLE:
        if not entry.min_depth <= depth <= entry.max_depth:
            continue
        weight = entry.weight
        if entry.add_depth_to_weight:
            weight += depth
        table.add(entry.name, weight)
    return table


# =============================================================================
# PLACEMENT
# =============================================================================


def spawn_room(
    game_map: GameMap,
    rng: RNG,
    room: Rect,
    depth: int,
    spawn_list: list[SpawnEntry],
) -> None:
    """Fill the floor tiles strictly inside a room."""
    targets: list[TileIndex] = []
    for y in range(room.y1 + 1, room.y2):
        for x in range(room.x1 + 1, room.x2):
            if game_map.in_bounds(x, y) and game_map.tiles[x, y] == TileTypeID.FLOOR:
                targets.append(game_map.xy_idx(x, y))

    spawn_region(rng, targets, depth, spawn_list)


def spawn_region(
    rng: RNG,
    area: list[TileIndex],
    depth: int,
    spawn_list: list[SpawnEntry],
) -> None:
    """Place a depth-scaled number of spawns on distinct tiles of an area.

    The count is ``d(MAX_SPAWNS_PER_ROOM + 3) + depth - 4``, capped by the
    area size. Rolls that come up NOTHING leave their tile empty.
    """
    table = spawn_table_for_depth(depth)
    candidates = list(area)

    num_spawns = min(
        len(candidates), roll_d(rng, config.MAX_SPAWNS_PER_ROOM + 3) + depth - 4
    )
    for _ in range(max(num_spawns, 0)):
        pick = 0 if len(candidates) == 1 else roll_d(rng, len(candidates)) - 1
        idx = candidates.pop(pick)
        tag = table.roll(rng)
        if tag != NOTHING:
            spawn_list.append((idx, tag))
