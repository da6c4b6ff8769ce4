"""Tests for spawn tables and region population."""

from __future__ import annotations

from random import Random

from delve.environment.generators.spawner import (
    NOTHING,
    RandomTable,
    spawn_region,
    spawn_room,
    spawn_table_for_depth,
)
from delve.util.coordinates import Rect
from tests.helpers import open_room_state


class TestRandomTable:
    """Tests for weighted rolls."""

    def test_empty_table_rolls_nothing(self) -> None:
        assert RandomTable().roll(Random(1)) == NOTHING

    def test_zero_weight_entries_are_dropped(self) -> None:
        table = RandomTable().add("Goblin", 0).add("Orc", 3)
        assert table.entries == [("Orc", 3)]
        assert table.total_weight == 3

    def test_rolls_only_listed_entries(self) -> None:
        """Every entry with weight comes up eventually, nothing else does."""
        rng = Random(2)
        table = RandomTable().add("Goblin", 1).add("Orc", 5)
        rolled = {table.roll(rng) for _ in range(300)}
        assert rolled == {"Goblin", "Orc"}


class TestSpawnTableForDepth:
    """Tests for depth filtering and scaling."""

    def test_shallow_table(self) -> None:
        names = {name for name, _ in spawn_table_for_depth(1).entries}
        assert "Kobold" in names
        assert "Goblin" in names
        assert "Orc" not in names
        assert "Dark Elf" not in names

    def test_depth_adds_weight(self) -> None:
        """Entries flagged to scale gain the depth as extra weight."""
        weights = dict(spawn_table_for_depth(10).entries)
        assert weights["Orc"] == 11
        assert weights["Goblin"] == 10
        assert "Kobold" not in weights


class TestSpawnRegion:
    """Tests for spawning into an area."""

    def test_spawns_land_on_distinct_area_tiles(self) -> None:
        """No tile is used twice and nothing lands outside the area."""
        rng = Random(3)
        area = list(range(100, 140))
        spawns: list[tuple[int, str]] = []
        for _ in range(20):
            batch: list[tuple[int, str]] = []
            spawn_region(rng, area, 8, batch)
            indices = [idx for idx, _ in batch]
            assert len(indices) == len(set(indices))
            assert set(indices) <= set(area)
            spawns.extend(batch)
        assert spawns

    def test_area_is_not_consumed(self) -> None:
        """The caller's area list is left untouched."""
        area = [5, 6, 7]
        spawn_region(Random(4), area, 5, [])
        assert area == [5, 6, 7]

    def test_count_capped_by_area(self) -> None:
        """A single tile region never gets more than one spawn."""
        rng = Random(5)
        for _ in range(50):
            spawns: list[tuple[int, str]] = []
            spawn_region(rng, [42], 20, spawns)
            assert len(spawns) <= 1

    def test_empty_area(self) -> None:
        spawns: list[tuple[int, str]] = []
        spawn_region(Random(6), [], 20, spawns)
        assert spawns == []

    def test_deep_levels_spawn_more(self) -> None:
        """With enough room the count grows with depth."""
        rng = Random(7)
        area = list(range(500))
        shallow: list[tuple[int, str]] = []
        deep: list[tuple[int, str]] = []
        for _ in range(30):
            spawn_region(rng, area, 1, shallow)
            spawn_region(rng, area, 12, deep)
        assert len(deep) > len(shallow)


def test_spawn_room_uses_strict_interior():
    state = open_room_state(12, 12, depth=10)
    game_map = state.map
    room = Rect(2, 2, 4, 4)
    rng = Random(8)
    for _ in range(20):
        spawn_room(game_map, rng, room, 10, state.spawn_list)

    assert state.spawn_list
    for idx, _ in state.spawn_list:
        x, y = game_map.idx_xy(idx)
        assert room.x1 < x < room.x2
        assert room.y1 < y < room.y2
