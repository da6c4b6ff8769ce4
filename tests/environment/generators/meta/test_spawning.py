"""Tests for room and noise-region spawning."""

from __future__ import annotations

from random import Random

import pytest

from delve.environment.generators.base import BuilderConfigurationError
from delve.environment.generators.builders import CellularAutomataBuilder
from delve.environment.generators.meta import RoomBasedSpawner, VoronoiSpawning
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from tests.helpers import make_state, open_room_state


class TestRoomBasedSpawner:
    """Tests for per-room spawning."""

    def test_first_room_stays_empty(self) -> None:
        """The player starts in room 0, so only later rooms are filled."""
        spawned = []
        for seed in range(5):
            state = open_room_state(20, 10, depth=10)
            state.rooms = [Rect(1, 1, 6, 6), Rect(10, 1, 6, 6)]
            RoomBasedSpawner().build_map(Random(seed), state)
            spawned.extend(state.spawn_list)

        assert spawned
        for idx, _ in spawned:
            x, y = idx % 20, idx // 20
            assert 10 < x < 16
            assert 1 < y < 7

    def test_needs_rooms(self) -> None:
        with pytest.raises(BuilderConfigurationError):
            RoomBasedSpawner().build_map(Random(1), make_state())


class TestVoronoiSpawning:
    """Tests for noise-region spawning on organic maps."""

    @pytest.fixture
    def cave(self):
        state = make_state(60, 40, depth=4)
        CellularAutomataBuilder().build_map(Random(31), state)
        return state

    def test_spawns_on_distinct_interior_floor(self, cave) -> None:
        VoronoiSpawning().build_map(Random(32), cave)

        game_map = cave.map
        indices = [idx for idx, _ in cave.spawn_list]
        assert indices
        assert len(indices) == len(set(indices))
        for idx in indices:
            x, y = game_map.idx_xy(idx)
            assert game_map.tiles[x, y] == TileTypeID.FLOOR
            assert 0 < x < game_map.width - 1
            assert 0 < y < game_map.height - 1

    def test_same_seed_same_spawns(self, cave) -> None:
        first = cave.map.copy()
        VoronoiSpawning().build_map(Random(33), cave)
        spawns = list(cave.spawn_list)

        again = make_state(60, 40, depth=4)
        again.map = first
        VoronoiSpawning().build_map(Random(33), again)
        assert again.spawn_list == spawns

    def test_single_band_is_one_region(self, cave) -> None:
        """A single band makes the whole cave one region."""
        one_band = make_state(60, 40, depth=4)
        one_band.map = cave.map.copy()
        VoronoiSpawning(bands=1).build_map(Random(34), one_band)
        # One region gets at most d(MAX_SPAWNS_PER_ROOM + 3) + depth - 4
        assert len(one_band.spawn_list) <= 7
