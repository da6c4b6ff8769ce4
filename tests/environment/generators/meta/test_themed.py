"""Tests for the themed meta builders: caves, forest road and dragon lair."""

from __future__ import annotations

from random import Random

import numpy as np
import pytest

from delve.environment.generators.base import (
    BuilderConfigurationError,
    MapGenerationError,
)
from delve.environment.generators.builders import CellularAutomataBuilder
from delve.environment.generators.meta import (
    CaveDecorator,
    CaveTransition,
    DragonsLair,
    DragonSpawner,
    YellowBrickRoad,
)
from delve.environment.generators.meta.fortress import DRAGON
from delve.environment.tile_types import TileTypeID
from tests.helpers import FixedRolls, make_state, open_room_state, state_from_ascii

# =============================================================================
# CAVES
# =============================================================================


class TestCaveDecorator:
    """Tests for cave dressing."""

    @pytest.mark.parametrize(
        ("rolls", "expected"),
        [
            ([1], TileTypeID.GRAVEL),
            ([2, 1], TileTypeID.SHALLOW_WATER),
            ([2, 2], TileTypeID.FLOOR),
        ],
    )
    def test_floor_rolls(self, rolls: list[int], expected: TileTypeID) -> None:
        state = state_from_ascii(["#.#"])
        CaveDecorator().build_map(FixedRolls(rolls), state)
        assert state.map.tiles[1, 0] == expected
        # Walls with no wall neighbours are left alone
        assert state.map.tiles[0, 0] == TileTypeID.WALL

    def test_rock_formations(self) -> None:
        """Walls with a single wall neighbour roll for a formation."""
        state = state_from_ascii(["##."])
        CaveDecorator().build_map(FixedRolls([1, 2, 2, 2]), state)
        assert state.map.tiles[0, 0] == TileTypeID.STALACTITE
        assert state.map.tiles[1, 0] == TileTypeID.STALAGMITE
        assert state.map.tiles[2, 0] == TileTypeID.FLOOR

    def test_rules_over_a_cave(self) -> None:
        state = make_state(40, 30)
        CellularAutomataBuilder().build_map(Random(41), state)
        before = state.map.tiles.copy()
        CaveDecorator().build_map(Random(42), state)

        after = state.map.tiles
        was_floor = before == TileTypeID.FLOOR
        assert np.isin(
            after[was_floor],
            [TileTypeID.FLOOR, TileTypeID.GRAVEL, TileTypeID.SHALLOW_WATER],
        ).all()
        # A map corner always has exactly two wall neighbours
        assert after[0, 0] == TileTypeID.DEEP_WATER
        assert after[39, 29] == TileTypeID.DEEP_WATER
        assert not state.map.outdoors


class TestCaveTransition:
    """Tests for the cave-to-dungeon level."""

    def test_right_half_becomes_dungeon(self) -> None:
        state = make_state(80, 50, depth=5)
        CellularAutomataBuilder().build_map(Random(51), state)
        game_map = state.map
        left = game_map.xy_idx(10, 10)
        right = game_map.xy_idx(60, 10)
        state.spawn_list = [(left, "Goblin"), (right, "Goblin")]
        before = game_map.tiles.copy()

        CaveTransition().build_map(Random(52), state)

        assert (game_map.tiles[:40, :] == before[:40, :]).all()
        assert (left, "Goblin") in state.spawn_list
        assert (right, "Goblin") not in state.spawn_list
        for idx, _ in state.spawn_list:
            if idx != left:
                assert idx % 80 >= 40
        assert game_map.count_tiles(TileTypeID.FLOOR) > 0

    def test_same_seed_same_level(self) -> None:
        states = []
        for _ in range(2):
            state = make_state(80, 50, depth=5)
            CellularAutomataBuilder().build_map(Random(53), state)
            CaveTransition().build_map(Random(54), state)
            states.append(state)
        a, b = states
        assert (a.map.tiles == b.map.tiles).all()
        assert a.spawn_list == b.spawn_list


# =============================================================================
# FOREST
# =============================================================================


class TestYellowBrickRoad:
    """Tests for the forest road and stream."""

    def test_road_runs_from_start_to_stairs(self) -> None:
        state = open_room_state(40, 30)
        state.starting_position = (2, 15)
        YellowBrickRoad().build_map(Random(61), state)

        tiles = state.map.tiles
        assert tiles[38, 15] == TileTypeID.DOWN_STAIRS
        for x in range(3, 38):
            assert tiles[x, 15] == TileTypeID.ROAD
        assert state.map.count_tiles(TileTypeID.DOWN_STAIRS) == 1

    def test_stream_floods_floor(self) -> None:
        state = open_room_state(40, 30)
        state.starting_position = (2, 15)
        YellowBrickRoad().build_map(Random(62), state)
        assert state.map.count_tiles(TileTypeID.SHALLOW_WATER) > 0

    def test_road_stays_off_the_border(self) -> None:
        state = open_room_state(40, 30)
        state.starting_position = (2, 15)
        YellowBrickRoad().build_map(Random(63), state)
        tiles = state.map.tiles
        assert not (tiles[0, :] == TileTypeID.ROAD).any()
        assert not (tiles[:, 0] == TileTypeID.ROAD).any()
        assert not (tiles[-1, :] == TileTypeID.ROAD).any()

    def test_blocked_road(self) -> None:
        state = open_room_state(40, 30)
        state.map.tiles[20, :] = TileTypeID.WALL
        state.starting_position = (2, 15)
        with pytest.raises(MapGenerationError):
            YellowBrickRoad().build_map(Random(64), state)

    def test_needs_starting_position(self) -> None:
        with pytest.raises(BuilderConfigurationError, match="YellowBrickRoad"):
            YellowBrickRoad().build_map(Random(65), open_room_state(40, 30))


# =============================================================================
# FORTRESS
# =============================================================================


class TestDragonsLair:
    """Tests for the DLA lair."""

    def test_only_adds_floor(self) -> None:
        state = open_room_state(40, 30)
        state.map.tiles[10:30, 5:25] = TileTypeID.WALL
        before = state.map.tiles.copy()

        DragonsLair().build_map(Random(71), state)

        was_floor = before == TileTypeID.FLOOR
        assert (state.map.tiles[was_floor] == TileTypeID.FLOOR).all()
        assert state.map.count_tiles(TileTypeID.FLOOR) > np.count_nonzero(was_floor)


class TestDragonSpawner:
    """Tests for the dragon and its clearance."""

    def test_clears_spawns_near_dragon(self) -> None:
        state = open_room_state(80, 50)
        game_map = state.map
        far = game_map.xy_idx(2, 2)
        near = game_map.xy_idx(45, 25)
        state.spawn_list = [(far, "Goblin"), (near, "Orc")]

        DragonSpawner().build_map(Random(1), state)

        assert state.spawn_list == [
            (far, "Goblin"),
            (game_map.xy_idx(40, 25), DRAGON),
        ]

    def test_dragon_snaps_to_walkable(self) -> None:
        state = open_room_state(80, 50)
        state.map.tiles[40, 25] = TileTypeID.WALL
        DragonSpawner().build_map(Random(1), state)

        (dragon_idx, tag) = state.spawn_list[-1]
        assert tag == DRAGON
        assert state.map.walkable[state.map.idx_xy(dragon_idx)]
