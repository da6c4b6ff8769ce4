"""Tests for corridor strategies and corridor spawning."""

from __future__ import annotations

from random import Random

import pytest

from delve.environment.generators.base import BuilderConfigurationError
from delve.environment.generators.common import apply_room_to_map
from delve.environment.generators.meta import (
    BspCorridors,
    CorridorSpawner,
    DoglegCorridors,
    NearestCorridors,
    StraightLineCorridors,
)
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from tests.helpers import make_state, reachable_mask


def two_rooms_state(depth: int = 1):
    state = make_state(30, 14, depth)
    state.rooms = [Rect(2, 2, 5, 4), Rect(18, 6, 6, 5)]
    for room in state.rooms:
        apply_room_to_map(state.map, room)
    return state


ALL_STRATEGIES = [
    DoglegCorridors,
    BspCorridors,
    NearestCorridors,
    StraightLineCorridors,
]


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
def test_corridors_record_only_carved_tiles(strategy) -> None:
    """Recorded indices are exactly the tiles that turned into floor."""
    state = two_rooms_state()
    before = state.map.tiles.copy()
    strategy().build_map(Random(1), state)

    assert state.corridors is not None
    assert len(state.corridors) == 1
    carved = {
        state.map.xy_idx(x, y)
        for y in range(state.map.height)
        for x in range(state.map.width)
        if before[x, y] != TileTypeID.FLOOR
        and state.map.tiles[x, y] == TileTypeID.FLOOR
    }
    (corridor,) = state.corridors
    assert len(corridor) == len(set(corridor))
    assert set(corridor) == carved


@pytest.mark.parametrize(
    "strategy", [DoglegCorridors, NearestCorridors, StraightLineCorridors]
)
@pytest.mark.parametrize("seed", [1, 2])
def test_centre_to_centre_corridors_connect(strategy, seed: int) -> None:
    state = two_rooms_state()
    strategy().build_map(Random(seed), state)
    assert reachable_mask(state.map, (4, 4))[21, 8]


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
def test_corridors_need_rooms(strategy) -> None:
    with pytest.raises(BuilderConfigurationError):
        strategy().build_map(Random(1), make_state())


def test_nearest_corridors_skip_connected_rooms() -> None:
    """The last room has nobody left to start a corridor towards."""
    state = make_state(40, 14)
    state.rooms = [Rect(2, 2, 4, 4), Rect(16, 2, 4, 4), Rect(30, 2, 4, 4)]
    for room in state.rooms:
        apply_room_to_map(state.map, room)
    NearestCorridors().build_map(Random(1), state)

    assert state.corridors is not None
    assert len(state.corridors) == 2
    reachable = reachable_mask(state.map, state.rooms[0].center())
    for room in state.rooms:
        assert reachable[room.center()]


class TestCorridorSpawner:
    """Tests for spawning along corridors."""

    def test_needs_corridors(self) -> None:
        state = two_rooms_state()
        with pytest.raises(BuilderConfigurationError, match="CorridorSpawner"):
            CorridorSpawner().build_map(Random(1), state)

    def test_spawns_land_in_corridors(self) -> None:
        state = two_rooms_state(depth=10)
        NearestCorridors().build_map(Random(2), state)
        assert state.corridors is not None
        corridor_tiles = {idx for corridor in state.corridors for idx in corridor}

        rng = Random(3)
        for _ in range(10):
            CorridorSpawner().build_map(rng, state)

        assert state.spawn_list
        assert {idx for idx, _ in state.spawn_list} <= corridor_tiles
