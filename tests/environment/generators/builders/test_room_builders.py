"""Tests for the room-based initial builders."""

from __future__ import annotations

from random import Random

import numpy as np

from delve.environment.generators.builders import (
    BspDungeonBuilder,
    BspInteriorBuilder,
    SimpleMapBuilder,
)
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from tests.helpers import make_state


def assert_border_is_wall(game_map) -> None:
    assert np.all(game_map.tiles[0, :] == TileTypeID.WALL)
    assert np.all(game_map.tiles[-1, :] == TileTypeID.WALL)
    assert np.all(game_map.tiles[:, 0] == TileTypeID.WALL)
    assert np.all(game_map.tiles[:, -1] == TileTypeID.WALL)


# =============================================================================
# BSP DUNGEON
# =============================================================================


class TestBspDungeonBuilder:
    """Tests for scattered BSP rooms."""

    def test_rooms_are_carved(self) -> None:
        """Every recorded room's interior is floor."""
        state = make_state(80, 50)
        BspDungeonBuilder().build_map(Random(1), state)

        assert state.rooms
        for room in state.rooms:
            for x, y in room.interior():
                assert state.map.tiles[x, y] == TileTypeID.FLOOR

    def test_rooms_never_overlap(self) -> None:
        """No two room interiors share a tile."""
        state = make_state(80, 50)
        BspDungeonBuilder().build_map(Random(2), state)

        assert state.rooms is not None
        seen: set[tuple[int, int]] = set()
        for room in state.rooms:
            tiles = set(room.interior())
            assert not tiles & seen
            seen |= tiles

    def test_one_tile_margin(self) -> None:
        """A candidate needs one tile of solid wall around its bounds."""
        state = make_state(20, 12)
        room = Rect(2, 2, 5, 5)
        state.map.tiles[9, 4] = TileTypeID.FLOOR
        assert BspDungeonBuilder._is_possible(state.map, room)

        state.map.tiles[8, 4] = TileTypeID.FLOOR
        assert not BspDungeonBuilder._is_possible(state.map, room)

    def test_rooms_are_walled_apart(self) -> None:
        """Unconnected room interiors never touch, even diagonally."""
        state = make_state(80, 50)
        BspDungeonBuilder(connect_rooms=False).build_map(Random(6), state)

        assert state.rooms
        for i, room in enumerate(state.rooms):
            for other in state.rooms[i + 1 :]:
                # Interiors span x1 + 1 ..= x2, so these are tile gaps
                gap_x = max(other.x1 + 1 - room.x2, room.x1 + 1 - other.x2)
                gap_y = max(other.y1 + 1 - room.y2, room.y1 + 1 - other.y2)
                assert max(gap_x, gap_y) >= 2

    def test_connected_rooms_record_corridors(self) -> None:
        """Rooms are sorted by left edge and joined one after another."""
        state = make_state(80, 50)
        BspDungeonBuilder().build_map(Random(3), state)

        assert state.rooms is not None
        assert state.corridors is not None
        assert len(state.corridors) == len(state.rooms) - 1
        assert [r.x1 for r in state.rooms] == sorted(r.x1 for r in state.rooms)
        assert_border_is_wall(state.map)

    def test_unconnected_rooms(self) -> None:
        """With connect_rooms off no corridors are recorded."""
        state = make_state(80, 50)
        BspDungeonBuilder(connect_rooms=False).build_map(Random(4), state)
        assert state.rooms
        assert state.corridors is None

    def test_same_seed_same_rooms(self) -> None:
        a = make_state(80, 50)
        b = make_state(80, 50)
        BspDungeonBuilder().build_map(Random(5), a)
        BspDungeonBuilder().build_map(Random(5), b)
        assert a.rooms == b.rooms
        assert (a.map.tiles == b.map.tiles).all()


# =============================================================================
# BSP INTERIOR
# =============================================================================


class TestBspInteriorBuilder:
    """Tests for wall-to-wall BSP interiors."""

    def test_rooms_fill_the_building(self) -> None:
        """Leaves are floored edge to edge and joined in order."""
        state = make_state(80, 50)
        BspInteriorBuilder().build_map(Random(6), state)

        rooms = state.rooms
        assert rooms is not None
        assert len(rooms) > 1
        for room in rooms:
            for y in range(room.y1, room.y2):
                for x in range(room.x1, room.x2):
                    if 0 < x < 79 and 0 < y < 49:
                        assert state.map.tiles[x, y] == TileTypeID.FLOOR

        assert state.corridors is not None
        assert len(state.corridors) == len(rooms) - 1
        assert_border_is_wall(state.map)

    def test_leaves_are_small(self) -> None:
        """Each leaf is at most the minimum size across its last split."""
        state = make_state(80, 50)
        BspInteriorBuilder(min_room_size=8).build_map(Random(7), state)

        assert state.rooms is not None
        for room in state.rooms:
            assert min(room.width, room.height) <= 8


# =============================================================================
# SIMPLE ROOMS
# =============================================================================


class TestSimpleMapBuilder:
    """Tests for the room-list-only builder."""

    def test_rooms_do_not_intersect(self) -> None:
        state = make_state(80, 50)
        SimpleMapBuilder().build_map(Random(8), state)

        rooms = state.rooms
        assert rooms
        for i, room in enumerate(rooms):
            for other in rooms[i + 1 :]:
                assert not room.intersects(other)

    def test_rooms_fit_on_map_and_nothing_is_carved(self) -> None:
        """Only the room list is produced; drawing is left to RoomDrawer."""
        state = make_state(80, 50)
        SimpleMapBuilder().build_map(Random(9), state)

        assert state.rooms
        for room in state.rooms:
            assert room.x1 >= 0 and room.y1 >= 0
            assert room.x2 <= 78 and room.y2 <= 48
        assert state.map.count_tiles(TileTypeID.FLOOR) == 0
