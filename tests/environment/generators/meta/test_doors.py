"""Tests for door placement."""

from __future__ import annotations

from random import Random

from delve.environment.generators.meta import DoorPlacement
from delve.environment.generators.meta.doors import DOOR
from tests.helpers import FixedRolls, state_from_ascii

# A one-tile gap at (4, 3) between two floor areas, walls above and below
EAST_WEST_GAP = [
    "#########",
    "#########",
    "##..#..##",
    "##.....##",
    "##..#..##",
    "#########",
    "#########",
]

# A one-tile gap at (5, 4) between two rooms, walls left and right
NORTH_SOUTH_GAP = [
    "###########",
    "###########",
    "##.......##",
    "##.......##",
    "#####.#####",
    "##.......##",
    "##.......##",
    "###########",
    "###########",
]


class TestDoorPossible:
    """Tests for the door shape check."""

    def test_east_west_gap(self) -> None:
        state = state_from_ascii(EAST_WEST_GAP)
        assert DoorPlacement._door_possible(state, state.map.xy_idx(4, 3))
        assert not DoorPlacement._door_possible(state, state.map.xy_idx(3, 3))

    def test_north_south_gap(self) -> None:
        state = state_from_ascii(NORTH_SOUTH_GAP)
        assert DoorPlacement._door_possible(state, state.map.xy_idx(5, 4))
        assert not DoorPlacement._door_possible(state, state.map.xy_idx(5, 3))

    def test_walls_are_not_doors(self) -> None:
        state = state_from_ascii(NORTH_SOUTH_GAP)
        assert not DoorPlacement._door_possible(state, state.map.xy_idx(4, 4))

    def test_occupied_tile_is_rejected(self) -> None:
        state = state_from_ascii(EAST_WEST_GAP)
        idx = state.map.xy_idx(4, 3)
        state.spawn_list.append((idx, "Goblin"))
        assert not DoorPlacement._door_possible(state, idx)

    def test_gap_near_the_edge_is_rejected(self) -> None:
        """The gap shape alone is not enough within two tiles of the edge."""
        state = state_from_ascii(
            [
                "###.###",
                "###.###",
                "##...##",
                "#######",
            ]
        )
        assert not DoorPlacement._door_possible(state, state.map.xy_idx(3, 1))


class TestDoorPlacement:
    """Tests for the corridor and scan paths."""

    def test_door_at_corridor_start(self) -> None:
        state = state_from_ascii(EAST_WEST_GAP)
        game_map = state.map
        state.corridors = [
            [game_map.xy_idx(4, 3), game_map.xy_idx(5, 3), game_map.xy_idx(6, 3)]
        ]
        DoorPlacement().build_map(Random(1), state)
        assert state.spawn_list == [(game_map.xy_idx(4, 3), DOOR)]

    def test_short_corridors_get_no_door(self) -> None:
        state = state_from_ascii(EAST_WEST_GAP)
        game_map = state.map
        state.corridors = [[game_map.xy_idx(4, 3), game_map.xy_idx(5, 3)]]
        DoorPlacement().build_map(Random(1), state)
        assert state.spawn_list == []

    def test_scan_places_door_on_lucky_roll(self) -> None:
        """Without corridors the only gap tile rolls a d3."""
        state = state_from_ascii(EAST_WEST_GAP)
        DoorPlacement().build_map(FixedRolls([1]), state)
        assert state.spawn_list == [(state.map.xy_idx(4, 3), DOOR)]

    def test_scan_skips_door_on_other_rolls(self) -> None:
        state = state_from_ascii(EAST_WEST_GAP)
        DoorPlacement().build_map(FixedRolls([2]), state)
        assert state.spawn_list == []
