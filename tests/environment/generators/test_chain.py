"""Tests for the BuilderChain and the BuildState it threads through steps."""

from __future__ import annotations

from random import Random

import pytest

from delve.environment.generators.base import (
    BuilderConfigurationError,
    BuildState,
    InitialBuilder,
    MetaBuilder,
)
from delve.environment.generators.chain import BuilderChain
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from tests.helpers import make_state


class RecordingStarter(InitialBuilder):
    """Carves one floor tile and records that it ran."""

    def __init__(self, log: list[str]) -> None:
        self.log = log

    def build_map(self, rng, state: BuildState) -> None:
        self.log.append("start")
        state.map.tiles[1, 1] = TileTypeID.FLOOR
        state.spawn_list.append((state.map.xy_idx(1, 1), "Goblin"))


class RecordingStep(MetaBuilder):
    def __init__(self, log: list[str], name: str) -> None:
        self.log = log
        self.name = name

    def build_map(self, rng, state: BuildState) -> None:
        self.log.append(self.name)
        state.take_snapshot()


class DrawingStep(MetaBuilder):
    """Consumes one random draw per run."""

    def __init__(self, draws: list[int]) -> None:
        self.draws = draws

    def build_map(self, rng, state: BuildState) -> None:
        self.draws.append(rng.randint(1, 1_000_000))


# =============================================================================
# BUILDER CHAIN
# =============================================================================


class TestBuilderChain:
    """Tests for step composition and ordering."""

    def test_steps_run_in_order(self) -> None:
        """The initial builder runs first, then meta builders as added."""
        log: list[str] = []
        chain = BuilderChain(1, 10, 10)
        chain.start_with(RecordingStarter(log))
        chain.with_(RecordingStep(log, "a")).with_(RecordingStep(log, "b"))

        state = chain.build_map(Random(1))

        assert log == ["start", "a", "b"]
        assert state is chain.state
        assert state.map.tiles[1, 1] == TileTypeID.FLOOR

    def test_second_starter_is_rejected(self) -> None:
        """Only one initial builder may be set."""
        chain = BuilderChain(1, 10, 10)
        chain.start_with(RecordingStarter([]))
        with pytest.raises(BuilderConfigurationError):
            chain.start_with(RecordingStarter([]))

    def test_build_without_starter_fails(self) -> None:
        """A chain with no initial builder cannot run."""
        chain = BuilderChain(1, 10, 10)
        chain.with_(RecordingStep([], "a"))
        with pytest.raises(BuilderConfigurationError):
            chain.build_map(Random(1))

    def test_steps_share_one_stream(self) -> None:
        """Every step draws from the stream passed to build_map."""
        draws: list[int] = []
        chain = BuilderChain(1, 10, 10)
        chain.start_with(RecordingStarter([]))
        chain.with_(DrawingStep(draws)).with_(DrawingStep(draws))
        chain.build_map(Random(77))

        reference = Random(77)
        assert draws == [reference.randint(1, 1_000_000) for _ in range(2)]

    def test_map_metadata(self) -> None:
        """The chain's map carries the depth, size and name it was made with."""
        chain = BuilderChain(4, 30, 20, "Somewhere Deep")
        assert chain.state.map.depth == 4
        assert chain.state.map.width == 30
        assert chain.state.map.height == 20
        assert chain.state.map.name == "Somewhere Deep"

    def test_spawn_entities_drains_in_order(self) -> None:
        """The sink gets (x, y, tag) for each request and the list empties."""
        chain = BuilderChain(1, 10, 10)
        chain.start_with(RecordingStarter([]))
        state = chain.build_map(Random(1))
        state.spawn_list.append((state.map.xy_idx(3, 2), "Rations"))

        received: list[tuple[int, int, str]] = []
        chain.spawn_entities(lambda x, y, tag: received.append((x, y, tag)))

        assert received == [(1, 1, "Goblin"), (3, 2, "Rations")]
        assert state.spawn_list == []


# =============================================================================
# BUILD STATE
# =============================================================================


class TestBuildState:
    """Tests for snapshots and the require_* guards."""

    def test_snapshots_only_when_enabled(self) -> None:
        """take_snapshot does nothing while show_history is off."""
        state = make_state(8, 8)
        state.show_history = False
        state.take_snapshot()
        assert len(state.history) == 0

    def test_snapshot_is_revealed_copy(self) -> None:
        """Snapshots are fully revealed and independent of the live map."""
        state = make_state(8, 8)
        state.show_history = True
        state.take_snapshot()
        state.map.tiles[2, 2] = TileTypeID.FLOOR

        snapshot = state.history[-1]
        assert snapshot.revealed.all()
        assert not state.map.revealed.any()
        assert snapshot.tiles[2, 2] == TileTypeID.WALL

    def test_history_does_not_change_result(self) -> None:
        """Recording history never changes the generated map."""
        log: list[str] = []
        quiet = BuilderChain(1, 10, 10, show_history=False)
        quiet.start_with(RecordingStarter(log)).with_(RecordingStep(log, "a"))
        loud = BuilderChain(1, 10, 10, show_history=True)
        loud.start_with(RecordingStarter(log)).with_(RecordingStep(log, "a"))

        a = quiet.build_map(Random(3))
        b = loud.build_map(Random(3))
        assert (a.map.tiles == b.map.tiles).all()
        assert len(b.history) == 1

    def test_require_rooms(self) -> None:
        """Room-based steps fail on a chain that never made rooms."""
        state = make_state()
        with pytest.raises(BuilderConfigurationError, match="RecordingStep"):
            state.require_rooms(RecordingStep([], "a"))

        state.rooms = [Rect(1, 1, 3, 3)]
        assert state.require_rooms(self) == [Rect(1, 1, 3, 3)]

    def test_require_corridors_and_start(self) -> None:
        """Missing corridors or start raise a configuration error."""
        state = make_state()
        with pytest.raises(BuilderConfigurationError):
            state.require_corridors(self)
        with pytest.raises(BuilderConfigurationError):
            state.require_starting_position(self)

        state.starting_position = (2, 3)
        assert state.require_starting_position(self) == (2, 3)

    def test_remove_spawns_in_is_half_open(self) -> None:
        """Spawns on x2 or y2 survive."""
        state = make_state(10, 10)
        game_map = state.map
        state.spawn_list = [
            (game_map.xy_idx(2, 2), "inside"),
            (game_map.xy_idx(4, 2), "right edge"),
            (game_map.xy_idx(2, 4), "bottom edge"),
            (game_map.xy_idx(1, 1), "outside"),
        ]
        state.remove_spawns_in(2, 2, 4, 4)
        assert [tag for _, tag in state.spawn_list] == [
            "right edge",
            "bottom edge",
            "outside",
        ]
