"""Tests for rebuilding a map with wave function collapse."""

from __future__ import annotations

from random import Random

import numpy as np
import pytest

from delve.environment.generators.base import GenerationFailedError
from delve.environment.generators.builders import (
    WaveformCollapseBuilder,
    waveform_collapse,
)
from delve.environment.generators.wfc_solver import WFCContradiction
from delve.environment.tile_types import TileTypeID
from delve.util.coordinates import Rect
from tests.helpers import open_room_state


def _exemplar_state():
    """A walled room with leftovers from earlier steps."""
    state = open_room_state(32, 24, depth=3)
    state.rooms = [Rect(1, 1, 30, 22)]
    state.corridors = [[33]]
    state.starting_position = (5, 5)
    state.spawn_list.append((state.map.xy_idx(4, 4), "Goblin"))
    return state


class TestWaveformCollapseBuilder:
    """Tests for the WFC meta builder."""

    def test_discards_room_data(self) -> None:
        state = _exemplar_state()
        WaveformCollapseBuilder().build_map(Random(1), state)

        assert state.rooms is None
        assert state.corridors is None
        assert state.starting_position is None
        assert state.spawn_list == []

    def test_new_map_keeps_shape_and_depth(self) -> None:
        state = _exemplar_state()
        exemplar = state.map
        WaveformCollapseBuilder().build_map(Random(2), state)

        assert state.map is not exemplar
        assert (state.map.width, state.map.height) == (32, 24)
        assert state.map.depth == 3

    def test_output_uses_exemplar_tiles_only(self) -> None:
        state = _exemplar_state()
        WaveformCollapseBuilder().build_map(Random(3), state)

        allowed = [TileTypeID.WALL, TileTypeID.FLOOR]
        assert np.isin(state.map.tiles, allowed).all()
        assert state.map.count_tiles(TileTypeID.FLOOR) > 0

    def test_snapshots_record_progress(self) -> None:
        """One snapshot before, one per decided slot, one when solved."""
        state = _exemplar_state()
        state.show_history = True
        WaveformCollapseBuilder().build_map(Random(4), state)
        # 4x3 slots: 11 callbacks, plus the opening and closing snapshots
        assert len(state.history) == 13

    def test_gives_up_after_max_attempts(self, monkeypatch, caplog) -> None:
        calls: list[int] = []

        def always_contradict(self, game_map, rng, on_step=None) -> None:
            calls.append(1)
            raise WFCContradiction("No compatible chunk for slot (0, 0)")

        monkeypatch.setattr(waveform_collapse.WFCSolver, "solve", always_contradict)
        state = _exemplar_state()
        with pytest.raises(GenerationFailedError):
            WaveformCollapseBuilder(max_attempts=3).build_map(Random(5), state)

        assert len(calls) == 3
        assert caplog.text.count("was infeasible") == 3

    def test_same_seed_same_map(self) -> None:
        a = _exemplar_state()
        b = _exemplar_state()
        WaveformCollapseBuilder().build_map(Random(6), a)
        WaveformCollapseBuilder().build_map(Random(6), b)
        assert (a.map.tiles == b.map.tiles).all()
