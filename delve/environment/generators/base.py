"""Base classes for map generation.

A level is produced by a BuilderChain: one InitialBuilder lays down the base
map, then any number of MetaBuilders refine it. Every step receives the same
BuildState and the same random stream, and mutates the state in place.
"""

from __future__ import annotations

import abc
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from delve import config
from delve.environment.map import GameMap

if TYPE_CHECKING:
    from delve.environment.generators.buildings.building import Building
    from delve.types import SpawnEntry, WorldTilePos
    from delve.util.coordinates import Rect
    from delve.util.rng import RNG


# =============================================================================
# ERRORS
# =============================================================================


class MapGenerationError(Exception):
    """Generation could not produce a usable level."""


class BuilderConfigurationError(MapGenerationError):
    """A builder chain was assembled incorrectly.

    Raised for a chain with no initial builder, a second initial builder, or a
    room-based step used on a chain that never produced rooms.
    """


class GenerationFailedError(MapGenerationError):
    """A generation step exhausted its retry budget."""


# =============================================================================
# BUILD STATE
# =============================================================================


@dataclass
class BuildState:
    """Mutable record threaded through every step of a builder chain.

    Attributes:
        map: The level under construction.
        spawn_list: Ordered (tile index, content tag) spawn requests.
        starting_position: Where the player enters the level, once chosen.
        rooms: Room rectangles. None for organic chains that never produce
            rooms; room-based steps must call ``require_rooms()``.
        corridors: Tile indices carved by each corridor, when a corridor
            strategy recorded them.
        buildings: Buildings placed by the town builder.
        history: Snapshots of the map for optional playback, bounded by
            config.MAPGEN_HISTORY_LIMIT.
        show_history: Whether ``take_snapshot()`` records anything.
    """

    map: GameMap
    spawn_list: list[SpawnEntry] = field(default_factory=list)
    starting_position: WorldTilePos | None = None
    rooms: list[Rect] | None = None
    corridors: list[list[int]] | None = None
    buildings: list[Building] = field(default_factory=list)
    history: deque[GameMap] = field(
        default_factory=lambda: deque(maxlen=config.MAPGEN_HISTORY_LIMIT)
    )
    show_history: bool = config.SHOW_MAPGEN_VISUALIZER

    @classmethod
    def create(
        cls,
        depth: int,
        width: int,
        height: int,
        name: str = "New Map",
        show_history: bool = config.SHOW_MAPGEN_VISUALIZER,
    ) -> BuildState:
        """Create a state holding an all-wall map."""
        return cls(map=GameMap(depth, width, height, name), show_history=show_history)

    def take_snapshot(self) -> None:
        """Record a fully revealed copy of the current map.

        Does nothing unless ``show_history`` is set. Never touches the map
        being built.
        """
        if not self.show_history:
            return
        snapshot = self.map.copy()
        snapshot.revealed = np.full_like(snapshot.revealed, True, order="F")
        self.history.append(snapshot)

    def require_rooms(self, step: object) -> list[Rect]:
        """Return the rooms list, or fail if this chain never produced one.

        Args:
            step: The builder asking, named in the error message.

        Raises:
            BuilderConfigurationError: If rooms were never recorded.
        """
        if self.rooms is None:
            raise BuilderConfigurationError(
                f"{type(step).__name__} requires a room-based builder earlier "
                "in the chain"
            )
        return self.rooms

    def require_corridors(self, step: object) -> list[list[int]]:
        """Return the recorded corridors, or fail if no strategy drew any."""
        if self.corridors is None:
            raise BuilderConfigurationError(
                f"{type(step).__name__} requires a corridor strategy earlier "
                "in the chain"
            )
        return self.corridors

    def require_starting_position(self, step: object) -> WorldTilePos:
        """Return the starting position, or fail if none has been chosen."""
        if self.starting_position is None:
            raise BuilderConfigurationError(
                f"{type(step).__name__} requires a starting position earlier "
                "in the chain"
            )
        return self.starting_position

    def remove_spawns_in(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Drop spawn requests on tiles with x1 <= x < x2 and y1 <= y < y2."""
        kept = []
        for idx, tag in self.spawn_list:
            x, y = self.map.idx_xy(idx)
            if not (x1 <= x < x2 and y1 <= y < y2):
                kept.append((idx, tag))
        self.spawn_list = kept

    def remove_unwalkable_spawns(self) -> int:
        """Drop spawn requests whose tile has since been filled in.

        Returns:
            How many requests were dropped.
        """
        walkable = self.map.walkable.ravel(order="F")
        kept = [(idx, tag) for idx, tag in self.spawn_list if walkable[idx]]
        dropped = len(self.spawn_list) - len(kept)
        self.spawn_list = kept
        return dropped


# =============================================================================
# BUILDER INTERFACES
# =============================================================================


class InitialBuilder(abc.ABC):
    """A step that creates the base map from nothing.

    Exactly one initial builder starts every chain.
    """

    @abc.abstractmethod
    def build_map(self, rng: RNG, state: BuildState) -> None:
        """Lay down the base map into ``state``.

        Args:
            rng: The chain's random stream. All randomness must come from it.
            state: The shared build state to modify in place.
        """
        raise NotImplementedError


class MetaBuilder(abc.ABC):
    """A step that refines an already existing map.

    Meta builders run in the order they were added to the chain and may rely
    on whatever earlier steps left in the state.
    """

    @abc.abstractmethod
    def build_map(self, rng: RNG, state: BuildState) -> None:
        """Refine ``state`` in place.

        Args:
            rng: The chain's random stream. All randomness must come from it.
            state: The shared build state to modify in place.
        """
        raise NotImplementedError
