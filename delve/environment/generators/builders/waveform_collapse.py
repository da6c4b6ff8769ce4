"""Wave Function Collapse rebuild of an existing map.

The map left by earlier steps is used as the exemplar: it is cut into chunks
and a brand new map is synthesized from them. Rooms, corridors, spawns and
the starting position no longer apply and are discarded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import (
    BuildState,
    GenerationFailedError,
    MetaBuilder,
)
from delve.environment.generators.wfc_solver import (
    WFCContradiction,
    WFCSolver,
    build_patterns,
    patterns_to_constraints,
)
from delve.environment.map import GameMap

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)


class WaveformCollapseBuilder(MetaBuilder):
    """Replace the current map with a WFC synthesis of its own chunks."""

    def __init__(
        self,
        chunk_size: int = config.WFC_CHUNK_SIZE,
        max_attempts: int = config.WFC_MAX_ATTEMPTS,
        include_flipping: bool = True,
    ) -> None:
        """Initialize the WFC builder.

        Args:
            chunk_size: Width and height of a chunk in tiles.
            max_attempts: Number of fresh solves to try if WFC contradicts.
                Raises GenerationFailedError after exhausting attempts.
            include_flipping: Add mirrored copies of each exemplar chunk.
        """
        self.chunk_size = chunk_size
        self.max_attempts = max_attempts
        self.include_flipping = include_flipping

    def build_map(self, rng: RNG, state: BuildState) -> None:
        state.take_snapshot()
        exemplar = state.map

        patterns = build_patterns(exemplar, self.chunk_size, self.include_flipping)
        constraints = patterns_to_constraints(patterns, self.chunk_size)
        logger.debug(f"WFC extracted {len(constraints)} distinct chunk patterns")

        state.spawn_list.clear()
        state.rooms = None
        state.corridors = None
        state.starting_position = None

        for attempt in range(1, self.max_attempts + 1):
            state.map = GameMap(
                exemplar.depth, exemplar.width, exemplar.height, exemplar.name
            )
            state.map.outdoors = exemplar.outdoors

            solver = WFCSolver(
                constraints, self.chunk_size, exemplar.width, exemplar.height
            )
            try:
                solver.solve(state.map, rng, on_step=state.take_snapshot)
            except WFCContradiction as exc:
                logger.warning(f"WFC attempt {attempt} was infeasible: {exc}")
                continue

            logger.debug(f"WFC solved on attempt {attempt}")
            state.take_snapshot()
            return

        raise GenerationFailedError(
            f"Wave function collapse found no solution in {self.max_attempts} attempts"
        )
