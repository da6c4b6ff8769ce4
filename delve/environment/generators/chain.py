"""Builder chain that orchestrates step-based level generation.

The BuilderChain runs one InitialBuilder followed by a sequence of
MetaBuilders, all against a single shared BuildState. Steps run strictly in
order because each one reads what the previous ones left behind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import (
    BuilderConfigurationError,
    BuildState,
    InitialBuilder,
    MetaBuilder,
)

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

# Receives (x, y, content tag) for every drained spawn request.
type SpawnSink = Callable[[int, int, str], None]


class BuilderChain:
    """Composes one initial builder and an ordered list of meta builders.

    Example:
        chain = BuilderChain(depth=3, width=80, height=50, name="Limestone Caverns")
        chain.start_with(DrunkardsWalkBuilder.winding_passages())
        chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
        chain.with_(CullUnreachable())
        chain.build_map(rng)
        chain.spawn_entities(world.spawn_named)

    Attributes:
        state: The BuildState every step mutates.
        starter: The initial builder, once set.
        builders: Meta builders in the order they run.
    """

    def __init__(
        self,
        depth: int,
        width: int,
        height: int,
        name: str = "New Map",
        show_history: bool = config.SHOW_MAPGEN_VISUALIZER,
    ) -> None:
        self.state = BuildState.create(
            depth, width, height, name, show_history=show_history
        )
        self.starter: InitialBuilder | None = None
        self.builders: list[MetaBuilder] = []

    def start_with(self, starter: InitialBuilder) -> BuilderChain:
        """Set the initial builder.

        Raises:
            BuilderConfigurationError: If an initial builder is already set.
        """
        if self.starter is not None:
            raise BuilderConfigurationError(
                "You can only have one starting builder "
                f"(already have {type(self.starter).__name__})"
            )
        self.starter = starter
        return self

    def with_(self, meta_builder: MetaBuilder) -> BuilderChain:
        """Append a meta builder. Order is significant."""
        self.builders.append(meta_builder)
        return self

    def build_map(self, rng: RNG) -> BuildState:
        """Run the initial builder, then every meta builder in order.

        Args:
            rng: The random stream shared by every step.

        Returns:
            The finished BuildState.

        Raises:
            BuilderConfigurationError: If no initial builder was set.
        """
        if self.starter is None:
            raise BuilderConfigurationError(
                "Cannot run a map builder chain without a starting build system"
            )

        logger.debug(
            f"Building '{self.state.map.name}' with {type(self.starter).__name__}"
        )
        self.starter.build_map(rng, self.state)

        for meta_builder in self.builders:
            logger.debug(f"Applying {type(meta_builder).__name__}")
            meta_builder.build_map(rng, self.state)

        if self.state.show_history:
            logger.debug(f"Recorded {len(self.state.history)} generation snapshots")
        return self.state

    def spawn_entities(self, sink: SpawnSink) -> None:
        """Drain the spawn list into the entity layer.

        Args:
            sink: Called as ``sink(x, y, tag)`` for each request, in order.
        """
        game_map = self.state.map
        spawns, self.state.spawn_list = self.state.spawn_list, []
        for idx, tag in spawns:
            x, y = game_map.idx_xy(idx)
            sink(x, y, tag)
