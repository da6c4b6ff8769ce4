"""Procedural level generation for Delve.

A level is built by a BuilderChain: one initial builder lays down the base
map, then meta builders refine it in order, all sharing one BuildState:

- builders: BSP dungeon and interior, simple rooms, cellular automata,
  drunkard's walk, DLA, maze, Voronoi cells, the town, and the WFC rebuild
- meta: room sorting and drawing, corridors, doors, culling, start and exit
  placement, spawning, and the themed cave, forest and fortress steps
- prefabs: authored levels, map sections and room vaults

``generate_level`` picks and runs the chain for a depth.
"""

from .base import (
    BuilderConfigurationError,
    BuildState,
    GenerationFailedError,
    InitialBuilder,
    MapGenerationError,
    MetaBuilder,
)
from .chain import BuilderChain, SpawnSink
from .factory import (
    CHAIN_NAMES,
    create_chain,
    generate_level,
    level_builder,
    random_builder,
)
from .wfc_solver import WFCContradiction, WFCSolver

__all__ = [
    "CHAIN_NAMES",
    "BuildState",
    "BuilderChain",
    "BuilderConfigurationError",
    "GenerationFailedError",
    "InitialBuilder",
    "MapGenerationError",
    "MetaBuilder",
    "SpawnSink",
    "WFCContradiction",
    "WFCSolver",
    "create_chain",
    "generate_level",
    "level_builder",
    "random_builder",
]
