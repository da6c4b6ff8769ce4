"""Voronoi cells: the map is split into regions around random seed points and
every tile away from a region boundary is carved out."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from delve import config
from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG


class DistanceAlgorithm(Enum):
    PYTHAGORAS = auto()  # Squared Euclidean
    MANHATTAN = auto()
    CHEBYSHEV = auto()


class VoronoiCellBuilder(InitialBuilder):
    def __init__(
        self,
        distance_algorithm: DistanceAlgorithm = DistanceAlgorithm.PYTHAGORAS,
        n_seeds: int = config.VORONOI_SEEDS,
    ) -> None:
        self.distance_algorithm = distance_algorithm
        self.n_seeds = n_seeds

    @classmethod
    def pythagoras(cls) -> VoronoiCellBuilder:
        return cls(DistanceAlgorithm.PYTHAGORAS)

    @classmethod
    def manhattan(cls) -> VoronoiCellBuilder:
        return cls(DistanceAlgorithm.MANHATTAN)

    @classmethod
    def chebyshev(cls) -> VoronoiCellBuilder:
        return cls(DistanceAlgorithm.CHEBYSHEV)

    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        width, height = game_map.width, game_map.height

        seeds: list[tuple[int, int]] = []
        while len(seeds) < self.n_seeds:
            candidate = (roll_d(rng, width - 1), roll_d(rng, height - 1))
            if candidate not in seeds:
                seeds.append(candidate)

        membership = self.compute_membership(seeds, width, height)

        # A tile stays wall if two or more of its 4 neighbours belong elsewhere
        mine = membership[1:-1, 1:-1]
        foreign = (
            (membership[:-2, 1:-1] != mine).astype(np.int8)
            + (membership[2:, 1:-1] != mine)
            + (membership[1:-1, :-2] != mine)
            + (membership[1:-1, 2:] != mine)
        )
        interior = game_map.tiles[1:-1, 1:-1]
        interior[foreign < 2] = TileTypeID.FLOOR
        state.take_snapshot()

    def compute_membership(
        self, seeds: list[tuple[int, int]], width: int, height: int
    ) -> np.ndarray:
        """Index of the nearest seed for every tile, ties going to the lower index.

        Returns:
            An int array of shape (width, height) indexed ``[x, y]``.
        """
        xs, ys = np.meshgrid(np.arange(width), np.arange(height), indexing="ij")
        seed_xs = np.array([x for x, _ in seeds])[:, None, None]
        seed_ys = np.array([y for _, y in seeds])[:, None, None]
        dx = np.abs(xs[None] - seed_xs)
        dy = np.abs(ys[None] - seed_ys)

        match self.distance_algorithm:
            case DistanceAlgorithm.PYTHAGORAS:
                distances = dx * dx + dy * dy
            case DistanceAlgorithm.MANHATTAN:
                distances = dx + dy
            case DistanceAlgorithm.CHEBYSHEV:
                distances = np.maximum(dx, dy)

        return np.argmin(distances, axis=0)
