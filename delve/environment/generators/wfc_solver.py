"""Chunk-based Wave Function Collapse.

An exemplar map is sliced into fixed-size square chunks. Each distinct chunk
becomes a pattern, and which patterns may sit next to each other is derived
from the floor tiles ("exits") along their edges:

- Chunk B may sit in direction d of chunk A when some exit on A's d edge
  lines up with an exit on B's opposite edge.
- An edge with no exits at all is compatible with anything, and so is a
  chunk with no exits anywhere.

The relation is symmetric: if B is compatible in direction d of A, then A is
compatible in the opposite direction of B.

Usage:
    from delve.environment.generators.wfc_solver import (
        WFCSolver, build_patterns, patterns_to_constraints,
    )

    patterns = build_patterns(exemplar_map, chunk_size=8, include_flipping=True)
    constraints = patterns_to_constraints(patterns, chunk_size=8)
    solver = WFCSolver(constraints, 8, target_map.width, target_map.height)
    solver.solve(target_map, rng)  # Raises WFCContradiction when infeasible
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.util.rng import RNG


class WFCContradiction(Exception):
    """Raised when WFC reaches an unsolvable state.

    This occurs when the decided neighbours of a slot leave no pattern that is
    compatible with all of them. The attempt must be discarded; a new solver
    with fresh random draws may still succeed.
    """

    pass


# Direction utilities
DIRECTIONS = ["N", "S", "W", "E"]
OPPOSITE_DIR = {"N": "S", "E": "W", "S": "N", "W": "E"}
DIR_OFFSETS = {"N": (0, -1), "E": (1, 0), "S": (0, 1), "W": (-1, 0)}

# Tile values of a chunk, row by row.
type Pattern = tuple[int, ...]


@dataclass
class MapChunk:
    """One pattern together with its edge exits and derived neighbour lists.

    Attributes:
        pattern: Tile IDs of the chunk, row by row.
        exits: For each direction, which cells along that edge are floor.
            North and south edges run west to east; west and east edges run
            north to south.
        has_exits: False when no edge has any floor at all.
        compatible_with: For each direction, indices of the chunks that may
            be placed on that side of this one.
    """

    pattern: Pattern
    exits: dict[str, list[bool]]
    has_exits: bool = True
    compatible_with: dict[str, list[int]] = field(
        default_factory=lambda: {direction: [] for direction in DIRECTIONS}
    )


def tile_idx_in_chunk(chunk_size: int, x: int, y: int) -> int:
    return y * chunk_size + x


def build_patterns(
    game_map: GameMap, chunk_size: int, include_flipping: bool, dedupe: bool = True
) -> list[Pattern]:
    """Slice a map into non-overlapping chunks.

    Args:
        game_map: The exemplar.
        chunk_size: Width and height of a chunk in tiles.
        include_flipping: Also add horizontally, vertically and doubly
            mirrored copies of every chunk.
        dedupe: Keep only the first occurrence of identical patterns.
    """
    chunks_x = game_map.width // chunk_size
    chunks_y = game_map.height // chunk_size
    tiles = game_map.tiles

    flips = [(False, False)]
    if include_flipping:
        flips += [(True, False), (False, True), (True, True)]

    patterns: list[Pattern] = []
    for cy in range(chunks_y):
        for cx in range(chunks_x):
            block = tiles[
                cx * chunk_size : (cx + 1) * chunk_size,
                cy * chunk_size : (cy + 1) * chunk_size,
            ]
            for flip_x, flip_y in flips:
                view = block[::-1 if flip_x else 1, ::-1 if flip_y else 1]
                # Transpose so the flattened pattern runs row by row
                patterns.append(tuple(int(t) for t in view.T.flatten()))

    if dedupe:
        return list(dict.fromkeys(patterns))
    return patterns


def patterns_to_constraints(patterns: list[Pattern], chunk_size: int) -> list[MapChunk]:
    """Find each pattern's edge exits and derive the compatibility lists."""
    constraints: list[MapChunk] = []
    for pattern in patterns:
        exits = {direction: [False] * chunk_size for direction in DIRECTIONS}
        for i in range(chunk_size):
            edges = {
                "N": tile_idx_in_chunk(chunk_size, i, 0),
                "S": tile_idx_in_chunk(chunk_size, i, chunk_size - 1),
                "W": tile_idx_in_chunk(chunk_size, 0, i),
                "E": tile_idx_in_chunk(chunk_size, chunk_size - 1, i),
            }
            for direction, idx in edges.items():
                if pattern[idx] == TileTypeID.FLOOR:
                    exits[direction][i] = True

        has_exits = any(any(edge) for edge in exits.values())
        constraints.append(MapChunk(pattern, exits, has_exits))

    for chunk in constraints:
        for j, potential in enumerate(constraints):
            for direction in DIRECTIONS:
                if is_compatible(chunk, direction, potential):
                    chunk.compatible_with[direction].append(j)

    return constraints


def is_compatible(chunk: MapChunk, direction: str, neighbor: MapChunk) -> bool:
    """Whether ``neighbor`` may be placed on the ``direction`` side of ``chunk``."""
    if not chunk.has_exits or not neighbor.has_exits:
        return True

    ours = chunk.exits[direction]
    theirs = neighbor.exits[OPPOSITE_DIR[direction]]
    if not any(ours) or not any(theirs):
        return True
    return any(a and b for a, b in zip(ours, theirs))


class WFCSolver:
    """Places one chunk per slot of a grid covering the map.

    Each iteration takes the undecided slot with the most decided neighbours
    (lowest slot index on ties, or a random slot when none has a decided
    neighbour) and stamps a random chunk that every decided neighbour
    accepts. A solver is single use: after a contradiction ``possible`` is
    False and a new solver must be created.
    """

    def __init__(
        self,
        constraints: list[MapChunk],
        chunk_size: int,
        map_width: int,
        map_height: int,
    ) -> None:
        if not constraints:
            raise ValueError("WFCSolver needs at least one chunk pattern")

        self.constraints = constraints
        self.chunk_size = chunk_size
        self.chunks_x = map_width // chunk_size
        self.chunks_y = map_height // chunk_size
        self.chunks: list[int | None] = [None] * (self.chunks_x * self.chunks_y)
        self.remaining: list[int] = list(range(self.chunks_x * self.chunks_y))
        self.possible = True

    def chunk_idx(self, x: int, y: int) -> int:
        return y * self.chunks_x + x

    def _decided_neighbors(self, chunk_index: int) -> list[tuple[str, int]]:
        """(direction from the slot, decided chunk) for each decided neighbour."""
        cx = chunk_index % self.chunks_x
        cy = chunk_index // self.chunks_x
        decided: list[tuple[str, int]] = []
        for direction in DIRECTIONS:
            dx, dy = DIR_OFFSETS[direction]
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < self.chunks_x and 0 <= ny < self.chunks_y:
                placed = self.chunks[self.chunk_idx(nx, ny)]
                if placed is not None:
                    decided.append((direction, placed))
        return decided

    def _pick_slot(self, rng: RNG) -> int:
        best_slot: int | None = None
        best_count = 0
        for slot in self.remaining:
            count = len(self._decided_neighbors(slot))
            if count > best_count:
                best_slot, best_count = slot, count

        if best_slot is None:
            return self.remaining[roll_d(rng, len(self.remaining)) - 1]
        return best_slot

    def iteration(self, game_map: GameMap, rng: RNG) -> bool:
        """Decide one slot.

        Returns:
            True once every slot is decided.

        Raises:
            WFCContradiction: If no chunk fits the chosen slot.
        """
        if not self.possible:
            raise WFCContradiction("Solver already hit a contradiction")
        if not self.remaining:
            return True

        chunk_index = self._pick_slot(rng)
        self.remaining.remove(chunk_index)

        neighbors = self._decided_neighbors(chunk_index)
        if not neighbors:
            choice = roll_d(rng, len(self.constraints)) - 1
        else:
            # A neighbour to our west accepts us through its east list, etc.
            options = set(range(len(self.constraints)))
            for direction, placed in neighbors:
                accepted = self.constraints[placed].compatible_with[
                    OPPOSITE_DIR[direction]
                ]
                options &= set(accepted)

            if not options:
                self.possible = False
                cx = chunk_index % self.chunks_x
                cy = chunk_index // self.chunks_x
                raise WFCContradiction(f"No compatible chunk for slot ({cx}, {cy})")

            candidates = sorted(options)
            if len(candidates) == 1:
                choice = candidates[0]
            else:
                choice = candidates[roll_d(rng, len(candidates)) - 1]

        self.chunks[chunk_index] = choice
        self._stamp(game_map, chunk_index, choice)
        return not self.remaining

    def solve(
        self,
        game_map: GameMap,
        rng: RNG,
        on_step: Callable[[], None] | None = None,
    ) -> None:
        """Run iterations until every slot is decided.

        Args:
            game_map: Map the chunks are stamped into.
            rng: Random stream for slot and chunk choices.
            on_step: Called after each decided slot, e.g. to take a snapshot.

        Raises:
            WFCContradiction: If the solve becomes infeasible.
        """
        while not self.iteration(game_map, rng):
            if on_step is not None:
                on_step()

    def _stamp(self, game_map: GameMap, chunk_index: int, choice: int) -> None:
        size = self.chunk_size
        left_x = (chunk_index % self.chunks_x) * size
        top_y = (chunk_index // self.chunks_x) * size
        pattern = self.constraints[choice].pattern
        for y in range(size):
            for x in range(size):
                game_map.tiles[left_x + x, top_y + y] = pattern[
                    tile_idx_in_chunk(size, x, y)
                ]
