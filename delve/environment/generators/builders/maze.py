"""Recursive backtracker maze, generated on a half-resolution cell grid.

Cells live in one flat list and are addressed by index; carving a passage
clears the facing wall on both cells through two separate lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from delve.environment.generators.base import BuildState, InitialBuilder
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.environment.map import GameMap
    from delve.util.rng import RNG

TOP = 0
RIGHT = 1
BOTTOM = 2
LEFT = 3

# Snapshot every this many carving steps when history is enabled.
_SNAPSHOT_INTERVAL = 50


@dataclass
class Cell:
    row: int
    column: int
    walls: list[bool] = field(default_factory=lambda: [True, True, True, True])
    visited: bool = False


class MazeGrid:
    """A grid of maze cells, each covering a 2x2 block of map tiles."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = [
            Cell(row, column) for row in range(height) for column in range(width)
        ]
        self.backtrace: list[int] = []
        self.current = 0

    def calculate_index(self, row: int, column: int) -> int | None:
        if row < 0 or column < 0 or column >= self.width or row >= self.height:
            return None
        return column + row * self.width

    def available_neighbors(self) -> list[int]:
        """Unvisited neighbours of the current cell, in top/right/bottom/left order."""
        cell = self.cells[self.current]
        candidates = (
            self.calculate_index(cell.row - 1, cell.column),
            self.calculate_index(cell.row, cell.column + 1),
            self.calculate_index(cell.row + 1, cell.column),
            self.calculate_index(cell.row, cell.column - 1),
        )
        return [i for i in candidates if i is not None and not self.cells[i].visited]

    def find_next_cell(self, rng: RNG) -> int | None:
        neighbors = self.available_neighbors()
        if not neighbors:
            return None
        if len(neighbors) == 1:
            return neighbors[0]
        return neighbors[roll_d(rng, len(neighbors)) - 1]

    def remove_walls(self, current: int, following: int) -> None:
        a = self.cells[current]
        b = self.cells[following]
        dx = a.column - b.column
        dy = a.row - b.row

        if dx == 1:
            a.walls[LEFT] = False
            b.walls[RIGHT] = False
        elif dx == -1:
            a.walls[RIGHT] = False
            b.walls[LEFT] = False
        elif dy == 1:
            a.walls[TOP] = False
            b.walls[BOTTOM] = False
        elif dy == -1:
            a.walls[BOTTOM] = False
            b.walls[TOP] = False

    def generate(self, rng: RNG, state: BuildState) -> None:
        steps = 0
        while True:
            self.cells[self.current].visited = True
            following = self.find_next_cell(rng)

            if following is not None:
                self.cells[following].visited = True
                self.backtrace.append(self.current)
                self.remove_walls(self.current, following)
                self.current = following
            elif self.backtrace:
                self.current = self.backtrace.pop()
            else:
                break

            if steps % _SNAPSHOT_INTERVAL == 0 and state.show_history:
                self.copy_to_map(state.map)
                state.take_snapshot()
            steps += 1

    def copy_to_map(self, game_map: GameMap) -> None:
        """Rasterize the cells into the map at 2x scale."""
        for cell in self.cells:
            x = (cell.column + 1) * 2
            y = (cell.row + 1) * 2
            game_map.tiles[x, y] = TileTypeID.FLOOR
            if not cell.walls[TOP]:
                game_map.tiles[x, y - 1] = TileTypeID.FLOOR
            if not cell.walls[RIGHT]:
                game_map.tiles[x + 1, y] = TileTypeID.FLOOR
            if not cell.walls[BOTTOM]:
                game_map.tiles[x, y + 1] = TileTypeID.FLOOR
            if not cell.walls[LEFT]:
                game_map.tiles[x - 1, y] = TileTypeID.FLOOR


class MazeBuilder(InitialBuilder):
    def build_map(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        grid = MazeGrid(game_map.width // 2 - 2, game_map.height // 2 - 2)
        grid.generate(rng, state)
        grid.copy_to_map(game_map)
        state.take_snapshot()
