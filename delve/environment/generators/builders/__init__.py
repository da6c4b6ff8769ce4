"""Initial builders: each one lays down the base map for a chain.

- Room-based: BspDungeonBuilder, BspInteriorBuilder, SimpleMapBuilder
- Organic: CellularAutomataBuilder, DrunkardsWalkBuilder, DLABuilder,
  MazeBuilder, VoronoiCellBuilder
- Structured: TownBuilder

WaveformCollapseBuilder lives here too, although it rebuilds an existing
map and so runs as a meta builder.
"""

from .bsp_dungeon import BspDungeonBuilder
from .bsp_interior import BspInteriorBuilder
from .cellular_automata import CellularAutomataBuilder
from .dla import DLAAlgorithm, DLABuilder, DLASettings
from .drunkard import DrunkardSettings, DrunkardsWalkBuilder, DrunkSpawnMode
from .maze import MazeBuilder
from .simple_map import SimpleMapBuilder
from .town import TownBuilder
from .voronoi import DistanceAlgorithm, VoronoiCellBuilder
from .waveform_collapse import WaveformCollapseBuilder

__all__ = [
    "BspDungeonBuilder",
    "BspInteriorBuilder",
    "CellularAutomataBuilder",
    "DLAAlgorithm",
    "DLABuilder",
    "DLASettings",
    "DistanceAlgorithm",
    "DrunkSpawnMode",
    "DrunkardSettings",
    "DrunkardsWalkBuilder",
    "MazeBuilder",
    "SimpleMapBuilder",
    "TownBuilder",
    "VoronoiCellBuilder",
    "WaveformCollapseBuilder",
]
