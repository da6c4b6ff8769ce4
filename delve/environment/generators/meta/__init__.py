"""Meta builders: steps that refine a map an initial builder laid down.

- Rooms: RoomSorter, RoomDrawer, RoomExploder, RoomCornerRounder
- Corridors: DoglegCorridors, BspCorridors, NearestCorridors,
  StraightLineCorridors, CorridorSpawner
- Connectivity: DoorPlacement, CullUnreachable
- Positions: AreaStartingPosition, AreaEndingPosition,
  RoomBasedStartingPosition, RoomBasedStairs, DistantExit
- Spawning: RoomBasedSpawner, VoronoiSpawning
- Themed levels: CaveDecorator, CaveTransition, YellowBrickRoad,
  DragonsLair, DragonSpawner
"""

from .caverns import CaveDecorator, CaveTransition
from .corridors import (
    BspCorridors,
    CorridorSpawner,
    DoglegCorridors,
    NearestCorridors,
    StraightLineCorridors,
)
from .cull import CullUnreachable
from .doors import DoorPlacement
from .forest import YellowBrickRoad
from .fortress import DragonsLair, DragonSpawner
from .positions import (
    AreaEndingPosition,
    AreaStartingPosition,
    DistantExit,
    RoomBasedStairs,
    RoomBasedStartingPosition,
    XEnd,
    XStart,
    YEnd,
    YStart,
)
from .rooms import (
    RoomCornerRounder,
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
)
from .spawning import RoomBasedSpawner, VoronoiSpawning

__all__ = [
    "AreaEndingPosition",
    "AreaStartingPosition",
    "BspCorridors",
    "CaveDecorator",
    "CaveTransition",
    "CorridorSpawner",
    "CullUnreachable",
    "DistantExit",
    "DoglegCorridors",
    "DoorPlacement",
    "DragonSpawner",
    "DragonsLair",
    "NearestCorridors",
    "RoomBasedSpawner",
    "RoomBasedStairs",
    "RoomBasedStartingPosition",
    "RoomCornerRounder",
    "RoomDrawer",
    "RoomExploder",
    "RoomSort",
    "RoomSorter",
    "StraightLineCorridors",
    "VoronoiSpawning",
    "XEnd",
    "XStart",
    "YEnd",
    "YStart",
    "YellowBrickRoad",
]
