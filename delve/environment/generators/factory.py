"""Level selection and the named builder chains.

The dungeon is a fixed run of themed levels followed by endless random
ones:

- depth 1: the town of Bracketon
- depth 2: the forest, with a road to the caverns
- depth 3-4: limestone caverns
- depth 5: caverns giving way to the dwarven fort
- depth 6: the dwarven fortress and its dragon
- depth 7+: a randomly composed chain

``create_chain`` also exposes single-algorithm chains by name, for the
preview CLI and the benchmark script.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from delve import config
from delve.environment.generators.base import InitialBuilder
from delve.environment.generators.builders import (
    BspDungeonBuilder,
    BspInteriorBuilder,
    CellularAutomataBuilder,
    DLABuilder,
    DrunkardsWalkBuilder,
    MazeBuilder,
    SimpleMapBuilder,
    TownBuilder,
    VoronoiCellBuilder,
    WaveformCollapseBuilder,
)
from delve.environment.generators.chain import BuilderChain
from delve.environment.generators.meta import (
    AreaEndingPosition,
    AreaStartingPosition,
    BspCorridors,
    CaveDecorator,
    CaveTransition,
    CorridorSpawner,
    CullUnreachable,
    DistantExit,
    DoglegCorridors,
    DoorPlacement,
    DragonsLair,
    DragonSpawner,
    NearestCorridors,
    RoomBasedSpawner,
    RoomBasedStairs,
    RoomBasedStartingPosition,
    RoomCornerRounder,
    RoomDrawer,
    RoomExploder,
    RoomSort,
    RoomSorter,
    StraightLineCorridors,
    VoronoiSpawning,
    XEnd,
    XStart,
    YEnd,
    YStart,
    YellowBrickRoad,
)
from delve.environment.generators.prefabs import (
    GUARD_POST,
    ORC_CAMP,
    UNDERGROUND_FORT,
    PrefabBuilder,
)
from delve.util.dice import roll_d
from delve.util.rng import RNGProvider

if TYPE_CHECKING:
    from delve.environment.generators.base import BuildState
    from delve.types import RandomSeed
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

type ChainFactory = Callable[[int, RNG, int, int], BuilderChain]


# =============================================================================
# THEMED LEVELS
# =============================================================================


def town_builder(depth: int, rng: RNG, width: int, height: int) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "The Town of Bracketon")
    chain.start_with(TownBuilder())
    return chain


def forest_builder(depth: int, rng: RNG, width: int, height: int) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "Into the Woods")
    chain.start_with(CellularAutomataBuilder())
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.CENTER))
    chain.with_(VoronoiSpawning())
    chain.with_(YellowBrickRoad())
    return chain


def limestone_cavern_builder(
    depth: int, rng: RNG, width: int, height: int
) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "Limestone Caverns")
    chain.start_with(DrunkardsWalkBuilder.winding_passages())
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.CENTER))
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())
    chain.with_(CaveDecorator())
    return chain


def limestone_deep_cavern_builder(
    depth: int, rng: RNG, width: int, height: int
) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "Deep Into The Caverns")
    chain.start_with(DLABuilder.central_attractor())
    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.TOP))
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())
    chain.with_(CaveDecorator())
    chain.with_(PrefabBuilder.sectional(ORC_CAMP))
    return chain


def limestone_transition_builder(
    depth: int, rng: RNG, width: int, height: int
) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "Dwarf Fort - Upper Reaches")
    chain.start_with(CellularAutomataBuilder())
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.CENTER))
    chain.with_(VoronoiSpawning())
    chain.with_(CaveDecorator())
    chain.with_(CaveTransition())
    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(AreaEndingPosition(XEnd.RIGHT, YEnd.CENTER))
    return chain


def dwarf_fort_builder(depth: int, rng: RNG, width: int, height: int) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "Dwarven Fortress")
    chain.start_with(BspDungeonBuilder(connect_rooms=False))
    chain.with_(RoomSorter(RoomSort.CENTRAL))
    chain.with_(RoomDrawer())
    chain.with_(BspCorridors())
    chain.with_(CorridorSpawner())
    chain.with_(DragonsLair())

    chain.with_(AreaStartingPosition(XStart.LEFT, YStart.TOP))
    chain.with_(CullUnreachable())
    chain.with_(AreaEndingPosition(XEnd.RIGHT, YEnd.BOTTOM))
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())
    chain.with_(DragonSpawner())
    return chain


# =============================================================================
# RANDOM LEVELS
# =============================================================================


def random_start_position(rng: RNG) -> tuple[XStart, YStart]:
    match roll_d(rng, 3):
        case 1:
            x = XStart.LEFT
        case 2:
            x = XStart.CENTER
        case _:
            x = XStart.RIGHT

    match roll_d(rng, 3):
        case 1:
            y = YStart.BOTTOM
        case 2:
            y = YStart.CENTER
        case _:
            y = YStart.TOP

    return x, y


def random_room_builder(rng: RNG, chain: BuilderChain) -> None:
    """Compose a rooms-and-corridors chain from random choices."""
    build_roll = roll_d(rng, 3)
    match build_roll:
        case 1:
            chain.start_with(SimpleMapBuilder())
        case 2:
            chain.start_with(BspDungeonBuilder(connect_rooms=False))
        case _:
            chain.start_with(BspInteriorBuilder())

    # BSP interior already carves its rooms and the holes between them
    if build_roll != 3:
        match roll_d(rng, 5):
            case 1:
                chain.with_(RoomSorter(RoomSort.LEFTMOST))
            case 2:
                chain.with_(RoomSorter(RoomSort.RIGHTMOST))
            case 3:
                chain.with_(RoomSorter(RoomSort.TOPMOST))
            case 4:
                chain.with_(RoomSorter(RoomSort.BOTTOMMOST))
            case _:
                chain.with_(RoomSorter(RoomSort.CENTRAL))

        chain.with_(RoomDrawer())

        match roll_d(rng, 4):
            case 1:
                chain.with_(DoglegCorridors())
            case 2:
                chain.with_(NearestCorridors())
            case 3:
                chain.with_(StraightLineCorridors())
            case _:
                chain.with_(BspCorridors())

        if roll_d(rng, 2) == 1:
            chain.with_(CorridorSpawner())

        match roll_d(rng, 6):
            case 1:
                chain.with_(RoomExploder())
            case 2:
                chain.with_(RoomCornerRounder())

    if roll_d(rng, 2) == 1:
        chain.with_(RoomBasedStartingPosition())
    else:
        chain.with_(AreaStartingPosition(*random_start_position(rng)))

    if roll_d(rng, 2) == 1:
        chain.with_(RoomBasedStairs())
    else:
        chain.with_(DistantExit())

    if roll_d(rng, 2) == 1:
        chain.with_(RoomBasedSpawner())
    else:
        chain.with_(VoronoiSpawning())


def _random_shape_starter(rng: RNG) -> InitialBuilder:
    match roll_d(rng, 16):
        case 1:
            return CellularAutomataBuilder()
        case 2:
            return DrunkardsWalkBuilder.open_area()
        case 3:
            return DrunkardsWalkBuilder.open_halls()
        case 4:
            return DrunkardsWalkBuilder.winding_passages()
        case 5:
            return DrunkardsWalkBuilder.fat_passages()
        case 6:
            return DrunkardsWalkBuilder.fearful_symmetry()
        case 7:
            return MazeBuilder()
        case 8:
            return DLABuilder.walk_inwards()
        case 9:
            return DLABuilder.walk_outwards()
        case 10:
            return DLABuilder.central_attractor()
        case 11:
            return DLABuilder.insectoid()
        case 12:
            return VoronoiCellBuilder.pythagoras()
        case 13:
            return VoronoiCellBuilder.manhattan()
        case 14:
            return VoronoiCellBuilder.chebyshev()
        case 15:
            return DLABuilder.heavy_erosion()
        case _:
            return PrefabBuilder.constant(GUARD_POST)


def random_shape_builder(rng: RNG, chain: BuilderChain) -> None:
    """Compose an organic-cave chain from random choices."""
    chain.start_with(_random_shape_starter(rng))
    _add_shape_finish(rng, chain)


def _add_shape_finish(rng: RNG, chain: BuilderChain) -> None:
    # Cull from the centre, then move the start somewhere random
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(AreaStartingPosition(*random_start_position(rng)))
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())


def random_builder(depth: int, rng: RNG, width: int, height: int) -> BuilderChain:
    chain = BuilderChain(depth, width, height, "New Map")
    if roll_d(rng, 2) == 1:
        random_room_builder(rng, chain)
    else:
        random_shape_builder(rng, chain)

    if roll_d(rng, 3) == 1:
        chain.with_(WaveformCollapseBuilder())
        chain.with_(AreaStartingPosition(*random_start_position(rng)))
        chain.with_(CullUnreachable())
        chain.with_(VoronoiSpawning())
        chain.with_(DistantExit())

    if roll_d(rng, 20) == 1:
        chain.with_(PrefabBuilder.sectional(UNDERGROUND_FORT))

    chain.with_(DoorPlacement())
    chain.with_(PrefabBuilder.vaults())
    return chain


# =============================================================================
# SINGLE-ALGORITHM CHAINS
# =============================================================================


def _room_chain(
    starter: InitialBuilder, depth: int, width: int, height: int
) -> BuilderChain:
    chain = BuilderChain(depth, width, height)
    chain.start_with(starter)
    chain.with_(RoomBasedStartingPosition())
    chain.with_(RoomBasedStairs())
    chain.with_(RoomBasedSpawner())
    chain.with_(DoorPlacement())
    return chain


def _shape_chain(
    starter: InitialBuilder, depth: int, width: int, height: int
) -> BuilderChain:
    chain = BuilderChain(depth, width, height)
    chain.start_with(starter)
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())
    return chain


def _wfc_chain(depth: int, width: int, height: int) -> BuilderChain:
    chain = BuilderChain(depth, width, height)
    chain.start_with(CellularAutomataBuilder())
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(WaveformCollapseBuilder())
    chain.with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
    chain.with_(CullUnreachable())
    chain.with_(VoronoiSpawning())
    chain.with_(DistantExit())
    return chain


_NAMED_CHAINS: dict[str, ChainFactory] = {
    "town": town_builder,
    "forest": forest_builder,
    "limestone_cavern": limestone_cavern_builder,
    "deep_cavern": limestone_deep_cavern_builder,
    "cavern_transition": limestone_transition_builder,
    "dwarf_fort": dwarf_fort_builder,
    "bsp_dungeon": lambda d, r, w, h: _room_chain(BspDungeonBuilder(), d, w, h),
    "bsp_interior": lambda d, r, w, h: _room_chain(BspInteriorBuilder(), d, w, h),
    "cellular_automata": lambda d, r, w, h: _shape_chain(
        CellularAutomataBuilder(), d, w, h
    ),
    "drunkard": lambda d, r, w, h: _shape_chain(
        DrunkardsWalkBuilder.open_area(), d, w, h
    ),
    "dla": lambda d, r, w, h: _shape_chain(DLABuilder.walk_inwards(), d, w, h),
    "maze": lambda d, r, w, h: _shape_chain(MazeBuilder(), d, w, h),
    "voronoi": lambda d, r, w, h: _shape_chain(
        VoronoiCellBuilder.pythagoras(), d, w, h
    ),
    "wfc": lambda d, r, w, h: _wfc_chain(d, w, h),
    "random": random_builder,
}

CHAIN_NAMES = tuple(_NAMED_CHAINS)


# =============================================================================
# ENTRY POINTS
# =============================================================================


def level_builder(depth: int, rng: RNG, width: int, height: int) -> BuilderChain:
    """Pick the chain for a dungeon depth."""
    match depth:
        case 1:
            chain = town_builder(depth, rng, width, height)
        case 2:
            chain = forest_builder(depth, rng, width, height)
        case 3:
            chain = limestone_cavern_builder(depth, rng, width, height)
        case 4:
            chain = limestone_deep_cavern_builder(depth, rng, width, height)
        case 5:
            chain = limestone_transition_builder(depth, rng, width, height)
        case 6:
            chain = dwarf_fort_builder(depth, rng, width, height)
        case _:
            chain = random_builder(depth, rng, width, height)

    logger.info(f"Depth {depth}: building '{chain.state.map.name}'")
    return chain


def create_chain(
    name: str, depth: int, width: int, height: int, rng: RNG
) -> BuilderChain:
    """Create a builder chain by name.

    Available chains are listed in ``CHAIN_NAMES``: the themed levels
    ("town", "forest", "limestone_cavern", "deep_cavern",
    "cavern_transition", "dwarf_fort"), one chain per generation algorithm,
    and "random".

    Args:
        name: Name of the chain.
        depth: Dungeon depth, which scales spawns and vault chances.
        width: Map width in tiles.
        height: Map height in tiles.
        rng: Stream used for any random composition choices.

    Raises:
        ValueError: If the chain name is not recognized.
    """
    factory = _NAMED_CHAINS.get(name)
    if factory is None:
        raise ValueError(f"Unknown chain name: {name!r}")
    chain = factory(depth, rng, width, height)
    logger.info(f"Depth {depth}: building '{name}'")
    return chain


def generate_level(
    depth: int,
    width: int = config.MAP_WIDTH,
    height: int = config.MAP_HEIGHT,
    seed: RandomSeed = config.RANDOM_SEED,
    chain_name: str | None = None,
    show_history: bool = config.SHOW_MAPGEN_VISUALIZER,
) -> BuildState:
    """Generate one level.

    The level draws from its own stream, derived from ``seed`` and the
    depth, so a seed reproduces every level independently of the others.

    Args:
        depth: Dungeon depth; selects the chain unless ``chain_name`` is set.
        width: Map width in tiles.
        height: Map height in tiles.
        seed: Master seed. None generates a different level every time.
        chain_name: Optional chain to run instead of the depth's own.
        show_history: Record snapshots of every generation step.

    Returns:
        The finished BuildState.
    """
    rng = RNGProvider(seed).get(f"map.level.{depth}")
    if chain_name is None:
        chain = level_builder(depth, rng, width, height)
    else:
        chain = create_chain(chain_name, depth, width, height, rng)
    chain.state.show_history = show_history
    return chain.build_map(rng)
