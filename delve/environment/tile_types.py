"""
Tile Type system for generated maps using the flyweight pattern.

This module defines:
- `TileTypeID`: The closed set of tile kinds a map cell can hold. `GameMap`
  stores a NumPy array of these IDs (one byte per cell), never full records.
- `TileTypeData`: The intrinsic properties of a *type* of tile (walkable,
  transparent, movement cost, name and preview glyph). These are the
  flyweight objects.
- A registration system that binds one `TileTypeData` instance to each
  `TileTypeID`, checked so that the enum value is the index into the
  registered list.
- Helper functions to efficiently get maps of specific properties (e.g., a
  boolean map of all walkable tiles) from a `TileTypeID` map. Reachability
  culling, pathfinding and the ASCII preview are all built on these.
"""

from enum import IntEnum

import numpy as np


class TileTypeID(IntEnum):
    """Every kind of tile a generated map can contain."""

    WALL = 0
    FLOOR = 1
    WOOD_FLOOR = 2
    DOWN_STAIRS = 3
    UP_STAIRS = 4
    BRIDGE = 5
    ROAD = 6
    GRASS = 7
    SHALLOW_WATER = 8
    DEEP_WATER = 9
    GRAVEL = 10
    STALACTITE = 11
    STALAGMITE = 12


# Defines the intrinsic data for a *type* of tile (flyweight).
TileTypeData = np.dtype(
    [
        ("walkable", bool),
        ("transparent", bool),  # Opaque tiles block line of sight
        ("move_cost", np.float32),  # Cost of a cardinal step across this tile
        ("display_name", "U32"),  # Human-readable name (Unicode string, max 32 chars)
        ("glyph", np.int32),  # Character code used by the ASCII preview
    ]
)

# --- Tile Type Registration System ---

# The index of a tile type in this list is its TileTypeID.
_registered_tile_type_data_list: list[np.ndarray] = []


def register_tile_type(
    tile_type_id: TileTypeID, tile_type_data_instance: np.ndarray
) -> int:
    """
    Registers the properties for a tile type.

    Tile types must be registered in TileTypeID order, so that the property
    lookup arrays built below can be indexed directly by a map of IDs.

    Args:
        tile_type_id: The TileTypeID this data belongs to.
        tile_type_data_instance: The numpy array (structured with TileTypeData dtype)
                                 containing the properties of this tile type.

    Returns:
        The integer ID of the registered tile type.

    Raises:
        ValueError: If the ID is registered out of order or twice.
    """
    expected_id = len(_registered_tile_type_data_list)
    if tile_type_id != expected_id:
        raise ValueError(
            f"Tile type {tile_type_id.name} registered out of order: "
            f"expected ID {expected_id}, got {int(tile_type_id)}."
        )

    _registered_tile_type_data_list.append(tile_type_data_instance)
    return int(tile_type_id)


def make_tile_type_data(
    *,  # Forces keyword arguments - prevents bugs from wrong parameter order
    walkable: bool,
    transparent: bool,
    display_name: str,
    glyph: str,
    move_cost: float = 1.0,
) -> np.ndarray:  # Returns an instance of TileTypeData
    """
    Helper function to create a TileTypeData instance.

    Args:
        walkable: Can actors walk through this type of tile?
        transparent: Is this tile see-through for FOV/targeting?
        display_name: Human-readable name for UI display (e.g., "Wall", "Road")
        glyph: Single character drawn for this tile by the ASCII preview.
        move_cost: Cost of a cardinal step across this tile.
            Diagonal steps multiply it by config.DIAGONAL_COST_MULTIPLIER.

    Returns:
        A numpy array structured with the TileTypeData dtype.
    """
    return np.array(
        (walkable, transparent, move_cost, display_name, ord(glyph)),
        dtype=TileTypeData,
    )


# --- Define and Register Core Tile Types ---
# WALL must come first: ID 0 is the fill value for a freshly created map.

register_tile_type(
    TileTypeID.WALL,
    make_tile_type_data(
        walkable=False, transparent=False, display_name="Wall", glyph="#"
    ),
)
register_tile_type(
    TileTypeID.FLOOR,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Floor", glyph="."
    ),
)
register_tile_type(
    TileTypeID.WOOD_FLOOR,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Wooden Floor", glyph="_"
    ),
)
register_tile_type(
    TileTypeID.DOWN_STAIRS,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Down Stairs", glyph=">"
    ),
)
register_tile_type(
    TileTypeID.UP_STAIRS,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Up Stairs", glyph="<"
    ),
)
register_tile_type(
    TileTypeID.BRIDGE,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Bridge", glyph="="
    ),
)
register_tile_type(
    TileTypeID.ROAD,
    make_tile_type_data(
        walkable=True,
        transparent=True,
        display_name="Road",
        glyph=":",
        move_cost=0.8,
    ),
)
register_tile_type(
    TileTypeID.GRASS,
    make_tile_type_data(
        walkable=True,
        transparent=True,
        display_name="Grass",
        glyph='"',
        move_cost=1.1,
    ),
)
register_tile_type(
    TileTypeID.SHALLOW_WATER,
    make_tile_type_data(
        walkable=True,
        transparent=True,
        display_name="Shallow Water",
        glyph="~",
        move_cost=1.2,
    ),
)
register_tile_type(
    TileTypeID.DEEP_WATER,
    make_tile_type_data(
        walkable=False, transparent=True, display_name="Deep Water", glyph="≈"
    ),
)
register_tile_type(
    TileTypeID.GRAVEL,
    make_tile_type_data(
        walkable=True, transparent=True, display_name="Gravel", glyph=";"
    ),
)
register_tile_type(
    TileTypeID.STALACTITE,
    make_tile_type_data(
        walkable=False, transparent=False, display_name="Stalactite", glyph="╨"
    ),
)
register_tile_type(
    TileTypeID.STALAGMITE,
    make_tile_type_data(
        walkable=False, transparent=False, display_name="Stalagmite", glyph="╥"
    ),
)


# --- Pre-calculated Property Arrays for Efficient Lookups ---
# These arrays are built *after* all tile types have been registered, so they
# can be indexed directly by a map of TileTypeIDs.

_tile_type_properties_walkable = np.array(
    [t["walkable"] for t in _registered_tile_type_data_list], dtype=bool
)
_tile_type_properties_transparent = np.array(
    [t["transparent"] for t in _registered_tile_type_data_list], dtype=bool
)
_tile_type_properties_move_cost = np.array(
    [t["move_cost"] for t in _registered_tile_type_data_list], dtype=np.float32
)
_tile_type_properties_glyph = np.array(
    [t["glyph"] for t in _registered_tile_type_data_list], dtype=np.int32
)

# --- Public Helper Functions for Accessing Tile Properties ---


def get_walkable_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileTypeIDs into a boolean map of walkability.
    True means the tile at that position is walkable.
    """
    return _tile_type_properties_walkable[tile_type_ids_map]


def get_transparent_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """
    Converts a map of TileTypeIDs into a boolean map of transparency.
    True means the tile at that position does not block line of sight.
    """
    return _tile_type_properties_transparent[tile_type_ids_map]


def get_move_cost_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """Converts a map of TileTypeIDs into a float32 map of movement costs."""
    return _tile_type_properties_move_cost[tile_type_ids_map]


def get_glyph_map(tile_type_ids_map: np.ndarray) -> np.ndarray:
    """Converts a map of TileTypeIDs into a map of preview character codes."""
    return _tile_type_properties_glyph[tile_type_ids_map]


def get_move_cost(tile_type_id: int) -> float:
    return float(_tile_type_properties_move_cost[tile_type_id])
