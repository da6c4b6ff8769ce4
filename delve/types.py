from __future__ import annotations

# =============================================================================
# SPATIAL TYPES
# =============================================================================

TileCoord = int  # Always integer tile position

# World coordinates - absolute positions on the generated map
WorldTileCoord = TileCoord  # Example: x=5, y=3
WorldTilePos = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on map

# Flat tile index into a map buffer: index = y * width + x
TileIndex = int

# A single content request produced by generation: (tile index, content tag)
SpawnEntry = tuple[TileIndex, str]

# =============================================================================
# RANDOMNESS
# =============================================================================

# Seeds can be ints or strings (strings are hashed via crc32 in util.rng)
RandomSeed = int | str | None
