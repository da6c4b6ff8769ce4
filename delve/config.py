"""
Configuration constants.

Centralizes all magic numbers and configuration values used by level generation.
Organized by functional area for easy maintenance.
"""

# =============================================================================
# GENERAL
# =============================================================================

# RANDOM_SEED = None
RANDOM_SEED = "bracketon"

# Default level dimensions
MAP_WIDTH = 80
MAP_HEIGHT = 50

# =============================================================================
# MAPGEN VISUALIZER
# =============================================================================

# Record a snapshot of the map after generation steps for playback.
# Snapshots never change the generated result.
SHOW_MAPGEN_VISUALIZER = False

# Snapshot history is a ring buffer; older frames are dropped past this size.
MAPGEN_HISTORY_LIMIT = 500

# =============================================================================
# PATHING
# =============================================================================

# Diagonal steps cost this much more than cardinal steps.
DIAGONAL_COST_MULTIPLIER = 1.45

# Distance reported for tiles a flood fill never reached.
UNREACHABLE_DISTANCE = float("inf")

# Flood fills stop expanding past this accumulated cost.
MAX_PATHING_DISTANCE = 1000.0

# =============================================================================
# BUILDERS
# =============================================================================

# BSP dungeon: number of sub-rectangle placement attempts
BSP_ATTEMPTS = 240

# BSP interior: rectangles are only split while halves stay above this size
BSP_INTERIOR_MIN_ROOM_SIZE = 8

# Simple rooms builder
SIMPLE_MAX_ROOMS = 30
SIMPLE_MIN_ROOM_SIZE = 6
SIMPLE_MAX_ROOM_SIZE = 10

# Cellular automata: a d100 roll above the threshold seeds floor
CA_FLOOR_ROLL_THRESHOLD = 55
CA_ITERATIONS = 15

# Voronoi cells
VORONOI_SEEDS = 64

# =============================================================================
# WAVE FUNCTION COLLAPSE
# =============================================================================

WFC_CHUNK_SIZE = 8
WFC_MAX_ATTEMPTS = 10

# =============================================================================
# TOWN
# =============================================================================

TOWN_BUILDING_TARGET = 12
TOWN_BUILDING_ATTEMPTS = 2000

# =============================================================================
# SPAWNING
# =============================================================================

MAX_SPAWNS_PER_ROOM = 4

# Vaults placed per level at most (further limited by a d3 roll)
VAULT_MAX_PER_LEVEL = 3

# Voronoi spawn regions: noise sampling frequency and band count
SPAWN_NOISE_FREQUENCY = 0.08
SPAWN_NOISE_BANDS = 24
