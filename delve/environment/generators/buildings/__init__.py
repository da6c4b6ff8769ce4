"""Building representation for town generation.

This package provides the dataclass that gives placed town buildings their
semantic meaning: a role, a footprint and a door.
"""

from .building import Building, BuildingRole

__all__ = [
    "Building",
    "BuildingRole",
]
