"""ASCII prefab loading: authored levels, map sections and room vaults."""

from .prefab_builder import LEGEND, PrefabBuilder, PrefabMode
from .templates import (
    CHECKERBOARD,
    DROW_ENTRY,
    GUARD_POST,
    ORC_CAMP,
    ROOM_VAULTS,
    SILLY_SMILE,
    TOTALLY_NOT_A_TRAP,
    UNDERGROUND_FORT,
    HorizontalPlacement,
    PrefabTemplate,
    PrefabTemplateError,
    VerticalPlacement,
)

__all__ = [
    "CHECKERBOARD",
    "DROW_ENTRY",
    "GUARD_POST",
    "LEGEND",
    "ORC_CAMP",
    "ROOM_VAULTS",
    "SILLY_SMILE",
    "TOTALLY_NOT_A_TRAP",
    "UNDERGROUND_FORT",
    "HorizontalPlacement",
    "PrefabBuilder",
    "PrefabMode",
    "PrefabTemplate",
    "PrefabTemplateError",
    "VerticalPlacement",
]
