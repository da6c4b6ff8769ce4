"""Stamp ASCII prefabs into a map.

A PrefabBuilder runs in one of three modes:

- constant: load a whole authored level at the map origin. Used as the
  initial builder of a chain.
- sectional: overlay a map section anchored to an edge or the centre,
  clearing earlier spawns under it.
- vaults: on a depth-weighted roll, drop up to three small room vaults
  onto open floor, each at the first spot it fits.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np

from delve import config
from delve.environment.generators.base import (
    BuildState,
    InitialBuilder,
    MetaBuilder,
)
from delve.environment.generators.meta.positions import nearest_walkable
from delve.environment.generators.prefabs.templates import (
    ROOM_VAULTS,
    HorizontalPlacement,
    PrefabTemplate,
    PrefabTemplateError,
    VerticalPlacement,
)
from delve.environment.tile_types import TileTypeID
from delve.util.dice import roll_d

if TYPE_CHECKING:
    from delve.util.rng import RNG

logger = logging.getLogger(__name__)

START = "@"

# Character -> (tile, spawn tag or None). "@" is handled separately.
LEGEND: dict[str, tuple[TileTypeID, str | None]] = {
    " ": (TileTypeID.FLOOR, None),
    "#": (TileTypeID.WALL, None),
    ">": (TileTypeID.DOWN_STAIRS, None),
    "≈": (TileTypeID.DEEP_WATER, None),
    "g": (TileTypeID.FLOOR, "Goblin"),
    "o": (TileTypeID.FLOOR, "Orc"),
    "O": (TileTypeID.FLOOR, "Orc Leader"),
    "e": (TileTypeID.FLOOR, "Dark Elf"),
    "^": (TileTypeID.FLOOR, "Bear Trap"),
    "%": (TileTypeID.FLOOR, "Rations"),
    "!": (TileTypeID.FLOOR, "Health Potion"),
    "☼": (TileTypeID.FLOOR, "Watch Fire"),
}


class PrefabMode(Enum):
    CONSTANT = auto()
    SECTIONAL = auto()
    VAULTS = auto()


class PrefabBuilder(InitialBuilder, MetaBuilder):
    """Load prefab templates into the build state.

    Use the ``constant``, ``sectional`` and ``vaults`` constructors rather
    than building one directly.
    """

    def __init__(
        self,
        mode: PrefabMode,
        template: PrefabTemplate | None = None,
        vaults: tuple[PrefabTemplate, ...] = ROOM_VAULTS,
    ) -> None:
        self.mode = mode
        self.template = template
        self.vault_list = vaults

    @classmethod
    def constant(cls, level: PrefabTemplate) -> PrefabBuilder:
        return cls(PrefabMode.CONSTANT, level)

    @classmethod
    def sectional(cls, section: PrefabTemplate) -> PrefabBuilder:
        if section.placement is None:
            raise PrefabTemplateError(f"Prefab {section.name!r} has no placement")
        return cls(PrefabMode.SECTIONAL, section)

    @classmethod
    def vaults(cls) -> PrefabBuilder:
        return cls(PrefabMode.VAULTS)

    def build_map(self, rng: RNG, state: BuildState) -> None:
        match self.mode:
            case PrefabMode.CONSTANT:
                assert self.template is not None
                self._load_level(state, self.template)
            case PrefabMode.SECTIONAL:
                assert self.template is not None
                self._apply_sectional(state, self.template)
            case PrefabMode.VAULTS:
                self._apply_room_vaults(rng, state)
        state.take_snapshot()

    # -------------------------------------------------------------------------
    # Stamping
    # -------------------------------------------------------------------------

    @staticmethod
    def _char_to_map(state: BuildState, ch: str, x: int, y: int) -> None:
        game_map = state.map
        if ch == START:
            game_map.tiles[x, y] = TileTypeID.FLOOR
            state.starting_position = (x, y)
            return

        entry = LEGEND.get(ch)
        if entry is None:
            logger.warning(f"Unknown glyph loading map: {ch!r}")
            return

        tile, spawn = entry
        game_map.tiles[x, y] = tile
        if spawn is not None:
            state.spawn_list.append((game_map.xy_idx(x, y), spawn))

    @staticmethod
    def _read_tiles(template: PrefabTemplate) -> str:
        tiles = template.tiles()
        if len(tiles) < template.width * template.height:
            raise PrefabTemplateError(
                f"Prefab {template.name!r} is shorter than "
                f"{template.width}x{template.height}"
            )
        return tiles

    def _stamp(
        self,
        state: BuildState,
        template: PrefabTemplate,
        chunk_x: int,
        chunk_y: int,
        keep_border: bool = False,
    ) -> None:
        game_map = state.map
        tiles = self._read_tiles(template)
        for ty in range(template.height):
            for tx in range(template.width):
                x, y = chunk_x + tx, chunk_y + ty
                if not game_map.in_bounds(x, y):
                    continue
                if keep_border and (
                    x in (0, game_map.width - 1) or y in (0, game_map.height - 1)
                ):
                    continue
                self._char_to_map(state, tiles[ty * template.width + tx], x, y)

    @staticmethod
    def _keep_start_walkable(state: BuildState) -> None:
        """Move a start that was stamped over onto the nearest walkable tile."""
        start = state.starting_position
        if start is None or state.map.walkable[start]:
            return
        moved = nearest_walkable(state.map, start)
        logger.debug(f"Start {start} was stamped over, moved to {moved}")
        state.starting_position = moved

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def _load_level(self, state: BuildState, level: PrefabTemplate) -> None:
        self._stamp(state, level, 0, 0)

    def _apply_sectional(self, state: BuildState, section: PrefabTemplate) -> None:
        game_map = state.map
        assert section.placement is not None
        horizontal, vertical = section.placement

        match horizontal:
            case HorizontalPlacement.LEFT:
                chunk_x = 0
            case HorizontalPlacement.CENTER:
                chunk_x = game_map.width // 2 - section.width // 2
            case HorizontalPlacement.RIGHT:
                chunk_x = game_map.width - 1 - section.width

        match vertical:
            case VerticalPlacement.TOP:
                chunk_y = 0
            case VerticalPlacement.CENTER:
                chunk_y = game_map.height // 2 - section.height // 2
            case VerticalPlacement.BOTTOM:
                chunk_y = game_map.height - 1 - section.height

        state.remove_spawns_in(
            chunk_x, chunk_y, chunk_x + section.width, chunk_y + section.height
        )
        state.take_snapshot()
        self._stamp(state, section, chunk_x, chunk_y, keep_border=True)
        self._keep_start_walkable(state)

    def _apply_room_vaults(self, rng: RNG, state: BuildState) -> None:
        game_map = state.map
        state.take_snapshot()

        if roll_d(rng, 6) + game_map.depth < 4:
            return

        possible = [v for v in self.vault_list if v.allowed_at(game_map.depth)]
        if not possible:
            return

        n_vaults = min(roll_d(rng, config.VAULT_MAX_PER_LEVEL), len(possible))
        used = np.zeros((game_map.width, game_map.height), dtype=bool, order="F")

        for _ in range(n_vaults):
            vault_index = 0 if len(possible) == 1 else roll_d(rng, len(possible)) - 1
            vault = possible[vault_index]

            position = self._first_fit(state, vault, used)
            if position is None:
                logger.warning(f"No room on {game_map.name!r} for vault {vault.name!r}")
                continue

            chunk_x, chunk_y = position
            state.remove_spawns_in(
                chunk_x, chunk_y, chunk_x + vault.width, chunk_y + vault.height
            )
            self._stamp(state, vault, chunk_x, chunk_y)
            self._keep_start_walkable(state)
            footprint = (
                slice(chunk_x, chunk_x + vault.width),
                slice(chunk_y, chunk_y + vault.height),
            )
            used[footprint] = True
            state.take_snapshot()

            possible.pop(vault_index)

    @staticmethod
    def _first_fit(
        state: BuildState, vault: PrefabTemplate, used: np.ndarray
    ) -> tuple[int, int] | None:
        """Scan in tile order for the first all-floor, unused spot.

        The vault keeps two tiles clear of every map edge.
        """
        game_map = state.map
        floor = game_map.tiles == TileTypeID.FLOOR
        for y in range(2, game_map.height - 2 - vault.height):
            for x in range(2, game_map.width - 2 - vault.width):
                window = (slice(x, x + vault.width), slice(y, y + vault.height))
                if floor[window].all() and not used[window].any():
                    return x, y
        return None
