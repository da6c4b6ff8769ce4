"""ASCII prefab templates: whole levels, map sections and room vaults.

Templates are written row by row. Each character is one tile, read through
the legend in ``prefab_builder.LEGEND``: space is floor, ``#`` is wall,
``@`` is the player start, ``>`` the down stairs, and letters and symbols
stand for named spawns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from delve.environment.generators.base import BuilderConfigurationError


class PrefabTemplateError(BuilderConfigurationError):
    """A template has fewer characters than its declared size."""


class HorizontalPlacement(Enum):
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class VerticalPlacement(Enum):
    TOP = auto()
    CENTER = auto()
    BOTTOM = auto()


@dataclass(frozen=True)
class PrefabTemplate:
    """A rectangular ASCII template.

    Attributes:
        name: Used in log messages.
        template: The rows, newline separated. Newlines are not tiles.
        width: Tiles per row.
        height: Number of rows.
        first_depth: Shallowest depth a vault may appear at.
        last_depth: Deepest depth a vault may appear at.
        placement: Where a map section is anchored. None for levels and
            vaults.
    """

    name: str
    template: str
    width: int
    height: int
    first_depth: int = 0
    last_depth: int = 100
    placement: tuple[HorizontalPlacement, VerticalPlacement] | None = None

    def __post_init__(self) -> None:
        if len(self.tiles()) < self.width * self.height:
            raise PrefabTemplateError(
                f"Prefab {self.name!r} has {len(self.tiles())} tiles, "
                f"expected {self.width}x{self.height}"
            )

    def tiles(self) -> str:
        """The template characters in row-major order, newlines removed."""
        # A non-breaking space is a common editor artefact for floor
        return self.template.replace("\r", "").replace("\n", "").replace("\xa0", " ")

    def allowed_at(self, depth: int) -> bool:
        return self.first_depth <= depth <= self.last_depth


def _rows(*rows: str) -> str:
    return "\n".join(rows)


# =============================================================================
# LEVELS
# =============================================================================

GUARD_POST = PrefabTemplate(
    name="Guard Post",
    template=_rows(
        "########################################",
        "#      #          ######        #  ^   #",
        "#  @   #   g      #    #   o    #      #",
        "#      ####   #####    #####    ####   #",
        "#                 !         %          #",
        "####  ######  ###########  ######  ### #",
        "####  #    #  #    ≈≈   #  #    #  # # #",
        "####  # ^  #  #   ≈≈≈≈  #  #  g #  # # #",
        "####  #    #  #    ≈≈   #  #    #  # # #",
        "####  ## ###  ###### ####  ## ###  #   #",
        "####                                 ###",
        "#      ##########  ^   ##########      #",
        "#  g   #        #      #        #   o  #",
        "#      #   %    #  ☼   #    !   #      #",
        "#      #        #      #        #      #",
        "#####  ####  ####      ####  ####  #####",
        "#                                      #",
        "#   e          ####  ####          >   #",
        "#              #  O    #               #",
        "########################################",
    ),
    width=40,
    height=20,
)

# =============================================================================
# SECTIONS
# =============================================================================

UNDERGROUND_FORT = PrefabTemplate(
    name="Underground Fort",
    template=_rows(
        "     #         ",
        "  #######      ",
        "  #     #      ",
        "  #     #######",
        "  #  g        #",
        "  #     #######",
        "  #     #      ",
        "  ### ###      ",
        "    # #        ",
        "    # #        ",
        "    # ##       ",
        "    ^          ",
        "    ^          ",
        "    # ##       ",
        "    # #        ",
        "    # #        ",
        "    # #        ",
        "    # #        ",
        "  ### ###      ",
        "  #     #      ",
        "  #     #      ",
        "  #  g  #      ",
        "  #     #      ",
        "  #     #      ",
        "  ### ###      ",
        "    # #        ",
        "    # #        ",
        "    # #        ",
        "    # ##       ",
        "    ^          ",
        "    ^          ",
        "    # ##       ",
        "    # #        ",
        "    # #        ",
        "    # #        ",
        "  ### ###      ",
        "  #     #      ",
        "  #     #######",
        "  #  g        #",
        "  #     #######",
        "  #     #      ",
        "  #######      ",
        "     #         ",
    ),
    width=15,
    height=43,
    placement=(HorizontalPlacement.RIGHT, VerticalPlacement.TOP),
)

ORC_CAMP = PrefabTemplate(
    name="Orc Camp",
    template=_rows(
        "            ",
        " ########## ",
        " ≈☼      ☼≈ ",
        " ≈ g      ≈ ",
        " ≈        ≈ ",
        " ≈    g   ≈ ",
        " o   O    o ",
        " ≈        ≈ ",
        " ≈ g      ≈ ",
        " ≈    g   ≈ ",
        " ≈☼      ☼≈ ",
        " ≈≈≈≈o≈≈≈≈≈ ",
    ),
    width=12,
    height=12,
    placement=(HorizontalPlacement.CENTER, VerticalPlacement.CENTER),
)

DROW_ENTRY = PrefabTemplate(
    name="Drow Entry",
    template=_rows(
        "            ",
        " ########## ",
        " #        # ",
        " #   >    # ",
        " #        # ",
        " #e       # ",
        "    e     # ",
        " #e       # ",
        " ########## ",
        "            ",
    ),
    width=12,
    height=10,
    placement=(HorizontalPlacement.CENTER, VerticalPlacement.CENTER),
)

# =============================================================================
# ROOM VAULTS
# =============================================================================

TOTALLY_NOT_A_TRAP = PrefabTemplate(
    name="Totally Not A Trap",
    template=_rows(
        "     ",
        " ^^^ ",
        " ^!^ ",
        " ^^^ ",
        "     ",
    ),
    width=5,
    height=5,
)

SILLY_SMILE = PrefabTemplate(
    name="Silly Smile",
    template=_rows(
        "      ",
        " ^  ^ ",
        "  ##  ",
        "      ",
        " #### ",
        "      ",
    ),
    width=6,
    height=6,
)

CHECKERBOARD = PrefabTemplate(
    name="Checkerboard",
    template=_rows(
        "      ",
        " #^#  ",
        " g#%# ",
        " #!#  ",
        " ^# # ",
        "      ",
    ),
    width=6,
    height=6,
)

ROOM_VAULTS = (TOTALLY_NOT_A_TRAP, CHECKERBOARD, SILLY_SMILE)
