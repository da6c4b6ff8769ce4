"""
Dice rolling against an explicit random stream.

Map generation is written in terms of tabletop dice: "roll a d4, on a 1 draw a
circular room", "dig for d20-5 diggers", "the pier is d4+6 tiles long". This
module keeps those rolls readable while drawing every number from the stream
the caller passes in, so a seeded level is reproducible.

- `roll_d()` rolls a single die.
- The `Dice` class parses string notation ("d20", "2d6", "d8+4", "d20-5",
  "-d4", "15") once and can then be rolled any number of times.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from delve.util.rng import RNG


class Dice:
    """A class representing dice that can be rolled.

    This class handles parsing dice strings like "d20", "-d8", "2d10+15", etc.,
    and provides methods to roll the dice.
    """

    def __init__(self, dice_str: str) -> None:
        """Initialize a Dice object from a string representation.

        Args:
            dice_str: String representation of the dice
                      (e.g., "d20", "-d4", "2d6", "2d10+15")

        Raises:
            ValueError: If the dice string format is invalid
        """
        self.dice_str = dice_str
        self.num_dice, self.sides, self.multiplier, self.modifier = (
            self._parse_dice_str(dice_str)
        )

    def _parse_dice_str(self, dice_str: str) -> tuple[int, int, int, int]:
        """Parse a dice string into (number of dice, sides, multiplier, modifier).

        Raises:
            ValueError: If the dice string format is invalid
        """
        dice_str = dice_str.replace(" ", "")

        modifier = 0
        dice_part = dice_str

        # Check for modifiers (e.g., "2d10+15" or "d20-5")
        if "+" in dice_str:
            dice_part, mod_part = dice_str.split("+", 1)
            modifier = int(mod_part)
        elif "-" in dice_str[1:]:
            # Skip a leading sign so "-d8" stays a negative die
            split_at = dice_str.index("-", 1)
            dice_part = dice_str[:split_at]
            modifier = -int(dice_str[split_at + 1 :])

        # Fixed values (e.g., "5" or "-3")
        if dice_part.lstrip("-").isdigit():
            return 0, int(dice_part), 0, modifier

        # Negative dice (e.g., "-d8")
        if dice_part.startswith("-d"):
            return 1, int(dice_part[2:]), -1, modifier

        if "d" in dice_part:
            count, sides = dice_part.split("d", 1)
            if not sides.isdigit() or int(sides) <= 0:
                raise ValueError(f"Invalid dice format: {dice_str}")
            # "d20" is an implied 1d20
            return (int(count) if count else 1), int(sides), 1, modifier

        raise ValueError(f"Invalid dice format: {dice_str}")

    def roll(self, rng: RNG) -> int:
        """Roll the dice using the given stream and return the result."""
        if self.num_dice == 0:
            return self.sides + self.modifier

        result = 0
        for _ in range(self.num_dice):
            result += rng.randint(1, self.sides)

        return (self.multiplier * result) + self.modifier

    def __str__(self) -> str:
        return self.dice_str


def roll_d(rng: RNG, sides: int) -> int:
    """Rolls a single die with the specified number of sides.

    Args:
        rng: The random stream to draw from.
        sides: The number of sides on the die (e.g., 4, 6, 8, 10, 12, 20, 100).

    Returns:
        The result of the die roll (an integer between 1 and `sides`, inclusive).

    Raises:
        ValueError: If `sides` is not a positive integer.
    """
    if not isinstance(sides, int) or sides <= 0:
        raise ValueError("Number of sides must be a positive integer.")

    return rng.randint(1, sides)
