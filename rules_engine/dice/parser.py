"""Dice notation parser.

Parses standard dice notation like 1d20, 2d6+3, d100, 4d6-2.
"""

import re

from rules_engine.dice.types import MAX_DICE, MIN_DICE, DiceNotation
from rules_engine.errors import InvalidNotation, OutOfRange


# Pattern: optional count, 'd', die size, optional modifier
# Examples: 1d20, 2d6+3, d100, 4d6-2, 1d20 + 5
DICE_PATTERN = re.compile(
    r"^\s*(\d*)d(\d+)\s*([+-]\s*\d+)?\s*$",
    re.IGNORECASE,
)


def parse_dice(notation: str) -> DiceNotation:
    """Parse dice notation into a DiceNotation.

    Args:
        notation: Dice notation string (e.g., "2d6+3", "1d20", "d100").

    Returns:
        DiceNotation with parsed values.

    Raises:
        InvalidNotation: If the string does not match the grammar.
        OutOfRange: If the count is outside 1-100 or the die is not standard.

    Examples:
        >>> parse_dice("1d20")
        DiceNotation(count=1, sides=20, modifier=0)
        >>> parse_dice("2d6+3")
        DiceNotation(count=2, sides=6, modifier=3)
        >>> parse_dice("d100")
        DiceNotation(count=1, sides=100, modifier=0)
    """
    if not notation or not notation.strip():
        raise InvalidNotation("Dice notation cannot be empty")

    match = DICE_PATTERN.match(notation)
    if not match:
        raise InvalidNotation(f"Invalid dice notation: '{notation}'")

    count_str, sides_str, modifier_str = match.groups()

    # Default to 1 die if not specified (e.g., "d20" means "1d20")
    count = int(count_str) if count_str else 1
    sides = int(sides_str)

    modifier = 0
    if modifier_str:
        modifier = int(modifier_str.replace(" ", ""))

    if count < MIN_DICE or count > MAX_DICE:
        raise OutOfRange(
            f"Invalid dice count: {count}. Must be between {MIN_DICE} and {MAX_DICE}."
        )

    # Die size is checked by DiceNotation itself
    return DiceNotation(count=count, sides=sides, modifier=modifier)


def ensure_notation(notation: str | DiceNotation) -> DiceNotation:
    """Accept either a notation string or an already-parsed DiceNotation."""
    if isinstance(notation, DiceNotation):
        return notation
    return parse_dice(notation)
