"""Dice system type definitions.

Immutable dataclasses for dice notation and roll results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rules_engine.errors import OutOfRange


# Standard polyhedral dice accepted by the notation parser
ALLOWED_DIE_SIZES = frozenset({2, 3, 4, 6, 8, 10, 12, 20, 100})

MIN_DICE = 1
MAX_DICE = 100
# Critical hits double the dice of the largest written notation
MAX_ROLLED_DICE = MAX_DICE * 2


class AdvantageType(str, Enum):
    """Type of advantage for a roll."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


def format_modifier(modifier: int) -> str:
    """Format a modifier with an explicit sign.

    Examples:
        >>> format_modifier(3)
        '+3'
        >>> format_modifier(-1)
        '-1'
        >>> format_modifier(0)
        '+0'
    """
    return f"+{modifier}" if modifier >= 0 else f"{modifier}"


@dataclass(frozen=True)
class DiceNotation:
    """Parsed dice notation like 2d6+3.

    Written notation is limited to 100 dice by the parser. A notation built
    directly may hold up to 200 so that critical doubling of any written
    notation stays representable.

    Attributes:
        count: Number of dice to roll (1-200).
        sides: Size of each die (a standard die size).
        modifier: Flat modifier added to the total.
    """

    count: int
    sides: int
    modifier: int = 0

    def __post_init__(self) -> None:
        if self.count < MIN_DICE or self.count > MAX_ROLLED_DICE:
            raise OutOfRange(
                f"Invalid dice count: {self.count}. "
                f"Must be between {MIN_DICE} and {MAX_ROLLED_DICE}."
            )
        if self.sides not in ALLOWED_DIE_SIZES:
            allowed = ", ".join(f"d{size}" for size in sorted(ALLOWED_DIE_SIZES))
            raise OutOfRange(
                f"Invalid die size: d{self.sides}. Must be a standard die ({allowed})."
            )

    def __str__(self) -> str:
        text = f"{self.count}d{self.sides}"
        if self.modifier:
            text += format_modifier(self.modifier)
        return text

    @property
    def is_single_d20(self) -> bool:
        """Whether this is exactly one d20 (the only roll that can crit)."""
        return self.count == 1 and self.sides == 20

    def with_count(self, count: int) -> "DiceNotation":
        """Return a copy with a different dice count."""
        return DiceNotation(count=count, sides=self.sides, modifier=self.modifier)

    def doubled(self) -> "DiceNotation":
        """Critical-hit notation: twice the dice, the same modifier."""
        return self.with_count(self.count * 2)

    def with_modifier(self, modifier: int) -> "DiceNotation":
        """Return a copy with a different flat modifier."""
        return DiceNotation(count=self.count, sides=self.sides, modifier=modifier)


@dataclass(frozen=True)
class DiceRoll:
    """Result of rolling dice.

    `total` always equals `sum(rolls) + modifier`. For advantage and
    disadvantage rolls, `rolls` holds the kept d20 and `discarded` the other.

    Attributes:
        notation: The notation that was rolled.
        rolls: Each kept die result.
        total: Sum of kept rolls plus modifier.
        modifier: The flat modifier applied.
        advantage: Whether the roll was made with advantage.
        disadvantage: Whether the roll was made with disadvantage.
        critical: Kept single d20 shows 20.
        fumble: Kept single d20 shows 1.
        description: Human-readable breakdown.
        discarded: Dice dropped by advantage/disadvantage or drop-lowest.
    """

    notation: DiceNotation
    rolls: tuple[int, ...]
    total: int
    modifier: int
    advantage: bool = False
    disadvantage: bool = False
    critical: bool = False
    fumble: bool = False
    description: str = ""
    discarded: tuple[int, ...] = field(default_factory=tuple)

    @property
    def natural(self) -> int | None:
        """The kept d20 face for single-d20 rolls, otherwise None."""
        if self.notation.is_single_d20 and self.rolls:
            return self.rolls[0]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "notation": str(self.notation),
            "count": self.notation.count,
            "sides": self.notation.sides,
            "rolls": list(self.rolls),
            "discarded": list(self.discarded),
            "total": self.total,
            "modifier": self.modifier,
            "advantage": self.advantage,
            "disadvantage": self.disadvantage,
            "critical": self.critical,
            "fumble": self.fumble,
            "description": self.description,
        }
