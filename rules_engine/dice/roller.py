"""Core dice rolling engine.

Provides functions to roll dice notation with support for
advantage/disadvantage, critical damage and ability-score generation.

All randomness comes from `secure_randint`; every die passes through
`roll_die` so a single function decides each face.
"""

import logging

from rules_engine.dice.parser import ensure_notation, parse_dice
from rules_engine.dice.random_source import secure_randint
from rules_engine.dice.types import AdvantageType, DiceNotation, DiceRoll, format_modifier
from rules_engine.errors import ConflictingAdvantage, InvalidNotation, OutOfRange

logger = logging.getLogger(__name__)


D20 = DiceNotation(count=1, sides=20)


def roll_die(sides: int) -> int:
    """Roll a single die with the given number of sides."""
    return secure_randint(1, sides)


def resolve_advantage(advantage: bool = False, disadvantage: bool = False) -> AdvantageType:
    """Combine advantage/disadvantage flags into an AdvantageType.

    Raises:
        ConflictingAdvantage: If both flags are set.
    """
    if advantage and disadvantage:
        raise ConflictingAdvantage("Cannot have both advantage and disadvantage")
    if advantage:
        return AdvantageType.ADVANTAGE
    if disadvantage:
        return AdvantageType.DISADVANTAGE
    return AdvantageType.NORMAL


def _modifier_text(modifier: int) -> str:
    return f" {format_modifier(modifier)}" if modifier else ""


def _flags_text(critical: bool, fumble: bool) -> str:
    if critical:
        return " (CRITICAL!)"
    if fumble:
        return " (FUMBLE!)"
    return ""


def roll_dice(
    notation: DiceNotation,
    advantage_type: AdvantageType = AdvantageType.NORMAL,
) -> DiceRoll:
    """Roll dice according to the notation.

    Advantage and disadvantage only apply to a single d20: two d20s are
    drawn and the higher (advantage) or lower (disadvantage) is kept. For
    any other notation the advantage type is ignored and every die is summed.

    Args:
        notation: The dice notation to roll.
        advantage_type: Whether to use advantage, disadvantage, or normal.

    Returns:
        DiceRoll with kept rolls, discarded rolls and total.

    Examples:
        >>> result = roll_dice(DiceNotation(count=2, sides=6, modifier=3))
        >>> len(result.rolls)
        2
    """
    if notation.is_single_d20 and advantage_type != AdvantageType.NORMAL:
        first = roll_die(20)
        second = roll_die(20)
        if advantage_type == AdvantageType.ADVANTAGE:
            kept, dropped = max(first, second), min(first, second)
            label = "Advantage"
        else:
            kept, dropped = min(first, second), max(first, second)
            label = "Disadvantage"

        total = kept + notation.modifier
        critical = kept == 20
        fumble = kept == 1
        description = (
            f"{label}: rolled {first} and {second}, taking {kept}"
            f"{_modifier_text(notation.modifier)} = {total}"
            f"{_flags_text(critical, fumble)}"
        )
        result = DiceRoll(
            notation=notation,
            rolls=(kept,),
            total=total,
            modifier=notation.modifier,
            advantage=advantage_type == AdvantageType.ADVANTAGE,
            disadvantage=advantage_type == AdvantageType.DISADVANTAGE,
            critical=critical,
            fumble=fumble,
            description=description,
            discarded=(dropped,),
        )
        logger.debug("Rolled %s: %s", notation, description)
        return result

    rolls = tuple(roll_die(notation.sides) for _ in range(notation.count))
    total = sum(rolls) + notation.modifier

    critical = notation.is_single_d20 and rolls[0] == 20
    fumble = notation.is_single_d20 and rolls[0] == 1
    description = (
        f"{notation}: rolled [{', '.join(str(r) for r in rolls)}]"
        f"{_modifier_text(notation.modifier)} = {total}"
        f"{_flags_text(critical, fumble)}"
    )

    logger.debug("Rolled %s: %s", notation, description)
    return DiceRoll(
        notation=notation,
        rolls=rolls,
        total=total,
        modifier=notation.modifier,
        critical=critical,
        fumble=fumble,
        description=description,
    )


def roll(
    notation: str | DiceNotation,
    advantage: bool = False,
    disadvantage: bool = False,
) -> DiceRoll:
    """Parse dice notation and roll.

    Args:
        notation: Dice notation string (e.g., "2d6+3") or a parsed notation.
        advantage: Roll two d20s and keep the higher (single d20 only).
        disadvantage: Roll two d20s and keep the lower (single d20 only).

    Returns:
        DiceRoll with individual rolls and total.

    Raises:
        InvalidNotation: If notation is malformed.
        OutOfRange: If count or die size is not allowed.
        ConflictingAdvantage: If both advantage and disadvantage are set.

    Examples:
        >>> result = roll("1d20+5")
        >>> result.notation.sides
        20
    """
    advantage_type = resolve_advantage(advantage, disadvantage)
    return roll_dice(ensure_notation(notation), advantage_type)


def roll_d20(
    modifier: int = 0,
    advantage_type: AdvantageType = AdvantageType.NORMAL,
) -> DiceRoll:
    """Roll a single d20 plus a flat modifier."""
    return roll_dice(D20.with_modifier(modifier), advantage_type)


def roll_multiple(notations: list[str]) -> list[DiceRoll]:
    """Roll several independent notations (e.g. mixed damage types)."""
    return [roll(notation) for notation in notations]


def roll_critical_damage(notation: str | DiceNotation) -> DiceRoll:
    """Roll critical-hit damage: the dice count doubles, the modifier does not.

    Examples:
        >>> result = roll_critical_damage("2d6+3")
        >>> str(result.notation)
        '4d6+3'
    """
    base = ensure_notation(notation)
    doubled = base.doubled()
    result = roll_dice(doubled)
    return DiceRoll(
        notation=doubled,
        rolls=result.rolls,
        total=result.total,
        modifier=result.modifier,
        critical=True,
        description=f"CRITICAL HIT: {result.description}",
    )


def roll_4d6_drop_lowest() -> DiceRoll:
    """Roll 4d6 and drop the lowest die (standard ability score generation)."""
    rolls = sorted(roll_die(6) for _ in range(4))
    dropped, kept = rolls[0], tuple(rolls[1:])
    total = sum(kept)
    return DiceRoll(
        notation=DiceNotation(count=4, sides=6),
        rolls=kept,
        total=total,
        modifier=0,
        description=(
            f"Rolled [{', '.join(str(r) for r in rolls)}], dropped {dropped}, "
            f"kept [{', '.join(str(r) for r in kept)}] = {total}"
        ),
        discarded=(dropped,),
    )


def generate_ability_scores() -> list[int]:
    """Generate six ability scores with 4d6-drop-lowest."""
    return [roll_4d6_drop_lowest().total for _ in range(6)]


def validate_roll(claimed: DiceRoll) -> bool:
    """Check a claimed roll for internal consistency.

    Used for client-submitted rolls. A claimed roll is valid when its
    notation parses, it holds the right number of dice, each die lies within
    the die's range and the total matches.
    """
    try:
        notation = parse_dice(str(claimed.notation))
    except (InvalidNotation, OutOfRange):
        return False

    # Advantage draws an extra d20; drop-lowest keeps fewer than it rolls
    if claimed.advantage or claimed.disadvantage:
        if len(claimed.rolls) != notation.count or len(claimed.discarded) != 1:
            return False
    elif len(claimed.rolls) + len(claimed.discarded) != notation.count:
        return False
    if any(r < 1 or r > notation.sides for r in claimed.rolls + claimed.discarded):
        return False
    if claimed.modifier != notation.modifier:
        return False
    return claimed.total == sum(claimed.rolls) + claimed.modifier
