"""Dice system.

Provides dice notation parsing and cryptographically secure rolling.

Usage:
    >>> from rules_engine.dice import roll, parse_dice
    >>> result = roll("2d6+3")
    >>> attack = roll("1d20+5", advantage=True)
"""

# Types
from rules_engine.dice.types import (
    ALLOWED_DIE_SIZES,
    AdvantageType,
    DiceNotation,
    DiceRoll,
    format_modifier,
)

# Parser
from rules_engine.dice.parser import parse_dice, ensure_notation

# Randomness
from rules_engine.dice.random_source import secure_randint

# Roller
from rules_engine.dice.roller import (
    generate_ability_scores,
    resolve_advantage,
    roll,
    roll_4d6_drop_lowest,
    roll_critical_damage,
    roll_d20,
    roll_dice,
    roll_die,
    roll_multiple,
    validate_roll,
)

__all__ = [
    # Types
    "ALLOWED_DIE_SIZES",
    "AdvantageType",
    "DiceNotation",
    "DiceRoll",
    "format_modifier",
    # Parser
    "parse_dice",
    "ensure_notation",
    # Randomness
    "secure_randint",
    # Roller
    "generate_ability_scores",
    "resolve_advantage",
    "roll",
    "roll_4d6_drop_lowest",
    "roll_critical_damage",
    "roll_d20",
    "roll_dice",
    "roll_die",
    "roll_multiple",
    "validate_roll",
]
