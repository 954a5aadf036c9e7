"""The 5e conditions and their mechanical effects.

A creature's conditions are a tuple of Condition records. Every operation
returns a new tuple; nothing is changed in place.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable

from rules_engine.abilities import Ability
from rules_engine.errors import OutOfRange, UnknownCondition

logger = logging.getLogger(__name__)


# Duration sentinels, in rounds
PERMANENT = -1
INSTANT = 0

MAX_EXHAUSTION = 6


class ConditionName(str, Enum):
    BLINDED = "blinded"
    CHARMED = "charmed"
    DEAFENED = "deafened"
    EXHAUSTION = "exhaustion"
    FRIGHTENED = "frightened"
    GRAPPLED = "grappled"
    INCAPACITATED = "incapacitated"
    INVISIBLE = "invisible"
    PARALYZED = "paralyzed"
    PETRIFIED = "petrified"
    POISONED = "poisoned"
    PRONE = "prone"
    RESTRAINED = "restrained"
    STUNNED = "stunned"
    UNCONSCIOUS = "unconscious"


class EffectType(str, Enum):
    """What kind of rule change a condition effect makes."""

    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"
    IMMUNITY = "immunity"
    RESTRICTION = "restriction"
    PENALTY = "penalty"
    AUTOMATIC = "automatic"


# Effect targets read by the attack rules
ATTACK_ROLLS = "attack_rolls"
ATTACKS_AGAINST = "attacks_against"
ATTACKS_AGAINST_MELEE = "attacks_against_melee"
ATTACKS_AGAINST_RANGED = "attacks_against_ranged"


@dataclass(frozen=True)
class ConditionEffect:
    type: EffectType
    target: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"type": self.type.value, "target": self.target, "description": self.description}


@dataclass(frozen=True)
class Condition:
    """A condition affecting a creature.

    Attributes:
        name: Which condition.
        description: Rules text summary.
        effects: Mechanical effects, from the catalog.
        duration: Rounds remaining; PERMANENT (-1) until removed, INSTANT (0)
            ends at the next decrement.
        source: Who or what imposed it.
        save_dc: DC of the save that ends it, if any.
        save_ability: Ability used for that save.
    """

    name: ConditionName
    description: str
    effects: tuple[ConditionEffect, ...] = ()
    duration: int = PERMANENT
    source: str | None = None
    save_dc: int | None = None
    save_ability: Ability | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Effects are not stored; they come back from the catalog.
        """
        return {
            "name": self.name.value,
            "duration": self.duration,
            "source": self.source,
            "save_dc": self.save_dc,
            "save_ability": self.save_ability.value if self.save_ability else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Condition":
        """Create from dictionary."""
        return apply_condition(
            data["name"],
            duration=data.get("duration", PERMANENT),
            source=data.get("source"),
            save_dc=data.get("save_dc"),
            save_ability=data.get("save_ability"),
        )


def _effect(effect_type: EffectType, target: str, description: str) -> ConditionEffect:
    return ConditionEffect(effect_type, target, description)


_AUTO_FAIL_STR_DEX = _effect(
    EffectType.AUTOMATIC, "saves", "Automatically fails Strength and Dexterity saving throws"
)
_ATTACKED_WITH_ADVANTAGE = _effect(
    EffectType.ADVANTAGE, ATTACKS_AGAINST, "Attack rolls against the creature have advantage"
)
_AUTO_CRIT_IN_MELEE = _effect(
    EffectType.AUTOMATIC, "critical_hits", "Attacks within 5 feet are automatic critical hits"
)
_SPEED_ZERO = _effect(EffectType.PENALTY, "speed", "Speed becomes 0")


CONDITIONS: dict[ConditionName, Condition] = {
    c.name: c
    for c in (
        Condition(
            ConditionName.BLINDED,
            "Can't see and automatically fails any ability check that requires sight.",
            (
                _effect(EffectType.DISADVANTAGE, ATTACK_ROLLS, "Attack rolls have disadvantage"),
                _ATTACKED_WITH_ADVANTAGE,
                _effect(
                    EffectType.AUTOMATIC,
                    "sight_checks",
                    "Automatically fails checks that require sight",
                ),
            ),
        ),
        Condition(
            ConditionName.CHARMED,
            "Can't attack the charmer or target the charmer with harmful abilities "
            "or magical effects.",
            (
                _effect(EffectType.RESTRICTION, "attacks", "Can't attack the charmer"),
                _effect(
                    EffectType.RESTRICTION,
                    "harmful_abilities",
                    "Can't target the charmer with harmful abilities or effects",
                ),
                _effect(
                    EffectType.ADVANTAGE,
                    "social_checks",
                    "Charmer has advantage on social interaction checks",
                ),
            ),
        ),
        Condition(
            ConditionName.DEAFENED,
            "Can't hear and automatically fails any ability check that requires hearing.",
            (
                _effect(
                    EffectType.AUTOMATIC,
                    "hearing_checks",
                    "Automatically fails checks that require hearing",
                ),
            ),
        ),
        Condition(
            ConditionName.EXHAUSTION,
            "Measured in six levels, each adding a cumulative penalty.",
            (
                _effect(
                    EffectType.PENALTY,
                    "ability_checks",
                    "Level 1: Disadvantage on ability checks",
                ),
                _effect(EffectType.PENALTY, "speed", "Level 2: Speed halved"),
                _effect(
                    EffectType.DISADVANTAGE,
                    "attack_rolls_saves",
                    "Level 3: Disadvantage on attack rolls and saving throws",
                ),
                _effect(EffectType.PENALTY, "hp_maximum", "Level 4: Hit point maximum halved"),
                _effect(EffectType.PENALTY, "speed", "Level 5: Speed reduced to 0"),
                _effect(EffectType.AUTOMATIC, "death", "Level 6: Death"),
            ),
        ),
        Condition(
            ConditionName.FRIGHTENED,
            "Disadvantage on ability checks and attack rolls while the source of fear "
            "is in sight.",
            (
                _effect(
                    EffectType.DISADVANTAGE,
                    "ability_checks",
                    "Disadvantage on ability checks while the source is visible",
                ),
                _effect(
                    EffectType.DISADVANTAGE,
                    ATTACK_ROLLS,
                    "Disadvantage on attack rolls while the source is visible",
                ),
                _effect(
                    EffectType.RESTRICTION,
                    "movement",
                    "Can't willingly move closer to the source",
                ),
            ),
        ),
        Condition(
            ConditionName.GRAPPLED,
            "Speed becomes 0 and can't benefit from any bonus to speed.",
            (
                _SPEED_ZERO,
                _effect(EffectType.RESTRICTION, "movement", "Can't benefit from bonuses to speed"),
            ),
        ),
        Condition(
            ConditionName.INCAPACITATED,
            "Can't take actions or reactions.",
            (
                _effect(EffectType.RESTRICTION, "actions", "Can't take actions"),
                _effect(EffectType.RESTRICTION, "reactions", "Can't take reactions"),
            ),
        ),
        Condition(
            ConditionName.INVISIBLE,
            "Impossible to see without magic or a special sense.",
            (
                _effect(EffectType.ADVANTAGE, ATTACK_ROLLS, "Attack rolls have advantage"),
                _effect(
                    EffectType.DISADVANTAGE,
                    ATTACKS_AGAINST,
                    "Attack rolls against the creature have disadvantage",
                ),
                _effect(EffectType.AUTOMATIC, "stealth", "Considered heavily obscured for hiding"),
            ),
        ),
        Condition(
            ConditionName.PARALYZED,
            "Incapacitated and can't move or speak.",
            (
                _effect(EffectType.RESTRICTION, "actions", "Can't take actions or reactions"),
                _effect(EffectType.RESTRICTION, "movement", "Can't move or speak"),
                _AUTO_FAIL_STR_DEX,
                _ATTACKED_WITH_ADVANTAGE,
                _AUTO_CRIT_IN_MELEE,
            ),
        ),
        Condition(
            ConditionName.PETRIFIED,
            "Transformed into a solid inanimate substance.",
            (
                _effect(
                    EffectType.RESTRICTION,
                    "all",
                    "Incapacitated, can't move or speak, unaware of surroundings",
                ),
                _AUTO_FAIL_STR_DEX,
                _ATTACKED_WITH_ADVANTAGE,
                _effect(EffectType.IMMUNITY, "poison_disease", "Immune to poison and disease"),
                _effect(EffectType.PENALTY, "weight", "Weight increases by a factor of ten"),
            ),
        ),
        Condition(
            ConditionName.POISONED,
            "Disadvantage on attack rolls and ability checks.",
            (
                _effect(EffectType.DISADVANTAGE, ATTACK_ROLLS, "Disadvantage on attack rolls"),
                _effect(
                    EffectType.DISADVANTAGE,
                    "ability_checks",
                    "Disadvantage on ability checks",
                ),
            ),
        ),
        Condition(
            ConditionName.PRONE,
            "Can only crawl unless it stands up.",
            (
                _effect(EffectType.DISADVANTAGE, ATTACK_ROLLS, "Disadvantage on attack rolls"),
                _effect(
                    EffectType.ADVANTAGE,
                    ATTACKS_AGAINST_MELEE,
                    "Melee attacks against the creature have advantage",
                ),
                _effect(
                    EffectType.DISADVANTAGE,
                    ATTACKS_AGAINST_RANGED,
                    "Ranged attacks against the creature have disadvantage",
                ),
                _effect(
                    EffectType.RESTRICTION,
                    "movement",
                    "Can only crawl or stand up (costs half movement)",
                ),
            ),
        ),
        Condition(
            ConditionName.RESTRAINED,
            "Speed becomes 0 and can't benefit from any bonus to speed.",
            (
                _SPEED_ZERO,
                _effect(EffectType.DISADVANTAGE, ATTACK_ROLLS, "Disadvantage on attack rolls"),
                _effect(
                    EffectType.DISADVANTAGE,
                    "dex_saves",
                    "Disadvantage on Dexterity saving throws",
                ),
                _ATTACKED_WITH_ADVANTAGE,
            ),
        ),
        Condition(
            ConditionName.STUNNED,
            "Incapacitated, can't move, and can speak only falteringly.",
            (
                _effect(EffectType.RESTRICTION, "actions", "Can't take actions or reactions"),
                _effect(EffectType.RESTRICTION, "movement", "Can't move"),
                _effect(EffectType.RESTRICTION, "speech", "Can speak only falteringly"),
                _AUTO_FAIL_STR_DEX,
                _ATTACKED_WITH_ADVANTAGE,
            ),
        ),
        Condition(
            ConditionName.UNCONSCIOUS,
            "Incapacitated, can't move or speak, and unaware of its surroundings.",
            (
                _effect(
                    EffectType.RESTRICTION,
                    "all",
                    "Incapacitated, can't move or speak, unaware of surroundings",
                ),
                _effect(
                    EffectType.AUTOMATIC,
                    "items",
                    "Drops whatever it's holding and falls prone",
                ),
                _AUTO_FAIL_STR_DEX,
                _ATTACKED_WITH_ADVANTAGE,
                _AUTO_CRIT_IN_MELEE,
            ),
        ),
    )
}

# Conditions that stop a creature acting
NO_ACTION_CONDITIONS = frozenset(
    {
        ConditionName.INCAPACITATED,
        ConditionName.PARALYZED,
        ConditionName.PETRIFIED,
        ConditionName.STUNNED,
        ConditionName.UNCONSCIOUS,
    }
)
# Conditions that stop a creature moving
NO_MOVEMENT_CONDITIONS = frozenset(
    {
        ConditionName.GRAPPLED,
        ConditionName.PARALYZED,
        ConditionName.PETRIFIED,
        ConditionName.RESTRAINED,
        ConditionName.STUNNED,
        ConditionName.UNCONSCIOUS,
    }
)
# Conditions that fail strength and dexterity saves outright
AUTO_FAIL_SAVE_CONDITIONS = frozenset(
    {
        ConditionName.PARALYZED,
        ConditionName.PETRIFIED,
        ConditionName.STUNNED,
        ConditionName.UNCONSCIOUS,
    }
)
AUTO_FAIL_SAVE_ABILITIES = frozenset({Ability.STRENGTH, Ability.DEXTERITY})


def condition_name(name: ConditionName | Condition | str) -> ConditionName:
    """Resolve a condition record or name (case-insensitive) to its ConditionName.

    Raises:
        UnknownCondition: If the name is not a 5e condition.
    """
    if isinstance(name, Condition):
        return name.name
    if isinstance(name, ConditionName):
        return name
    try:
        return ConditionName(name.strip().lower())
    except ValueError:
        raise UnknownCondition(name) from None


def _names(conditions: Iterable[Condition | ConditionName | str]) -> set[ConditionName]:
    return {condition_name(c) for c in conditions}


def apply_condition(
    name: ConditionName | str,
    duration: int = PERMANENT,
    source: str | None = None,
    save_dc: int | None = None,
    save_ability: Ability | str | None = None,
) -> Condition:
    """Build a condition from the catalog with its duration and origin.

    Args:
        name: Condition to apply.
        duration: Rounds it lasts; PERMANENT (-1) until removed.
        source: Who or what imposed it.
        save_dc: DC of the save that ends it.
        save_ability: Ability for that save.

    Raises:
        UnknownCondition: If the name is not a 5e condition.
        OutOfRange: If the duration is below PERMANENT.
    """
    if duration < PERMANENT:
        raise OutOfRange(f"Invalid condition duration: {duration}. Must be -1 or more.")

    return replace(
        CONDITIONS[condition_name(name)],
        duration=duration,
        source=source,
        save_dc=save_dc,
        save_ability=Ability(save_ability) if save_ability else None,
    )


def has_condition(conditions: Iterable[Condition], name: ConditionName | str) -> bool:
    target = condition_name(name)
    return any(c.name == target for c in conditions)


def add_condition(conditions: Iterable[Condition], condition: Condition) -> tuple[Condition, ...]:
    """Add a condition, replacing any existing instance of the same one."""
    kept = remove_condition(conditions, condition.name)
    logger.debug("Condition applied: %s (%d rounds)", condition.name.value, condition.duration)
    return kept + (condition,)


def remove_condition(
    conditions: Iterable[Condition], name: ConditionName | str
) -> tuple[Condition, ...]:
    target = condition_name(name)
    return tuple(c for c in conditions if c.name != target)


def decrement_condition_durations(conditions: Iterable[Condition]) -> tuple[Condition, ...]:
    """Tick every timed condition down one round at the end of a turn.

    Conditions reaching 0 rounds expire, as do INSTANT conditions. Permanent
    conditions are untouched.
    """
    remaining = []
    for condition in conditions:
        if condition.duration > 0:
            condition = replace(condition, duration=condition.duration - 1)
        if condition.duration == 0:
            logger.debug("Condition expired: %s", condition.name.value)
            continue
        remaining.append(condition)
    return tuple(remaining)


def can_take_actions(conditions: Iterable[Condition | ConditionName | str]) -> bool:
    return not _names(conditions) & NO_ACTION_CONDITIONS


def can_move(conditions: Iterable[Condition | ConditionName | str]) -> bool:
    return not _names(conditions) & NO_MOVEMENT_CONDITIONS


def effective_speed(
    base_speed: int,
    conditions: Iterable[Condition | ConditionName | str],
    exhaustion_level: int = 0,
) -> int:
    """Movement speed after conditions and exhaustion.

    Any movement-stopping condition, or exhaustion level 5 and above, gives
    0. Exhaustion level 2 and above halves speed (rounded down).

    Raises:
        OutOfRange: If the exhaustion level is not between 0 and 6.

    Examples:
        >>> effective_speed(30, [], exhaustion_level=2)
        15
        >>> effective_speed(30, ["grappled"])
        0
    """
    if not 0 <= exhaustion_level <= MAX_EXHAUSTION:
        raise OutOfRange(
            f"Invalid exhaustion level: {exhaustion_level}. Must be between 0 and {MAX_EXHAUSTION}."
        )
    if not can_move(conditions) or exhaustion_level >= 5:
        return 0
    if exhaustion_level >= 2:
        return base_speed // 2
    return base_speed


def has_auto_fail_saves(
    conditions: Iterable[Condition | ConditionName | str],
    save_ability: Ability | str,
) -> bool:
    """Whether a save with this ability fails without rolling."""
    if not _names(conditions) & AUTO_FAIL_SAVE_CONDITIONS:
        return False
    return Ability(save_ability) in AUTO_FAIL_SAVE_ABILITIES


def has_effect(
    conditions: Iterable[Condition | ConditionName | str],
    effect_type: EffectType,
    targets: Iterable[str],
) -> bool:
    """Whether any of the conditions carries an effect of this type on a target."""
    wanted = set(targets)
    return any(
        effect.type == effect_type and effect.target in wanted
        for name in _names(conditions)
        for effect in CONDITIONS[name].effects
    )


def active_condition_effects(conditions: Iterable[Condition]) -> list[str]:
    """Display lines: each condition's summary followed by its effects."""
    lines: list[str] = []
    for condition in conditions:
        lines.append(f"{condition.name.value.upper()}: {condition.description}")
        lines.extend(f"  - {effect.description}" for effect in condition.effects)
    return lines
