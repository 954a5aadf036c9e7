"""Ability scores, modifiers and proficiency.

Derived numbers that every other component consumes: ability modifiers,
the level-scaled proficiency bonus, saving throw and skill bonuses, and the
spellcasting DC/attack formulas.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from rules_engine.errors import OutOfRange


class Ability(str, Enum):
    """The six ability scores."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


# Skill to ability mapping (5e standard)
SKILL_ABILITIES: dict[str, Ability] = {
    "acrobatics": Ability.DEXTERITY,
    "animal_handling": Ability.WISDOM,
    "arcana": Ability.INTELLIGENCE,
    "athletics": Ability.STRENGTH,
    "deception": Ability.CHARISMA,
    "history": Ability.INTELLIGENCE,
    "insight": Ability.WISDOM,
    "intimidation": Ability.CHARISMA,
    "investigation": Ability.INTELLIGENCE,
    "medicine": Ability.WISDOM,
    "nature": Ability.INTELLIGENCE,
    "perception": Ability.WISDOM,
    "performance": Ability.CHARISMA,
    "persuasion": Ability.CHARISMA,
    "religion": Ability.INTELLIGENCE,
    "sleight_of_hand": Ability.DEXTERITY,
    "stealth": Ability.DEXTERITY,
    "survival": Ability.WISDOM,
}

MIN_ABILITY_SCORE = 1
MAX_ABILITY_SCORE = 30
# Ability score increases cannot push a score past this
ASI_SCORE_CAP = 20


def ability_modifier(score: int) -> int:
    """Calculate the modifier for an ability score.

    Formula: (score - 10) / 2, rounded down.

    Examples:
        >>> ability_modifier(10)
        0
        >>> ability_modifier(17)
        3
        >>> ability_modifier(7)
        -2
    """
    return (score - 10) // 2


def proficiency_bonus(level: int) -> int:
    """Proficiency bonus for a character level (+2 at 1, +6 at 17-20).

    Raises:
        OutOfRange: If level is not between 1 and 20.
    """
    if level < 1 or level > 20:
        raise OutOfRange(f"Invalid character level: {level}. Must be between 1 and 20.")
    return (level - 1) // 4 + 2


@dataclass(frozen=True)
class AbilityScores:
    """A creature's six ability scores."""

    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    wisdom: int = 10
    charisma: int = 10

    def score(self, ability: Ability | str) -> int:
        """Raw score for an ability."""
        return getattr(self, Ability(ability).value)

    def modifier(self, ability: Ability | str) -> int:
        """Modifier for an ability."""
        return ability_modifier(self.score(ability))

    def modifiers(self) -> dict[str, int]:
        """Modifiers for all six abilities."""
        return {ability.value: self.modifier(ability) for ability in Ability}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {ability.value: self.score(ability) for ability in Ability}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AbilityScores":
        """Create from dictionary; missing abilities default to 10."""
        return cls(**{ability.value: int(data.get(ability.value, 10)) for ability in Ability})


def saving_throw_modifier(
    ability: Ability | str,
    scores: AbilityScores,
    proficiency: int,
    proficient: bool = False,
) -> int:
    """Ability modifier plus proficiency when proficient in the save."""
    return scores.modifier(ability) + (proficiency if proficient else 0)


def skill_modifier(
    skill: str,
    scores: AbilityScores,
    proficiency: int,
    proficient: bool = False,
    expertise: bool = False,
) -> int:
    """Calculate a skill modifier.

    Expertise doubles the proficiency bonus and implies proficiency.

    Raises:
        KeyError: If the skill is unknown.
    """
    ability = SKILL_ABILITIES[skill]
    if expertise:
        bonus = proficiency * 2
    elif proficient:
        bonus = proficiency
    else:
        bonus = 0
    return scores.modifier(ability) + bonus


def passive_perception(
    scores: AbilityScores,
    proficiency: int,
    proficient: bool = False,
    expertise: bool = False,
) -> int:
    """10 plus the perception skill modifier."""
    return 10 + skill_modifier("perception", scores, proficiency, proficient, expertise)


def initiative_modifier(scores: AbilityScores, bonuses: int = 0) -> int:
    """Dexterity modifier plus flat initiative bonuses."""
    return scores.modifier(Ability.DEXTERITY) + bonuses


def spell_save_dc(ability: Ability | str, scores: AbilityScores, proficiency: int) -> int:
    """Spell save DC: 8 + proficiency + spellcasting ability modifier."""
    return 8 + proficiency + scores.modifier(ability)


def spell_attack_bonus(ability: Ability | str, scores: AbilityScores, proficiency: int) -> int:
    """Spell attack bonus: proficiency + spellcasting ability modifier."""
    return proficiency + scores.modifier(ability)


def validate_ability_scores(scores: AbilityScores) -> bool:
    """Whether every score lies between 1 and 30."""
    return all(
        MIN_ABILITY_SCORE <= scores.score(ability) <= MAX_ABILITY_SCORE for ability in Ability
    )


def apply_ability_score_increase(
    scores: AbilityScores,
    increases: dict[str, int],
    max_score: int = ASI_SCORE_CAP,
) -> AbilityScores:
    """Apply an ability score improvement, capping each score at `max_score`.

    Args:
        scores: Current scores.
        increases: Points to add, keyed by ability name.
        max_score: Cap for any increased score.

    Returns:
        New AbilityScores with increases applied.
    """
    updates = {}
    for name, increase in increases.items():
        if not increase:
            continue
        ability = Ability(name)
        updates[ability.value] = min(scores.score(ability) + increase, max_score)
    return replace(scores, **updates)
