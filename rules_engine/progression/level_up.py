"""Level-up checks, choice validation and application.

Characters and choices come from the caller (a character sheet, an API
request), so they are pydantic models that validate on construction.
Applying a level-up returns a new ProgressionCharacter.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rules_engine.abilities import ASI_SCORE_CAP, Ability, ability_modifier
from rules_engine.errors import InsufficientExperience, InvalidState, MaxLevelReached, OutOfRange
from rules_engine.progression.class_features import (
    ClassFeature,
    features_at_level,
    hit_die_for_class,
    requires_asi,
    requires_subclass,
)
from rules_engine.progression.xp import MAX_LEVEL, XPProgress, can_level_up, xp_progress

logger = logging.getLogger(__name__)


# Ability score improvements always total this many points
ASI_POINTS = 2


class ProgressionCharacter(BaseModel):
    """The parts of a character sheet that level-up reads and writes."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=MAX_LEVEL)
    experience_points: int = Field(default=0, ge=0)
    character_class: str
    constitution: int = Field(default=10, ge=1, le=30)
    max_hp: int = Field(ge=1)
    subclass: str | None = None


class LevelUpChoices(BaseModel):
    """Player decisions for one level-up."""

    model_config = ConfigDict(frozen=True)

    hp_roll: int | None = None
    hp_roll_used: bool = False
    ability_score_increases: dict[str, int] = Field(default_factory=dict)
    feat: str | None = None
    subclass: str | None = None
    spells_learned: list[str] = Field(default_factory=list)
    expertise_skills: list[str] = Field(default_factory=list)
    fighting_style: str | None = None


@dataclass(frozen=True)
class HPOptions:
    """Fixed average and the die maximum for the HP choice."""

    average: int
    roll_max: int


@dataclass(frozen=True)
class LevelUpRequirements:
    """What the next level-up needs from the player."""

    can_level_up: bool
    current_level: int
    next_level: int
    reason: str | None = None
    xp_progress: XPProgress | None = None
    features_gained: list[ClassFeature] = field(default_factory=list)
    requires_asi: bool = False
    requires_subclass: bool = False
    requires_hp_choice: bool = False
    hp_options: HPOptions = field(default_factory=lambda: HPOptions(0, 0))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "can_level_up": self.can_level_up,
            "reason": self.reason,
            "current_level": self.current_level,
            "next_level": self.next_level,
            "xp_progress": self.xp_progress.to_dict() if self.xp_progress else None,
            "features_gained": [f.to_dict() for f in self.features_gained],
            "requires_asi": self.requires_asi,
            "requires_subclass": self.requires_subclass,
            "requires_hp_choice": self.requires_hp_choice,
            "hp_options": {
                "average": self.hp_options.average,
                "roll_max": self.hp_options.roll_max,
            },
        }


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def average_hp(hit_die: int) -> int:
    """Fixed HP per level instead of rolling: half the die plus one."""
    return hit_die // 2 + 1


def hp_increase(
    hit_die: int,
    constitution_modifier: int,
    is_first_level: bool = False,
    roll: int | None = None,
) -> int:
    """Hit points gained for one level.

    Level 1 always grants the full hit die. Later levels grant the supplied
    roll, or the average when no roll is given. Constitution modifier is
    added either way, and every level grants at least 1 HP.

    Args:
        hit_die: Class hit die size (6, 8, 10 or 12).
        constitution_modifier: Current constitution modifier.
        is_first_level: Whether this is the character's first level.
        roll: Hit die roll, if the player rolled.

    Returns:
        HP to add to maximum hit points.

    Raises:
        OutOfRange: If the roll lies outside 1..hit_die.

    Examples:
        >>> hp_increase(10, 2, is_first_level=True)
        12
        >>> hp_increase(8, 1)
        6
        >>> hp_increase(6, -3, roll=1)
        1
    """
    if roll is not None and not 1 <= roll <= hit_die:
        raise OutOfRange(f"Invalid HP roll: {roll}. Must be between 1 and {hit_die}.")

    if is_first_level:
        return max(1, hit_die + constitution_modifier)

    base = roll if roll is not None else average_hp(hit_die)
    return max(1, base + constitution_modifier)


def hp_options(character_class: str, constitution: int) -> HPOptions:
    hit_die = hit_die_for_class(character_class)
    average = average_hp(hit_die) + ability_modifier(constitution)
    return HPOptions(average=max(1, average), roll_max=hit_die)


def level_up_requirements(character: ProgressionCharacter) -> LevelUpRequirements:
    """Describe the next level-up: whether it is allowed and what it needs."""
    current = character.level

    if current >= MAX_LEVEL:
        return LevelUpRequirements(
            can_level_up=False,
            reason=f"Already at maximum level ({MAX_LEVEL})",
            current_level=current,
            next_level=MAX_LEVEL,
        )

    progress = xp_progress(current, character.experience_points)
    if not can_level_up(current, character.experience_points):
        return LevelUpRequirements(
            can_level_up=False,
            reason="Not enough experience points",
            current_level=current,
            next_level=current + 1,
            xp_progress=progress,
        )

    next_level = current + 1
    return LevelUpRequirements(
        can_level_up=True,
        current_level=current,
        next_level=next_level,
        xp_progress=progress,
        features_gained=features_at_level(character.character_class, next_level),
        requires_asi=requires_asi(character.character_class, next_level),
        requires_subclass=(
            requires_subclass(character.character_class, next_level) and not character.subclass
        ),
        requires_hp_choice=True,
        hp_options=hp_options(character.character_class, character.constitution),
    )


def _asi_errors(increases: dict[str, int]) -> list[str]:
    errors: list[str] = []
    abilities = {ability.value for ability in Ability}

    unknown = sorted(name for name in increases if name not in abilities)
    if unknown:
        errors.append(f"Unknown abilities in score increases: {', '.join(unknown)}")
    if any(amount <= 0 for amount in increases.values()):
        errors.append("Ability score increases must be positive")
    elif any(amount > ASI_POINTS for amount in increases.values()):
        errors.append(f"A single ability can increase by at most {ASI_POINTS}")
    if sum(increases.values()) != ASI_POINTS:
        errors.append(f"Ability score increases must total exactly {ASI_POINTS} points")
    return errors


def validate_level_up_choices(
    character: ProgressionCharacter,
    choices: LevelUpChoices,
) -> ValidationResult:
    """Check level-up choices against what the next level requires.

    Rules:
        - At an ASI level, exactly one of: a feat, or positive increases to
          known abilities totalling 2 (at most 2 on one ability).
        - At the subclass level, a subclass must be chosen unless one is set.
        - A supplied HP roll must lie within 1..hit die, and one is required
          when choosing to roll.
    """
    requirements = level_up_requirements(character)
    if not requirements.can_level_up:
        return ValidationResult(valid=False, errors=[requirements.reason or "Cannot level up"])

    errors: list[str] = []
    hit_die = hit_die_for_class(character.character_class)

    if choices.hp_roll_used and choices.hp_roll is None:
        errors.append("HP roll value is required when choosing to roll")
    if choices.hp_roll is not None and not 1 <= choices.hp_roll <= hit_die:
        errors.append(f"HP roll must be between 1 and {hit_die}")

    if requirements.requires_subclass and not choices.subclass:
        errors.append("Subclass choice is required at this level")

    if requirements.requires_asi:
        has_asi = any(choices.ability_score_increases.values())
        has_feat = bool(choices.feat)

        if not has_asi and not has_feat:
            errors.append("Must choose either ability score increases or a feat")
        if has_asi and has_feat:
            errors.append("Cannot choose both ability score increases and a feat")
        if has_asi:
            errors.extend(_asi_errors(choices.ability_score_increases))

    return ValidationResult(valid=not errors, errors=errors)


def apply_level_up(
    character: ProgressionCharacter,
    choices: LevelUpChoices,
) -> ProgressionCharacter:
    """Advance a character one level.

    Maximum HP grows by the rolled or average hit die plus constitution
    modifier. A chosen subclass is recorded when this level requires one,
    and a constitution increase is applied after the HP gain (capped at 20).

    Raises:
        MaxLevelReached: If the character is already level 20.
        InsufficientExperience: If the XP total has not reached the next level.
        InvalidState: If the choices fail validation.
    """
    if character.level >= MAX_LEVEL:
        raise MaxLevelReached(MAX_LEVEL)
    if not can_level_up(character.level, character.experience_points):
        raise InsufficientExperience(
            character.level, xp_progress(character.level, character.experience_points)
        )

    result = validate_level_up_choices(character, choices)
    if not result.valid:
        raise InvalidState(f"Invalid level-up choices: {'; '.join(result.errors)}")

    gained = hp_increase(
        hit_die_for_class(character.character_class),
        ability_modifier(character.constitution),
        is_first_level=False,
        roll=choices.hp_roll if choices.hp_roll_used else None,
    )

    updates: dict[str, Any] = {
        "level": character.level + 1,
        "max_hp": character.max_hp + gained,
    }
    if choices.subclass and requires_subclass(character.character_class, character.level + 1):
        updates["subclass"] = character.subclass or choices.subclass

    con_increase = choices.ability_score_increases.get("constitution", 0)
    if con_increase:
        updates["constitution"] = min(character.constitution + con_increase, ASI_SCORE_CAP)

    logger.debug(
        "%s levels up %d -> %d (+%d HP)",
        character.character_class,
        character.level,
        character.level + 1,
        gained,
    )
    return character.model_copy(update=updates)
