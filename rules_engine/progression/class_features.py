"""Class features by level, ASI and subclass levels, and hit dice.

Class names are matched case-insensitively. Classes missing from a table
fall back to the common default (ASI at 4/8/12/16/19, subclass at 3, d8).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rules_engine.spells.caster_types import normalize_class_name


class FeatureType(str, Enum):
    FEATURE = "feature"
    ASI = "asi"
    SUBCLASS_CHOICE = "subclass_choice"
    SUBCLASS_FEATURE = "subclass_feature"


@dataclass(frozen=True)
class ClassFeature:
    """A feature gained on reaching a class level."""

    name: str
    level: int
    description: str
    type: FeatureType = FeatureType.FEATURE

    @property
    def is_asi(self) -> bool:
        return self.type == FeatureType.ASI

    @property
    def subclass_dependent(self) -> bool:
        return self.type == FeatureType.SUBCLASS_FEATURE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "level": self.level,
            "description": self.description,
            "type": self.type.value,
        }


DEFAULT_ASI_LEVELS = (4, 8, 12, 16, 19)
DEFAULT_SUBCLASS_LEVEL = 3
DEFAULT_HIT_DIE = 8

ASI_LEVELS: dict[str, tuple[int, ...]] = {
    "fighter": (4, 6, 8, 12, 14, 16, 19),
    "rogue": (4, 8, 10, 12, 16, 19),
}

SUBCLASS_LEVELS: dict[str, int] = {
    "barbarian": 3,
    "bard": 3,
    "cleric": 1,
    "druid": 2,
    "fighter": 3,
    "monk": 3,
    "paladin": 3,
    "ranger": 3,
    "rogue": 3,
    "sorcerer": 1,
    "warlock": 1,
    "wizard": 2,
}

HIT_DICE: dict[str, int] = {
    "barbarian": 12,
    "fighter": 10,
    "paladin": 10,
    "ranger": 10,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "monk": 8,
    "rogue": 8,
    "warlock": 8,
    "sorcerer": 6,
    "wizard": 6,
}


def _asi(level: int) -> ClassFeature:
    return ClassFeature("Ability Score Improvement", level, "Increase ability scores.", FeatureType.ASI)


def _subclass_feature(name: str, level: int) -> ClassFeature:
    return ClassFeature(name, level, f"{name.replace(' Feature', '')} feature.", FeatureType.SUBCLASS_FEATURE)


FIGHTER_FEATURES = (
    ClassFeature("Fighting Style", 1, "Choose a fighting style."),
    ClassFeature("Second Wind", 1, "Regain 1d10 + fighter level HP as a bonus action."),
    ClassFeature("Action Surge", 2, "Take one additional action per turn."),
    ClassFeature("Martial Archetype", 3, "Choose a martial archetype.", FeatureType.SUBCLASS_CHOICE),
    _asi(4),
    ClassFeature("Extra Attack", 5, "Attack twice per Attack action."),
    _asi(6),
    _subclass_feature("Martial Archetype Feature", 7),
    _asi(8),
    ClassFeature("Indomitable", 9, "Reroll a failed saving throw."),
    _subclass_feature("Martial Archetype Feature", 10),
    ClassFeature("Extra Attack (2)", 11, "Attack three times per Attack action."),
    _asi(12),
    ClassFeature("Indomitable (2)", 13, "Use Indomitable twice."),
    _asi(14),
    _subclass_feature("Martial Archetype Feature", 15),
    _asi(16),
    ClassFeature("Action Surge (2)", 17, "Use Action Surge twice."),
    _subclass_feature("Martial Archetype Feature", 18),
    _asi(19),
    ClassFeature("Extra Attack (3)", 20, "Attack four times per Attack action."),
)

WIZARD_FEATURES = (
    ClassFeature("Spellcasting", 1, "Cast wizard spells."),
    ClassFeature("Arcane Recovery", 1, "Recover spell slots on a short rest."),
    ClassFeature("Arcane Tradition", 2, "Choose an arcane tradition.", FeatureType.SUBCLASS_CHOICE),
    _asi(4),
    _subclass_feature("Arcane Tradition Feature", 6),
    _asi(8),
    _subclass_feature("Arcane Tradition Feature", 10),
    _asi(12),
    _subclass_feature("Arcane Tradition Feature", 14),
    _asi(16),
    ClassFeature("Spell Mastery", 18, "Cast 1st and 2nd level spells at will."),
    _asi(19),
    ClassFeature("Signature Spells", 20, "Always have two 3rd level spells prepared."),
)

ROGUE_FEATURES = (
    ClassFeature("Expertise", 1, "Double proficiency for two skills."),
    ClassFeature("Sneak Attack", 1, "Deal extra damage (1d6)."),
    ClassFeature("Thieves' Cant", 1, "Secret rogue language."),
    ClassFeature("Cunning Action", 2, "Dash, Disengage, or Hide as a bonus action."),
    ClassFeature("Roguish Archetype", 3, "Choose an archetype.", FeatureType.SUBCLASS_CHOICE),
    _asi(4),
    ClassFeature("Uncanny Dodge", 5, "Halve damage from an attack you can see."),
    ClassFeature("Expertise (2)", 6, "Double proficiency for two more skills."),
    ClassFeature("Evasion", 7, "No damage on a successful DEX save."),
    _asi(8),
    _subclass_feature("Roguish Archetype Feature", 9),
    _asi(10),
    ClassFeature("Reliable Talent", 11, "Minimum 10 on proficient ability checks."),
    _asi(12),
    _subclass_feature("Roguish Archetype Feature", 13),
    ClassFeature("Blindsense", 14, "Detect hidden creatures within 10 feet."),
    ClassFeature("Slippery Mind", 15, "Wisdom saving throw proficiency."),
    _asi(16),
    _subclass_feature("Roguish Archetype Feature", 17),
    ClassFeature("Elusive", 18, "No attack has advantage against you."),
    _asi(19),
    ClassFeature("Stroke of Luck", 20, "Turn a miss into a hit or treat a check as 20."),
)

CLASS_FEATURES: dict[str, tuple[ClassFeature, ...]] = {
    "fighter": FIGHTER_FEATURES,
    "wizard": WIZARD_FEATURES,
    "rogue": ROGUE_FEATURES,
}


def asi_levels(class_name: str) -> tuple[int, ...]:
    """Levels at which a class gains an ability score improvement."""
    return ASI_LEVELS.get(normalize_class_name(class_name), DEFAULT_ASI_LEVELS)


def subclass_level(class_name: str) -> int:
    """Level at which a class chooses its subclass."""
    return SUBCLASS_LEVELS.get(normalize_class_name(class_name), DEFAULT_SUBCLASS_LEVEL)


def requires_asi(class_name: str, level: int) -> bool:
    """Whether reaching `level` grants an ability score improvement.

    Examples:
        >>> requires_asi("Fighter", 6)
        True
        >>> requires_asi("Wizard", 6)
        False
    """
    return level in asi_levels(class_name)


def requires_subclass(class_name: str, level: int) -> bool:
    """Whether `level` is the class's subclass choice level."""
    return level == subclass_level(class_name)


def hit_die_for_class(class_name: str) -> int:
    """Hit die size for a class (d8 for unknown classes)."""
    return HIT_DICE.get(normalize_class_name(class_name), DEFAULT_HIT_DIE)


def features_at_level(class_name: str, level: int) -> list[ClassFeature]:
    """Features gained exactly at `level`."""
    return [f for f in CLASS_FEATURES.get(normalize_class_name(class_name), ()) if f.level == level]


def features_up_to_level(class_name: str, level: int) -> list[ClassFeature]:
    """Every feature gained at or below `level`."""
    return [f for f in CLASS_FEATURES.get(normalize_class_name(class_name), ()) if f.level <= level]
