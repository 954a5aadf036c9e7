"""Spellcasting progression by class.

Defines how each class casts spells: its caster archetype, whether it
prepares or knows spells, its spellcasting ability and the cantrip and
spells-known tables.
"""

from dataclasses import dataclass, field
from enum import Enum

from rules_engine.abilities import Ability


class CasterType(str, Enum):
    """Spell slot progression archetype."""

    FULL = "full"
    HALF = "half"
    THIRD = "third"
    PACT = "pact"
    NONE = "none"


class SpellKnowledge(str, Enum):
    """How a class gains access to spells."""

    PREPARED = "prepared"
    KNOWN = "known"
    NONE = "none"


# Standard full-caster slot table: character level -> {spell level: slots}
FULL_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1: {1: 2},
    2: {1: 3},
    3: {1: 4, 2: 2},
    4: {1: 4, 2: 3},
    5: {1: 4, 2: 3, 3: 2},
    6: {1: 4, 2: 3, 3: 3},
    7: {1: 4, 2: 3, 3: 3, 4: 1},
    8: {1: 4, 2: 3, 3: 3, 4: 2},
    9: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    10: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    11: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    12: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    13: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    16: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1, 9: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 1, 7: 1, 8: 1, 9: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 1, 8: 1, 9: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1},
}

# Highest spell level a pact slot can reach
MAX_PACT_SLOT_LEVEL = 5


@dataclass(frozen=True)
class ClassCasterConfig:
    """How one class casts spells.

    `cantrips_known` and `spells_known` map the level at which a count
    takes effect to that count; the highest threshold reached applies.
    """

    caster_type: CasterType
    spell_knowledge: SpellKnowledge
    spellcasting_ability: Ability | None
    starts_at_level: int
    cantrips_known: dict[int, int] = field(default_factory=dict)
    spells_known: dict[int, int] = field(default_factory=dict)
    ritual_casting: bool = False


_NON_CASTER = ClassCasterConfig(
    caster_type=CasterType.NONE,
    spell_knowledge=SpellKnowledge.NONE,
    spellcasting_ability=None,
    starts_at_level=21,
)

CLASS_CASTER_CONFIGS: dict[str, ClassCasterConfig] = {
    "wizard": ClassCasterConfig(
        caster_type=CasterType.FULL,
        spell_knowledge=SpellKnowledge.PREPARED,
        spellcasting_ability=Ability.INTELLIGENCE,
        starts_at_level=1,
        cantrips_known={1: 3, 4: 4, 10: 5},
        ritual_casting=True,
    ),
    "cleric": ClassCasterConfig(
        caster_type=CasterType.FULL,
        spell_knowledge=SpellKnowledge.PREPARED,
        spellcasting_ability=Ability.WISDOM,
        starts_at_level=1,
        cantrips_known={1: 3, 4: 4, 10: 5},
        ritual_casting=True,
    ),
    "druid": ClassCasterConfig(
        caster_type=CasterType.FULL,
        spell_knowledge=SpellKnowledge.PREPARED,
        spellcasting_ability=Ability.WISDOM,
        starts_at_level=1,
        cantrips_known={1: 2, 4: 3, 10: 4},
        ritual_casting=True,
    ),
    "bard": ClassCasterConfig(
        caster_type=CasterType.FULL,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.CHARISMA,
        starts_at_level=1,
        cantrips_known={1: 2, 4: 3, 10: 4},
        spells_known={1: 4, 2: 5, 3: 6, 4: 7, 5: 8, 6: 9, 7: 10, 8: 11, 9: 12, 10: 14},
        ritual_casting=True,
    ),
    "sorcerer": ClassCasterConfig(
        caster_type=CasterType.FULL,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.CHARISMA,
        starts_at_level=1,
        cantrips_known={1: 4, 4: 5, 10: 6},
        spells_known={1: 2, 2: 3, 3: 4, 4: 5, 5: 6, 6: 7, 7: 8, 8: 9, 9: 10, 10: 11},
    ),
    "warlock": ClassCasterConfig(
        caster_type=CasterType.PACT,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.CHARISMA,
        starts_at_level=1,
        cantrips_known={1: 2, 4: 3, 10: 4},
        spells_known={1: 2, 2: 3, 3: 4, 4: 5, 5: 6, 6: 7, 7: 8, 8: 9, 9: 10},
    ),
    "paladin": ClassCasterConfig(
        caster_type=CasterType.HALF,
        spell_knowledge=SpellKnowledge.PREPARED,
        spellcasting_ability=Ability.CHARISMA,
        starts_at_level=2,
    ),
    "ranger": ClassCasterConfig(
        caster_type=CasterType.HALF,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.WISDOM,
        starts_at_level=2,
        spells_known={2: 2, 3: 3, 5: 4, 7: 5, 9: 6, 11: 7, 13: 8, 15: 9, 17: 10, 19: 11},
    ),
    "eldritch_knight": ClassCasterConfig(
        caster_type=CasterType.THIRD,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.INTELLIGENCE,
        starts_at_level=3,
        cantrips_known={3: 2, 10: 3},
        spells_known={3: 3, 4: 4, 7: 5, 8: 6, 10: 7, 11: 8, 13: 9, 14: 10, 16: 11, 19: 12, 20: 13},
    ),
    "arcane_trickster": ClassCasterConfig(
        caster_type=CasterType.THIRD,
        spell_knowledge=SpellKnowledge.KNOWN,
        spellcasting_ability=Ability.INTELLIGENCE,
        starts_at_level=3,
        cantrips_known={3: 3, 10: 4},
        spells_known={3: 3, 4: 4, 7: 5, 8: 6, 10: 7, 11: 8, 13: 9, 14: 10, 16: 11, 19: 12, 20: 13},
    ),
    "barbarian": _NON_CASTER,
    "fighter": _NON_CASTER,
    "monk": _NON_CASTER,
    "rogue": _NON_CASTER,
}


def normalize_class_name(class_name: str) -> str:
    """Lowercase, underscore-separated class key ("Eldritch Knight" -> "eldritch_knight")."""
    return class_name.strip().lower().replace(" ", "_").replace("-", "_")


def caster_config(class_name: str) -> ClassCasterConfig:
    """Caster configuration for a class; unknown classes are non-casters."""
    return CLASS_CASTER_CONFIGS.get(normalize_class_name(class_name), _NON_CASTER)


def caster_type_for_class(class_name: str) -> CasterType:
    """Caster archetype for a class."""
    return caster_config(class_name).caster_type


def _threshold_value(table: dict[int, int], level: int) -> int:
    value = 0
    for threshold in sorted(table):
        if level >= threshold:
            value = table[threshold]
    return value


def can_cast_spells(class_name: str, level: int) -> bool:
    """Whether the class has spellcasting at this level."""
    config = caster_config(class_name)
    return config.caster_type != CasterType.NONE and level >= config.starts_at_level


def cantrips_known(class_name: str, level: int) -> int:
    """Number of cantrips known at a level."""
    return _threshold_value(caster_config(class_name).cantrips_known, level)


def spells_known(class_name: str, level: int) -> int:
    """Spells known for "known" casters; 0 for prepared casters and non-casters."""
    config = caster_config(class_name)
    if not can_cast_spells(class_name, level):
        return 0
    if config.spell_knowledge != SpellKnowledge.KNOWN:
        return 0
    return _threshold_value(config.spells_known, level)


def max_prepared_spells(ability_modifier: int, level: int) -> int:
    """Prepared casters prepare ability modifier + level spells (minimum 1)."""
    return max(1, ability_modifier + level)


def uses_known_spells(class_name: str) -> bool:
    return caster_config(class_name).spell_knowledge == SpellKnowledge.KNOWN


def uses_prepared_spells(class_name: str) -> bool:
    return caster_config(class_name).spell_knowledge == SpellKnowledge.PREPARED
