"""Spellcasting: caster tables, spell slots, casting and concentration."""

# Caster configuration
from rules_engine.spells.caster_types import (
    CLASS_CASTER_CONFIGS,
    CasterType,
    ClassCasterConfig,
    SpellKnowledge,
    can_cast_spells,
    cantrips_known,
    caster_config,
    caster_type_for_class,
    max_prepared_spells,
    spells_known,
    uses_known_spells,
    uses_prepared_spells,
)

# Slots
from rules_engine.spells.slots import (
    SpellSlot,
    SpellSlotTable,
    has_slot,
    highest_slot_level,
    highest_spell_level,
    restore_all,
    restore_short_rest,
    slots_for_caster_type,
    slots_for_class,
    use_slot,
)

# Casting
from rules_engine.spells.casting import (
    CastCheck,
    CastOutcome,
    ConcentrationCheck,
    ConcentrationState,
    Spell,
    SpellAttackResult,
    SpellSaveResult,
    SpellSchool,
    break_concentration,
    can_cast,
    cast_spell,
    concentration_check,
    decrement_concentration,
    make_spell_attack,
    make_spell_save,
    start_concentration,
    upcast_damage,
)

__all__ = [
    # Caster configuration
    "CLASS_CASTER_CONFIGS",
    "CasterType",
    "ClassCasterConfig",
    "SpellKnowledge",
    "can_cast_spells",
    "cantrips_known",
    "caster_config",
    "caster_type_for_class",
    "max_prepared_spells",
    "spells_known",
    "uses_known_spells",
    "uses_prepared_spells",
    # Slots
    "SpellSlot",
    "SpellSlotTable",
    "has_slot",
    "highest_slot_level",
    "highest_spell_level",
    "restore_all",
    "restore_short_rest",
    "slots_for_caster_type",
    "slots_for_class",
    "use_slot",
    # Casting
    "CastCheck",
    "CastOutcome",
    "ConcentrationCheck",
    "ConcentrationState",
    "Spell",
    "SpellAttackResult",
    "SpellSaveResult",
    "SpellSchool",
    "break_concentration",
    "can_cast",
    "cast_spell",
    "concentration_check",
    "decrement_concentration",
    "make_spell_attack",
    "make_spell_save",
    "start_concentration",
    "upcast_damage",
]
