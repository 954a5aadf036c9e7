"""Combat rules: attacks, conditions, initiative and death saves."""

from rules_engine.combat.attacks import (
    AttackKind,
    AttackResult,
    AttackRoll,
    DamageRoll,
    DamageType,
    advantage_from_conditions,
    make_attack_roll,
    perform_attack,
    roll_damage,
    weapon_attack_bonus,
)
from rules_engine.combat.conditions import (
    CONDITIONS,
    Condition,
    ConditionEffect,
    ConditionName,
    EffectType,
    active_condition_effects,
    add_condition,
    apply_condition,
    can_move,
    can_take_actions,
    decrement_condition_durations,
    effective_speed,
    has_auto_fail_saves,
    has_condition,
    remove_condition,
)
from rules_engine.combat.death_saves import (
    DeathSaveOutcome,
    DeathSaveState,
    DeathSaveStatus,
    HealingOutcome,
    death_save_status,
    heal_at_zero_hp,
    make_death_save,
    should_make_death_saves,
    stabilize,
    start_death_saves,
    take_damage_at_zero_hp,
)
from rules_engine.combat.initiative import (
    CombatOrder,
    InitiativeEntry,
    add_participant,
    advance_turn,
    current_participant,
    determine_order,
    is_combat_over,
    is_participant_turn,
    remove_participant,
    roll_initiative,
)

__all__ = [
    # Attacks
    "AttackKind",
    "AttackResult",
    "AttackRoll",
    "DamageRoll",
    "DamageType",
    "advantage_from_conditions",
    "make_attack_roll",
    "perform_attack",
    "roll_damage",
    "weapon_attack_bonus",
    # Conditions
    "CONDITIONS",
    "Condition",
    "ConditionEffect",
    "ConditionName",
    "EffectType",
    "active_condition_effects",
    "add_condition",
    "apply_condition",
    "can_move",
    "can_take_actions",
    "decrement_condition_durations",
    "effective_speed",
    "has_auto_fail_saves",
    "has_condition",
    "remove_condition",
    # Death saves
    "DeathSaveOutcome",
    "DeathSaveState",
    "DeathSaveStatus",
    "HealingOutcome",
    "death_save_status",
    "heal_at_zero_hp",
    "make_death_save",
    "should_make_death_saves",
    "stabilize",
    "start_death_saves",
    "take_damage_at_zero_hp",
    # Initiative
    "CombatOrder",
    "InitiativeEntry",
    "add_participant",
    "advance_turn",
    "current_participant",
    "determine_order",
    "is_combat_over",
    "is_participant_turn",
    "remove_participant",
    "roll_initiative",
]
