"""Tests for the conditions catalog and condition effects."""

import pytest

from rules_engine.abilities import Ability
from rules_engine.combat.attacks import AttackKind, advantage_from_conditions
from rules_engine.combat.conditions import (
    CONDITIONS,
    INSTANT,
    PERMANENT,
    Condition,
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
from rules_engine.dice.types import AdvantageType
from rules_engine.errors import OutOfRange, UnknownCondition


class TestCatalog:
    """Tests for the CONDITIONS catalog."""

    def test_every_condition_defined(self):
        assert set(CONDITIONS) == set(ConditionName)

    def test_catalog_entries_are_permanent(self):
        assert all(c.duration == PERMANENT for c in CONDITIONS.values())

    def test_poisoned_effects(self):
        types = {e.type for e in CONDITIONS[ConditionName.POISONED].effects}
        assert types == {EffectType.DISADVANTAGE}


class TestApplyCondition:
    """Tests for apply_condition."""

    def test_applies_catalog_effects(self):
        condition = apply_condition("stunned", duration=2, source="Monk")
        assert condition.name == ConditionName.STUNNED
        assert condition.effects == CONDITIONS[ConditionName.STUNNED].effects
        assert condition.duration == 2
        assert condition.source == "Monk"

    def test_save_details(self):
        condition = apply_condition("frightened", save_dc=13, save_ability="wisdom")
        assert condition.save_dc == 13
        assert condition.save_ability == Ability.WISDOM

    def test_name_is_case_insensitive(self):
        assert apply_condition(" Prone ").name == ConditionName.PRONE

    def test_unknown_condition(self):
        with pytest.raises(UnknownCondition):
            apply_condition("blessed")

    def test_duration_below_permanent(self):
        with pytest.raises(OutOfRange):
            apply_condition("prone", duration=-2)

    def test_round_trip(self):
        condition = apply_condition("restrained", 3, "Web", 12, Ability.STRENGTH)
        assert Condition.from_dict(condition.to_dict()) == condition


class TestConditionList:
    """Tests for adding, checking and removing conditions."""

    def test_has_condition(self):
        conditions = (apply_condition("prone"),)
        assert has_condition(conditions, "prone")
        assert not has_condition(conditions, ConditionName.BLINDED)

    def test_add_replaces_same_condition(self):
        conditions = add_condition((), apply_condition("poisoned", 5))
        conditions = add_condition(conditions, apply_condition("poisoned", 2))
        assert len(conditions) == 1
        assert conditions[0].duration == 2

    def test_remove(self):
        conditions = (apply_condition("prone"), apply_condition("blinded"))
        remaining = remove_condition(conditions, "prone")
        assert [c.name for c in remaining] == [ConditionName.BLINDED]
        assert len(conditions) == 2


class TestDecrementDurations:
    """Tests for decrement_condition_durations."""

    def test_ticks_down(self):
        result = decrement_condition_durations((apply_condition("poisoned", 3),))
        assert result[0].duration == 2

    def test_expires_at_zero(self):
        assert decrement_condition_durations((apply_condition("poisoned", 1),)) == ()

    def test_permanent_kept(self):
        result = decrement_condition_durations((apply_condition("charmed"),))
        assert result[0].duration == PERMANENT

    def test_instant_removed(self):
        assert decrement_condition_durations((apply_condition("prone", INSTANT),)) == ()


class TestRestrictions:
    """Tests for actions, movement, speed and automatic save failures."""

    @pytest.mark.parametrize(
        "name", ["incapacitated", "paralyzed", "petrified", "stunned", "unconscious"]
    )
    def test_cannot_act(self, name):
        assert not can_take_actions([apply_condition(name)])

    def test_grappled_can_still_act(self):
        assert can_take_actions(["grappled"])
        assert not can_move(["grappled"])

    def test_prone_can_move(self):
        assert can_move(["prone"])

    def test_speed_zero_when_restrained(self):
        assert effective_speed(30, ["restrained"]) == 0

    def test_exhaustion_halves_speed(self):
        assert effective_speed(35, [], exhaustion_level=2) == 17

    def test_exhaustion_five_stops_movement(self):
        assert effective_speed(30, [], exhaustion_level=5) == 0

    def test_unaffected_speed(self):
        assert effective_speed(30, ["poisoned"], exhaustion_level=1) == 30

    def test_exhaustion_out_of_range(self):
        with pytest.raises(OutOfRange):
            effective_speed(30, [], exhaustion_level=7)

    def test_auto_fail_strength_and_dexterity(self):
        assert has_auto_fail_saves(["paralyzed"], "strength")
        assert has_auto_fail_saves(["unconscious"], Ability.DEXTERITY)
        assert not has_auto_fail_saves(["stunned"], Ability.WISDOM)
        assert not has_auto_fail_saves(["prone"], "dexterity")

    def test_active_effects_lines(self):
        lines = active_condition_effects((apply_condition("poisoned"),))
        assert lines[0].startswith("POISONED: ")
        assert lines[1] == "  - Disadvantage on attack rolls"
        assert len(lines) == 3


class TestAdvantageFromCatalog:
    """Tests for advantage_from_conditions reading the catalog."""

    def test_prone_target_in_melee(self):
        assert advantage_from_conditions([], ["prone"]) == AdvantageType.ADVANTAGE

    def test_prone_target_at_range(self):
        result = advantage_from_conditions([], ["prone"], AttackKind.RANGED)
        assert result == AdvantageType.DISADVANTAGE

    def test_invisible_attacker(self):
        assert advantage_from_conditions(["invisible"], []) == AdvantageType.ADVANTAGE

    def test_invisible_target(self):
        assert advantage_from_conditions([], ["invisible"]) == AdvantageType.DISADVANTAGE

    def test_blinded_attacker_against_blinded_target_cancels(self):
        assert advantage_from_conditions(["blinded"], ["blinded"]) == AdvantageType.NORMAL

    def test_accepts_condition_records(self):
        result = advantage_from_conditions([apply_condition("poisoned", 2)], [])
        assert result == AdvantageType.DISADVANTAGE

    def test_conditions_without_attack_effects(self):
        assert advantage_from_conditions(["deafened"], ["charmed"]) == AdvantageType.NORMAL

    def test_unknown_condition(self):
        with pytest.raises(UnknownCondition):
            advantage_from_conditions(["hasted"], [])
