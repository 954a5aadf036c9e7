"""Tests for spell slot tables."""

import pytest

from rules_engine.errors import NoSlotAvailable, OutOfRange
from rules_engine.spells.caster_types import CasterType
from rules_engine.spells.slots import (
    SpellSlot,
    SpellSlotTable,
    has_slot,
    highest_slot_level,
    highest_spell_level,
    pact_slot_count,
    pact_slot_level,
    restore_all,
    restore_short_rest,
    slots_for_caster_type,
    slots_for_class,
    use_slot,
)


def _counts(table: SpellSlotTable) -> dict[int, int | None]:
    return {slot.level: slot.maximum for slot in table.slots}


class TestSlotsForClass:
    """Tests for slot tables by class and level."""

    def test_wizard_level_1(self):
        assert _counts(slots_for_class("Wizard", 1)) == {0: None, 1: 2}

    def test_wizard_level_5(self):
        assert _counts(slots_for_class("wizard", 5)) == {0: None, 1: 4, 2: 3, 3: 2}

    def test_wizard_level_20(self):
        counts = _counts(slots_for_class("Wizard", 20))
        assert counts[9] == 1
        assert counts[7] == 2

    def test_paladin_uses_half_level(self):
        """Paladin 5 casts like a level 3 full caster."""
        assert _counts(slots_for_class("Paladin", 5)) == _counts(slots_for_class("Wizard", 3))

    def test_eldritch_knight_uses_third_level(self):
        """Level 7 third caster casts like a level 3 full caster."""
        assert _counts(slots_for_class("Eldritch Knight", 7)) == _counts(slots_for_class("Wizard", 3))

    def test_warlock_pact_slots(self):
        assert _counts(slots_for_class("Warlock", 1)) == {0: None, 1: 1}
        assert _counts(slots_for_class("Warlock", 5)) == {0: None, 3: 2}
        assert _counts(slots_for_class("Warlock", 11)) == {0: None, 5: 3}
        assert _counts(slots_for_class("Warlock", 17)) == {0: None, 5: 4}

    def test_non_caster_only_cantrip_row(self):
        table = slots_for_class("Fighter", 10)
        assert table.levels == [0]
        assert table.get(0).unlimited

    def test_unknown_class_is_non_caster(self):
        assert slots_for_class("Commoner", 3).levels == [0]

    @pytest.mark.parametrize("level", [0, 21])
    def test_level_out_of_range(self, level):
        with pytest.raises(OutOfRange):
            slots_for_caster_type(CasterType.FULL, level)


class TestPactSlots:
    @pytest.mark.parametrize("level,expected", [(1, 1), (2, 1), (3, 2), (9, 5), (20, 5)])
    def test_slot_level(self, level, expected):
        assert pact_slot_level(level) == expected

    @pytest.mark.parametrize("level,expected", [(1, 1), (2, 2), (10, 2), (11, 3), (16, 3), (17, 4)])
    def test_slot_count(self, level, expected):
        assert pact_slot_count(level) == expected


class TestUseSlot:
    """Tests for spending slots."""

    def test_use_decrements_remaining(self):
        table = slots_for_class("Wizard", 1)
        after = use_slot(table, 1)
        assert after.get(1).used == 1
        assert after.get(1).remaining == 1
        assert table.get(1).used == 0

    def test_exhausted_raises(self):
        table = use_slot(use_slot(slots_for_class("Wizard", 1), 1), 1)
        assert not has_slot(table, 1)
        with pytest.raises(NoSlotAvailable) as exc_info:
            use_slot(table, 1)
        assert exc_info.value.level == 1

    def test_missing_level_raises(self):
        with pytest.raises(NoSlotAvailable):
            use_slot(slots_for_class("Wizard", 1), 3)

    def test_cantrips_never_consumed(self):
        table = slots_for_class("Wizard", 1)
        assert use_slot(table, 0) == table
        assert has_slot(table, 0)


class TestRests:
    """Tests for restoring slots."""

    def test_long_rest_restores_everything(self):
        table = use_slot(use_slot(slots_for_class("Cleric", 3), 1), 2)
        restored = restore_all(table)
        assert all(slot.used == 0 for slot in restored.slots)

    def test_short_rest_restores_pact_slots(self):
        table = use_slot(slots_for_class("Warlock", 5), 3)
        assert restore_short_rest(table, CasterType.PACT).get(3).used == 0

    def test_short_rest_leaves_other_casters(self):
        table = use_slot(slots_for_class("Wizard", 5), 3)
        assert restore_short_rest(table, CasterType.FULL) == table


class TestHighestLevel:
    def test_highest_slot_level(self):
        assert highest_slot_level(slots_for_class("Wizard", 9)) == 5
        assert highest_slot_level(slots_for_class("Rogue", 9)) == 0

    def test_highest_spell_level(self):
        assert highest_spell_level("Ranger", 9) == 3


class TestSerialization:
    """Tests for SpellSlotTable.to_dict/from_dict."""

    def test_round_trip(self):
        table = use_slot(slots_for_class("Druid", 4), 2)
        assert SpellSlotTable.from_dict(table.to_dict()) == table

    def test_to_dict_shape(self):
        data = slots_for_class("Wizard", 1).to_dict()
        assert data == {"0": {"max": None, "used": 0}, "1": {"max": 2, "used": 0}}

    def test_slot_available(self):
        assert SpellSlot(level=1, maximum=2, used=1).available
        assert not SpellSlot(level=1, maximum=2, used=2).available
