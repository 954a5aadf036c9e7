"""Tests for class spellcasting configuration."""

import pytest

from rules_engine.abilities import Ability
from rules_engine.spells.caster_types import (
    CasterType,
    SpellKnowledge,
    can_cast_spells,
    cantrips_known,
    caster_config,
    caster_type_for_class,
    max_prepared_spells,
    normalize_class_name,
    spells_known,
    uses_known_spells,
    uses_prepared_spells,
)


class TestCasterTypes:
    """Tests for caster archetypes by class."""

    @pytest.mark.parametrize(
        "class_name,expected",
        [
            ("Wizard", CasterType.FULL),
            ("Bard", CasterType.FULL),
            ("Warlock", CasterType.PACT),
            ("Paladin", CasterType.HALF),
            ("Ranger", CasterType.HALF),
            ("Arcane Trickster", CasterType.THIRD),
            ("Barbarian", CasterType.NONE),
            ("Unknown", CasterType.NONE),
        ],
    )
    def test_caster_type(self, class_name, expected):
        assert caster_type_for_class(class_name) == expected

    def test_normalize_class_name(self):
        assert normalize_class_name(" Eldritch Knight ") == "eldritch_knight"
        assert normalize_class_name("arcane-trickster") == "arcane_trickster"

    def test_spellcasting_ability(self):
        assert caster_config("Cleric").spellcasting_ability == Ability.WISDOM
        assert caster_config("Fighter").spellcasting_ability is None


class TestCanCastSpells:
    def test_full_caster_from_level_1(self):
        assert can_cast_spells("Wizard", 1)

    def test_half_caster_from_level_2(self):
        assert not can_cast_spells("Paladin", 1)
        assert can_cast_spells("Paladin", 2)

    def test_non_caster_never(self):
        assert not can_cast_spells("Monk", 20)


class TestKnownAndPrepared:
    """Tests for cantrips, spells known and prepared counts."""

    def test_cantrips_known_thresholds(self):
        assert cantrips_known("Wizard", 1) == 3
        assert cantrips_known("Wizard", 4) == 4
        assert cantrips_known("Wizard", 15) == 5
        assert cantrips_known("Fighter", 15) == 0

    def test_spells_known_for_known_casters(self):
        assert spells_known("Sorcerer", 1) == 2
        assert spells_known("Bard", 10) == 14
        assert spells_known("Bard", 15) == 14

    def test_spells_known_zero_for_prepared_casters(self):
        assert spells_known("Wizard", 5) == 0

    def test_ranger_before_spellcasting(self):
        assert spells_known("Ranger", 1) == 0

    def test_max_prepared_minimum_one(self):
        assert max_prepared_spells(3, 5) == 8
        assert max_prepared_spells(-2, 1) == 1

    def test_knowledge_style(self):
        assert uses_known_spells("Warlock")
        assert uses_prepared_spells("Druid")
        assert caster_config("Rogue").spell_knowledge == SpellKnowledge.NONE
