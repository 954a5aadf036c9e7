"""Tests for dice system types."""

from dataclasses import FrozenInstanceError

import pytest

from rules_engine.dice.types import (
    ALLOWED_DIE_SIZES,
    AdvantageType,
    DiceNotation,
    DiceRoll,
    format_modifier,
)
from rules_engine.errors import OutOfRange


class TestDiceNotation:
    """Tests for DiceNotation dataclass."""

    def test_defaults_to_no_modifier(self):
        """Test creating a basic notation."""
        notation = DiceNotation(count=1, sides=20)
        assert notation.modifier == 0

    def test_notation_is_immutable(self):
        """Test that DiceNotation is frozen."""
        notation = DiceNotation(count=1, sides=20)
        with pytest.raises(FrozenInstanceError):
            notation.count = 2

    def test_rejects_nonstandard_sides(self):
        """Directly constructed notations are validated too."""
        with pytest.raises(OutOfRange):
            DiceNotation(count=1, sides=5)

    def test_rejects_count_outside_range(self):
        with pytest.raises(OutOfRange):
            DiceNotation(count=0, sides=6)
        with pytest.raises(OutOfRange):
            DiceNotation(count=201, sides=6)

    def test_doubled_notation_may_exceed_written_limit(self):
        """A critical on 100 written dice still builds a notation."""
        notation = DiceNotation(count=100, sides=6, modifier=2).doubled()
        assert str(notation) == "200d6+2"

    def test_str_formats(self):
        """Test canonical string forms."""
        assert str(DiceNotation(2, 6, 3)) == "2d6+3"
        assert str(DiceNotation(1, 20)) == "1d20"
        assert str(DiceNotation(1, 8, -1)) == "1d8-1"

    def test_is_single_d20(self):
        assert DiceNotation(1, 20).is_single_d20
        assert not DiceNotation(2, 20).is_single_d20
        assert not DiceNotation(1, 12).is_single_d20

    def test_with_count_keeps_sides_and_modifier(self):
        assert DiceNotation(2, 6, 3).with_count(4) == DiceNotation(4, 6, 3)

    def test_with_modifier(self):
        assert DiceNotation(1, 20).with_modifier(5) == DiceNotation(1, 20, 5)

    def test_allowed_sizes(self):
        """The standard die set."""
        assert ALLOWED_DIE_SIZES == {2, 3, 4, 6, 8, 10, 12, 20, 100}


class TestFormatModifier:
    """Tests for format_modifier."""

    def test_signs(self):
        assert format_modifier(3) == "+3"
        assert format_modifier(-1) == "-1"
        assert format_modifier(0) == "+0"


class TestDiceRoll:
    """Tests for DiceRoll dataclass."""

    def test_natural_for_single_d20(self):
        """natural is the kept d20 face."""
        result = DiceRoll(notation=DiceNotation(1, 20, 5), rolls=(14,), total=19, modifier=5)
        assert result.natural == 14

    def test_natural_none_for_other_dice(self):
        result = DiceRoll(notation=DiceNotation(2, 6), rolls=(3, 4), total=7, modifier=0)
        assert result.natural is None

    def test_to_dict(self):
        """Test serialization to plain values."""
        result = DiceRoll(
            notation=DiceNotation(1, 20),
            rolls=(17,),
            total=17,
            modifier=0,
            advantage=True,
            discarded=(4,),
        )
        data = result.to_dict()
        assert data["notation"] == "1d20"
        assert data["rolls"] == [17]
        assert data["discarded"] == [4]
        assert data["advantage"] is True
        assert data["critical"] is False


class TestAdvantageType:
    """Tests for AdvantageType enum."""

    def test_values(self):
        assert AdvantageType.NORMAL.value == "normal"
        assert AdvantageType("advantage") == AdvantageType.ADVANTAGE
        assert AdvantageType.DISADVANTAGE == "disadvantage"
