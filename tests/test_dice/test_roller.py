"""Tests for dice roller."""

from unittest.mock import patch

import pytest

from rules_engine.dice.roller import (
    generate_ability_scores,
    resolve_advantage,
    roll,
    roll_4d6_drop_lowest,
    roll_critical_damage,
    roll_d20,
    roll_dice,
    roll_die,
    roll_multiple,
    validate_roll,
)
from rules_engine.dice.types import AdvantageType, DiceNotation, DiceRoll
from rules_engine.errors import ConflictingAdvantage, InvalidNotation


class TestRollDie:
    """Tests for roll_die function."""

    @pytest.mark.parametrize("sides", [2, 3, 4, 6, 8, 10, 12, 20, 100])
    def test_values_in_range(self, sides):
        """Every face lies within 1..sides."""
        for _ in range(50):
            assert 1 <= roll_die(sides) <= sides

    @patch("rules_engine.dice.roller.secure_randint")
    def test_uses_secure_source(self, mock_randint):
        """Test that roll_die draws from the secure source."""
        mock_randint.return_value = 7
        assert roll_die(8) == 7
        mock_randint.assert_called_once_with(1, 8)


class TestRollDice:
    """Tests for roll_dice function."""

    def test_total_is_sum_plus_modifier(self):
        """Test that total = sum of rolls + modifier."""
        for _ in range(20):
            result = roll_dice(DiceNotation(count=3, sides=6, modifier=-2))
            assert len(result.rolls) == 3
            assert all(1 <= r <= 6 for r in result.rolls)
            assert result.total == sum(result.rolls) - 2

    @patch("rules_engine.dice.roller.roll_die")
    def test_forced_faces(self, mock_die):
        """Test rolling with forced die faces."""
        mock_die.side_effect = [3, 5]
        result = roll_dice(DiceNotation(count=2, sides=6, modifier=3))
        assert result.rolls == (3, 5)
        assert result.total == 11
        assert result.description == "2d6+3: rolled [3, 5] +3 = 11"

    @patch("rules_engine.dice.roller.roll_die")
    def test_natural_20_is_critical(self, mock_die):
        mock_die.return_value = 20
        result = roll_dice(DiceNotation(count=1, sides=20, modifier=2))
        assert result.critical
        assert not result.fumble
        assert "(CRITICAL!)" in result.description

    @patch("rules_engine.dice.roller.roll_die")
    def test_natural_1_is_fumble(self, mock_die):
        mock_die.return_value = 1
        result = roll_dice(DiceNotation(count=1, sides=20))
        assert result.fumble
        assert not result.critical

    @patch("rules_engine.dice.roller.roll_die")
    def test_critical_only_for_single_d20(self, mock_die):
        """Twenties on multi-die rolls are not criticals."""
        mock_die.return_value = 20
        result = roll_dice(DiceNotation(count=2, sides=20))
        assert not result.critical
        assert not result.fumble

    @patch("rules_engine.dice.roller.roll_die")
    def test_advantage_ignored_for_other_dice(self, mock_die):
        """Advantage only applies to a single d20."""
        mock_die.side_effect = [2, 4]
        result = roll_dice(DiceNotation(count=2, sides=6), AdvantageType.ADVANTAGE)
        assert result.rolls == (2, 4)
        assert not result.advantage
        assert result.discarded == ()


class TestAdvantage:
    """Tests for advantage and disadvantage rolls."""

    @patch("rules_engine.dice.roller.roll_die")
    def test_advantage_keeps_higher(self, mock_die):
        mock_die.side_effect = [8, 15]
        result = roll("1d20+5", advantage=True)
        assert result.rolls == (15,)
        assert result.discarded == (8,)
        assert result.total == 20
        assert result.advantage
        assert result.description == "Advantage: rolled 8 and 15, taking 15 +5 = 20"

    @patch("rules_engine.dice.roller.roll_die")
    def test_disadvantage_keeps_lower(self, mock_die):
        mock_die.side_effect = [8, 15]
        result = roll("1d20", disadvantage=True)
        assert result.rolls == (8,)
        assert result.discarded == (15,)
        assert result.total == 8
        assert result.disadvantage

    @patch("rules_engine.dice.roller.roll_die")
    def test_critical_uses_kept_die(self, mock_die):
        """A 20 on the discarded die is not a critical."""
        mock_die.side_effect = [20, 3]
        result = roll("1d20", disadvantage=True)
        assert not result.critical
        assert result.natural == 3

    @patch("rules_engine.dice.roller.roll_die")
    def test_advantage_fumble_needs_both_ones(self, mock_die):
        mock_die.side_effect = [1, 1]
        result = roll("1d20", advantage=True)
        assert result.fumble

    def test_both_flags_raise(self):
        """Requesting both advantage and disadvantage is rejected."""
        with pytest.raises(ConflictingAdvantage):
            roll("1d20", advantage=True, disadvantage=True)


class TestResolveAdvantage:
    """Tests for resolve_advantage."""

    def test_combinations(self):
        assert resolve_advantage() == AdvantageType.NORMAL
        assert resolve_advantage(advantage=True) == AdvantageType.ADVANTAGE
        assert resolve_advantage(disadvantage=True) == AdvantageType.DISADVANTAGE

    def test_both_raise(self):
        with pytest.raises(ConflictingAdvantage):
            resolve_advantage(True, True)


class TestConvenienceRolls:
    """Tests for roll, roll_d20 and roll_multiple."""

    def test_roll_parses_notation(self):
        result = roll("2d6+3")
        assert result.notation == DiceNotation(2, 6, 3)

    def test_roll_invalid_notation(self):
        with pytest.raises(InvalidNotation):
            roll("two dice")

    @patch("rules_engine.dice.roller.roll_die")
    def test_roll_d20_applies_modifier(self, mock_die):
        mock_die.return_value = 12
        result = roll_d20(4)
        assert result.total == 16
        assert str(result.notation) == "1d20+4"

    def test_roll_multiple(self):
        results = roll_multiple(["1d6", "2d8+1"])
        assert [str(r.notation) for r in results] == ["1d6", "2d8+1"]


class TestCriticalDamage:
    """Tests for roll_critical_damage."""

    @patch("rules_engine.dice.roller.roll_die")
    def test_doubles_dice_not_modifier(self, mock_die):
        """2d6+3 critical rolls 4d6 then adds 3."""
        mock_die.side_effect = [1, 2, 3, 4]
        result = roll_critical_damage("2d6+3")
        assert str(result.notation) == "4d6+3"
        assert result.rolls == (1, 2, 3, 4)
        assert result.total == 13
        assert result.critical
        assert result.description.startswith("CRITICAL HIT: ")

    @patch("rules_engine.dice.roller.roll_die")
    def test_large_notation_doubles_past_written_limit(self, mock_die):
        """60d6 is valid to write, so its 120-die critical must roll."""
        mock_die.return_value = 3
        result = roll_critical_damage("60d6")
        assert str(result.notation) == "120d6"
        assert len(result.rolls) == 120
        assert result.total == 360


class TestAbilityScoreGeneration:
    """Tests for 4d6-drop-lowest generation."""

    @patch("rules_engine.dice.roller.roll_die")
    def test_drops_lowest(self, mock_die):
        mock_die.side_effect = [4, 1, 6, 5]
        result = roll_4d6_drop_lowest()
        assert result.rolls == (4, 5, 6)
        assert result.discarded == (1,)
        assert result.total == 15

    def test_generate_six_scores_in_range(self):
        scores = generate_ability_scores()
        assert len(scores) == 6
        assert all(3 <= s <= 18 for s in scores)


class TestValidateRoll:
    """Tests for validating claimed rolls."""

    def test_real_roll_is_valid(self):
        assert validate_roll(roll("3d8+2"))

    def test_advantage_roll_is_valid(self):
        assert validate_roll(roll("1d20+1", advantage=True))

    def test_drop_lowest_is_valid(self):
        assert validate_roll(roll_4d6_drop_lowest())

    def test_wrong_total_is_invalid(self):
        claimed = DiceRoll(notation=DiceNotation(2, 6), rolls=(3, 4), total=12, modifier=0)
        assert not validate_roll(claimed)

    def test_face_out_of_range_is_invalid(self):
        claimed = DiceRoll(notation=DiceNotation(1, 6), rolls=(7,), total=7, modifier=0)
        assert not validate_roll(claimed)

    def test_wrong_die_count_is_invalid(self):
        claimed = DiceRoll(notation=DiceNotation(2, 6), rolls=(3,), total=3, modifier=0)
        assert not validate_roll(claimed)
