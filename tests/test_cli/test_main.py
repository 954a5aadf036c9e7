"""Tests for the rules-engine command line."""

from unittest.mock import patch

from typer.testing import CliRunner

from rules_engine.cli.main import app


runner = CliRunner()


class TestRollCommand:
    """Tests for the roll command."""

    @patch("rules_engine.dice.roller.roll_die")
    def test_roll_shows_total(self, mock_die):
        """Total is the dice plus the modifier."""
        mock_die.side_effect = [4, 5]
        result = runner.invoke(app, ["roll", "2d6+3"])

        assert result.exit_code == 0
        assert "12" in result.stdout

    @patch("rules_engine.dice.roller.roll_die")
    def test_roll_with_advantage(self, mock_die):
        mock_die.side_effect = [7, 16]
        result = runner.invoke(app, ["roll", "1d20+2", "--advantage"])

        assert result.exit_code == 0
        assert "18" in result.stdout
        assert "Advantage" in result.stdout

    def test_invalid_notation(self):
        result = runner.invoke(app, ["roll", "banana"])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_conflicting_advantage(self):
        result = runner.invoke(app, ["roll", "1d20", "-a", "-d"])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestAttackCommand:
    """Tests for the attack command."""

    @patch("rules_engine.dice.roller.roll_die")
    def test_hit_rolls_damage(self, mock_die):
        """d20 15 + proficiency 2 = 17 hits AC 15."""
        mock_die.side_effect = [15, 5]
        result = runner.invoke(app, ["attack", "15", "1d8"])

        assert result.exit_code == 0
        assert "Hit!" in result.stdout
        assert "17 vs AC 15" in result.stdout

    @patch("rules_engine.dice.roller.roll_die")
    def test_miss(self, mock_die):
        mock_die.return_value = 3
        result = runner.invoke(app, ["attack", "15", "1d8", "--kind", "ranged"])

        assert result.exit_code == 0
        assert "Miss!" in result.stdout
        assert "Ranged attack" in result.stdout

    @patch("rules_engine.dice.roller.roll_die")
    def test_resistance(self, mock_die):
        mock_die.side_effect = [15, 5]
        result = runner.invoke(
            app, ["attack", "10", "1d8", "-t", "fire", "--resist", "fire"]
        )

        assert result.exit_code == 0
        assert "resistant" in result.stdout

    def test_bad_damage_notation(self):
        result = runner.invoke(app, ["attack", "10", "lots"])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestSlotsCommand:
    """Tests for the slots command."""

    def test_wizard_slots(self):
        result = runner.invoke(app, ["slots", "wizard", "5"])

        assert result.exit_code == 0
        assert "Wizard level 5 spell slots" in result.stdout

    def test_non_caster(self):
        result = runner.invoke(app, ["slots", "barbarian", "5"])

        assert result.exit_code == 0
        assert "no spellcasting" in result.stdout

    def test_invalid_level(self):
        result = runner.invoke(app, ["slots", "wizard", "25"])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestXPCommand:
    """Tests for the xp command."""

    def test_can_level_up(self):
        result = runner.invoke(app, ["xp", "1", "300"])

        assert result.exit_code == 0
        assert "2 available" in result.stdout
        assert "Action Surge" in result.stdout

    def test_not_enough_xp(self):
        result = runner.invoke(app, ["xp", "1", "150", "--class", "wizard"])

        assert result.exit_code == 0
        assert "Not enough experience points" in result.stdout

    def test_max_level(self):
        result = runner.invoke(app, ["xp", "20", "400000"])

        assert result.exit_code == 0
        assert "maximum level" in result.stdout

    def test_invalid_level(self):
        result = runner.invoke(app, ["xp", "0", "100"])

        assert result.exit_code == 1
        assert "Invalid level" in result.stdout

    def test_negative_experience(self):
        result = runner.invoke(app, ["xp", "3", "--", "-5"])

        assert result.exit_code == 1
        assert "cannot be negative" in result.stdout


class TestAbilitiesCommand:
    @patch("rules_engine.dice.roller.roll_die")
    def test_rolls_six_scores(self, mock_die):
        mock_die.return_value = 4
        result = runner.invoke(app, ["abilities"])

        assert result.exit_code == 0
        assert "Ability Scores" in result.stdout
        assert mock_die.call_count == 24
