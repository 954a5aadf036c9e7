"""Command line interface for the rules engine."""

from typing import Optional

import typer
from pydantic import ValidationError

from rules_engine.abilities import AbilityScores, proficiency_bonus
from rules_engine.cli.display import (
    display_ability_scores,
    display_attack,
    display_error,
    display_info,
    display_roll,
    display_slots,
    display_xp,
    setup_logging,
)
from rules_engine.combat.attacks import AttackKind, DamageType, perform_attack
from rules_engine.config import get_settings
from rules_engine.dice.roller import roll, roll_4d6_drop_lowest
from rules_engine.errors import RulesEngineError
from rules_engine.progression.level_up import ProgressionCharacter, level_up_requirements
from rules_engine.progression.xp import xp_progress
from rules_engine.spells.caster_types import can_cast_spells
from rules_engine.spells.slots import slots_for_class

# Create main app
app = typer.Typer(
    name="rules-engine",
    help="Tabletop rules engine: dice, attacks, spell slots and progression",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Tabletop rules engine.

    Use 'rules-engine roll 2d6+3' to roll dice.
    """
    setup_logging(get_settings().effective_log_level)


@app.command("roll")
def roll_command(
    notation: str = typer.Argument(..., help="Dice notation, e.g. 2d6+3 or 1d20+5"),
    advantage: bool = typer.Option(False, "--advantage", "-a", help="Roll with advantage"),
    disadvantage: bool = typer.Option(False, "--disadvantage", "-d", help="Roll with disadvantage"),
) -> None:
    """Roll dice."""
    try:
        result = roll(notation, advantage=advantage, disadvantage=disadvantage)
    except RulesEngineError as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_roll(result, show_breakdown=get_settings().show_breakdown)


@app.command()
def attack(
    defense: int = typer.Argument(..., help="Target armor class"),
    damage: str = typer.Argument(..., help="Damage dice, e.g. 1d8+3"),
    kind: AttackKind = typer.Option(AttackKind.MELEE, "--kind", "-k", help="Attack type"),
    damage_type: DamageType = typer.Option(DamageType.SLASHING, "--damage-type", "-t"),
    score: int = typer.Option(10, "--score", help="Attacking ability score"),
    level: int = typer.Option(1, "--level", "-l", help="Attacker level"),
    proficient: bool = typer.Option(True, "--proficient/--not-proficient"),
    resist: Optional[list[str]] = typer.Option(None, "--resist", help="Target resistance"),
    advantage: bool = typer.Option(False, "--advantage", "-a"),
    disadvantage: bool = typer.Option(False, "--disadvantage", "-d"),
) -> None:
    """Resolve an attack against a target."""
    scores = AbilityScores(strength=score, dexterity=score)
    try:
        result = perform_attack(
            kind,
            scores,
            proficiency_bonus(level),
            proficient,
            defense,
            damage,
            damage_type,
            resistances=resist or (),
            advantage=advantage,
            disadvantage=disadvantage,
        )
    except RulesEngineError as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_attack(result)


@app.command()
def slots(
    class_name: str = typer.Argument(..., help="Character class, e.g. wizard"),
    level: int = typer.Argument(..., help="Character level (1-20)"),
) -> None:
    """Show spell slots for a class and level."""
    try:
        table = slots_for_class(class_name, level)
    except RulesEngineError as e:
        display_error(str(e))
        raise typer.Exit(1)

    if not can_cast_spells(class_name, level):
        display_info(f"{class_name.title()} has no spellcasting at level {level}")
    display_slots(class_name, level, table)


@app.command()
def xp(
    level: int = typer.Argument(..., help="Current level (1-20)"),
    experience: int = typer.Argument(..., help="Total experience points"),
    class_name: str = typer.Option("fighter", "--class", "-c", help="Character class"),
    constitution: int = typer.Option(10, "--con", help="Constitution score"),
) -> None:
    """Show XP progress and level-up requirements."""
    if not 1 <= level <= 20:
        display_error(f"Invalid level: {level}. Must be between 1 and 20.")
        raise typer.Exit(1)
    if experience < 0:
        display_error("Experience points cannot be negative")
        raise typer.Exit(1)

    try:
        character = ProgressionCharacter(
            level=level,
            experience_points=experience,
            character_class=class_name,
            constitution=constitution,
            max_hp=1,
        )
    except ValidationError as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_xp(level, experience, xp_progress(level, experience), level_up_requirements(character))


@app.command()
def abilities() -> None:
    """Roll an ability score array (4d6, drop the lowest, six times)."""
    display_ability_scores([roll_4d6_drop_lowest() for _ in range(6)])


if __name__ == "__main__":
    app()
