"""Rich display helpers for CLI output."""

import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rules_engine.abilities import ability_modifier
from rules_engine.combat.attacks import AttackResult
from rules_engine.dice.types import DiceRoll, format_modifier
from rules_engine.progression.level_up import LevelUpRequirements
from rules_engine.progression.xp import XPProgress
from rules_engine.spells.slots import SpellSlotTable


# Shared console instance
console = Console()


def setup_logging(level: str = "WARNING") -> None:
    """Route engine logging through a rich handler.

    Args:
        level: Root logger level name.
    """
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_info(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def display_roll(result: DiceRoll, show_breakdown: bool = True) -> None:
    """Display a dice roll total, with its description when requested.

    Args:
        result: The roll to show.
        show_breakdown: Print the individual dice as well as the total.
    """
    style = "green" if result.critical else "red" if result.fumble else "cyan"
    body = f"[bold {style}]{result.total}[/bold {style}]"
    if show_breakdown and result.description:
        body += f"\n[dim]{result.description}[/dim]"
    console.print(Panel(body, title=str(result.notation), border_style=style, expand=False))


def display_attack(result: AttackResult) -> None:
    """Display an attack outcome."""
    attack = result.attack
    if attack.critical_hit:
        style = "bold green"
    elif attack.hit:
        style = "green"
    else:
        style = "red"

    console.print(Panel(result.description, title=f"{attack.kind.value.title()} attack", border_style=style))


def display_slots(class_name: str, level: int, table: SpellSlotTable) -> None:
    """Display a spell slot table.

    Args:
        class_name: Class shown in the title.
        level: Character level shown in the title.
        table: Slots to list.
    """
    slot_table = Table(title=f"{class_name.title()} level {level} spell slots", box=box.ROUNDED)
    slot_table.add_column("Spell Level", justify="center", style="white")
    slot_table.add_column("Slots", justify="center", style="cyan")
    slot_table.add_column("Used", justify="center", style="yellow")

    for slot in table.slots:
        label = "Cantrip" if slot.level == 0 else str(slot.level)
        maximum = "unlimited" if slot.unlimited else str(slot.maximum)
        slot_table.add_row(label, maximum, str(slot.used))

    console.print(slot_table)


def _create_progress_bar(percentage: float, width: int = 20) -> Text:
    """Create a Rich Text progress bar.

    Args:
        percentage: Progress 0-100.
        width: Bar width in characters.
    """
    filled = int(percentage / 100 * width)

    bar_text = Text()
    bar_text.append("[", style="dim")
    bar_text.append("=" * filled, style="green")
    bar_text.append(" " * (width - filled), style="dim")
    bar_text.append("]", style="dim")
    return bar_text


def display_xp(level: int, xp: int, progress: XPProgress, requirements: LevelUpRequirements) -> None:
    """Display XP progress and what the next level-up needs."""
    table = Table(title=f"Level {level} ({xp} XP)", box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="white")
    table.add_column("Value")

    table.add_row("Progress", _create_progress_bar(progress.percentage))
    table.add_row("XP this level", f"{progress.current}/{progress.needed} ({progress.percentage}%)")

    if requirements.can_level_up:
        table.add_row("Next level", f"[bold green]{requirements.next_level} available[/bold green]")
        if requirements.features_gained:
            names = ", ".join(f.name for f in requirements.features_gained)
            table.add_row("Features", names)
        if requirements.requires_asi:
            table.add_row("Choice", "Ability score improvement or feat")
        hp = requirements.hp_options
        table.add_row("HP options", f"average {hp.average} or roll 1d{hp.roll_max}")
    else:
        table.add_row("Next level", f"[yellow]{requirements.reason}[/yellow]")

    console.print(table)


def display_ability_scores(rolls: list[DiceRoll]) -> None:
    """Display a rolled ability score array."""
    table = Table(title="Ability Scores (4d6 drop lowest)", box=box.ROUNDED)
    table.add_column("#", justify="center", style="dim")
    table.add_column("Dice", style="white")
    table.add_column("Dropped", justify="center", style="dim")
    table.add_column("Score", justify="center", style="cyan")
    table.add_column("Modifier", justify="center", style="yellow")

    for index, result in enumerate(rolls, start=1):
        table.add_row(
            str(index),
            ", ".join(str(r) for r in result.rolls),
            ", ".join(str(r) for r in result.discarded),
            str(result.total),
            format_modifier(ability_modifier(result.total)),
        )

    console.print(table)
