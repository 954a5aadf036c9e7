"""Modifier stacking.

In 5e most bonuses stack, but bonuses from the same source do not. For each
source only the modifier with the largest magnitude is kept; modifiers from
distinct sources always add.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class ModifierCategory(str, Enum):
    """Where a modifier comes from."""

    BASE = "base"
    ABILITY = "ability"
    PROFICIENCY = "proficiency"
    CIRCUMSTANCE = "circumstance"
    ITEM = "item"
    SPELL = "spell"
    FEATURE = "feature"
    UNTYPED = "untyped"


class ResistanceOutcome(str, Enum):
    """How a target's defenses changed incoming damage."""

    NORMAL = "normal"
    RESISTANT = "resistant"
    VULNERABLE = "vulnerable"
    IMMUNE = "immune"


@dataclass(frozen=True)
class Modifier:
    """A named, sourced numeric bonus or penalty.

    Attributes:
        name: Display name (e.g., "Bless").
        category: Kind of modifier.
        value: Signed amount.
        source: Stacking key; modifiers sharing a source do not stack.
        duration: Remaining turns, -1 for permanent, None if untracked.
    """

    name: str
    category: ModifierCategory
    value: int
    source: str
    duration: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "category": self.category.value,
            "value": self.value,
            "source": self.source,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class ModifierStack:
    """The retained modifiers and their combined total."""

    total: int
    modifiers: tuple[Modifier, ...] = field(default_factory=tuple)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "modifiers": [m.to_dict() for m in self.modifiers],
            "description": self.description,
        }


def stack_modifiers(modifiers: Iterable[Modifier]) -> ModifierStack:
    """Stack modifiers according to same-source rules.

    Per unique source, keep the modifier with the largest absolute value
    (the first one seen wins an exact tie). Retained modifiers are summed.

    Examples:
        >>> bless = Modifier("Bless", ModifierCategory.SPELL, 2, "bless")
        >>> bless_again = Modifier("Bless", ModifierCategory.SPELL, 2, "bless")
        >>> stack_modifiers([bless, bless_again]).total
        2
    """
    by_source: dict[str, Modifier] = {}
    for modifier in modifiers:
        existing = by_source.get(modifier.source)
        if existing is None or abs(modifier.value) > abs(existing.value):
            by_source[modifier.source] = modifier

    retained = tuple(by_source.values())
    description = ", ".join(
        f"{m.name} ({'+' if m.value >= 0 else ''}{m.value})" for m in retained
    )
    return ModifierStack(
        total=sum(m.value for m in retained),
        modifiers=retained,
        description=description,
    )


def calculate_attack_bonus(
    ability_mod: int,
    proficiency_bonus: int,
    is_proficient: bool,
    additional_modifiers: Iterable[Modifier] = (),
) -> ModifierStack:
    """Total attack bonus: ability modifier, proficiency (if proficient), extras."""
    parts = [Modifier("Ability", ModifierCategory.ABILITY, ability_mod, "ability_score")]
    if is_proficient:
        parts.append(
            Modifier("Proficiency", ModifierCategory.PROFICIENCY, proficiency_bonus, "proficiency")
        )
    parts.extend(additional_modifiers)
    return stack_modifiers(parts)


def calculate_armor_class(
    base_ac: int,
    dex_modifier: int,
    max_dex_bonus: int | None = None,
    additional_modifiers: Iterable[Modifier] = (),
) -> ModifierStack:
    """Total armor class.

    Args:
        base_ac: Armor class from worn armor (10 unarmored).
        dex_modifier: Dexterity modifier.
        max_dex_bonus: Cap on the dexterity contribution (medium/heavy armor).
            None means uncapped.
        additional_modifiers: Shields, spells, items.
    """
    dex_bonus = dex_modifier if max_dex_bonus is None else min(dex_modifier, max_dex_bonus)
    parts = [
        Modifier("Base AC", ModifierCategory.BASE, base_ac, "armor"),
        Modifier("Dexterity", ModifierCategory.ABILITY, dex_bonus, "dexterity"),
    ]
    parts.extend(additional_modifiers)
    return stack_modifiers(parts)


def calculate_damage_with_resistances(
    damage: int,
    damage_type: str,
    resistances: Iterable[str] = (),
    vulnerabilities: Iterable[str] = (),
    immunities: Iterable[str] = (),
) -> tuple[int, ResistanceOutcome]:
    """Adjust damage for a target's immunities, resistances and vulnerabilities.

    Immunity is checked first and zeroes the damage. Resistance halves it
    (rounding down); vulnerability doubles it.

    Returns:
        Tuple of (effective damage, outcome).

    Examples:
        >>> calculate_damage_with_resistances(9, "fire", resistances=["fire"])
        (4, <ResistanceOutcome.RESISTANT: 'resistant'>)
    """
    # Accepts DamageType members or plain strings
    if any(damage_type == t for t in immunities):
        return 0, ResistanceOutcome.IMMUNE
    if any(damage_type == t for t in resistances):
        return damage // 2, ResistanceOutcome.RESISTANT
    if any(damage_type == t for t in vulnerabilities):
        return damage * 2, ResistanceOutcome.VULNERABLE
    return damage, ResistanceOutcome.NORMAL
