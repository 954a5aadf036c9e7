"""Attack and damage resolution.

Provides attack rolls against a defense value, damage rolls with critical
doubling and resistance handling, and the combined attack-then-damage flow.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from rules_engine.abilities import Ability, AbilityScores
from rules_engine.combat.conditions import (
    ATTACK_ROLLS,
    ATTACKS_AGAINST,
    ATTACKS_AGAINST_MELEE,
    ATTACKS_AGAINST_RANGED,
    Condition,
    ConditionName,
    EffectType,
    has_effect,
)
from rules_engine.dice.parser import ensure_notation
from rules_engine.dice.roller import D20, resolve_advantage, roll_dice
from rules_engine.dice.types import AdvantageType, DiceNotation, DiceRoll
from rules_engine.modifiers import (
    Modifier,
    ResistanceOutcome,
    calculate_attack_bonus,
    calculate_damage_with_resistances,
)

logger = logging.getLogger(__name__)


class AttackKind(str, Enum):
    """Type of attack being made."""

    MELEE = "melee"
    RANGED = "ranged"
    SPELL = "spell"


class DamageType(str, Enum):
    """5e damage types."""

    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"


@dataclass(frozen=True)
class AttackRoll:
    """Result of an attack roll.

    Attributes:
        kind: Melee, ranged or spell.
        roll: The underlying d20 roll.
        bonus: Stacked attack bonus.
        total: d20 total plus bonus.
        target_defense: Armor class that was targeted.
        hit: Whether the attack hit.
        critical_hit: Natural 20 (automatic hit, double damage dice).
        critical_fumble: Natural 1 (automatic miss).
    """

    kind: AttackKind
    roll: DiceRoll
    bonus: int
    total: int
    target_defense: int
    hit: bool
    critical_hit: bool
    critical_fumble: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "roll": self.roll.to_dict(),
            "bonus": self.bonus,
            "total": self.total,
            "target_defense": self.target_defense,
            "hit": self.hit,
            "critical_hit": self.critical_hit,
            "critical_fumble": self.critical_fumble,
        }


@dataclass(frozen=True)
class DamageRoll:
    """Result of a damage roll.

    Attributes:
        roll: The underlying dice roll (dice already doubled on a critical).
        damage_type: Type of damage.
        raw_total: Damage before resistances.
        effective_total: Damage after immunity/resistance/vulnerability.
        resistance: Which adjustment applied.
    """

    roll: DiceRoll
    damage_type: str
    raw_total: int
    effective_total: int
    resistance: ResistanceOutcome

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "roll": self.roll.to_dict(),
            "damage_type": self.damage_type,
            "raw_total": self.raw_total,
            "effective_total": self.effective_total,
            "resistance": self.resistance.value,
        }


@dataclass(frozen=True)
class AttackResult:
    """An attack roll and, on a hit, its damage."""

    attack: AttackRoll
    damage: DamageRoll | None
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "attack": self.attack.to_dict(),
            "damage": self.damage.to_dict() if self.damage else None,
            "description": self.description,
        }


def _attack_ability(kind: AttackKind) -> Ability:
    # Finesse and thrown overrides belong to the equipment layer
    return Ability.STRENGTH if AttackKind(kind) == AttackKind.MELEE else Ability.DEXTERITY


def make_attack_roll(
    kind: AttackKind,
    ability_scores: AbilityScores,
    proficiency_bonus: int,
    is_proficient: bool,
    target_defense: int,
    extra_modifiers: Iterable[Modifier] = (),
    advantage: bool = False,
    disadvantage: bool = False,
) -> AttackRoll:
    """Make an attack roll against a target's armor class.

    Melee attacks use strength; ranged and spell attacks use dexterity.
    A natural 20 always hits; a natural 1 always misses, even when the
    total would meet the defense.

    Args:
        kind: Melee, ranged or spell.
        ability_scores: Attacker's ability scores.
        proficiency_bonus: Attacker's proficiency bonus.
        is_proficient: Whether proficiency applies to this attack.
        target_defense: Target's armor class.
        extra_modifiers: Additional sourced modifiers (stacked).
        advantage: Roll with advantage.
        disadvantage: Roll with disadvantage.

    Returns:
        AttackRoll with hit/miss and critical status.

    Raises:
        ConflictingAdvantage: If both advantage and disadvantage are set.
    """
    kind = AttackKind(kind)
    advantage_type = resolve_advantage(advantage, disadvantage)
    ability_mod = ability_scores.modifier(_attack_ability(kind))
    bonus_stack = calculate_attack_bonus(
        ability_mod, proficiency_bonus, is_proficient, extra_modifiers
    )

    d20 = roll_dice(D20, advantage_type)
    total = d20.total + bonus_stack.total

    critical_hit = d20.critical
    critical_fumble = d20.fumble

    # Critical hit always hits, critical fumble always misses
    if critical_fumble:
        hit = False
    elif critical_hit:
        hit = True
    else:
        hit = total >= target_defense

    return AttackRoll(
        kind=kind,
        roll=d20,
        bonus=bonus_stack.total,
        total=total,
        target_defense=target_defense,
        hit=hit,
        critical_hit=critical_hit,
        critical_fumble=critical_fumble,
    )


def roll_damage(
    notation: str | DiceNotation,
    damage_type: DamageType | str,
    is_critical: bool = False,
    resistances: Iterable[str] = (),
    vulnerabilities: Iterable[str] = (),
    immunities: Iterable[str] = (),
) -> DamageRoll:
    """Roll damage for an attack.

    On a critical hit the dice count is doubled before rolling; the flat
    modifier is never doubled.

    Examples:
        >>> result = roll_damage("2d6+3", "slashing", is_critical=True)
        >>> str(result.roll.notation)  # 4d6, then +3
        '4d6+3'
    """
    base = ensure_notation(notation)
    damage_type = DamageType(damage_type).value

    to_roll = base.doubled() if is_critical else base
    damage_roll = roll_dice(to_roll)

    effective, outcome = calculate_damage_with_resistances(
        damage_roll.total, damage_type, resistances, vulnerabilities, immunities
    )
    logger.debug(
        "Damage %s %s: %d raw, %d effective (%s)",
        to_roll,
        damage_type,
        damage_roll.total,
        effective,
        outcome.value,
    )
    return DamageRoll(
        roll=damage_roll,
        damage_type=damage_type,
        raw_total=damage_roll.total,
        effective_total=effective,
        resistance=outcome,
    )


def perform_attack(
    kind: AttackKind,
    ability_scores: AbilityScores,
    proficiency_bonus: int,
    is_proficient: bool,
    target_defense: int,
    damage_notation: str | DiceNotation,
    damage_type: DamageType | str,
    resistances: Iterable[str] = (),
    vulnerabilities: Iterable[str] = (),
    immunities: Iterable[str] = (),
    extra_modifiers: Iterable[Modifier] = (),
    advantage: bool = False,
    disadvantage: bool = False,
) -> AttackResult:
    """Perform a complete attack: roll to hit, then damage on a hit.

    Returns:
        AttackResult; `damage` is None on a miss.
    """
    # Bad damage notation fails before anything is rolled
    damage_notation = ensure_notation(damage_notation)

    attack = make_attack_roll(
        kind,
        ability_scores,
        proficiency_bonus,
        is_proficient,
        target_defense,
        extra_modifiers,
        advantage,
        disadvantage,
    )

    if not attack.hit:
        if attack.critical_fumble:
            description = f"Critical fumble! Attack roll: {attack.roll.description}"
        else:
            description = (
                f"Miss! Attack roll: {attack.roll.description} "
                f"= {attack.total} vs AC {target_defense}"
            )
        return AttackResult(attack=attack, damage=None, description=description)

    damage = roll_damage(
        damage_notation,
        damage_type,
        attack.critical_hit,
        resistances,
        vulnerabilities,
        immunities,
    )

    if attack.critical_hit:
        description = f"CRITICAL HIT! Attack roll: {attack.roll.description}"
    else:
        description = (
            f"Hit! Attack roll: {attack.roll.description} "
            f"= {attack.total} vs AC {target_defense}"
        )
    description += f"\nDamage: {damage.roll.description} {damage.damage_type}"
    if damage.resistance != ResistanceOutcome.NORMAL:
        description += (
            f"\nTarget is {damage.resistance.value} to {damage.damage_type}: "
            f"{damage.raw_total} -> {damage.effective_total} damage"
        )

    return AttackResult(attack=attack, damage=damage, description=description)


def weapon_attack_bonus(
    kind: AttackKind,
    ability_scores: AbilityScores,
    proficiency_bonus: int,
    is_proficient: bool,
) -> int:
    """Flat weapon attack bonus without situational modifiers."""
    ability_mod = ability_scores.modifier(_attack_ability(kind))
    return ability_mod + (proficiency_bonus if is_proficient else 0)


def advantage_from_conditions(
    attacker_conditions: Iterable[Condition | ConditionName | str],
    target_conditions: Iterable[Condition | ConditionName | str],
    kind: AttackKind = AttackKind.MELEE,
) -> AdvantageType:
    """Work out advantage for an attack from both sides' conditions.

    Effects come from the condition catalog: the attacker's effects on its
    own attack rolls, and the target's effects on attacks against it. A
    prone target is easier to hit in melee and harder at range; spell
    attacks count as ranged. Advantage and disadvantage cancel to a normal
    roll.

    Raises:
        UnknownCondition: If a condition name is not a 5e condition.
    """
    attacker = list(attacker_conditions)
    target = list(target_conditions)

    if AttackKind(kind) == AttackKind.MELEE:
        against = (ATTACKS_AGAINST, ATTACKS_AGAINST_MELEE)
    else:
        against = (ATTACKS_AGAINST, ATTACKS_AGAINST_RANGED)

    has_advantage = has_effect(attacker, EffectType.ADVANTAGE, [ATTACK_ROLLS]) or has_effect(
        target, EffectType.ADVANTAGE, against
    )
    has_disadvantage = has_effect(
        attacker, EffectType.DISADVANTAGE, [ATTACK_ROLLS]
    ) or has_effect(target, EffectType.DISADVANTAGE, against)

    if has_advantage and has_disadvantage:
        return AdvantageType.NORMAL
    if has_advantage:
        return AdvantageType.ADVANTAGE
    if has_disadvantage:
        return AdvantageType.DISADVANTAGE
    return AdvantageType.NORMAL
