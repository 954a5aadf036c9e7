"""Casting spells: slot checks, concentration, spell attacks and saves.

A caster has at most one ConcentrationState. Starting a new concentration
spell replaces the previous record; the caller stores whichever record
`cast_spell` returns.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from rules_engine.abilities import Ability, AbilityScores, spell_attack_bonus, spell_save_dc
from rules_engine.dice.parser import ensure_notation
from rules_engine.dice.roller import resolve_advantage, roll_d20
from rules_engine.dice.types import DiceNotation
from rules_engine.errors import InvalidState, NoSlotAvailable, OutOfRange
from rules_engine.spells.slots import MAX_SPELL_LEVEL, SpellSlotTable, has_slot, use_slot

logger = logging.getLogger(__name__)


# Concentration DC never drops below this
CONCENTRATION_MIN_DC = 10


class SpellSchool(str, Enum):
    """The eight schools of magic."""

    ABJURATION = "abjuration"
    CONJURATION = "conjuration"
    DIVINATION = "divination"
    ENCHANTMENT = "enchantment"
    EVOCATION = "evocation"
    ILLUSION = "illusion"
    NECROMANCY = "necromancy"
    TRANSMUTATION = "transmutation"


@dataclass(frozen=True)
class Spell:
    """The catalog fields the engine reads from a spell record."""

    name: str
    level: int
    school: SpellSchool = SpellSchool.EVOCATION
    requires_concentration: bool = False
    ritual: bool = False
    duration_rounds: int | None = None
    damage_type: str | None = None
    saving_throw: Ability | None = None
    attack_roll: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.level <= MAX_SPELL_LEVEL:
            raise OutOfRange(f"Invalid spell level: {self.level}. Must be between 0 and 9.")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Spell":
        """Create from a catalog record."""
        saving_throw = data.get("saving_throw")
        return cls(
            name=data["name"],
            level=data["level"],
            school=SpellSchool(data.get("school", "evocation")),
            requires_concentration=data.get("requires_concentration", False),
            ritual=data.get("ritual", False),
            duration_rounds=data.get("duration_rounds"),
            damage_type=data.get("damage_type"),
            saving_throw=Ability(saving_throw) if saving_throw else None,
            attack_roll=data.get("attack_roll", False),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConcentrationState:
    """An active concentration spell."""

    spell_name: str
    spell_level: int
    rounds_remaining: int
    caster_id: str
    started_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "spell_name": self.spell_name,
            "spell_level": self.spell_level,
            "rounds_remaining": self.rounds_remaining,
            "caster_id": self.caster_id,
            "started_at": self.started_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConcentrationState":
        """Create from dictionary."""
        return cls(
            spell_name=data["spell_name"],
            spell_level=data["spell_level"],
            rounds_remaining=data["rounds_remaining"],
            caster_id=data["caster_id"],
            started_at=datetime.fromisoformat(data["started_at"]),
        )


@dataclass(frozen=True)
class CastCheck:
    """Whether a spell can be cast right now, and why not."""

    can_cast: bool
    reason: str | None = None


@dataclass(frozen=True)
class CastOutcome:
    """Snapshots after casting: the slot table and the concentration record."""

    slots: SpellSlotTable
    concentration: ConcentrationState | None
    ended_concentration: ConcentrationState | None = None


@dataclass(frozen=True)
class ConcentrationCheck:
    """Result of a constitution save to keep concentration."""

    success: bool
    dc: int
    roll: int
    total: int


@dataclass(frozen=True)
class SpellAttackResult:
    """A spell attack roll against a target's armor class."""

    hit: bool
    roll: int
    total: int
    critical: bool
    fumble: bool


@dataclass(frozen=True)
class SpellSaveResult:
    """A target's saving throw against the caster's spell save DC.

    `success` means the target resisted the spell.
    """

    success: bool
    save_dc: int
    save_roll: int
    save_total: int


def can_cast(
    spell: Spell,
    slots: SpellSlotTable,
    concentration: ConcentrationState | None = None,
) -> CastCheck:
    """Check slot availability and concentration for a spell.

    Fails when no slot of the spell's level remains, or when the caster is
    already concentrating and the new spell also requires concentration.
    """
    if spell.level > 0 and not has_slot(slots, spell.level):
        return CastCheck(False, f"No level {spell.level} spell slots available")
    if spell.requires_concentration and concentration is not None:
        return CastCheck(False, "Already concentrating on another spell")
    return CastCheck(True)


def start_concentration(
    spell_name: str,
    spell_level: int,
    duration_rounds: int,
    caster_id: str,
    started_at: datetime | None = None,
) -> ConcentrationState:
    """Begin concentrating on a spell."""
    return ConcentrationState(
        spell_name=spell_name,
        spell_level=spell_level,
        rounds_remaining=duration_rounds,
        caster_id=caster_id,
        started_at=started_at or _utcnow(),
    )


def break_concentration(concentration: ConcentrationState | None) -> None:
    """End concentration, voluntarily or because a check failed."""
    if concentration is not None:
        logger.debug(
            "%s stops concentrating on %s", concentration.caster_id, concentration.spell_name
        )
    return None


def cast_spell(
    spell: Spell,
    slots: SpellSlotTable,
    caster_id: str,
    concentration: ConcentrationState | None = None,
    slot_level: int | None = None,
    duration_rounds: int | None = None,
) -> CastOutcome:
    """Cast a spell: spend the slot and update concentration.

    A concentration spell replaces any previous concentration record, which
    is returned as `ended_concentration`. Non-concentration spells leave the
    existing record untouched.

    Args:
        spell: The spell being cast.
        slots: Caster's current slot table.
        caster_id: Caster participant id.
        concentration: Caster's current concentration record, if any.
        slot_level: Slot level to spend when upcasting (defaults to the
            spell's level).
        duration_rounds: Concentration duration; defaults to the spell's.

    Raises:
        NoSlotAvailable: If the slot level is exhausted.
        InvalidState: If upcasting below the spell's level or the
            concentration record belongs to another caster.
    """
    level = spell.level if slot_level is None else slot_level
    if level < spell.level:
        raise InvalidState(f"Cannot cast level {spell.level} spell with a level {level} slot")
    if concentration is not None and concentration.caster_id != caster_id:
        raise InvalidState(
            f"Concentration record belongs to '{concentration.caster_id}', not '{caster_id}'"
        )
    if level > 0 and not has_slot(slots, level):
        raise NoSlotAvailable(level)

    new_slots = use_slot(slots, level) if level > 0 else slots

    if not spell.requires_concentration:
        return CastOutcome(slots=new_slots, concentration=concentration)

    rounds = duration_rounds if duration_rounds is not None else spell.duration_rounds
    if rounds is None:
        raise InvalidState(f"Concentration spell '{spell.name}' needs a duration")

    new_concentration = start_concentration(spell.name, level, rounds, caster_id)
    return CastOutcome(
        slots=new_slots,
        concentration=new_concentration,
        ended_concentration=concentration,
    )


def concentration_check(
    damage_taken: int,
    constitution: int,
    proficiency_bonus: int,
    is_proficient: bool,
    advantage: bool = False,
    disadvantage: bool = False,
) -> ConcentrationCheck:
    """Constitution save to keep concentrating after taking damage.

    DC = 10 or half the damage taken (rounded down), whichever is higher.

    Args:
        damage_taken: Damage from the triggering hit.
        constitution: Caster's constitution score.
        proficiency_bonus: Caster's proficiency bonus.
        is_proficient: Proficient in constitution saves.

    Examples:
        >>> concentration_check(30, 14, 2, False).dc
        15
    """
    dc = max(CONCENTRATION_MIN_DC, damage_taken // 2)
    bonus = AbilityScores(constitution=constitution).modifier(Ability.CONSTITUTION)
    if is_proficient:
        bonus += proficiency_bonus

    d20 = roll_d20(bonus, resolve_advantage(advantage, disadvantage))
    return ConcentrationCheck(
        success=d20.total >= dc,
        dc=dc,
        roll=d20.rolls[0],
        total=d20.total,
    )


def decrement_concentration(
    concentration: ConcentrationState | None,
) -> ConcentrationState | None:
    """Tick one round off a concentration spell; None once it runs out."""
    if concentration is None:
        return None

    remaining = concentration.rounds_remaining - 1
    if remaining <= 0:
        logger.debug("%s's %s expires", concentration.caster_id, concentration.spell_name)
        return None
    return replace(concentration, rounds_remaining=remaining)


def make_spell_attack(
    spellcasting_ability: Ability | str,
    ability_scores: AbilityScores,
    proficiency_bonus: int,
    target_defense: int,
    advantage: bool = False,
    disadvantage: bool = False,
) -> SpellAttackResult:
    """Spell attack roll against armor class.

    A natural 20 always hits and a natural 1 always misses.
    """
    bonus = spell_attack_bonus(spellcasting_ability, ability_scores, proficiency_bonus)
    d20 = roll_d20(bonus, resolve_advantage(advantage, disadvantage))
    if d20.fumble:
        hit = False
    else:
        hit = d20.critical or d20.total >= target_defense
    return SpellAttackResult(
        hit=hit,
        roll=d20.rolls[0],
        total=d20.total,
        critical=d20.critical,
        fumble=d20.fumble,
    )


def make_spell_save(
    spellcasting_ability: Ability | str,
    caster_scores: AbilityScores,
    caster_proficiency: int,
    save_ability: Ability | str,
    target_scores: AbilityScores,
    target_proficiency: int,
    target_is_proficient: bool,
    advantage: bool = False,
    disadvantage: bool = False,
) -> SpellSaveResult:
    """Target's saving throw against the caster's spell save DC."""
    save_dc = spell_save_dc(spellcasting_ability, caster_scores, caster_proficiency)
    bonus = target_scores.modifier(save_ability)
    if target_is_proficient:
        bonus += target_proficiency

    d20 = roll_d20(bonus, resolve_advantage(advantage, disadvantage))
    return SpellSaveResult(
        success=d20.total >= save_dc,
        save_dc=save_dc,
        save_roll=d20.rolls[0],
        save_total=d20.total,
    )


def upcast_damage(
    base_damage: str | DiceNotation,
    base_level: int,
    cast_level: int,
    dice_per_level: int,
) -> DiceNotation:
    """Damage notation for a spell cast with a higher-level slot.

    Examples:
        >>> str(upcast_damage("8d6", 3, 5, 1))  # Fireball at 5th level
        '10d6'
    """
    base = ensure_notation(base_damage)
    if cast_level <= base_level:
        return base
    return base.with_count(base.count + (cast_level - base_level) * dice_per_level)
