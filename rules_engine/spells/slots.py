"""Spell slot tables.

A SpellSlotTable holds one row per spell level the caster has, always
including the unlimited cantrip row (level 0). Spending and restoring slots
returns a new table.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any

from rules_engine.errors import NoSlotAvailable, OutOfRange
from rules_engine.spells.caster_types import (
    FULL_CASTER_SLOTS,
    MAX_PACT_SLOT_LEVEL,
    CasterType,
    caster_type_for_class,
)

logger = logging.getLogger(__name__)


MAX_SPELL_LEVEL = 9


@dataclass(frozen=True)
class SpellSlot:
    """Capacity and usage for one spell level.

    Attributes:
        level: Spell level (0-9).
        maximum: Slots available per rest; None means unlimited (cantrips).
        used: Slots spent since the last restore.
    """

    level: int
    maximum: int | None
    used: int = 0

    @property
    def unlimited(self) -> bool:
        return self.maximum is None

    @property
    def remaining(self) -> int | None:
        """Slots left, or None when unlimited."""
        if self.maximum is None:
            return None
        return max(0, self.maximum - self.used)

    @property
    def available(self) -> bool:
        return self.maximum is None or self.used < self.maximum

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"level": self.level, "max": self.maximum, "used": self.used}


@dataclass(frozen=True)
class SpellSlotTable:
    """Spell slots by level, sorted ascending."""

    slots: tuple[SpellSlot, ...] = field(default_factory=tuple)

    def get(self, level: int) -> SpellSlot | None:
        """Slot row for a level, or None if the caster has none at that level."""
        for slot in self.slots:
            if slot.level == level:
                return slot
        return None

    @property
    def levels(self) -> list[int]:
        return [slot.level for slot in self.slots]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a {level: {max, used}} mapping for serialization."""
        return {str(s.level): {"max": s.maximum, "used": s.used} for s in self.slots}

    @classmethod
    def from_dict(cls, data: dict[Any, Any]) -> "SpellSlotTable":
        """Create from a {level: {max, used}} mapping."""
        slots = [
            SpellSlot(level=int(level), maximum=row.get("max"), used=row.get("used", 0))
            for level, row in data.items()
        ]
        return cls(slots=tuple(sorted(slots, key=lambda s: s.level)))


def _table_from_counts(counts: dict[int, int]) -> SpellSlotTable:
    slots = [SpellSlot(level=0, maximum=None)]
    slots.extend(SpellSlot(level=lvl, maximum=n) for lvl, n in sorted(counts.items()) if n > 0)
    return SpellSlotTable(slots=tuple(slots))


def full_caster_slots(level: int) -> SpellSlotTable:
    """Slots for a full caster of the given (effective) level."""
    return _table_from_counts(FULL_CASTER_SLOTS.get(level, {}))


def pact_slot_level(level: int) -> int:
    """Spell level of a pact caster's slots."""
    return min(MAX_PACT_SLOT_LEVEL, math.ceil(level / 2))


def pact_slot_count(level: int) -> int:
    """Number of pact slots: 1 at level 1, 2 until 10, 3 until 16, then 4."""
    if level < 2:
        return 1
    if level < 11:
        return 2
    if level < 17:
        return 3
    return 4


def slots_for_caster_type(caster_type: CasterType, level: int) -> SpellSlotTable:
    """Build the slot table for a caster archetype at a character level.

    Raises:
        OutOfRange: If level is not between 1 and 20.
    """
    if level < 1 or level > 20:
        raise OutOfRange(f"Invalid character level: {level}. Must be between 1 and 20.")

    if caster_type == CasterType.FULL:
        return full_caster_slots(level)
    if caster_type == CasterType.HALF:
        return full_caster_slots(math.ceil(level / 2))
    if caster_type == CasterType.THIRD:
        return full_caster_slots(math.ceil(level / 3))
    if caster_type == CasterType.PACT:
        return _table_from_counts({pact_slot_level(level): pact_slot_count(level)})
    return _table_from_counts({})


def slots_for_class(class_name: str, level: int) -> SpellSlotTable:
    """Spell slot table for a class at a character level.

    Examples:
        >>> slots_for_class("Wizard", 3).get(2).maximum
        2
        >>> slots_for_class("Fighter", 10).levels
        [0]
    """
    return slots_for_caster_type(caster_type_for_class(class_name), level)


def has_slot(table: SpellSlotTable, level: int) -> bool:
    """Whether a slot of this level can be spent."""
    slot = table.get(level)
    return slot is not None and slot.available


def use_slot(table: SpellSlotTable, level: int) -> SpellSlotTable:
    """Spend one slot of the given level.

    Cantrips (level 0) never consume capacity.

    Raises:
        NoSlotAvailable: If no slot of that level remains.
    """
    if not has_slot(table, level):
        raise NoSlotAvailable(level)

    slot = table.get(level)
    if slot.unlimited:
        return table

    spent = replace(slot, used=slot.used + 1)
    logger.debug("Spent level %d slot (%d/%d used)", level, spent.used, spent.maximum)
    return SpellSlotTable(slots=tuple(spent if s.level == level else s for s in table.slots))


def restore_all(table: SpellSlotTable) -> SpellSlotTable:
    """Long rest: every slot is restored."""
    return SpellSlotTable(slots=tuple(replace(s, used=0) for s in table.slots))


def restore_short_rest(table: SpellSlotTable, caster_type: CasterType) -> SpellSlotTable:
    """Short rest: pact casters regain all slots; other casters regain none."""
    if caster_type != CasterType.PACT:
        return table
    return restore_all(table)


def highest_slot_level(table: SpellSlotTable) -> int:
    """Highest spell level with any slots (0 when only cantrips)."""
    return max(table.levels, default=0)


def highest_spell_level(class_name: str, level: int) -> int:
    """Highest spell level a class can cast at a character level."""
    return highest_slot_level(slots_for_class(class_name, level))
