"""Initiative and turn order.

Every function takes a CombatOrder snapshot and returns a new one; the
caller stores it and serializes concurrent updates to the same encounter.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from rules_engine.abilities import AbilityScores, initiative_modifier
from rules_engine.dice.roller import roll_d20
from rules_engine.errors import InvalidState

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class InitiativeEntry:
    """One participant's initiative roll."""

    participant_id: str
    name: str
    raw_roll: int
    modifier: int
    total: int
    rolled_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "raw_roll": self.raw_roll,
            "modifier": self.modifier,
            "total": self.total,
            "rolled_at": self.rolled_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InitiativeEntry":
        """Create from dictionary."""
        return cls(
            participant_id=data["participant_id"],
            name=data.get("name", data["participant_id"]),
            raw_roll=data["raw_roll"],
            modifier=data.get("modifier", 0),
            total=data["total"],
            rolled_at=_as_utc(datetime.fromisoformat(data["rolled_at"])),
        )


@dataclass(frozen=True)
class CombatOrder:
    """Turn order for an encounter.

    Attributes:
        order: Participant ids in turn order.
        current_index: Index into `order` of the acting participant.
        round_number: Current round, starting at 1.
        entries: Initiative entries, sorted like `order`.
    """

    order: tuple[str, ...]
    current_index: int = 0
    round_number: int = 1
    entries: tuple[InitiativeEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "order": list(self.order),
            "current_index": self.current_index,
            "round_number": self.round_number,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CombatOrder":
        """Create from dictionary."""
        return cls(
            order=tuple(data["order"]),
            current_index=data.get("current_index", 0),
            round_number=data.get("round_number", 1),
            entries=tuple(InitiativeEntry.from_dict(e) for e in data.get("entries", [])),
        )


def roll_initiative(
    participant_id: str,
    name: str,
    ability_scores: AbilityScores,
    bonuses: int = 0,
) -> InitiativeEntry:
    """Roll initiative: one d20 plus dexterity modifier plus flat bonuses.

    Examples:
        >>> entry = roll_initiative("goblin-1", "Goblin", AbilityScores(dexterity=14))
        >>> entry.modifier
        2
    """
    modifier = initiative_modifier(ability_scores, bonuses)
    d20 = roll_d20()
    raw = d20.rolls[0]
    return InitiativeEntry(
        participant_id=participant_id,
        name=name,
        raw_roll=raw,
        modifier=modifier,
        total=raw + modifier,
    )


def determine_order(
    entries: Iterable[InitiativeEntry],
    dex_modifiers: Mapping[str, int],
) -> CombatOrder:
    """Sort initiative entries into a turn order.

    Higher totals go first. Ties are broken by the higher dexterity
    modifier, then by whoever rolled first; anything still tied keeps
    its input order.

    Args:
        entries: Initiative entries in the order they were rolled.
        dex_modifiers: Dexterity modifier per participant id (missing = 0).

    Returns:
        A fresh CombatOrder at round 1, first participant acting.
    """
    ordered = sorted(
        entries,
        key=lambda e: (
            -e.total,
            -dex_modifiers.get(e.participant_id, 0),
            _as_utc(e.rolled_at),
        ),
    )
    return CombatOrder(
        order=tuple(e.participant_id for e in ordered),
        current_index=0,
        round_number=1,
        entries=tuple(ordered),
    )


def current_participant(order: CombatOrder) -> str | None:
    """Id of the participant whose turn it is, or None for an empty order."""
    if not order.order:
        return None
    return order.order[order.current_index]


def is_participant_turn(order: CombatOrder, participant_id: str) -> bool:
    """Whether it is the given participant's turn."""
    return current_participant(order) == participant_id


def advance_turn(order: CombatOrder) -> CombatOrder:
    """Move to the next participant, wrapping into a new round."""
    if not order.order:
        return order

    next_index = order.current_index + 1
    if next_index >= len(order.order):
        logger.debug("Round %d begins", order.round_number + 1)
        return replace(order, current_index=0, round_number=order.round_number + 1)
    return replace(order, current_index=next_index)


def remove_participant(order: CombatOrder, participant_id: str) -> CombatOrder:
    """Remove a participant who died or fled.

    Removing the acting participant hands the turn to whoever followed
    them (the same index). Removing someone earlier in the order shifts the
    index back so the acting participant does not change. The round number
    is preserved.

    Raises:
        InvalidState: If the participant is not in the order.
    """
    if participant_id not in order.order:
        raise InvalidState(f"Participant '{participant_id}' is not in combat")

    removed_index = order.order.index(participant_id)
    new_order = tuple(pid for pid in order.order if pid != participant_id)
    new_entries = tuple(e for e in order.entries if e.participant_id != participant_id)

    new_index = order.current_index
    if removed_index < order.current_index:
        new_index -= 1
    if new_index >= len(new_order):
        new_index = 0

    logger.debug("Removed %s from combat", participant_id)
    return CombatOrder(
        order=new_order,
        current_index=max(0, new_index),
        round_number=order.round_number,
        entries=new_entries,
    )


def add_participant(
    order: CombatOrder,
    entry: InitiativeEntry,
    dex_modifiers: Mapping[str, int],
) -> CombatOrder:
    """Add a late joiner or summon and recompute the order.

    The order is rebuilt with `determine_order`. The participant who was
    acting keeps the turn and the round number is preserved.

    Raises:
        InvalidState: If the participant is already in the order.
    """
    if entry.participant_id in order.order:
        raise InvalidState(f"Participant '{entry.participant_id}' is already in combat")

    acting = current_participant(order)
    rebuilt = determine_order([*order.entries, entry], dex_modifiers)
    index = rebuilt.order.index(acting) if acting is not None else 0

    logger.debug("Added %s to combat with initiative %d", entry.participant_id, entry.total)
    return replace(rebuilt, current_index=index, round_number=order.round_number)


def is_combat_over(order: CombatOrder, alignments: Mapping[str, str]) -> bool:
    """Whether at most one side remains among the participants still in combat."""
    remaining = {alignments.get(pid) for pid in order.order}
    return len(remaining) <= 1
