"""Death saving throws.

A participant at exactly 0 HP makes a DC 10 save each turn. The state is
one of three variants: ACTIVE (counting successes and failures),
STABILIZED or DEAD. Terminal variants always carry zeroed counters.

Transitions:
    ACTIVE --nat 20--> STABILIZED (regains 1 HP)
    ACTIVE --3 successes--> STABILIZED
    ACTIVE --3 failures / massive damage--> DEAD
    ACTIVE | STABILIZED --healing--> STABILIZED (conscious at healed HP)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rules_engine.dice.roller import resolve_advantage, roll_d20
from rules_engine.errors import InvalidState

logger = logging.getLogger(__name__)


DEATH_SAVE_DC = 10
SAVES_TO_STABILIZE = 3
FAILURES_TO_DIE = 3


class DeathSaveStatus(str, Enum):
    """Which variant the death-save state is in."""

    ACTIVE = "active"
    STABILIZED = "stabilized"
    DEAD = "dead"


@dataclass(frozen=True)
class DeathSaveState:
    """Death save counters for a participant at 0 HP."""

    status: DeathSaveStatus = DeathSaveStatus.ACTIVE
    successes: int = 0
    failures: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.successes <= SAVES_TO_STABILIZE:
            raise InvalidState(f"Death save successes out of range: {self.successes}")
        if not 0 <= self.failures <= FAILURES_TO_DIE:
            raise InvalidState(f"Death save failures out of range: {self.failures}")
        if self.status != DeathSaveStatus.ACTIVE and (self.successes or self.failures):
            raise InvalidState(f"A {self.status.value} state cannot carry save counters")

    @property
    def stabilized(self) -> bool:
        return self.status == DeathSaveStatus.STABILIZED

    @property
    def dead(self) -> bool:
        return self.status == DeathSaveStatus.DEAD

    @property
    def active(self) -> bool:
        return self.status == DeathSaveStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "successes": self.successes,
            "failures": self.failures,
            "stabilized": self.stabilized,
            "dead": self.dead,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeathSaveState":
        """Create from dictionary.

        Accepts either a `status` field or the `stabilized`/`dead` flags.
        """
        if "status" in data:
            status = DeathSaveStatus(data["status"])
        elif data.get("dead"):
            status = DeathSaveStatus.DEAD
        elif data.get("stabilized"):
            status = DeathSaveStatus.STABILIZED
        else:
            status = DeathSaveStatus.ACTIVE

        if status != DeathSaveStatus.ACTIVE:
            return cls(status=status)
        return cls(
            status=status,
            successes=data.get("successes", 0),
            failures=data.get("failures", 0),
        )


STABILIZED = DeathSaveState(status=DeathSaveStatus.STABILIZED)
DEAD = DeathSaveState(status=DeathSaveStatus.DEAD)


@dataclass(frozen=True)
class DeathSaveOutcome:
    """Result of one death saving throw.

    Attributes:
        state: The new death-save state.
        roll: Kept d20 face.
        total: d20 total (no modifiers apply by default).
        success: Whether the save met DC 10.
        critical: Natural 20.
        fumble: Natural 1.
        regained_hp: HP the caller must set (1 on a natural 20), else None.
        description: Human-readable outcome.
    """

    state: DeathSaveState
    roll: int
    total: int
    success: bool
    critical: bool
    fumble: bool
    regained_hp: int | None
    description: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "state": self.state.to_dict(),
            "roll": self.roll,
            "total": self.total,
            "success": self.success,
            "critical": self.critical,
            "fumble": self.fumble,
            "regained_hp": self.regained_hp,
            "description": self.description,
        }


@dataclass(frozen=True)
class HealingOutcome:
    """Result of healing a participant at 0 HP."""

    new_hp: int
    state: DeathSaveState


def _require_active(state: DeathSaveState, action: str) -> None:
    if not state.active:
        raise InvalidState(f"Cannot {action}: participant is {state.status.value}")


def should_make_death_saves(current_hp: int) -> bool:
    """Death saves start when hit points reach exactly 0."""
    return current_hp == 0


def start_death_saves() -> DeathSaveState:
    """Fresh death-save state for a participant who just dropped to 0 HP."""
    return DeathSaveState()


def _record_failures(state: DeathSaveState, count: int) -> DeathSaveState:
    failures = state.failures + count
    if failures >= FAILURES_TO_DIE:
        return DEAD
    return DeathSaveState(successes=state.successes, failures=failures)


def make_death_save(
    state: DeathSaveState,
    advantage: bool = False,
    disadvantage: bool = False,
    bonus: int = 0,
) -> DeathSaveOutcome:
    """Make a death saving throw.

    Args:
        state: Current ACTIVE death-save state.
        advantage: Roll with advantage.
        disadvantage: Roll with disadvantage.
        bonus: Flat bonus from features (e.g., Bless).

    Returns:
        DeathSaveOutcome with the new state.

    Raises:
        InvalidState: If the participant is stabilized or dead.
        ConflictingAdvantage: If both advantage and disadvantage are set.
    """
    _require_active(state, "make a death save")

    d20 = roll_d20(bonus, resolve_advantage(advantage, disadvantage))
    success = d20.total >= DEATH_SAVE_DC
    regained_hp = None

    if d20.critical:
        new_state = STABILIZED
        regained_hp = 1
        description = "Natural 20! You regain 1 HP and become conscious!"
    elif d20.fumble:
        new_state = _record_failures(state, 2)
        failures = FAILURES_TO_DIE if new_state.dead else new_state.failures
        description = f"Natural 1! Two death save failures ({failures}/3)"
        if new_state.dead:
            description += " - YOU DIED!"
    elif success:
        successes = state.successes + 1
        if successes >= SAVES_TO_STABILIZE:
            new_state = STABILIZED
            description = f"Death save success! ({successes}/3 successes) - You are stabilized!"
        else:
            new_state = DeathSaveState(successes=successes, failures=state.failures)
            description = f"Death save success! ({successes}/3 successes)"
    else:
        new_state = _record_failures(state, 1)
        failures = FAILURES_TO_DIE if new_state.dead else new_state.failures
        description = f"Death save failure. ({failures}/3 failures)"
        if new_state.dead:
            description += " - YOU DIED!"

    logger.debug("Death save %s -> %s", d20.description, new_state.status.value)
    return DeathSaveOutcome(
        state=new_state,
        roll=d20.rolls[0],
        total=d20.total,
        success=success,
        critical=d20.critical,
        fumble=d20.fumble,
        regained_hp=regained_hp,
        description=description,
    )


def take_damage_at_zero_hp(
    state: DeathSaveState,
    damage: int,
    max_hp: int,
    is_critical: bool = False,
) -> DeathSaveState:
    """Apply damage to a participant already at 0 HP.

    Damage of at least the participant's maximum HP kills outright,
    whatever the counters say. Otherwise the hit counts as one failed save,
    or two on a critical hit.

    Raises:
        InvalidState: If the participant is stabilized or dead.
    """
    _require_active(state, "take damage at 0 HP")

    if damage >= max_hp:
        logger.debug("Massive damage (%d >= %d): instant death", damage, max_hp)
        return DEAD
    return _record_failures(state, 2 if is_critical else 1)


def heal_at_zero_hp(state: DeathSaveState, amount: int) -> HealingOutcome:
    """Heal a participant at 0 HP.

    Any healing restores consciousness at the healed amount and clears the
    counters.

    Raises:
        InvalidState: If the participant is dead or the amount is not positive.
    """
    if state.dead:
        raise InvalidState("Cannot heal at 0 HP: participant is dead")
    if amount < 1:
        raise InvalidState(f"Healing amount must be positive, got {amount}")
    return HealingOutcome(new_hp=amount, state=STABILIZED)


def stabilize(state: DeathSaveState) -> DeathSaveState:
    """Stabilize without healing (Medicine check, Spare the Dying).

    Raises:
        InvalidState: If the participant is dead.
    """
    if state.dead:
        raise InvalidState("Cannot stabilize: participant is dead")
    return STABILIZED


def death_save_status(state: DeathSaveState) -> str:
    """Short status line for display."""
    if state.dead:
        return "DEAD"
    if state.stabilized:
        return "Stabilized"
    return f"Making death saves ({state.successes} successes, {state.failures} failures)"
