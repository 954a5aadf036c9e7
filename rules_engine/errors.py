"""Error kinds raised by the rules engine.

Every error is raised immediately at the call that detected it. The engine
never retries and never recovers silently: inputs are either well-formed or
they are not.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rules_engine.progression.xp import XPProgress


class RulesEngineError(Exception):
    """Base class for all rules engine errors."""

    pass


class InvalidNotation(RulesEngineError, ValueError):
    """Dice notation does not match the `[count]d<sides>[+|-mod]` grammar."""

    pass


class OutOfRange(RulesEngineError, ValueError):
    """A numeric input lies outside its allowed set.

    Raised for written die counts outside 1-100, non-standard die sizes, HP
    rolls outside the hit die, levels outside 1-20, condition durations below
    -1 and exhaustion levels outside 0-6.
    """

    pass


class UnknownCondition(RulesEngineError, ValueError):
    """A condition name is not one of the 5e conditions."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown condition: '{name}'")
        self.name = name


class ConflictingAdvantage(RulesEngineError, ValueError):
    """Advantage and disadvantage were both requested for the same roll."""

    pass


class NoSlotAvailable(RulesEngineError):
    """A spell slot was spent at a level with no remaining capacity."""

    def __init__(self, level: int) -> None:
        super().__init__(f"No spell slots available for level {level}")
        self.level = level


class InvalidState(RulesEngineError):
    """An operation was invoked on a snapshot in the wrong state."""

    pass


class MaxLevelReached(RulesEngineError):
    """A level-up was attempted at level 20."""

    def __init__(self, level: int = 20) -> None:
        super().__init__(f"Already at maximum level ({level})")
        self.level = level


class InsufficientExperience(RulesEngineError):
    """A level-up was applied without enough experience points.

    `can_level_up` never raises this; it only reports False. The error is
    for callers that apply a level-up anyway.
    """

    def __init__(self, level: int, progress: "XPProgress") -> None:
        super().__init__(
            f"Not enough experience points to leave level {level} "
            f"({progress.current}/{progress.needed})"
        )
        self.level = level
        self.progress = progress
