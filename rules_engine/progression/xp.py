"""Experience point thresholds and progress toward the next level."""

from dataclasses import dataclass
from typing import Any

from rules_engine.errors import OutOfRange


MAX_LEVEL = 20

# Total XP needed to reach each level
XP_THRESHOLDS: dict[int, int] = {
    1: 0,
    2: 300,
    3: 900,
    4: 2700,
    5: 6500,
    6: 14000,
    7: 23000,
    8: 34000,
    9: 48000,
    10: 64000,
    11: 85000,
    12: 100000,
    13: 120000,
    14: 140000,
    15: 165000,
    16: 195000,
    17: 225000,
    18: 265000,
    19: 305000,
    20: 355000,
}


@dataclass(frozen=True)
class XPProgress:
    """Progress through the current level.

    Attributes:
        current: XP earned since reaching the current level.
        needed: XP between the current level and the next.
        percentage: current / needed as 0-100, one decimal place.
    """

    current: int
    needed: int
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"current": self.current, "needed": self.needed, "percentage": self.percentage}


def can_level_up(level: int, xp: int) -> bool:
    """Whether the XP total reaches the next level's threshold.

    Examples:
        >>> can_level_up(1, 299)
        False
        >>> can_level_up(1, 300)
        True
        >>> can_level_up(20, 10**9)
        False
    """
    if level >= MAX_LEVEL:
        return False
    return xp >= XP_THRESHOLDS[level + 1]


def xp_for_level(level: int) -> int:
    """Total XP required to reach a level.

    Raises:
        OutOfRange: If level is not between 1 and 20.
    """
    if level not in XP_THRESHOLDS:
        raise OutOfRange(f"Invalid level: {level}. Must be between 1 and 20.")
    return XP_THRESHOLDS[level]


def xp_progress(level: int, xp: int) -> XPProgress:
    """Progress from the current level's threshold toward the next.

    At level 20 there is nothing left to earn and progress is reported as
    complete.
    """
    if level >= MAX_LEVEL:
        return XPProgress(current=0, needed=0, percentage=100.0)

    floor = xp_for_level(level)
    needed = XP_THRESHOLDS[level + 1] - floor
    into_level = xp - floor
    percentage = min(100.0, max(0.0, into_level / needed * 100))

    return XPProgress(
        current=max(0, into_level),
        needed=needed,
        percentage=round(percentage, 1),
    )


def level_from_xp(xp: int) -> int:
    """Highest level whose threshold the XP total reaches."""
    for level in range(MAX_LEVEL, 0, -1):
        if xp >= XP_THRESHOLDS[level]:
            return level
    return 1
