"""Tests for XP thresholds and progress."""

import pytest

from rules_engine.errors import OutOfRange
from rules_engine.progression.xp import (
    XP_THRESHOLDS,
    can_level_up,
    level_from_xp,
    xp_for_level,
    xp_progress,
)


class TestCanLevelUp:
    """Tests for can_level_up."""

    def test_just_below_threshold(self):
        assert not can_level_up(1, 299)

    def test_at_threshold(self):
        assert can_level_up(1, 300)

    def test_never_at_level_20(self):
        assert not can_level_up(20, 0)
        assert not can_level_up(20, 10_000_000)

    def test_mid_levels(self):
        assert can_level_up(4, 6500)
        assert not can_level_up(4, 6499)


class TestThresholds:
    """Tests for the XP table."""

    def test_strictly_increasing(self):
        values = [XP_THRESHOLDS[level] for level in range(1, 21)]
        assert values == sorted(values)
        assert len(set(values)) == 20

    def test_xp_for_level(self):
        assert xp_for_level(1) == 0
        assert xp_for_level(5) == 6500
        assert xp_for_level(20) == 355000

    @pytest.mark.parametrize("level", [0, 21])
    def test_xp_for_invalid_level(self, level):
        with pytest.raises(OutOfRange):
            xp_for_level(level)


class TestXPProgress:
    """Tests for xp_progress."""

    def test_halfway(self):
        progress = xp_progress(1, 150)
        assert progress.current == 150
        assert progress.needed == 300
        assert progress.percentage == 50.0

    def test_rounds_to_one_decimal(self):
        assert xp_progress(2, 500).percentage == 33.3

    def test_clamped_above(self):
        assert xp_progress(1, 1000).percentage == 100.0

    def test_clamped_below(self):
        progress = xp_progress(3, 100)
        assert progress.current == 0
        assert progress.percentage == 0.0

    def test_max_level(self):
        progress = xp_progress(20, 400000)
        assert (progress.current, progress.needed, progress.percentage) == (0, 0, 100.0)


class TestLevelFromXP:
    @pytest.mark.parametrize(
        "xp,level", [(0, 1), (299, 1), (300, 2), (6499, 4), (6500, 5), (355000, 20), (999999, 20)]
    )
    def test_level_from_xp(self, xp, level):
        assert level_from_xp(xp) == level
