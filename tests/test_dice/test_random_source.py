"""Tests for the secure random source."""

from collections import Counter
from unittest.mock import patch

import pytest

from rules_engine.dice.random_source import _bytes_needed, secure_randint


class TestBytesNeeded:
    """Tests for _bytes_needed."""

    def test_small_spans_need_one_byte(self):
        assert _bytes_needed(2) == 1
        assert _bytes_needed(20) == 1
        assert _bytes_needed(256) == 1

    def test_larger_spans(self):
        assert _bytes_needed(257) == 2
        assert _bytes_needed(65536) == 2
        assert _bytes_needed(65537) == 3


class TestSecureRandint:
    """Tests for secure_randint."""

    def test_single_value_range(self):
        assert secure_randint(5, 5) == 5

    def test_empty_range_raises(self):
        with pytest.raises(ValueError):
            secure_randint(6, 1)

    def test_values_in_range(self):
        for _ in range(200):
            assert 1 <= secure_randint(1, 20) <= 20

    @patch("rules_engine.dice.random_source.secrets.token_bytes")
    def test_rejects_biased_draws(self, mock_bytes):
        """Draws at or above the largest multiple of the span are redrawn.

        For a d20 the cutoff is 240, so 250 is rejected and 45 is kept
        (45 % 20 = 5, giving face 6).
        """
        mock_bytes.side_effect = [bytes([250]), bytes([45])]
        assert secure_randint(1, 20) == 6
        assert mock_bytes.call_count == 2

    def test_all_faces_appear(self):
        """Every face of a d6 turns up in a reasonable number of rolls."""
        counts = Counter(secure_randint(1, 6) for _ in range(600))
        assert set(counts) == {1, 2, 3, 4, 5, 6}
