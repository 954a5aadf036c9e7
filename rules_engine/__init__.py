"""Tabletop RPG rules engine.

Pure, synchronous computations for 5e-style dice, attacks, initiative,
death saves, spellcasting and character progression. Every operation
returns a fresh immutable snapshot; callers own persistence and ordering.
"""

__version__ = "0.1.0"
