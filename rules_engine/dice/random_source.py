"""Unbiased bounded integers from the operating system CSPRNG.

Each call draws its own bytes from `secrets`, so there is no shared
generator state to race on.
"""

import secrets


def _bytes_needed(span: int) -> int:
    """Smallest number of bytes whose range covers `span` values."""
    return max(1, ((span - 1).bit_length() + 7) // 8)


def secure_randint(low: int, high: int) -> int:
    """Return a uniformly distributed integer in [low, high].

    Draws the minimum number of random bytes and rejects any value at or
    above the largest multiple of the span that fits in the byte range,
    so the final modulo introduces no bias.

    Args:
        low: Inclusive lower bound.
        high: Inclusive upper bound.

    Returns:
        An integer in [low, high].

    Raises:
        ValueError: If high < low.
    """
    if high < low:
        raise ValueError(f"Empty range: [{low}, {high}]")

    span = high - low + 1
    if span == 1:
        return low

    num_bytes = _bytes_needed(span)
    ceiling = 256**num_bytes
    cutoff = ceiling - (ceiling % span)

    while True:
        value = int.from_bytes(secrets.token_bytes(num_bytes), "little")
        if value < cutoff:
            return low + value % span
