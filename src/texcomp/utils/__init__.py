"""Numeric helpers shared by the analyzers and processors."""

import math


def normalize_with_percentile(value: float, low: float, high: float) -> float:
    """
    Map a raw metric onto [0, 1] using an expected percentile range.

    Values at or below ``low`` return 0, at or above ``high`` return 1.
    Callers guarantee ``low < high``.
    """
    if value <= low:
        return 0.0
    if value >= high:
        return 1.0
    return (value - low) / (high - low)


def clamp01(value: float) -> float:
    """Clamp a float to [0, 1]."""
    return min(1.0, max(0.0, value))


def round_half_up(value: float) -> int:
    """Round to nearest integer, ties away from zero for positives."""
    return int(math.floor(value + 0.5))


def nearest_power_of_two(n: int) -> int:
    """Round to nearest power of two."""
    if n <= 1:
        return 1
    bit_len = (n - 1).bit_length()
    lower = 1 << (bit_len - 1)
    upper = 1 << bit_len
    return lower if (n - lower) < (upper - n) else upper


def is_power_of_two(n: int) -> bool:
    """Check whether n is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0
