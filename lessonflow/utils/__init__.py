"""lessonflow utilities."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    """Whole-number percentage of part in whole; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


__all__ = [
    "round_half_up",
    "percent",
]
