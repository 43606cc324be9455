"""Numeric helpers shared by the scoring engines."""

import math
from collections.abc import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def safe_ratio(value: float, target: float) -> float:
    """Return value / target, or 0 when the target is not positive."""
    if target <= 0:
        return 0.0
    return value / target


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    center = mean(values)
    variance = sum((value - center) ** 2 for value in values) / len(values)
    return math.sqrt(variance)
