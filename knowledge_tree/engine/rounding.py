"""Half-up rounding for reported percentages and averages."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties away from zero for non-negative values (2.5 -> 3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
