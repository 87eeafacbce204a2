from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet does: .5 always goes up (towards +inf)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


def average(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)
