from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() goes to even)."""
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round_half_up(part * 100 / whole)
