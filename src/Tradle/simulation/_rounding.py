"""Rounding helpers shared by the simulation modules."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (towards +inf).

    Python's ``round()`` rounds half to even, which shifts starting cash and
    targets by 100 on exact halves.
    """
    return math.floor(value + 0.5)


def round_cents(value: float) -> float:
    """Round a price to two decimal places."""
    return round(value, 2)
