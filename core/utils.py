# core/utils.py

"""
Repository for program-wide utilities.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """
    Rounds a number to a fixed number of decimal places, with ties rounded away from zero.

    The float is converted to its exact decimal value before rounding, so the result matches
    fixed-point formatting of the same number (e.g. 80.125 -> 80.13), unlike `round()`,
    which rounds ties to even.

    Args:
        value (float): The number to round.
        places (int): The number of decimal places to keep. Defaults to 2.

    Returns:
        The rounded value as a float.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def mean(values: list[float]) -> float:
    if not values:
        return 0.0

    return sum(values) / len(values)
