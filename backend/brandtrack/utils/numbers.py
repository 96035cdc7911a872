"""
Number helpers
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union


def round_half_up(value: float, ndigits: int = 0) -> Union[int, float]:
    """
    Round with halves going up: 38.5 -> 39, 2.5 -> 3, 12.25 -> 12.3 (ndigits=1).

    Unlike round(), which sends halves to the even neighbour (round(2.5) == 2).
    Returns an int when ndigits is 0, otherwise a float.
    """
    exponent = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)
