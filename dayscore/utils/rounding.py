from __future__ import annotations

import math
from typing import Union


def round_half_up(value: float, ndigits: int = 0) -> Union[int, float]:
    """
    Round with halves going up (towards +infinity): 2.5 -> 3, -2.5 -> -2.

    Returns an int when ``ndigits`` is 0, otherwise a float.
    """
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    if ndigits == 0:
        return int(rounded)
    return rounded
