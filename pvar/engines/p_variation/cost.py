"""
Edge cost of the p-variation sum.

Every link of the working chain carries |x[j] - x[i]|^p, the contribution
of one displacement to the p-variation.
"""

import math


def edge_cost(d: float, p: float) -> float:
    """
    Compute |d|^p.

    Follows IEEE pow semantics for the out-of-contract corners: a zero
    displacement with negative p gives inf instead of raising, a result
    beyond the double range gives inf, NaN propagates.
    """
    d = abs(d)
    if d == 0.0 and p < 0:
        return math.inf
    try:
        return d ** p
    except OverflowError:
        return math.inf
