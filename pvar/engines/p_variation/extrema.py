"""
Extrema reduction.

Along a monotone run no interior point can improve the p-variation sum
(p >= 1), so only direction reversals and the two endpoints are linked.
"""

from typing import Sequence

from pvar.engines.p_variation.chain import Chain
from pvar.engines.p_variation.cost import edge_cost


def reduce_to_extrema(x: Sequence[float], p: float) -> Chain:
    """
    Build the initial chain over the local extrema of x.

    A point is an extremum when the step into it and the step out of it
    have strictly opposite signs. Flat steps keep the previous direction.
    The last point is always linked.

    Args:
        x: Path values (length >= 1)
        p: Exponent

    Returns:
        Chain linking index 0, every local extremum and index n - 1
    """
    chain = Chain(x, p)
    n = chain.n
    nxt, prv, cost = chain.next, chain.prev, chain.cost

    last_extremum = 0
    direction = 0

    for i in range(n):
        if i + 1 < n:
            step = x[i + 1] - x[i]
            if step > 0:
                is_extremum = direction == -1
                direction = 1
            elif step < 0:
                is_extremum = direction == 1
                direction = -1
            else:
                is_extremum = False
        else:
            is_extremum = True

        if is_extremum and i != last_extremum:
            nxt[last_extremum] = i
            prv[i] = last_extremum
            cost[i] = edge_cost(x[i] - x[last_extremum], p)
            last_extremum = i

    return chain
