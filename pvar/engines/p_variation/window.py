"""
Short-window optimization.

Principle: if |x[i] - x[i+d]|^p exceeds the sum of the d links between
them and every shorter span is already optimal, all interior points are
redundant. Applied to spans of exactly WINDOW_LINKS links, with
backtracking after every removal since the neighbouring spans change.
"""

import logging

from pvar.engines.p_variation.chain import Chain
from pvar.engines.p_variation.cost import edge_cost

logger = logging.getLogger(__name__)

WINDOW_LINKS = 3


def optimize_windows(chain: Chain) -> int:
    """
    Make every span of WINDOW_LINKS consecutive links locally optimal.

    Mutates the chain in place. On return, for every such span the sum of
    its link costs is >= the cost of joining its endpoints directly.

    Args:
        chain: Chain containing only local extrema

    Returns:
        Number of splices performed
    """
    x, p, end, head = chain.x, chain.p, chain.end, chain.head
    nxt, prv, cost = chain.next, chain.prev, chain.cost

    splices = 0
    begin = stop = head
    window_sum = 0.0
    for _ in range(WINDOW_LINKS):
        stop = nxt[stop]
        if stop == end:
            return splices
        window_sum += cost[stop]

    while True:
        join = edge_cost(x[begin] - x[stop], p)
        if window_sum >= join:
            # interior points matter here, slide one link right
            stop = nxt[stop]
            if stop == end:
                break
            begin = nxt[begin]
            window_sum -= cost[begin]
            window_sum += cost[stop]
        else:
            chain.splice(begin, stop, join)
            splices += 1

            # rebuild a window around the splice, extending left first
            begin = stop
            window_sum = 0.0
            exhausted = False
            for _ in range(WINDOW_LINKS):
                if begin != head:
                    window_sum += cost[begin]
                    begin = prv[begin]
                else:
                    stop = nxt[stop]
                    if stop == end:
                        exhausted = True
                        break
                    window_sum += cost[stop]
            if exhausted:
                break

    logger.debug(f"Window pass: {splices} splices")
    return splices
