"""
p-variation of a real-valued path.

    V_p(x) = sup over i0 < i1 < ... < ik of sum_j |x[i_{j+1}] - x[i_j]|^p

Computed in near-linear time by pruning points that can never be part of
an optimal subsequence:
    1. reduce_to_extrema   - keep direction reversals and endpoints
    2. optimize_windows    - make every 3-link span optimal
    3. IntervalMerger      - merge optimal intervals pairwise until one remains
The sum of link costs over the surviving chain is the p-variation.

The result is exact for p >= 1. For 0 < p < 1 it is the value over the
extremum chain; pvar_reference() is exact for every p > 0.

Usage:
    from pvar.engines.p_variation import pvar

    pvar([0.0, 1.0, 0.0], 2.0)  # 2.0
"""

import logging
from typing import Any, List

import numpy as np

from pvar.engines.p_variation.cost import edge_cost
from pvar.engines.p_variation.extrema import reduce_to_extrema
from pvar.engines.p_variation.merge import DEFAULT_CHECKPOINT_STRIDE, IntervalMerger
from pvar.engines.p_variation.window import optimize_windows

logger = logging.getLogger(__name__)


def as_sequence(x: Any) -> List[float]:
    """
    Convert an array-like path into a flat list of floats.

    Scalars are treated as a one-point path.

    Raises:
        ValueError: If x has more than one dimension
    """
    arr = np.asarray(x, dtype=np.float64)
    if arr.ndim > 1:
        raise ValueError(f"Expected a one-dimensional path, got shape {arr.shape}")
    return arr.reshape(-1).tolist()


def pvar(x: Any, p: float, checkpoint_stride: int = DEFAULT_CHECKPOINT_STRIDE) -> float:
    """
    Compute the p-variation of a path (sum of powers, not the 1/p root).

    Args:
        x: Ordered path values (any one-dimensional array-like)
        p: Exponent, intended domain p > 0
        checkpoint_stride: Links per initial interval of the merge pass

    Returns:
        p-variation as a float
    """
    x = as_sequence(x)
    n = len(x)

    if n <= 1:
        return 0.0
    if n == 2:
        return float(edge_cost(x[0] - x[1], p))

    chain = reduce_to_extrema(x, p)
    debug = logger.isEnabledFor(logging.DEBUG)
    if debug:
        logger.debug(f"Extrema: {len(chain)} of {n} points")

    optimize_windows(chain)
    if debug:
        logger.debug(f"After window pass: {len(chain)} points")

    IntervalMerger(chain, checkpoint_stride).run()
    if debug:
        logger.debug(f"After merge: {len(chain)} points")

    return float(chain.total())
