"""
Reference p-variation by dynamic programming.

    best[j] = max over m < j of best[m] + |x[j] - x[m]|^p

O(n^2) time, obviously correct, and exact for every p > 0 (no convexity
assumption). Used to cross-check the chain algorithm and as the
'reference' method of the engines.
"""

from typing import Any

import numpy as np

from pvar.engines.p_variation.core import as_sequence


def pvar_reference(x: Any, p: float) -> float:
    """
    Compute the p-variation of x in O(n^2).

    Args:
        x: Ordered path values (one-dimensional array-like)
        p: Exponent

    Returns:
        p-variation as a float (0.0 for fewer than two points)
    """
    values = np.asarray(as_sequence(x), dtype=np.float64)
    n = len(values)
    if n <= 1:
        return 0.0

    best = np.zeros(n)
    for j in range(1, n):
        best[j] = np.max(best[:j] + np.abs(values[j] - values[:j]) ** p)
    return float(best[-1])
