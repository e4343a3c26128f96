"""
Rolling p-Variation Engine.

p-variation over sliding window.
All parameters via params dict.
"""

import numpy as np
from typing import Dict, Any

from pvar.engines.p_variation import DEFAULT_CHECKPOINT_STRIDE, pvar, pvar_reference


def compute(y: np.ndarray, params: Dict[str, Any] = None) -> dict:
    """
    Compute rolling p-variation.

    Args:
        y: Signal values
        params: Parameters:
            - p: Exponent (default 2.0)
            - window: Window size
            - stride: Step size between windows
            - method: 'chain' or 'reference'
            - checkpoint_stride: Merge granularity for 'chain'

    Returns:
        dict with 'rolling_p_variation' array, value stored at the last
        index of each window, NaN elsewhere
    """
    params = params or {}
    p = float(params.get('p', 2.0))
    window = params.get('window', 100)
    # near-linear per window, so every offset by default
    stride = params.get('stride', 1)
    method = params.get('method', 'chain')
    checkpoint_stride = params.get('checkpoint_stride', DEFAULT_CHECKPOINT_STRIDE)

    if method == 'chain':
        engine = lambda chunk: pvar(chunk, p, checkpoint_stride)
    elif method == 'reference':
        engine = lambda chunk: pvar_reference(chunk, p)
    else:
        raise ValueError(f"Unknown method: {method}. Options: ['chain', 'reference']")

    y = np.asarray(y, dtype=float)
    n = len(y)
    rolling = np.full(n, np.nan)

    if n < window:
        return {'rolling_p_variation': rolling}

    for i in range(0, n - window + 1, stride):
        rolling[i + window - 1] = engine(y[i:i + window])

    return {'rolling_p_variation': rolling}
