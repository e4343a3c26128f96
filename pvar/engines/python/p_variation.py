"""
p-Variation Engine.

Computes the p-variation of a signal: the largest sum of |increment|^p
over all subsequences of its samples. p = 1 gives total variation,
p = 2 the supremum counterpart of realized variance.
All parameters via params dict.
"""

import numpy as np
from typing import Dict, Any

from pvar.engines.p_variation import DEFAULT_CHECKPOINT_STRIDE, pvar, pvar_reference


def compute(y: np.ndarray, params: Dict[str, Any] = None) -> dict:
    """
    Compute p-variation of signal.

    Args:
        y: Signal values
        params: Parameters:
            - p: Exponent (default 2.0)
            - method: 'chain' or 'reference' (default 'chain')
            - checkpoint_stride: Merge granularity for 'chain'

    Returns:
        dict with 'p_variation', 'p_variation_norm', 'p', 'n_samples' keys
    """
    params = params or {}
    p = float(params.get('p', 2.0))
    method = params.get('method', 'chain')

    if not p > 0:
        raise ValueError(f"p must be > 0, got {p}")

    y = np.asarray(y, dtype=float)

    if method == 'chain':
        value = pvar(y, p, params.get('checkpoint_stride', DEFAULT_CHECKPOINT_STRIDE))
    elif method == 'reference':
        value = pvar_reference(y, p)
    else:
        raise ValueError(f"Unknown method: {method}. Options: ['chain', 'reference']")

    norm = value ** (1.0 / p) if value > 0 else value

    return {
        'p_variation': float(value),
        'p_variation_norm': float(norm),
        'p': p,
        'n_samples': int(y.size),
    }
