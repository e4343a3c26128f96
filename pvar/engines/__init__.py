"""
p-variation engines.

    p_variation/  - core algorithm (chain pruning + DP reference)
    python/       - signal-level engines (one value per signal)
    rolling/      - observation-level engines (sliding window)
"""

from pvar.engines.p_variation import pvar, pvar_reference, METHODS
from pvar.engines.python.p_variation import compute as compute_p_variation
from pvar.engines.rolling.rolling_p_variation import compute as compute_rolling_p_variation

__all__ = [
    'pvar',
    'pvar_reference',
    'METHODS',
    'compute_p_variation',
    'compute_rolling_p_variation',
]
