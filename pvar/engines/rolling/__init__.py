"""
p-variation Rolling Engines - Observation-level computations.

Each engine computes values for every observation (rolling window).
"""

from . import rolling_p_variation

__all__ = [
    'rolling_p_variation',
]
