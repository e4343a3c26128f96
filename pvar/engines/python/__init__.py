"""
p-variation Python Engines - Signal-level computations.

Each engine computes ONE thing.
"""

from . import p_variation

__all__ = [
    'p_variation',
]
