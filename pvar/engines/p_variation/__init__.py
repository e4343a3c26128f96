"""
p-variation engine core.

    pvar(x, p)            - near-linear chain algorithm
    pvar_reference(x, p)  - O(n^2) dynamic programming reference
"""

from pvar.engines.p_variation.chain import Chain
from pvar.engines.p_variation.core import as_sequence, pvar
from pvar.engines.p_variation.cost import edge_cost
from pvar.engines.p_variation.extrema import reduce_to_extrema
from pvar.engines.p_variation.merge import (
    DEFAULT_CHECKPOINT_STRIDE,
    CandidatePoint,
    IntervalMerger,
    merge_intervals,
)
from pvar.engines.p_variation.reference import pvar_reference
from pvar.engines.p_variation.window import WINDOW_LINKS, optimize_windows

METHODS = {
    'chain': pvar,
    'reference': pvar_reference,
}

__all__ = [
    'Chain',
    'CandidatePoint',
    'IntervalMerger',
    'DEFAULT_CHECKPOINT_STRIDE',
    'WINDOW_LINKS',
    'METHODS',
    'as_sequence',
    'edge_cost',
    'reduce_to_extrema',
    'optimize_windows',
    'merge_intervals',
    'pvar',
    'pvar_reference',
]
