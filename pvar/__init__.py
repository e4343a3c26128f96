"""
pvar - p-variation of real-valued paths
=======================================

    V_p(x) = sup over i0 < i1 < ... < ik of sum_j |x[i_{j+1}] - x[i_j]|^p

Architecture:
    - engines/p_variation/: Core algorithm (extrema, window pass, interval merge)
    - engines/python/:      Signal-level engine (one value per signal)
    - engines/rolling/:     Observation-level engine (sliding window)
    - entry_points/:        Batch computation over observation tables
    - cli.py:               Command line interface

Usage:
    # CLI
    python -m pvar value -p 2 0 1 0
    python -m pvar compute -i observations.parquet

    # Python
    from pvar import pvar
    pvar([0.0, 1.0, 0.0, 1.0, 0.0], 1.0)  # 4.0
"""

__version__ = "1.0.0"

__all__ = ['pvar', 'pvar_reference', 'engines', 'config', 'cli', '__version__']


def __getattr__(name):
    """Lazy import of submodules."""
    if name == 'pvar':
        from pvar.engines.p_variation import pvar
        return pvar
    elif name == 'pvar_reference':
        from pvar.engines.p_variation import pvar_reference
        return pvar_reference
    elif name == 'engines':
        from . import engines
        return engines
    elif name == 'config':
        from . import config
        return config
    elif name == 'cli':
        from . import cli
        return cli
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
