"""Shared fixtures for p-variation tests."""

import itertools

import numpy as np
import polars as pl
import pytest

from pvar.config import clear_config_cache


def brute_force_pvar(x, p):
    """Max over every increasing index subsequence. Exponential, n <= 10 only."""
    n = len(x)
    best = 0.0
    for k in range(2, n + 1):
        for idx in itertools.combinations(range(n), k):
            total = sum(abs(x[idx[j + 1]] - x[idx[j]]) ** p for j in range(k - 1))
            best = max(best, total)
    return best


def chain_is_consistent(chain):
    """Check the arena invariants: increasing links, back links, cached costs."""
    idx = list(chain.indices())
    if idx[0] != 0 or idx[-1] != chain.n - 1:
        return False
    if chain.next[idx[-1]] != chain.end:
        return False
    for a, b in zip(idx, idx[1:]):
        if not a < b or chain.prev[b] != a:
            return False
        expected = abs(chain.x[b] - chain.x[a]) ** chain.p
        if not np.isclose(chain.cost[b], expected, rtol=1e-12, atol=0.0):
            return False
    return chain.cost[0] == 0.0


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def observations():
    """Long-format table, rows deliberately out of timestamp order."""
    return pl.DataFrame({
        'entity_id': ['u1', 'u1', 'u1', 'u1', 'u1', 'u1', 'u2', 'u2', 'u2'],
        'signal_id': ['a', 'a', 'a', 'b', 'b', 'b', 'a', 'a', 'a'],
        'timestamp': [2, 0, 1, 0, 1, 2, 0, 1, 2],
        'value': [0.0, 0.0, 1.0, 0.0, 2.0, 5.0, 3.0, None, 1.0],
    })


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "pvar.yaml"
    path.write_text(
        "p_values: [1.0, 3.0]\n"
        "checkpoint_stride: 2\n"
        "method: reference\n"
        "min_samples: 3\n"
        "rolling:\n"
        "  window: 10\n"
        "  stride: 5\n"
    )
    return path


@pytest.fixture(autouse=True)
def _fresh_config():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def oracle():
    return brute_force_pvar


@pytest.fixture
def check_chain():
    return chain_is_consistent
