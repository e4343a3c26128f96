"""
Tests for the signal-level and rolling p-variation engines.
"""

import math

import numpy as np
import pytest

from pvar.engines import compute_p_variation, compute_rolling_p_variation, METHODS
from pvar.engines.python import p_variation
from pvar.engines.rolling import rolling_p_variation


# ─────────────────────────────────────────────────────────────────────
# Signal-level engine
# ─────────────────────────────────────────────────────────────────────

class TestPVariationEngine:

    def test_basic_result(self):
        result = p_variation.compute(np.array([0.0, 1.0, 0.0]), {'p': 2.0})

        assert result['p_variation'] == 2.0
        assert result['p_variation_norm'] == pytest.approx(math.sqrt(2.0))
        assert result['p'] == 2.0
        assert result['n_samples'] == 3

    def test_default_params(self):
        result = p_variation.compute(np.array([0.0, 3.0]))
        assert result['p'] == 2.0
        assert result['p_variation'] == 9.0
        assert result['p_variation_norm'] == pytest.approx(3.0)

    def test_total_variation_norm(self):
        result = p_variation.compute([0, 1, 0, 1, 0], {'p': 1})
        assert result['p_variation'] == 4.0
        assert result['p_variation_norm'] == 4.0

    def test_methods_agree(self, rng):
        y = np.cumsum(rng.normal(size=150))
        chain = p_variation.compute(y, {'p': 2.5, 'method': 'chain'})
        reference = p_variation.compute(y, {'p': 2.5, 'method': 'reference'})

        assert chain['p_variation'] == pytest.approx(reference['p_variation'], rel=1e-9)

    def test_checkpoint_stride_param(self, rng):
        y = np.cumsum(rng.normal(size=100))
        a = p_variation.compute(y, {'p': 2.0, 'checkpoint_stride': 2})
        b = p_variation.compute(y, {'p': 2.0, 'checkpoint_stride': 4})
        assert a['p_variation'] == pytest.approx(b['p_variation'], rel=1e-9)

    def test_empty_signal(self):
        result = p_variation.compute(np.array([]), {'p': 2.0})
        assert result['p_variation'] == 0.0
        assert result['p_variation_norm'] == 0.0
        assert result['n_samples'] == 0

    def test_constant_signal(self):
        result = p_variation.compute(np.ones(10), {'p': 3.0})
        assert result['p_variation'] == 0.0
        assert result['p_variation_norm'] == 0.0

    @pytest.mark.parametrize("p", [0.0, -1.0])
    def test_non_positive_p(self, p):
        with pytest.raises(ValueError, match="p must be > 0"):
            p_variation.compute(np.array([0.0, 1.0, 0.0]), {'p': p})

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown method"):
            p_variation.compute(np.array([0.0, 1.0]), {'method': 'magic'})

    def test_package_exports(self):
        assert compute_p_variation is p_variation.compute
        assert set(METHODS) == {'chain', 'reference'}


# ─────────────────────────────────────────────────────────────────────
# Rolling engine
# ─────────────────────────────────────────────────────────────────────

class TestRollingPVariationEngine:

    def test_monotone_windows(self):
        y = np.arange(10, dtype=float)
        result = rolling_p_variation.compute(y, {'p': 2.0, 'window': 4, 'stride': 1})
        rolling = result['rolling_p_variation']

        assert rolling.shape == (10,)
        assert np.all(np.isnan(rolling[:3]))
        np.testing.assert_allclose(rolling[3:], 9.0)

    def test_stride_leaves_gaps(self):
        y = np.arange(10, dtype=float)
        rolling = rolling_p_variation.compute(
            y, {'p': 1.0, 'window': 4, 'stride': 2}
        )['rolling_p_variation']

        filled = np.where(~np.isnan(rolling))[0]
        np.testing.assert_array_equal(filled, [3, 5, 7, 9])
        np.testing.assert_allclose(rolling[filled], 3.0)

    def test_short_signal_all_nan(self):
        rolling = rolling_p_variation.compute(
            np.arange(5.0), {'window': 10}
        )['rolling_p_variation']
        assert rolling.shape == (5,)
        assert np.all(np.isnan(rolling))

    def test_matches_signal_engine_per_window(self, rng):
        y = np.cumsum(rng.normal(size=60))
        params = {'p': 2.0, 'window': 20, 'stride': 7}
        rolling = rolling_p_variation.compute(y, params)['rolling_p_variation']

        for end in range(19, 60, 7):
            expected = p_variation.compute(y[end - 19:end + 1], {'p': 2.0})['p_variation']
            assert rolling[end] == pytest.approx(expected)

    def test_reference_method(self, rng):
        y = np.cumsum(rng.normal(size=40))
        chain = rolling_p_variation.compute(y, {'p': 3.0, 'window': 15})
        reference = rolling_p_variation.compute(y, {'p': 3.0, 'window': 15, 'method': 'reference'})
        np.testing.assert_allclose(
            chain['rolling_p_variation'], reference['rolling_p_variation'], rtol=1e-9
        )

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown method"):
            rolling_p_variation.compute(np.arange(5.0), {'method': 'magic'})

    def test_package_export(self):
        assert compute_rolling_p_variation is rolling_p_variation.compute


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
