"""
Tests for observation I/O and the batch compute entry point.
"""

import polars as pl
import pytest

from pvar.config import PVarConfig, RollingConfig, load_pvar_config
from pvar.db import read_observations, write_parquet_atomic
from pvar.entry_points.compute import compute_rolling_pvar, compute_signal_pvar, run


def _lookup(df, **keys):
    expr = pl.lit(True)
    for col, value in keys.items():
        expr = expr & (pl.col(col) == value)
    rows = df.filter(expr)
    assert len(rows) == 1
    return rows.row(0, named=True)


# ─────────────────────────────────────────────────────────────────────
# Polars I/O
# ─────────────────────────────────────────────────────────────────────

class TestPolarsIO:

    def test_parquet_round_trip(self, observations, tmp_path):
        path = tmp_path / "nested" / "obs.parquet"
        assert write_parquet_atomic(observations, path) == len(observations)
        assert not path.with_suffix(".parquet.tmp").exists()

        df = read_observations(path)
        assert df.equals(observations)

    def test_csv(self, observations, tmp_path):
        path = tmp_path / "obs.csv"
        observations.write_csv(path)

        df = read_observations(path)
        assert df.columns == observations.columns
        assert len(df) == len(observations)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_observations(tmp_path / "missing.parquet")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "obs.json"
        path.write_text("{}")
        with pytest.raises(ValueError, match="Unsupported"):
            read_observations(path)

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "obs.parquet"
        pl.DataFrame({'signal_id': ['a'], 'reading': [1.0]}).write_parquet(path)
        with pytest.raises(ValueError, match="value"):
            read_observations(path)


# ─────────────────────────────────────────────────────────────────────
# Batch compute
# ─────────────────────────────────────────────────────────────────────

class TestComputeSignalPvar:

    def test_orders_by_timestamp(self, observations):
        """u1/a sorted by timestamp is [0, 1, 0]; row order would be [0, 0, 1]."""
        df = compute_signal_pvar(observations, PVarConfig(p_values=[2.0]))

        row = _lookup(df, entity_id='u1', signal_id='a')
        assert row['p_variation'] == 2.0
        assert row['n_samples'] == 3
        assert row['p'] == 2.0

    def test_one_row_per_signal_and_p(self, observations):
        df = compute_signal_pvar(observations, PVarConfig(p_values=[1.0, 2.0]))

        assert len(df) == 6
        assert df.columns == [
            'entity_id', 'signal_id', 'p', 'n_samples', 'p_variation', 'p_variation_norm'
        ]
        row = _lookup(df, entity_id='u1', signal_id='b', p=1.0)
        assert row['p_variation'] == 5.0
        row = _lookup(df, entity_id='u1', signal_id='b', p=2.0)
        assert row['p_variation'] == 25.0
        assert row['p_variation_norm'] == pytest.approx(5.0)

    def test_nulls_dropped(self, observations):
        """u2/a is [3, null, 1] -> [3, 1]."""
        df = compute_signal_pvar(observations, PVarConfig(p_values=[2.0]))

        row = _lookup(df, entity_id='u2', signal_id='a')
        assert row['n_samples'] == 2
        assert row['p_variation'] == 4.0

    def test_min_samples_skips(self, observations, caplog):
        with caplog.at_level("WARNING"):
            df = compute_signal_pvar(observations, PVarConfig(p_values=[2.0], min_samples=3))

        assert len(df) == 2
        assert df.filter(pl.col('entity_id') == 'u2').is_empty()
        assert "Skipped 1 signals" in caplog.text

    def test_p_values_override(self, observations):
        df = compute_signal_pvar(observations, PVarConfig(p_values=[2.0]), p_values=[3.0])
        assert df['p'].unique().to_list() == [3.0]

    def test_without_entity_or_timestamp(self):
        obs = pl.DataFrame({
            'signal_id': ['x'] * 5 + ['y'] * 3,
            'value': [0.0, 2.0, 1.0, 3.0, 0.0, 1.0, 2.0, 3.0],
        })
        df = compute_signal_pvar(obs, PVarConfig(p_values=[1.0]))

        assert df.columns[0] == 'signal_id'
        assert _lookup(df, signal_id='x')['p_variation'] == 8.0
        assert _lookup(df, signal_id='y')['p_variation'] == 2.0

    def test_reference_method(self, observations):
        chain = compute_signal_pvar(observations, PVarConfig(p_values=[1.5]))
        reference = compute_signal_pvar(
            observations, PVarConfig(p_values=[1.5], method='reference')
        )
        assert chain['p_variation'].to_list() == pytest.approx(reference['p_variation'].to_list())

    def test_no_signals_left(self, observations):
        df = compute_signal_pvar(observations, PVarConfig(p_values=[2.0], min_samples=100))

        assert df.is_empty()
        assert 'p_variation' in df.columns
        assert 'signal_id' in df.columns


class TestComputeRollingPvar:

    def test_rows_at_window_ends(self, observations, caplog):
        config = PVarConfig(p_values=[1.0], rolling=RollingConfig(window=3, stride=1))
        with caplog.at_level("WARNING"):
            df = compute_rolling_pvar(observations, config)

        assert df.columns == [
            'entity_id', 'signal_id', 'timestamp', 'sample_index', 'p', 'rolling_p_variation'
        ]
        assert len(df) == 2

        row = _lookup(df, entity_id='u1', signal_id='a')
        assert row['rolling_p_variation'] == 2.0
        assert row['sample_index'] == 2
        assert row['timestamp'] == 2
        assert _lookup(df, entity_id='u1', signal_id='b')['rolling_p_variation'] == 5.0

        # u2/a has two samples left after the null is dropped
        assert df.filter(pl.col('entity_id') == 'u2').is_empty()
        assert "Skipped 1 signals shorter than one window" in caplog.text

    def test_window_and_stride_from_config_file(self, config_file, tmp_path):
        source = tmp_path / "obs.parquet"
        target = tmp_path / "rolling.parquet"
        pl.DataFrame({
            'signal_id': ['s'] * 25,
            'value': [float(i % 2) for i in range(25)],
        }).write_parquet(source)

        df = run(source, target, config=load_pvar_config(config_file), rolling=True)

        # window 10, stride 5: windows end at 9, 14, 19, 24; p in [1, 3]
        assert len(df) == 8
        for p in (1.0, 3.0):
            rows = df.filter(pl.col('p') == p)
            assert rows['sample_index'].to_list() == [9, 14, 19, 24]
            assert rows['rolling_p_variation'].to_list() == pytest.approx([9.0] * 4)
        assert pl.read_parquet(target).equals(df)

    def test_no_full_window(self, observations):
        df = compute_rolling_pvar(
            observations, PVarConfig(rolling=RollingConfig(window=50))
        )

        assert df.is_empty()
        assert 'timestamp' in df.columns
        assert 'rolling_p_variation' in df.columns


class TestRun:

    def test_writes_parquet(self, observations, tmp_path):
        source = tmp_path / "obs.parquet"
        target = tmp_path / "out" / "pvar.parquet"
        observations.write_parquet(source)

        df = run(source, target, config=PVarConfig(p_values=[2.0]))

        assert target.exists()
        assert pl.read_parquet(target).equals(df)
        assert len(df) == 3


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
