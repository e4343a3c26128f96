#!/usr/bin/env python3
"""
p-variation Compute - p-variation for an observations table
===========================================================

Reads a long-format observations table (one row per sample) and computes,
for every signal and every configured exponent, either:

    - the p-variation of the whole signal (default), one row per
      (entity, signal, p)
    - the rolling p-variation over config.rolling (--rolling), one row per
      (entity, signal, p, sample) where a full window ends

Input columns:
    signal_id, value            required
    entity_id                   optional, groups signals per entity
    timestamp                   optional, orders samples (row order otherwise)

Output columns:
    [entity_id], signal_id, p, n_samples, p_variation, p_variation_norm
    --rolling: [entity_id], signal_id, [timestamp], sample_index, p, rolling_p_variation

Usage:
    python -m pvar.entry_points.compute -i observations.parquet -o pvar.parquet
    python -m pvar.entry_points.compute -i obs.csv -p 1 -p 2.5 --method reference
    python -m pvar.entry_points.compute -i obs.csv --rolling -c config/pvar.yaml
    python -m pvar compute -i observations.parquet -y
"""

import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np
import polars as pl

from pvar.cli import SafeCLI
from pvar.config import PVarConfig, load_pvar_config
from pvar.db.polars_io import (
    ENTITY_COL,
    SIGNAL_COL,
    TIME_COL,
    VALUE_COL,
    read_observations,
    write_parquet_atomic,
)
from pvar.engines.python import p_variation
from pvar.engines.rolling import rolling_p_variation

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

OUTPUT_COLUMNS = ['p', 'n_samples', 'p_variation', 'p_variation_norm']


def configure_logging(verbose: bool = False, quiet: bool = False):
    """Root logging for command line runs."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    if quiet:
        logging.getLogger().setLevel(logging.WARNING)
    elif verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _group_signals(observations: pl.DataFrame) -> Tuple[List[str], pl.DataFrame]:
    """
    One row per signal with its samples in time order.

    Returns:
        (key columns, DataFrame of keys + 'values' list [+ timestamp list])
    """
    keys = [c for c in (ENTITY_COL, SIGNAL_COL) if c in observations.columns]
    aggs = [pl.col(VALUE_COL).cast(pl.Float64).alias('values')]

    if TIME_COL in observations.columns:
        observations = observations.sort(keys + [TIME_COL], maintain_order=True)
        aggs.append(pl.col(TIME_COL))

    signals = observations.group_by(keys, maintain_order=True).agg(aggs)
    return keys, signals


def compute_signal_pvar(
    observations: pl.DataFrame,
    config: Optional[PVarConfig] = None,
    p_values: Optional[Iterable[float]] = None,
) -> pl.DataFrame:
    """
    Compute p-variation for every signal in a long-format table.

    Args:
        observations: Table with signal_id, value and optional entity_id/timestamp
        config: Engine configuration (default: load_pvar_config())
        p_values: Override config.p_values

    Returns:
        DataFrame with one row per (entity, signal, p)
    """
    config = config or load_pvar_config()
    p_list: List[float] = [float(p) for p in (p_values or config.p_values)]

    logger.info("Computing p-variation...")
    start = time.time()

    keys, signals = _group_signals(observations)

    n_signals = len(signals)
    logger.info(f"Processing {n_signals} signals, p in {p_list}...")

    results = []
    skipped = 0

    for i, row in enumerate(signals.iter_rows(named=True)):
        values = np.array(row['values'], dtype=float)
        values = values[~np.isnan(values)]

        if len(values) < config.min_samples:
            skipped += 1
            continue

        for p in p_list:
            metrics = {k: row[k] for k in keys}
            result = p_variation.compute(values, config.engine_params(p))
            metrics.update({k: result[k] for k in OUTPUT_COLUMNS})
            results.append(metrics)

        if (i + 1) % 100 == 0:
            logger.info(f"  Processed {i + 1}/{n_signals} signals...")

    if skipped:
        logger.warning(f"Skipped {skipped} signals with fewer than {config.min_samples} samples")

    if not results:
        logger.warning("No signals with sufficient data")
        return pl.DataFrame(schema={
            **{k: observations.schema[k] for k in keys},
            'p': pl.Float64,
            'n_samples': pl.Int64,
            'p_variation': pl.Float64,
            'p_variation_norm': pl.Float64,
        })

    df = pl.DataFrame(results)
    elapsed = time.time() - start
    logger.info(f"p-variation: {len(df):,} rows in {elapsed:.1f}s")

    return df


def compute_rolling_pvar(
    observations: pl.DataFrame,
    config: Optional[PVarConfig] = None,
    p_values: Optional[Iterable[float]] = None,
) -> pl.DataFrame:
    """
    Compute rolling p-variation for every signal in a long-format table.

    Window and stride come from config.rolling. Only samples where a full
    window ends produce a row; signals shorter than one window produce none.

    Args:
        observations: Table with signal_id, value and optional entity_id/timestamp
        config: Engine configuration (default: load_pvar_config())
        p_values: Override config.p_values

    Returns:
        DataFrame with one row per (entity, signal, p, window end)
    """
    config = config or load_pvar_config()
    p_list: List[float] = [float(p) for p in (p_values or config.p_values)]
    window, stride = config.rolling.window, config.rolling.stride

    logger.info(f"Computing rolling p-variation (window={window}, stride={stride})...")
    start = time.time()

    keys, signals = _group_signals(observations)
    has_time = TIME_COL in signals.columns

    n_signals = len(signals)
    results = []
    skipped = 0

    for i, row in enumerate(signals.iter_rows(named=True)):
        values = np.array(row['values'], dtype=float)
        keep = ~np.isnan(values)
        values = values[keep]

        if len(values) < max(config.min_samples, window):
            skipped += 1
            continue

        times = [t for t, k in zip(row[TIME_COL], keep) if k] if has_time else None

        for p in p_list:
            rolling = rolling_p_variation.compute(
                values, config.rolling_params(p)
            )['rolling_p_variation']

            for end in np.where(~np.isnan(rolling))[0]:
                metrics = {k: row[k] for k in keys}
                if has_time:
                    metrics[TIME_COL] = times[end]
                metrics['sample_index'] = int(end)
                metrics['p'] = p
                metrics['rolling_p_variation'] = float(rolling[end])
                results.append(metrics)

        if (i + 1) % 100 == 0:
            logger.info(f"  Processed {i + 1}/{n_signals} signals...")

    if skipped:
        logger.warning(f"Skipped {skipped} signals shorter than one window ({window} samples)")

    if not results:
        logger.warning("No signals with sufficient data")
        schema = {k: observations.schema[k] for k in keys}
        if has_time:
            schema[TIME_COL] = observations.schema[TIME_COL]
        schema.update({
            'sample_index': pl.Int64,
            'p': pl.Float64,
            'rolling_p_variation': pl.Float64,
        })
        return pl.DataFrame(schema=schema)

    df = pl.DataFrame(results)
    elapsed = time.time() - start
    logger.info(f"Rolling p-variation: {len(df):,} rows in {elapsed:.1f}s")

    return df


def run(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[PVarConfig] = None,
    p_values: Optional[Iterable[float]] = None,
    rolling: bool = False,
) -> pl.DataFrame:
    """
    Read observations, compute (rolling) p-variation, write parquet.

    Returns:
        The written DataFrame
    """
    observations = read_observations(input_path)
    logger.info(f"Loaded {len(observations):,} observations from {input_path}")

    compute = compute_rolling_pvar if rolling else compute_signal_pvar
    df = compute(observations, config=config, p_values=p_values)
    n = write_parquet_atomic(df, output_path)
    logger.info(f"Wrote {n:,} rows to {output_path}")
    return df


# =============================================================================
# CLI
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    cli = SafeCLI(
        "p-variation Compute - signal-level or rolling p-variation\n\n"
        "Examples:\n"
        "    python -m pvar compute -i observations.parquet\n"
        "    python -m pvar compute -i obs.csv -o out.parquet -p 1 -p 2\n"
        "    python -m pvar compute -i obs.csv -o rolling.parquet --rolling",
        prog='pvar compute',
    )
    cli.add_input('input', '-i', help='observations (.parquet or .csv)')
    cli.add_output('output', default='pvar.parquet')
    cli.add_option('p_values', type=float, short='-p', repeat=True,
                   help='Exponent (repeatable, default: from config)')
    cli.add_option('method', short='-m', choices=['chain', 'reference'],
                   help='Algorithm (default: from config)')
    cli.add_option('config', short='-c', help='Config YAML (default: config/pvar.yaml)')
    cli.add_flag('rolling', short='-r',
                 help='Rolling p-variation over the config rolling window')
    args = cli.parse(argv)

    for p in args.p_values or []:
        if not p > 0:
            cli.error(f"p must be > 0, got {p}")

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    config = load_pvar_config(args.config) if args.config else load_pvar_config()
    if args.method:
        config = replace(config, method=args.method)

    run(args.input, args.output, config=config, p_values=args.p_values, rolling=args.rolling)

    return 0


if __name__ == '__main__':
    sys.exit(main())
