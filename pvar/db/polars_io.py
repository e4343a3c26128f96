"""
p-variation Polars I/O Utilities

Reading observation tables and atomic parquet writes.

Key Functions:
    read_observations(path) - Read parquet or csv into a long-format DataFrame
    write_parquet_atomic(df, path) - Write to temp file, rename (atomic)
"""

from pathlib import Path
from typing import Union

import polars as pl

# Long format: one row per sample
SIGNAL_COL = 'signal_id'
VALUE_COL = 'value'
ENTITY_COL = 'entity_id'
TIME_COL = 'timestamp'

REQUIRED_COLUMNS = [SIGNAL_COL, VALUE_COL]


def read_observations(path: Union[str, Path]) -> pl.DataFrame:
    """
    Read an observations table from parquet or csv.

    Args:
        path: Path to .parquet or .csv file

    Returns:
        Polars DataFrame

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If required columns are missing or the format is unknown
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Observations not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.parquet':
        df = pl.read_parquet(path)
    elif suffix == '.csv':
        df = pl.read_csv(path)
    else:
        raise ValueError(f"Unsupported file type: {suffix}. Use .parquet or .csv")

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Observations missing required columns: {missing}")

    return df


def write_parquet_atomic(
    df: pl.DataFrame,
    path: Union[str, Path],
    compression: str = "zstd",
) -> int:
    """
    Atomically write a DataFrame to a parquet file.

    Writes to a temporary file first, then renames to target path.
    This ensures the target file is never in a partial/corrupt state.

    Args:
        df: Polars DataFrame to write
        path: Target path for parquet file
        compression: Compression algorithm (zstd, snappy, lz4, etc.)

    Returns:
        Number of rows written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = path.with_suffix(".parquet.tmp")

    try:
        df.write_parquet(temp_path, compression=compression)
        temp_path.replace(path)
        return len(df)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise
