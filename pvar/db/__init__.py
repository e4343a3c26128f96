"""Observation I/O."""

from pvar.db.polars_io import (
    read_observations,
    write_parquet_atomic,
    SIGNAL_COL,
    VALUE_COL,
    ENTITY_COL,
    TIME_COL,
    REQUIRED_COLUMNS,
)

__all__ = [
    'read_observations',
    'write_parquet_atomic',
    'SIGNAL_COL',
    'VALUE_COL',
    'ENTITY_COL',
    'TIME_COL',
    'REQUIRED_COLUMNS',
]
