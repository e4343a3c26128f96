"""
p-variation entry points.

    compute  - observations table -> per-signal p-variation parquet
"""
