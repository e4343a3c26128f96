"""p-variation Configuration Module."""

from pvar.config.engine import (
    PVarConfig,
    RollingConfig,
    KNOWN_METHODS,
    MAX_CHECKPOINT_STRIDE,
    load_pvar_config,
    clear_config_cache,
    dump_config,
)

__all__ = [
    'PVarConfig',
    'RollingConfig',
    'KNOWN_METHODS',
    'MAX_CHECKPOINT_STRIDE',
    'load_pvar_config',
    'clear_config_cache',
    'dump_config',
]
