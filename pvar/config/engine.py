"""
p-variation Configuration Loader
================================

Loads engine configuration from config/pvar.yaml.

Usage:
    from pvar.config import load_pvar_config

    config = load_pvar_config()
    print(config.p_values)           # [1.0, 2.0]
    print(config.checkpoint_stride)  # 4
    print(config.rolling.window)     # 100

Missing file means defaults. A file that exists but holds bad values
raises ValueError naming the offending key.
"""

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pvar.yaml"

KNOWN_METHODS = ('chain', 'reference')

# Intervals of at most this many links are optimal after the window pass
MAX_CHECKPOINT_STRIDE = 4


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class RollingConfig:
    """Sliding-window settings for the rolling engine."""
    window: int = 100
    stride: int = 1

    def __repr__(self) -> str:
        return f"RollingConfig(window={self.window}, stride={self.stride})"


@dataclass
class PVarConfig:
    """Complete engine configuration."""
    p_values: List[float] = field(default_factory=lambda: [1.0, 2.0])
    checkpoint_stride: int = 4
    method: str = 'chain'
    min_samples: int = 2
    rolling: RollingConfig = field(default_factory=RollingConfig)
    source: Optional[Path] = None

    def validate(self) -> 'PVarConfig':
        """Check value ranges. Returns self for chaining."""
        if not self.p_values:
            raise ValueError("p_values must not be empty")
        for p in self.p_values:
            if not p > 0:
                raise ValueError(f"p_values must all be > 0, got {p}")
        if (
            not isinstance(self.checkpoint_stride, int)
            or not 1 <= self.checkpoint_stride <= MAX_CHECKPOINT_STRIDE
        ):
            raise ValueError(
                f"checkpoint_stride must be an integer in [1, {MAX_CHECKPOINT_STRIDE}], "
                f"got {self.checkpoint_stride!r}"
            )
        if self.method not in KNOWN_METHODS:
            raise ValueError(f"Unknown method: {self.method}. Options: {list(KNOWN_METHODS)}")
        if self.min_samples < 0:
            raise ValueError(f"min_samples must be >= 0, got {self.min_samples}")
        if self.rolling.window < 2:
            raise ValueError(f"rolling.window must be >= 2, got {self.rolling.window}")
        if self.rolling.stride < 1:
            raise ValueError(f"rolling.stride must be >= 1, got {self.rolling.stride}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict, as written to YAML."""
        data = asdict(self)
        data.pop('source')
        return data

    def engine_params(self, p: float) -> Dict[str, Any]:
        """Params dict for the signal-level engine at exponent p."""
        return {
            'p': p,
            'method': self.method,
            'checkpoint_stride': self.checkpoint_stride,
        }

    def rolling_params(self, p: float) -> Dict[str, Any]:
        """Params dict for the rolling engine at exponent p."""
        params = self.engine_params(p)
        params['window'] = self.rolling.window
        params['stride'] = self.rolling.stride
        return params


# =============================================================================
# CONFIG LOADING
# =============================================================================

_config_cache: Optional[PVarConfig] = None


def _find_config_path() -> Optional[Path]:
    """Find pvar.yaml next to the package, then under the working directory."""
    this_dir = Path(__file__).parent
    candidates = [
        this_dir.parent.parent / "config" / CONFIG_FILENAME,
        Path.cwd() / "config" / CONFIG_FILENAME,
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def _parse_config(raw: Dict[str, Any], source: Optional[Path] = None) -> PVarConfig:
    """Build a PVarConfig from a parsed YAML mapping."""
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping, got {type(raw).__name__}")

    defaults = PVarConfig()

    p_values = raw.get('p_values', defaults.p_values)
    if isinstance(p_values, (int, float)):
        p_values = [p_values]

    rolling_raw = raw.get('rolling') or {}
    rolling = RollingConfig(
        window=int(rolling_raw.get('window', defaults.rolling.window)),
        stride=int(rolling_raw.get('stride', defaults.rolling.stride)),
    )

    unknown = set(raw) - {'p_values', 'checkpoint_stride', 'method', 'min_samples', 'rolling'}
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

    config = PVarConfig(
        p_values=[float(p) for p in p_values],
        checkpoint_stride=raw.get('checkpoint_stride', defaults.checkpoint_stride),
        method=raw.get('method', defaults.method),
        min_samples=int(raw.get('min_samples', defaults.min_samples)),
        rolling=rolling,
        source=source,
    )
    return config.validate()


def load_pvar_config(
    path: Optional[Union[str, Path]] = None,
    force_reload: bool = False,
) -> PVarConfig:
    """
    Load engine configuration from YAML.

    Args:
        path: Explicit config file. Bypasses the cache.
        force_reload: Re-read the default file even if cached

    Returns:
        PVarConfig

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        ValueError: If a value is out of range
    """
    global _config_cache

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        with open(path, 'r') as f:
            raw = yaml.safe_load(f) or {}
        return _parse_config(raw, source=path)

    if _config_cache is not None and not force_reload:
        return _config_cache

    found = _find_config_path()
    if found is None:
        logger.debug(f"No {CONFIG_FILENAME} found, using defaults")
        _config_cache = PVarConfig().validate()
    else:
        with open(found, 'r') as f:
            raw = yaml.safe_load(f) or {}
        _config_cache = _parse_config(raw, source=found)
        logger.debug(f"Loaded config from {found}")

    return _config_cache


def clear_config_cache():
    """Drop the cached configuration."""
    global _config_cache
    _config_cache = None


def dump_config(config: PVarConfig) -> str:
    """Render a config as YAML text."""
    return yaml.safe_dump(config.to_dict(), sort_keys=False)
