"""Config module exports."""

from propdrift.config.loader import load_config, resolve_cache_dir
from propdrift.config.models import (
    HistoryConfig,
    LoggingConfig,
    PathsConfig,
    PropDriftConfig,
    TrendsConfig,
)

__all__ = [
    "load_config",
    "resolve_cache_dir",
    "PropDriftConfig",
    "HistoryConfig",
    "LoggingConfig",
    "PathsConfig",
    "TrendsConfig",
]
