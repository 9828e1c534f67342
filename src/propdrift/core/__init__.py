"""Core module exports."""

from propdrift.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    PropDriftError,
    SnapshotError,
    StoreError,
)
from propdrift.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "PropDriftError",
    "SnapshotError",
    "StoreError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
