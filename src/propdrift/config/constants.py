"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are storage format identifiers and implementation details.

For configurable values, see models.py (HistoryConfig, TrendsConfig, etc.).
"""

# =============================================================================
# History
# =============================================================================

MAX_HISTORICAL_VERSIONS = 5
"""Default number of snapshots retained in the historical cache."""

UNKNOWN_VERSION = "unknown"
"""Version label used when the introspection source cannot report one."""

# =============================================================================
# Storage
# =============================================================================

CACHE_DIR_NAME = ".propdrift"
"""Default cache directory, relative to the project root."""

SNAPSHOT_FILE_NAME = "interface-cache.json"
"""Latest snapshot blob."""

HISTORY_FILE_NAME = "interface-history.json"
"""Bounded snapshot history blob."""

GENERATED_BY = "propdrift-interface-change-detector"
"""Value written to the ``generatedBy`` field of persisted snapshots."""
