"""Snapshot history: bounded cache, trends, migration paths, compatibility matrix."""

from propdrift.history.cache import (
    HistoryManager,
    calculate_change_frequency,
    compute_analytics,
)
from propdrift.history.matrix import cluster_compatible_versions, generate_compatibility_matrix
from propdrift.history.models import (
    AppendResult,
    ChangeFrequency,
    CompatibilityCell,
    CompatibilityMatrix,
    HistoricalCache,
    HistoryAnalytics,
    MatrixSummary,
    MigrationPath,
    MigrationStep,
    VersionPatterns,
)
from propdrift.history.paths import estimate_effort, generate_multi_version_migration_path
from propdrift.history.trends import analyze_version_patterns

__all__ = [
    "AppendResult",
    "ChangeFrequency",
    "CompatibilityCell",
    "CompatibilityMatrix",
    "HistoricalCache",
    "HistoryAnalytics",
    "HistoryManager",
    "MatrixSummary",
    "MigrationPath",
    "MigrationStep",
    "VersionPatterns",
    "analyze_version_patterns",
    "calculate_change_frequency",
    "cluster_compatible_versions",
    "compute_analytics",
    "estimate_effort",
    "generate_compatibility_matrix",
    "generate_multi_version_migration_path",
]
