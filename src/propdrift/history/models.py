"""Data models for the snapshot history and its derived views.

``HistoricalCache`` is the only persisted model; migration paths,
compatibility matrices and trend reports are recomputed on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Literal

from propdrift.diff.advisor import MigrationAction
from propdrift.diff.models import ChangeSummary, Severity
from propdrift.snapshot.models import InterfaceSnapshot

Effort = Literal["low", "medium", "high"]
Complexity = Literal["none", "low", "medium", "high"]
RiskLevel = Literal["unknown", "low", "medium", "high"]
TestingDepth = Literal["standard", "targeted", "comprehensive"]
Direction = Literal["upgrade", "downgrade", "none"]


# ============================================================================
# Historical cache
# ============================================================================


@dataclass
class ChangeFrequency:
    """Change statistics over consecutive version pairs."""

    average_time_between_versions: timedelta | None = None
    total_changes: int = 0
    changes_by_component: dict[str, int] = field(default_factory=dict)
    version_history: int = 0

    @property
    def average_days_between_versions(self) -> float | None:
        if self.average_time_between_versions is None:
            return None
        return self.average_time_between_versions / timedelta(days=1)

    def to_dict(self) -> dict[str, Any]:
        avg = self.average_time_between_versions
        return {
            "averageTimeBetweenVersions": (
                None if avg is None else round(avg / timedelta(milliseconds=1))
            ),
            "totalChanges": self.total_changes,
            "changesByComponent": dict(self.changes_by_component),
            "versionHistory": self.version_history,
        }


@dataclass
class HistoryAnalytics:
    total_versions: int = 0
    first_version: str | None = None  # oldest retained sdk version
    last_update: datetime | None = None  # timestamp of the newest snapshot
    change_frequency: ChangeFrequency = field(default_factory=ChangeFrequency)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalVersions": self.total_versions,
            "firstVersion": self.first_version,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
            "changeFrequency": self.change_frequency.to_dict(),
        }


@dataclass
class HistoricalCache:
    """Bounded log of snapshots, newest first, unique by sdk version."""

    versions: list[InterfaceSnapshot] = field(default_factory=list)
    analytics: HistoryAnalytics = field(default_factory=HistoryAnalytics)

    @property
    def version_names(self) -> list[str]:
        return [s.sdk_version for s in self.versions]

    def index_of(self, sdk_version: str) -> int | None:
        for i, snapshot in enumerate(self.versions):
            if snapshot.sdk_version == sdk_version:
                return i
        return None

    def get(self, sdk_version: str) -> InterfaceSnapshot | None:
        index = self.index_of(sdk_version)
        return None if index is None else self.versions[index]

    def chronological(self) -> list[InterfaceSnapshot]:
        """Snapshots oldest first."""
        return list(reversed(self.versions))

    def to_dict(self) -> dict[str, Any]:
        return {
            "versions": [s.to_dict() for s in self.versions],
            "analytics": self.analytics.to_dict(),
        }


@dataclass
class AppendResult:
    cache: HistoricalCache
    truncated: int = 0  # snapshots evicted from the tail
    replaced: bool = False  # an existing entry for the version was overwritten


# ============================================================================
# Trend analysis
# ============================================================================


@dataclass
class VersionPatterns:
    patterns: list[str] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    regression_risk: RiskLevel = "unknown"
    recommended_testing: TestingDepth = "standard"
    insufficient_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "patterns": list(self.patterns),
            "insights": list(self.insights),
            "regression_risk": self.regression_risk,
            "recommended_testing": self.recommended_testing,
            "insufficient_data": self.insufficient_data,
        }


# ============================================================================
# Migration paths
# ============================================================================


@dataclass
class MigrationStep:
    """One consecutive version hop inside a migration path."""

    from_version: str
    to_version: str
    changes: ChangeSummary
    migration_actions: list[MigrationAction] = field(default_factory=list)

    @property
    def components(self) -> set[str]:
        return {a.component for a in self.migration_actions}

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_version,
            "to": self.to_version,
            "changes": self.changes.to_dict(),
            "migration_actions": [a.to_dict() for a in self.migration_actions],
        }


@dataclass
class MigrationPath:
    from_version: str
    to_version: str
    path: list[str] = field(default_factory=list)
    direction: Direction = "none"
    total_steps: int = 0
    total_breaking_changes: int = 0
    estimated_effort: Effort = "low"
    migration_steps: list[MigrationStep] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def breaking_components(self) -> list[str]:
        """Components with at least one breaking action along the path."""
        return sorted(
            {
                a.component
                for step in self.migration_steps
                for a in step.migration_actions
                if a.severity is Severity.BREAKING
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_version": self.from_version,
            "to_version": self.to_version,
            "path": list(self.path),
            "direction": self.direction,
            "total_steps": self.total_steps,
            "total_breaking_changes": self.total_breaking_changes,
            "estimated_effort": self.estimated_effort,
            "migration_steps": [s.to_dict() for s in self.migration_steps],
            "recommendations": list(self.recommendations),
            "error": self.error,
        }


# ============================================================================
# Compatibility matrix
# ============================================================================


@dataclass
class CompatibilityCell:
    compatible: bool
    breaking_changes: int
    migration_complexity: Complexity
    notes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "compatible": self.compatible,
            "breaking_changes": self.breaking_changes,
            "migration_complexity": self.migration_complexity,
            "notes": list(self.notes),
        }


@dataclass
class MatrixSummary:
    total_versions: int = 0
    compatible_pairs: int = 0
    incompatible_pairs: int = 0
    compatibility_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_versions": self.total_versions,
            "compatible_pairs": self.compatible_pairs,
            "incompatible_pairs": self.incompatible_pairs,
            "compatibility_rate": self.compatibility_rate,
        }


@dataclass
class CompatibilityMatrix:
    versions: list[str] = field(default_factory=list)  # oldest first
    matrix: dict[str, dict[str, CompatibilityCell]] = field(default_factory=dict)
    summary: MatrixSummary = field(default_factory=MatrixSummary)
    clusters: list[list[str]] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    insufficient_data: bool = False

    def cell(self, from_version: str, to_version: str) -> CompatibilityCell:
        return self.matrix[from_version][to_version]

    def to_dict(self) -> dict[str, Any]:
        return {
            "versions": list(self.versions),
            "matrix": {
                src: {dst: c.to_dict() for dst, c in row.items()}
                for src, row in self.matrix.items()
            },
            "summary": self.summary.to_dict(),
            "clusters": [list(c) for c in self.clusters],
            "recommendations": list(self.recommendations),
            "insufficient_data": self.insufficient_data,
        }

