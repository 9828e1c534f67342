"""Change detection entry point.

Orchestrates one detection run: load the previous snapshot, extract the
current interfaces, diff and advise when a baseline exists, then persist the
new snapshot and append it to history.  ``detect_interface_changes`` never
raises; every failure becomes a ``Failed`` result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from propdrift.config.models import PropDriftConfig
from propdrift.core.errors import InternalError, PropDriftError, StoreError
from propdrift.core.logging import clear_run_id, set_run_id
from propdrift.diff.advisor import (
    MigrationSuggestion,
    MigrationWarning,
    generate_migration_suggestions,
    generate_migration_warnings,
)
from propdrift.diff.classifier import DEFAULT_COMPATIBILITY, TypeCompatibility
from propdrift.diff.engine import compare_snapshots
from propdrift.diff.models import ChangeRecord, ChangeSet, ChangeSummary, Severity
from propdrift.history.cache import HistoryManager
from propdrift.history.models import HistoricalCache, HistoryAnalytics
from propdrift.snapshot.models import InterfaceSnapshot
from propdrift.sources import InterfaceSource
from propdrift.store.base import InterfaceStore
from propdrift.versions import VersionChange, analyze_version_change

log = structlog.get_logger(__name__)

EXTRACTION_FAILED_REASON = "Interface extraction failed"


# ============================================================================
# Detection results
# ============================================================================


def _history_dict(cache: HistoricalCache | None) -> dict[str, Any] | None:
    if cache is None:
        return None
    return {"versions": cache.version_names, "total_versions": len(cache.versions)}


@dataclass
class NoBaseline:
    """First run: the current snapshot becomes the baseline."""

    current_version: str
    snapshot: InterfaceSnapshot
    history: HistoricalCache | None = None

    success = True

    @property
    def analytics(self) -> HistoryAnalytics | None:
        return self.history.analytics if self.history else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "current_version": self.current_version,
            "previous_version": None,
            "changes": None,
            "historical_data": _history_dict(self.history),
            "analytics": self.analytics.to_dict() if self.analytics else None,
        }


@dataclass
class Compared:
    """A baseline existed and was diffed against the current snapshot."""

    current_version: str
    previous_version: str
    snapshot: InterfaceSnapshot
    changes: ChangeSet
    warnings: list[MigrationWarning] = field(default_factory=list)
    suggestions: list[MigrationSuggestion] = field(default_factory=list)
    version_change: VersionChange | None = None
    history: HistoricalCache | None = None

    success = True

    @property
    def analytics(self) -> HistoryAnalytics | None:
        return self.history.analytics if self.history else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "current_version": self.current_version,
            "previous_version": self.previous_version,
            "changes": {
                **self.changes.to_dict(),
                "warnings": [w.to_dict() for w in self.warnings],
                "suggestions": [s.to_dict() for s in self.suggestions],
            },
            "version_change": self.version_change.to_dict() if self.version_change else None,
            "historical_data": _history_dict(self.history),
            "analytics": self.analytics.to_dict() if self.analytics else None,
        }


@dataclass
class Failed:
    reason: str
    error_code: str | None = None

    success = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "reason": self.reason,
            "error_code": self.error_code,
            "changes": None,
        }


DetectionResult = NoBaseline | Compared | Failed


# ============================================================================
# Detector
# ============================================================================


class InterfaceChangeDetector:
    """Runs change detection against an injected source and store."""

    def __init__(
        self,
        source: InterfaceSource,
        store: InterfaceStore,
        history: HistoryManager | None = None,
        config: PropDriftConfig | None = None,
        compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
    ) -> None:
        self.config = config or PropDriftConfig()
        self.source = source
        self.store = store
        self.compatibility = compatibility
        self.history = history or HistoryManager(
            store,
            max_versions=self.config.history.max_versions,
            compatibility=compatibility,
        )

    def detect_interface_changes(self) -> DetectionResult:
        set_run_id()
        try:
            return self._detect()
        except PropDriftError as e:
            log.error("detection_failed", error=e.message, code=e.error_name)
            return Failed(reason=e.message, error_code=e.error_name)
        except Exception as e:
            log.exception("detection_failed_unexpectedly")
            err = InternalError.unexpected(str(e) or type(e).__name__, exception=type(e).__name__)
            return Failed(reason=err.message, error_code=err.error_name)
        finally:
            clear_run_id()

    def _detect(self) -> DetectionResult:
        previous = self._load_previous()

        raw = self.source.extract_current_interfaces()
        if raw is None:
            log.warning("interface_extraction_failed")
            return Failed(reason=EXTRACTION_FAILED_REASON)

        current = InterfaceSnapshot.capture(raw, self.source.sdk_version())
        log.info(
            "interfaces_extracted",
            components=len(current.interfaces),
            version=current.sdk_version,
        )

        result: NoBaseline | Compared
        if previous is None:
            log.info("baseline_established", version=current.sdk_version)
            result = NoBaseline(current_version=current.sdk_version, snapshot=current)
        else:
            changes = compare_snapshots(previous, current, self.compatibility)
            log.info(
                "interfaces_compared",
                previous=previous.sdk_version,
                current=current.sdk_version,
                **changes.summary.to_dict(),
            )
            result = Compared(
                current_version=current.sdk_version,
                previous_version=previous.sdk_version,
                snapshot=current,
                changes=changes,
                warnings=generate_migration_warnings(changes),
                suggestions=generate_migration_suggestions(changes),
                version_change=analyze_version_change(previous.sdk_version, current.sdk_version),
            )

        result.history = self._persist(current)
        return result

    def _load_previous(self) -> InterfaceSnapshot | None:
        """Previous snapshot; unreadable or invalid data means no baseline."""
        try:
            data = self.store.load_snapshot()
        except StoreError as e:
            log.warning("baseline_unreadable", error=e.message, code=e.error_name)
            return None
        if data is None:
            return None
        try:
            return InterfaceSnapshot.from_dict(data)
        except PropDriftError as e:
            log.warning("baseline_invalid", error=e.message)
            return None

    def _persist(self, snapshot: InterfaceSnapshot) -> HistoricalCache | None:
        try:
            self.store.save_snapshot(snapshot.to_dict())
        except StoreError as e:
            log.error("snapshot_save_failed", error=e.message, code=e.error_name)

        try:
            return self.history.append(snapshot).cache
        except StoreError as e:
            log.error("history_save_failed", error=e.message, code=e.error_name)
            return None


# ============================================================================
# Change report
# ============================================================================


@dataclass
class MigrationGuide:
    warnings: list[MigrationWarning] = field(default_factory=list)
    suggestions: list[MigrationSuggestion] = field(default_factory=list)

    @property
    def automated_migrations(self) -> list[MigrationSuggestion]:
        return [s for s in self.suggestions if s.automated]

    def to_dict(self) -> dict[str, Any]:
        return {
            "warnings": [w.to_dict() for w in self.warnings],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "automated_migrations": [s.to_dict() for s in self.automated_migrations],
        }


@dataclass
class ChangeReport:
    """Renderer-facing view of one comparison."""

    timestamp: datetime
    previous_version: str
    current_version: str
    summary: ChangeSummary
    breaking_changes: list[ChangeRecord] = field(default_factory=list)
    non_breaking_changes: list[ChangeRecord] = field(default_factory=list)
    additions: list[ChangeRecord] = field(default_factory=list)
    migration_guide: MigrationGuide = field(default_factory=MigrationGuide)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "version_comparison": {
                "previous": self.previous_version,
                "current": self.current_version,
            },
            "summary": self.summary.to_dict(),
            "breaking_changes": [r.to_dict() for r in self.breaking_changes],
            "non_breaking_changes": [r.to_dict() for r in self.non_breaking_changes],
            "additions": [r.to_dict() for r in self.additions],
            "migration_guide": self.migration_guide.to_dict(),
        }


def generate_change_report(
    result: DetectionResult,
    *,
    timestamp: datetime | None = None,
) -> ChangeReport | None:
    """Build a report from a comparison; None for any other outcome."""
    if not isinstance(result, Compared):
        return None

    changes = result.changes
    return ChangeReport(
        timestamp=timestamp or datetime.now(UTC),
        previous_version=result.previous_version,
        current_version=result.current_version,
        summary=changes.summary,
        breaking_changes=changes.by_severity(Severity.BREAKING),
        non_breaking_changes=changes.by_severity(Severity.NON_BREAKING),
        additions=changes.by_severity(Severity.ADDITION),
        migration_guide=MigrationGuide(warnings=result.warnings, suggestions=result.suggestions),
    )
