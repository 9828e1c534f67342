"""Bounded, version-deduplicated snapshot history.

The whole history is one blob: load it, mutate in memory, write it back.
Analytics are derived from the retained snapshots and recomputed after every
mutation (and on load), so a persisted ``analytics`` section is informative
only and never trusted.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from typing import Any

import structlog

from propdrift.config.constants import MAX_HISTORICAL_VERSIONS
from propdrift.core.errors import PropDriftError, StoreError
from propdrift.diff.classifier import DEFAULT_COMPATIBILITY, TypeCompatibility
from propdrift.diff.engine import compare_snapshots
from propdrift.history.models import (
    AppendResult,
    ChangeFrequency,
    HistoricalCache,
    HistoryAnalytics,
)
from propdrift.snapshot.models import InterfaceSnapshot
from propdrift.store.base import InterfaceStore

log = structlog.get_logger(__name__)


def calculate_change_frequency(
    versions: Sequence[InterfaceSnapshot],
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> ChangeFrequency:
    """Walk consecutive pairs (newest first) and aggregate their diffs.

    Fewer than two versions yields an empty result with no cadence.
    """
    if len(versions) < 2:
        return ChangeFrequency(version_history=len(versions))

    total_changes = 0
    by_component: dict[str, int] = {}
    deltas: list[timedelta] = []

    for newer, older in zip(versions, versions[1:], strict=False):
        change_set = compare_snapshots(older, newer, compatibility)
        total_changes += change_set.summary.total_changes
        for component, records in change_set.component_changes.items():
            by_component[component] = by_component.get(component, 0) + len(records)
        deltas.append(abs(newer.timestamp - older.timestamp))

    return ChangeFrequency(
        average_time_between_versions=sum(deltas, timedelta()) / len(deltas),
        total_changes=total_changes,
        changes_by_component=dict(sorted(by_component.items())),
        version_history=len(versions),
    )


def compute_analytics(
    versions: Sequence[InterfaceSnapshot],
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> HistoryAnalytics:
    if not versions:
        return HistoryAnalytics()
    return HistoryAnalytics(
        total_versions=len(versions),
        first_version=versions[-1].sdk_version,
        last_update=versions[0].timestamp,
        change_frequency=calculate_change_frequency(versions, compatibility),
    )


def normalize_versions(
    versions: Sequence[InterfaceSnapshot],
    max_versions: int,
) -> tuple[list[InterfaceSnapshot], int]:
    """Deduplicate by version, order newest first, and cut to the bound.

    For duplicated versions the earliest entry in ``versions`` wins, so
    callers put the replacement first.  Returns the kept snapshots and how
    many were truncated from the tail.
    """
    seen: set[str] = set()
    unique: list[InterfaceSnapshot] = []
    for snapshot in versions:
        if snapshot.sdk_version in seen:
            continue
        seen.add(snapshot.sdk_version)
        unique.append(snapshot)

    # Stable sort: equal timestamps keep their relative order
    unique.sort(key=lambda s: s.timestamp, reverse=True)
    truncated = max(0, len(unique) - max_versions)
    return unique[:max_versions], truncated


class HistoryManager:
    """Loads, appends to and persists the historical cache through a store."""

    def __init__(
        self,
        store: InterfaceStore,
        max_versions: int = MAX_HISTORICAL_VERSIONS,
        compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
    ) -> None:
        if max_versions < 1:
            raise ValueError(f"max_versions must be >= 1, got {max_versions}")
        self.store = store
        self.max_versions = max_versions
        self.compatibility = compatibility

    def load(self) -> HistoricalCache:
        """Load the cache; an absent or unreadable blob yields an empty cache."""
        try:
            data = self.store.load_history()
        except StoreError as e:
            log.warning("history_unreadable", error=e.message, code=e.error_name)
            return self._build([])
        if data is None:
            return self._build([])

        versions = self._parse_versions(data)
        cache = self._build(versions)
        if len(cache.versions) != len(versions):
            log.warning(
                "history_repaired",
                stored=len(versions),
                kept=len(cache.versions),
                max_versions=self.max_versions,
            )
        return cache

    def append(self, snapshot: InterfaceSnapshot) -> AppendResult:
        """Insert or overwrite ``snapshot`` and persist the result.

        Raises:
            StoreError: if the updated cache cannot be written.
        """
        current = self.load()
        replaced = current.index_of(snapshot.sdk_version) is not None
        merged = [snapshot, *(s for s in current.versions if s.sdk_version != snapshot.sdk_version)]
        kept, truncated = normalize_versions(merged, self.max_versions)
        cache = HistoricalCache(versions=kept, analytics=compute_analytics(kept, self.compatibility))

        if truncated:
            log.info("history_truncated", truncated=truncated, max_versions=self.max_versions)
        log.debug(
            "history_appended",
            version=snapshot.sdk_version,
            replaced=replaced,
            total_versions=len(kept),
        )

        self.store.save_history(cache.to_dict())
        return AppendResult(cache=cache, truncated=truncated, replaced=replaced)

    def _build(self, versions: Sequence[InterfaceSnapshot]) -> HistoricalCache:
        kept, _ = normalize_versions(versions, self.max_versions)
        return HistoricalCache(versions=kept, analytics=compute_analytics(kept, self.compatibility))

    def _parse_versions(self, data: dict[str, Any]) -> list[InterfaceSnapshot]:
        raw_versions = data.get("versions")
        if not isinstance(raw_versions, list):
            log.warning("history_malformed", reason="versions is not a list")
            return []
        versions: list[InterfaceSnapshot] = []
        for i, raw in enumerate(raw_versions):
            try:
                versions.append(InterfaceSnapshot.from_dict(raw))
            except PropDriftError as e:
                log.warning("history_entry_skipped", index=i, error=e.message)
        return versions
