"""Multi-version migration paths over the historical cache.

A path is the run of retained snapshots between two versions.  It always
walks oldest to newest, diffing each consecutive hop, whether the request
is an upgrade or a downgrade; ``direction`` records which one was asked.
"""

from __future__ import annotations

from collections import Counter

import structlog

from propdrift.config.models import PathsConfig
from propdrift.diff.advisor import generate_version_specific_migration
from propdrift.diff.classifier import DEFAULT_COMPATIBILITY, TypeCompatibility
from propdrift.diff.engine import compare_snapshots
from propdrift.history.models import (
    Direction,
    Effort,
    HistoricalCache,
    MigrationPath,
    MigrationStep,
)

log = structlog.get_logger(__name__)


def generate_multi_version_migration_path(
    from_version: str,
    to_version: str,
    cache: HistoricalCache,
    config: PathsConfig | None = None,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> MigrationPath:
    """Aggregate hop-by-hop diffs between two retained versions.

    Unknown versions produce an empty path carrying ``error``; this never
    raises for missing history.
    """
    config = config or PathsConfig()
    from_index = cache.index_of(from_version)
    to_index = cache.index_of(to_version)

    missing = [v for v, i in ((from_version, from_index), (to_version, to_index)) if i is None]
    if from_index is None or to_index is None:
        error = f"Version(s) not found in history: {', '.join(missing)}"
        log.info("migration_path_unavailable", missing=missing)
        return MigrationPath(from_version=from_version, to_version=to_version, error=error)

    # cache.versions is newest first: a larger index is an older snapshot
    direction: Direction
    if from_index > to_index:
        direction = "upgrade"
    elif from_index < to_index:
        direction = "downgrade"
    else:
        direction = "none"

    lo, hi = sorted((from_index, to_index))
    chain = list(reversed(cache.versions[lo : hi + 1]))

    steps: list[MigrationStep] = []
    for older, newer in zip(chain, chain[1:], strict=False):
        change_set = compare_snapshots(older, newer, compatibility)
        steps.append(
            MigrationStep(
                from_version=older.sdk_version,
                to_version=newer.sdk_version,
                changes=change_set.summary,
                migration_actions=generate_version_specific_migration(
                    change_set, older.sdk_version, newer.sdk_version
                ),
            )
        )

    path = [s.sdk_version for s in chain]
    total_breaking = sum(step.changes.breaking_changes for step in steps)
    effort = estimate_effort(total_breaking, len(path), config)

    return MigrationPath(
        from_version=from_version,
        to_version=to_version,
        path=path,
        direction=direction,
        total_steps=len(steps),
        total_breaking_changes=total_breaking,
        estimated_effort=effort,
        migration_steps=steps,
        recommendations=_recommendations(effort, steps, config),
    )


def estimate_effort(total_breaking: int, path_length: int, config: PathsConfig) -> Effort:
    if total_breaking > config.high_breaking_threshold or path_length > config.high_path_length:
        return "high"
    if total_breaking > config.medium_breaking_threshold or path_length > config.medium_path_length:
        return "medium"
    return "low"


def _recommendations(effort: Effort, steps: list[MigrationStep], config: PathsConfig) -> list[str]:
    if effort == "high":
        recs = [
            "Consider an incremental migration through each intermediate version",
            "Create backups before starting the migration",
            "Test thoroughly after each migration step",
        ]
    elif effort == "medium":
        recs = [
            "Plan staged testing: verify each affected component before moving on",
        ]
    else:
        recs = ["Standard migration procedure should be sufficient"]

    touched = Counter(component for step in steps for component in step.components)
    for component in sorted(touched):
        if touched[component] > config.frequent_component_steps:
            recs.append(
                f"Component '{component}' is frequently changed across "
                f"{touched[component]} steps - pay special attention"
            )
    return recs
