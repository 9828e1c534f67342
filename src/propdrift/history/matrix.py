"""All-pairs version compatibility over the historical cache.

Runs the path planner for every ordered pair of retained versions.  The
cache is bounded, so the O(n^2) pair count stays small.
"""

from __future__ import annotations

import structlog

from propdrift.config.models import PathsConfig
from propdrift.diff.classifier import DEFAULT_COMPATIBILITY, TypeCompatibility
from propdrift.history.models import (
    CompatibilityCell,
    CompatibilityMatrix,
    HistoricalCache,
    MatrixSummary,
    MigrationPath,
)
from propdrift.history.paths import generate_multi_version_migration_path

log = structlog.get_logger(__name__)

INSUFFICIENT_DATA_RECOMMENDATION = (
    "At least two versions in history are required to build a compatibility matrix"
)


def generate_compatibility_matrix(
    cache: HistoricalCache,
    config: PathsConfig | None = None,
    compatibility: TypeCompatibility = DEFAULT_COMPATIBILITY,
) -> CompatibilityMatrix:
    """Build the N x N compatibility table and cluster compatible versions."""
    if len(cache.versions) < 2:
        return CompatibilityMatrix(
            versions=cache.version_names[::-1],
            summary=MatrixSummary(total_versions=len(cache.versions)),
            recommendations=[INSUFFICIENT_DATA_RECOMMENDATION],
            insufficient_data=True,
        )

    versions = [s.sdk_version for s in cache.chronological()]
    matrix: dict[str, dict[str, CompatibilityCell]] = {}
    compatible_pairs = 0
    incompatible_pairs = 0

    for i, src in enumerate(versions):
        row: dict[str, CompatibilityCell] = {}
        for j, dst in enumerate(versions):
            if i == j:
                row[dst] = CompatibilityCell(
                    compatible=True,
                    breaking_changes=0,
                    migration_complexity="none",
                    notes=["Same version"],
                )
                continue
            path = generate_multi_version_migration_path(src, dst, cache, config, compatibility)
            cell = _cell_from_path(path, forward=i < j)
            row[dst] = cell
            if cell.compatible:
                compatible_pairs += 1
            else:
                incompatible_pairs += 1
        matrix[src] = row

    total_pairs = compatible_pairs + incompatible_pairs
    summary = MatrixSummary(
        total_versions=len(versions),
        compatible_pairs=compatible_pairs,
        incompatible_pairs=incompatible_pairs,
        compatibility_rate=round(compatible_pairs / total_pairs * 100, 1),
    )
    clusters = cluster_compatible_versions(versions, matrix)
    log.debug(
        "compatibility_matrix_built",
        versions=len(versions),
        compatible_pairs=compatible_pairs,
        clusters=len(clusters),
    )

    return CompatibilityMatrix(
        versions=versions,
        matrix=matrix,
        summary=summary,
        clusters=clusters,
        recommendations=_recommendations(summary, clusters),
    )


def _cell_from_path(path: MigrationPath, *, forward: bool) -> CompatibilityCell:
    compatible = path.total_breaking_changes == 0
    notes: list[str] = []
    if compatible:
        notes.append(
            "Forward compatible - no breaking changes"
            if forward
            else "No breaking changes between versions"
        )
    else:
        count = path.total_breaking_changes
        notes.append(f"{count} breaking change{'s' if count != 1 else ''} - migration required")
    if path.total_steps > 1:
        notes.append(f"Multi-step migration through {path.total_steps} version hops")
    critical = path.breaking_components()
    if critical:
        notes.append(f"Critical components: {', '.join(critical)}")
    return CompatibilityCell(
        compatible=compatible,
        breaking_changes=path.total_breaking_changes,
        migration_complexity=path.estimated_effort,
        notes=notes,
    )


def cluster_compatible_versions(
    versions: list[str],
    matrix: dict[str, dict[str, CompatibilityCell]],
) -> list[list[str]]:
    """Greedily group versions that are pairwise compatible.

    Walks versions oldest first; each unassigned version seeds a cluster and
    pulls in every later unassigned version compatible (both ways, and not
    high complexity) with all current members.
    """

    def _linked(a: str, b: str) -> bool:
        return all(
            matrix[x][y].compatible and matrix[x][y].migration_complexity != "high"
            for x, y in ((a, b), (b, a))
        )

    assigned: set[str] = set()
    clusters: list[list[str]] = []
    for seed in versions:
        if seed in assigned:
            continue
        cluster = [seed]
        assigned.add(seed)
        for candidate in versions:
            if candidate in assigned:
                continue
            if all(_linked(member, candidate) for member in cluster):
                cluster.append(candidate)
                assigned.add(candidate)
        clusters.append(cluster)
    return clusters


def _recommendations(summary: MatrixSummary, clusters: list[list[str]]) -> list[str]:
    recs: list[str] = []
    if summary.incompatible_pairs == 0:
        recs.append("All tracked versions are mutually compatible")
    elif summary.compatibility_rate < 50:
        recs.append(
            "Low compatibility across tracked versions - pin a single version "
            "and plan migrations explicitly"
        )
    for cluster in clusters:
        if len(cluster) > 1:
            recs.append(
                f"Stay within versions {cluster[0]} to {cluster[-1]} "
                f"({', '.join(cluster)}) to avoid breaking changes"
            )
    return recs
