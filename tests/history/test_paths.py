"""Unit tests for multi-version migration paths (paths.py).

Tests cover:
- Missing versions produce an error-carrying empty path
- Same-version paths
- Upgrade and downgrade both walk oldest to newest
- Hop-by-hop aggregation and effort tiers
- Recommendations, including frequently changed components
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from propdrift.config.models import PathsConfig
from propdrift.history.cache import compute_analytics
from propdrift.history.models import HistoricalCache
from propdrift.history.paths import estimate_effort, generate_multi_version_migration_path
from propdrift.snapshot.models import InterfaceSnapshot

MakeSnapshot = Callable[..., InterfaceSnapshot]


def _cache(versions: Sequence[InterfaceSnapshot]) -> HistoricalCache:
    return HistoricalCache(versions=list(versions), analytics=compute_analytics(versions))


@pytest.fixture
def three_versions(make_snapshot: MakeSnapshot) -> HistoricalCache:
    """v1 -> v2 non-breaking, v2 -> v3 breaking (newest first in the cache)."""
    v1 = make_snapshot("v1", {"SignIn": {"path": {"type": "string"}}})
    v2 = make_snapshot(
        "v2",
        {"SignIn": {"path": {"type": "string | undefined"}, "theme": {"type": "string"}}},
        days=10,
    )
    v3 = make_snapshot("v3", {"SignIn": {"theme": {"type": "string"}}}, days=20)
    return _cache([v3, v2, v1])


class TestMissingVersions:
    def test_unknown_from_version(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v0", "v3", three_versions)

        assert not path.ok
        assert path.error is not None
        assert "v0" in path.error
        assert path.path == []
        assert path.migration_steps == []

    def test_both_unknown(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("x", "y", three_versions)
        assert path.error == "Version(s) not found in history: x, y"

    def test_empty_cache(self) -> None:
        path = generate_multi_version_migration_path("v1", "v2", HistoricalCache())
        assert path.error is not None


class TestPathShape:
    def test_same_version(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v2", "v2", three_versions)

        assert path.ok
        assert path.path == ["v2"]
        assert path.direction == "none"
        assert path.total_steps == 0
        assert path.total_breaking_changes == 0
        assert path.estimated_effort == "low"
        assert path.recommendations == ["Standard migration procedure should be sufficient"]

    def test_upgrade_walks_oldest_to_newest(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v1", "v3", three_versions)

        assert path.direction == "upgrade"
        assert path.path == ["v1", "v2", "v3"]
        assert [(s.from_version, s.to_version) for s in path.migration_steps] == [
            ("v1", "v2"),
            ("v2", "v3"),
        ]

    def test_downgrade_also_walks_oldest_to_newest(self, three_versions: HistoricalCache) -> None:
        down = generate_multi_version_migration_path("v3", "v1", three_versions)
        up = generate_multi_version_migration_path("v1", "v3", three_versions)

        assert down.direction == "downgrade"
        assert down.path == up.path
        assert down.total_breaking_changes == up.total_breaking_changes

    def test_partial_slice(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v2", "v3", three_versions)
        assert path.path == ["v2", "v3"]
        assert path.total_steps == 1


class TestAggregation:
    def test_breaking_totals(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v1", "v3", three_versions)

        first, second = path.migration_steps
        assert first.changes.breaking_changes == 0
        assert first.changes.non_breaking_changes == 1
        assert first.changes.additions == 1
        assert second.changes.breaking_changes == 1
        assert path.total_breaking_changes == 1
        assert path.breaking_components() == ["SignIn"]

    def test_step_actions_are_tagged(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v2", "v3", three_versions)

        (action,) = path.migration_steps[0].migration_actions
        assert action.priority == "high"
        assert action.description.startswith("[v2 -> v3] ")

    def test_three_version_path_is_medium(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v1", "v3", three_versions)

        assert path.estimated_effort == "medium"
        assert path.recommendations[0].startswith("Plan staged testing")

    def test_to_dict(self, three_versions: HistoricalCache) -> None:
        data = generate_multi_version_migration_path("v1", "v2", three_versions).to_dict()

        assert data["path"] == ["v1", "v2"]
        assert data["migration_steps"][0]["from"] == "v1"
        assert data["migration_steps"][0]["to"] == "v2"
        assert data["error"] is None


class TestEstimateEffort:
    @pytest.mark.parametrize(
        ("breaking", "length", "effort"),
        [
            (0, 1, "low"),
            (3, 2, "low"),
            (4, 2, "medium"),
            (0, 3, "medium"),
            (10, 3, "medium"),
            (11, 2, "high"),
            (0, 4, "high"),
        ],
    )
    def test_tiers(self, breaking: int, length: int, effort: str) -> None:
        assert estimate_effort(breaking, length, PathsConfig()) == effort


class TestRecommendations:
    def test_high_effort_and_frequent_component(self, make_snapshot: MakeSnapshot) -> None:
        """A component changed in every one of four hops is called out."""
        versions = [
            make_snapshot(f"v{i}", {"UserButton": {"size": {"type": f"'{i}'"}}}, days=i)
            for i in range(5)
        ]
        cache = _cache(list(reversed(versions)))

        path = generate_multi_version_migration_path("v0", "v4", cache)

        assert path.estimated_effort == "high"
        assert path.total_breaking_changes == 4
        assert path.recommendations[:3] == [
            "Consider an incremental migration through each intermediate version",
            "Create backups before starting the migration",
            "Test thoroughly after each migration step",
        ]
        assert path.recommendations[3] == (
            "Component 'UserButton' is frequently changed across 4 steps - pay special attention"
        )

    def test_two_steps_is_not_frequent(self, three_versions: HistoricalCache) -> None:
        path = generate_multi_version_migration_path("v1", "v3", three_versions)
        assert not any("frequently changed" in r for r in path.recommendations)
