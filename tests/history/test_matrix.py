"""Unit tests for the compatibility matrix (matrix.py).

Tests cover:
- Insufficient data
- Diagonal invariant
- Scenario E (non-breaking then breaking hop)
- Summary counts and rate
- Greedy clustering
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from propdrift.history.cache import compute_analytics
from propdrift.history.matrix import (
    INSUFFICIENT_DATA_RECOMMENDATION,
    cluster_compatible_versions,
    generate_compatibility_matrix,
)
from propdrift.history.models import CompatibilityCell, HistoricalCache
from propdrift.snapshot.models import InterfaceSnapshot

MakeSnapshot = Callable[..., InterfaceSnapshot]


def _cache(versions: Sequence[InterfaceSnapshot]) -> HistoricalCache:
    return HistoricalCache(versions=list(versions), analytics=compute_analytics(versions))


@pytest.fixture
def scenario_e(make_snapshot: MakeSnapshot) -> HistoricalCache:
    v1 = make_snapshot("v1", {"SignIn": {"path": {"type": "string"}}})
    v2 = make_snapshot("v2", {"SignIn": {"path": {"type": "string | undefined"}}}, days=7)
    v3 = make_snapshot("v3", {"SignIn": {}}, days=14)
    return _cache([v3, v2, v1])


class TestInsufficientData:
    def test_single_version(self, make_snapshot: MakeSnapshot) -> None:
        matrix = generate_compatibility_matrix(_cache([make_snapshot("v1", {})]))

        assert matrix.insufficient_data is True
        assert matrix.matrix == {}
        assert matrix.summary.total_versions == 1
        assert matrix.recommendations == [INSUFFICIENT_DATA_RECOMMENDATION]

    def test_empty(self) -> None:
        assert generate_compatibility_matrix(HistoricalCache()).insufficient_data is True


class TestMatrix:
    def test_versions_oldest_first(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)
        assert matrix.versions == ["v1", "v2", "v3"]
        assert list(matrix.matrix) == ["v1", "v2", "v3"]

    def test_diagonal_invariant(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)

        for version in matrix.versions:
            cell = matrix.cell(version, version)
            assert cell.compatible is True
            assert cell.breaking_changes == 0
            assert cell.migration_complexity == "none"

    def test_scenario_e(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)

        assert matrix.cell("v1", "v2").compatible is True
        assert matrix.cell("v1", "v3").compatible is False
        assert matrix.cell("v2", "v3").compatible is False
        assert matrix.cell("v1", "v3").breaking_changes == 1

    def test_paths_are_symmetric(self, scenario_e: HistoricalCache) -> None:
        """Downgrades walk the same hops as upgrades."""
        matrix = generate_compatibility_matrix(scenario_e)
        assert matrix.cell("v3", "v1").compatible is False
        assert matrix.cell("v2", "v1").compatible is True

    def test_notes(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)

        assert matrix.cell("v1", "v2").notes == ["Forward compatible - no breaking changes"]
        assert matrix.cell("v1", "v3").notes == [
            "1 breaking change - migration required",
            "Multi-step migration through 2 version hops",
            "Critical components: SignIn",
        ]

    def test_complexity_carries_effort(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)
        assert matrix.cell("v1", "v2").migration_complexity == "low"
        assert matrix.cell("v1", "v3").migration_complexity == "medium"

    def test_summary(self, scenario_e: HistoricalCache) -> None:
        summary = generate_compatibility_matrix(scenario_e).summary

        assert summary.total_versions == 3
        assert summary.compatible_pairs == 2
        assert summary.incompatible_pairs == 4
        assert summary.compatibility_rate == 33.3

    def test_clusters_and_recommendations(self, scenario_e: HistoricalCache) -> None:
        matrix = generate_compatibility_matrix(scenario_e)

        assert matrix.clusters == [["v1", "v2"], ["v3"]]
        assert "Stay within versions v1 to v2 (v1, v2) to avoid breaking changes" in (
            matrix.recommendations
        )

    def test_all_compatible(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache(
            [
                make_snapshot("v2", {"A": {"x": {"type": "string"}}}, days=1),
                make_snapshot("v1", {"A": {}}),
            ]
        )

        matrix = generate_compatibility_matrix(cache)

        assert matrix.summary.compatibility_rate == 100.0
        assert matrix.clusters == [["v1", "v2"]]
        assert matrix.recommendations[0] == "All tracked versions are mutually compatible"

    def test_to_dict(self, scenario_e: HistoricalCache) -> None:
        data = generate_compatibility_matrix(scenario_e).to_dict()

        assert data["matrix"]["v1"]["v1"] == {
            "compatible": True,
            "breaking_changes": 0,
            "migration_complexity": "none",
            "notes": ["Same version"],
        }
        assert data["summary"]["compatibility_rate"] == 33.3


class TestClusterCompatibleVersions:
    def _cell(self, compatible: bool, complexity: str = "low") -> CompatibilityCell:
        return CompatibilityCell(
            compatible=compatible,
            breaking_changes=0 if compatible else 1,
            migration_complexity=complexity,  # type: ignore[arg-type]
        )

    def test_high_complexity_splits_cluster(self) -> None:
        versions = ["a", "b"]
        matrix = {
            "a": {"a": self._cell(True, "none"), "b": self._cell(True, "high")},
            "b": {"a": self._cell(True, "high"), "b": self._cell(True, "none")},
        }
        assert cluster_compatible_versions(versions, matrix) == [["a"], ["b"]]

    def test_member_must_match_every_existing_member(self) -> None:
        """c is compatible with b but not a, so it starts its own cluster."""
        versions = ["a", "b", "c"]
        ok = self._cell(True)
        bad = self._cell(False)
        matrix = {
            "a": {"a": ok, "b": ok, "c": bad},
            "b": {"a": ok, "b": ok, "c": ok},
            "c": {"a": bad, "b": ok, "c": ok},
        }
        assert cluster_compatible_versions(versions, matrix) == [["a", "b"], ["c"]]
