"""Unit tests for trend analysis (trends.py)."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from propdrift.config.models import TrendsConfig
from propdrift.history.cache import compute_analytics
from propdrift.history.models import HistoricalCache
from propdrift.history.trends import INSUFFICIENT_DATA_INSIGHT, analyze_version_patterns
from propdrift.snapshot.models import InterfaceSnapshot

MakeSnapshot = Callable[..., InterfaceSnapshot]


def _cache(versions: Sequence[InterfaceSnapshot]) -> HistoricalCache:
    """Cache from snapshots given newest first."""
    return HistoricalCache(versions=list(versions), analytics=compute_analytics(versions))


def _props(n: int) -> dict[str, dict[str, str]]:
    return {f"p{i:02d}": {"type": "string"} for i in range(n)}


class TestInsufficientData:
    def test_empty_cache(self) -> None:
        patterns = analyze_version_patterns(HistoricalCache())

        assert patterns.insufficient_data is True
        assert patterns.patterns == []
        assert patterns.insights == [INSUFFICIENT_DATA_INSIGHT]
        assert patterns.regression_risk == "unknown"
        assert patterns.recommended_testing == "standard"

    def test_single_version(self, make_snapshot: MakeSnapshot) -> None:
        patterns = analyze_version_patterns(_cache([make_snapshot("1.0.0", {})]))
        assert patterns.insufficient_data is True


class TestCadence:
    def test_high_frequency_is_medium_risk(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache(
            [
                make_snapshot("1.2.0", {"A": {}}, days=6),
                make_snapshot("1.1.0", {"A": {}}, days=3),
                make_snapshot("1.0.0", {"A": {}}),
            ]
        )

        patterns = analyze_version_patterns(cache)

        assert "Average time between versions: 3 days" in patterns.patterns
        assert any(i.startswith("High-frequency updates detected") for i in patterns.insights)
        assert patterns.regression_risk == "medium"
        assert patterns.recommended_testing == "targeted"

    def test_low_frequency(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache([make_snapshot("2.0.0", {}, days=45), make_snapshot("1.0.0", {})])

        patterns = analyze_version_patterns(cache)

        assert "Average time between versions: 45 days" in patterns.patterns
        assert any(i.startswith("Low-frequency updates") for i in patterns.insights)
        assert patterns.regression_risk == "low"
        assert patterns.recommended_testing == "standard"

    def test_average_rounds_half_up(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache([make_snapshot("2.0.0", {}, days=10.5), make_snapshot("1.0.0", {})])

        patterns = analyze_version_patterns(cache)

        assert "Average time between versions: 11 days" in patterns.patterns

    def test_thresholds_come_from_config(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache([make_snapshot("2.0.0", {}, days=10), make_snapshot("1.0.0", {})])

        patterns = analyze_version_patterns(cache, TrendsConfig(high_frequency_days=14))

        assert patterns.regression_risk == "medium"


class TestHotComponents:
    def test_top_components_ranked(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache(
            [
                make_snapshot("2.0.0", {"A": {}, "B": {}, "C": {}, "D": {}}, days=10),
                make_snapshot(
                    "1.0.0", {"A": _props(1), "B": _props(3), "C": _props(2), "D": _props(2)}
                ),
            ]
        )

        patterns = analyze_version_patterns(cache)

        # Ties broken by name
        assert "Most changed components: B (3), C (2), D (2)" in patterns.patterns

    def test_high_change_component_is_high_risk(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache(
            [
                make_snapshot("2.0.0", {"SignIn": {}, "Quiet": {}}, days=10),
                make_snapshot("1.0.0", {"SignIn": _props(11), "Quiet": _props(1)}),
            ]
        )

        patterns = analyze_version_patterns(cache)

        assert (
            "High-change components detected: SignIn - prioritize their test coverage"
            in patterns.insights
        )
        assert patterns.regression_risk == "high"
        assert patterns.recommended_testing == "comprehensive"

    def test_ten_changes_is_not_high(self, make_snapshot: MakeSnapshot) -> None:
        cache = _cache(
            [
                make_snapshot("2.0.0", {"SignIn": {}}, days=10),
                make_snapshot("1.0.0", {"SignIn": _props(10)}),
            ]
        )

        assert analyze_version_patterns(cache).regression_risk == "low"
