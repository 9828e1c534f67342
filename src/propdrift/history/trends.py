"""Statistical summary over the historical cache.

Reads the cache's analytics (cadence and per-component change counts) and
turns them into narrative patterns, insights and a regression-risk tier.
"""

from __future__ import annotations

import math

from propdrift.config.models import TrendsConfig
from propdrift.history.models import HistoricalCache, RiskLevel, TestingDepth, VersionPatterns

INSUFFICIENT_DATA_INSIGHT = "Insufficient historical data for pattern analysis"

_TESTING_BY_RISK: dict[RiskLevel, TestingDepth] = {
    "unknown": "standard",
    "low": "standard",
    "medium": "targeted",
    "high": "comprehensive",
}


def analyze_version_patterns(
    cache: HistoricalCache,
    config: TrendsConfig | None = None,
) -> VersionPatterns:
    """Summarize update cadence, hot components and regression risk.

    Needs at least two versions; otherwise returns an insufficient-data
    result rather than raising.
    """
    config = config or TrendsConfig()
    if len(cache.versions) < 2:
        return VersionPatterns(insights=[INSUFFICIENT_DATA_INSIGHT], insufficient_data=True)

    frequency = cache.analytics.change_frequency
    patterns: list[str] = []
    insights: list[str] = []
    risk: RiskLevel = "low"

    avg_days = frequency.average_days_between_versions
    if avg_days is not None:
        patterns.append(f"Average time between versions: {_round_half_up(avg_days)} days")
        if avg_days < config.high_frequency_days:
            insights.append(
                "High-frequency updates detected - consider automated change detection in CI"
            )
            risk = "medium"
        elif avg_days > config.low_frequency_days:
            insights.append(
                "Low-frequency updates - changes may be more significant when they land"
            )

    by_component = frequency.changes_by_component
    if by_component:
        # Ties broken by name so the report is stable
        ranked = sorted(by_component.items(), key=lambda item: (-item[1], item[0]))
        top = ", ".join(f"{name} ({count})" for name, count in ranked[: config.top_components])
        patterns.append(f"Most changed components: {top}")

        hot = [name for name, count in ranked if count > config.high_change_threshold]
        if hot:
            insights.append(
                f"High-change components detected: {', '.join(hot)} - prioritize their test coverage"
            )
            risk = "high"

    return VersionPatterns(
        patterns=patterns,
        insights=insights,
        regression_risk=risk,
        recommended_testing=_TESTING_BY_RISK[risk],
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
