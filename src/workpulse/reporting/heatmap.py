"""Heatmap builder: group x tier concentration matrix and critical-group view."""

from __future__ import annotations

import logging

from workpulse.errors import ConfigurationError
from workpulse.models.config import (
    DEFAULT_HEATMAP_WEIGHTS,
    DEFAULT_RECOMMENDATION_RULES,
    RecommendationRule,
    TierWeightTable,
)
from workpulse.models.enums import RiskTier
from workpulse.models.results import (
    AggregationBucket,
    CriticalGroup,
    HeatmapMatrix,
    HeatmapRow,
    HeatmapStatistics,
)

logger = logging.getLogger(__name__)

WEIGHTED_AVERAGE = "weighted_average"

# Label bands on the 0-100 weighted-average scale, highest first
RISK_LABEL_BANDS: list[tuple[float, str]] = [
    (80.0, RiskTier.VERY_HIGH.value),
    (60.0, RiskTier.HIGH.value),
    (40.0, RiskTier.MODERATE.value),
    (20.0, RiskTier.LOW.value),
    (0.0, RiskTier.VERY_LOW.value),
]


def weighted_average_risk(cells: dict[str, float], weights: TierWeightTable) -> float:
    """Σ(percentage × weight) / Σ(percentage), scaled to 0-100.

    An all-zero row yields 0. Every tier in ``cells`` must have a weight.
    """
    total_weighted = 0.0
    total_percentage = 0.0
    for tier, percentage in cells.items():
        total_weighted += percentage * weights.weight(tier)
        total_percentage += percentage
    if total_percentage <= 0:
        return 0.0
    return round(total_weighted / total_percentage * 100, 1)


def risk_label(value: float) -> str:
    """Five-band label for a weighted average on the 0-100 scale."""
    for threshold, label in RISK_LABEL_BANDS:
        if value >= threshold:
            return label
    return RISK_LABEL_BANDS[-1][1]


def build_heatmap(
    buckets: list[AggregationBucket],
    weights: TierWeightTable = DEFAULT_HEATMAP_WEIGHTS,
) -> HeatmapMatrix:
    """One row per bucket, one column per weight-table tier.

    Raises:
        ConfigurationError: If a bucket carries a tier the weight table lacks
    """
    columns = weights.tiers
    rows = []
    for bucket in buckets:
        unknown = [t for t in bucket.tier_distribution if t not in weights.weights]
        if unknown:
            raise ConfigurationError(
                f"Group '{bucket.group_key}' has tier(s) without a heatmap weight: "
                f"{', '.join(unknown)}"
            )
        cells = {tier: bucket.tier_distribution.get(tier, 0.0) for tier in columns}
        rows.append(
            HeatmapRow(
                group_key=bucket.group_key,
                respondent_count=bucket.respondent_count,
                cells=cells,
                weighted_average_risk=weighted_average_risk(cells, weights),
            )
        )
    logger.debug("Built heatmap with %d rows x %d tiers", len(rows), len(columns))
    return HeatmapMatrix(tiers=columns, rows=rows)


def _metric_value(row: HeatmapRow, metric: str) -> float:
    if metric == WEIGHTED_AVERAGE:
        return row.weighted_average_risk
    if metric not in row.cells:
        raise ConfigurationError(
            f"Recommendation metric '{metric}' is neither '{WEIGHTED_AVERAGE}' "
            f"nor a heatmap tier ({', '.join(row.cells)})"
        )
    return row.cells[metric]


def recommend(
    row: HeatmapRow,
    rules: list[RecommendationRule] = DEFAULT_RECOMMENDATION_RULES,
) -> tuple[RecommendationRule, float]:
    """First rule whose metric exceeds its threshold; returns the rule and the metric value.

    Raises:
        ConfigurationError: If no rule matches (the table needs a fallback)
    """
    for rule in rules:
        if rule.metric is None:
            return rule, row.weighted_average_risk
        value = _metric_value(row, rule.metric)
        if value > rule.threshold:
            return rule, value
    raise ConfigurationError("Recommendation rules have no fallback rule (metric: null)")


def critical_groups(
    matrix: HeatmapMatrix,
    top_n: int = 5,
    rules: list[RecommendationRule] = DEFAULT_RECOMMENDATION_RULES,
    min_risk: float = 40.0,
) -> list[CriticalGroup]:
    """Top-N non-empty rows at or above ``min_risk``, by descending weighted average.

    Each row carries the recommendation of the first matching rule.
    """
    ranked = sorted(
        (row for row in matrix.rows if row.respondent_count and row.weighted_average_risk >= min_risk),
        key=lambda row: (-row.weighted_average_risk, row.group_key),
    )
    result = []
    for row in ranked[:top_n]:
        rule, value = recommend(row, rules)
        result.append(
            CriticalGroup(
                group_key=row.group_key,
                weighted_average_risk=row.weighted_average_risk,
                risk_label=risk_label(row.weighted_average_risk),
                recommendation_level=rule.level,
                recommendation=rule.message.format(group=row.group_key, value=value),
            )
        )
    return result


def heatmap_statistics(matrix: HeatmapMatrix, critical_threshold: float = 40.0) -> HeatmapStatistics:
    """Mean weighted risk across non-empty rows and how many rows exceed it."""
    values = [row.weighted_average_risk for row in matrix.rows if row.respondent_count]
    if not values:
        return HeatmapStatistics()

    average = sum(values) / len(values)
    return HeatmapStatistics(
        average_risk=round(average, 1),
        groups_above_average=sum(1 for v in values if v > average),
        critical_count=sum(1 for v in values if v >= critical_threshold),
        total_groups=len(values),
    )
