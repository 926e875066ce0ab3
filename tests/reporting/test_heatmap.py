"""Tests for the heatmap builder and critical-group view."""

import pytest

from conftest import make_scored
from workpulse.aggregation.aggregator import aggregate
from workpulse.errors import ConfigurationError
from workpulse.models.config import (
    DEFAULT_HEATMAP_WEIGHTS,
    RecommendationRule,
    TierWeightTable,
)
from workpulse.models.enums import RecommendationLevel
from workpulse.models.results import AggregationBucket, HeatmapMatrix, HeatmapRow
from workpulse.reporting.heatmap import (
    build_heatmap,
    critical_groups,
    heatmap_statistics,
    recommend,
    risk_label,
    weighted_average_risk,
)

TIERS = ["very_low", "low", "moderate", "high", "very_high"]


def _cells(**values):
    return {tier: float(values.get(tier, 0.0)) for tier in TIERS}


def _row(key, weighted, n=5, **cells):
    return HeatmapRow(group_key=key, respondent_count=n, cells=_cells(**cells), weighted_average_risk=weighted)


# ─── Weighted average ──────────────────────────────────────────────────


def test_all_high_row_weighs_seventy():
    assert weighted_average_risk(_cells(high=100), DEFAULT_HEATMAP_WEIGHTS) == 70.0


def test_all_zero_row_is_zero():
    assert weighted_average_risk(_cells(), DEFAULT_HEATMAP_WEIGHTS) == 0.0


def test_mixed_row():
    assert weighted_average_risk(_cells(moderate=50, very_high=50), DEFAULT_HEATMAP_WEIGHTS) == 70.0
    assert weighted_average_risk(_cells(low=50, moderate=50), DEFAULT_HEATMAP_WEIGHTS) == 40.0


def test_tier_without_weight_is_configuration_error():
    with pytest.raises(ConfigurationError):
        weighted_average_risk({"extreme": 100.0}, DEFAULT_HEATMAP_WEIGHTS)


@pytest.mark.parametrize(
    "value, label",
    [(0.0, "very_low"), (19.9, "very_low"), (20.0, "low"), (40.0, "moderate"), (70.0, "high"), (80.0, "very_high")],
)
def test_risk_label(value, label):
    assert risk_label(value) == label


# ─── Matrix ────────────────────────────────────────────────────────────


def test_build_heatmap_from_buckets(config):
    scored = [
        make_scored("a", 10, department="Operador de Línea"),
        make_scored("b", 30, department="Operador de Línea"),
        make_scored("c", 22, department="Jefe de Turno"),
    ]
    matrix = build_heatmap(aggregate(scored, "category", config), config.heatmap_weights)

    assert matrix.tiers == TIERS
    assert [row.group_key for row in matrix.rows] == ["Management", "Operations & Maintenance"]
    operations = matrix.rows[1]
    assert operations.cells == _cells(moderate=50, very_high=50)
    assert operations.weighted_average_risk == 70.0
    assert matrix.rows[0].weighted_average_risk == 70.0
    assert matrix.is_empty is False


def test_build_heatmap_rejects_unweighted_tier():
    bucket = AggregationBucket(group_key="X", respondent_count=1, tier_distribution={"extreme": 100.0})
    with pytest.raises(ConfigurationError, match="without a heatmap weight"):
        build_heatmap([bucket], DEFAULT_HEATMAP_WEIGHTS)


def test_empty_input_gives_empty_matrix():
    matrix = build_heatmap([], DEFAULT_HEATMAP_WEIGHTS)
    assert matrix.rows == []
    assert matrix.is_empty is True


def test_custom_weight_table_drives_columns():
    weights = TierWeightTable(weights={"low": 0.0, "moderate": 0.5, "high": 1.0, "very_high": 1.0})
    bucket = AggregationBucket(
        group_key="X",
        respondent_count=2,
        tier_distribution={"low": 50.0, "moderate": 0.0, "high": 50.0, "very_high": 0.0},
    )
    row = build_heatmap([bucket], weights).rows[0]
    assert list(row.cells) == ["low", "moderate", "high", "very_high"]
    assert row.weighted_average_risk == 50.0


# ─── Recommendations ───────────────────────────────────────────────────


class TestRecommend:
    def test_very_high_majority_is_critical(self):
        rule, value = recommend(_row("Ops", 83.0, high=40, very_high=60))
        assert rule.level == RecommendationLevel.CRITICAL_INTERVENTION
        assert value == 60.0

    def test_high_share_is_priority(self):
        rule, value = recommend(_row("Ops", 62.0, moderate=60, high=40))
        assert rule.level == RecommendationLevel.PRIORITY_PROGRAM
        assert value == 40.0

    def test_preventive_program_uses_moderate_share(self):
        rule, value = recommend(_row("Ops", 42.0, low=40, moderate=60))
        assert rule.level == RecommendationLevel.PREVENTIVE_PROGRAM
        assert value == 60.0

    def test_thresholds_are_exclusive(self):
        rule, _ = recommend(_row("Ops", 70.0, low=50, very_high=50))
        assert rule.level == RecommendationLevel.MAINTAIN_PRACTICES

    def test_all_low_group_maintains_practices(self):
        rule, _ = recommend(_row("Ops", 30.0, low=100))
        assert rule.level == RecommendationLevel.MAINTAIN_PRACTICES

    def test_weighted_average_metric(self):
        rules = [
            RecommendationRule(
                metric="weighted_average", threshold=60,
                level=RecommendationLevel.CRITICAL_INTERVENTION, message="x",
            ),
            RecommendationRule(level=RecommendationLevel.MAINTAIN_PRACTICES, message="y"),
        ]
        assert recommend(_row("Ops", 70.0), rules)[0].level == RecommendationLevel.CRITICAL_INTERVENTION
        assert recommend(_row("Ops", 60.0), rules)[0].level == RecommendationLevel.MAINTAIN_PRACTICES

    def test_no_fallback_is_configuration_error(self):
        rules = [
            RecommendationRule(
                metric="weighted_average", threshold=90,
                level=RecommendationLevel.CRITICAL_INTERVENTION, message="x",
            )
        ]
        with pytest.raises(ConfigurationError, match="fallback"):
            recommend(_row("Ops", 10.0, very_low=100), rules)

    def test_unknown_metric_is_configuration_error(self):
        rules = [
            RecommendationRule(
                metric="turnover", threshold=1,
                level=RecommendationLevel.PRIORITY_PROGRAM, message="x",
            )
        ]
        with pytest.raises(ConfigurationError, match="turnover"):
            recommend(_row("Ops", 10.0), rules)


# ─── Critical groups ───────────────────────────────────────────────────


def test_critical_groups_ranked_and_filtered():
    matrix = HeatmapMatrix(
        tiers=TIERS,
        rows=[
            _row("C", 70.0, high=100),
            _row("B", 10.0, very_low=100),
            _row("A", 70.0, high=100),
            _row("D", 50.0, n=0),
            _row("E", 45.0, moderate=100),
        ],
    )
    result = critical_groups(matrix, top_n=2)
    assert [g.group_key for g in result] == ["A", "C"]
    assert result[0].risk_label == "high"
    assert result[0].recommendation == "Priority wellbeing program for A (100.0% at high risk)"


def test_critical_groups_excludes_low_risk_rows():
    matrix = HeatmapMatrix(tiers=TIERS, rows=[_row("B", 10.0, very_low=100), _row("E", 45.0, moderate=100)])
    assert [g.group_key for g in critical_groups(matrix)] == ["E"]


def test_all_low_group_is_not_critical():
    matrix = HeatmapMatrix(
        tiers=TIERS,
        rows=[_row("Quality", 30.0, low=100), _row("Ops", 40.0, low=50, moderate=50)],
    )
    result = critical_groups(matrix)
    assert [g.group_key for g in result] == ["Ops"]
    assert result[0].recommendation_level == RecommendationLevel.PREVENTIVE_PROGRAM


def test_critical_groups_top_n_zero():
    matrix = HeatmapMatrix(tiers=TIERS, rows=[_row("E", 45.0, moderate=100)])
    assert critical_groups(matrix, top_n=0) == []


def test_critical_groups_empty_matrix():
    assert critical_groups(HeatmapMatrix()) == []


# ─── Statistics ────────────────────────────────────────────────────────


def test_heatmap_statistics():
    matrix = HeatmapMatrix(
        tiers=TIERS,
        rows=[_row("A", 70.0), _row("B", 30.0), _row("C", 20.0), _row("D", 90.0, n=0)],
    )
    stats = heatmap_statistics(matrix)
    assert stats.average_risk == 40.0
    assert stats.groups_above_average == 1
    assert stats.critical_count == 1
    assert stats.total_groups == 3


def test_heatmap_statistics_empty():
    stats = heatmap_statistics(HeatmapMatrix())
    assert stats.total_groups == 0
    assert stats.average_risk == 0.0
