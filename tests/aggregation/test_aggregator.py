"""Tests for the aggregator."""

import logging

import pytest

from conftest import make_scored
from workpulse.aggregation.aggregator import (
    OVERALL_KEY,
    aggregate,
    build_bucket,
    dimension_key,
    distribute_percentages,
    group_by,
    summarize,
)


# ─── Percentage distribution ───────────────────────────────────────────


def test_thirds_sum_to_exactly_100():
    result = distribute_percentages({"a": 1, "b": 1, "c": 1}, 3)
    assert result == {"a": 33.4, "b": 33.3, "c": 33.3}
    assert round(sum(result.values()), 1) == 100.0


def test_largest_remainder_gets_the_extra_tenth():
    result = distribute_percentages({"low": 2, "moderate": 1, "high": 0}, 3)
    assert result == {"low": 66.7, "moderate": 33.3, "high": 0.0}


def test_zero_total_is_all_zero():
    assert distribute_percentages({"a": 0, "b": 0}, 0) == {"a": 0.0, "b": 0.0}


@pytest.mark.parametrize("counts", [(1, 2, 4), (7, 0, 0, 6), (1, 1, 1, 1, 1, 1, 1)])
def test_distribution_always_sums_to_100(counts):
    tiers = {f"t{i}": c for i, c in enumerate(counts)}
    result = distribute_percentages(tiers, sum(counts))
    assert sum(round(v * 10) for v in result.values()) == 1000


# ─── Buckets ───────────────────────────────────────────────────────────


def test_two_operators_bucket(config):
    scored = [
        make_scored("a", 10, department="Operador de Línea"),
        make_scored("b", 30, department="Operador de Línea"),
    ]
    buckets = aggregate(scored, "category", config)

    assert len(buckets) == 1
    bucket = buckets[0]
    assert bucket.group_key == "Operations & Maintenance"
    assert bucket.respondent_count == 2
    assert bucket.average_score == 20.0
    assert bucket.tier_distribution == {
        "low": 0.0,
        "moderate": 50.0,
        "high": 0.0,
        "very_high": 50.0,
    }
    assert bucket.tier_counts == {"low": 0, "moderate": 1, "high": 0, "very_high": 1}
    assert bucket.high_risk_percentage == 50.0
    assert bucket.median_score == 20.0
    assert bucket.insufficient_sample is True


def test_empty_bucket_reports_zeros(config):
    bucket = build_bucket("Nobody", [], config.score_tiers, config.high_risk_tiers)
    assert bucket.respondent_count == 0
    assert bucket.average_score == 0.0
    assert set(bucket.tier_distribution.values()) == {0.0}
    assert bucket.high_risk_percentage == 0.0


def test_summarize_overall(config):
    scored = [make_scored(rid, total) for rid, total in [("a", 5), ("b", 14), ("c", 22), ("d", 30), ("e", 9)]]
    overall = summarize(scored, config)
    assert overall.group_key == OVERALL_KEY
    assert overall.respondent_count == 5
    assert overall.average_score == 16.0
    assert overall.tier_distribution == {"low": 40.0, "moderate": 20.0, "high": 20.0, "very_high": 20.0}
    assert overall.high_risk_percentage == 40.0
    assert overall.median_score == 14.0
    assert (overall.min_score, overall.max_score) == (5, 30)
    assert overall.insufficient_sample is False


# ─── Grouping ──────────────────────────────────────────────────────────


def test_buckets_sorted_by_key(config):
    scored = [
        make_scored("a", 5, shift="night"),
        make_scored("b", 5, shift="day"),
        make_scored("c", 5, shift="evening"),
    ]
    assert [b.group_key for b in aggregate(scored, "shift", config)] == ["day", "evening", "night"]


def test_blank_key_goes_to_unspecified(config):
    scored = [make_scored("a", 5, department=""), make_scored("b", 5)]
    groups = group_by(scored, "department", config)
    assert list(groups) == ["Unspecified"]
    assert len(groups["Unspecified"]) == 2


def test_universe_keeps_order_and_adds_empty_buckets(config):
    scored = [
        make_scored("a", 12, department="Mecánico"),
        make_scored("b", 12, department="Inspector de Calidad"),
    ]
    buckets = aggregate(
        scored, "category", config, universe=["Management", "Operations & Maintenance"]
    )
    assert [b.group_key for b in buckets] == [
        "Management",
        "Operations & Maintenance",
        "Quality & Control",
    ]
    assert buckets[0].respondent_count == 0


def test_callable_key(config):
    scored = [make_scored("a", 5), make_scored("b", 30)]
    buckets = aggregate(scored, lambda r: "hi" if r.total_score > 18 else "lo", config)
    assert {b.group_key: b.respondent_count for b in buckets} == {"hi": 1, "lo": 1}


class TestDimensionKey:
    def test_age_band(self, config):
        key = dimension_key("age_band", config)
        assert key(make_scored("a", 0, age=24)) == "<26"
        assert key(make_scored("b", 0, age=50)) == "46-55"
        assert key(make_scored("c", 0, age=70)) == "56+"
        assert key(make_scored("d", 0)) is None

    def test_tenure_band(self, config):
        key = dimension_key("tenure_band", config)
        assert key(make_scored("a", 0, tenure_years=0.5)) == "<1"
        assert key(make_scored("b", 0, tenure_years=3)) == "3-5"

    def test_unknown_dimension(self, config):
        with pytest.raises(ValueError, match="Unknown dimension"):
            dimension_key("favourite_colour", config)


def test_small_groups_logged(config, caplog):
    with caplog.at_level(logging.WARNING, logger="workpulse.aggregation.aggregator"):
        aggregate([make_scored("a", 5, shift="day")], "shift", config)
    assert "below minimum size 3" in caplog.text
