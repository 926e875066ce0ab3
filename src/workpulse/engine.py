"""Analytics engine: orchestrates score → filter → aggregate → heatmap/correlate/trend."""

from __future__ import annotations

import logging
from pathlib import Path

from workpulse.aggregation.aggregator import KeyFunc, aggregate, summarize
from workpulse.aggregation.filters import FilterDescriptor, apply_filters
from workpulse.analysis.correlation import analyze_pairs, correlation_matrix
from workpulse.analysis.trends import weekly_trends
from workpulse.config import load_config
from workpulse.models.config import AnalyticsConfig, CorrelationPairSpec
from workpulse.models.respondent import Snapshot
from workpulse.models.results import (
    AggregationBucket,
    AnalyticsReport,
    AtRiskTier,
    CorrelationPair,
    CriticalGroup,
    DataQuality,
    HeatmapMatrix,
    ItemRiskProfile,
    ScoredRespondent,
    ScoringOutcome,
    TimeTrendPoint,
)
from workpulse.reporting.at_risk import at_risk_listing
from workpulse.reporting.heatmap import build_heatmap, critical_groups, heatmap_statistics
from workpulse.reporting.items import item_risk_profile
from workpulse.reporting.quality import data_quality
from workpulse.scoring.calculator import score_snapshot
from workpulse.taxonomy.categories import CategoryNormalizer

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = ("category", "department", "role", "shift", "gender")


class AnalyticsEngine:
    """Pure, synchronous analytics over one snapshot at a time.

    Holds only configuration; every method is a function of its arguments,
    so concurrent or repeated calls on the same snapshot are safe.
    """

    def __init__(self, config: AnalyticsConfig | None = None, config_path: Path | None = None) -> None:
        self._config = config or load_config(config_path)
        self._normalizer = CategoryNormalizer.from_config(self._config)

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    @property
    def normalizer(self) -> CategoryNormalizer:
        return self._normalizer

    def score(self, snapshot: Snapshot) -> ScoringOutcome:
        """Score every respondent, collecting exclusions."""
        return score_snapshot(snapshot, self._config, self._normalizer)

    def aggregate(
        self,
        scored: list[ScoredRespondent],
        key: KeyFunc | str,
        universe: list[str] | None = None,
    ) -> list[AggregationBucket]:
        """Group by a dimension name or key function."""
        return aggregate(scored, key, self._config, universe)

    def heatmap(self, buckets: list[AggregationBucket]) -> HeatmapMatrix:
        """Concentration matrix for one grouping dimension."""
        return build_heatmap(buckets, self._config.heatmap_weights)

    def critical_groups(self, matrix: HeatmapMatrix, top_n: int | None = None) -> list[CriticalGroup]:
        """Top-N rows by weighted average with recommendations."""
        return critical_groups(
            matrix,
            top_n=self._config.critical_top_n if top_n is None else top_n,
            rules=self._config.recommendation_rules,
            min_risk=self._config.critical_min_risk,
        )

    def correlations(
        self,
        scored: list[ScoredRespondent],
        pairs: list[CorrelationPairSpec] | None = None,
    ) -> list[CorrelationPair]:
        """Correlate the configured (or given) variable pairs."""
        return analyze_pairs(scored, pairs if pairs is not None else self._config.correlation_pairs)

    def correlation_matrix(self, scored: list[ScoredRespondent], variables: list[str]) -> list[CorrelationPair]:
        """Correlate every distinct pair among ``variables``."""
        return correlation_matrix(scored, variables)

    def trends(self, scored: list[ScoredRespondent]) -> list[TimeTrendPoint]:
        """Weekly series over non-empty ISO weeks."""
        return weekly_trends(scored, self._config.high_risk_tiers)

    def item_profile(self, scored: list[ScoredRespondent], key: KeyFunc | str = "category") -> list[ItemRiskProfile]:
        """Per-item risk-response rates by group."""
        return item_risk_profile(scored, key, self._config)

    def at_risk(self, scored: list[ScoredRespondent]) -> list[AtRiskTier]:
        """Latest response per respondent, grouped by tier, highest first."""
        return at_risk_listing(scored, self._config.score_tiers)

    def data_quality(self, scored: list[ScoredRespondent]) -> DataQuality:
        return data_quality(scored)

    def run(
        self,
        snapshot: Snapshot,
        filters: FilterDescriptor | None = None,
        dimensions: tuple[str, ...] | list[str] = DEFAULT_DIMENSIONS,
        heatmap_dimension: str = "category",
    ) -> AnalyticsReport:
        """Full pipeline for one snapshot.

        Args:
            snapshot: Input records
            filters: Optional constraints applied after scoring
            dimensions: Dimensions to aggregate by
            heatmap_dimension: Dimension the heatmap and item profile use

        Returns:
            AnalyticsReport; identical input yields identical output
        """
        outcome = self.score(snapshot)
        scored = apply_filters(outcome.scored, filters)
        logger.info(
            "Running analytics on %d of %d scored respondents",
            len(scored), len(outcome.scored),
        )

        dims = list(dict.fromkeys([*dimensions, heatmap_dimension]))
        aggregations = {dim: self.aggregate(scored, dim) for dim in dims}
        matrix = self.heatmap(aggregations[heatmap_dimension])

        return AnalyticsReport(
            snapshot_fingerprint=snapshot.fingerprint(),
            respondent_count=len(scored),
            overall=summarize(scored, self._config),
            aggregations=aggregations,
            heatmap=matrix,
            critical_groups=self.critical_groups(matrix),
            heatmap_statistics=heatmap_statistics(matrix, self._config.critical_threshold),
            correlations=self.correlations(scored),
            trends=self.trends(scored),
            item_risk=self.item_profile(scored, heatmap_dimension),
            at_risk=self.at_risk(scored),
            data_quality=self.data_quality(scored),
            excluded=outcome.excluded,
            filters=filters.model_dump(mode="json", exclude_defaults=True) if filters else {},
        )
