"""Result models: everything the engine hands back to the caller.

All structures are plain pydantic models that serialize straight to JSON.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from workpulse.models.enums import (
    CorrelationDirection,
    CorrelationStatus,
    CorrelationStrength,
    ExclusionReason,
    ItemFraming,
    RecommendationLevel,
    SampleAdequacy,
)
from workpulse.models.respondent import RespondentProfile


class ScoredRespondent(BaseModel):
    """A respondent with a valid answer set, scored and tiered."""

    model_config = ConfigDict(frozen=True)

    respondent_id: str
    total_score: int = Field(ge=0, le=36)
    risk_tier: str
    responded_at: datetime
    category: str = Field(description="Normalized macro-category of the role/department label")
    answers: dict[int, int] = Field(default_factory=dict)
    profile: RespondentProfile


class ExcludedRespondent(BaseModel):
    """A respondent left out of scoring because its answers are unusable."""

    respondent_id: str
    reasons: list[ExclusionReason] = Field(default_factory=list)
    details: list[str] = Field(default_factory=list)


class ScoringOutcome(BaseModel):
    """Scored respondents plus the exclusion list for one snapshot."""

    scored: list[ScoredRespondent] = Field(default_factory=list)
    excluded: list[ExcludedRespondent] = Field(default_factory=list)


class AggregationBucket(BaseModel):
    """Summary of the respondents sharing one group key."""

    group_key: str
    respondent_count: int = 0
    average_score: float = 0.0
    tier_distribution: dict[str, float] = Field(
        default_factory=dict, description="Percentage per tier; sums to 100 when n > 0"
    )
    tier_counts: dict[str, int] = Field(default_factory=dict)
    high_risk_percentage: float = 0.0
    median_score: float = 0.0
    min_score: int = 0
    max_score: int = 0
    insufficient_sample: bool = False


class HeatmapRow(BaseModel):
    """One group of the concentration matrix."""

    group_key: str
    respondent_count: int = 0
    cells: dict[str, float] = Field(default_factory=dict, description="Percentage per tier column")
    weighted_average_risk: float = 0.0


class HeatmapMatrix(BaseModel):
    """Group x tier concentration matrix with a weighted-average column."""

    tiers: list[str] = Field(default_factory=list)
    rows: list[HeatmapRow] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(row.respondent_count for row in self.rows)


class CriticalGroup(BaseModel):
    """A high-ranking group in the critical view, with its canned recommendation."""

    group_key: str
    weighted_average_risk: float
    risk_label: str
    recommendation_level: RecommendationLevel
    recommendation: str


class HeatmapStatistics(BaseModel):
    """Summary statistics over a heatmap's weighted averages."""

    average_risk: float = 0.0
    groups_above_average: int = 0
    critical_count: int = 0
    total_groups: int = 0


class CorrelationPair(BaseModel):
    """Pearson coefficient for one variable pair."""

    pair_id: str
    variable_x: str
    variable_y: str
    label: str = ""
    coefficient: float = Field(0.0, ge=-1.0, le=1.0)
    sample_size: int = 0
    strength: CorrelationStrength = CorrelationStrength.VERY_WEAK
    direction: CorrelationDirection = CorrelationDirection.NEUTRAL
    status: CorrelationStatus = CorrelationStatus.OK


class TimeTrendPoint(BaseModel):
    """Aggregate for one ISO week."""

    week: str = Field(description="ISO week label, e.g. 2024-W07")
    start_date: date
    end_date: date
    respondent_count: int
    average_score: float
    percent_high_risk: float


class ItemRiskProfile(BaseModel):
    """Share of risk-flagged answers to one survey item within one group."""

    group_key: str
    item: int
    framing: ItemFraming
    response_count: int = 0
    risk_percentage: float = 0.0
    average_answer: float = 0.0


class AtRiskEntry(BaseModel):
    """One respondent's latest response in the at-risk listing."""

    respondent_id: str
    total_score: int
    risk_tier: str
    category: str
    department: str | None = None
    role: str | None = None
    responded_at: datetime


class AtRiskTier(BaseModel):
    """Respondents currently in one tier, highest score first."""

    tier: str
    respondents: list[AtRiskEntry] = Field(default_factory=list)


class DataQuality(BaseModel):
    """Completeness and sample-size indicators for the analysed population."""

    sample_size: int = 0
    sample_size_adequacy: SampleAdequacy = SampleAdequacy.INSUFFICIENT
    completeness_score: float = Field(0.0, description="Percent of key profile fields filled in")
    consistency_score: float = Field(
        0.0, description="Percent of respondents not giving one answer to every item"
    )


class AnalyticsReport(BaseModel):
    """All outputs of one analytics pass."""

    snapshot_fingerprint: str = ""
    respondent_count: int = 0
    overall: AggregationBucket
    aggregations: dict[str, list[AggregationBucket]] = Field(default_factory=dict)
    heatmap: HeatmapMatrix = Field(default_factory=HeatmapMatrix)
    critical_groups: list[CriticalGroup] = Field(default_factory=list)
    heatmap_statistics: HeatmapStatistics = Field(default_factory=HeatmapStatistics)
    correlations: list[CorrelationPair] = Field(default_factory=list)
    trends: list[TimeTrendPoint] = Field(default_factory=list)
    item_risk: list[ItemRiskProfile] = Field(default_factory=list)
    at_risk: list[AtRiskTier] = Field(default_factory=list)
    data_quality: DataQuality = Field(default_factory=DataQuality)
    excluded: list[ExcludedRespondent] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
