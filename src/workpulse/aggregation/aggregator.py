"""Aggregator: groups scored respondents by a categorical key.

Each bucket carries count, mean score and the percentage of members in each
tier. Percentages are rounded to one decimal with largest-remainder
renormalization, so a non-empty bucket always sums to 100.0.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Callable

from workpulse.models.config import DEFAULT_SCORE_TIERS, AnalyticsConfig, Band, TierScheme
from workpulse.models.enums import MacroCategory
from workpulse.models.results import AggregationBucket, ScoredRespondent

logger = logging.getLogger(__name__)

KeyFunc = Callable[[ScoredRespondent], "str | None"]

OVERALL_KEY = "All"

PROFILE_DIMENSIONS = (
    "department",
    "role",
    "shift",
    "gender",
    "contract_type",
    "education_level",
)


def _band_label(value: float | None, bands: list[Band]) -> str | None:
    if value is None:
        return None
    for band in bands:
        if band.contains(value):
            return band.label
    return None


def dimension_key(name: str, config: AnalyticsConfig | None = None) -> KeyFunc:
    """Key extractor for a built-in dimension name.

    Raises:
        ValueError: If the dimension is unknown
    """
    config = config or AnalyticsConfig()
    if name == "category":
        return lambda r: r.category
    if name in PROFILE_DIMENSIONS:
        return lambda r: getattr(r.profile, name)
    if name == "age_band":
        return lambda r: _band_label(r.profile.age, config.age_bands)
    if name == "tenure_band":
        return lambda r: _band_label(r.profile.tenure_years, config.tenure_bands)
    raise ValueError(
        f"Unknown dimension '{name}'; expected one of "
        f"category, {', '.join(PROFILE_DIMENSIONS)}, age_band, tenure_band"
    )


def group_by(
    scored: list[ScoredRespondent],
    key: KeyFunc | str,
    config: AnalyticsConfig | None = None,
) -> dict[str, list[ScoredRespondent]]:
    """Partition respondents by key; blank or missing keys fall into the unspecified group."""
    config = config or AnalyticsConfig()
    key_func = dimension_key(key, config) if isinstance(key, str) else key
    unspecified = config.unspecified_category or MacroCategory.UNSPECIFIED.value

    groups: dict[str, list[ScoredRespondent]] = {}
    for respondent in scored:
        value = key_func(respondent)
        group = str(value).strip() if value is not None else ""
        groups.setdefault(group or unspecified, []).append(respondent)
    return groups


def distribute_percentages(counts: dict[str, int], total: int) -> dict[str, float]:
    """Percentages to one decimal that sum to exactly 100.0 (all zero when total is 0).

    Works in integer tenths: floor every share, then hand the missing tenths
    to the largest remainders, earlier tiers first on ties.
    """
    if total <= 0:
        return {tier: 0.0 for tier in counts}

    tenths = {tier: (count * 1000) // total for tier, count in counts.items()}
    remainders = {tier: (count * 1000) % total for tier, count in counts.items()}
    missing = 1000 - sum(tenths.values())

    order = list(counts)
    ranked = sorted(order, key=lambda t: (-remainders[t], order.index(t)))
    for tier in ranked[:missing]:
        tenths[tier] += 1

    return {tier: round(tenths[tier] / 10, 1) for tier in order}


def build_bucket(
    group_key: str,
    members: list[ScoredRespondent],
    scheme: TierScheme = DEFAULT_SCORE_TIERS,
    high_risk_tiers: list[str] | None = None,
    min_group_size: int = 1,
) -> AggregationBucket:
    """Summarize one group. An empty group reports zeros, never NaN."""
    counts = {tier: 0 for tier in scheme.tiers}
    for member in members:
        counts[member.risk_tier] = counts.get(member.risk_tier, 0) + 1

    n = len(members)
    if n == 0:
        return AggregationBucket(
            group_key=group_key,
            tier_distribution={tier: 0.0 for tier in counts},
            tier_counts=counts,
        )

    scores = [m.total_score for m in members]
    high_tiers = set(high_risk_tiers or [])
    high_count = sum(c for tier, c in counts.items() if tier in high_tiers)

    return AggregationBucket(
        group_key=group_key,
        respondent_count=n,
        average_score=round(sum(scores) / n, 2),
        tier_distribution=distribute_percentages(counts, n),
        tier_counts=counts,
        high_risk_percentage=round(high_count * 100 / n, 1),
        median_score=float(statistics.median(scores)),
        min_score=min(scores),
        max_score=max(scores),
        insufficient_sample=n < min_group_size,
    )


def aggregate(
    scored: list[ScoredRespondent],
    key: KeyFunc | str,
    config: AnalyticsConfig | None = None,
    universe: list[str] | None = None,
) -> list[AggregationBucket]:
    """One bucket per observed key, or per universe key when a universe is given.

    Args:
        scored: Scored respondents
        key: Key extractor or built-in dimension name
        config: Tier scheme, high-risk tiers, minimum group size
        universe: Full key set; unseen keys get empty buckets, order is kept

    Returns:
        Buckets sorted by key, or in universe order
    """
    config = config or AnalyticsConfig()
    groups = group_by(scored, key, config)

    if universe is not None:
        keys = list(dict.fromkeys(universe))
        keys.extend(sorted(k for k in groups if k not in keys))
    else:
        keys = sorted(groups)

    buckets = [
        build_bucket(
            k,
            groups.get(k, []),
            config.score_tiers,
            config.high_risk_tiers,
            config.min_group_size,
        )
        for k in keys
    ]

    small = [b.group_key for b in buckets if b.insufficient_sample]
    if small:
        logger.warning(
            "%d group(s) below minimum size %d: %s",
            len(small), config.min_group_size, ", ".join(small),
        )
    return buckets


def summarize(
    scored: list[ScoredRespondent], config: AnalyticsConfig | None = None
) -> AggregationBucket:
    """Single bucket over every respondent."""
    config = config or AnalyticsConfig()
    return build_bucket(
        OVERALL_KEY,
        scored,
        config.score_tiers,
        config.high_risk_tiers,
        config.min_group_size,
    )
