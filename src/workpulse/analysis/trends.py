"""Time-trend aggregator: ISO-week buckets with mean score and high-risk share."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from workpulse.models.enums import RiskTier
from workpulse.models.results import ScoredRespondent, TimeTrendPoint
from workpulse.utils.timestamps import to_utc

DEFAULT_HIGH_RISK_TIERS = (RiskTier.HIGH.value, RiskTier.VERY_HIGH.value)


def iso_week_bounds(moment: datetime) -> tuple[str, date, date]:
    """ISO week label plus its Monday and Sunday, all in UTC.

    The label uses the ISO year, so 2024-12-30 is '2025-W01'.
    """
    day = to_utc(moment).date()
    iso_year, iso_week, iso_weekday = day.isocalendar()
    monday = day - timedelta(days=iso_weekday - 1)
    return f"{iso_year}-W{iso_week:02d}", monday, monday + timedelta(days=6)


def weekly_trends(
    scored: list[ScoredRespondent],
    high_risk_tiers: tuple[str, ...] | list[str] = DEFAULT_HIGH_RISK_TIERS,
) -> list[TimeTrendPoint]:
    """One point per non-empty ISO week, ordered by week start.

    Empty weeks are omitted; callers needing a continuous axis fill gaps.
    """
    high = set(high_risk_tiers)
    weeks: dict[date, dict] = {}

    for respondent in scored:
        label, monday, sunday = iso_week_bounds(respondent.responded_at)
        bucket = weeks.setdefault(
            monday, {"week": label, "end": sunday, "total": 0, "count": 0, "high": 0}
        )
        bucket["total"] += respondent.total_score
        bucket["count"] += 1
        if respondent.risk_tier in high:
            bucket["high"] += 1

    points = []
    for monday in sorted(weeks):
        bucket = weeks[monday]
        count = bucket["count"]
        points.append(
            TimeTrendPoint(
                week=bucket["week"],
                start_date=monday,
                end_date=bucket["end"],
                respondent_count=count,
                average_score=round(bucket["total"] / count, 2),
                percent_high_risk=round(bucket["high"] * 100 / count, 2),
            )
        )
    return points
