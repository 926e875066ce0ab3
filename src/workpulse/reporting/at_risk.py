"""At-risk listing: each respondent's latest response, grouped by tier."""

from __future__ import annotations

from workpulse.models.config import DEFAULT_SCORE_TIERS, TierScheme
from workpulse.models.results import AtRiskEntry, AtRiskTier, ScoredRespondent
from workpulse.utils.timestamps import to_utc


def latest_responses(scored: list[ScoredRespondent]) -> list[ScoredRespondent]:
    """Keep one response per respondent, the most recent one.

    On equal timestamps the response seen first is kept. Output order
    follows first appearance of each respondent.
    """
    latest: dict[str, ScoredRespondent] = {}
    for respondent in scored:
        current = latest.get(respondent.respondent_id)
        if current is None or to_utc(respondent.responded_at) > to_utc(current.responded_at):
            latest[respondent.respondent_id] = respondent
    return list(latest.values())


def at_risk_listing(
    scored: list[ScoredRespondent],
    scheme: TierScheme = DEFAULT_SCORE_TIERS,
) -> list[AtRiskTier]:
    """Latest responses grouped by tier, highest tier first.

    Every tier of the scheme is present, empty or not. Within a tier,
    respondents are ordered by descending score, then by id.
    """
    tiers: dict[str, list[AtRiskEntry]] = {tier: [] for tier in reversed(scheme.tiers)}
    for respondent in latest_responses(scored):
        tiers.setdefault(respondent.risk_tier, []).append(
            AtRiskEntry(
                respondent_id=respondent.respondent_id,
                total_score=respondent.total_score,
                risk_tier=respondent.risk_tier,
                category=respondent.category,
                department=respondent.profile.department,
                role=respondent.profile.role,
                responded_at=respondent.responded_at,
            )
        )
    return [
        AtRiskTier(
            tier=tier,
            respondents=sorted(entries, key=lambda e: (-e.total_score, e.respondent_id)),
        )
        for tier, entries in tiers.items()
    ]
