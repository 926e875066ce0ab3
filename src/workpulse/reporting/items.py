"""Item-level risk profile: share of risk-flagged answers per item and group."""

from __future__ import annotations

from workpulse.aggregation.aggregator import KeyFunc, group_by
from workpulse.models.config import SURVEY_ITEMS, AnalyticsConfig
from workpulse.models.results import ItemRiskProfile, ScoredRespondent
from workpulse.scoring.calculator import risk_flagged


def item_risk_profile(
    scored: list[ScoredRespondent],
    key: KeyFunc | str = "category",
    config: AnalyticsConfig | None = None,
) -> list[ItemRiskProfile]:
    """For each group (sorted) and each of the 12 items, the risk-response rate.

    Uses ``risk_flagged``, so positively framed items count low answers as
    risky. Groups are keyed the same way as the aggregator.
    """
    config = config or AnalyticsConfig()
    groups = group_by(scored, key, config)

    profiles = []
    for group in sorted(groups):
        members = groups[group]
        for item in SURVEY_ITEMS:
            answers = [m.answers[item] for m in members if item in m.answers]
            n = len(answers)
            flagged = sum(1 for a in answers if risk_flagged(item, a, config.item_framing))
            profiles.append(
                ItemRiskProfile(
                    group_key=group,
                    item=item,
                    framing=config.item_framing[item],
                    response_count=n,
                    risk_percentage=round(flagged * 100 / n, 2) if n else 0.0,
                    average_answer=round(sum(answers) / n, 2) if n else 0.0,
                )
            )
    return profiles
