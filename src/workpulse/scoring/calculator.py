"""Score calculator: raw GHQ-12 sum, tier classification, per-item risk flags.

Two scoring views coexist:

- ``raw_sum`` adds the twelve answers as given; this is the total score
  every aggregate is built on.
- ``risk_flagged`` marks an individual answer as a risk response, reading
  positively framed items in reverse (a low answer is the risky one).
"""

from __future__ import annotations

import logging
from typing import Any

from workpulse.models.config import (
    DEFAULT_ITEM_FRAMING,
    DEFAULT_SCORE_TIERS,
    MAX_ANSWER,
    MIN_ANSWER,
    SURVEY_ITEMS,
    AnalyticsConfig,
    TierScheme,
)
from workpulse.models.enums import ExclusionReason, ItemFraming
from workpulse.models.respondent import RawResponseRecord, RespondentProfile, Snapshot
from workpulse.models.results import ExcludedRespondent, ScoredRespondent, ScoringOutcome
from workpulse.taxonomy.categories import CategoryNormalizer

logger = logging.getLogger(__name__)


def validate_answers(answers: dict[int, Any]) -> list[tuple[ExclusionReason, str]]:
    """List every problem with an answer set; empty means usable.

    Booleans and floats are rejected even when they look like 0-3: the
    store only ever writes integers, so anything else is corrupt.
    """
    problems: list[tuple[ExclusionReason, str]] = []
    for item in sorted(set(answers) - set(SURVEY_ITEMS)):
        problems.append((ExclusionReason.UNEXPECTED_ITEM, f"Unexpected item {item}"))

    for item in SURVEY_ITEMS:
        value = answers.get(item)
        if value is None:
            problems.append((ExclusionReason.MISSING_ANSWERS, f"Missing answer for item {item}"))
        elif isinstance(value, bool) or not isinstance(value, int):
            problems.append(
                (ExclusionReason.INVALID_VALUE, f"Item {item} has non-integer answer {value!r}")
            )
        elif not MIN_ANSWER <= value <= MAX_ANSWER:
            problems.append(
                (
                    ExclusionReason.OUT_OF_RANGE,
                    f"Item {item} answer {value} outside [{MIN_ANSWER}, {MAX_ANSWER}]",
                )
            )
    return problems


def raw_sum(answers: dict[int, int]) -> int:
    """Sum all twelve answers with equal, non-reversed weight."""
    return sum(answers[item] for item in SURVEY_ITEMS)


def classify_tier(total: float, scheme: TierScheme = DEFAULT_SCORE_TIERS) -> str:
    """Map a total score to its tier: first band whose inclusive upper bound holds it.

    Raises:
        ValueError: If the score lies outside the scheme's range
    """
    if not scheme.min_score <= total <= scheme.max_score:
        raise ValueError(
            f"Score {total} outside valid range [{scheme.min_score}, {scheme.max_score}]"
        )
    for band in scheme.bands:
        if total <= band.upper:
            return band.tier
    # Unreachable: the last band ends at max_score
    return scheme.bands[-1].tier


def risk_flagged(
    item: int,
    answer: int,
    framing: dict[int, ItemFraming] = DEFAULT_ITEM_FRAMING,
) -> bool:
    """Whether one answer counts as a risk response.

    Negatively framed items ("lost sleep over worry") are at risk when the
    answer is 2 or 3; positively framed ones ("able to concentrate") when it
    is 0 or 1.
    """
    if framing[item] == ItemFraming.NEGATIVE:
        return answer >= 2
    return answer <= 1


def score_record(
    record: RawResponseRecord,
    profile: RespondentProfile,
    scheme: TierScheme,
    normalizer: CategoryNormalizer,
) -> ScoredRespondent | ExcludedRespondent:
    """Score one respondent, or explain why it cannot be scored."""
    problems = validate_answers(record.answers)
    if problems:
        reasons: list[ExclusionReason] = []
        for reason, _ in problems:
            if reason not in reasons:
                reasons.append(reason)
        return ExcludedRespondent(
            respondent_id=record.respondent_id,
            reasons=reasons,
            details=[detail for _, detail in problems],
        )

    answers = {item: record.answers[item] for item in SURVEY_ITEMS}
    total = raw_sum(answers)
    return ScoredRespondent(
        respondent_id=record.respondent_id,
        total_score=total,
        risk_tier=classify_tier(total, scheme),
        responded_at=record.responded_at,
        category=normalizer.normalize(profile.department or profile.role),
        answers=answers,
        profile=profile,
    )


def score_snapshot(
    snapshot: Snapshot,
    config: AnalyticsConfig,
    normalizer: CategoryNormalizer | None = None,
) -> ScoringOutcome:
    """Score every entry of a snapshot, collecting exclusions instead of failing."""
    normalizer = normalizer or CategoryNormalizer.from_config(config)
    outcome = ScoringOutcome()

    for entry in snapshot.entries:
        result = score_record(entry.record, entry.profile, config.score_tiers, normalizer)
        if isinstance(result, ExcludedRespondent):
            logger.debug(
                "Excluding respondent %s: %s", result.respondent_id, "; ".join(result.details)
            )
            outcome.excluded.append(result)
        else:
            outcome.scored.append(result)

    logger.info(
        "Scored %d respondents (%d excluded)", len(outcome.scored), len(outcome.excluded)
    )
    return outcome
