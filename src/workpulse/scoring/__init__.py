"""GHQ-12 scoring."""

from workpulse.scoring.calculator import (
    classify_tier,
    raw_sum,
    risk_flagged,
    score_record,
    score_snapshot,
    validate_answers,
)

__all__ = [
    "validate_answers",
    "raw_sum",
    "classify_tier",
    "risk_flagged",
    "score_record",
    "score_snapshot",
]
