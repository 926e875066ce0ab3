"""Data-quality indicators for an analysed population."""

from __future__ import annotations

from workpulse.models.enums import SampleAdequacy
from workpulse.models.results import DataQuality, ScoredRespondent

# Minimum respondent counts, best rating first
ADEQUACY_THRESHOLDS: list[tuple[int, SampleAdequacy]] = [
    (30, SampleAdequacy.EXCELLENT),
    (15, SampleAdequacy.GOOD),
    (5, SampleAdequacy.ACCEPTABLE),
]

COMPLETENESS_FIELDS = ("department", "role", "age", "gender")


def assess_sample_size(sample_size: int) -> SampleAdequacy:
    for minimum, rating in ADEQUACY_THRESHOLDS:
        if sample_size >= minimum:
            return rating
    return SampleAdequacy.INSUFFICIENT


def _is_filled(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def completeness_score(scored: list[ScoredRespondent]) -> float:
    """Percent of department/role/age/gender values present, two decimals."""
    total = len(scored) * len(COMPLETENESS_FIELDS)
    if total == 0:
        return 0.0
    filled = sum(
        1
        for respondent in scored
        for field in COMPLETENESS_FIELDS
        if _is_filled(getattr(respondent.profile, field))
    )
    return round(filled * 100 / total, 2)


def consistency_score(scored: list[ScoredRespondent]) -> float:
    """Percent of respondents whose answers are not all the same value."""
    if not scored:
        return 0.0
    varied = sum(1 for r in scored if len(set(r.answers.values())) > 1)
    return round(varied * 100 / len(scored), 2)


def data_quality(scored: list[ScoredRespondent]) -> DataQuality:
    """Completeness, answer variation and sample-size rating in one block."""
    return DataQuality(
        sample_size=len(scored),
        sample_size_adequacy=assess_sample_size(len(scored)),
        completeness_score=completeness_score(scored),
        consistency_score=consistency_score(scored),
    )
