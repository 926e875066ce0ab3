"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from workpulse.models.config import AnalyticsConfig
from workpulse.models.respondent import RawResponseRecord, RespondentProfile, Snapshot
from workpulse.models.results import ScoredRespondent
from workpulse.scoring.calculator import classify_tier
from workpulse.taxonomy.categories import CategoryNormalizer


def answers_summing_to(total: int) -> dict[int, int]:
    """Twelve answers in [0, 3] adding up to ``total``."""
    assert 0 <= total <= 36
    answers = {}
    remaining = total
    for item in range(1, 13):
        value = min(3, remaining)
        answers[item] = value
        remaining -= value
    return answers


def make_record(
    respondent_id: str,
    total: int = 0,
    responded_at: datetime | None = None,
    answers: dict | None = None,
) -> RawResponseRecord:
    return RawResponseRecord(
        respondent_id=respondent_id,
        answers=answers if answers is not None else answers_summing_to(total),
        responded_at=responded_at or datetime(2024, 3, 6, 9, 30, tzinfo=timezone.utc),
    )


def make_profile(respondent_id: str, **kwargs) -> RespondentProfile:
    return RespondentProfile(respondent_id=respondent_id, **kwargs)


def make_scored(
    respondent_id: str,
    total: int,
    responded_at: datetime | None = None,
    category: str | None = None,
    **profile_fields,
) -> ScoredRespondent:
    """Scored respondent built directly, bypassing the snapshot."""
    profile = make_profile(respondent_id, **profile_fields)
    label = profile.department or profile.role
    return ScoredRespondent(
        respondent_id=respondent_id,
        total_score=total,
        risk_tier=classify_tier(total),
        responded_at=responded_at or datetime(2024, 3, 6, 9, 30, tzinfo=timezone.utc),
        category=category or CategoryNormalizer(AnalyticsConfig().category_rules).normalize(label),
        answers=answers_summing_to(total),
        profile=profile,
    )


@pytest.fixture
def config() -> AnalyticsConfig:
    return AnalyticsConfig()


@pytest.fixture
def normalizer(config: AnalyticsConfig) -> CategoryNormalizer:
    return CategoryNormalizer.from_config(config)


@pytest.fixture
def sample_snapshot() -> Snapshot:
    rows = [
        ("r1", 5, datetime(2024, 3, 4, 8, tzinfo=timezone.utc),
         dict(department="Operador de Línea", gender="female", shift="night", age=24,
              tenure_years=1, motivation=8, job_satisfaction=7, management_confidence=6,
              uses_protective_equipment=True, had_prior_incident=False)),
        ("r2", 14, datetime(2024, 3, 5, 8, tzinfo=timezone.utc),
         dict(department="Mecánico", gender="male", shift="day", age=31,
              tenure_years=3, motivation=6, job_satisfaction=6, management_confidence=5,
              uses_protective_equipment=True, had_prior_incident=False)),
        ("r3", 22, datetime(2024, 3, 12, 8, tzinfo=timezone.utc),
         dict(department="Analista de Finanzas", gender="female", shift="day", age=42,
              tenure_years=8, motivation=4, job_satisfaction=4, management_confidence=3,
              uses_protective_equipment=False, had_prior_incident=True)),
        ("r4", 30, datetime(2024, 3, 13, 8, tzinfo=timezone.utc),
         dict(department="Jefe de Turno", gender="male", shift="night", age=50,
              tenure_years=12, motivation=2, job_satisfaction=3, management_confidence=2,
              uses_protective_equipment=False, had_prior_incident=True)),
        ("r5", 9, datetime(2024, 3, 20, 8, tzinfo=timezone.utc),
         dict(department="", gender="female", shift="day", age=28,
              tenure_years=2, motivation=7, job_satisfaction=8, management_confidence=7,
              uses_protective_equipment=True, had_prior_incident=False)),
    ]
    pairs = [
        (make_record(rid, total, when), make_profile(rid, **fields))
        for rid, total, when, fields in rows
    ]
    # One malformed record: item 12 missing
    bad_answers = answers_summing_to(12)
    del bad_answers[12]
    pairs.append((make_record("bad", answers=bad_answers), make_profile("bad", department="Soldador")))
    return Snapshot.from_pairs(pairs, version="v1")
