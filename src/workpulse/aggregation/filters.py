"""Filter descriptor and predicates applied to scored respondents."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workpulse.models.results import ScoredRespondent
from workpulse.taxonomy.categories import fold
from workpulse.utils.timestamps import to_utc

PROFILE_FIELDS = frozenset(
    {"department", "role", "shift", "gender", "contract_type", "education_level"}
)


class FilterDescriptor(BaseModel):
    """Caller-supplied constraints narrowing a snapshot before analysis.

    ``categories`` maps a dimension (``category`` for the normalized
    macro-category, or a profile field) to the accepted values.
    """

    categories: dict[str, list[str]] = Field(default_factory=dict)
    start: datetime | None = None
    end: datetime | None = None
    age_min: int | None = None
    age_max: int | None = None
    tenure_min: float | None = None
    tenure_max: float | None = None


def matches_categories(respondent: ScoredRespondent, categories: dict[str, list[str]]) -> bool:
    """Reject if any constrained dimension holds a value outside its accepted list."""
    for dimension, accepted in categories.items():
        if not accepted:
            continue
        if dimension == "category":
            value = respondent.category
        elif dimension in PROFILE_FIELDS:
            value = getattr(respondent.profile, dimension)
        else:
            value = respondent.profile.attributes.get(dimension)
        if value is None:
            return False
        if fold(str(value)) not in {fold(a) for a in accepted}:
            return False
    return True


def is_within_dates(respondent: ScoredRespondent, filters: FilterDescriptor) -> bool:
    """Reject responses outside the inclusive [start, end] window."""
    moment = to_utc(respondent.responded_at)
    if filters.start is not None and moment < to_utc(filters.start):
        return False
    if filters.end is not None and moment > to_utc(filters.end):
        return False
    return True


def is_within_age(respondent: ScoredRespondent, filters: FilterDescriptor) -> bool:
    """Reject if age is outside the range; unknown age fails any age constraint."""
    if filters.age_min is None and filters.age_max is None:
        return True
    age = respondent.profile.age
    if age is None:
        return False
    if filters.age_min is not None and age < filters.age_min:
        return False
    if filters.age_max is not None and age > filters.age_max:
        return False
    return True


def is_within_tenure(respondent: ScoredRespondent, filters: FilterDescriptor) -> bool:
    """Reject if tenure is outside the range; unknown tenure fails any tenure constraint."""
    if filters.tenure_min is None and filters.tenure_max is None:
        return True
    tenure = respondent.profile.tenure_years
    if tenure is None:
        return False
    if filters.tenure_min is not None and tenure < filters.tenure_min:
        return False
    if filters.tenure_max is not None and tenure > filters.tenure_max:
        return False
    return True


def passes_all_filters(respondent: ScoredRespondent, filters: FilterDescriptor) -> bool:
    """Apply all predicates. Returns True if the respondent passes."""
    return (
        matches_categories(respondent, filters.categories)
        and is_within_dates(respondent, filters)
        and is_within_age(respondent, filters)
        and is_within_tenure(respondent, filters)
    )


def apply_filters(
    scored: list[ScoredRespondent], filters: FilterDescriptor | None
) -> list[ScoredRespondent]:
    """Keep the respondents passing every predicate, preserving order."""
    if filters is None:
        return list(scored)
    return [r for r in scored if passes_all_filters(r, filters)]
