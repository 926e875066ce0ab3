"""Correlation analyzer: pairwise Pearson coefficients between respondent variables.

Variables are named extractors over a scored respondent. Booleans encode
as 0/1; ``<field>=<value>`` one-hot encodes a categorical field (1 when the
field equals the value, else 0). Respondents missing either value of a pair
are dropped for that pair only.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from itertools import combinations

from workpulse.errors import ConfigurationError
from workpulse.models.config import DEFAULT_CORRELATION_PAIRS, CorrelationPairSpec
from workpulse.models.enums import CorrelationDirection, CorrelationStatus, CorrelationStrength
from workpulse.models.results import CorrelationPair, ScoredRespondent
from workpulse.taxonomy.categories import fold

logger = logging.getLogger(__name__)

Extractor = Callable[[ScoredRespondent], "float | None"]

STRENGTH_THRESHOLDS: list[tuple[float, CorrelationStrength]] = [
    (0.8, CorrelationStrength.VERY_STRONG),
    (0.6, CorrelationStrength.STRONG),
    (0.4, CorrelationStrength.MODERATE),
    (0.2, CorrelationStrength.WEAK),
]
DIRECTION_THRESHOLD = 0.1
VARIANCE_TOLERANCE = 1e-12

NUMERIC_VARIABLES: dict[str, Extractor] = {
    "total_score": lambda r: float(r.total_score),
    "age": lambda r: r.profile.age,
    "tenure_years": lambda r: r.profile.tenure_years,
    "management_confidence": lambda r: r.profile.management_confidence,
    "job_satisfaction": lambda r: r.profile.job_satisfaction,
    "motivation": lambda r: r.profile.motivation,
    "uses_protective_equipment": lambda r: r.profile.uses_protective_equipment,
    "had_prior_incident": lambda r: r.profile.had_prior_incident,
}

CATEGORICAL_FIELDS = frozenset(
    {"category", "department", "role", "shift", "gender", "contract_type", "education_level"}
)


def _categorical_value(respondent: ScoredRespondent, field: str) -> str | None:
    if field == "category":
        return respondent.category
    return getattr(respondent.profile, field)


def resolve_variable(name: str) -> Extractor:
    """Look up the extractor for a variable name.

    Raises:
        ConfigurationError: If the name is neither a numeric variable nor a
            ``<field>=<value>`` encoding of a known categorical field
    """
    if name in NUMERIC_VARIABLES:
        return NUMERIC_VARIABLES[name]

    field, sep, wanted = name.partition("=")
    if sep and field in CATEGORICAL_FIELDS and wanted:
        target = fold(wanted)

        def one_hot(respondent: ScoredRespondent) -> float | None:
            value = _categorical_value(respondent, field)
            if value is None:
                return None
            return 1.0 if fold(value) == target else 0.0

        return one_hot

    raise ConfigurationError(
        f"Unknown correlation variable '{name}'; expected one of "
        f"{', '.join(NUMERIC_VARIABLES)} or <field>=<value> for "
        f"{', '.join(sorted(CATEGORICAL_FIELDS))}"
    )


def pearson(x: Sequence[float], y: Sequence[float]) -> tuple[float, CorrelationStatus]:
    """Pearson product-moment correlation.

    r = Σ(x − x̄)(y − ȳ) / sqrt(Σ(x − x̄)² · Σ(y − ȳ)²)

    Empty or mismatched input, or a series whose spread is within float
    noise of zero, yields (0.0, NO_DATA) rather than an error or NaN.
    """
    n = len(x)
    if n == 0 or n != len(y):
        return 0.0, CorrelationStatus.NO_DATA

    mean_x = sum(x) / n
    mean_y = sum(y) / n
    dx = [a - mean_x for a in x]
    dy = [b - mean_y for b in y]
    sxx = sum(d * d for d in dx)
    syy = sum(d * d for d in dy)
    # Spread is judged relative to magnitude; constant floats leave rounding residue
    flat_x = sxx <= VARIANCE_TOLERANCE * sum(a * a for a in x)
    flat_y = syy <= VARIANCE_TOLERANCE * sum(b * b for b in y)
    if flat_x or flat_y:
        return 0.0, CorrelationStatus.NO_DATA

    sxy = sum(a * b for a, b in zip(dx, dy))
    r = sxy / math.sqrt(sxx * syy)
    return max(-1.0, min(1.0, r)), CorrelationStatus.OK


def classify_strength(coefficient: float) -> CorrelationStrength:
    """Strength label from |r|."""
    magnitude = abs(coefficient)
    for threshold, strength in STRENGTH_THRESHOLDS:
        if magnitude >= threshold:
            return strength
    return CorrelationStrength.VERY_WEAK


def classify_direction(coefficient: float) -> CorrelationDirection:
    """Direction label from the sign of r, with a neutral band around zero."""
    if coefficient > DIRECTION_THRESHOLD:
        return CorrelationDirection.POSITIVE
    if coefficient < -DIRECTION_THRESHOLD:
        return CorrelationDirection.NEGATIVE
    return CorrelationDirection.NEUTRAL


def correlate(
    pair_id: str,
    x: Sequence[float],
    y: Sequence[float],
    variable_x: str = "x",
    variable_y: str = "y",
    label: str = "",
) -> CorrelationPair:
    """Correlate two pre-encoded series and label the result."""
    coefficient, status = pearson(x, y)
    return CorrelationPair(
        pair_id=pair_id,
        variable_x=variable_x,
        variable_y=variable_y,
        label=label,
        coefficient=round(coefficient, 4),
        sample_size=len(x) if len(x) == len(y) else 0,
        strength=classify_strength(coefficient),
        direction=classify_direction(coefficient),
        status=status,
    )


def paired_series(
    scored: list[ScoredRespondent], x_name: str, y_name: str
) -> tuple[list[float], list[float]]:
    """Extract both variables, keeping only respondents that have both."""
    fx = resolve_variable(x_name)
    fy = resolve_variable(y_name)
    xs: list[float] = []
    ys: list[float] = []
    for respondent in scored:
        vx, vy = fx(respondent), fy(respondent)
        if vx is None or vy is None:
            continue
        xs.append(float(vx))
        ys.append(float(vy))
    return xs, ys


def analyze_pairs(
    scored: list[ScoredRespondent],
    specs: list[CorrelationPairSpec] = DEFAULT_CORRELATION_PAIRS,
) -> list[CorrelationPair]:
    """One CorrelationPair per pair in ``specs``, in order. Self-pairs are not reported."""
    # Resolve every name up front so a bad pair list fails before any work
    for spec in specs:
        resolve_variable(spec.x)
        resolve_variable(spec.y)

    results = []
    for spec in specs:
        if spec.x == spec.y:
            logger.debug("Skipping self-correlation %s", spec.pair_id)
            continue
        xs, ys = paired_series(scored, spec.x, spec.y)
        pair = correlate(spec.pair_id, xs, ys, spec.x, spec.y, spec.label)
        if pair.status == CorrelationStatus.NO_DATA:
            logger.debug("No usable data for %s (n=%d)", spec.pair_id, len(xs))
        results.append(pair)
    return results


def correlation_matrix(
    scored: list[ScoredRespondent], variables: list[str]
) -> list[CorrelationPair]:
    """Every unordered pair of distinct variables."""
    unique = list(dict.fromkeys(variables))
    specs = [CorrelationPairSpec(x=a, y=b) for a, b in combinations(unique, 2)]
    return analyze_pairs(scored, specs)
