"""Shared enumerations for all workpulse domain objects."""

from enum import StrEnum


class RiskTier(StrEnum):
    """Canonical risk tier identifiers.

    The four-tier score scheme uses LOW..VERY_HIGH; the five-tier heatmap
    weight table adds VERY_LOW. Tier schemes reference these by value.
    """

    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class MacroCategory(StrEnum):
    """Normalized organizational groupings derived from free-text labels."""

    ADMINISTRATION_HR = "Administration & HR"
    ENGINEERING_PROJECTS = "Engineering & Projects"
    OPERATIONS_MAINTENANCE = "Operations & Maintenance"
    SAFETY_HEALTH_ENVIRONMENT = "Safety/Health/Environment"
    LOGISTICS_SUPPLY = "Logistics & Supply"
    SERVICES_SUPPORT = "Services & Support"
    QUALITY_CONTROL = "Quality & Control"
    MANAGEMENT = "Management"
    UNSPECIFIED = "Unspecified"


class ItemFraming(StrEnum):
    """How a survey item is worded."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class ExclusionReason(StrEnum):
    """Why a respondent was left out of scoring."""

    MISSING_ANSWERS = "missing_answers"
    OUT_OF_RANGE = "out_of_range"
    INVALID_VALUE = "invalid_value"
    UNEXPECTED_ITEM = "unexpected_item"


class CorrelationStrength(StrEnum):
    """Strength label from the absolute correlation coefficient."""

    VERY_STRONG = "very_strong"
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    VERY_WEAK = "very_weak"


class CorrelationDirection(StrEnum):
    """Direction label from the sign of the correlation coefficient."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class CorrelationStatus(StrEnum):
    """Whether a coefficient was computed or defaulted for lack of data."""

    OK = "ok"
    NO_DATA = "no_data"


class RecommendationLevel(StrEnum):
    """Canned intervention level attached to a critical group."""

    CRITICAL_INTERVENTION = "critical_intervention"
    PRIORITY_PROGRAM = "priority_program"
    PREVENTIVE_PROGRAM = "preventive_program"
    MAINTAIN_PRACTICES = "maintain_practices"


class SampleAdequacy(StrEnum):
    """Whether a respondent count supports conclusions."""

    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    INSUFFICIENT = "insufficient"
