"""Grouping and filtering of scored respondents."""

from workpulse.aggregation.aggregator import aggregate, dimension_key, group_by, summarize
from workpulse.aggregation.filters import FilterDescriptor, apply_filters

__all__ = [
    "aggregate",
    "summarize",
    "group_by",
    "dimension_key",
    "FilterDescriptor",
    "apply_filters",
]
