"""Correlation and time-trend analysis."""

from workpulse.analysis.correlation import analyze_pairs, correlate, correlation_matrix, pearson
from workpulse.analysis.trends import iso_week_bounds, weekly_trends

__all__ = [
    "pearson",
    "correlate",
    "analyze_pairs",
    "correlation_matrix",
    "iso_week_bounds",
    "weekly_trends",
]
