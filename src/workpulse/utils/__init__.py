"""Utility functions for workpulse."""

from workpulse.utils.hashing import hash_filters, hash_snapshot
from workpulse.utils.logging import configure_logging
from workpulse.utils.timestamps import to_utc

__all__ = [
    "to_utc",
    "hash_snapshot",
    "hash_filters",
    "configure_logging",
]
