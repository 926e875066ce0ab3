"""Caller-side services: result cache and debounced recomputation."""

from workpulse.service.cache import ResultCache, cache_key
from workpulse.service.scheduler import RecomputeScheduler

__all__ = ["ResultCache", "cache_key", "RecomputeScheduler"]
