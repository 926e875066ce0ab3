"""Debounced recomputation scheduler owned by the calling application.

Change notifications arriving in a burst are coalesced into a single
recomputation once no new notification has arrived for ``quiet_period``
seconds. The scheduler is polled by the caller's loop; it starts no threads.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class RecomputeScheduler:
    """Coalescing task queue with a trailing-edge debounce policy."""

    def __init__(
        self,
        callback: Callable[[], Any],
        quiet_period: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if quiet_period < 0:
            raise ValueError(f"quiet_period must be non-negative, got {quiet_period}")
        self._callback = callback
        self._quiet_period = quiet_period
        self._clock = clock
        self._last_notified: float | None = None
        self._coalesced = 0
        self.runs = 0

    @property
    def pending(self) -> bool:
        return self._last_notified is not None

    @property
    def coalesced(self) -> int:
        """Notifications folded into the pending run."""
        return self._coalesced

    def notify(self) -> None:
        """Record an upstream change; restarts the quiet period."""
        self._last_notified = self._clock()
        self._coalesced += 1

    def due(self) -> bool:
        return self.pending and self._clock() - self._last_notified >= self._quiet_period

    def poll(self) -> Any | None:
        """Run the callback if a change is pending and the quiet period has elapsed.

        Returns:
            The callback's result if it ran, else None
        """
        if not self.due():
            return None
        return self._fire()

    def flush(self) -> Any | None:
        """Run the pending callback now, ignoring the quiet period."""
        if not self.pending:
            return None
        return self._fire()

    def cancel(self) -> None:
        """Drop the pending run."""
        self._last_notified = None
        self._coalesced = 0

    def _fire(self) -> Any:
        logger.debug("Recomputing after %d coalesced change(s)", self._coalesced)
        # Clear first so a notification raised by the callback schedules a new run
        self._last_notified = None
        self._coalesced = 0
        self.runs += 1
        return self._callback()
