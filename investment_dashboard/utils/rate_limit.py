"""Per-provider minimum-interval throttle for outbound price requests."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable


class RateLimiterRegistry:
    """Ensures calls for a provider respect a minimum interval.

    Each provider is throttled independently, so a slow equity quote does not
    delay a crypto lookup.
    """

    def __init__(
        self,
        min_interval_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval_seconds = max(0.0, min_interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._last_called: dict[str, float] = {}
        self._lock = Lock()

    def wait(self, provider: str) -> float:
        """Block until ``provider`` may be called again; returns seconds slept."""
        if self.min_interval_seconds <= 0:
            return 0.0
        with self._lock:
            now = self._clock()
            last = self._last_called.get(provider)
            allowed_at = now if last is None else max(now, last + self.min_interval_seconds)
            self._last_called[provider] = allowed_at
        slept = allowed_at - now
        if slept > 0:
            self._sleep(slept)
        return slept
