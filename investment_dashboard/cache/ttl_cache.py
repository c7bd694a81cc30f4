"""In-memory TTL cache owned by the price lookup service."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable


class TTLCache:
    """Thread-safe string-keyed cache with per-entry expiry.

    An entry is visible while ``now < expires_at``. Expired entries are
    dropped by the read that finds them or by ``keys()``.
    """

    def __init__(self, default_ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl_seconds = max(1, default_ttl_seconds)
        self._clock = clock
        self._entries: dict[str, tuple[float, object]] = {}
        self._lock = Lock()

    def _prune(self, now: float) -> None:
        stale = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in stale:
            del self._entries[key]

    def get(self, key: str) -> object | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else max(1, ttl_seconds)
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            self._prune(self._clock())
            return list(self._entries)

    def __len__(self) -> int:
        return len(self.keys())
