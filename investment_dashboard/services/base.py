"""Shared service wiring helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from investment_dashboard.cache.ttl_cache import TTLCache
from investment_dashboard.runtime.monitoring import ServerMetrics
from investment_dashboard.utils.rate_limit import RateLimiterRegistry

SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.\-]{0,31}$")


@dataclass
class ServiceContext:
    providers: dict[str, object]
    cache: TTLCache
    rate_limiter: RateLimiterRegistry
    cache_ttl_seconds: int = 300
    server_metrics: ServerMetrics | None = None

    def get_provider(self, name: str) -> object | None:
        return self.providers.get(name)


def validate_symbol(symbol: str) -> str:
    clean = symbol.strip()
    if not clean or not SYMBOL_PATTERN.match(clean):
        raise ValueError("Symbol must be 1-32 chars: letters, digits, dot, hyphen.")
    return clean
