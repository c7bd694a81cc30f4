"""Request logging and per-route metrics for the health endpoint."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field

EVENT_LOGGER = logging.getLogger("investment_dashboard.requests")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class RouteStats:
    requests: int = 0
    errors: int = 0
    total_latency_ms: float = 0.0

    @property
    def avg_latency_ms(self) -> float:
        return self.total_latency_ms / self.requests if self.requests else 0.0


@dataclass
class HealthSnapshot:
    uptime_seconds: float
    total_requests: int
    error_rate: float
    avg_latency_ms: float
    routes: dict[str, RouteStats] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "uptime_seconds": round(self.uptime_seconds, 3),
            "total_requests": self.total_requests,
            "error_rate": self.error_rate,
            "avg_latency_ms": round(self.avg_latency_ms, 3),
            "routes": {
                name: {"requests": stats.requests, "errors": stats.errors, "avg_latency_ms": round(stats.avg_latency_ms, 3)}
                for name, stats in self.routes.items()
            },
        }


class ServerMetrics:
    """Counts requests since start; a 5xx response counts as an error."""

    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = started_at or time.time()
        self._lock = threading.Lock()
        self._routes: dict[str, RouteStats] = {}

    def record(self, latency_ms: float, success: bool, route: str = "other") -> None:
        with self._lock:
            stats = self._routes.setdefault(route, RouteStats())
            stats.requests += 1
            stats.total_latency_ms += max(0.0, latency_ms)
            if not success:
                stats.errors += 1

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            routes = {name: RouteStats(s.requests, s.errors, s.total_latency_ms) for name, s in self._routes.items()}
        total = sum(stats.requests for stats in routes.values())
        errors = sum(stats.errors for stats in routes.values())
        latency = sum(stats.total_latency_ms for stats in routes.values())
        return HealthSnapshot(
            uptime_seconds=max(0.0, time.time() - self.started_at),
            total_requests=total,
            error_rate=errors / total if total else 0.0,
            avg_latency_ms=latency / total if total else 0.0,
            routes=routes,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def log_request_event(
    route: str,
    method: str,
    status: int,
    latency_ms: float,
    investment_id: str | None = None,
    warning: str | None = None,
) -> None:
    """Emit one JSON line per API request on the ``investment_dashboard.requests`` logger."""
    event: dict[str, object] = {
        "route": route,
        "method": method,
        "status": status,
        "latency_ms": round(latency_ms, 3),
        "success": status < 500,
        "timestamp": int(time.time()),
    }
    if investment_id:
        event["investment_id"] = investment_id
    if warning:
        event["warning"] = warning
    EVENT_LOGGER.info(json.dumps(event, ensure_ascii=True))
