"""Shared REST-layer helpers."""

from __future__ import annotations

import functools
import time
from typing import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from investment_dashboard.portfolio.analytics_core import ALL, PortfolioFilter
from investment_dashboard.runtime.monitoring import ServerMetrics, log_request_event

Handler = Callable[[Request], Awaitable[Response]]


def instrumented(route: str, metrics: ServerMetrics | None = None) -> Callable[[Handler], Handler]:
    """Log one JSON event per request and feed the health metrics."""

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: Request) -> Response:
            started = time.perf_counter()
            status = 500
            try:
                response = await handler(request)
                status = response.status_code
                return response
            finally:
                latency_ms = (time.perf_counter() - started) * 1000.0
                log_request_event(
                    route=route,
                    method=request.method,
                    status=status,
                    latency_ms=latency_ms,
                    investment_id=request.path_params.get("investment_id"),
                    warning="slow_response" if latency_ms > 2000 else None,
                )
                if metrics is not None:
                    metrics.record(latency_ms=latency_ms, success=status < 500, route=route)

        return wrapper

    return decorator


def parse_filter(request: Request) -> PortfolioFilter:
    params = request.query_params
    display = params.get("displayCurrency") or params.get("currencyFilter") or "original"
    return PortfolioFilter(
        currency=params.get("currency") or ALL,
        country=params.get("country") or ALL,
        asset_class=params.get("assetClass") or ALL,
        display_currency="USD" if display.upper() == "USD" else "original",
    )
