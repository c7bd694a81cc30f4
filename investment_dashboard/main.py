"""Application entrypoint for the investment dashboard backend."""

from __future__ import annotations

import asyncio
import logging
import os

import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from investment_dashboard.api.investments import build_investment_routes
from investment_dashboard.api.portfolio import build_portfolio_routes, build_price_routes
from investment_dashboard.cache.ttl_cache import TTLCache
from investment_dashboard.config.settings import Settings, get_settings
from investment_dashboard.providers.alpha_vantage import AlphaVantageClient
from investment_dashboard.providers.coingecko import CoinGeckoClient
from investment_dashboard.providers.gold_api import GoldApiClient
from investment_dashboard.runtime.monitoring import ServerMetrics, configure_logging
from investment_dashboard.services.base import ServiceContext
from investment_dashboard.services.price_service import PriceService
from investment_dashboard.storage.crypto import DocumentCipher
from investment_dashboard.storage.record_store import RecordStore
from investment_dashboard.tools.registry import build_tool_services, register_all_tools
from investment_dashboard.utils.rate_limit import RateLimiterRegistry

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    return "http"


def resolve_http_transport(configured_transport: str) -> str:
    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


def build_store(settings: Settings) -> RecordStore:
    cipher = DocumentCipher(settings.encryption_key) if settings.encryption_key else None
    if cipher is None:
        LOGGER.warning("ENCRYPTION_KEY not set; investments are stored as plain JSON")
    store = RecordStore(settings.data_file, cipher=cipher)
    store.initialize()
    return store


def build_price_service(settings: Settings, metrics: ServerMetrics | None = None) -> PriceService:
    alpha_vantage_client = (
        AlphaVantageClient(settings.alphavantage_api_key, settings.request_timeout_seconds)
        if settings.alphavantage_api_key
        else None
    )
    gold_client = GoldApiClient(settings.gold_api_key, settings.request_timeout_seconds) if settings.gold_api_key else None
    ctx = ServiceContext(
        providers={
            "alphavantage": alpha_vantage_client,
            "coingecko": CoinGeckoClient(settings.request_timeout_seconds),
            "goldapi": gold_client,
        },
        cache=TTLCache(default_ttl_seconds=settings.price_cache_ttl_seconds),
        rate_limiter=RateLimiterRegistry(min_interval_seconds=settings.provider_min_interval_seconds),
        cache_ttl_seconds=settings.price_cache_ttl_seconds,
        server_metrics=metrics,
    )
    if not alpha_vantage_client:
        LOGGER.warning("ALPHAVANTAGE_API_KEY not set; ETF and stock prices are unavailable")
    if not gold_client:
        LOGGER.warning("GOLD_API_KEY not set; XAU prices are unavailable")
    return PriceService(ctx)


def register_routes(mcp: FastMCP, routes: list[Route]) -> None:
    for route in routes:
        methods = sorted(method for method in route.methods or {"GET"} if method != "HEAD")
        mcp.custom_route(route.path, methods=methods)(route.endpoint)


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    server_metrics = ServerMetrics()
    store = build_store(settings)
    prices = build_price_service(settings, server_metrics)
    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    services = build_tool_services(store, prices)
    register_all_tools(mcp, services)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    register_routes(mcp, build_investment_routes(store, settings.api_prefix, server_metrics))
    register_routes(mcp, build_portfolio_routes(services.portfolio, settings.api_prefix, server_metrics))
    register_routes(mcp, build_price_routes(prices, settings.api_prefix, server_metrics))

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: Request) -> Response:
        result = await asyncio.to_thread(store.load)
        return JSONResponse(
            {
                "status": "ok" if not result.failed else "degraded",
                "service": settings.app_name,
                "version": settings.app_version,
                "mode": resolved_mode,
                "store": {
                    "status": result.status,
                    "records": len(result.investments),
                    "encrypted": store.encrypted,
                },
                "price_cache": prices.cache_status()["size"],
                "metrics": server_metrics.snapshot().to_dict(),
            }
        )

    LOGGER.info(
        "starting server: mode=%s transport=%s host=%s port=%s data_file=%s pid=%s",
        resolved_mode,
        resolved_http_transport,
        settings.host,
        settings.port,
        settings.data_file,
        os.getpid(),
    )
    if resolved_mode == "stdio":
        await mcp.run_stdio_async()
        return

    app = mcp.streamable_http_app() if resolved_http_transport == "streamable" else mcp.sse_app()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Store-Status"],
    )
    config = uvicorn.Config(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    await uvicorn.Server(config).serve()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
