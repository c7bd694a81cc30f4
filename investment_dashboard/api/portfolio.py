"""Read-only analytics and live price routes."""

from __future__ import annotations

import asyncio
from datetime import date

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from investment_dashboard.api.common import instrumented, parse_filter
from investment_dashboard.portfolio.portfolio_service import PortfolioService
from investment_dashboard.portfolio.validation import parse_iso_date
from investment_dashboard.providers.models import normalize_asset_type
from investment_dashboard.runtime.monitoring import ServerMetrics
from investment_dashboard.runtime.response import error_response, json_response
from investment_dashboard.services.base import validate_symbol
from investment_dashboard.services.price_service import PriceService

GROUP_BY_VALUES = ("assetClass", "country", "currency")


def build_portfolio_routes(
    portfolio: PortfolioService,
    prefix: str = "/api",
    metrics: ServerMetrics | None = None,
) -> list[Route]:
    async def summary(request: Request) -> Response:
        flt = parse_filter(request)
        return json_response(await asyncio.to_thread(portfolio.summary, flt))

    async def allocation(request: Request) -> Response:
        group_by = request.query_params.get("groupBy", "assetClass")
        if group_by not in GROUP_BY_VALUES:
            return error_response("Invalid groupBy", 400, allowed=list(GROUP_BY_VALUES))
        flt = parse_filter(request)
        return json_response(await asyncio.to_thread(portfolio.allocation, flt, group_by))

    async def breakdown(request: Request) -> Response:
        flt = parse_filter(request)
        return json_response(await asyncio.to_thread(portfolio.breakdown, flt))

    async def filters(request: Request) -> Response:
        return json_response(await asyncio.to_thread(portfolio.filters))

    async def growth(request: Request) -> Response:
        flt = parse_filter(request)
        live = request.query_params.get("livePrices", "false").lower() in {"1", "true", "yes"}
        return json_response(await asyncio.to_thread(portfolio.growth, flt, live))

    async def maturity(request: Request) -> Response:
        flt = parse_filter(request)
        as_of = request.query_params.get("asOf")
        today: date | None = None
        if as_of:
            try:
                today = parse_iso_date(as_of)
            except ValueError:
                return error_response("Invalid asOf date", 400)
        return json_response(await asyncio.to_thread(portfolio.maturity, flt, today))

    routes = [
        Route(f"{prefix}/portfolio/summary", instrumented("portfolio_summary", metrics)(summary), methods=["GET"]),
        Route(f"{prefix}/portfolio/allocation", instrumented("portfolio_allocation", metrics)(allocation), methods=["GET"]),
        Route(f"{prefix}/portfolio/breakdown", instrumented("portfolio_breakdown", metrics)(breakdown), methods=["GET"]),
        Route(f"{prefix}/portfolio/filters", instrumented("portfolio_filters", metrics)(filters), methods=["GET"]),
        Route(f"{prefix}/portfolio/growth", instrumented("portfolio_growth", metrics)(growth), methods=["GET"]),
        Route(f"{prefix}/portfolio/maturity", instrumented("portfolio_maturity", metrics)(maturity), methods=["GET"]),
    ]
    return routes


def build_price_routes(
    prices: PriceService,
    prefix: str = "/api",
    metrics: ServerMetrics | None = None,
) -> list[Route]:
    async def live_price(request: Request) -> Response:
        try:
            asset_type = normalize_asset_type(request.path_params["asset_type"])
            symbol = validate_symbol(request.path_params["symbol"])
        except ValueError as error:
            return error_response(str(error), 400)
        price = await asyncio.to_thread(prices.get_price, symbol, asset_type)
        if price is None:
            return error_response("Price unavailable", 404, symbol=symbol, assetType=asset_type)
        return json_response(price)

    async def popular(request: Request) -> Response:
        etfs, cryptos = await asyncio.gather(
            asyncio.to_thread(prices.get_popular_etf_prices),
            asyncio.to_thread(prices.get_popular_crypto_prices),
        )
        return json_response({"etfs": etfs, "cryptos": cryptos})

    async def cache_status(request: Request) -> Response:
        return json_response(prices.cache_status())

    return [
        Route(f"{prefix}/prices/popular", instrumented("popular_prices", metrics)(popular), methods=["GET"]),
        Route(f"{prefix}/prices/cache", instrumented("price_cache_status", metrics)(cache_status), methods=["GET"]),
        Route(
            f"{prefix}/prices/{{asset_type}}/{{symbol}}",
            instrumented("live_price", metrics)(live_price),
            methods=["GET"],
        ),
    ]
