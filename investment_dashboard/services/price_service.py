"""Live price lookup with a per-service cache and per-provider throttle."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from investment_dashboard.providers.alpha_vantage import AlphaVantageClient
from investment_dashboard.providers.coingecko import CoinGeckoClient
from investment_dashboard.providers.gold_api import GoldApiClient
from investment_dashboard.providers.http import ProviderError
from investment_dashboard.providers.models import AssetType, PriceData, normalize_asset_type
from investment_dashboard.services.base import ServiceContext

LOGGER = logging.getLogger(__name__)

POPULAR_ETFS = ("VOO", "VTI", "VXUS", "QQQ", "SPY", "BND", "VT", "VEA", "VWO", "AGG")
POPULAR_CRYPTOS = ("bitcoin", "ethereum", "cardano", "binancecoin", "solana", "polkadot")

_PROVIDER_FOR_TYPE = {
    "ETF": "alphavantage",
    "Stock": "alphavantage",
    "Cryptocurrency": "coingecko",
    "XAU": "goldapi",
}


def cache_key(symbol: str, asset_type: str) -> str:
    return f"{symbol}-{asset_type}"


class PriceService:
    """Fetches current prices; absence of a result means "price unavailable".

    The cache and rate limiter come from the ``ServiceContext`` this service is
    built with, so their lifetime is the service's lifetime.
    """

    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx

    def _alpha(self) -> AlphaVantageClient | None:
        client = self.ctx.get_provider("alphavantage")
        return client if isinstance(client, AlphaVantageClient) else None

    def _coingecko(self) -> CoinGeckoClient | None:
        client = self.ctx.get_provider("coingecko")
        return client if isinstance(client, CoinGeckoClient) else None

    def _gold(self) -> GoldApiClient | None:
        client = self.ctx.get_provider("goldapi")
        return client if isinstance(client, GoldApiClient) else None

    def _record(self, provider: str, started: float, success: bool) -> float:
        latency_ms = (time.perf_counter() - started) * 1000.0
        if self.ctx.server_metrics is not None:
            self.ctx.server_metrics.record(latency_ms=latency_ms, success=success, route=f"provider:{provider}")
        return latency_ms

    def _dispatch(self, symbol: str, asset_type: AssetType) -> Callable[[], PriceData | None] | None:
        if asset_type in {"ETF", "Stock"}:
            alpha = self._alpha()
            if alpha is None:
                LOGGER.warning("alpha vantage api key not configured: symbol=%s", symbol)
                return None
            return lambda: alpha.get_quote(symbol)
        if asset_type == "Cryptocurrency":
            coingecko = self._coingecko()
            return (lambda: coingecko.get_price(symbol)) if coingecko else None
        gold = self._gold()
        if gold is None:
            LOGGER.warning("gold api key not configured")
            return None
        return gold.get_spot_price

    def get_price(self, symbol: str, asset_type: str) -> PriceData | None:
        try:
            normalized_type = normalize_asset_type(asset_type)
        except ValueError:
            LOGGER.warning("unsupported asset type: symbol=%s asset_type=%s", symbol, asset_type)
            return None
        key = cache_key(symbol, normalized_type)
        cached = self.ctx.cache.get(key)
        if isinstance(cached, PriceData):
            return cached

        call = self._dispatch(symbol, normalized_type)
        if call is None:
            return None

        provider = _PROVIDER_FOR_TYPE[normalized_type]
        self.ctx.rate_limiter.wait(provider)
        started = time.perf_counter()
        try:
            value = call()
        except ProviderError as error:
            LOGGER.warning(
                "price lookup failed: symbol=%s provider=%s code=%s status=%s",
                symbol,
                provider,
                error.code,
                error.status,
            )
            self._record(provider, started, success=False)
            return None
        except Exception:
            LOGGER.exception("price lookup unexpected failure: symbol=%s provider=%s", symbol, provider)
            self._record(provider, started, success=False)
            return None

        latency_ms = self._record(provider, started, success=True)
        LOGGER.info(
            "price lookup complete: symbol=%s provider=%s found=%s latency_ms=%s",
            symbol,
            provider,
            value is not None,
            round(latency_ms, 2),
        )
        if value is not None:
            self.ctx.cache.set(key, value, ttl_seconds=self.ctx.cache_ttl_seconds)
        return value

    def get_multiple_prices(self, assets: Iterable[tuple[str, str]]) -> list[PriceData]:
        """Fetch ``(symbol, asset_type)`` pairs in order, skipping unavailable prices."""
        results: list[PriceData] = []
        for symbol, asset_type in assets:
            price = self.get_price(symbol, asset_type)
            if price is not None:
                results.append(price)
        return results

    def get_popular_etf_prices(self) -> list[PriceData]:
        return self.get_multiple_prices((symbol, "ETF") for symbol in POPULAR_ETFS)

    def get_popular_crypto_prices(self) -> list[PriceData]:
        return self.get_multiple_prices((symbol, "Cryptocurrency") for symbol in POPULAR_CRYPTOS)

    def clear_cache(self) -> None:
        self.ctx.cache.clear()

    def cache_status(self) -> dict[str, object]:
        keys = self.ctx.cache.keys()
        return {"size": len(keys), "keys": keys}
