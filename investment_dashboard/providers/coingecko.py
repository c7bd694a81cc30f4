"""CoinGecko adapter for cryptocurrency spot prices."""

from __future__ import annotations

from datetime import datetime, timezone

from investment_dashboard.providers.http import fetch_json, to_number
from investment_dashboard.providers.models import PriceData

COINGECKO_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"

# Ticker -> CoinGecko coin id for the common coins; anything else is
# assumed to already be a coin id.
SYMBOL_TO_COIN_ID = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "ADA": "cardano",
    "BNB": "binancecoin",
    "SOL": "solana",
    "DOT": "polkadot",
    "DOGE": "dogecoin",
    "XRP": "ripple",
    "LTC": "litecoin",
    "BCH": "bitcoin-cash",
}


def resolve_coin_id(symbol: str) -> str:
    clean = symbol.strip()
    return SYMBOL_TO_COIN_ID.get(clean.upper(), clean.lower())


class CoinGeckoClient:
    def __init__(self, timeout_seconds: float = 15.0) -> None:
        self.timeout_seconds = timeout_seconds

    def get_price(self, symbol: str) -> PriceData | None:
        coin_id = resolve_coin_id(symbol)
        data = fetch_json(
            COINGECKO_PRICE_URL,
            provider="coingecko",
            timeout_seconds=self.timeout_seconds,
            params={"ids": coin_id, "vs_currencies": "usd", "include_24hr_change": "true"},
        )
        entry = data.get(coin_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict):
            return None
        price = to_number(entry.get("usd"))
        if price is None or price <= 0:
            return None
        return PriceData(
            symbol=symbol.strip().upper(),
            price=price,
            currency="USD",
            last_updated=datetime.now(timezone.utc).isoformat(),
            change_percent_24h=to_number(entry.get("usd_24h_change")),
            source="coingecko",
        )
