"""Normalized price models shared across providers and tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ProviderName = Literal["alphavantage", "coingecko", "goldapi"]
AssetType = Literal["ETF", "Stock", "Cryptocurrency", "XAU"]

ASSET_TYPES: tuple[str, ...] = ("ETF", "Stock", "Cryptocurrency", "XAU")
ASSET_TYPE_ALIASES = {
    "etf": "ETF",
    "stock": "Stock",
    "crypto": "Cryptocurrency",
    "cryptocurrency": "Cryptocurrency",
    "xau": "XAU",
    "gold": "XAU",
}


def normalize_asset_type(value: str) -> AssetType:
    clean = ASSET_TYPE_ALIASES.get(value.strip().lower())
    if clean is None:
        raise ValueError(f"Asset type must be one of: {', '.join(ASSET_TYPES)}.")
    return clean  # type: ignore[return-value]


@dataclass
class PriceData:
    symbol: str
    price: float
    currency: str
    last_updated: str
    change_24h: float | None = None
    change_percent_24h: float | None = None
    source: ProviderName | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "symbol": self.symbol,
            "price": self.price,
            "currency": self.currency,
            "lastUpdated": self.last_updated,
            "change24h": self.change_24h,
            "changePercent24h": self.change_percent_24h,
            "source": self.source,
        }
