"""GoldAPI adapter for the XAU/USD spot price."""

from __future__ import annotations

from datetime import datetime, timezone

from investment_dashboard.providers.http import fetch_json, to_number
from investment_dashboard.providers.models import PriceData

GOLD_API_URL = "https://www.goldapi.io/api/XAU/USD"


class GoldApiClient:
    def __init__(self, api_key: str, timeout_seconds: float = 15.0) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    def get_spot_price(self) -> PriceData | None:
        data = fetch_json(
            GOLD_API_URL,
            provider="goldapi",
            timeout_seconds=self.timeout_seconds,
            headers={"x-access-token": self.api_key, "Content-Type": "application/json"},
        )
        if not isinstance(data, dict):
            return None
        # GoldAPI reports the spot price as "price"; older payloads used "price_usd".
        price = to_number(data.get("price")) or to_number(data.get("price_usd"))
        if price is None or price <= 0:
            return None
        return PriceData(
            symbol="XAU",
            price=price,
            currency="USD",
            last_updated=datetime.now(timezone.utc).isoformat(),
            change_24h=to_number(data.get("ch")) if data.get("ch") is not None else to_number(data.get("ch_usd")),
            change_percent_24h=(
                to_number(data.get("chp")) if data.get("chp") is not None else to_number(data.get("ch_usd_percent"))
            ),
            source="goldapi",
        )
