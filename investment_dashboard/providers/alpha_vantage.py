"""Alpha Vantage quote client for ETFs and stocks."""

from __future__ import annotations

from datetime import datetime, timezone

from investment_dashboard.providers.http import ProviderError, fetch_json, to_number
from investment_dashboard.providers.models import PriceData

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"


def parse_alpha_error(data: dict) -> ProviderError:
    note = data.get("Note") if isinstance(data.get("Note"), str) else None
    error_message = data.get("Error Message") if isinstance(data.get("Error Message"), str) else None
    information = data.get("Information") if isinstance(data.get("Information"), str) else None
    text = note or error_message or information or "Alpha Vantage returned an error."
    lower = text.lower()
    if (note and "frequency" in note.lower()) or "rate limit" in lower:
        return ProviderError("alphavantage", "RATE_LIMIT", text)
    if "api key" in lower:
        return ProviderError("alphavantage", "AUTH", text)
    if error_message:
        return ProviderError("alphavantage", "NOT_FOUND", text)
    return ProviderError("alphavantage", "UPSTREAM", text)


class AlphaVantageClient:
    """Thin wrapper around the GLOBAL_QUOTE endpoint."""

    def __init__(self, api_key: str, timeout_seconds: float = 15.0) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    def _request(self, params: dict[str, str]) -> dict:
        query = dict(params)
        query["apikey"] = self.api_key
        data = fetch_json(
            ALPHA_VANTAGE_BASE_URL,
            provider="alphavantage",
            timeout_seconds=self.timeout_seconds,
            params=query,
        )
        if not isinstance(data, dict):
            raise ProviderError("alphavantage", "BAD_RESPONSE", "Alpha Vantage returned an unexpected payload.")
        if data.get("Note") or data.get("Error Message") or data.get("Information"):
            raise parse_alpha_error(data)
        return data

    def get_quote(self, symbol: str) -> PriceData | None:
        data = self._request({"function": "GLOBAL_QUOTE", "symbol": symbol})
        quote = data.get("Global Quote")
        if not isinstance(quote, dict) or not quote:
            return None
        price = to_number(quote.get("05. price"))
        if price is None or price <= 0:
            return None
        last_updated = quote.get("07. latest trading day") or datetime.now(timezone.utc).isoformat()
        return PriceData(
            symbol=str(quote.get("01. symbol") or symbol),
            price=price,
            currency="USD",
            last_updated=str(last_updated),
            change_24h=to_number(quote.get("09. change")),
            change_percent_24h=to_number(quote.get("10. change percent")),
            source="alphavantage",
        )
