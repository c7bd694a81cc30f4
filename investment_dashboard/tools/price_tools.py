"""Live price MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from investment_dashboard.providers.models import normalize_asset_type
from investment_dashboard.runtime.response import tool_error, tool_payload
from investment_dashboard.services.base import validate_symbol

if TYPE_CHECKING:
    from investment_dashboard.tools.registry import ToolServices


def register_price_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Get a live unit price in USD for an ETF, Stock, Cryptocurrency or XAU holding.")
    def get_live_price(symbol: str, asset_type: str) -> str:
        try:
            clean_type = normalize_asset_type(asset_type)
            clean_symbol = validate_symbol(symbol)
        except ValueError as error:
            return tool_error("INVALID_INPUT", str(error))
        price = services.prices.get_price(clean_symbol, clean_type)
        if price is None:
            return tool_error("DATA_UNAVAILABLE", "Price unavailable.")
        return tool_payload(price)

    @mcp.tool(description="Get live prices for the popular ETF and crypto watch lists.")
    def get_popular_prices() -> str:
        return tool_payload(
            {
                "etfs": services.prices.get_popular_etf_prices(),
                "cryptos": services.prices.get_popular_crypto_prices(),
            }
        )
