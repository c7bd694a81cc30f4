"""Portfolio-domain MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from investment_dashboard.portfolio.analytics_core import ALL, PortfolioFilter
from investment_dashboard.portfolio.validation import parse_iso_date
from investment_dashboard.runtime.response import tool_error, tool_payload

if TYPE_CHECKING:
    from investment_dashboard.tools.registry import ToolServices

GROUP_BY_VALUES = ("assetClass", "country", "currency")


def _filter(currency: str, country: str, asset_class: str, display_currency: str) -> PortfolioFilter:
    return PortfolioFilter(
        currency=currency or ALL,
        country=country or ALL,
        asset_class=asset_class or ALL,
        display_currency="USD" if display_currency.upper() == "USD" else "original",
    )


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="List every stored investment record.")
    def list_investments() -> str:
        result = services.store.load()
        return tool_payload({"status": result.status, "investments": result.investments, "error": result.error})

    @mcp.tool(description="Portfolio totals, holding count and overall growth for the filtered view.")
    def portfolio_summary(
        currency: str = ALL,
        country: str = ALL,
        asset_class: str = ALL,
        display_currency: str = "original",
    ) -> str:
        flt = _filter(currency, country, asset_class, display_currency)
        return tool_payload(services.portfolio.summary(flt))

    @mcp.tool(description="Allocation percentages grouped by assetClass, country or currency.")
    def allocation_breakdown(
        group_by: str = "assetClass",
        currency: str = ALL,
        country: str = ALL,
        asset_class: str = ALL,
        display_currency: str = "original",
    ) -> str:
        if group_by not in GROUP_BY_VALUES:
            return tool_error("INVALID_INPUT", f"group_by must be one of: {', '.join(GROUP_BY_VALUES)}.")
        flt = _filter(currency, country, asset_class, display_currency)
        return tool_payload(services.portfolio.allocation(flt, group_by))  # type: ignore[arg-type]

    @mcp.tool(description="Country, currency and asset class breakdown table sorted by USD value.")
    def portfolio_breakdown_table(currency: str = ALL, country: str = ALL, asset_class: str = ALL) -> str:
        flt = _filter(currency, country, asset_class, "original")
        return tool_payload(services.portfolio.breakdown(flt))

    @mcp.tool(description="Per-investment current value and growth, optionally using live prices.")
    def investment_growth(
        currency: str = ALL,
        country: str = ALL,
        asset_class: str = ALL,
        use_live_prices: bool = False,
    ) -> str:
        flt = _filter(currency, country, asset_class, "original")
        return tool_payload(services.portfolio.growth(flt, use_live_prices=use_live_prices))

    @mcp.tool(description="Projected maturity earnings for bonds and deposits.")
    def maturity_projection(as_of: str = "") -> str:
        today = None
        if as_of:
            try:
                today = parse_iso_date(as_of)
            except ValueError:
                return tool_error("INVALID_INPUT", "as_of must be an ISO date (YYYY-MM-DD).")
        return tool_payload(services.portfolio.maturity(today=today))
