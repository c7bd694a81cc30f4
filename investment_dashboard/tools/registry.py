"""Tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP

from investment_dashboard.portfolio.portfolio_service import PortfolioService
from investment_dashboard.services.price_service import PriceService
from investment_dashboard.storage.record_store import RecordStore
from investment_dashboard.tools.portfolio_tools import register_portfolio_tools
from investment_dashboard.tools.price_tools import register_price_tools


@dataclass
class ToolServices:
    store: RecordStore
    portfolio: PortfolioService
    prices: PriceService


def build_tool_services(store: RecordStore, prices: PriceService) -> ToolServices:
    return ToolServices(
        store=store,
        portfolio=PortfolioService(store, prices),
        prices=prices,
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_portfolio_tools(mcp, services)
    register_price_tools(mcp, services)
