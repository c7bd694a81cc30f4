"""Portfolio analytics orchestration service."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from investment_dashboard.portfolio.analytics_core import (
    GroupBy,
    PortfolioFilter,
    allocation_breakdown,
    breakdown_table,
    filter_investments,
    filter_options,
    investment_rows,
    summary_stats,
)
from investment_dashboard.portfolio.maturity import project_maturity, summarize_maturity
from investment_dashboard.portfolio.models import Investment
from investment_dashboard.services.price_service import PriceService
from investment_dashboard.storage.record_store import RecordStore

LOGGER = logging.getLogger(__name__)
LIVE_PRICED_CLASSES = frozenset({"ETF", "Stock", "Cryptocurrency", "XAU"})


class PortfolioService:
    """Runs the analytics over a fresh snapshot of the record store per call."""

    def __init__(self, store: RecordStore, prices: PriceService | None = None) -> None:
        self.store = store
        self.prices = prices

    def snapshot(self) -> list[Investment]:
        return self.store.list()

    def live_prices_for(self, records: list[Investment]) -> dict[str, float]:
        """Look up live unit prices for priced holdings, keyed by record name."""
        if self.prices is None:
            return {}
        out: dict[str, float] = {}
        for record in records:
            asset_type = record.asset_class
            if asset_type not in LIVE_PRICED_CLASSES or not record.quantity or not record.price_per_unit:
                continue
            symbol = "XAU" if asset_type == "XAU" else record.name
            if symbol in out:
                continue
            price = self.prices.get_price(symbol, asset_type)
            if price is not None:
                out[symbol] = price.price
        LOGGER.info("live prices resolved: requested=%s resolved=%s", len(records), len(out))
        return out

    def summary(self, flt: PortfolioFilter) -> dict[str, Any]:
        return summary_stats(self.snapshot(), flt).to_dict()

    def allocation(self, flt: PortfolioFilter, group_by: GroupBy = "assetClass") -> list[dict[str, object]]:
        return [item.to_dict() for item in allocation_breakdown(self.snapshot(), flt, group_by)]

    def breakdown(self, flt: PortfolioFilter) -> list[dict[str, object]]:
        return [row.to_dict() for row in breakdown_table(self.snapshot(), flt)]

    def filters(self) -> dict[str, list[str]]:
        return filter_options(self.snapshot())

    def growth(self, flt: PortfolioFilter, use_live_prices: bool = False) -> list[dict[str, object]]:
        records = self.snapshot()
        live = self.live_prices_for(filter_investments(records, flt)) if use_live_prices else None
        return investment_rows(records, flt, live)

    def maturity(self, flt: PortfolioFilter | None = None, today: date | None = None) -> dict[str, Any]:
        records = self.snapshot()
        if flt is not None:
            records = filter_investments(records, flt)
        earnings = project_maturity(records, today=today)
        return {
            "earnings": [earning.to_dict() for earning in earnings],
            "summary": summarize_maturity(earnings).to_dict(),
        }
