"""Summary, allocation and growth analytics over investment records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Mapping

import pandas as pd

from investment_dashboard.portfolio.currency import to_usd, usd_rate
from investment_dashboard.portfolio.models import Investment

ALL = "all"
DisplayCurrency = Literal["original", "USD"]
GroupBy = Literal["assetClass", "country", "currency"]

COLORS = (
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#EC4899",
    "#6366F1",
)
GROUP_COLUMNS: dict[str, str] = {"assetClass": "asset_class", "country": "country", "currency": "currency"}
FRAME_COLUMNS = ["id", "name", "amount", "currency", "country", "asset_class", "original_price", "usd_amount", "usd_original_price"]


@dataclass(frozen=True)
class PortfolioFilter:
    """Selection filters plus the unit used for aggregate values.

    Selection filters always narrow the working set; ``display_currency`` only
    decides whether values are summed in USD or in their original units.
    """

    currency: str = ALL
    country: str = ALL
    asset_class: str = ALL
    display_currency: DisplayCurrency = "original"

    def __post_init__(self) -> None:
        if self.display_currency not in {"original", "USD"}:
            raise ValueError("display_currency must be 'original' or 'USD'.")

    @property
    def in_usd(self) -> bool:
        return self.display_currency == "USD"

    @property
    def mixed_currency_country_view(self) -> bool:
        return not self.in_usd and self.currency == ALL and self.country != ALL

    def matches(self, record: Investment) -> bool:
        if self.currency != ALL and record.currency != self.currency:
            return False
        if self.country != ALL and record.country != self.country:
            return False
        if self.asset_class != ALL and record.asset_class != self.asset_class:
            return False
        return True


@dataclass
class SummaryStats:
    total_value: float
    total_investments: int
    countries: list[str]
    currencies: list[str]
    asset_classes: list[str]
    total_growth: float | None = None
    average_growth: float | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "totalValue": self.total_value,
            "totalInvestments": self.total_investments,
            "countries": self.countries,
            "currencies": self.currencies,
            "assetClasses": self.asset_classes,
            "totalGrowth": self.total_growth,
            "averageGrowth": self.average_growth,
        }


@dataclass
class AllocationSlice:
    name: str
    value: float
    percentage: float
    color_index: int
    color: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "value": self.value,
            "percentage": self.percentage,
            "colorIndex": self.color_index,
            "color": self.color,
        }


@dataclass
class BreakdownRow:
    country: str
    currency: str
    asset_class: str
    original_amount: float
    usd_amount: float
    count: int

    def to_dict(self) -> dict[str, object]:
        return {
            "country": self.country,
            "currency": self.currency,
            "assetClass": self.asset_class,
            "originalAmount": self.original_amount,
            "usdAmount": self.usd_amount,
            "count": self.count,
        }


@dataclass
class Growth:
    amount: float
    percentage: float

    def to_dict(self) -> dict[str, float]:
        return {"amount": self.amount, "percentage": self.percentage}


def filter_investments(records: Iterable[Investment], flt: PortfolioFilter) -> list[Investment]:
    return [record for record in records if flt.matches(record)]


def to_frame(records: Iterable[Investment]) -> pd.DataFrame:
    rows = [
        {
            "id": record.id,
            "name": record.name,
            "amount": float(record.amount),
            "currency": record.currency,
            "country": record.country,
            "asset_class": record.asset_class,
            "original_price": record.original_price,
            "usd_amount": to_usd(record.amount, record.currency),
            "usd_original_price": (
                to_usd(record.original_price, record.currency) if record.original_price is not None else None
            ),
        }
        for record in records
    ]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    for column in ("amount", "original_price", "usd_amount", "usd_original_price"):
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame


def _distinct(series: pd.Series) -> list[str]:
    return [str(value) for value in pd.unique(series)]


def summary_stats(records: Iterable[Investment], flt: PortfolioFilter = PortfolioFilter()) -> SummaryStats:
    frame = to_frame(filter_investments(records, flt))
    value_column = "usd_amount" if flt.in_usd else "amount"
    stats = SummaryStats(
        total_value=float(frame[value_column].sum()),
        total_investments=int(len(frame)),
        countries=_distinct(frame["country"]),
        currencies=_distinct(frame["currency"]),
        asset_classes=_distinct(frame["asset_class"]),
    )

    with_basis = frame[frame["original_price"] > 0]
    if with_basis.empty:
        return stats
    original_column = "usd_original_price" if flt.in_usd else "original_price"
    total_original = float(with_basis[original_column].sum())
    total_current = float(with_basis[value_column].sum())
    stats.total_growth = total_current - total_original
    stats.average_growth = (stats.total_growth / total_original) * 100.0 if total_original > 0 else 0.0
    return stats


def allocation_breakdown(
    records: Iterable[Investment],
    flt: PortfolioFilter = PortfolioFilter(),
    group_by: GroupBy = "assetClass",
) -> list[AllocationSlice]:
    """Group the filtered set by one dimension with each bucket's share of the total.

    Buckets keep first-seen order. In original-currency mode with a country
    selected but no currency selected, the key becomes ``"<group> (<currency>)"``
    so amounts in different currencies are never added together.
    """
    if group_by not in GROUP_COLUMNS:
        raise ValueError(f"group_by must be one of: {', '.join(GROUP_COLUMNS)}.")
    frame = to_frame(filter_investments(records, flt))
    if frame.empty:
        return []

    keys = frame[GROUP_COLUMNS[group_by]].astype(str)
    if flt.mixed_currency_country_view and group_by != "currency":
        keys = keys + " (" + frame["currency"].astype(str) + ")"
    value_column = "usd_amount" if flt.in_usd else "amount"
    totals = frame[value_column].groupby(keys, sort=False).sum()
    grand_total = float(totals.sum())

    return [
        AllocationSlice(
            name=str(name),
            value=float(value),
            percentage=(float(value) / grand_total) * 100.0 if grand_total > 0 else 0.0,
            color_index=index,
            color=COLORS[index % len(COLORS)],
        )
        for index, (name, value) in enumerate(totals.items())
    ]


def breakdown_table(records: Iterable[Investment], flt: PortfolioFilter = PortfolioFilter()) -> list[BreakdownRow]:
    frame = to_frame(filter_investments(records, flt))
    if frame.empty:
        return []
    grouped = (
        frame.groupby(["country", "currency", "asset_class"], sort=False)
        .agg(original_amount=("amount", "sum"), usd_amount=("usd_amount", "sum"), record_count=("id", "size"))
        .reset_index()
        .sort_values("usd_amount", ascending=False, kind="stable")
    )
    return [
        BreakdownRow(
            country=str(row.country),
            currency=str(row.currency),
            asset_class=str(row.asset_class),
            original_amount=float(row.original_amount),
            usd_amount=float(row.usd_amount),
            count=int(row.record_count),
        )
        for row in grouped.itertuples(index=False)
    ]


def filter_options(records: Iterable[Investment]) -> dict[str, list[str]]:
    items = list(records)
    return {
        "currencies": sorted({record.currency for record in items}),
        "countries": sorted({record.country for record in items}),
        "assetClasses": sorted({record.asset_class for record in items}),
    }


def current_market_value(record: Investment, live_prices: Mapping[str, float] | None = None) -> float:
    """Current value in the record's currency: live unit price, else stored unit price, else ``amount``.

    Live prices are quoted in USD and are converted with the static rate table.
    """
    if not record.quantity or not record.price_per_unit:
        return float(record.amount)
    if live_prices:
        live = live_prices.get(record.name)
        if live is None and record.asset_class == "XAU":
            live = live_prices.get("XAU")
        if live is not None:
            return record.quantity * float(live) / usd_rate(record.currency)
    return record.quantity * record.price_per_unit


def calculate_growth(record: Investment, live_prices: Mapping[str, float] | None = None) -> Growth | None:
    if not record.original_price or record.original_price <= 0:
        return None
    current = current_market_value(record, live_prices)
    amount = current - record.original_price
    return Growth(amount=amount, percentage=(amount / record.original_price) * 100.0)


def investment_rows(
    records: Iterable[Investment],
    flt: PortfolioFilter = PortfolioFilter(),
    live_prices: Mapping[str, float] | None = None,
) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for record in filter_investments(records, flt):
        current = current_market_value(record, live_prices)
        growth = calculate_growth(record, live_prices)
        row = record.to_dict()
        row["currentValue"] = current
        row["usdValue"] = to_usd(current, record.currency)
        row["growth"] = growth.to_dict() if growth else None
        rows.append(row)
    return rows
