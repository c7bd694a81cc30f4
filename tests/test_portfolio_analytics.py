import pytest

from investment_dashboard.portfolio.analytics_core import (
    COLORS,
    PortfolioFilter,
    allocation_breakdown,
    breakdown_table,
    calculate_growth,
    current_market_value,
    filter_options,
    investment_rows,
    summary_stats,
)
from investment_dashboard.portfolio.models import Investment


def _record(record_id: str, amount: float, currency: str, country: str, asset_class: str, **extra) -> Investment:
    return Investment(
        id=record_id,
        name=extra.pop("name", f"holding-{record_id}"),
        amount=amount,
        currency=currency,
        country=country,
        asset_class=asset_class,
        date_added="2024-01-01T00:00:00.000Z",
        **extra,
    )


def _sample() -> list[Investment]:
    return [
        _record("1", 1000.0, "USD", "USA", "ETF", original_price=800.0),
        _record("2", 2000.0, "EUR", "Germany", "Bond"),
        _record("3", 500.0, "USD", "Germany", "Stock", original_price=500.0),
        _record("4", 100000.0, "AMD", "Armenia", "Deposit"),
    ]


def test_summary_in_original_units() -> None:
    stats = summary_stats(_sample())
    assert stats.total_value == pytest.approx(103500.0)
    assert stats.total_investments == 4
    assert stats.countries == ["USA", "Germany", "Armenia"]
    assert stats.currencies == ["USD", "EUR", "AMD"]
    assert stats.total_growth == pytest.approx(200.0)
    assert stats.average_growth == pytest.approx(200.0 / 1300.0 * 100.0)


def test_summary_in_usd_converts_values() -> None:
    stats = summary_stats(_sample(), PortfolioFilter(display_currency="USD"))
    assert stats.total_value == pytest.approx(1000.0 + 1700.0 + 500.0 + 260.0)


def test_summary_growth_absent_without_cost_basis() -> None:
    records = [_record("1", 100.0, "USD", "USA", "Cash")]
    stats = summary_stats(records)
    assert stats.total_growth is None
    assert stats.average_growth is None
    assert stats.to_dict()["totalGrowth"] is None


def test_summary_of_empty_portfolio() -> None:
    stats = summary_stats([])
    assert stats.total_value == 0.0
    assert stats.total_investments == 0
    assert stats.countries == []


def test_filters_narrow_the_working_set() -> None:
    stats = summary_stats(_sample(), PortfolioFilter(country="Germany", display_currency="USD"))
    assert stats.total_investments == 2
    assert stats.total_value == pytest.approx(1700.0 + 500.0)


def test_allocation_percentages_sum_to_hundred() -> None:
    slices = allocation_breakdown(_sample(), PortfolioFilter(display_currency="USD"), "assetClass")
    assert [item.name for item in slices] == ["ETF", "Bond", "Stock", "Deposit"]
    assert sum(item.percentage for item in slices) == pytest.approx(100.0)
    assert [item.color for item in slices] == list(COLORS[:4])


def test_allocation_groups_by_country() -> None:
    slices = allocation_breakdown(_sample(), PortfolioFilter(display_currency="USD"), "country")
    by_name = {item.name: item.value for item in slices}
    assert by_name["Germany"] == pytest.approx(2200.0)


def test_allocation_keeps_currencies_apart_for_country_view() -> None:
    slices = allocation_breakdown(_sample(), PortfolioFilter(country="Germany"), "assetClass")
    assert [item.name for item in slices] == ["Bond (EUR)", "Stock (USD)"]
    assert slices[0].value == pytest.approx(2000.0)


def test_allocation_country_view_with_currency_selected_uses_plain_keys() -> None:
    slices = allocation_breakdown(_sample(), PortfolioFilter(country="Germany", currency="EUR"), "assetClass")
    assert [item.name for item in slices] == ["Bond"]
    assert slices[0].percentage == pytest.approx(100.0)


def test_allocation_of_empty_set_is_empty() -> None:
    assert allocation_breakdown([], PortfolioFilter(), "currency") == []
    assert allocation_breakdown(_sample(), PortfolioFilter(country="Nowhere"), "currency") == []


def test_allocation_zero_total_yields_zero_percentages() -> None:
    records = [_record("1", 0.0, "USD", "USA", "Cash"), _record("2", 0.0, "EUR", "USA", "Cash")]
    slices = allocation_breakdown(records, PortfolioFilter(display_currency="USD"), "currency")
    assert [item.percentage for item in slices] == [0.0, 0.0]


def test_allocation_rejects_unknown_group() -> None:
    with pytest.raises(ValueError):
        allocation_breakdown(_sample(), PortfolioFilter(), "sector")  # type: ignore[arg-type]


def test_display_currency_is_validated() -> None:
    with pytest.raises(ValueError):
        PortfolioFilter(display_currency="EUR")  # type: ignore[arg-type]


def test_breakdown_table_sorted_by_usd_value() -> None:
    rows = breakdown_table(_sample())
    assert [row.usd_amount for row in rows] == sorted((row.usd_amount for row in rows), reverse=True)
    assert rows[0].country == "Germany"
    assert rows[0].original_amount == pytest.approx(2000.0)
    assert rows[0].count == 1


def test_breakdown_table_merges_same_group() -> None:
    records = [_record("1", 100.0, "USD", "USA", "ETF"), _record("2", 50.0, "USD", "USA", "ETF")]
    rows = breakdown_table(records)
    assert len(rows) == 1
    assert rows[0].count == 2
    assert rows[0].to_dict()["originalAmount"] == pytest.approx(150.0)


def test_filter_options_are_sorted_and_distinct() -> None:
    options = filter_options(_sample())
    assert options["currencies"] == ["AMD", "EUR", "USD"]
    assert options["assetClasses"] == ["Bond", "Deposit", "ETF", "Stock"]


def test_growth_against_original_price() -> None:
    record = _record("1", 100.0, "USD", "USA", "Stock", original_price=80.0)
    growth = calculate_growth(record)
    assert growth is not None
    assert growth.amount == pytest.approx(20.0)
    assert growth.percentage == pytest.approx(25.0)


def test_growth_absent_without_original_price() -> None:
    assert calculate_growth(_record("1", 100.0, "USD", "USA", "Stock")) is None
    assert calculate_growth(_record("2", 100.0, "USD", "USA", "Stock", original_price=0.0)) is None


def test_market_value_prefers_live_price() -> None:
    record = _record("1", 500.0, "USD", "USA", "ETF", name="VOO", quantity=2.0, price_per_unit=250.0)
    assert current_market_value(record) == pytest.approx(500.0)
    assert current_market_value(record, {"VOO": 300.0}) == pytest.approx(600.0)
    assert current_market_value(record, {"VTI": 300.0}) == pytest.approx(500.0)


def test_market_value_matches_gold_by_xau_symbol() -> None:
    record = _record("1", 3800.0, "USD", "USA", "XAU", name="Gold bars", quantity=2.0, price_per_unit=1900.0)
    assert current_market_value(record, {"XAU": 2000.0}) == pytest.approx(4000.0)


def test_live_usd_price_is_converted_into_record_currency() -> None:
    record = _record("1", 1700.0, "EUR", "Germany", "ETF", name="VWCE", quantity=10.0, price_per_unit=170.0)
    assert current_market_value(record, {"VWCE": 85.0}) == pytest.approx(1000.0)
    rows = investment_rows([record], live_prices={"VWCE": 85.0})
    assert rows[0]["currentValue"] == pytest.approx(1000.0)
    assert rows[0]["usdValue"] == pytest.approx(850.0)


def test_investment_rows_attach_growth_and_usd_value() -> None:
    rows = investment_rows(_sample(), PortfolioFilter(currency="EUR"))
    assert len(rows) == 1
    assert rows[0]["usdValue"] == pytest.approx(1700.0)
    assert rows[0]["growth"] is None
