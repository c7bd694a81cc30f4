from datetime import date, timedelta

import pytest

from investment_dashboard.portfolio.maturity import (
    DAYS_PER_YEAR,
    days_to_maturity,
    project_earning,
    project_maturity,
    summarize_maturity,
)
from investment_dashboard.portfolio.models import Investment

TODAY = date(2025, 1, 1)


def _fixed(record_id: str, amount: float, currency: str, maturity: date, coupon: float, asset_class: str = "Bond"):
    return Investment(
        id=record_id,
        name=f"{asset_class}-{record_id}",
        amount=amount,
        currency=currency,
        country="USA",
        asset_class=asset_class,
        date_added="2024-01-01",
        maturity_date=maturity.isoformat(),
        coupon_rate=coupon,
    )


def test_days_to_maturity_counts_calendar_days() -> None:
    assert days_to_maturity("2025-01-11", TODAY) == 10
    assert days_to_maturity("2025-01-01", TODAY) == 0


def test_one_year_bond_projection() -> None:
    maturity = TODAY + timedelta(days=365)
    earning = project_earning(_fixed("1", 1000.0, "USD", maturity, 5.0), TODAY)
    assert earning is not None
    years = 365 / DAYS_PER_YEAR
    assert earning.days_to_maturity == 365
    assert earning.total_interest_earned == pytest.approx(1000.0 * 0.05 * years)
    assert earning.total_interest_earned == pytest.approx(49.97, abs=0.01)
    assert earning.total_amount_at_maturity == pytest.approx(1000.0 + earning.total_interest_earned)
    assert earning.annualized_return == pytest.approx(5.0)


def test_matured_and_same_day_records_are_excluded() -> None:
    records = [
        _fixed("past", 1000.0, "USD", TODAY - timedelta(days=3), 5.0),
        _fixed("today", 1000.0, "USD", TODAY, 5.0),
    ]
    assert project_maturity(records, today=TODAY) == []


def test_records_without_coupon_or_non_fixed_income_are_skipped() -> None:
    stock = _fixed("s", 1000.0, "USD", TODAY + timedelta(days=30), 5.0, asset_class="Stock")
    no_coupon = _fixed("n", 1000.0, "USD", TODAY + timedelta(days=30), 0.0)
    assert project_maturity([stock, no_coupon], today=TODAY) == []


def test_projection_sorted_by_days_remaining() -> None:
    records = [
        _fixed("late", 1000.0, "USD", TODAY + timedelta(days=400), 4.0),
        _fixed("soon", 500.0, "EUR", TODAY + timedelta(days=30), 3.0, asset_class="Deposit"),
    ]
    earnings = project_maturity(records, today=TODAY)
    assert [earning.investment_id for earning in earnings] == ["soon", "late"]


def test_summary_rollups() -> None:
    records = [
        _fixed("a", 1000.0, "USD", date(2025, 6, 1), 4.0),
        _fixed("b", 2000.0, "EUR", date(2025, 9, 1), 3.0, asset_class="Deposit"),
        _fixed("c", 500.0, "USD", date(2026, 3, 1), 6.0),
    ]
    earnings = project_maturity(records, today=TODAY)
    summary = summarize_maturity(earnings)
    assert summary.total_investments == 3
    assert summary.total_principal == pytest.approx(3500.0)
    assert summary.usd_total_principal == pytest.approx(1000.0 + 1700.0 + 500.0)
    assert summary.by_currency["USD"].principal == pytest.approx(1500.0)
    assert summary.by_currency["USD"].count == 2
    assert summary.by_currency["EUR"].principal == pytest.approx(2000.0)
    assert summary.by_maturity_year["2025"].principal == pytest.approx(1000.0 + 1700.0)
    assert summary.by_maturity_year["2026"].count == 1
    expected_avg = sum(earning.annualized_return for earning in earnings) / 3
    assert summary.average_annualized_return == pytest.approx(expected_avg)

    payload = summary.to_dict()
    assert payload["byCurrency"]["EUR"]["count"] == 1


def test_summary_of_nothing_is_zeroed() -> None:
    summary = summarize_maturity([])
    assert summary.total_investments == 0
    assert summary.to_dict()["byMaturityYear"] == {}


def test_unparseable_stored_maturity_date_is_skipped(caplog) -> None:
    legacy = _fixed("legacy", 1000.0, "USD", TODAY + timedelta(days=30), 5.0)
    legacy.maturity_date = "12/31/2030"
    valid = _fixed("ok", 1000.0, "USD", TODAY + timedelta(days=30), 5.0)
    with caplog.at_level("WARNING"):
        assert project_earning(legacy, TODAY) is None
        earnings = project_maturity([legacy, valid], today=TODAY)
    assert [earning.investment_id for earning in earnings] == ["ok"]
    assert "unparseable maturity date" in caplog.text
