"""Bond and deposit maturity-interest projections."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Iterable

import pandas as pd

from investment_dashboard.portfolio.currency import to_usd
from investment_dashboard.portfolio.models import Investment
from investment_dashboard.portfolio.validation import parse_iso_date

LOGGER = logging.getLogger(__name__)
DAYS_PER_YEAR = 365.25


@dataclass
class MaturityEarning:
    investment_id: str
    name: str
    currency: str
    country: str
    asset_class: str
    principal_amount: float
    coupon_rate: float
    maturity_date: str
    days_to_maturity: int
    years_to_maturity: float
    total_interest_earned: float
    total_amount_at_maturity: float
    usd_principal_amount: float
    usd_total_interest_earned: float
    usd_total_amount_at_maturity: float
    annualized_return: float

    @property
    def maturity_year(self) -> int:
        return parse_iso_date(self.maturity_date).year

    def to_dict(self) -> dict[str, object]:
        return {
            "investmentId": self.investment_id,
            "name": self.name,
            "currency": self.currency,
            "country": self.country,
            "assetClass": self.asset_class,
            "principalAmount": self.principal_amount,
            "couponRate": self.coupon_rate,
            "maturityDate": self.maturity_date,
            "daysToMaturity": self.days_to_maturity,
            "yearsToMaturity": self.years_to_maturity,
            "totalInterestEarned": self.total_interest_earned,
            "totalAmountAtMaturity": self.total_amount_at_maturity,
            "usdPrincipalAmount": self.usd_principal_amount,
            "usdTotalInterestEarned": self.usd_total_interest_earned,
            "usdTotalAmountAtMaturity": self.usd_total_amount_at_maturity,
            "annualizedReturn": self.annualized_return,
        }


@dataclass
class RollupBucket:
    principal: float = 0.0
    interest: float = 0.0
    total: float = 0.0
    count: int = 0


@dataclass
class MaturitySummary:
    total_principal: float = 0.0
    total_interest_earned: float = 0.0
    total_amount_at_maturity: float = 0.0
    usd_total_principal: float = 0.0
    usd_total_interest_earned: float = 0.0
    usd_total_amount_at_maturity: float = 0.0
    average_annualized_return: float = 0.0
    total_investments: int = 0
    by_currency: dict[str, RollupBucket] = field(default_factory=dict)
    by_maturity_year: dict[str, RollupBucket] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "totalPrincipal": self.total_principal,
            "totalInterestEarned": self.total_interest_earned,
            "totalAmountAtMaturity": self.total_amount_at_maturity,
            "usdTotalPrincipal": self.usd_total_principal,
            "usdTotalInterestEarned": self.usd_total_interest_earned,
            "usdTotalAmountAtMaturity": self.usd_total_amount_at_maturity,
            "averageAnnualizedReturn": self.average_annualized_return,
            "totalInvestments": self.total_investments,
            "byCurrency": {key: asdict(bucket) for key, bucket in self.by_currency.items()},
            "byMaturityYear": {key: asdict(bucket) for key, bucket in self.by_maturity_year.items()},
        }


def days_to_maturity(maturity_date: str, today: date) -> int:
    # Whole calendar days; a date-only maturity equal to today yields 0.
    return (parse_iso_date(maturity_date) - today).days


def project_earning(record: Investment, today: date) -> MaturityEarning | None:
    """Simple-interest projection for one record, or None when it does not qualify."""
    if not record.is_fixed_income or not record.maturity_date or not record.coupon_rate:
        return None
    try:
        days = days_to_maturity(record.maturity_date, today)
    except ValueError:
        LOGGER.warning(
            "skipping record with unparseable maturity date: id=%s maturity_date=%s",
            record.id,
            record.maturity_date,
        )
        return None
    if days <= 0:
        return None

    principal = float(record.amount)
    years = days / DAYS_PER_YEAR
    interest = principal * (record.coupon_rate / 100.0) * years
    total = principal + interest
    annualized = (interest / principal / years) * 100.0 if years > 0 and principal > 0 else 0.0
    return MaturityEarning(
        investment_id=record.id,
        name=record.name,
        currency=record.currency,
        country=record.country,
        asset_class=record.asset_class,
        principal_amount=principal,
        coupon_rate=float(record.coupon_rate),
        maturity_date=record.maturity_date,
        days_to_maturity=days,
        years_to_maturity=years,
        total_interest_earned=interest,
        total_amount_at_maturity=total,
        usd_principal_amount=to_usd(principal, record.currency),
        usd_total_interest_earned=to_usd(interest, record.currency),
        usd_total_amount_at_maturity=to_usd(total, record.currency),
        annualized_return=annualized,
    )


def project_maturity(records: Iterable[Investment], today: date | None = None) -> list[MaturityEarning]:
    as_of = today or date.today()
    earnings: list[MaturityEarning] = []
    for record in records:
        earning = project_earning(record, as_of)
        if earning is not None:
            earnings.append(earning)
    earnings.sort(key=lambda earning: earning.days_to_maturity)
    return earnings


def _rollup(frame: pd.DataFrame, key: str, principal: str, interest: str, total: str) -> dict[str, RollupBucket]:
    grouped = frame.groupby(key, sort=False).agg(
        principal=(principal, "sum"),
        interest=(interest, "sum"),
        total=(total, "sum"),
        holdings=(principal, "size"),
    )
    return {
        str(name): RollupBucket(
            principal=float(row.principal),
            interest=float(row.interest),
            total=float(row.total),
            count=int(row.holdings),
        )
        for name, row in grouped.iterrows()
    }


def summarize_maturity(earnings: list[MaturityEarning]) -> MaturitySummary:
    """Totals plus per-currency (original units) and per-year (USD) rollups."""
    if not earnings:
        return MaturitySummary()

    frame = pd.DataFrame([asdict(earning) for earning in earnings])
    frame["maturity_year"] = [str(earning.maturity_year) for earning in earnings]
    return MaturitySummary(
        total_principal=float(frame["principal_amount"].sum()),
        total_interest_earned=float(frame["total_interest_earned"].sum()),
        total_amount_at_maturity=float(frame["total_amount_at_maturity"].sum()),
        usd_total_principal=float(frame["usd_principal_amount"].sum()),
        usd_total_interest_earned=float(frame["usd_total_interest_earned"].sum()),
        usd_total_amount_at_maturity=float(frame["usd_total_amount_at_maturity"].sum()),
        average_annualized_return=float(frame["annualized_return"].mean()),
        total_investments=len(earnings),
        by_currency=_rollup(frame, "currency", "principal_amount", "total_interest_earned", "total_amount_at_maturity"),
        by_maturity_year=_rollup(
            frame,
            "maturity_year",
            "usd_principal_amount",
            "usd_total_interest_earned",
            "usd_total_amount_at_maturity",
        ),
    )
