"""Typed investment models."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

ASSET_CLASSES: tuple[str, ...] = (
    "Stock",
    "Bond",
    "ETF",
    "Mutual Fund",
    "Real Estate",
    "Commodity",
    "Cryptocurrency",
    "Cash",
    "Deposit",
    "Private Equity",
    "Hedge Fund",
    "XAU",
    "Other",
)
FIXED_INCOME_CLASSES = frozenset({"Bond", "Deposit"})

# wire key -> attribute name
_OPTIONAL_FIELDS = {
    "transactionDate": "transaction_date",
    "originalPrice": "original_price",
    "maturityDate": "maturity_date",
    "couponRate": "coupon_rate",
    "quantity": "quantity",
    "pricePerUnit": "price_per_unit",
}


def generate_investment_id() -> str:
    return str(time.time_ns() // 1_000_000)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _stored_number(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number: {value!r}")
    return number


@dataclass
class ValidationIssue:
    field: str
    message: str
    code: str = "invalid_value"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


class InvalidInvestment(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__("; ".join(f"{issue.field}: {issue.message}" for issue in issues))


@dataclass
class Investment:
    id: str
    name: str
    amount: float
    currency: str
    country: str
    asset_class: str
    date_added: str
    transaction_date: str | None = None
    original_price: float | None = None
    maturity_date: str | None = None
    coupon_rate: float | None = None
    quantity: float | None = None
    price_per_unit: float | None = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_fixed_income(self) -> bool:
        return self.asset_class in FIXED_INCOME_CLASSES

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        investment_id: str | None = None,
        date_added: str | None = None,
    ) -> Investment:
        """Build a validated record from a camelCase wire payload.

        ``investment_id``/``date_added`` override whatever the payload carries;
        when neither side has them they are generated. ``amount`` is recomputed
        from ``quantity * pricePerUnit`` when both are present.
        """
        from investment_dashboard.portfolio.validation import validate_investment_payload

        issues = validate_investment_payload(payload)
        if issues:
            raise InvalidInvestment(issues)

        asset_class = str(payload["assetClass"]).strip()
        optional: dict[str, Any] = {}
        for wire_key, attr in _OPTIONAL_FIELDS.items():
            value = payload.get(wire_key)
            if value is None or value == "":
                continue
            optional[attr] = str(value) if attr in {"transaction_date", "maturity_date"} else float(value)

        if asset_class not in FIXED_INCOME_CLASSES:
            optional.pop("maturity_date", None)
            optional.pop("coupon_rate", None)

        amount = float(payload["amount"])
        if optional.get("quantity") is not None and optional.get("price_per_unit") is not None:
            amount = optional["quantity"] * optional["price_per_unit"]

        record_id = investment_id or payload.get("id") or generate_investment_id()
        added = date_added or payload.get("dateAdded") or utc_now_iso()
        return cls(
            id=str(record_id),
            name=str(payload["name"]).strip(),
            amount=amount,
            currency=str(payload["currency"]).strip().upper(),
            country=str(payload["country"]).strip(),
            asset_class=asset_class,
            date_added=str(added),
            **optional,
        )

    @classmethod
    def from_stored(cls, item: dict[str, Any]) -> Investment:
        """Rehydrate a persisted record without re-validating it.

        Stored documents may predate validation rules; unknown keys are kept in
        ``extra`` so a rewrite does not drop them.
        """
        known = {"id", "name", "amount", "currency", "country", "assetClass", "dateAdded", *_OPTIONAL_FIELDS}
        optional: dict[str, Any] = {}
        for wire_key, attr in _OPTIONAL_FIELDS.items():
            value = item.get(wire_key)
            if value is None or value == "":
                continue
            optional[attr] = str(value) if attr in {"transaction_date", "maturity_date"} else _stored_number(value)
        return cls(
            id=str(item.get("id", "")),
            name=str(item.get("name", "")),
            amount=_stored_number(item.get("amount") or 0.0),
            currency=str(item.get("currency", "")),
            country=str(item.get("country", "")),
            asset_class=str(item.get("assetClass", "")),
            date_added=str(item.get("dateAdded", "")),
            extra={key: value for key, value in item.items() if key not in known},
            **optional,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out.update(
            {
                "id": self.id,
                "name": self.name,
                "amount": self.amount,
                "currency": self.currency,
                "country": self.country,
                "assetClass": self.asset_class,
                "dateAdded": self.date_added,
            }
        )
        for wire_key, attr in _OPTIONAL_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[wire_key] = value
        return out

    def with_id(self, investment_id: str, date_added: str) -> Investment:
        return replace(self, id=investment_id, date_added=date_added)
