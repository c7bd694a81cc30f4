"""Investment payload validation logic."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from investment_dashboard.portfolio.models import ASSET_CLASSES, ValidationIssue

REQUIRED_FIELDS = ("name", "amount", "currency", "country", "assetClass")
NUMERIC_OPTIONAL_FIELDS = ("originalPrice", "couponRate", "quantity", "pricePerUnit")
DATE_OPTIONAL_FIELDS = ("transactionDate", "maturityDate")


def _as_finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_iso_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` or a full ISO datetime (``Z`` suffix allowed)."""
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def validate_investment_payload(payload: Any) -> list[ValidationIssue]:
    if not isinstance(payload, dict):
        return [ValidationIssue(field="body", code="invalid_body", message="Request body must be a JSON object.")]

    issues: list[ValidationIssue] = []
    missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
    for name in missing:
        issues.append(ValidationIssue(field=name, code="missing_field", message=f"Required field is missing: {name}"))

    if "amount" not in missing:
        amount = _as_finite(payload.get("amount"))
        if amount is None or amount < 0:
            issues.append(
                ValidationIssue(
                    field="amount",
                    code="invalid_amount",
                    message="amount must be a non-negative number.",
                )
            )

    if "assetClass" not in missing:
        asset_class = str(payload.get("assetClass")).strip()
        if asset_class not in ASSET_CLASSES:
            issues.append(
                ValidationIssue(
                    field="assetClass",
                    code="invalid_asset_class",
                    message=f"assetClass must be one of {list(ASSET_CLASSES)}.",
                )
            )

    for name in NUMERIC_OPTIONAL_FIELDS:
        value = payload.get(name)
        if value is None or value == "":
            continue
        number = _as_finite(value)
        if number is None or number < 0:
            issues.append(
                ValidationIssue(field=name, code="invalid_number", message=f"{name} must be a non-negative number.")
            )

    quantity = _as_finite(payload.get("quantity"))
    price_per_unit = _as_finite(payload.get("pricePerUnit"))
    if quantity is not None and price_per_unit is not None and not math.isfinite(quantity * price_per_unit):
        issues.append(
            ValidationIssue(
                field="amount",
                code="invalid_amount",
                message="quantity * pricePerUnit must be a finite number.",
            )
        )

    for name in DATE_OPTIONAL_FIELDS:
        value = payload.get(name)
        if value is None or value == "":
            continue
        try:
            parse_iso_date(value)
        except (TypeError, ValueError):
            issues.append(ValidationIssue(field=name, code="invalid_date", message=f"{name} must be an ISO date."))
    return issues
