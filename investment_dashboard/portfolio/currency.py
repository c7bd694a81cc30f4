"""Static currency conversion to USD."""

from __future__ import annotations

from typing import Mapping

# USD value of one unit of each currency. Static; unknown codes convert at parity.
EXCHANGE_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "AMD": 0.0026,
    "AED": 0.27,
    "JPY": 0.007,
    "CAD": 0.75,
    "AUD": 0.68,
    "CHF": 0.92,
    "SEK": 0.095,
    "NOK": 0.095,
    "DKK": 0.13,
    "SGD": 0.74,
    "HKD": 0.13,
    "CNY": 0.14,
    "INR": 0.012,
    "BRL": 0.19,
    "MXN": 0.058,
    "ZAR": 0.055,
}


def usd_rate(currency: str, rates: Mapping[str, float] = EXCHANGE_RATES) -> float:
    return rates.get(currency.strip().upper(), 1.0) if currency else 1.0


def to_usd(amount: float, currency: str, rates: Mapping[str, float] = EXCHANGE_RATES) -> float:
    return float(amount) * usd_rate(currency, rates)


def supported_currencies(rates: Mapping[str, float] = EXCHANGE_RATES) -> list[str]:
    return sorted(rates)
