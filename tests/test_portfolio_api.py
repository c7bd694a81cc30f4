import json

import pytest

from starlette.applications import Starlette
from starlette.testclient import TestClient

from investment_dashboard.api.portfolio import build_portfolio_routes, build_price_routes
from investment_dashboard.cache.ttl_cache import TTLCache
from investment_dashboard.portfolio.models import Investment
from investment_dashboard.portfolio.portfolio_service import PortfolioService
from investment_dashboard.providers.coingecko import CoinGeckoClient
from investment_dashboard.providers.models import PriceData
from investment_dashboard.services.base import ServiceContext
from investment_dashboard.services.price_service import PriceService
from investment_dashboard.storage.record_store import RecordStore
from investment_dashboard.utils.rate_limit import RateLimiterRegistry


def _seed(store: RecordStore) -> None:
    store.replace_all(
        [
            Investment.from_payload(
                {"name": "VOO", "amount": 1000, "currency": "USD", "country": "USA", "assetClass": "ETF", "originalPrice": 800}
            ),
            Investment.from_payload(
                {"name": "Bund", "amount": 2000, "currency": "EUR", "country": "Germany", "assetClass": "Bond",
                 "maturityDate": "2030-01-01", "couponRate": 3}
            ),
            Investment.from_payload(
                {"name": "BTC", "amount": 500, "currency": "USD", "country": "Germany", "assetClass": "Cryptocurrency",
                 "quantity": 0.01, "pricePerUnit": 50000, "originalPrice": 400}
            ),
        ]
    )


def _client(tmp_path, monkeypatch) -> TestClient:
    store = RecordStore(tmp_path / "investments.json")
    _seed(store)
    coingecko = CoinGeckoClient()
    monkeypatch.setattr(
        coingecko,
        "get_price",
        lambda symbol: None
        if symbol.upper() == "NOPE"
        else PriceData(symbol=symbol.upper(), price=60000.0, currency="USD", last_updated="2025-01-01"),
    )
    prices = PriceService(
        ServiceContext(providers={"coingecko": coingecko}, cache=TTLCache(), rate_limiter=RateLimiterRegistry(0.0))
    )
    portfolio = PortfolioService(store, prices)
    app = Starlette(routes=build_portfolio_routes(portfolio) + build_price_routes(prices))
    return TestClient(app)


def test_summary_respects_display_currency(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    payload = client.get("/api/portfolio/summary", params={"displayCurrency": "USD"}).json()
    assert payload["totalInvestments"] == 3
    assert payload["totalValue"] == pytest.approx(3200.0)
    assert payload["totalGrowth"] == pytest.approx(300.0)


def test_allocation_country_view_uses_composite_keys(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    slices = client.get("/api/portfolio/allocation", params={"country": "Germany", "groupBy": "assetClass"}).json()
    assert [item["name"] for item in slices] == ["Bond (EUR)", "Cryptocurrency (USD)"]


def test_allocation_rejects_unknown_grouping(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    assert client.get("/api/portfolio/allocation", params={"groupBy": "sector"}).status_code == 400


def test_breakdown_and_filters(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    rows = client.get("/api/portfolio/breakdown").json()
    assert rows[0]["assetClass"] == "Bond"
    filters = client.get("/api/portfolio/filters").json()
    assert filters["countries"] == ["Germany", "USA"]


def test_growth_with_live_prices(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    rows = client.get("/api/portfolio/growth", params={"assetClass": "Cryptocurrency", "livePrices": "true"}).json()
    assert len(rows) == 1
    assert rows[0]["currentValue"] == pytest.approx(600.0)
    assert rows[0]["growth"]["amount"] == pytest.approx(200.0)


def test_maturity_projection(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    payload = client.get("/api/portfolio/maturity", params={"asOf": "2029-01-01"}).json()
    assert [item["name"] for item in payload["earnings"]] == ["Bund"]
    assert payload["summary"]["totalInvestments"] == 1
    assert client.get("/api/portfolio/maturity", params={"asOf": "someday"}).status_code == 400


def test_live_price_route(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    response = client.get("/api/prices/crypto/btc")
    assert response.status_code == 200
    assert response.json()["price"] == 60000.0


def test_live_price_unavailable_and_invalid(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    missing = client.get("/api/prices/Cryptocurrency/NOPE")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Price unavailable"
    assert client.get("/api/prices/Bond/VOO").status_code == 400
    assert client.get("/api/prices/ETF/VOO").status_code == 404


def test_maturity_skips_legacy_record_with_malformed_date(tmp_path, monkeypatch) -> None:
    client = _client(tmp_path, monkeypatch)
    legacy = {
        "id": "legacy",
        "name": "Old bond",
        "amount": 1000,
        "currency": "USD",
        "country": "USA",
        "assetClass": "Bond",
        "dateAdded": "2020-01-01",
        "maturityDate": "12/31/2030",
        "couponRate": 4,
    }
    (tmp_path / "investments.json").write_text(json.dumps({"investments": [legacy]}), encoding="utf-8")
    response = client.get("/api/portfolio/maturity", params={"asOf": "2029-01-01"})
    assert response.status_code == 200
    assert response.json()["earnings"] == []
    assert response.json()["summary"]["totalInvestments"] == 0
