from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from portfolio_api.api.deps import (
    get_calculate_portfolio_use_case,
    get_clear_price_cache_use_case,
    get_convert_currency_use_case,
    get_currency_rates_use_case,
    get_prices_use_case,
    get_realtime_prices_use_case,
    get_top_coins_use_case,
)
from portfolio_api.application.dto.prices import (
    ClearPriceCacheOutput,
    ConvertCurrencyOutput,
    CurrencyRatesOutput,
    GetPricesOutput,
    MarketListOutput,
    RealtimePricesOutput,
)
from portfolio_api.application.use_cases.calculate_portfolio import CalculatePortfolioUseCase
from portfolio_api.application.use_cases.get_prices import GetPricesUseCase
from portfolio_api.domain.entities.market import CoinQuote, TickerEntry
from portfolio_api.domain.exceptions import ConversionInputError, PriceLookupDomainError
from portfolio_api.main import app


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

ETH_QUOTE = CoinQuote(
    coin_id="ethereum",
    prices={"usd": Decimal("2000")},
    change_24h={"usd": Decimal("1.5")},
    market_cap={"usd": Decimal("240000000000")},
    last_updated_at=1714564800,
)


class FakeMarketDataPort:
    def __init__(self, quotes: dict[str, CoinQuote] | None = None, *, fail: bool = False):
        self._quotes = quotes or {}
        self._fail = fail
        self.requested: list[list[str]] = []

    def get_prices(self, *, coin_ids: list[str], currencies: list[str]) -> dict[str, CoinQuote]:
        _ = currencies
        self.requested.append(list(coin_ids))
        if self._fail:
            raise PriceLookupDomainError("CoinGecko request failed: 429")
        return {coin_id: self._quotes[coin_id] for coin_id in coin_ids if coin_id in self._quotes}


class FakeRealtimeUseCase:
    def __init__(self):
        self.command = None

    def execute(self, command):
        self.command = command
        return RealtimePricesOutput(
            prices={"ethereum": ETH_QUOTE},
            currencies=["usd"],
            cross_rates={"eth": {"usd": Decimal("2000")}},
            fetched_at=NOW,
        )


class FakeRatesUseCase:
    def execute(self):
        return CurrencyRatesOutput(
            rates={"eth": {"sol": Decimal("20"), "usd": Decimal("2000")}},
            from_cache=True,
            fetched_at=NOW,
        )


class FakeConvertUseCase:
    def execute(self, command):
        if command.target == "xyz":
            raise ConversionInputError("Unsupported currency: xyz")
        return ConvertCurrencyOutput(
            value=command.value,
            source=command.source,
            target=command.target,
            converted=command.value * 20,
            rate=Decimal("20"),
            rate_available=True,
            formatted="40.0000 SOL",
            fetched_at=NOW,
        )


class FakeTopCoinsUseCase:
    def execute(self):
        return MarketListOutput(
            entries=[
                TickerEntry(
                    id="bitcoin",
                    symbol="BTC",
                    name="Bitcoin",
                    price=Decimal("60000"),
                    change=Decimal("-1.2"),
                    change_text="-1.20%",
                    positive=False,
                    market_cap=Decimal("1200000000000"),
                    rank=1,
                    image="",
                )
            ],
            source="fallback_data",
            fetched_at=NOW,
            error="CoinGecko request failed: 429",
        )


class FakeClearCacheUseCase:
    def execute(self):
        return ClearPriceCacheOutput(cleared=7, timestamp=NOW)


def _client(dependency, fake) -> TestClient:
    app.dependency_overrides[dependency] = lambda: fake
    return TestClient(app)


def test_prices_by_symbol_use_coingecko_shape():
    market = FakeMarketDataPort({"ethereum": ETH_QUOTE})
    client = _client(get_prices_use_case, GetPricesUseCase(market_data_port=market))

    response = client.get("/api/prices/ETH")

    assert response.status_code == 200
    quote = response.json()["prices"]["eth"]
    assert quote["usd"] == 2000.0
    assert quote["usd_24h_change"] == 1.5
    assert quote["usd_market_cap"] == 240000000000.0
    assert market.requested == [["ethereum"]]

    app.dependency_overrides.clear()


def test_prices_upstream_failure_maps_to_502():
    market = FakeMarketDataPort(fail=True)
    client = _client(get_prices_use_case, GetPricesUseCase(market_data_port=market))

    response = client.get("/api/prices/btc,eth")

    assert response.status_code == 502
    assert response.json() == {
        "success": False,
        "error": "CoinGecko request failed: 429",
        "timestamp": response.json()["timestamp"],
    }

    app.dependency_overrides.clear()


def test_blank_symbols_map_to_400():
    market = FakeMarketDataPort()
    client = _client(get_prices_use_case, GetPricesUseCase(market_data_port=market))

    response = client.get("/api/prices/,,")

    assert response.status_code == 400
    assert market.requested == []

    app.dependency_overrides.clear()


def test_realtime_route_is_not_treated_as_symbol():
    fake = FakeRealtimeUseCase()
    client = _client(get_realtime_prices_use_case, fake)

    response = client.get("/api/prices/realtime", params={"coins": "btc, eth", "currencies": "usd,eur"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["source"] == "CoinGecko API"
    assert payload["crossRates"]["eth"]["usd"] == 2000.0
    assert fake.command.coins == ["btc", "eth"]
    assert fake.command.currencies == ["usd", "eur"]

    app.dependency_overrides.clear()


def test_rates_reports_cache_source():
    client = _client(get_currency_rates_use_case, FakeRatesUseCase())

    payload = client.get("/api/prices/rates").json()

    assert payload["source"] == "cache"
    assert payload["rates"]["eth"]["sol"] == 20.0

    app.dependency_overrides.clear()


def test_convert_reads_from_and_to_query_params():
    client = _client(get_convert_currency_use_case, FakeConvertUseCase())

    response = client.get("/api/prices/convert", params={"value": "2", "from": "eth", "to": "sol"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["from"] == "eth"
    assert payload["to"] == "sol"
    assert payload["converted"] == 40.0
    assert payload["rateAvailable"] is True

    rejected = client.get("/api/prices/convert", params={"value": "2", "from": "eth", "to": "xyz"})
    assert rejected.status_code == 400

    missing = client.get("/api/prices/convert", params={"from": "eth"})
    assert missing.status_code == 400
    assert missing.json()["error"] == "Invalid request"

    app.dependency_overrides.clear()


def test_portfolio_calculate_values_tokens():
    market = FakeMarketDataPort({"ethereum": ETH_QUOTE})
    client = _client(
        get_calculate_portfolio_use_case,
        CalculatePortfolioUseCase(market_data_port=market),
    )

    response = client.post(
        "/api/prices/portfolio/calculate",
        json={
            "wallets": [
                {
                    "address": "0xabc",
                    "chain": "ethereum",
                    "tokens": [
                        {"symbol": "ETH", "balance": "1.5"},
                        {"symbol": "FOO", "balance": "oops"},
                    ],
                }
            ]
        },
    )

    assert response.status_code == 200
    portfolio = response.json()["portfolio"]
    assert portfolio["totalValue"] == 3000.0
    assert portfolio["walletCount"] == 1
    tokens = portfolio["wallets"][0]["tokens"]
    assert tokens[0]["value"] == 3000.0
    assert tokens[0]["change24h"] == 1.5
    assert tokens[1]["balance"] == 0.0
    assert tokens[1]["value"] == 0.0

    app.dependency_overrides.clear()


def test_top10_fallback_carries_note():
    client = _client(get_top_coins_use_case, FakeTopCoinsUseCase())

    payload = client.get("/api/prices/top10").json()

    assert payload["count"] == 1
    assert payload["source"] == "fallback_data"
    assert payload["note"] == "Using fallback data due to API error"
    assert payload["top10"][0]["changeText"] == "-1.20%"

    app.dependency_overrides.clear()


def test_clear_price_cache():
    client = _client(get_clear_price_cache_use_case, FakeClearCacheUseCase())

    response = client.delete("/api/prices/cache")

    assert response.status_code == 200
    assert response.json()["cleared"] == 7

    app.dependency_overrides.clear()
