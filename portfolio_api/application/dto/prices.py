from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from portfolio_api.domain.entities.market import CoinQuote, TickerEntry
from portfolio_api.domain.services.cross_rates import CrossRates


@dataclass(frozen=True)
class GetPricesInput:
    symbols: list[str]


@dataclass(frozen=True)
class GetPricesOutput:
    prices: dict[str, CoinQuote]
    fetched_at: datetime


@dataclass(frozen=True)
class RealtimePricesInput:
    coins: list[str]
    currencies: list[str]


@dataclass(frozen=True)
class RealtimePricesOutput:
    prices: dict[str, CoinQuote]
    currencies: list[str]
    cross_rates: CrossRates
    fetched_at: datetime


@dataclass(frozen=True)
class CurrencyRatesOutput:
    rates: CrossRates
    from_cache: bool
    fetched_at: datetime


@dataclass(frozen=True)
class ConvertCurrencyInput:
    value: Decimal
    source: str
    target: str


@dataclass(frozen=True)
class ConvertCurrencyOutput:
    value: Decimal
    source: str
    target: str
    converted: Decimal
    rate: Decimal | None
    rate_available: bool
    formatted: str
    fetched_at: datetime


@dataclass(frozen=True)
class MarketListOutput:
    entries: list[TickerEntry]
    source: str
    fetched_at: datetime
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class CoinConnectivity:
    coin_id: str
    working: bool
    price: Decimal | None = None
    change_24h: Decimal | None = None


@dataclass(frozen=True)
class PriceConnectivityOutput:
    coins: list[CoinConnectivity]
    top_coins_status: str
    api_key_configured: bool
    cache_size: int
    timestamp: datetime


@dataclass(frozen=True)
class ClearPriceCacheOutput:
    cleared: int
    timestamp: datetime
