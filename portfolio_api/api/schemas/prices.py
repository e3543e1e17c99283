from __future__ import annotations

from pydantic import Field

from portfolio_api.api.schemas.common import CamelModel


RatesTable = dict[str, dict[str, float]]

# CoinGecko simple-price shape: usd, usd_24h_change, usd_market_cap, last_updated_at.
QuotePayload = dict[str, float]


class PricesResponse(CamelModel):
    success: bool = True
    prices: dict[str, QuotePayload]
    fetched_at: str


class RealtimePricesResponse(CamelModel):
    success: bool = True
    prices: dict[str, QuotePayload]
    currencies: list[str]
    cross_rates: RatesTable
    source: str = "CoinGecko API"
    fetched_at: str


class RatesResponse(CamelModel):
    success: bool = True
    rates: RatesTable
    source: str
    fetched_at: str


class ConvertResponse(CamelModel):
    success: bool = True
    value: float
    source: str = Field(..., alias="from")
    target: str = Field(..., alias="to")
    converted: float
    rate: float | None
    rate_available: bool
    formatted: str
    fetched_at: str


class TickerEntryResponse(CamelModel):
    id: str
    symbol: str
    name: str
    price: float
    change: float
    change_text: str
    positive: bool
    market_cap: float
    rank: int | None
    image: str


class TopCoinsResponse(CamelModel):
    success: bool = True
    top10: list[TickerEntryResponse]
    count: int
    source: str
    error: str | None = None
    note: str | None = None
    fetched_at: str


class TickerResponse(CamelModel):
    success: bool = True
    ticker: list[TickerEntryResponse]
    source: str
    error: str | None = None
    fetched_at: str


class CoinConnectivityResponse(CamelModel):
    status: str
    price: float | None = None
    change_24h: float | None = Field(None, alias="change24h")


class ConnectivityResponse(CamelModel):
    success: bool = True
    coingecko_api: str = "Connected"
    top10_endpoint: str
    api_key: str
    test_results: dict[str, CoinConnectivityResponse]
    cache_size: int
    timestamp: str


class ClearCacheResponse(CamelModel):
    success: bool = True
    message: str = "Cache cleared"
    cleared: int
    timestamp: str
