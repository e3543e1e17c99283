from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class CoinQuote:
    coin_id: str
    prices: dict[str, Decimal]
    change_24h: dict[str, Decimal] = field(default_factory=dict)
    market_cap: dict[str, Decimal] = field(default_factory=dict)
    last_updated_at: int | None = None

    def price(self, currency: str = "usd") -> Decimal:
        return self.prices.get(currency, Decimal("0"))

    def change(self, currency: str = "usd") -> Decimal:
        return self.change_24h.get(currency, Decimal("0"))


@dataclass(frozen=True)
class MarketCoin:
    id: str
    symbol: str
    name: str
    price: Decimal
    change_24h: Decimal
    market_cap: Decimal
    rank: int | None
    image: str


@dataclass(frozen=True)
class TickerEntry:
    id: str
    symbol: str
    name: str
    price: Decimal
    change: Decimal
    change_text: str
    positive: bool
    market_cap: Decimal
    rank: int | None
    image: str
