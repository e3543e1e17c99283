from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from portfolio_api.domain.entities.market import CoinQuote, MarketCoin
from portfolio_api.shared.ttl_cache import CacheStats


class MarketDataPort(Protocol):
    def get_usd_price(self, coin_id: str) -> Decimal:
        ...

    def get_prices(
        self,
        *,
        coin_ids: list[str],
        currencies: list[str],
    ) -> dict[str, CoinQuote]:
        ...

    def get_top_coins(self, *, limit: int) -> list[MarketCoin]:
        ...

    def clear_cache(self) -> int:
        ...

    def cache_stats(self) -> dict[str, CacheStats]:
        ...

    @property
    def api_key_configured(self) -> bool:
        ...
