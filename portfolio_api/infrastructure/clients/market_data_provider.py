from __future__ import annotations

from decimal import Decimal

from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.entities.market import CoinQuote, MarketCoin
from portfolio_api.domain.exceptions import PriceLookupDomainError
from portfolio_api.infrastructure.clients.pricing import PriceLookupError, PriceService
from portfolio_api.shared.ttl_cache import CacheStats


class PriceServiceAdapter(MarketDataPort):
    def __init__(self, price_service: PriceService):
        self._price_service = price_service

    @property
    def api_key_configured(self) -> bool:
        return self._price_service.api_key_configured

    def get_usd_price(self, coin_id: str) -> Decimal:
        try:
            return self._price_service.get_usd_price(coin_id)
        except PriceLookupError as exc:
            raise PriceLookupDomainError(str(exc)) from exc

    def get_prices(
        self,
        *,
        coin_ids: list[str],
        currencies: list[str],
    ) -> dict[str, CoinQuote]:
        try:
            return self._price_service.get_prices(coin_ids, currencies)
        except PriceLookupError as exc:
            raise PriceLookupDomainError(str(exc)) from exc

    def get_top_coins(self, *, limit: int) -> list[MarketCoin]:
        try:
            return self._price_service.get_top_coins(limit)
        except PriceLookupError as exc:
            raise PriceLookupDomainError(str(exc)) from exc

    def clear_cache(self) -> int:
        return self._price_service.clear_cache()

    def cache_stats(self) -> dict[str, CacheStats]:
        return self._price_service.cache_stats()
