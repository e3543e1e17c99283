from __future__ import annotations

import logging

from portfolio_api.application.dto.prices import MarketListOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.exceptions import PriceLookupDomainError
from portfolio_api.domain.services.ticker import (
    TICKER_COINS,
    fallback_top_coins,
    ticker_from_market,
    ticker_from_quotes,
    ultimate_fallback_ticker,
)
from portfolio_api.shared.clock import utc_now


logger = logging.getLogger(__name__)

TOP_COINS_LIMIT = 10

SOURCE_MARKETS = "CoinGecko Markets API"
SOURCE_FALLBACK = "fallback_data"
SOURCE_TICKER_LIVE = "top10_live"
SOURCE_TICKER_FALLBACK = "fallback_coins"
SOURCE_TICKER_ULTIMATE = "ultimate_fallback"


class GetTopCoinsUseCase:
    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self) -> MarketListOutput:
        try:
            coins = self._market_data_port.get_top_coins(limit=TOP_COINS_LIMIT)
        except PriceLookupDomainError as exc:
            logger.warning("top_coins: using_fallback error=%s", exc)
            return MarketListOutput(
                entries=fallback_top_coins(),
                source=SOURCE_FALLBACK,
                fetched_at=utc_now(),
                error=str(exc),
            )
        return MarketListOutput(
            entries=ticker_from_market(coins),
            source=SOURCE_MARKETS,
            fetched_at=utc_now(),
        )


class GetTickerUseCase:
    """Live top coins, then a six-coin price lookup, then a static list."""

    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self) -> MarketListOutput:
        try:
            coins = self._market_data_port.get_top_coins(limit=TOP_COINS_LIMIT)
            return MarketListOutput(
                entries=ticker_from_market(coins),
                source=SOURCE_TICKER_LIVE,
                fetched_at=utc_now(),
            )
        except PriceLookupDomainError as exc:
            logger.warning("ticker: top_coins_failed error=%s", exc)

        try:
            quotes = self._market_data_port.get_prices(
                coin_ids=list(TICKER_COINS),
                currencies=["usd"],
            )
        except PriceLookupDomainError as exc:
            logger.error("ticker: using_static_fallback error=%s", exc)
            return MarketListOutput(
                entries=ultimate_fallback_ticker(),
                source=SOURCE_TICKER_ULTIMATE,
                fetched_at=utc_now(),
                error=str(exc),
            )
        return MarketListOutput(
            entries=ticker_from_quotes(quotes),
            source=SOURCE_TICKER_FALLBACK,
            fetched_at=utc_now(),
        )
