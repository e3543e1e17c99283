from __future__ import annotations

import logging

from portfolio_api.application.dto.prices import CurrencyRatesOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.services.cross_rates import RATE_COINS, CrossRates, calculate_cross_rates
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)

RATES_KEY = "rates"


class GetCurrencyRatesUseCase:
    """Cross rates between USD, BTC, ETH, SOL and the USD stablecoins.

    An empty table is never cached so the next request retries upstream.
    """

    def __init__(self, *, market_data_port: MarketDataPort, rates_cache: TtlCache[CrossRates]):
        self._market_data_port = market_data_port
        self._rates_cache = rates_cache

    def execute(self) -> CurrencyRatesOutput:
        cached = self._rates_cache.get(RATES_KEY)
        if cached is not None:
            return CurrencyRatesOutput(rates=cached, from_cache=True, fetched_at=utc_now())

        quotes = self._market_data_port.get_prices(
            coin_ids=list(RATE_COINS.values()),
            currencies=["usd"],
        )
        rates = calculate_cross_rates(quotes)
        if rates:
            self._rates_cache.set(RATES_KEY, rates)
        else:
            logger.warning("currency_rates: incomplete_reference_prices coins=%s", len(quotes))
        return CurrencyRatesOutput(rates=rates, from_cache=False, fetched_at=utc_now())
