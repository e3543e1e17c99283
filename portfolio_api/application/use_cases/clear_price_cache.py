from __future__ import annotations

import logging

from portfolio_api.application.dto.prices import ClearPriceCacheOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.services.cross_rates import CrossRates
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)


class ClearPriceCacheUseCase:
    def __init__(self, *, market_data_port: MarketDataPort, rates_cache: TtlCache[CrossRates]):
        self._market_data_port = market_data_port
        self._rates_cache = rates_cache

    def execute(self) -> ClearPriceCacheOutput:
        cleared = self._market_data_port.clear_cache() + self._rates_cache.clear()
        logger.info("price_cache: cleared entries=%s", cleared)
        return ClearPriceCacheOutput(cleared=cleared, timestamp=utc_now())
