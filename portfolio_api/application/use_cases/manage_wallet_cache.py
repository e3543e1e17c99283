from __future__ import annotations

import logging

from portfolio_api.application.dto.wallet import WalletCacheClearOutput, WalletCacheStatsOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.entities.wallet import WalletSnapshot
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)


class ClearWalletCacheUseCase:
    def __init__(self, *, wallet_cache: TtlCache[WalletSnapshot], market_data_port: MarketDataPort):
        self._wallet_cache = wallet_cache
        self._market_data_port = market_data_port

    def execute(self) -> WalletCacheClearOutput:
        wallets = self._wallet_cache.clear()
        prices = self._market_data_port.clear_cache()
        logger.info("wallet_cache: cleared wallets=%s prices=%s", wallets, prices)
        return WalletCacheClearOutput(
            wallet_entries_cleared=wallets,
            price_entries_cleared=prices,
            timestamp=utc_now(),
        )


class GetWalletCacheStatsUseCase:
    def __init__(self, *, wallet_cache: TtlCache[WalletSnapshot], market_data_port: MarketDataPort):
        self._wallet_cache = wallet_cache
        self._market_data_port = market_data_port

    def execute(self) -> WalletCacheStatsOutput:
        return WalletCacheStatsOutput(
            wallets=self._wallet_cache.stats(),
            prices=self._market_data_port.cache_stats(),
            timestamp=utc_now(),
        )
