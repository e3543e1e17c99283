from __future__ import annotations

import logging

from portfolio_api.application.dto.wallet import ChainStatusFailure, ChainStatusOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.application.use_cases.probe_chain_pricing import ProbeChainPricingUseCase
from portfolio_api.domain.entities.wallet import WalletSnapshot
from portfolio_api.domain.exceptions import DomainError
from portfolio_api.shared.chain_registry import get_chain, list_chains
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)


class GetChainStatusUseCase:
    def __init__(
        self,
        *,
        probe: ProbeChainPricingUseCase,
        market_data_port: MarketDataPort,
        wallet_cache: TtlCache[WalletSnapshot],
    ):
        self._probe = probe
        self._market_data_port = market_data_port
        self._wallet_cache = wallet_cache

    def execute(self, chain_key: str) -> ChainStatusOutput:
        chain = get_chain(chain_key)
        stats = self._market_data_port.cache_stats()
        return ChainStatusOutput(
            chain=chain,
            probe=self._probe.execute(chain.key),
            price_cache=stats["prices"],
            wallet_cache=self._wallet_cache.stats(),
            timestamp=utc_now(),
        )

    def execute_all(self) -> list[ChainStatusOutput | ChainStatusFailure]:
        rows: list[ChainStatusOutput | ChainStatusFailure] = []
        for chain in list_chains():
            try:
                rows.append(self.execute(chain.key))
            except DomainError as exc:
                logger.warning("chain_status: failed chain=%s error=%s", chain.key, exc)
                rows.append(ChainStatusFailure(chain=chain, error=str(exc)))
        return rows
