from __future__ import annotations

import logging

from portfolio_api.application.dto.system import UpstreamCheckOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.application.ports.upstream_health_port import UpstreamHealthPort
from portfolio_api.domain.exceptions import BalanceLookupError, PriceLookupDomainError
from portfolio_api.shared.clock import utc_now


logger = logging.getLogger(__name__)


class CheckUpstreamsUseCase:
    """Probes CoinGecko, the Ethereum RPC and the Solana RPC independently."""

    def __init__(self, *, market_data_port: MarketDataPort, health_port: UpstreamHealthPort):
        self._market_data_port = market_data_port
        self._health_port = health_port

    def _coingecko(self) -> str:
        try:
            price = self._market_data_port.get_usd_price("ethereum")
        except PriceLookupDomainError as exc:
            logger.warning("check_upstreams: coingecko_failed error=%s", exc)
            return f"Failed: {exc}"
        return f"Working - ETH: ${price}"

    def _ethereum(self) -> str:
        try:
            block = self._health_port.evm_latest_block(chain="ethereum")
        except BalanceLookupError as exc:
            logger.warning("check_upstreams: ethereum_rpc_failed error=%s", exc)
            return f"Failed: {exc}"
        return f"Working - Block: {block}"

    def _solana(self) -> str:
        try:
            healthy = self._health_port.solana_is_healthy()
        except BalanceLookupError as exc:
            logger.warning("check_upstreams: solana_rpc_failed error=%s", exc)
            return f"Failed: {exc}"
        return "Working" if healthy else "Unhealthy"

    def execute(self) -> UpstreamCheckOutput:
        return UpstreamCheckOutput(
            coingecko=self._coingecko(),
            ethereum_rpc=self._ethereum(),
            solana_rpc=self._solana(),
            timestamp=utc_now(),
        )
