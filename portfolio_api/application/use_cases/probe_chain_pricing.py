from __future__ import annotations

import logging

from portfolio_api.application.dto.wallet import PriceProbeOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.exceptions import PriceLookupDomainError
from portfolio_api.shared.chain_registry import get_chain
from portfolio_api.shared.clock import utc_now


logger = logging.getLogger(__name__)


class ProbeChainPricingUseCase:
    """Looks up the native coin price of a chain to confirm CoinGecko is reachable."""

    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self, chain_key: str) -> PriceProbeOutput:
        chain = get_chain(chain_key)
        try:
            price = self._market_data_port.get_usd_price(chain.native_coingecko_id)
        except PriceLookupDomainError as exc:
            logger.warning("probe_chain_pricing: failed chain=%s error=%s", chain.key, exc)
            return PriceProbeOutput(
                chain=chain.key,
                status="error",
                message=f"CoinGecko connection failed for {chain.name}",
                timestamp=utc_now(),
                error=str(exc),
            )
        return PriceProbeOutput(
            chain=chain.key,
            status="success" if price > 0 else "error",
            message=f"CoinGecko working for {chain.name}",
            timestamp=utc_now(),
            test_price=price,
        )
