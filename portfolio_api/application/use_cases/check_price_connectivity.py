from __future__ import annotations

from portfolio_api.application.dto.prices import CoinConnectivity, PriceConnectivityOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.exceptions import PriceLookupDomainError
from portfolio_api.shared.clock import utc_now


PROBE_COINS = ("bitcoin", "ethereum", "solana")


class CheckPriceConnectivityUseCase:
    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self) -> PriceConnectivityOutput:
        quotes = self._market_data_port.get_prices(coin_ids=list(PROBE_COINS), currencies=["usd"])
        coins = []
        for coin_id in PROBE_COINS:
            quote = quotes.get(coin_id)
            if quote is None:
                coins.append(CoinConnectivity(coin_id=coin_id, working=False))
                continue
            coins.append(
                CoinConnectivity(
                    coin_id=coin_id,
                    working=True,
                    price=quote.prices.get("usd"),
                    change_24h=quote.change_24h.get("usd"),
                )
            )

        try:
            self._market_data_port.get_top_coins(limit=10)
            top_coins_status = "working"
        except PriceLookupDomainError as exc:
            top_coins_status = f"failed: {exc}"

        cache_size = sum(stats.size for stats in self._market_data_port.cache_stats().values())
        return PriceConnectivityOutput(
            coins=coins,
            top_coins_status=top_coins_status,
            api_key_configured=self._market_data_port.api_key_configured,
            cache_size=cache_size,
            timestamp=utc_now(),
        )
