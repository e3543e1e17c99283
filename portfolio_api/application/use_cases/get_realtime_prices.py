from __future__ import annotations

from portfolio_api.application.dto.prices import RealtimePricesInput, RealtimePricesOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.application.use_cases.get_currency_rates import RATES_KEY
from portfolio_api.domain.services.cross_rates import CrossRates, calculate_cross_rates
from portfolio_api.shared.chain_registry import coin_id_for
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


DEFAULT_COINS = ("bitcoin", "ethereum", "solana")
DEFAULT_CURRENCIES = ("usd",)


class GetRealtimePricesUseCase:
    def __init__(self, *, market_data_port: MarketDataPort, rates_cache: TtlCache[CrossRates]):
        self._market_data_port = market_data_port
        self._rates_cache = rates_cache

    def execute(self, command: RealtimePricesInput) -> RealtimePricesOutput:
        coins = [coin_id_for(coin) for coin in command.coins if coin.strip()] or list(DEFAULT_COINS)
        currencies = [
            currency.strip().lower() for currency in command.currencies if currency.strip()
        ] or list(DEFAULT_CURRENCIES)

        quotes = self._market_data_port.get_prices(coin_ids=coins, currencies=currencies)
        cross_rates = calculate_cross_rates(quotes)
        if cross_rates:
            self._rates_cache.set(RATES_KEY, cross_rates)

        return RealtimePricesOutput(
            prices=quotes,
            currencies=currencies,
            cross_rates=cross_rates,
            fetched_at=utc_now(),
        )
