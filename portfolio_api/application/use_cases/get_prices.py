from __future__ import annotations

from portfolio_api.application.dto.prices import GetPricesInput, GetPricesOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.entities.market import CoinQuote
from portfolio_api.domain.exceptions import PriceInputError
from portfolio_api.shared.chain_registry import coin_id_for
from portfolio_api.shared.clock import utc_now


class GetPricesUseCase:
    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self, command: GetPricesInput) -> GetPricesOutput:
        symbols = [symbol.strip().lower() for symbol in command.symbols if symbol.strip()]
        if not symbols:
            raise PriceInputError("At least one symbol is required.")

        coin_ids = [coin_id_for(symbol) for symbol in symbols]
        quotes = self._market_data_port.get_prices(coin_ids=coin_ids, currencies=["usd"])

        prices: dict[str, CoinQuote] = {}
        for symbol, coin_id in zip(symbols, coin_ids):
            quote = quotes.get(coin_id)
            if quote is not None:
                prices[symbol] = quote
        return GetPricesOutput(prices=prices, fetched_at=utc_now())
