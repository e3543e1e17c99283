from __future__ import annotations

import logging

from portfolio_api.application.dto.portfolio import CalculatePortfolioInput, CalculatePortfolioOutput
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.services.cross_rates import calculate_cross_rates
from portfolio_api.domain.services.portfolio_valuation import collect_coin_ids, value_portfolio
from portfolio_api.shared.clock import utc_now


logger = logging.getLogger(__name__)


class CalculatePortfolioUseCase:
    def __init__(self, *, market_data_port: MarketDataPort):
        self._market_data_port = market_data_port

    def execute(self, command: CalculatePortfolioInput) -> CalculatePortfolioOutput:
        coin_ids = collect_coin_ids(command.wallets)
        quotes = (
            self._market_data_port.get_prices(coin_ids=coin_ids, currencies=["usd"])
            if coin_ids
            else {}
        )
        portfolio = value_portfolio(command.wallets, quotes, now=utc_now())
        logger.info(
            "calculate_portfolio: valued wallets=%s coins=%s total_usd=%s",
            portfolio.wallet_count,
            len(coin_ids),
            portfolio.total_value,
        )
        return CalculatePortfolioOutput(
            portfolio=portfolio,
            cross_rates=calculate_cross_rates(quotes),
        )
