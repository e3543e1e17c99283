from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from portfolio_api.api.schemas.common import CacheStatsResponse
from portfolio_api.api.schemas.portfolio import PortfolioWalletRequest
from portfolio_api.domain.entities.portfolio import PortfolioToken, PortfolioWallet
from portfolio_api.shared.clock import isoformat
from portfolio_api.shared.ttl_cache import CacheStats


def to_float(value: Decimal | None) -> float:
    return float(value) if value is not None else 0.0


def to_float_or_none(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def iso(value: datetime) -> str:
    return isoformat(value)


def cache_stats_response(stats: CacheStats) -> CacheStatsResponse:
    return CacheStatsResponse(
        size=stats.size,
        ttl_seconds=stats.ttl_seconds,
        fresh=stats.fresh,
        stale=stats.stale,
    )


def portfolio_wallets_from_request(wallets: list[PortfolioWalletRequest]) -> list[PortfolioWallet]:
    return [
        PortfolioWallet(
            address=wallet.address,
            chain=wallet.chain,
            name=wallet.name,
            tokens=[
                PortfolioToken(
                    symbol=token.symbol,
                    balance=None if token.balance is None else str(token.balance),
                    coingecko_id=token.coingecko_id,
                    name=token.name,
                    address=token.address,
                    decimals=token.decimals,
                )
                for token in wallet.tokens
            ],
        )
        for wallet in wallets
    ]
