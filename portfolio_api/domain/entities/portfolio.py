from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class PortfolioToken:
    symbol: str | None
    balance: str | None
    coingecko_id: str | None = None
    name: str | None = None
    address: str | None = None
    decimals: int | None = None


@dataclass(frozen=True)
class PortfolioWallet:
    tokens: list[PortfolioToken]
    address: str | None = None
    chain: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class ValuedToken:
    token: PortfolioToken
    balance: Decimal
    price: Decimal
    value: Decimal
    change_24h: Decimal


@dataclass(frozen=True)
class ValuedWallet:
    wallet: PortfolioWallet
    tokens: list[ValuedToken]
    total_value: Decimal
    last_updated: datetime


@dataclass(frozen=True)
class ValuedPortfolio:
    wallets: list[ValuedWallet]
    total_value: Decimal
    last_updated: datetime

    @property
    def wallet_count(self) -> int:
        return len(self.wallets)


@dataclass(frozen=True)
class GoalProgress:
    currency: str
    goal: Decimal
    current: Decimal
    progress: Decimal
