from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from portfolio_api.domain.entities.portfolio import GoalProgress, PortfolioWallet, ValuedPortfolio
from portfolio_api.domain.services.cross_rates import CrossRates


@dataclass(frozen=True)
class CalculatePortfolioInput:
    wallets: list[PortfolioWallet]


@dataclass(frozen=True)
class CalculatePortfolioOutput:
    portfolio: ValuedPortfolio
    cross_rates: CrossRates


@dataclass(frozen=True)
class GoalsProgressInput:
    wallets: list[PortfolioWallet]
    goals: dict[str, Decimal]


@dataclass(frozen=True)
class GoalsProgressOutput:
    holdings: dict[str, Decimal]
    goals: list[GoalProgress]
