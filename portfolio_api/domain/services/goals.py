from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from portfolio_api.domain.entities.portfolio import GoalProgress, PortfolioWallet
from portfolio_api.domain.exceptions import GoalsInputError
from portfolio_api.domain.services.portfolio_valuation import parse_balance


GOAL_CURRENCIES = ("eth", "sol", "bnb", "usdc", "usdt", "dai")

# Wrapped tokens count toward their underlying coin.
HOLDING_ALIASES = {
    "eth": "eth",
    "weth": "eth",
    "sol": "sol",
    "wsol": "sol",
    "bnb": "bnb",
    "wbnb": "bnb",
    "usdc": "usdc",
    "usdt": "usdt",
    "dai": "dai",
}

HUNDRED = Decimal("100")


def current_holdings(wallets: Iterable[PortfolioWallet]) -> dict[str, Decimal]:
    holdings = {currency: Decimal("0") for currency in GOAL_CURRENCIES}
    for wallet in wallets:
        for token in wallet.tokens:
            currency = HOLDING_ALIASES.get((token.symbol or "").strip().lower())
            if currency is None:
                continue
            holdings[currency] += parse_balance(token.balance)
    return holdings


def calculate_progress(current: Decimal, goal: Decimal) -> Decimal:
    if goal <= 0:
        return Decimal("0")
    return min((current / goal) * HUNDRED, HUNDRED)


def normalize_goals(goals: Mapping[str, Decimal]) -> dict[str, Decimal]:
    normalized: dict[str, Decimal] = {}
    for key, value in goals.items():
        currency = key.strip().lower()
        if currency not in GOAL_CURRENCIES:
            raise GoalsInputError(f"Unsupported goal currency: {key}")
        if not value.is_finite() or value < 0:
            raise GoalsInputError(f"Goal for {currency} must be a non-negative number.")
        normalized[currency] = value
    return normalized


def goals_progress(
    wallets: Iterable[PortfolioWallet],
    goals: Mapping[str, Decimal],
) -> list[GoalProgress]:
    targets = normalize_goals(goals)
    holdings = current_holdings(wallets)
    rows: list[GoalProgress] = []
    for currency in GOAL_CURRENCIES:
        goal = targets.get(currency, Decimal("0"))
        if goal <= 0:
            continue
        current = holdings[currency]
        rows.append(
            GoalProgress(
                currency=currency,
                goal=goal,
                current=current,
                progress=calculate_progress(current, goal),
            )
        )
    return rows
