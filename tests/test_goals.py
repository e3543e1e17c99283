from __future__ import annotations

from decimal import Decimal

import pytest

from portfolio_api.domain.entities.portfolio import PortfolioToken, PortfolioWallet
from portfolio_api.domain.exceptions import GoalsInputError
from portfolio_api.domain.services.goals import (
    calculate_progress,
    current_holdings,
    goals_progress,
)


WALLETS = [
    PortfolioWallet(
        tokens=[
            PortfolioToken(symbol="ETH", balance="1"),
            PortfolioToken(symbol="WETH", balance="0.5"),
            PortfolioToken(symbol="USDC", balance="250"),
        ]
    ),
    PortfolioWallet(tokens=[PortfolioToken(symbol="wsol", balance="4")]),
]


def test_wrapped_tokens_count_toward_underlying():
    holdings = current_holdings(WALLETS)

    assert holdings["eth"] == Decimal("1.5")
    assert holdings["sol"] == Decimal("4")
    assert holdings["bnb"] == Decimal("0")


def test_progress_is_capped_at_one_hundred():
    assert calculate_progress(Decimal("3"), Decimal("2")) == Decimal("100")
    assert calculate_progress(Decimal("1"), Decimal("4")) == Decimal("25")
    assert calculate_progress(Decimal("1"), Decimal("0")) == Decimal("0")


def test_only_positive_goals_are_listed_in_fixed_order():
    rows = goals_progress(
        WALLETS,
        {"usdc": Decimal("1000"), "eth": Decimal("3"), "sol": Decimal("0")},
    )

    assert [row.currency for row in rows] == ["eth", "usdc"]
    assert rows[0].progress == Decimal("50")
    assert rows[1].progress == Decimal("25")


def test_unknown_goal_currency_is_rejected():
    with pytest.raises(GoalsInputError):
        goals_progress(WALLETS, {"doge": Decimal("1")})


def test_negative_goal_is_rejected():
    with pytest.raises(GoalsInputError):
        goals_progress(WALLETS, {"eth": Decimal("-1")})
