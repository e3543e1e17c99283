from __future__ import annotations

from pydantic import Field

from portfolio_api.api.schemas.common import CamelModel
from portfolio_api.api.schemas.prices import RatesTable


class PortfolioTokenRequest(CamelModel):
    symbol: str | None = None
    balance: str | float | None = Field(None, description="Token balance; unparseable values count as 0.")
    coingecko_id: str | None = None
    name: str | None = None
    address: str | None = None
    decimals: int | None = None


class PortfolioWalletRequest(CamelModel):
    address: str | None = None
    chain: str | None = None
    name: str | None = None
    tokens: list[PortfolioTokenRequest] = Field(default_factory=list)


class CalculatePortfolioRequest(CamelModel):
    wallets: list[PortfolioWalletRequest]


class ValuedTokenResponse(CamelModel):
    symbol: str | None
    name: str | None
    address: str | None
    decimals: int | None
    coingecko_id: str | None
    balance: float
    price: float
    value: float
    change_24h: float = Field(..., alias="change24h")


class ValuedWalletResponse(CamelModel):
    address: str | None
    chain: str | None
    name: str | None
    tokens: list[ValuedTokenResponse]
    total_value: float
    last_updated: str


class PortfolioResponse(CamelModel):
    wallets: list[ValuedWalletResponse]
    total_value: float
    wallet_count: int
    cross_rates: RatesTable
    last_updated: str


class CalculatePortfolioResponse(CamelModel):
    success: bool = True
    portfolio: PortfolioResponse


class GoalsProgressRequest(CamelModel):
    wallets: list[PortfolioWalletRequest]
    goals: dict[str, float] = Field(..., description="Target amount per goal currency (eth, sol, bnb, usdc, usdt, dai).")


class GoalProgressResponse(CamelModel):
    currency: str
    goal: float
    current: float
    progress: float


class GoalsProgressResponse(CamelModel):
    success: bool = True
    holdings: dict[str, float]
    goals: list[GoalProgressResponse]
    fetched_at: str
