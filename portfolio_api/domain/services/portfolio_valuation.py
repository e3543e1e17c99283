from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import re
from typing import Iterable, Mapping

from portfolio_api.domain.entities.market import CoinQuote
from portfolio_api.domain.entities.portfolio import (
    PortfolioToken,
    PortfolioWallet,
    ValuedPortfolio,
    ValuedToken,
    ValuedWallet,
)
from portfolio_api.shared.chain_registry import COIN_IDS


ZERO = Decimal("0")

LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_balance(value: str | int | float | None) -> Decimal:
    """Reads the leading number of a balance, so ``"12abc"`` is 12.

    Values without a leading number (including "NaN" and "Infinity") count as zero.
    """
    if value is None:
        return ZERO
    match = LEADING_NUMBER.match(str(value).strip())
    if match is None:
        return ZERO
    return Decimal(match.group(0))


def resolve_coin_id(token: PortfolioToken) -> str | None:
    symbol = (token.symbol or "").strip().lower()
    if symbol in COIN_IDS:
        return COIN_IDS[symbol]
    return token.coingecko_id or None


def collect_coin_ids(wallets: Iterable[PortfolioWallet]) -> list[str]:
    seen: dict[str, None] = {}
    for wallet in wallets:
        for token in wallet.tokens:
            coin_id = resolve_coin_id(token)
            if coin_id:
                seen.setdefault(coin_id, None)
    return list(seen)


def value_portfolio(
    wallets: list[PortfolioWallet],
    quotes: Mapping[str, CoinQuote],
    *,
    now: datetime,
) -> ValuedPortfolio:
    valued_wallets: list[ValuedWallet] = []
    for wallet in wallets:
        valued_tokens: list[ValuedToken] = []
        for token in wallet.tokens:
            coin_id = resolve_coin_id(token)
            quote = quotes.get(coin_id) if coin_id else None
            price = quote.price("usd") if quote is not None else ZERO
            change = quote.change("usd") if quote is not None else ZERO
            balance = parse_balance(token.balance)
            valued_tokens.append(
                ValuedToken(
                    token=token,
                    balance=balance,
                    price=price,
                    value=balance * price,
                    change_24h=change,
                )
            )
        valued_wallets.append(
            ValuedWallet(
                wallet=wallet,
                tokens=valued_tokens,
                total_value=sum((row.value for row in valued_tokens), ZERO),
                last_updated=now,
            )
        )

    return ValuedPortfolio(
        wallets=valued_wallets,
        total_value=sum((row.total_value for row in valued_wallets), ZERO),
        last_updated=now,
    )
