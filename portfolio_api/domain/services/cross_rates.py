from __future__ import annotations

from decimal import Decimal
import logging
from typing import Mapping

from portfolio_api.domain.entities.market import CoinQuote


logger = logging.getLogger(__name__)

ONE = Decimal("1")

RATE_COINS = {"btc": "bitcoin", "eth": "ethereum", "sol": "solana"}
STABLECOINS = ("usdc", "usdt")
SUPPORTED_CURRENCIES = ("usd", "eth", "sol", "btc", "usdc", "usdt")

CrossRates = dict[str, dict[str, Decimal]]


def calculate_cross_rates(quotes: Mapping[str, CoinQuote]) -> CrossRates:
    """Derive a full from->to rate table from the USD prices of BTC, ETH and SOL.

    Stablecoins are pegged at 1 USD. Returns an empty table when any of the
    three reference prices is missing or not positive.
    """
    usd_prices: dict[str, Decimal] = {}
    for symbol, coin_id in RATE_COINS.items():
        quote = quotes.get(coin_id)
        price = quote.price("usd") if quote is not None else Decimal("0")
        if price <= 0:
            return {}
        usd_prices[symbol] = price

    for stable in STABLECOINS:
        usd_prices[stable] = ONE
    usd_prices["usd"] = ONE

    rates: CrossRates = {}
    for source, source_price in usd_prices.items():
        rates[source] = {
            target: source_price / target_price
            for target, target_price in usd_prices.items()
            if target != source
        }
    return rates


def convert(value: Decimal, source: str, target: str, rates: CrossRates) -> tuple[Decimal, bool]:
    """Returns ``(converted, rate_available)``; a missing rate leaves value unchanged."""
    if not value:
        return Decimal("0"), True
    if source == target:
        return value, True
    rate = rates.get(source, {}).get(target)
    if rate is None:
        logger.warning("cross_rates: missing_rate from=%s to=%s", source, target)
        return value, False
    return value * rate, True


def _decimals_for(currency: str) -> int:
    if currency in ("usd", "usdc", "usdt"):
        return 2
    if currency == "btc":
        return 6
    return 4


def format_currency(value: Decimal, currency: str) -> str:
    currency = currency.lower()
    decimals = _decimals_for(currency)
    number = f"{value or Decimal('0'):,.{decimals}f}"
    if currency in ("usd", "usdc", "usdt"):
        return f"${number}"
    if currency in ("eth", "sol", "btc"):
        return f"{number} {currency.upper()}"
    return number
