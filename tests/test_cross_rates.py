from __future__ import annotations

from decimal import Decimal

from portfolio_api.domain.entities.market import CoinQuote
from portfolio_api.domain.services.cross_rates import (
    calculate_cross_rates,
    convert,
    format_currency,
)


def _quotes(btc: str = "40000", eth: str = "2000", sol: str = "100") -> dict[str, CoinQuote]:
    return {
        "bitcoin": CoinQuote(coin_id="bitcoin", prices={"usd": Decimal(btc)}),
        "ethereum": CoinQuote(coin_id="ethereum", prices={"usd": Decimal(eth)}),
        "solana": CoinQuote(coin_id="solana", prices={"usd": Decimal(sol)}),
    }


def test_cross_rates_are_ratios_of_usd_prices():
    rates = calculate_cross_rates(_quotes())

    assert rates["usd"]["eth"] == Decimal("1") / Decimal("2000")
    assert rates["eth"]["usd"] == Decimal("2000")
    assert rates["btc"]["eth"] == Decimal("20")
    assert rates["eth"]["sol"] == Decimal("20")
    assert rates["usdc"]["usd"] == Decimal("1")
    assert "usd" not in rates["usd"]


def test_cross_rates_empty_when_reference_price_missing():
    quotes = _quotes()
    del quotes["solana"]
    assert calculate_cross_rates(quotes) == {}
    assert calculate_cross_rates(_quotes(eth="0")) == {}


def test_convert_uses_rate_table():
    rates = calculate_cross_rates(_quotes())
    converted, available = convert(Decimal("1000"), "usd", "eth", rates)

    assert available
    assert converted == Decimal("0.5")


def test_convert_same_currency_and_zero_are_identity():
    assert convert(Decimal("12"), "eth", "eth", {}) == (Decimal("12"), True)
    assert convert(Decimal("0"), "usd", "btc", {}) == (Decimal("0"), True)


def test_convert_missing_rate_returns_value_unchanged():
    assert convert(Decimal("5"), "usd", "eth", {}) == (Decimal("5"), False)


def test_format_currency_per_currency_precision():
    assert format_currency(Decimal("1234.5"), "usd") == "$1,234.50"
    assert format_currency(Decimal("0.5"), "eth") == "0.5000 ETH"
    assert format_currency(Decimal("0.01"), "btc") == "0.010000 BTC"
    assert format_currency(Decimal("3"), "usdt") == "$3.00"
