from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from portfolio_api.domain.entities.market import CoinQuote, MarketCoin, TickerEntry


TICKER_COINS = ("bitcoin", "ethereum", "solana", "matic-network", "uniswap", "chainlink")

TICKER_SYMBOLS = {
    "bitcoin": "BTC",
    "ethereum": "ETH",
    "solana": "SOL",
    "matic-network": "MATIC",
    "uniswap": "UNI",
    "chainlink": "LINK",
}

# (symbol, name, price, 24h change) used when the markets endpoint is down.
FALLBACK_TOP_COINS = (
    ("BTC", "Bitcoin", "43500", "2.4"),
    ("ETH", "Ethereum", "2300", "-1.2"),
    ("USDT", "Tether", "1.00", "0.1"),
    ("BNB", "BNB", "300", "3.1"),
    ("SOL", "Solana", "90", "5.2"),
    ("USDC", "USD Coin", "1.00", "0.0"),
    ("XRP", "XRP", "0.60", "1.8"),
    ("ADA", "Cardano", "0.45", "-0.5"),
    ("AVAX", "Avalanche", "35", "2.1"),
    ("DOGE", "Dogecoin", "0.08", "4.2"),
)

ULTIMATE_FALLBACK_TICKER = (
    ("BTC", "Bitcoin", "43500", "2.4"),
    ("ETH", "Ethereum", "2300", "-1.2"),
    ("SOL", "Solana", "90", "5.2"),
    ("MATIC", "Polygon", "0.80", "1.8"),
    ("UNI", "Uniswap", "12", "-0.5"),
    ("LINK", "Chainlink", "15", "3.1"),
)


def format_change(change: Decimal) -> str:
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.1f}%"


def _entry(
    *,
    id: str,
    symbol: str,
    name: str,
    price: Decimal,
    change: Decimal,
    market_cap: Decimal = Decimal("0"),
    rank: int | None = None,
    image: str = "",
) -> TickerEntry:
    return TickerEntry(
        id=id,
        symbol=symbol,
        name=name,
        price=price,
        change=change,
        change_text=format_change(change),
        positive=change >= 0,
        market_cap=market_cap,
        rank=rank,
        image=image,
    )


def ticker_from_market(coins: list[MarketCoin]) -> list[TickerEntry]:
    return [
        _entry(
            id=coin.id,
            symbol=coin.symbol.upper(),
            name=coin.name,
            price=coin.price,
            change=coin.change_24h,
            market_cap=coin.market_cap,
            rank=coin.rank,
            image=coin.image,
        )
        for coin in coins
    ]


def ticker_from_quotes(quotes: Mapping[str, CoinQuote]) -> list[TickerEntry]:
    return [
        _entry(
            id=coin_id,
            symbol=TICKER_SYMBOLS.get(coin_id, coin_id.upper()),
            name=coin_id,
            price=quote.price("usd"),
            change=quote.change("usd"),
        )
        for coin_id, quote in quotes.items()
    ]


def _static(rows: tuple[tuple[str, str, str, str], ...], *, ranked: bool) -> list[TickerEntry]:
    return [
        _entry(
            id=symbol.lower(),
            symbol=symbol,
            name=name,
            price=Decimal(price),
            change=Decimal(change),
            rank=index + 1 if ranked else None,
        )
        for index, (symbol, name, price, change) in enumerate(rows)
    ]


def fallback_top_coins() -> list[TickerEntry]:
    return _static(FALLBACK_TOP_COINS, ranked=True)


def ultimate_fallback_ticker() -> list[TickerEntry]:
    return _static(ULTIMATE_FALLBACK_TICKER, ranked=False)
