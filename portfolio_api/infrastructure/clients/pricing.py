from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import time

import httpx

from portfolio_api.domain.entities.market import CoinQuote, MarketCoin
from portfolio_api.shared.ttl_cache import CacheStats, TtlCache


logger = logging.getLogger(__name__)


class PriceLookupError(RuntimeError):
    pass


def _normalize_coin_id(value: str) -> str:
    return value.strip().lower()


def _normalize_ids(values: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        key = _normalize_coin_id(value)
        if key:
            seen.setdefault(key, None)
    return list(seen)


def _to_decimal(value) -> Decimal | None:
    if value is None:
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def _to_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class PriceOverrides:
    """Static USD prices keyed by CoinGecko id, e.g. ``{"usd-coin": "1"}``."""

    data: dict

    def get_price(self, coin_id: str) -> Decimal | None:
        if not isinstance(self.data, dict):
            return None
        value = self.data.get(coin_id)
        if value is None:
            value = self.data.get(_normalize_coin_id(coin_id))
        if value is None:
            return None
        return Decimal(str(value))


class CoingeckoPriceProvider:
    def __init__(
        self,
        api_base: str,
        timeout_seconds: float,
        *,
        api_key: str = "",
        max_retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self.api_key = api_key
        self.max_retries = max_retries
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"X-CG-Demo-API-Key": self.api_key}

    def _get(self, path: str, params: dict):
        attempts = max(1, self.max_retries)
        delay = 0.5
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.get(
                        f"{self.api_base}{path}",
                        params=params,
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                    return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "coingecko: retry path=%s attempt=%s/%s error=%s",
                    path,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        logger.error("coingecko: request_failed path=%s error=%s", path, last_exc)
        raise PriceLookupError(f"CoinGecko request failed: {last_exc}") from last_exc

    def get_simple_prices(self, coin_ids: list[str], currencies: list[str]) -> dict[str, CoinQuote]:
        ids = _normalize_ids(coin_ids)
        vs = _normalize_ids(currencies) or ["usd"]
        if not ids:
            return {}

        payload = self._get(
            "/simple/price",
            {
                "ids": ",".join(ids),
                "vs_currencies": ",".join(vs),
                "include_24hr_change": "true",
                "include_market_cap": "true",
                "include_last_updated_at": "true",
            },
        )
        if not isinstance(payload, dict):
            raise PriceLookupError("Invalid response format from CoinGecko.")

        quotes: dict[str, CoinQuote] = {}
        for coin_id, data in payload.items():
            if not isinstance(data, dict):
                continue
            prices: dict[str, Decimal] = {}
            changes: dict[str, Decimal] = {}
            caps: dict[str, Decimal] = {}
            for currency in vs:
                price = _to_decimal(data.get(currency))
                if price is not None:
                    prices[currency] = price
                change = _to_decimal(data.get(f"{currency}_24h_change"))
                if change is not None:
                    changes[currency] = change
                cap = _to_decimal(data.get(f"{currency}_market_cap"))
                if cap is not None:
                    caps[currency] = cap
            last_updated = data.get("last_updated_at")
            quotes[coin_id] = CoinQuote(
                coin_id=coin_id,
                prices=prices,
                change_24h=changes,
                market_cap=caps,
                last_updated_at=_to_int(last_updated),
            )

        logger.info(
            "coingecko: fetched_prices requested=%s fetched=%s currencies=%s",
            len(ids),
            len(quotes),
            ",".join(vs),
        )
        return quotes

    def get_markets(self, limit: int = 10) -> list[MarketCoin]:
        payload = self._get(
            "/coins/markets",
            {
                "vs_currency": "usd",
                "order": "market_cap_desc",
                "per_page": limit,
                "page": 1,
                "sparkline": "false",
                "price_change_percentage": "24h",
            },
        )
        if not isinstance(payload, list):
            raise PriceLookupError("Invalid response format from CoinGecko.")

        coins = [
            MarketCoin(
                id=str(row.get("id", "")),
                symbol=str(row.get("symbol", "")),
                name=str(row.get("name", "")),
                price=_to_decimal(row.get("current_price")) or Decimal("0"),
                change_24h=_to_decimal(row.get("price_change_percentage_24h")) or Decimal("0"),
                market_cap=_to_decimal(row.get("market_cap")) or Decimal("0"),
                rank=_to_int(row.get("market_cap_rank")),
                image=row.get("image") or "",
            )
            for row in payload
            if isinstance(row, dict)
        ]
        logger.info("coingecko: fetched_markets count=%s", len(coins))
        return coins


class PriceService:
    """CoinGecko lookups behind two caches.

    ``price_cache`` holds single USD prices used by wallet scans;
    ``market_cache`` holds whole batch and markets responses.
    """

    def __init__(
        self,
        overrides: PriceOverrides,
        coingecko: CoingeckoPriceProvider,
        *,
        price_cache: TtlCache[Decimal],
        market_cache: TtlCache,
    ):
        self.overrides = overrides
        self.coingecko = coingecko
        self.price_cache = price_cache
        self.market_cache = market_cache

    @property
    def api_key_configured(self) -> bool:
        return bool(self.coingecko.api_key)

    def get_usd_price(self, coin_id: str) -> Decimal:
        key = _normalize_coin_id(coin_id)
        override = self.overrides.get_price(key)
        if override is not None:
            return override

        def load() -> Decimal:
            quotes = self.coingecko.get_simple_prices([key], ["usd"])
            quote = quotes.get(key)
            if quote is None or "usd" not in quote.prices:
                raise PriceLookupError(f"Price not found for {key}.")
            return quote.prices["usd"]

        value, _hit = self.price_cache.get_or_load(key, load)
        return value

    def _apply_overrides(self, quotes: dict[str, CoinQuote], ids: list[str]) -> dict[str, CoinQuote]:
        merged = dict(quotes)
        for coin_id in ids:
            override = self.overrides.get_price(coin_id)
            if override is None:
                continue
            current = merged.get(coin_id)
            prices = dict(current.prices) if current else {}
            prices["usd"] = override
            merged[coin_id] = CoinQuote(
                coin_id=coin_id,
                prices=prices,
                change_24h=current.change_24h if current else {},
                market_cap=current.market_cap if current else {},
                last_updated_at=current.last_updated_at if current else None,
            )
        return merged

    def get_prices(self, coin_ids: list[str], currencies: list[str]) -> dict[str, CoinQuote]:
        ids = _normalize_ids(coin_ids)
        vs = _normalize_ids(currencies) or ["usd"]
        if not ids:
            return {}

        quotes, hit = self.market_cache.get_or_load(
            ("prices", tuple(ids), tuple(vs)),
            lambda: self.coingecko.get_simple_prices(ids, vs),
        )
        if not hit:
            for coin_id, quote in quotes.items():
                if "usd" in quote.prices:
                    self.price_cache.set(coin_id, quote.prices["usd"])
        return self._apply_overrides(quotes, ids)

    def get_top_coins(self, limit: int = 10) -> list[MarketCoin]:
        coins, _hit = self.market_cache.get_or_load(
            ("markets", limit),
            lambda: self.coingecko.get_markets(limit),
        )
        return coins

    def clear_cache(self) -> int:
        return self.price_cache.clear() + self.market_cache.clear()

    def cache_stats(self) -> dict[str, CacheStats]:
        return {
            "prices": self.price_cache.stats(),
            "market": self.market_cache.stats(),
        }
