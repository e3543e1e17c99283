from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable

import httpx

from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)

WALLET = "wallet"
PRICES = "prices"
RATES = "rates"

DEFAULT_CACHE_TTLS = {
    WALLET: 30.0,
    PRICES: 120.0,
    RATES: 300.0,
}


class ApiClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class ApiClientSettings:
    base_url: str = "http://localhost:3000"
    timeout_seconds: float = 30.0
    retries: int = 3
    retry_delay_seconds: float = 1.0


def format_error(exc: Exception) -> str:
    """Short, user-facing text for a failed request."""
    if isinstance(exc, httpx.TimeoutException):
        return "Request timed out"
    if isinstance(exc, httpx.TransportError):
        return "Network error"
    status_code = getattr(exc, "status_code", None)
    if status_code == 429:
        return "Rate limit exceeded"
    if status_code == 500:
        return "Server error"
    return str(exc) or "Unknown error"


class PortfolioApiClient:
    """Client for the portfolio tracker HTTP API.

    Every request is retried ``retries`` times with a linear backoff of
    ``retry_delay_seconds * attempt``. Read endpoints are cached per response
    type (wallet 30s, prices 2min, rates 5min).
    """

    def __init__(
        self,
        settings: ApiClientSettings | None = None,
        *,
        cache_ttls: dict[str, float] | None = None,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._settings = settings or ApiClientSettings()
        self._transport = transport
        ttls = {**DEFAULT_CACHE_TTLS, **(cache_ttls or {})}
        self._caches: dict[str, TtlCache[Any]] = {
            kind: TtlCache(ttl, clock=clock) for kind, ttl in ttls.items()
        }

    def request(self, method: str, path: str, *, params: dict | None = None, json: Any = None) -> Any:
        url = path if path.startswith("http") else f"{self._settings.base_url.rstrip('/')}{path}"
        attempts = max(1, self._settings.retries)
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                with httpx.Client(
                    timeout=self._settings.timeout_seconds,
                    transport=self._transport,
                ) as client:
                    response = client.request(method, url, params=params, json=json)
                if response.is_error:
                    raise ApiClientError(
                        f"HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                try:
                    return response.json()
                except ValueError as exc:
                    raise ApiClientError(
                        "Invalid JSON response",
                        status_code=response.status_code,
                    ) from exc
            except (httpx.HTTPError, ApiClientError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "api_client: retry method=%s path=%s attempt=%s/%s error=%s",
                    method,
                    path,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(self._settings.retry_delay_seconds * attempt)

        logger.error("api_client: request_failed method=%s path=%s error=%s", method, path, last_exc)
        if last_exc is None:
            raise ApiClientError("Request failed.")
        raise last_exc

    def _cached(self, kind: str, key: str, loader: Callable[[], Any]) -> Any:
        cache = self._caches.get(kind) or self._caches[PRICES]
        value, _hit = cache.get_or_load(key, loader)
        return value

    def get_wallet_data(self, chain: str, address: str) -> dict:
        return self._cached(
            WALLET,
            f"wallet_{chain}_{address}",
            lambda: self.request("GET", f"/api/wallets/{chain}/{address}"),
        )

    def get_wallet_summary(self, chain: str, address: str) -> dict:
        return self.request("GET", f"/api/wallets/{chain}/{address}/summary")

    def list_known_tokens(self, chain: str) -> dict:
        return self.request("GET", f"/api/wallets/{chain}/tokens/list")

    def add_wallet(self, chain: str, address: str, name: str | None = None) -> dict:
        return self.request(
            "POST",
            "/api/wallets/add",
            json={"chain": chain, "address": address, "name": name},
        )

    def get_chain_status(self, chain: str | None = None) -> dict:
        if chain is None:
            return self.request("GET", "/api/wallets/status/all")
        return self.request("GET", f"/api/wallets/{chain}/status")

    def get_prices(self, symbols: list[str] | str) -> dict:
        param = ",".join(symbols) if isinstance(symbols, (list, tuple)) else symbols
        return self._cached(
            PRICES,
            f"symbols_{param}",
            lambda: self.request("GET", f"/api/prices/{param}"),
        )

    def get_realtime_prices(
        self,
        coins: str = "bitcoin,ethereum,solana",
        currencies: str = "usd",
    ) -> dict:
        return self._cached(
            PRICES,
            f"prices_{coins}_{currencies}",
            lambda: self.request(
                "GET",
                "/api/prices/realtime",
                params={"coins": coins, "currencies": currencies},
            ),
        )

    def get_currency_rates(self) -> dict:
        return self._cached(RATES, "rates", lambda: self.request("GET", "/api/prices/rates"))

    def convert(self, value: float | str, source: str, target: str) -> dict:
        return self.request(
            "GET",
            "/api/prices/convert",
            params={"value": str(value), "from": source, "to": target},
        )

    def calculate_portfolio(self, wallets: list[dict]) -> dict:
        return self.request("POST", "/api/prices/portfolio/calculate", json={"wallets": wallets})

    def get_goals_progress(self, wallets: list[dict], goals: dict[str, float]) -> dict:
        return self.request(
            "POST",
            "/api/portfolio/goals/progress",
            json={"wallets": wallets, "goals": goals},
        )

    def get_top_coins(self) -> dict:
        return self._cached(PRICES, "top10", lambda: self.request("GET", "/api/prices/top10"))

    def get_ticker_data(self) -> dict:
        return self._cached(PRICES, "ticker", lambda: self.request("GET", "/api/prices/ticker/data"))

    def check_connectivity(self) -> dict:
        return self.request("GET", "/api/prices/test/connectivity")

    def health(self) -> dict:
        return self.request("GET", "/api/health")

    def clear_server_caches(self) -> dict:
        return {
            "wallets": self.request("DELETE", "/api/wallets/cache/clear"),
            "prices": self.request("DELETE", "/api/prices/cache"),
        }

    def clear_cache(self, prefix: str | None = None) -> int:
        """Drops cached responses; with ``prefix`` only keys starting with it."""
        if prefix is None:
            return sum(cache.clear() for cache in self._caches.values())
        return sum(
            cache.clear(lambda key: str(key).startswith(prefix))
            for cache in self._caches.values()
        )

    def prune_cache(self) -> int:
        return sum(cache.prune() for cache in self._caches.values())

    def cache_stats(self) -> dict[str, int]:
        stats = [cache.stats() for cache in self._caches.values()]
        return {
            "total": sum(row.size for row in stats),
            "fresh": sum(row.fresh for row in stats),
            "stale": sum(row.stale for row in stats),
        }

    format_error = staticmethod(format_error)
