from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_version: str
    app_env: str
    port: int
    log_level: str
    cors_origins: tuple[str, ...]
    price_overrides: dict
    coingecko_api_base: str
    coingecko_api_key: str
    coingecko_timeout_seconds: float
    coingecko_max_retries: int
    price_cache_ttl_seconds: float
    market_cache_ttl_seconds: float
    rates_cache_ttl_seconds: float
    wallet_cache_ttl_seconds: float
    rpc_urls: dict
    rpc_timeout_seconds: float
    rpc_max_retries: int


def get_settings() -> Settings:
    rpc_urls = {
        "ethereum": _env("ETHEREUM_RPC_URL", "https://cloudflare-eth.com"),
        "polygon": _env("POLYGON_RPC_URL", "https://polygon-rpc.com"),
        "bsc": _env("BSC_RPC_URL", "https://bsc-dataseed.binance.org"),
        "solana": _env("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com"),
    }
    return Settings(
        app_version=_env("APP_VERSION", "1.0.0"),
        app_env=_env("APP_ENV", "development"),
        port=int(_env("PORT", "3000")),
        log_level=_env("LOG_LEVEL", "INFO"),
        cors_origins=_csv("CORS_ORIGINS", "*"),
        price_overrides=_json("PRICE_OVERRIDES"),
        coingecko_api_base=_env("COINGECKO_API_BASE", "https://api.coingecko.com/api/v3"),
        coingecko_api_key=_env("COINGECKO_API_KEY", ""),
        coingecko_timeout_seconds=float(_env("COINGECKO_TIMEOUT_SECONDS", "10")),
        coingecko_max_retries=int(_env("COINGECKO_MAX_RETRIES", "1")),
        price_cache_ttl_seconds=float(_env("PRICE_CACHE_TTL_SECONDS", "300")),
        market_cache_ttl_seconds=float(_env("MARKET_CACHE_TTL_SECONDS", "120")),
        rates_cache_ttl_seconds=float(_env("RATES_CACHE_TTL_SECONDS", "300")),
        wallet_cache_ttl_seconds=float(_env("WALLET_CACHE_TTL_SECONDS", "30")),
        rpc_urls=rpc_urls,
        rpc_timeout_seconds=float(_env("RPC_TIMEOUT_SECONDS", "10")),
        rpc_max_retries=int(_env("RPC_MAX_RETRIES", "1")),
    )
