from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from portfolio_api.domain.entities.chain import ChainConfig
from portfolio_api.domain.entities.wallet import WalletSnapshot
from portfolio_api.shared.ttl_cache import CacheStats


@dataclass(frozen=True)
class ScanWalletInput:
    chain: str
    address: str


@dataclass(frozen=True)
class AddWalletInput:
    chain: str | None
    address: str | None
    name: str | None = None


@dataclass(frozen=True)
class AddWalletOutput:
    chain: str
    address: str
    name: str
    snapshot: WalletSnapshot


@dataclass(frozen=True)
class PriceProbeOutput:
    chain: str
    status: str
    message: str
    timestamp: datetime
    test_price: Decimal | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class ChainStatusOutput:
    chain: ChainConfig
    probe: PriceProbeOutput
    price_cache: CacheStats
    wallet_cache: CacheStats
    timestamp: datetime

    @property
    def tokens_supported(self) -> int:
        return len(self.chain.known_tokens)


@dataclass(frozen=True)
class ChainStatusFailure:
    chain: ChainConfig
    error: str


@dataclass(frozen=True)
class WalletCacheClearOutput:
    wallet_entries_cleared: int
    price_entries_cleared: int
    timestamp: datetime


@dataclass(frozen=True)
class WalletCacheStatsOutput:
    wallets: CacheStats
    prices: dict[str, CacheStats]
    timestamp: datetime
