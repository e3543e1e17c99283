from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


NATIVE_ADDRESS = "native"
SOURCE_NATIVE = "native"
SOURCE_LISTED = "coingecko-listed"


@dataclass(frozen=True)
class TokenHolding:
    symbol: str
    name: str
    balance: Decimal
    decimals: int
    address: str
    price: Decimal
    value: Decimal
    source: str
    logo_uri: str | None = None
    coingecko_id: str | None = None

    @property
    def is_native(self) -> bool:
        return self.address == NATIVE_ADDRESS


@dataclass(frozen=True)
class WalletStatistics:
    tokens_checked: int
    tokens_found: int
    tokens_returned: int
    processing_time_seconds: float
    average_token_value: Decimal
    largest_holding: TokenHolding | None
    strategy: str = "known-tokens-only"
    native_first: bool = True


@dataclass(frozen=True)
class WalletSnapshot:
    chain: str
    address: str
    tokens: list[TokenHolding]
    total_value: Decimal
    statistics: WalletStatistics
    fetched_at: datetime


@dataclass(frozen=True)
class WalletSummary:
    chain: str
    address: str
    native_symbol: str
    native_balance: Decimal
    known_tokens_to_check: int
    estimated_scan_time: str
    fetched_at: datetime
