from __future__ import annotations

from dataclasses import dataclass


EVM = "evm"
SOLANA = "solana"


@dataclass(frozen=True)
class KnownToken:
    address: str
    symbol: str
    name: str
    decimals: int
    coingecko_id: str
    logo_uri: str | None = None


@dataclass(frozen=True)
class ChainConfig:
    key: str
    name: str
    kind: str
    native_symbol: str
    native_name: str
    native_decimals: int
    native_coingecko_id: str
    known_tokens: tuple[KnownToken, ...]
    scan_delay_seconds: float = 0.0
    evm_chain_id: str | None = None
    estimated_scan_time: str = "3-6 seconds"

    @property
    def is_evm(self) -> bool:
        return self.kind == EVM
