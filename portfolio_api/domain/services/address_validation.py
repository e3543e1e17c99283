from __future__ import annotations

import re

from portfolio_api.domain.entities.chain import ChainConfig


EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")
SOLANA_ADDRESS_MIN = 32
SOLANA_ADDRESS_MAX = 44


def is_valid_evm_address(address: str | None) -> bool:
    return bool(address) and EVM_ADDRESS_RE.match(address) is not None


def is_valid_solana_address(address: str | None) -> bool:
    if not address:
        return False
    if not SOLANA_ADDRESS_MIN <= len(address) <= SOLANA_ADDRESS_MAX:
        return False
    return BASE58_RE.match(address) is not None


def is_valid_address(chain: ChainConfig, address: str | None) -> bool:
    if chain.is_evm:
        return is_valid_evm_address(address)
    return is_valid_solana_address(address)
