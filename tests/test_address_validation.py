from __future__ import annotations

import pytest

from portfolio_api.domain.services.address_validation import (
    is_valid_address,
    is_valid_evm_address,
    is_valid_solana_address,
)
from portfolio_api.shared.chain_registry import ETHEREUM, SOLANA_CHAIN


@pytest.mark.parametrize(
    "address",
    [
        "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045",
        "0x0000000000000000000000000000000000000000",
    ],
)
def test_evm_address_accepts_forty_hex_chars(address: str):
    assert is_valid_evm_address(address)


@pytest.mark.parametrize(
    "address",
    [
        "",
        None,
        "d8dA6BF26964aF9D7eEd9e03E53415D37aA96045",
        "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA9604",
        "0xZZdA6BF26964aF9D7eEd9e03E53415D37aA96045",
    ],
)
def test_evm_address_rejects_malformed_values(address):
    assert not is_valid_evm_address(address)


def test_solana_address_requires_base58_and_length():
    assert is_valid_solana_address("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
    assert not is_valid_solana_address("short")
    assert not is_valid_solana_address("0OIl" * 10)


def test_is_valid_address_dispatches_on_chain_kind():
    evm = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
    assert is_valid_address(ETHEREUM, evm)
    assert not is_valid_address(SOLANA_CHAIN, evm)
