from __future__ import annotations

import pytest

from portfolio_api.domain.exceptions import UnsupportedChainError
from portfolio_api.shared.chain_registry import BSC, coin_id_for, get_chain, list_chains


def test_get_chain_is_case_insensitive():
    assert get_chain(" Ethereum ").key == "ethereum"


def test_get_chain_rejects_unknown_chain():
    with pytest.raises(UnsupportedChainError):
        get_chain("dogechain")


def test_registry_covers_four_chains():
    assert {chain.key for chain in list_chains()} == {"ethereum", "polygon", "bsc", "solana"}


def test_bsc_stablecoins_use_eighteen_decimals():
    assert {token.symbol: token.decimals for token in BSC.known_tokens}["USDC"] == 18


def test_coin_id_for_maps_symbols_and_falls_back_to_lowercase():
    assert coin_id_for("ETH") == "ethereum"
    assert coin_id_for("Pepe") == "pepe"
