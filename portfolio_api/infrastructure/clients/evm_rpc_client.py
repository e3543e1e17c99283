from __future__ import annotations

from decimal import Decimal
import logging

from web3 import Web3
from web3.providers.rpc.utils import ExceptionRetryConfiguration

from portfolio_api.domain.entities.chain import KnownToken


logger = logging.getLogger(__name__)


class EvmRpcError(RuntimeError):
    pass


ERC20_BALANCE_OF_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    }
]


def _as_int(value, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EvmRpcError(f"Unexpected {field} value: {value!r}")
    return value


def build_web3(rpc_url: str, *, timeout_seconds: float, max_retries: int) -> Web3:
    return Web3(
        Web3.HTTPProvider(
            rpc_url,
            request_kwargs={"timeout": timeout_seconds},
            exception_retry_configuration=ExceptionRetryConfiguration(retries=max(1, max_retries)),
        )
    )


class EvmRpcClient:
    """Balances and head block of an EVM chain through web3.

    Errors surface as web3, requests or ``EvmRpcError`` exceptions;
    ``ChainBalanceAdapter`` translates them.
    """

    def __init__(self, w3: Web3, *, native_decimals: int = 18):
        self._w3 = w3
        self._native_unit = Decimal(10) ** native_decimals

    def get_native_balance(self, *, address: str) -> Decimal:
        wei = self._w3.eth.get_balance(Web3.to_checksum_address(address))
        return Decimal(_as_int(wei, field="eth_getBalance")) / self._native_unit

    def get_token_balance(self, *, address: str, token: KnownToken) -> Decimal:
        contract = self._w3.eth.contract(
            address=Web3.to_checksum_address(token.address),
            abi=ERC20_BALANCE_OF_ABI,
        )
        raw = contract.functions.balanceOf(Web3.to_checksum_address(address)).call()
        logger.debug(
            "evm_rpc_client: balance_of token=%s owner=%s raw=%s",
            token.symbol,
            address,
            raw,
        )
        return Decimal(_as_int(raw, field="balanceOf")) / (Decimal(10) ** token.decimals)

    def get_block_number(self) -> int:
        return _as_int(self._w3.eth.block_number, field="eth_blockNumber")
