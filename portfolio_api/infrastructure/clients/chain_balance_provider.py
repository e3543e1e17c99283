from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from requests.exceptions import RequestException
from web3.exceptions import Web3Exception

from portfolio_api.application.ports.chain_balance_port import ChainBalancePort
from portfolio_api.application.ports.upstream_health_port import UpstreamHealthPort
from portfolio_api.domain.entities.chain import ChainConfig, KnownToken
from portfolio_api.domain.exceptions import BalanceLookupError
from portfolio_api.infrastructure.clients.evm_rpc_client import (
    EvmRpcClient,
    EvmRpcError,
    build_web3,
)
from portfolio_api.infrastructure.clients.json_rpc import (
    JsonRpcClient,
    JsonRpcClientSettings,
    JsonRpcError,
)
from portfolio_api.infrastructure.clients.solana_rpc_client import SolanaRpcClient


# Checksum and ABI decoding failures in web3 are ValueError subclasses.
RPC_ERRORS = (JsonRpcError, EvmRpcError, Web3Exception, RequestException, ValueError)


class ChainBalanceAdapter(ChainBalancePort):
    def __init__(self, client: EvmRpcClient | SolanaRpcClient):
        self._client = client

    def get_native_balance(self, *, address: str) -> Decimal:
        try:
            return self._client.get_native_balance(address=address)
        except RPC_ERRORS as exc:
            raise BalanceLookupError(str(exc)) from exc

    def get_token_balance(self, *, address: str, token: KnownToken) -> Decimal:
        try:
            return self._client.get_token_balance(address=address, token=token)
        except RPC_ERRORS as exc:
            raise BalanceLookupError(str(exc)) from exc


def build_rpc_client(
    chain: ChainConfig,
    *,
    rpc_url: str,
    timeout_seconds: float,
    max_retries: int,
) -> EvmRpcClient | SolanaRpcClient:
    if chain.is_evm:
        return EvmRpcClient(
            build_web3(rpc_url, timeout_seconds=timeout_seconds, max_retries=max_retries),
            native_decimals=chain.native_decimals,
        )
    rpc = JsonRpcClient(
        JsonRpcClientSettings(
            rpc_url=rpc_url,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
        )
    )
    return SolanaRpcClient(rpc)


class RpcHealthAdapter(UpstreamHealthPort):
    def __init__(self, clients: Mapping[str, EvmRpcClient | SolanaRpcClient]):
        self._clients = clients

    def evm_latest_block(self, *, chain: str) -> int:
        client = self._clients.get(chain)
        if not isinstance(client, EvmRpcClient):
            raise BalanceLookupError(f"No EVM RPC client for {chain}.")
        try:
            return client.get_block_number()
        except RPC_ERRORS as exc:
            raise BalanceLookupError(str(exc)) from exc

    def solana_is_healthy(self) -> bool:
        client = self._clients.get("solana")
        if not isinstance(client, SolanaRpcClient):
            raise BalanceLookupError("No Solana RPC client configured.")
        try:
            return client.is_healthy()
        except RPC_ERRORS as exc:
            raise BalanceLookupError(str(exc)) from exc
