from __future__ import annotations

from typing import Mapping

from portfolio_api.application.dto.wallet import ScanWalletInput
from portfolio_api.application.ports.chain_balance_port import ChainBalancePort
from portfolio_api.application.use_cases.scan_wallet import resolve_wallet_target
from portfolio_api.domain.entities.wallet import WalletSummary
from portfolio_api.domain.exceptions import UnsupportedChainError
from portfolio_api.shared.clock import utc_now


class GetWalletSummaryUseCase:
    """Native balance only; a quick check before committing to a full scan."""

    def __init__(self, *, balance_ports: Mapping[str, ChainBalancePort]):
        self._balance_ports = balance_ports

    def execute(self, command: ScanWalletInput) -> WalletSummary:
        chain, address = resolve_wallet_target(command.chain, command.address)
        balance_port = self._balance_ports.get(chain.key)
        if balance_port is None:
            raise UnsupportedChainError(f"No RPC client configured for {chain.name}.")

        native_balance = balance_port.get_native_balance(address=address)
        return WalletSummary(
            chain=chain.key,
            address=address,
            native_symbol=chain.native_symbol,
            native_balance=native_balance,
            known_tokens_to_check=len(chain.known_tokens),
            estimated_scan_time=chain.estimated_scan_time,
            fetched_at=utc_now(),
        )
