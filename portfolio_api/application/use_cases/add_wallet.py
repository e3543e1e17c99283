from __future__ import annotations

from portfolio_api.application.dto.wallet import AddWalletInput, AddWalletOutput, ScanWalletInput
from portfolio_api.application.use_cases.scan_wallet import ScanWalletUseCase
from portfolio_api.domain.exceptions import UnsupportedChainError, WalletInputError
from portfolio_api.shared.chain_registry import get_chain


class AddWalletUseCase:
    def __init__(self, *, scan_wallet: ScanWalletUseCase):
        self._scan_wallet = scan_wallet

    def execute(self, command: AddWalletInput) -> AddWalletOutput:
        if not command.address or not command.chain:
            raise WalletInputError("Address and chain are required.")
        try:
            chain = get_chain(command.chain)
        except UnsupportedChainError as exc:
            raise WalletInputError(str(exc)) from exc

        snapshot = self._scan_wallet.execute(
            ScanWalletInput(chain=chain.key, address=command.address)
        )
        name = (command.name or "").strip() or f"{chain.name} Wallet"
        return AddWalletOutput(
            chain=chain.key,
            address=snapshot.address,
            name=name,
            snapshot=snapshot,
        )
