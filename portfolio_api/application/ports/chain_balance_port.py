from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from portfolio_api.domain.entities.chain import KnownToken


class ChainBalancePort(Protocol):
    def get_native_balance(self, *, address: str) -> Decimal:
        ...

    def get_token_balance(self, *, address: str, token: KnownToken) -> Decimal:
        ...
