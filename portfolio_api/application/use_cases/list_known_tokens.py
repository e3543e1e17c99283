from __future__ import annotations

from portfolio_api.domain.entities.chain import ChainConfig
from portfolio_api.shared.chain_registry import get_chain


class ListKnownTokensUseCase:
    def execute(self, chain: str) -> ChainConfig:
        return get_chain(chain)
