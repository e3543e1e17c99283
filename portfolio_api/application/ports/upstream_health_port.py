from __future__ import annotations

from typing import Protocol


class UpstreamHealthPort(Protocol):
    def evm_latest_block(self, *, chain: str) -> int:
        ...

    def solana_is_healthy(self) -> bool:
        ...
