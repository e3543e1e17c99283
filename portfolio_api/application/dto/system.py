from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UpstreamCheckOutput:
    coingecko: str
    ethereum_rpc: str
    solana_rpc: str
    timestamp: datetime
