from __future__ import annotations

from portfolio_api.api.schemas.common import CamelModel


class PingResponse(CamelModel):
    success: bool = True
    message: str
    version: str
    timestamp: str


class HealthResponse(CamelModel):
    success: bool = True
    status: str
    uptime_seconds: float
    version: str
    environment: str
    timestamp: str


class EndpointDoc(CamelModel):
    method: str
    path: str
    description: str


class DocsResponse(CamelModel):
    success: bool = True
    title: str
    version: str
    endpoints: list[EndpointDoc]
    timestamp: str


class UpstreamCheckResponse(CamelModel):
    success: bool = True
    coingecko: str
    ethereum_rpc: str
    solana_rpc: str
    timestamp: str
