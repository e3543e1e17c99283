from __future__ import annotations

from pydantic import Field

from portfolio_api.api.schemas.common import CacheStatsResponse, CamelModel


class TokenHoldingResponse(CamelModel):
    symbol: str
    name: str
    balance: str = Field(..., description="Balance fixed to the token's decimals (9 for native).")
    decimals: int
    address: str = Field(..., description="Contract address or mint, 'native' for the chain coin.")
    mint: str
    price: float
    value: float
    source: str
    verified: bool = True
    logo_uri: str | None = Field(None, alias="logoURI")
    coingecko_id: str | None = None


class WalletStatisticsResponse(CamelModel):
    tokens_checked: int
    tokens_found: int
    tokens_returned: int
    processing_time_seconds: float
    average_token_value: float
    largest_holding: TokenHoldingResponse | None
    strategy: str
    native_first: bool


class WalletResponse(CamelModel):
    success: bool = True
    chain: str
    address: str
    tokens: list[TokenHoldingResponse]
    total_value: float
    statistics: WalletStatisticsResponse
    fetched_at: str


class WalletSummaryResponse(CamelModel):
    success: bool = True
    chain: str
    address: str
    native_symbol: str
    native_balance: str
    known_tokens_to_check: int
    estimated_scan_time: str
    strategy: str = "streamlined"
    fetched_at: str


class KnownTokenResponse(CamelModel):
    address: str
    symbol: str
    name: str
    decimals: int
    coingecko_id: str
    logo_uri: str | None = Field(None, alias="logoURI")


class KnownTokenListResponse(CamelModel):
    success: bool = True
    message: str
    chain: str
    total_tokens: int
    tokens: list[KnownTokenResponse]
    strategy: str = "CoinGecko-listed tokens only"
    timestamp: str


class PriceProbeResponse(CamelModel):
    success: bool = True
    chain: str
    status: str
    message: str
    test_price: float | None = None
    error: str | None = None
    timestamp: str


class ChainPerformanceResponse(CamelModel):
    expected_speed: str
    tokens_checked: int
    price_source: str = "CoinGecko"


class ChainStatusResponse(CamelModel):
    success: bool = True
    chain: str
    name: str
    message: str
    strategy: str
    performance: ChainPerformanceResponse
    coingecko_status: str
    price_cache: CacheStatsResponse
    wallet_cache: CacheStatsResponse
    tokens_supported: int
    timestamp: str


class ChainStatusErrorResponse(CamelModel):
    chain: str
    name: str
    status: str = "error"
    error: str


class AllChainsStatusResponse(CamelModel):
    success: bool = True
    message: str = "Multi-chain wallet system status"
    total_chains: int
    chains: dict[str, ChainStatusResponse | ChainStatusErrorResponse]
    timestamp: str


class AddWalletRequest(CamelModel):
    address: str | None = None
    chain: str | None = None
    name: str | None = None


class AddedWalletResponse(CamelModel):
    address: str
    chain: str
    name: str
    tokens: list[TokenHoldingResponse]
    total_value: float


class AddWalletResponse(CamelModel):
    success: bool = True
    wallet: AddedWalletResponse


class WalletCacheClearResponse(CamelModel):
    success: bool = True
    message: str = "All caches cleared"
    wallet_entries_cleared: int
    price_entries_cleared: int
    timestamp: str


class WalletCacheStatsResponse(CamelModel):
    success: bool = True
    message: str = "Cache statistics for all chains"
    wallets: CacheStatsResponse
    prices: dict[str, CacheStatsResponse]
    timestamp: str
