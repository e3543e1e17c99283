from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from portfolio_api.api.deps import (
    get_add_wallet_use_case,
    get_chain_status_use_case,
    get_clear_wallet_cache_use_case,
    get_list_known_tokens_use_case,
    get_probe_chain_pricing_use_case,
    get_scan_wallet_use_case,
    get_wallet_cache_stats_use_case,
    get_wallet_summary_use_case,
)
from portfolio_api.api.schemas.wallets import (
    AddedWalletResponse,
    AddWalletRequest,
    AddWalletResponse,
    AllChainsStatusResponse,
    ChainPerformanceResponse,
    ChainStatusErrorResponse,
    ChainStatusResponse,
    KnownTokenListResponse,
    KnownTokenResponse,
    PriceProbeResponse,
    TokenHoldingResponse,
    WalletCacheClearResponse,
    WalletCacheStatsResponse,
    WalletResponse,
    WalletStatisticsResponse,
    WalletSummaryResponse,
)
from portfolio_api.api.serializers import cache_stats_response, iso, to_float, to_float_or_none
from portfolio_api.application.dto.wallet import (
    AddWalletInput,
    ChainStatusFailure,
    ChainStatusOutput,
    ScanWalletInput,
)
from portfolio_api.application.use_cases.add_wallet import AddWalletUseCase
from portfolio_api.application.use_cases.get_chain_status import GetChainStatusUseCase
from portfolio_api.application.use_cases.get_wallet_summary import GetWalletSummaryUseCase
from portfolio_api.application.use_cases.list_known_tokens import ListKnownTokensUseCase
from portfolio_api.application.use_cases.manage_wallet_cache import (
    ClearWalletCacheUseCase,
    GetWalletCacheStatsUseCase,
)
from portfolio_api.application.use_cases.probe_chain_pricing import ProbeChainPricingUseCase
from portfolio_api.application.use_cases.scan_wallet import ScanWalletUseCase
from portfolio_api.domain.entities.wallet import TokenHolding
from portfolio_api.domain.exceptions import (
    BalanceLookupError,
    InvalidAddressError,
    UnsupportedChainError,
    WalletInputError,
)
from portfolio_api.shared.clock import utc_now

router = APIRouter()

NATIVE_BALANCE_DECIMALS = 9


def _holding_response(holding: TokenHolding) -> TokenHoldingResponse:
    decimals = NATIVE_BALANCE_DECIMALS if holding.is_native else holding.decimals
    return TokenHoldingResponse(
        symbol=holding.symbol,
        name=holding.name,
        balance=f"{holding.balance:.{decimals}f}",
        decimals=holding.decimals,
        address=holding.address,
        mint=holding.address,
        price=to_float(holding.price),
        value=to_float(holding.value),
        source=holding.source,
        logo_uri=holding.logo_uri,
        coingecko_id=holding.coingecko_id,
    )


def _status_response(result: ChainStatusOutput) -> ChainStatusResponse:
    chain = result.chain
    return ChainStatusResponse(
        chain=chain.key,
        name=chain.name,
        message=f"{chain.name} system status",
        strategy=f"Native {chain.native_symbol} + CoinGecko-listed tokens only",
        performance=ChainPerformanceResponse(
            expected_speed=chain.estimated_scan_time,
            tokens_checked=result.tokens_supported,
        ),
        coingecko_status=result.probe.status,
        price_cache=cache_stats_response(result.price_cache),
        wallet_cache=cache_stats_response(result.wallet_cache),
        tokens_supported=result.tokens_supported,
        timestamp=iso(result.timestamp),
    )


@router.get("/cache/stats", response_model=WalletCacheStatsResponse)
def get_wallet_cache_stats(
    use_case: GetWalletCacheStatsUseCase = Depends(get_wallet_cache_stats_use_case),
):
    result = use_case.execute()
    return WalletCacheStatsResponse(
        wallets=cache_stats_response(result.wallets),
        prices={key: cache_stats_response(stats) for key, stats in result.prices.items()},
        timestamp=iso(result.timestamp),
    )


@router.delete("/cache/clear", response_model=WalletCacheClearResponse)
def clear_wallet_cache(
    use_case: ClearWalletCacheUseCase = Depends(get_clear_wallet_cache_use_case),
):
    result = use_case.execute()
    return WalletCacheClearResponse(
        wallet_entries_cleared=result.wallet_entries_cleared,
        price_entries_cleared=result.price_entries_cleared,
        timestamp=iso(result.timestamp),
    )


@router.get("/status/all", response_model=AllChainsStatusResponse)
def get_all_chains_status(
    use_case: GetChainStatusUseCase = Depends(get_chain_status_use_case),
):
    rows = use_case.execute_all()
    chains: dict[str, ChainStatusResponse | ChainStatusErrorResponse] = {}
    for row in rows:
        if isinstance(row, ChainStatusFailure):
            chains[row.chain.key] = ChainStatusErrorResponse(
                chain=row.chain.key,
                name=row.chain.name,
                error=row.error,
            )
        else:
            chains[row.chain.key] = _status_response(row)
    return AllChainsStatusResponse(
        total_chains=len(rows),
        chains=chains,
        timestamp=iso(utc_now()),
    )


@router.post("/add", response_model=AddWalletResponse)
def add_wallet(
    payload: AddWalletRequest,
    use_case: AddWalletUseCase = Depends(get_add_wallet_use_case),
):
    try:
        result = use_case.execute(
            AddWalletInput(chain=payload.chain, address=payload.address, name=payload.name)
        )
    except (WalletInputError, InvalidAddressError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return AddWalletResponse(
        wallet=AddedWalletResponse(
            address=result.address,
            chain=result.chain,
            name=result.name,
            tokens=[_holding_response(row) for row in result.snapshot.tokens],
            total_value=to_float(result.snapshot.total_value),
        )
    )


@router.get("/{chain}/tokens/list", response_model=KnownTokenListResponse)
def list_known_tokens(
    chain: str,
    use_case: ListKnownTokensUseCase = Depends(get_list_known_tokens_use_case),
):
    try:
        config = use_case.execute(chain)
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return KnownTokenListResponse(
        message=f"Known {config.name} tokens",
        chain=config.key,
        total_tokens=len(config.known_tokens),
        tokens=[
            KnownTokenResponse(
                address=token.address,
                symbol=token.symbol,
                name=token.name,
                decimals=token.decimals,
                coingecko_id=token.coingecko_id,
                logo_uri=token.logo_uri,
            )
            for token in config.known_tokens
        ],
        timestamp=iso(utc_now()),
    )


@router.get("/{chain}/test/coingecko", response_model=PriceProbeResponse)
def probe_chain_pricing(
    chain: str,
    use_case: ProbeChainPricingUseCase = Depends(get_probe_chain_pricing_use_case),
):
    try:
        result = use_case.execute(chain)
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PriceProbeResponse(
        chain=result.chain,
        status=result.status,
        message=result.message,
        test_price=to_float_or_none(result.test_price),
        error=result.error,
        timestamp=iso(result.timestamp),
    )


@router.get("/{chain}/status", response_model=ChainStatusResponse)
def get_chain_status(
    chain: str,
    use_case: GetChainStatusUseCase = Depends(get_chain_status_use_case),
):
    try:
        result = use_case.execute(chain)
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _status_response(result)


@router.get("/{chain}/{address}/summary", response_model=WalletSummaryResponse)
def get_wallet_summary(
    chain: str,
    address: str,
    use_case: GetWalletSummaryUseCase = Depends(get_wallet_summary_use_case),
):
    try:
        result = use_case.execute(ScanWalletInput(chain=chain, address=address))
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BalanceLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return WalletSummaryResponse(
        chain=result.chain,
        address=result.address,
        native_symbol=result.native_symbol,
        native_balance=f"{result.native_balance:.6f}",
        known_tokens_to_check=result.known_tokens_to_check,
        estimated_scan_time=result.estimated_scan_time,
        fetched_at=iso(result.fetched_at),
    )


@router.get("/{chain}/{address}", response_model=WalletResponse)
def scan_wallet(
    chain: str,
    address: str,
    use_case: ScanWalletUseCase = Depends(get_scan_wallet_use_case),
):
    try:
        result = use_case.execute(ScanWalletInput(chain=chain, address=address))
    except UnsupportedChainError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    stats = result.statistics
    return WalletResponse(
        chain=result.chain,
        address=result.address,
        tokens=[_holding_response(row) for row in result.tokens],
        total_value=to_float(result.total_value),
        statistics=WalletStatisticsResponse(
            tokens_checked=stats.tokens_checked,
            tokens_found=stats.tokens_found,
            tokens_returned=stats.tokens_returned,
            processing_time_seconds=stats.processing_time_seconds,
            average_token_value=to_float(stats.average_token_value),
            largest_holding=_holding_response(stats.largest_holding) if stats.largest_holding else None,
            strategy=stats.strategy,
            native_first=stats.native_first,
        ),
        fetched_at=iso(result.fetched_at),
    )
