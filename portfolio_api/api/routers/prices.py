from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio_api.api.deps import (
    get_calculate_portfolio_use_case,
    get_clear_price_cache_use_case,
    get_convert_currency_use_case,
    get_currency_rates_use_case,
    get_price_connectivity_use_case,
    get_prices_use_case,
    get_realtime_prices_use_case,
    get_ticker_use_case,
    get_top_coins_use_case,
)
from portfolio_api.api.schemas.portfolio import (
    CalculatePortfolioRequest,
    CalculatePortfolioResponse,
    PortfolioResponse,
    ValuedTokenResponse,
    ValuedWalletResponse,
)
from portfolio_api.api.schemas.prices import (
    ClearCacheResponse,
    CoinConnectivityResponse,
    ConnectivityResponse,
    ConvertResponse,
    PricesResponse,
    QuotePayload,
    RatesResponse,
    RatesTable,
    RealtimePricesResponse,
    TickerEntryResponse,
    TickerResponse,
    TopCoinsResponse,
)
from portfolio_api.api.serializers import (
    iso,
    portfolio_wallets_from_request,
    to_float,
    to_float_or_none,
)
from portfolio_api.application.dto.portfolio import CalculatePortfolioInput
from portfolio_api.application.dto.prices import (
    ConvertCurrencyInput,
    GetPricesInput,
    RealtimePricesInput,
)
from portfolio_api.application.use_cases.calculate_portfolio import CalculatePortfolioUseCase
from portfolio_api.application.use_cases.check_price_connectivity import (
    CheckPriceConnectivityUseCase,
)
from portfolio_api.application.use_cases.clear_price_cache import ClearPriceCacheUseCase
from portfolio_api.application.use_cases.convert_currency import ConvertCurrencyUseCase
from portfolio_api.application.use_cases.get_currency_rates import GetCurrencyRatesUseCase
from portfolio_api.application.use_cases.get_prices import GetPricesUseCase
from portfolio_api.application.use_cases.get_realtime_prices import GetRealtimePricesUseCase
from portfolio_api.application.use_cases.get_top_coins import GetTickerUseCase, GetTopCoinsUseCase
from portfolio_api.domain.entities.market import CoinQuote, TickerEntry
from portfolio_api.domain.exceptions import (
    ConversionInputError,
    PriceInputError,
    PriceLookupDomainError,
)
from portfolio_api.domain.services.cross_rates import CrossRates

router = APIRouter()

FALLBACK_NOTE = "Using fallback data due to API error"


def _split(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _quote_payload(quote: CoinQuote) -> QuotePayload:
    payload: QuotePayload = {}
    for currency, price in quote.prices.items():
        payload[currency] = float(price)
    for currency, change in quote.change_24h.items():
        payload[f"{currency}_24h_change"] = float(change)
    for currency, cap in quote.market_cap.items():
        payload[f"{currency}_market_cap"] = float(cap)
    if quote.last_updated_at is not None:
        payload["last_updated_at"] = float(quote.last_updated_at)
    return payload


def _rates_payload(rates: CrossRates) -> RatesTable:
    return {
        source: {target: float(rate) for target, rate in targets.items()}
        for source, targets in rates.items()
    }


def _ticker_payload(entries: list[TickerEntry]) -> list[TickerEntryResponse]:
    return [
        TickerEntryResponse(
            id=entry.id,
            symbol=entry.symbol,
            name=entry.name,
            price=to_float(entry.price),
            change=to_float(entry.change),
            change_text=entry.change_text,
            positive=entry.positive,
            market_cap=to_float(entry.market_cap),
            rank=entry.rank,
            image=entry.image,
        )
        for entry in entries
    ]


@router.get("/realtime", response_model=RealtimePricesResponse)
def get_realtime_prices(
    coins: str = Query("bitcoin,ethereum,solana", description="Comma-separated coin ids or symbols."),
    currencies: str = Query("usd", description="Comma-separated quote currencies."),
    use_case: GetRealtimePricesUseCase = Depends(get_realtime_prices_use_case),
):
    try:
        result = use_case.execute(
            RealtimePricesInput(coins=_split(coins), currencies=_split(currencies))
        )
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return RealtimePricesResponse(
        prices={coin_id: _quote_payload(quote) for coin_id, quote in result.prices.items()},
        currencies=result.currencies,
        cross_rates=_rates_payload(result.cross_rates),
        fetched_at=iso(result.fetched_at),
    )


@router.get("/rates", response_model=RatesResponse)
def get_currency_rates(
    use_case: GetCurrencyRatesUseCase = Depends(get_currency_rates_use_case),
):
    try:
        result = use_case.execute()
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return RatesResponse(
        rates=_rates_payload(result.rates),
        source="cache" if result.from_cache else "CoinGecko API",
        fetched_at=iso(result.fetched_at),
    )


@router.get("/convert", response_model=ConvertResponse)
def convert_currency(
    value: Decimal,
    source: str = Query("usd", alias="from"),
    target: str = Query("usd", alias="to"),
    use_case: ConvertCurrencyUseCase = Depends(get_convert_currency_use_case),
):
    try:
        result = use_case.execute(ConvertCurrencyInput(value=value, source=source, target=target))
    except ConversionInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return ConvertResponse(
        value=to_float(result.value),
        source=result.source,
        target=result.target,
        converted=to_float(result.converted),
        rate=to_float_or_none(result.rate),
        rate_available=result.rate_available,
        formatted=result.formatted,
        fetched_at=iso(result.fetched_at),
    )


@router.post("/portfolio/calculate", response_model=CalculatePortfolioResponse)
def calculate_portfolio(
    payload: CalculatePortfolioRequest,
    use_case: CalculatePortfolioUseCase = Depends(get_calculate_portfolio_use_case),
):
    try:
        result = use_case.execute(
            CalculatePortfolioInput(wallets=portfolio_wallets_from_request(payload.wallets))
        )
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    portfolio = result.portfolio
    return CalculatePortfolioResponse(
        portfolio=PortfolioResponse(
            wallets=[
                ValuedWalletResponse(
                    address=row.wallet.address,
                    chain=row.wallet.chain,
                    name=row.wallet.name,
                    tokens=[
                        ValuedTokenResponse(
                            symbol=token.token.symbol,
                            name=token.token.name,
                            address=token.token.address,
                            decimals=token.token.decimals,
                            coingecko_id=token.token.coingecko_id,
                            balance=to_float(token.balance),
                            price=to_float(token.price),
                            value=to_float(token.value),
                            change_24h=to_float(token.change_24h),
                        )
                        for token in row.tokens
                    ],
                    total_value=to_float(row.total_value),
                    last_updated=iso(row.last_updated),
                )
                for row in portfolio.wallets
            ],
            total_value=to_float(portfolio.total_value),
            wallet_count=portfolio.wallet_count,
            cross_rates=_rates_payload(result.cross_rates),
            last_updated=iso(portfolio.last_updated),
        )
    )


@router.get("/top10", response_model=TopCoinsResponse)
def get_top_coins(
    use_case: GetTopCoinsUseCase = Depends(get_top_coins_use_case),
):
    result = use_case.execute()
    entries = _ticker_payload(result.entries)
    return TopCoinsResponse(
        top10=entries,
        count=len(entries),
        source=result.source,
        error=result.error,
        note=FALLBACK_NOTE if result.is_fallback else None,
        fetched_at=iso(result.fetched_at),
    )


@router.get("/ticker/data", response_model=TickerResponse)
def get_ticker(
    use_case: GetTickerUseCase = Depends(get_ticker_use_case),
):
    result = use_case.execute()
    return TickerResponse(
        ticker=_ticker_payload(result.entries),
        source=result.source,
        error=result.error,
        fetched_at=iso(result.fetched_at),
    )


@router.get("/test/connectivity", response_model=ConnectivityResponse)
def check_connectivity(
    use_case: CheckPriceConnectivityUseCase = Depends(get_price_connectivity_use_case),
):
    try:
        result = use_case.execute()
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=f"Connectivity test failed: {exc}") from exc

    return ConnectivityResponse(
        top10_endpoint=result.top_coins_status,
        api_key="Configured" if result.api_key_configured else "Missing",
        test_results={
            row.coin_id: CoinConnectivityResponse(
                status="working" if row.working else "no data",
                price=to_float_or_none(row.price),
                change_24h=to_float_or_none(row.change_24h),
            )
            for row in result.coins
        },
        cache_size=result.cache_size,
        timestamp=iso(result.timestamp),
    )


@router.delete("/cache", response_model=ClearCacheResponse)
def clear_price_cache(
    use_case: ClearPriceCacheUseCase = Depends(get_clear_price_cache_use_case),
):
    result = use_case.execute()
    return ClearCacheResponse(cleared=result.cleared, timestamp=iso(result.timestamp))


@router.get("/{symbols}", response_model=PricesResponse)
def get_prices(
    symbols: str,
    use_case: GetPricesUseCase = Depends(get_prices_use_case),
):
    try:
        result = use_case.execute(GetPricesInput(symbols=_split(symbols)))
    except PriceInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PriceLookupDomainError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return PricesResponse(
        prices={symbol: _quote_payload(quote) for symbol, quote in result.prices.items()},
        fetched_at=iso(result.fetched_at),
    )
