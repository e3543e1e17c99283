from __future__ import annotations

from functools import lru_cache

from portfolio_api.application.ports.chain_balance_port import ChainBalancePort
from portfolio_api.application.use_cases.add_wallet import AddWalletUseCase
from portfolio_api.application.use_cases.calculate_portfolio import CalculatePortfolioUseCase
from portfolio_api.application.use_cases.check_price_connectivity import (
    CheckPriceConnectivityUseCase,
)
from portfolio_api.application.use_cases.check_upstreams import CheckUpstreamsUseCase
from portfolio_api.application.use_cases.clear_price_cache import ClearPriceCacheUseCase
from portfolio_api.application.use_cases.convert_currency import ConvertCurrencyUseCase
from portfolio_api.application.use_cases.get_chain_status import GetChainStatusUseCase
from portfolio_api.application.use_cases.get_currency_rates import GetCurrencyRatesUseCase
from portfolio_api.application.use_cases.get_goals_progress import GetGoalsProgressUseCase
from portfolio_api.application.use_cases.get_prices import GetPricesUseCase
from portfolio_api.application.use_cases.get_realtime_prices import GetRealtimePricesUseCase
from portfolio_api.application.use_cases.get_top_coins import GetTickerUseCase, GetTopCoinsUseCase
from portfolio_api.application.use_cases.get_wallet_summary import GetWalletSummaryUseCase
from portfolio_api.application.use_cases.list_known_tokens import ListKnownTokensUseCase
from portfolio_api.application.use_cases.manage_wallet_cache import (
    ClearWalletCacheUseCase,
    GetWalletCacheStatsUseCase,
)
from portfolio_api.application.use_cases.probe_chain_pricing import ProbeChainPricingUseCase
from portfolio_api.application.use_cases.scan_wallet import ScanWalletUseCase
from portfolio_api.domain.entities.wallet import WalletSnapshot
from portfolio_api.domain.services.cross_rates import CrossRates
from portfolio_api.infrastructure.clients.chain_balance_provider import (
    ChainBalanceAdapter,
    RpcHealthAdapter,
    build_rpc_client,
)
from portfolio_api.infrastructure.clients.evm_rpc_client import EvmRpcClient
from portfolio_api.infrastructure.clients.market_data_provider import PriceServiceAdapter
from portfolio_api.infrastructure.clients.pricing import (
    CoingeckoPriceProvider,
    PriceOverrides,
    PriceService,
)
from portfolio_api.infrastructure.clients.solana_rpc_client import SolanaRpcClient
from portfolio_api.shared.chain_registry import list_chains
from portfolio_api.shared.config import get_settings
from portfolio_api.shared.ttl_cache import TtlCache


@lru_cache(maxsize=1)
def _get_price_service() -> PriceService:
    settings = get_settings()
    overrides = PriceOverrides(settings.price_overrides)
    coingecko = CoingeckoPriceProvider(
        api_base=settings.coingecko_api_base,
        timeout_seconds=settings.coingecko_timeout_seconds,
        api_key=settings.coingecko_api_key,
        max_retries=settings.coingecko_max_retries,
    )
    return PriceService(
        overrides=overrides,
        coingecko=coingecko,
        price_cache=TtlCache(settings.price_cache_ttl_seconds),
        market_cache=TtlCache(settings.market_cache_ttl_seconds),
    )


@lru_cache(maxsize=1)
def _get_rates_cache() -> TtlCache[CrossRates]:
    return TtlCache(get_settings().rates_cache_ttl_seconds)


@lru_cache(maxsize=1)
def _get_wallet_cache() -> TtlCache[WalletSnapshot]:
    return TtlCache(get_settings().wallet_cache_ttl_seconds)


@lru_cache(maxsize=1)
def _get_rpc_clients() -> dict[str, EvmRpcClient | SolanaRpcClient]:
    settings = get_settings()
    return {
        chain.key: build_rpc_client(
            chain,
            rpc_url=settings.rpc_urls.get(chain.key) or "",
            timeout_seconds=settings.rpc_timeout_seconds,
            max_retries=settings.rpc_max_retries,
        )
        for chain in list_chains()
    }


def _get_market_data_port() -> PriceServiceAdapter:
    return PriceServiceAdapter(_get_price_service())


def _get_balance_ports() -> dict[str, ChainBalancePort]:
    return {key: ChainBalanceAdapter(client) for key, client in _get_rpc_clients().items()}


def get_scan_wallet_use_case() -> ScanWalletUseCase:
    return ScanWalletUseCase(
        balance_ports=_get_balance_ports(),
        market_data_port=_get_market_data_port(),
        wallet_cache=_get_wallet_cache(),
    )


def get_wallet_summary_use_case() -> GetWalletSummaryUseCase:
    return GetWalletSummaryUseCase(balance_ports=_get_balance_ports())


def get_list_known_tokens_use_case() -> ListKnownTokensUseCase:
    return ListKnownTokensUseCase()


def get_add_wallet_use_case() -> AddWalletUseCase:
    return AddWalletUseCase(scan_wallet=get_scan_wallet_use_case())


def get_probe_chain_pricing_use_case() -> ProbeChainPricingUseCase:
    return ProbeChainPricingUseCase(market_data_port=_get_market_data_port())


def get_chain_status_use_case() -> GetChainStatusUseCase:
    return GetChainStatusUseCase(
        probe=get_probe_chain_pricing_use_case(),
        market_data_port=_get_market_data_port(),
        wallet_cache=_get_wallet_cache(),
    )


def get_clear_wallet_cache_use_case() -> ClearWalletCacheUseCase:
    return ClearWalletCacheUseCase(
        wallet_cache=_get_wallet_cache(),
        market_data_port=_get_market_data_port(),
    )


def get_wallet_cache_stats_use_case() -> GetWalletCacheStatsUseCase:
    return GetWalletCacheStatsUseCase(
        wallet_cache=_get_wallet_cache(),
        market_data_port=_get_market_data_port(),
    )


def get_prices_use_case() -> GetPricesUseCase:
    return GetPricesUseCase(market_data_port=_get_market_data_port())


def get_realtime_prices_use_case() -> GetRealtimePricesUseCase:
    return GetRealtimePricesUseCase(
        market_data_port=_get_market_data_port(),
        rates_cache=_get_rates_cache(),
    )


def get_currency_rates_use_case() -> GetCurrencyRatesUseCase:
    return GetCurrencyRatesUseCase(
        market_data_port=_get_market_data_port(),
        rates_cache=_get_rates_cache(),
    )


def get_convert_currency_use_case() -> ConvertCurrencyUseCase:
    return ConvertCurrencyUseCase(currency_rates=get_currency_rates_use_case())


def get_calculate_portfolio_use_case() -> CalculatePortfolioUseCase:
    return CalculatePortfolioUseCase(market_data_port=_get_market_data_port())


def get_top_coins_use_case() -> GetTopCoinsUseCase:
    return GetTopCoinsUseCase(market_data_port=_get_market_data_port())


def get_ticker_use_case() -> GetTickerUseCase:
    return GetTickerUseCase(market_data_port=_get_market_data_port())


def get_price_connectivity_use_case() -> CheckPriceConnectivityUseCase:
    return CheckPriceConnectivityUseCase(market_data_port=_get_market_data_port())


def get_clear_price_cache_use_case() -> ClearPriceCacheUseCase:
    return ClearPriceCacheUseCase(
        market_data_port=_get_market_data_port(),
        rates_cache=_get_rates_cache(),
    )


def get_goals_progress_use_case() -> GetGoalsProgressUseCase:
    return GetGoalsProgressUseCase()


def get_check_upstreams_use_case() -> CheckUpstreamsUseCase:
    return CheckUpstreamsUseCase(
        market_data_port=_get_market_data_port(),
        health_port=RpcHealthAdapter(_get_rpc_clients()),
    )
