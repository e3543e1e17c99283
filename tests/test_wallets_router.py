from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from portfolio_api.api.deps import (
    get_add_wallet_use_case,
    get_chain_status_use_case,
    get_list_known_tokens_use_case,
    get_scan_wallet_use_case,
    get_wallet_cache_stats_use_case,
    get_wallet_summary_use_case,
)
from portfolio_api.application.dto.wallet import (
    AddWalletOutput,
    ChainStatusFailure,
    ChainStatusOutput,
    PriceProbeOutput,
    WalletCacheStatsOutput,
)
from portfolio_api.application.use_cases.list_known_tokens import ListKnownTokensUseCase
from portfolio_api.domain.entities.wallet import (
    NATIVE_ADDRESS,
    SOURCE_LISTED,
    SOURCE_NATIVE,
    TokenHolding,
    WalletSnapshot,
    WalletStatistics,
    WalletSummary,
)
from portfolio_api.domain.exceptions import (
    BalanceLookupError,
    InvalidAddressError,
    UnsupportedChainError,
    WalletInputError,
)
from portfolio_api.main import app
from portfolio_api.shared.chain_registry import ETHEREUM, POLYGON
from portfolio_api.shared.ttl_cache import CacheStats


ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _snapshot() -> WalletSnapshot:
    native = TokenHolding(
        symbol="ETH",
        name="Ethereum",
        balance=Decimal("1.5"),
        decimals=18,
        address=NATIVE_ADDRESS,
        price=Decimal("2000"),
        value=Decimal("3000"),
        source=SOURCE_NATIVE,
        coingecko_id="ethereum",
    )
    usdc = TokenHolding(
        symbol="USDC",
        name="USD Coin",
        balance=Decimal("250"),
        decimals=6,
        address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        price=Decimal("1"),
        value=Decimal("250"),
        source=SOURCE_LISTED,
        logo_uri="https://example.com/usdc.png",
        coingecko_id="usd-coin",
    )
    return WalletSnapshot(
        chain="ethereum",
        address=ADDRESS,
        tokens=[native, usdc],
        total_value=Decimal("3250"),
        statistics=WalletStatistics(
            tokens_checked=5,
            tokens_found=2,
            tokens_returned=2,
            processing_time_seconds=0.42,
            average_token_value=Decimal("1625"),
            largest_holding=native,
        ),
        fetched_at=NOW,
    )


class FakeScanWalletUseCase:
    def __init__(self, error: Exception | None = None):
        self._error = error

    def execute(self, command):
        if self._error is not None:
            raise self._error
        assert command.chain == "ethereum"
        return _snapshot()


class FakeWalletSummaryUseCase:
    def __init__(self, error: Exception | None = None):
        self._error = error

    def execute(self, command):
        if self._error is not None:
            raise self._error
        return WalletSummary(
            chain=command.chain,
            address=command.address,
            native_symbol="ETH",
            native_balance=Decimal("1.23456789"),
            known_tokens_to_check=4,
            estimated_scan_time="3-6 seconds",
            fetched_at=NOW,
        )


class FakeAddWalletUseCase:
    def execute(self, command):
        if not command.address:
            raise WalletInputError("Address and chain are required")
        return AddWalletOutput(
            chain=command.chain,
            address=command.address,
            name=command.name or "Ethereum Wallet",
            snapshot=_snapshot(),
        )


class FakeChainStatusUseCase:
    def _status(self, chain) -> ChainStatusOutput:
        return ChainStatusOutput(
            chain=chain,
            probe=PriceProbeOutput(
                chain=chain.key,
                status="success",
                message="CoinGecko API working",
                timestamp=NOW,
                test_price=Decimal("2000"),
            ),
            price_cache=CacheStats(size=3, ttl_seconds=120.0, fresh=3, stale=0),
            wallet_cache=CacheStats(size=1, ttl_seconds=30.0, fresh=1, stale=0),
            timestamp=NOW,
        )

    def execute(self, chain_key: str):
        if chain_key != "ethereum":
            raise UnsupportedChainError(f"Unsupported chain: {chain_key}")
        return self._status(ETHEREUM)

    def execute_all(self):
        return [self._status(ETHEREUM), ChainStatusFailure(chain=POLYGON, error="rpc down")]


class FakeCacheStatsUseCase:
    def execute(self):
        return WalletCacheStatsOutput(
            wallets=CacheStats(size=2, ttl_seconds=30.0, fresh=1, stale=1),
            prices={"price": CacheStats(size=4, ttl_seconds=120.0, fresh=4, stale=0)},
            timestamp=NOW,
        )


def _client(dependency, fake) -> TestClient:
    app.dependency_overrides[dependency] = lambda: fake
    return TestClient(app)


def test_scan_wallet_returns_camel_case_payload():
    client = _client(get_scan_wallet_use_case, FakeScanWalletUseCase())

    response = client.get(f"/api/wallets/ethereum/{ADDRESS}")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["totalValue"] == 3250.0
    assert payload["tokens"][0]["balance"] == "1.500000000"
    assert payload["tokens"][0]["address"] == "native"
    assert payload["tokens"][1]["balance"] == "250.000000"
    assert payload["tokens"][1]["logoURI"] == "https://example.com/usdc.png"
    assert payload["tokens"][1]["coingeckoId"] == "usd-coin"
    assert payload["statistics"]["tokensChecked"] == 5
    assert payload["statistics"]["largestHolding"]["symbol"] == "ETH"
    assert payload["fetchedAt"] == "2024-05-01T12:00:00Z"

    app.dependency_overrides.clear()


def test_legacy_wallet_prefix_is_served():
    client = _client(get_scan_wallet_use_case, FakeScanWalletUseCase())

    response = client.get(f"/api/wallet/ethereum/{ADDRESS}")

    assert response.status_code == 200
    assert response.json()["chain"] == "ethereum"

    app.dependency_overrides.clear()


def test_invalid_address_maps_to_400_envelope():
    client = _client(
        get_scan_wallet_use_case,
        FakeScanWalletUseCase(InvalidAddressError("Invalid Ethereum address")),
    )

    response = client.get("/api/wallets/ethereum/not-an-address")

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Invalid Ethereum address"
    assert "timestamp" in payload

    app.dependency_overrides.clear()


def test_unknown_chain_maps_to_404():
    client = _client(
        get_scan_wallet_use_case,
        FakeScanWalletUseCase(UnsupportedChainError("Unsupported chain: fantom")),
    )

    response = client.get(f"/api/wallets/fantom/{ADDRESS}")

    assert response.status_code == 404
    assert response.json()["error"] == "Unsupported chain: fantom"

    app.dependency_overrides.clear()


def test_summary_formats_native_balance_and_maps_rpc_failure():
    client = _client(get_wallet_summary_use_case, FakeWalletSummaryUseCase())

    response = client.get(f"/api/wallets/ethereum/{ADDRESS}/summary")

    assert response.status_code == 200
    payload = response.json()
    assert payload["nativeBalance"] == "1.234568"
    assert payload["knownTokensToCheck"] == 4
    assert payload["strategy"] == "streamlined"

    app.dependency_overrides[get_wallet_summary_use_case] = lambda: FakeWalletSummaryUseCase(
        BalanceLookupError("eth_getBalance: timeout")
    )
    failed = client.get(f"/api/wallets/ethereum/{ADDRESS}/summary")

    assert failed.status_code == 502
    assert failed.json()["success"] is False

    app.dependency_overrides.clear()


def test_known_tokens_list_uses_registry():
    client = _client(get_list_known_tokens_use_case, ListKnownTokensUseCase())

    response = client.get("/api/wallets/ethereum/tokens/list")

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalTokens"] == len(ETHEREUM.known_tokens)
    assert {row["symbol"] for row in payload["tokens"]} == {"WETH", "USDC", "USDT", "DAI"}
    assert all("logoURI" in row for row in payload["tokens"])

    assert client.get("/api/wallets/fantom/tokens/list").status_code == 404

    app.dependency_overrides.clear()


def test_add_wallet_validates_and_returns_wallet():
    client = _client(get_add_wallet_use_case, FakeAddWalletUseCase())

    response = client.post("/api/wallets/add", json={"chain": "ethereum", "address": ADDRESS})

    assert response.status_code == 200
    wallet = response.json()["wallet"]
    assert wallet["name"] == "Ethereum Wallet"
    assert wallet["totalValue"] == 3250.0
    assert len(wallet["tokens"]) == 2

    missing = client.post("/api/wallets/add", json={"chain": "ethereum"})

    assert missing.status_code == 400
    assert missing.json()["error"] == "Address and chain are required"

    app.dependency_overrides.clear()


def test_chain_status_and_all_chains():
    client = _client(get_chain_status_use_case, FakeChainStatusUseCase())

    single = client.get("/api/wallets/ethereum/status")

    assert single.status_code == 200
    payload = single.json()
    assert payload["coingeckoStatus"] == "success"
    assert payload["tokensSupported"] == 4
    assert payload["priceCache"]["size"] == 3

    assert client.get("/api/wallets/fantom/status").status_code == 404

    combined = client.get("/api/wallets/status/all").json()

    assert combined["totalChains"] == 2
    assert combined["chains"]["ethereum"]["success"] is True
    assert combined["chains"]["polygon"]["status"] == "error"
    assert combined["chains"]["polygon"]["error"] == "rpc down"

    app.dependency_overrides.clear()


def test_cache_stats_route_is_not_shadowed_by_wallet_route():
    client = _client(get_wallet_cache_stats_use_case, FakeCacheStatsUseCase())

    response = client.get("/api/wallets/cache/stats")

    assert response.status_code == 200
    payload = response.json()
    assert payload["wallets"]["stale"] == 1
    assert payload["prices"]["price"]["ttlSeconds"] == 120.0

    app.dependency_overrides.clear()
