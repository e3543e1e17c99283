from __future__ import annotations

from decimal import Decimal
import logging
import time
from typing import Mapping

from portfolio_api.application.dto.wallet import ScanWalletInput
from portfolio_api.application.ports.chain_balance_port import ChainBalancePort
from portfolio_api.application.ports.market_data_port import MarketDataPort
from portfolio_api.domain.entities.chain import ChainConfig, KnownToken
from portfolio_api.domain.entities.wallet import (
    NATIVE_ADDRESS,
    SOURCE_LISTED,
    SOURCE_NATIVE,
    TokenHolding,
    WalletSnapshot,
    WalletStatistics,
)
from portfolio_api.domain.exceptions import (
    BalanceLookupError,
    InvalidAddressError,
    PriceLookupDomainError,
    UnsupportedChainError,
)
from portfolio_api.domain.services.address_validation import is_valid_address
from portfolio_api.shared.chain_registry import get_chain
from portfolio_api.shared.clock import utc_now
from portfolio_api.shared.ttl_cache import TtlCache


logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def resolve_wallet_target(chain_key: str, address: str) -> tuple[ChainConfig, str]:
    chain = get_chain(chain_key)
    address = (address or "").strip()
    if not is_valid_address(chain, address):
        raise InvalidAddressError(f"Invalid {chain.name} address")
    return chain, address


class ScanWalletUseCase:
    """Native balance plus every known token of a chain, priced in USD.

    Each RPC or price failure degrades that one value to zero; the scan itself
    only fails on bad input.
    """

    def __init__(
        self,
        *,
        balance_ports: Mapping[str, ChainBalancePort],
        market_data_port: MarketDataPort,
        wallet_cache: TtlCache[WalletSnapshot],
    ):
        self._balance_ports = balance_ports
        self._market_data_port = market_data_port
        self._wallet_cache = wallet_cache

    def execute(self, command: ScanWalletInput) -> WalletSnapshot:
        chain, address = resolve_wallet_target(command.chain, command.address)
        balance_port = self._balance_ports.get(chain.key)
        if balance_port is None:
            raise UnsupportedChainError(f"No RPC client configured for {chain.name}.")

        cache_key = (chain.key, address.lower() if chain.is_evm else address)
        snapshot, hit = self._wallet_cache.get_or_load(
            cache_key,
            lambda: self._scan(chain, balance_port, address),
        )
        if hit:
            logger.debug("scan_wallet: cache_hit chain=%s address=%s", chain.key, address)
        return snapshot

    def _price(self, coin_id: str) -> Decimal:
        try:
            return self._market_data_port.get_usd_price(coin_id)
        except PriceLookupDomainError as exc:
            logger.warning("scan_wallet: price_unavailable coin=%s error=%s", coin_id, exc)
            return ZERO

    def _native_balance(self, port: ChainBalancePort, chain: ChainConfig, address: str) -> Decimal:
        try:
            return port.get_native_balance(address=address)
        except BalanceLookupError as exc:
            logger.warning(
                "scan_wallet: native_balance_unavailable chain=%s address=%s error=%s",
                chain.key,
                address,
                exc,
            )
            return ZERO

    def _token_balance(self, port: ChainBalancePort, token: KnownToken, address: str) -> Decimal:
        try:
            return port.get_token_balance(address=address, token=token)
        except BalanceLookupError as exc:
            logger.warning(
                "scan_wallet: token_balance_unavailable token=%s contract=%s error=%s",
                token.symbol,
                token.address,
                exc,
            )
            return ZERO

    def _scan(self, chain: ChainConfig, port: ChainBalancePort, address: str) -> WalletSnapshot:
        started = time.monotonic()

        native_balance = self._native_balance(port, chain, address)
        native_price = self._price(chain.native_coingecko_id)
        native = TokenHolding(
            symbol=chain.native_symbol,
            name=chain.native_name,
            balance=native_balance,
            decimals=chain.native_decimals,
            address=NATIVE_ADDRESS,
            price=native_price,
            value=native_balance * native_price,
            source=SOURCE_NATIVE,
            coingecko_id=chain.native_coingecko_id,
        )

        found: list[TokenHolding] = []
        for index, token in enumerate(chain.known_tokens):
            if index and chain.scan_delay_seconds > 0:
                time.sleep(chain.scan_delay_seconds)
            balance = self._token_balance(port, token, address)
            if balance <= 0:
                continue
            price = self._price(token.coingecko_id)
            found.append(
                TokenHolding(
                    symbol=token.symbol,
                    name=token.name,
                    balance=balance,
                    decimals=token.decimals,
                    address=token.address,
                    price=price,
                    value=balance * price,
                    source=SOURCE_LISTED,
                    logo_uri=token.logo_uri,
                    coingecko_id=token.coingecko_id,
                )
            )

        found.sort(key=lambda holding: holding.value, reverse=True)
        tokens = [native, *found]
        total_value = sum((holding.value for holding in tokens), ZERO)
        elapsed = round(time.monotonic() - started, 1)

        logger.info(
            "scan_wallet: scanned chain=%s address=%s checked=%s found=%s total_usd=%s elapsed=%.1fs",
            chain.key,
            address,
            len(chain.known_tokens),
            len(found),
            total_value,
            elapsed,
        )
        return WalletSnapshot(
            chain=chain.key,
            address=address,
            tokens=tokens,
            total_value=total_value,
            statistics=WalletStatistics(
                tokens_checked=len(chain.known_tokens),
                tokens_found=len(found) + 1,
                tokens_returned=len(tokens),
                processing_time_seconds=elapsed,
                average_token_value=total_value / len(tokens),
                largest_holding=max(tokens, key=lambda holding: holding.value),
            ),
            fetched_at=utc_now(),
        )
