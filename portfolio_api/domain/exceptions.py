from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class UnsupportedChainError(DomainError):
    """Chain is not present in the chain registry."""


class InvalidAddressError(DomainError):
    """Wallet address does not match the chain's address format."""


class WalletInputError(DomainError):
    """Invalid parameters for adding a wallet."""


class PriceLookupDomainError(DomainError):
    """Market data could not be fetched for the requested coins."""


class BalanceLookupError(DomainError):
    """Balance could not be fetched from the chain RPC."""


class GoalsInputError(DomainError):
    """Invalid goal targets."""


class ConversionInputError(DomainError):
    """Invalid parameters for currency conversion."""


class PriceInputError(DomainError):
    """Invalid parameters for a price lookup."""
