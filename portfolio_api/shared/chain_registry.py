from __future__ import annotations

from portfolio_api.domain.entities.chain import EVM, SOLANA, ChainConfig, KnownToken
from portfolio_api.domain.exceptions import UnsupportedChainError


_TRUSTWALLET = "https://raw.githubusercontent.com/trustwallet/assets/master/blockchains"
_SOLANA_TOKEN_LIST = "https://raw.githubusercontent.com/solana-labs/token-list/main/assets/mainnet"


def _evm_logo(network: str, address: str) -> str:
    return f"{_TRUSTWALLET}/{network}/assets/{address}/logo.png"


ETHEREUM = ChainConfig(
    key="ethereum",
    name="Ethereum",
    kind=EVM,
    native_symbol="ETH",
    native_name="Ethereum",
    native_decimals=18,
    native_coingecko_id="ethereum",
    evm_chain_id="0x1",
    scan_delay_seconds=0.1,
    known_tokens=(
        KnownToken(
            address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
            symbol="WETH",
            name="Wrapped Ether",
            decimals=18,
            coingecko_id="ethereum",
            logo_uri=_evm_logo("ethereum", "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),
        ),
        KnownToken(
            address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
            symbol="USDC",
            name="USD Coin",
            decimals=6,
            coingecko_id="usd-coin",
            logo_uri=_evm_logo("ethereum", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
        ),
        KnownToken(
            address="0xdAC17F958D2ee523a2206206994597C13D831ec7",
            symbol="USDT",
            name="Tether USD",
            decimals=6,
            coingecko_id="tether",
            logo_uri=_evm_logo("ethereum", "0xdAC17F958D2ee523a2206206994597C13D831ec7"),
        ),
        KnownToken(
            address="0x6B175474E89094C44Da98b954EedeAC495271d0F",
            symbol="DAI",
            name="Dai Stablecoin",
            decimals=18,
            coingecko_id="dai",
            logo_uri=_evm_logo("ethereum", "0x6B175474E89094C44Da98b954EedeAC495271d0F"),
        ),
    ),
)

POLYGON = ChainConfig(
    key="polygon",
    name="Polygon",
    kind=EVM,
    native_symbol="MATIC",
    native_name="Polygon",
    native_decimals=18,
    native_coingecko_id="matic-network",
    evm_chain_id="0x89",
    scan_delay_seconds=0.1,
    known_tokens=(
        KnownToken(
            address="0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
            symbol="WMATIC",
            name="Wrapped Matic",
            decimals=18,
            coingecko_id="matic-network",
            logo_uri=_evm_logo("polygon", "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270"),
        ),
        KnownToken(
            address="0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
            symbol="USDC",
            name="USD Coin (PoS)",
            decimals=6,
            coingecko_id="usd-coin",
            logo_uri=_evm_logo("polygon", "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"),
        ),
        KnownToken(
            address="0xc2132D05D31c914a87C6611C10748AEb04B58e8F",
            symbol="USDT",
            name="Tether USD (PoS)",
            decimals=6,
            coingecko_id="tether",
            logo_uri=_evm_logo("polygon", "0xc2132D05D31c914a87C6611C10748AEb04B58e8F"),
        ),
        KnownToken(
            address="0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063",
            symbol="DAI",
            name="Dai Stablecoin (PoS)",
            decimals=18,
            coingecko_id="dai",
            logo_uri=_evm_logo("polygon", "0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063"),
        ),
    ),
)

BSC = ChainConfig(
    key="bsc",
    name="BSC",
    kind=EVM,
    native_symbol="BNB",
    native_name="BNB",
    native_decimals=18,
    native_coingecko_id="binancecoin",
    evm_chain_id="0x38",
    scan_delay_seconds=0.1,
    known_tokens=(
        KnownToken(
            address="0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",
            symbol="WBNB",
            name="Wrapped BNB",
            decimals=18,
            coingecko_id="binancecoin",
            logo_uri=_evm_logo("smartchain", "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"),
        ),
        KnownToken(
            address="0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
            symbol="USDC",
            name="USD Coin",
            decimals=18,
            coingecko_id="usd-coin",
            logo_uri=_evm_logo("smartchain", "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d"),
        ),
        KnownToken(
            address="0x55d398326f99059fF775485246999027B3197955",
            symbol="USDT",
            name="Tether USD",
            decimals=18,
            coingecko_id="tether",
            logo_uri=_evm_logo("smartchain", "0x55d398326f99059fF775485246999027B3197955"),
        ),
        KnownToken(
            address="0x1AF3F329e8BE154074D8769D1FFa4eE058B1DBc3",
            symbol="DAI",
            name="Dai Token",
            decimals=18,
            coingecko_id="dai",
            logo_uri=_evm_logo("smartchain", "0x1AF3F329e8BE154074D8769D1FFa4eE058B1DBc3"),
        ),
    ),
)

SOLANA_CHAIN = ChainConfig(
    key="solana",
    name="Solana",
    kind=SOLANA,
    native_symbol="SOL",
    native_name="Solana",
    native_decimals=9,
    native_coingecko_id="solana",
    scan_delay_seconds=0.05,
    estimated_scan_time="5-8 seconds",
    known_tokens=(
        KnownToken(
            address="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
            symbol="USDC",
            name="USD Coin",
            decimals=6,
            coingecko_id="usd-coin",
            logo_uri=f"{_SOLANA_TOKEN_LIST}/EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v/logo.png",
        ),
        KnownToken(
            address="Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
            symbol="USDT",
            name="Tether USD",
            decimals=6,
            coingecko_id="tether",
            logo_uri=f"{_SOLANA_TOKEN_LIST}/Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB/logo.svg",
        ),
        KnownToken(
            address="So11111111111111111111111111111111111111112",
            symbol="SOL",
            name="Wrapped SOL",
            decimals=9,
            coingecko_id="solana",
            logo_uri=f"{_SOLANA_TOKEN_LIST}/So11111111111111111111111111111111111111112/logo.png",
        ),
    ),
)

CHAINS: dict[str, ChainConfig] = {
    chain.key: chain for chain in (ETHEREUM, SOLANA_CHAIN, POLYGON, BSC)
}

COIN_IDS = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "sol": "solana",
    "matic": "matic-network",
    "bnb": "binancecoin",
    "usdc": "usd-coin",
    "usdt": "tether",
    "dai": "dai",
    "uni": "uniswap",
    "link": "chainlink",
    "shib": "shiba-inu",
}


def get_chain(key: str) -> ChainConfig:
    chain = CHAINS.get((key or "").strip().lower())
    if chain is None:
        raise UnsupportedChainError(f"Unsupported chain: {key}")
    return chain


def list_chains() -> list[ChainConfig]:
    return list(CHAINS.values())


def coin_id_for(symbol: str) -> str:
    key = symbol.strip().lower()
    return COIN_IDS.get(key, key)
