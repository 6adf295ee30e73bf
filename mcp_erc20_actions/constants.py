"""Static token data for ERC20 actions."""

from types import MappingProxyType
from typing import Mapping

from web3 import Web3

# Wallets reporting this name may relay sponsored transfers.
LEGACY_CDP_PROVIDER_NAME = "cdp_wallet_provider"

BASE_TOKEN_TO_ASSET_ID: Mapping[str, str] = MappingProxyType(
    {
        "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913": "usdc",
    }
)

BASE_SEPOLIA_TOKEN_TO_ASSET_ID: Mapping[str, str] = MappingProxyType(
    {
        "0x036CbD53842c5426634e7929541eC2318f3dCF7e": "usdc",
    }
)

GASLESS_TOKEN_REGISTRY: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "base-mainnet": BASE_TOKEN_TO_ASSET_ID,
        "base-sepolia": BASE_SEPOLIA_TOKEN_TO_ASSET_ID,
    }
)


def lookup_gasless_asset_id(network_id: str | None, contract_address: str) -> str | None:
    """Return the relay asset id for a token, or None if it has none.

    Args:
        network_id: Network the wallet is on.
        contract_address: Token contract address in any letter case.

    Returns:
        Asset identifier, or None when the network or token is not listed.
    """
    tokens = GASLESS_TOKEN_REGISTRY.get(network_id or "")
    if tokens is None:
        return None
    return tokens.get(Web3.to_checksum_address(contract_address))
