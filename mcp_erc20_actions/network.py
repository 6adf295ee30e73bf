"""Network descriptors for wallet providers."""

from __future__ import annotations

from dataclasses import dataclass

EVM_PROTOCOL_FAMILY = "evm"

NETWORK_IDS: dict[int, str] = {
    1: "ethereum-mainnet",
    11155111: "ethereum-sepolia",
    8453: "base-mainnet",
    84532: "base-sepolia",
    137: "polygon-mainnet",
    42161: "arbitrum-mainnet",
    421614: "arbitrum-sepolia",
    10: "optimism-mainnet",
    11155420: "optimism-sepolia",
}


@dataclass(frozen=True)
class Network:
    """The network a wallet is connected to."""

    protocol_family: str
    network_id: str | None = None
    chain_id: int | None = None


def network_for_chain_id(chain_id: int) -> Network:
    """Describe an EVM chain. Unknown chain ids get no ``network_id``."""
    return Network(
        protocol_family=EVM_PROTOCOL_FAMILY,
        network_id=NETWORK_IDS.get(chain_id),
        chain_id=chain_id,
    )
