"""MCP server exposing ERC20 balance and transfer actions."""

from mcp_erc20_actions.action_provider import (
    Action,
    ActionProvider,
    ERC20ActionProvider,
    erc20_action_provider,
)
from mcp_erc20_actions.network import Network
from mcp_erc20_actions.wallet import (
    EvmWalletProvider,
    GaslessTransferCapable,
    NameResolver,
    Web3WalletProvider,
)

__all__ = [
    "Action",
    "ActionProvider",
    "ERC20ActionProvider",
    "EvmWalletProvider",
    "GaslessTransferCapable",
    "NameResolver",
    "Network",
    "Web3WalletProvider",
    "erc20_action_provider",
]
