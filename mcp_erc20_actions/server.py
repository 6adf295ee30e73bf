import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from mcp_erc20_actions.action_provider import ERC20ActionProvider, erc20_action_provider
from mcp_erc20_actions.config_manager import WALLET_PASSWORD_ENV, get_config_manager
from mcp_erc20_actions.crypto import EncryptionManager
from mcp_erc20_actions.exceptions import ERC20ActionsException, WalletError
from mcp_erc20_actions.logging_config import get_logger, setup_logging
from mcp_erc20_actions.validators import validate_rpc_url
from mcp_erc20_actions.wallet import EvmWalletProvider, Web3WalletProvider

logger = get_logger(__name__)

mcp = FastMCP("mcp-erc20-actions")

ACTION_PROVIDER: ERC20ActionProvider = erc20_action_provider()

_wallet_provider: EvmWalletProvider | None = None
_wallet_password: str | None = None


def get_wallet_provider() -> EvmWalletProvider:
    """Get the global wallet, building it from configuration on first use."""
    global _wallet_provider
    if _wallet_provider is None:
        config = get_config_manager()
        password = _wallet_password
        if password is None:
            password = config.get_wallet_password()
        _wallet_provider = Web3WalletProvider.from_config(config, password)
    return _wallet_provider


def set_wallet_provider(wallet: EvmWalletProvider | None) -> None:
    """Replace the global wallet (None forces a rebuild on next use)."""
    global _wallet_provider
    _wallet_provider = wallet


def set_wallet_password(password: str | None) -> None:
    """Set the password used when the global wallet is next built."""
    global _wallet_password
    _wallet_password = password


def run_action(name: str, args: dict[str, Any]) -> str:
    """Run a registered action against the global wallet.

    Every failure, including RPC errors outside the actions themselves,
    is reported as an ``Error: ...`` string.
    """
    try:
        wallet = get_wallet_provider()
        network = wallet.get_network()
        if not ACTION_PROVIDER.supports_network(network):
            raise WalletError(
                f"Network family '{network.protocol_family}' is not supported",
                WalletError.ERR_UNSUPPORTED_NETWORK,
                hint="ERC20 actions require an EVM wallet",
            )
        return ACTION_PROVIDER.invoke(name, wallet, args)
    except ERC20ActionsException as e:
        logger.warning(f"{name} rejected: {e.message}")
        return f"Error: {e.describe()}"
    except ValidationError as e:
        return f"Error: Invalid arguments for {name}: {e}"
    except Exception as e:
        logger.warning(f"{name} failed: {e}")
        return f"Error: {e}"


@mcp.tool()
def get_balance(contract_address: str) -> str:
    """
    Get the balance of an ERC20 asset in the wallet.

    Args:
        contract_address: The contract address of the token to get the balance for.
    """
    return run_action("get_balance", {"contract_address": contract_address})


@mcp.tool()
def transfer(amount: str, contract_address: str, destination: str) -> str:
    """
    Transfer an ERC20 token from the wallet to another onchain address.
    Ensure sufficient balance of the token before transferring, and enough
    native balance for gas unless the token supports gasless transfer.

    Args:
        amount: The amount to transfer, in the token's smallest unit.
        contract_address: The contract address of the token to transfer.
        destination: Where to send the funds (an onchain address, ENS 'example.eth', or Basename 'example.base.eth').
    """
    return run_action(
        "transfer",
        {
            "amount": amount,
            "contract_address": contract_address,
            "destination": destination,
        },
    )


def setup_wallet() -> None:
    """Interactively store an RPC URL and an encrypted signing key."""
    config = get_config_manager()

    rpc_url = input(f"RPC URL [{config.get('wallet', 'rpc_url') or ''}]: ").strip()
    if rpc_url:
        config.set("wallet", "rpc_url", value=validate_rpc_url(rpc_url))

    private_key = EncryptionManager.get_password("Private key (hex): ").strip()
    password = EncryptionManager.get_password("New wallet password: ")
    if password != EncryptionManager.get_password("Repeat password: "):
        print("Error: passwords do not match")
        return

    config.set_wallet_key(private_key, password)
    config.save()
    print(f"Saved wallet configuration to {config.config_path}")


def main():
    config = get_config_manager()
    setup_logging(
        level=config.get("logging", "level"),
        log_file=config.get("logging", "file"),
        format_str=config.get("logging", "format"),
    )
    for error in config.validate():
        logger.warning(f"Config: {error}")

    # stdin carries the MCP transport unless a terminal is attached
    if (
        config.get("wallet", "encrypted_private_key")
        and os.getenv(WALLET_PASSWORD_ENV) is None
        and sys.stdin.isatty()
    ):
        set_wallet_password(config.get_wallet_password(prompt=True))

    mcp.run()


if __name__ == "__main__":
    main()
