from unittest.mock import MagicMock

import pytest

from mcp_erc20_actions.config_manager import reset_config_manager
from mcp_erc20_actions.network import Network
from mcp_erc20_actions.server import set_wallet_password, set_wallet_provider

OWNER = "0x1111111111111111111111111111111111111111"
DESTINATION = "0x3333333333333333333333333333333333333333"
BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
BASE_SEPOLIA_USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
UNLISTED_TOKEN = "0x2222222222222222222222222222222222222222"


class FakeWallet:
    """Wallet double recording contract reads and submitted transactions."""

    def __init__(
        self,
        name="web3_wallet_provider",
        network_id="base-mainnet",
        protocol_family="evm",
    ):
        self.name = name
        self.network = Network(protocol_family, network_id, None)
        self.read_contract = MagicMock()
        self.send_transaction = MagicMock(return_value="0xstandardhash")
        self.wait_for_transaction_receipt = MagicMock(return_value={"status": 1})

    def get_address(self):
        return OWNER

    def get_network(self):
        return self.network

    def get_name(self):
        return self.name


class FakeGaslessWallet(FakeWallet):
    """Wallet double that also relays sponsored transfers."""

    def __init__(self, name="cdp_wallet_provider", network_id="base-mainnet"):
        super().__init__(name=name, network_id=network_id)
        self.gasless = MagicMock(return_value="0xgaslesshash")

    def gasless_erc20_transfer(self, asset_id, destination, amount):
        return self.gasless(asset_id, destination, amount)


class FakeResolvingWallet(FakeWallet):
    """Wallet double that resolves names from a fixed table."""

    def __init__(self, names=None):
        super().__init__()
        self.names = names or {}

    def resolve_name(self, name):
        if name not in self.names:
            raise LookupError(f"Could not resolve {name}")
        return self.names[name]


@pytest.fixture(autouse=True)
def reset_state(monkeypatch, tmp_path):
    """Reset global state and keep config away from the working directory."""
    monkeypatch.setenv("ERC20_ACTIONS_CONFIG_PATH", str(tmp_path / "config.yaml"))
    for var in (
        "ERC20_ACTIONS_RPC_URL",
        "ERC20_ACTIONS_RPC_TIMEOUT",
        "ERC20_ACTIONS_RECEIPT_TIMEOUT",
        "ERC20_ACTIONS_LOG_LEVEL",
        "ERC20_ACTIONS_LOG_FILE",
        "ERC20_ACTIONS_WALLET_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)
    set_wallet_provider(None)
    set_wallet_password(None)
    reset_config_manager()
    yield
    set_wallet_provider(None)
    set_wallet_password(None)
    reset_config_manager()
