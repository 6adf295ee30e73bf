"""Wallet abstractions used by the ERC20 actions, and a web3 implementation."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from web3 import Web3
from web3.exceptions import TimeExhausted

from mcp_erc20_actions.config_manager import ConfigManager
from mcp_erc20_actions.crypto import EncryptionManager
from mcp_erc20_actions.exceptions import (
    ConfigError,
    TokenError,
    TransactionError,
    WalletError,
)
from mcp_erc20_actions.logging_config import get_logger
from mcp_erc20_actions.network import Network, network_for_chain_id
from mcp_erc20_actions.validators import (
    mask_url,
    validate_address,
    validate_encrypted_key,
    validate_rpc_url,
)

logger = get_logger(__name__)


@runtime_checkable
class EvmWalletProvider(Protocol):
    """Capabilities an EVM wallet must offer to the ERC20 actions."""

    def get_address(self) -> str: ...

    def get_network(self) -> Network: ...

    def get_name(self) -> str: ...

    def read_contract(
        self,
        address: str,
        abi: Sequence[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any: ...

    def send_transaction(self, to: str, data: str) -> str: ...

    def wait_for_transaction_receipt(self, tx_hash: str) -> Any: ...


@runtime_checkable
class GaslessTransferCapable(Protocol):
    """Optional capability: sponsored ERC20 transfers through a relay."""

    def gasless_erc20_transfer(
        self, asset_id: str, destination: str, amount: int | str
    ) -> str: ...


@runtime_checkable
class NameResolver(Protocol):
    """Optional capability: resolve names such as ENS domains to addresses."""

    def resolve_name(self, name: str) -> str: ...


class Web3WalletProvider:
    """EVM wallet backed by a web3 HTTP provider and a local signing key."""

    name = "web3_wallet_provider"

    def __init__(
        self,
        w3: Web3,
        private_key: str,
        receipt_timeout: int = 120,
    ):
        self.w3 = w3
        self._account = w3.eth.account.from_key(private_key)
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_config(
        cls, config: ConfigManager, password: str
    ) -> "Web3WalletProvider":
        """Build a wallet from the ``wallet`` and ``rpc`` config sections.

        Args:
            config: Loaded configuration.
            password: Password protecting the stored key.

        Raises:
            ConfigError: If the RPC URL or key is missing or malformed.
            EncryptionError: If the key cannot be decrypted.
            WalletError: If the RPC endpoint is unreachable.
        """
        rpc_url = config.get("wallet", "rpc_url")
        if not rpc_url:
            raise ConfigError(
                "No RPC URL configured",
                ConfigError.ERR_MISSING_WALLET,
                hint="Set wallet.rpc_url or ERC20_ACTIONS_RPC_URL",
            )
        validate_rpc_url(rpc_url)
        encrypted_key = validate_encrypted_key(
            config.get("wallet", "encrypted_private_key")
        )
        manager = EncryptionManager.from_salt_base64(
            password, config.get("wallet", "salt") or ""
        )
        private_key = manager.decrypt(encrypted_key)

        w3 = Web3(
            Web3.HTTPProvider(
                rpc_url,
                request_kwargs={"timeout": config.get("rpc", "default_timeout")},
            )
        )
        if not w3.is_connected():
            raise WalletError(
                f"Could not connect to {mask_url(rpc_url)}",
                WalletError.ERR_NOT_CONNECTED,
                hint="Check wallet.rpc_url",
            )

        wallet = cls(
            w3,
            private_key,
            receipt_timeout=config.get("rpc", "receipt_timeout"),
        )
        logger.info(f"Wallet {wallet.get_address()} connected to {mask_url(rpc_url)}")
        return wallet

    def get_address(self) -> str:
        return self._account.address

    def get_network(self) -> Network:
        return network_for_chain_id(self.w3.eth.chain_id)

    def get_name(self) -> str:
        return self.name

    def resolve_name(self, name: str) -> str:
        """Resolve an ENS name through the connected chain's registry.

        Raises:
            TokenError: If the name has no address record.
        """
        address = self.w3.ens.address(name)
        if address is None:
            raise TokenError(
                f"Could not resolve {name}",
                TokenError.ERR_INVALID_ADDRESS,
                hint="Use a 0x address or a name registered on this network",
            )
        return address

    def read_contract(
        self,
        address: str,
        abi: Sequence[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a read-only contract function.

        Args:
            address: Contract address.
            abi: Contract ABI.
            function_name: Function to call (e.g. 'balanceOf').
            args: Function arguments.

        Returns:
            The decoded return value.
        """
        contract = self.w3.eth.contract(
            address=validate_address(address, "contract address"), abi=abi
        )
        return contract.functions[function_name](*args).call()

    def send_transaction(self, to: str, data: str) -> str:
        """Sign and broadcast a contract call from this wallet.

        Uses EIP-1559 fee parameters with a legacy gas price fallback.

        Returns:
            The 0x-prefixed transaction hash.
        """
        tx: dict[str, Any] = {
            "from": self._account.address,
            "to": validate_address(to, "transaction target"),
            "data": data,
            "value": 0,
            "nonce": self.w3.eth.get_transaction_count(self._account.address),
            "chainId": self.w3.eth.chain_id,
        }

        latest = self.w3.eth.get_block("latest")
        base_fee = latest.get("baseFeePerGas")
        if base_fee is not None:
            max_priority = Web3.to_wei(1.5, "gwei")
            tx["maxFeePerGas"] = base_fee * 2 + max_priority
            tx["maxPriorityFeePerGas"] = max_priority
        else:
            tx["gasPrice"] = self.w3.eth.gas_price
        tx["gas"] = self.w3.eth.estimate_gas(tx)

        signed = self._account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    def wait_for_transaction_receipt(self, tx_hash: str) -> Any:
        """Block until ``tx_hash`` is mined.

        Raises:
            TransactionError: If the wait times out or the transaction reverted.
        """
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except TimeExhausted as e:
            raise TransactionError(
                f"Transaction {tx_hash} not mined after {self.receipt_timeout}s",
                TransactionError.ERR_RECEIPT_TIMEOUT,
            ) from e

        if receipt.get("status") == 0:
            raise TransactionError(
                f"Transaction {tx_hash} reverted",
                TransactionError.ERR_REVERTED,
            )
        return receipt
