"""ERC20 actions for tool-calling agents.

An action provider owns an ordered set of actions. Each action pairs a name
and a description with an argument schema and a handler taking a wallet and
the validated arguments. Handlers return human-readable strings, errors
included, so an agent never sees an exception from a wallet call.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import BaseModel
from web3 import Web3

from mcp_erc20_actions.constants import (
    LEGACY_CDP_PROVIDER_NAME,
    lookup_gasless_asset_id,
)
from mcp_erc20_actions.erc20_abi import ERC20_ABI, encode_transfer_data, format_units
from mcp_erc20_actions.exceptions import ActionNotFoundError
from mcp_erc20_actions.logging_config import get_logger, log_with_context
from mcp_erc20_actions.network import EVM_PROTOCOL_FAMILY, Network
from mcp_erc20_actions.schemas import GetBalanceSchema, TransferSchema
from mcp_erc20_actions.validators import mask_address
from mcp_erc20_actions.wallet import (
    EvmWalletProvider,
    GaslessTransferCapable,
    NameResolver,
)

logger = get_logger(__name__)

TRANSFER_DESCRIPTION = """\
This tool will transfer an ERC20 token from the wallet to another onchain address.

It takes the following inputs:
- amount: The amount to transfer, in the token's smallest unit
- contractAddress: The contract address of the token to transfer
- destination: Where to send the funds (can be an onchain address, ENS 'example.eth', or Basename 'example.base.eth')

Important notes:
- Ensure sufficient balance of the input asset before transferring
- When sending native assets (e.g. 'eth' on base-mainnet), ensure there is sufficient balance for the transfer itself AND the gas cost of this transfer
"""


@dataclass(frozen=True)
class Action:
    """A named, schema-checked operation exposed to agents."""

    name: str
    description: str
    schema: type[BaseModel]
    handler: Callable[[EvmWalletProvider, Any], str]

    def invoke(self, wallet: EvmWalletProvider, args: Mapping[str, Any]) -> str:
        """Validate ``args`` against the schema and run the handler.

        Raises:
            pydantic.ValidationError: If ``args`` do not match the schema.
        """
        return self.handler(wallet, self.schema.model_validate(dict(args)))


class ActionProvider(ABC):
    """Base class for a group of actions sharing a wallet type."""

    def __init__(self, name: str, action_providers: list[ActionProvider]):
        self.name = name
        self.action_providers = tuple(action_providers)
        self._actions: tuple[Action, ...] = ()

    def get_actions(self) -> tuple[Action, ...]:
        """Actions of this provider followed by those of nested providers."""
        actions = list(self._actions)
        for provider in self.action_providers:
            actions.extend(provider.get_actions())
        return tuple(actions)

    def get_action(self, name: str) -> Action:
        for action in self.get_actions():
            if action.name == name:
                return action
        raise ActionNotFoundError(name, [a.name for a in self.get_actions()])

    def invoke(
        self, name: str, wallet: EvmWalletProvider, args: Mapping[str, Any]
    ) -> str:
        """Run the action called ``name`` with ``args``."""
        return self.get_action(name).invoke(wallet, args)

    @abstractmethod
    def supports_network(self, network: Network) -> bool:
        """Whether the actions can run on ``network``."""


class ERC20ActionProvider(ActionProvider):
    """Balance queries and transfers for ERC20 tokens."""

    def __init__(self):
        super().__init__("erc20", [])
        self._actions = (
            Action(
                name="get_balance",
                description=(
                    "This tool will get the balance of an ERC20 asset in the wallet. "
                    "It takes the contract address as input."
                ),
                schema=GetBalanceSchema,
                handler=self.get_balance,
            ),
            Action(
                name="transfer",
                description=TRANSFER_DESCRIPTION,
                schema=TransferSchema,
                handler=self.transfer,
            ),
        )

    def get_balance(self, wallet: EvmWalletProvider, args: GetBalanceSchema) -> str:
        """Get the wallet's balance of an ERC20 token.

        Args:
            wallet: The wallet whose balance is read.
            args: The validated action arguments.

        Returns:
            A message containing the balance, or the error.
        """
        try:
            balance = wallet.read_contract(
                args.contract_address,
                ERC20_ABI,
                "balanceOf",
                [wallet.get_address()],
            )
            decimals = wallet.read_contract(
                args.contract_address, ERC20_ABI, "decimals", []
            )

            return (
                f"Balance of {args.contract_address} is "
                f"{format_units(balance, decimals)}"
            )
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                f"get_balance failed: {e}",
                {"contract": mask_address(args.contract_address)},
            )
            return f"Error getting balance: {e}"

    def transfer(self, wallet: EvmWalletProvider, args: TransferSchema) -> str:
        """Transfer an amount of an ERC20 token to a destination onchain.

        Tokens listed in the gasless registry for the wallet's network are
        relayed when the wallet supports it; everything else is sent as a
        regular ``transfer`` call. Exactly one transaction is submitted.

        Args:
            wallet: The wallet sending the tokens.
            args: The validated action arguments.

        Returns:
            A message containing the transfer details, or the error.
        """
        try:
            asset_id = self._gasless_asset_id(wallet, args.contract_address)

            if asset_id is not None and isinstance(wallet, GaslessTransferCapable):
                tx_hash = wallet.gasless_erc20_transfer(
                    asset_id, args.destination, int(args.amount)
                )
                log_with_context(
                    logger,
                    logging.INFO,
                    "Submitted gasless transfer",
                    {"asset": asset_id, "tx": tx_hash},
                )

                wallet.wait_for_transaction_receipt(tx_hash)

                return (
                    f"Transferred {args.amount} of {args.contract_address} to "
                    f"{args.destination} using gasless transfer.\n"
                    f"Transaction hash: {tx_hash}"
                )

            tx_hash = wallet.send_transaction(
                args.contract_address,
                encode_transfer_data(
                    self._resolve_destination(wallet, args.destination),
                    int(args.amount),
                ),
            )
            log_with_context(
                logger,
                logging.INFO,
                "Submitted transfer",
                {"contract": mask_address(args.contract_address), "tx": tx_hash},
            )

            wallet.wait_for_transaction_receipt(tx_hash)

            return (
                f"Transferred {args.amount} of {args.contract_address} to "
                f"{args.destination}.\n"
                f"Transaction hash for the transfer: {tx_hash}"
            )
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                f"transfer failed: {e}",
                {"contract": mask_address(args.contract_address)},
            )
            return f"Error transferring the asset: {e}"

    @staticmethod
    def _gasless_asset_id(
        wallet: EvmWalletProvider, contract_address: str
    ) -> str | None:
        # Normalize first so a malformed address fails both paths alike.
        token_address = Web3.to_checksum_address(contract_address)
        if wallet.get_name() != LEGACY_CDP_PROVIDER_NAME:
            return None
        return lookup_gasless_asset_id(wallet.get_network().network_id, token_address)

    @staticmethod
    def _resolve_destination(wallet: EvmWalletProvider, destination: str) -> str:
        if Web3.is_address(destination) or not isinstance(wallet, NameResolver):
            return destination
        return wallet.resolve_name(destination)

    def supports_network(self, network: Network) -> bool:
        """Checks if the ERC20 action provider supports the given network."""
        return network.protocol_family == EVM_PROTOCOL_FAMILY


def erc20_action_provider() -> ERC20ActionProvider:
    return ERC20ActionProvider()
