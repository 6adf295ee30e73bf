"""ERC-20 ABI helper module"""

from .erc20_abi import ERC20_ABI as ERC20_ABI
from .erc20_abi import encode_transfer_data as encode_transfer_data
from .erc20_abi import format_units as format_units

__all__ = ["ERC20_ABI", "encode_transfer_data", "format_units"]
