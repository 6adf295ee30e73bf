"""ERC-20 ABI Constants"""

from web3 import Web3

from mcp_erc20_actions.exceptions import TokenError

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "type": "function",
    },
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "recipient", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


def encode_transfer_data(destination: str, amount: int) -> str:
    """Encode calldata for ``transfer(destination, amount)``.

    Names such as ENS domains must be resolved to an address beforehand.

    Args:
        destination: Recipient address.
        amount: Amount in the token's smallest unit.

    Returns:
        0x-prefixed calldata.

    Raises:
        TokenError: If the amount is negative or the destination is not a hex
            address.
    """
    if amount < 0:
        raise TokenError(
            f"Invalid amount: {amount}",
            TokenError.ERR_INVALID_AMOUNT,
            hint="Amount must be a non-negative integer",
        )
    if not Web3.is_address(destination):
        raise TokenError(
            f"Invalid destination: {destination}",
            TokenError.ERR_INVALID_ADDRESS,
            hint="Destination must be a 0x address or a name the wallet can resolve",
        )
    destination = Web3.to_checksum_address(destination)

    contract = Web3().eth.contract(abi=ERC20_ABI)
    return contract.encode_abi("transfer", args=[destination, amount])


def format_units(value: int, decimals: int) -> str:
    """Scale a raw integer amount down by ``10**decimals``.

    Renders a plain decimal string with trailing fractional zeros removed,
    e.g. ``format_units(1500000, 6) == "1.5"``.
    """
    if decimals < 0:
        raise TokenError(
            f"Invalid decimals: {decimals}",
            TokenError.ERR_INVALID_DECIMALS,
        )

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).zfill(decimals).rstrip("0") if decimals else ""

    if fraction_str:
        return f"{sign}{whole}.{fraction_str}"
    return f"{sign}{whole}"
