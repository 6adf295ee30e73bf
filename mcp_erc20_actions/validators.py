"""Input validation and sanitization utilities."""

import base64
import binascii
import re
from urllib.parse import urlparse

from web3 import Web3

from mcp_erc20_actions.exceptions import ConfigError, EncryptionError


def validate_address(address: str, param_name: str = "address") -> str:
    """Validate and return checksum address.

    Args:
        address: Ethereum address to validate.
        param_name: Parameter name for error messages.

    Returns:
        Checksummed address.

    Raises:
        ConfigError: If address is invalid.
    """
    try:
        return Web3.to_checksum_address(address)
    except ValueError as e:
        raise ConfigError(
            f"Invalid {param_name}: {mask_address(address)}",
            ConfigError.ERR_INVALID_ADDRESS,
            hint="Address must be a valid 0x-prefixed hex string of 40 characters",
        ) from e


def validate_rpc_url(url: str) -> str:
    """Validate RPC URL format.

    Args:
        url: RPC URL to validate.

    Returns:
        Validated URL.

    Raises:
        ConfigError: If URL is invalid.
    """
    if not url or not re.match(r"^https?://[^\s/]+(/\S*)?$", url):
        raise ConfigError(
            f"Invalid RPC URL: {mask_url(url or '')}",
            ConfigError.ERR_INVALID_URL,
            hint="URL must start with http:// or https://",
        )
    return url


def validate_encrypted_key(encrypted_key: str | None) -> str:
    """Check that a stored private key is present and base64-encoded.

    Raises:
        ConfigError: If no key is configured.
        EncryptionError: If the key is not base64 (e.g. a plain-text key).
    """
    if not encrypted_key:
        raise ConfigError(
            "No wallet key configured",
            ConfigError.ERR_MISSING_WALLET,
            hint="Run erc20-actions-setup to store an encrypted key",
        )
    if encrypted_key.startswith("0x"):
        raise EncryptionError(
            "Plain text private keys are not allowed",
            EncryptionError.ERR_PLAIN_TEXT_KEY,
            hint="Private keys must be encrypted. Run erc20-actions-setup",
        )
    try:
        base64.b64decode(encrypted_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncryptionError(
            "Invalid encrypted private key format",
            EncryptionError.ERR_INVALID_KEY,
            hint="Encrypted key must be base64-encoded",
        ) from e
    return encrypted_key


def mask_address(address: str) -> str:
    """Mask address for display in errors.

    Args:
        address: Address to mask.

    Returns:
        Masked address.
    """
    if len(address) < 10:
        return "***"
    return f"{address[:6]}...{address[-4:]}"


def mask_url(url: str) -> str:
    """Mask URL for display in errors.

    Paths are dropped since providers embed API keys there.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return "***"
    netloc = parsed.netloc
    if len(netloc) > 10:
        netloc = f"{netloc[:4]}...{netloc[-4:]}"
    return f"{parsed.scheme}://{netloc}"
