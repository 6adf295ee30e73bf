"""Custom exception hierarchy for the ERC20 actions server."""

# ruff: noqa: N818 - Base exception class ending with "Exception" is acceptable for base class


class ERC20ActionsException(Exception):
    """Base exception for all ERC20 action errors."""

    def __init__(self, message: str, code: int, hint: str | None = None):
        self.message = message
        self.code = code
        self.hint = hint
        super().__init__(self.message)

    def describe(self) -> str:
        """Render the error for a tool result, hint included."""
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class ConfigError(ERC20ActionsException):
    """Configuration errors."""

    ERR_MISSING_WALLET = 2001
    ERR_MISSING_PASSWORD = 2003
    ERR_INVALID_ADDRESS = 2004
    ERR_INVALID_URL = 2006


class TokenError(ERC20ActionsException):
    """Token/contract interaction errors."""

    ERR_INVALID_ADDRESS = 3001
    ERR_INVALID_DECIMALS = 3002
    ERR_INVALID_AMOUNT = 3003


class TransactionError(ERC20ActionsException):
    """Transaction-related errors."""

    ERR_REVERTED = 4001
    ERR_RECEIPT_TIMEOUT = 4002


class EncryptionError(ERC20ActionsException):
    """Encryption/decryption errors."""

    ERR_INVALID_KEY = 5001
    ERR_DECRYPTION_FAILED = 5002
    ERR_PLAIN_TEXT_KEY = 5004


class WalletError(ERC20ActionsException):
    """Wallet provider errors."""

    ERR_NOT_CONNECTED = 6001
    ERR_UNSUPPORTED_NETWORK = 6002


class ActionNotFoundError(ERC20ActionsException):
    """Raised when an action name is not registered on a provider."""

    ERR_UNKNOWN_ACTION = 7001

    def __init__(self, name: str, available: list[str]):
        super().__init__(
            f"Unknown action '{name}'",
            self.ERR_UNKNOWN_ACTION,
            hint=f"Available actions: {', '.join(available)}",
        )
        self.name = name
