"""Encryption of the wallet signing key at rest."""

import base64
import binascii
import getpass
import hashlib
import os

from cryptography.fernet import Fernet, InvalidToken

from mcp_erc20_actions.exceptions import EncryptionError

PBKDF2_ITERATIONS = 100000


def generate_salt() -> bytes:
    """Generate random salt for key derivation.

    Returns:
        16-byte random salt.
    """
    return os.urandom(16)


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a Fernet key from password using PBKDF2.

    Args:
        password: User-provided password.
        salt: Random salt for key derivation.

    Returns:
        urlsafe-base64 encoded 32-byte key.
    """
    kdf = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode(),
        salt,
        PBKDF2_ITERATIONS,
        dklen=32,
    )
    return base64.urlsafe_b64encode(kdf)


class EncryptionManager:
    """Encrypts and decrypts secrets with a password-derived key."""

    def __init__(self, password: str, salt: bytes | None = None):
        self.salt = salt or generate_salt()
        self._fernet = Fernet(derive_key(password, self.salt))

    def encrypt(self, data: str) -> str:
        """Encrypt data and return a base64 string."""
        encrypted = self._fernet.encrypt(data.encode())
        return base64.b64encode(encrypted).decode()

    def decrypt(self, encrypted_b64: str) -> str:
        """Decrypt a base64 string produced by :meth:`encrypt`.

        Raises:
            EncryptionError: If the password is wrong or the data is corrupt.
        """
        try:
            encrypted = base64.b64decode(encrypted_b64.encode())
            return self._fernet.decrypt(encrypted).decode()
        except (InvalidToken, binascii.Error, ValueError) as e:
            raise EncryptionError(
                "Failed to decrypt wallet key",
                EncryptionError.ERR_DECRYPTION_FAILED,
                hint="Check the wallet password",
            ) from e

    def get_salt_base64(self) -> str:
        """Get salt as base64 string."""
        return base64.b64encode(self.salt).decode()

    @staticmethod
    def get_password(prompt: str = "Enter wallet password: ") -> str:
        """Prompt for password interactively."""
        return getpass.getpass(prompt)

    @staticmethod
    def from_salt_base64(password: str, salt_b64: str) -> "EncryptionManager":
        """Create an EncryptionManager reusing a stored salt.

        Args:
            password: Encryption password.
            salt_b64: Salt as returned by :meth:`get_salt_base64`.

        Returns:
            EncryptionManager instance.
        """
        try:
            salt = base64.b64decode(salt_b64.encode(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncryptionError(
                "Invalid salt",
                EncryptionError.ERR_INVALID_KEY,
                hint="wallet.salt must be base64-encoded",
            ) from e
        return EncryptionManager(password, salt)
