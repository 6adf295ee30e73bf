"""Configuration management with YAML and environment variable support."""

import copy
import os
from typing import Any

import yaml

from mcp_erc20_actions.crypto import EncryptionManager
from mcp_erc20_actions.exceptions import ConfigError
from mcp_erc20_actions.logging_config import DEFAULT_FORMAT, get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV = "ERC20_ACTIONS_CONFIG_PATH"
WALLET_PASSWORD_ENV = "ERC20_ACTIONS_WALLET_PASSWORD"


class ConfigManager:
    """Configuration manager for the ERC20 actions server."""

    DEFAULT_CONFIG = {
        "rpc": {"default_timeout": 15, "receipt_timeout": 120},
        "wallet": {"rpc_url": None, "encrypted_private_key": None, "salt": None},
        "logging": {
            "level": "INFO",
            "file": None,
            "format": DEFAULT_FORMAT,
        },
    }

    def __init__(self, config_path: str | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file (uses default or env var).
        """
        self.config_path: str = config_path or os.getenv(  # type: ignore[assignment]
            CONFIG_PATH_ENV, "erc20_actions.yaml"
        )
        self.config: dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)

    def load(self) -> None:
        """Load configuration from YAML file, then apply env overrides."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path) as f:
                    loaded_config = yaml.safe_load(f)

                if loaded_config:
                    for section, values in loaded_config.items():
                        if isinstance(values, dict) and isinstance(
                            self.config.get(section), dict
                        ):
                            self.config[section].update(values)
                        else:
                            self.config[section] = values
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config: {e}")
        else:
            logger.info("Config file not found, using defaults")

        self._apply_env_overrides()

    def save(self) -> None:
        """Save configuration to YAML file."""
        with open(self.config_path, "w") as f:
            yaml.dump(self.config, f, default_flow_style=False, sort_keys=False)

    def get(self, *keys: str) -> Any:
        """Get configuration value using dot notation.

        Args:
            *keys: Nested keys (e.g., "rpc", "default_timeout").

        Returns:
            Configuration value or None if not found.
        """
        value = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return None
        return value

    def set(self, *keys: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            *keys: Nested keys (e.g., "wallet", "rpc_url").
            value: Value to set.
        """
        config = self.config
        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def set_wallet_key(self, private_key: str, password: str) -> None:
        """Encrypt a signing key with ``password`` and store it with its salt.

        Args:
            private_key: Hex private key.
            password: Password used to derive the encryption key.
        """
        manager = EncryptionManager(password)
        self.set("wallet", "encrypted_private_key", value=manager.encrypt(private_key))
        self.set("wallet", "salt", value=manager.get_salt_base64())

    def get_wallet_password(self, prompt: bool = False) -> str:
        """Return the wallet password from the environment.

        Args:
            prompt: Ask on the terminal when the variable is unset.

        Raises:
            ConfigError: If the variable is unset and prompting is off.
        """
        password = os.getenv(WALLET_PASSWORD_ENV)
        if password is not None:
            return password
        if prompt:
            return EncryptionManager.get_password()
        raise ConfigError(
            "No wallet password available",
            ConfigError.ERR_MISSING_PASSWORD,
            hint=f"Set {WALLET_PASSWORD_ENV} or start the server from a terminal",
        )

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides.

        Environment variables:
            ERC20_ACTIONS_RPC_URL
            ERC20_ACTIONS_RPC_TIMEOUT
            ERC20_ACTIONS_RECEIPT_TIMEOUT
            ERC20_ACTIONS_LOG_LEVEL
            ERC20_ACTIONS_LOG_FILE
            ERC20_ACTIONS_CONFIG_PATH (handled in __init__)
        """
        env_mappings = {
            "ERC20_ACTIONS_RPC_URL": ("wallet", "rpc_url", str),
            "ERC20_ACTIONS_RPC_TIMEOUT": ("rpc", "default_timeout", int),
            "ERC20_ACTIONS_RECEIPT_TIMEOUT": ("rpc", "receipt_timeout", int),
            "ERC20_ACTIONS_LOG_LEVEL": ("logging", "level", str),
            "ERC20_ACTIONS_LOG_FILE": ("logging", "file", str),
        }

        for env_var, (section, key, type_converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                if section not in self.config:
                    self.config[section] = {}

                self.config[section][key] = type_converter(value)

    def validate(self) -> list[str]:
        """Validate configuration schema.

        Returns:
            List of validation errors (empty if valid).
        """
        errors = []

        for key in ("default_timeout", "receipt_timeout"):
            value = self.get("rpc", key)
            if not isinstance(value, int) or value <= 0:
                errors.append(f"rpc.{key} must be a positive integer")

        level = self.get("logging", "level")
        if not isinstance(level, str) or level.upper() not in (
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ):
            errors.append("logging.level must be a standard log level name")

        if self.get("wallet", "encrypted_private_key") and not self.get(
            "wallet", "salt"
        ):
            errors.append("wallet.salt is required with wallet.encrypted_private_key")

        return errors


# Global config manager instance
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get global config manager instance.

    Returns:
        ConfigManager instance.
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
        _config_manager.load()
    return _config_manager


def reset_config_manager() -> None:
    """Drop the global instance so the next call reloads configuration."""
    global _config_manager
    _config_manager = None
