from unittest.mock import MagicMock, patch

from mcp_erc20_actions.config_manager import get_config_manager
from mcp_erc20_actions.server import (
    get_balance,
    get_wallet_provider,
    main,
    mcp,
    set_wallet_provider,
    set_wallet_password,
    setup_wallet,
    transfer,
)

from tests.conftest import (
    BASE_USDC,
    DESTINATION,
    UNLISTED_TOKEN,
    FakeResolvingWallet,
    FakeGaslessWallet,
    FakeWallet,
)


class TestGetBalanceTool:
    def test_get_balance_success(self):
        """Test the tool reads through the configured wallet."""
        wallet = FakeWallet()
        wallet.read_contract.side_effect = [2500000, 6]
        set_wallet_provider(wallet)

        result = get_balance(BASE_USDC)

        assert result == f"Balance of {BASE_USDC} is 2.5"

    def test_get_balance_read_error(self):
        """Test contract failures come back as text."""
        wallet = FakeWallet()
        wallet.read_contract.side_effect = Exception("boom")
        set_wallet_provider(wallet)

        assert get_balance(BASE_USDC) == "Error getting balance: boom"

    def test_get_balance_unsupported_network(self):
        """Test non-EVM wallets are refused before any read."""
        wallet = FakeWallet(protocol_family="solana", network_id="solana-mainnet")
        set_wallet_provider(wallet)

        result = get_balance(BASE_USDC)

        assert result.startswith("Error: Network family 'solana' is not supported")
        wallet.read_contract.assert_not_called()

    def test_get_balance_network_lookup_error(self):
        """Test RPC failures outside the action come back as text."""
        wallet = FakeWallet()
        wallet.get_network = MagicMock(side_effect=ConnectionError("rpc down"))
        set_wallet_provider(wallet)

        result = get_balance(BASE_USDC)

        assert result == "Error: rpc down"
        wallet.read_contract.assert_not_called()

    def test_get_balance_wallet_build_error(self):
        """Test unexpected errors while building the wallet are reported."""
        with patch(
            "mcp_erc20_actions.server.get_wallet_provider",
            side_effect=ValueError("malformed key"),
        ):
            assert get_balance(BASE_USDC) == "Error: malformed key"

    def test_get_balance_without_wallet_config(self, monkeypatch):
        """Test a missing wallet configuration is reported, not raised."""
        monkeypatch.setenv("ERC20_ACTIONS_WALLET_PASSWORD", "pw")

        result = get_balance(BASE_USDC)

        assert result.startswith("Error: No RPC URL configured")


class TestTransferTool:
    def test_transfer_gasless(self):
        wallet = FakeGaslessWallet()
        set_wallet_provider(wallet)

        result = transfer("1000000", BASE_USDC, DESTINATION)

        assert "using gasless transfer" in result
        assert "0xgaslesshash" in result

    def test_transfer_standard(self):
        wallet = FakeWallet()
        set_wallet_provider(wallet)

        result = transfer("5", UNLISTED_TOKEN, DESTINATION)

        assert "Transaction hash for the transfer: 0xstandardhash" in result
        wallet.send_transaction.assert_called_once()

    def test_transfer_invalid_amount(self):
        """Test schema failures are reported without touching the wallet."""
        wallet = FakeWallet()
        set_wallet_provider(wallet)

        result = transfer("-5", UNLISTED_TOKEN, DESTINATION)

        assert result.startswith("Error: Invalid arguments for transfer")
        wallet.send_transaction.assert_not_called()

    def test_transfer_resolves_name(self):
        """Test name destinations are resolved by the wallet before encoding."""
        wallet = FakeResolvingWallet({"alice.eth": DESTINATION})
        set_wallet_provider(wallet)

        result = transfer("5", UNLISTED_TOKEN, "alice.eth")

        assert "to alice.eth." in result
        _, data = wallet.send_transaction.call_args.args
        assert DESTINATION[2:] in data

    def test_transfer_submission_error(self):
        wallet = FakeWallet()
        wallet.send_transaction.side_effect = Exception("nonce too low")
        set_wallet_provider(wallet)

        result = transfer("5", UNLISTED_TOKEN, DESTINATION)

        assert result == "Error transferring the asset: nonce too low"


class TestWalletProvider:
    def test_wallet_built_once_from_config(self, monkeypatch):
        """Test the global wallet is built lazily and cached."""
        monkeypatch.setenv("ERC20_ACTIONS_WALLET_PASSWORD", "pw")
        built = MagicMock()

        with patch(
            "mcp_erc20_actions.server.Web3WalletProvider.from_config",
            return_value=built,
        ) as mock_from_config:
            assert get_wallet_provider() is built
            assert get_wallet_provider() is built

        mock_from_config.assert_called_once_with(get_config_manager(), "pw")


class TestTools:
    def test_tools_registered(self):
        """Test both actions are exposed as MCP tools."""
        names = {tool.name for tool in mcp._tool_manager.list_tools()}
        assert {"get_balance", "transfer"} <= names


class TestSetupWallet:
    def test_setup_wallet_saves_encrypted_key(self):
        """Test setup stores the RPC URL and an encrypted key."""
        with (
            patch("builtins.input", return_value="https://mainnet.base.org"),
            patch(
                "mcp_erc20_actions.server.EncryptionManager.get_password",
                side_effect=["0x" + "ab" * 32, "pw", "pw"],
            ),
        ):
            setup_wallet()

        config = get_config_manager()
        assert config.get("wallet", "rpc_url") == "https://mainnet.base.org"
        assert config.get("wallet", "encrypted_private_key")
        with open(config.config_path) as f:
            assert "ab" * 32 not in f.read()

    def test_setup_wallet_password_mismatch(self, capsys):
        with (
            patch("builtins.input", return_value=""),
            patch(
                "mcp_erc20_actions.server.EncryptionManager.get_password",
                side_effect=["0x" + "ab" * 32, "pw", "other"],
            ),
        ):
            setup_wallet()

        assert "passwords do not match" in capsys.readouterr().out
        assert get_config_manager().get("wallet", "encrypted_private_key") is None


class TestMain:
    def test_main_configures_logging_and_runs(self):
        with (
            patch("mcp_erc20_actions.server.setup_logging") as mock_setup,
            patch("mcp_erc20_actions.server.mcp.run") as mock_run,
        ):
            main()

        mock_setup.assert_called_once_with(
            level="INFO",
            log_file=None,
            format_str="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        mock_run.assert_called_once_with()


class TestWalletPassword:
    def test_tool_call_never_prompts(self):
        """Test a missing password is reported instead of read from stdin."""
        with patch("mcp_erc20_actions.crypto.getpass.getpass") as mock_getpass:
            result = get_balance(BASE_USDC)

        mock_getpass.assert_not_called()
        assert result.startswith("Error: No wallet password available")
        assert "ERC20_ACTIONS_WALLET_PASSWORD" in result

    def test_password_set_at_startup_is_used(self):
        """Test a password collected by main() builds the wallet."""
        set_wallet_password("from-startup")
        built = MagicMock()

        with patch(
            "mcp_erc20_actions.server.Web3WalletProvider.from_config",
            return_value=built,
        ) as mock_from_config:
            assert get_wallet_provider() is built

        mock_from_config.assert_called_once_with(get_config_manager(), "from-startup")

    def _configure_key(self):
        config = get_config_manager()
        config.set("wallet", "encrypted_private_key", value="c2VjcmV0")
        config.set("wallet", "salt", value="c2FsdA==")
        return config

    def test_main_prompts_on_terminal(self):
        """Test main asks once for the password when a terminal is attached."""
        self._configure_key()
        built = MagicMock()

        with (
            patch("mcp_erc20_actions.server.setup_logging"),
            patch("mcp_erc20_actions.server.mcp.run"),
            patch("mcp_erc20_actions.server.sys.stdin") as mock_stdin,
            patch(
                "mcp_erc20_actions.server.EncryptionManager.get_password",
                return_value="typed",
            ) as mock_prompt,
            patch(
                "mcp_erc20_actions.server.Web3WalletProvider.from_config",
                return_value=built,
            ) as mock_from_config,
        ):
            mock_stdin.isatty.return_value = True
            main()
            get_wallet_provider()

        mock_prompt.assert_called_once_with()
        mock_from_config.assert_called_once_with(get_config_manager(), "typed")

    def test_main_skips_prompt_without_terminal(self):
        """Test main leaves stdin alone when it carries the MCP transport."""
        self._configure_key()

        with (
            patch("mcp_erc20_actions.server.setup_logging"),
            patch("mcp_erc20_actions.server.mcp.run") as mock_run,
            patch("mcp_erc20_actions.server.sys.stdin") as mock_stdin,
            patch("mcp_erc20_actions.server.EncryptionManager.get_password") as mock_prompt,
        ):
            mock_stdin.isatty.return_value = False
            main()

        mock_prompt.assert_not_called()
        mock_run.assert_called_once_with()
