"""
Tests for configuration classes and the configuration manager.
"""

import pytest

from poolwatch.config.base import BaseConfig
from poolwatch.config.chains import ALCHEMY_MAINNET_URL, PUBLIC_MAINNET_URL, ChainConfig
from poolwatch.config.manager import ConfigManager, get_config, reload_config
from poolwatch.config.monitor import USDC_ADDRESS, USDC_WETH_PAIR, WETH_ADDRESS, MonitorConfig
from poolwatch.errors import ConfigError


class TestBaseConfig:
    """Environment helpers and validation."""

    def test_invalid_environment(self):
        """Test an unknown environment is rejected."""
        with pytest.raises(ConfigError):
            BaseConfig(ENVIRONMENT="moon")

    def test_invalid_log_level(self):
        """Test setup_logging rejects unknown level names."""
        with pytest.raises(ConfigError, match="Invalid log level"):
            BaseConfig(ENVIRONMENT="local").setup_logging("LOUD")

    def test_get_env_int(self, monkeypatch):
        """Test integer parsing and its error."""
        monkeypatch.setenv("POOLWATCH_TEST_INT", "42")
        assert BaseConfig.get_env_int("POOLWATCH_TEST_INT") == 42

        monkeypatch.setenv("POOLWATCH_TEST_INT", "forty-two")
        with pytest.raises(ConfigError):
            BaseConfig.get_env_int("POOLWATCH_TEST_INT")

    def test_get_env_required(self, monkeypatch):
        """Test a missing required variable raises."""
        monkeypatch.delenv("POOLWATCH_TEST_MISSING", raising=False)
        with pytest.raises(ConfigError):
            BaseConfig.get_env("POOLWATCH_TEST_MISSING", required=True)

    def test_get_env_bool(self, monkeypatch):
        """Test boolean parsing and the default for unset variables."""
        monkeypatch.setenv("POOLWATCH_TEST_BOOL", "Yes")
        monkeypatch.delenv("POOLWATCH_TEST_UNSET", raising=False)

        assert BaseConfig.get_env_bool("POOLWATCH_TEST_BOOL") is True
        assert BaseConfig.get_env_bool("POOLWATCH_TEST_UNSET", default=True) is True

        monkeypatch.setenv("POOLWATCH_TEST_BOOL", "off")
        assert BaseConfig.get_env_bool("POOLWATCH_TEST_BOOL", default=True) is False

    def test_get_env_float(self, monkeypatch):
        """Test float parsing and the default."""
        monkeypatch.delenv("POOLWATCH_TEST_FLOAT", raising=False)
        assert BaseConfig.get_env_float("POOLWATCH_TEST_FLOAT", 2.5) == 2.5

        monkeypatch.setenv("POOLWATCH_TEST_FLOAT", "fast")
        with pytest.raises(ConfigError, match="must be a number"):
            BaseConfig.get_env_float("POOLWATCH_TEST_FLOAT")


class TestMonitorConfig:
    """Monitored pool settings."""

    def test_defaults_seed_usdc_weth(self):
        """Test the default seed is the USDC/WETH pair in pool order."""
        config = MonitorConfig(
            ENVIRONMENT="local",
            POOL_ADDRESS=USDC_WETH_PAIR,
            TOKEN0_ADDRESS=USDC_ADDRESS,
            TOKEN0_SYMBOL="USDC",
            TOKEN0_DECIMALS=6,
            TOKEN1_ADDRESS=WETH_ADDRESS,
            TOKEN1_SYMBOL="WETH",
            TOKEN1_DECIMALS=18,
        )

        assert config.seed_tokens == [
            {"address": USDC_ADDRESS, "symbol": "USDC", "decimals": 6},
            {"address": WETH_ADDRESS, "symbol": "WETH", "decimals": 18},
        ]

    @pytest.mark.parametrize("overrides", [
        {"BASE_TOKEN_INDEX": 2},
        {"TOKEN0_DECIMALS": 256},
        {"TOKEN1_DECIMALS": -1},
        {"SEEN_TX_LIMIT": 0},
        {"WATCH_POOL": False, "WATCH_ROUTER": False},
    ])
    def test_invalid_values(self, overrides):
        """Test out-of-range values are rejected."""
        with pytest.raises(ConfigError):
            MonitorConfig(ENVIRONMENT="local", **overrides)


class TestChainConfig:
    """RPC URL selection."""

    def test_explicit_url_wins(self):
        """Test ETHEREUM_RPC_URL takes precedence over an Alchemy key."""
        config = ChainConfig(ENVIRONMENT="local", ETHEREUM_RPC_URL="http://localhost:8545", ALCHEMY_API_KEY="key")
        assert config.ethereum_rpc_url == "http://localhost:8545"

    def test_alchemy_url(self):
        """Test the Alchemy URL is built from the API key."""
        config = ChainConfig(ENVIRONMENT="local", ETHEREUM_RPC_URL=None, ALCHEMY_API_KEY="key")
        assert config.ethereum_rpc_url == ALCHEMY_MAINNET_URL.format(api_key="key")

    def test_public_fallback(self):
        """Test a public node is used without URL or key."""
        config = ChainConfig(ENVIRONMENT="local", ETHEREUM_RPC_URL=None, ALCHEMY_API_KEY=None)
        assert config.ethereum_rpc_url == PUBLIC_MAINNET_URL
        assert config.get_chain_id("ethereum") == 1

    def test_unsupported_chain(self):
        """Test unknown chain names raise ValueError."""
        config = ChainConfig(ENVIRONMENT="local")
        with pytest.raises(ValueError, match="Unsupported chain"):
            config.get_chain_config("solana")


class TestConfigManager:
    """Combined configuration."""

    def test_environment_override(self):
        """Test the environment override is validated."""
        assert ConfigManager(environment="staging").environment == "staging"
        with pytest.raises(ConfigError):
            ConfigManager(environment="moon")

    def test_api_key_masked(self):
        """Test to_dict never exposes the Alchemy key."""
        manager = ConfigManager(environment="local")
        manager.chains.ALCHEMY_API_KEY = "secret"

        assert manager.to_dict()["chains"]["ALCHEMY_API_KEY"] == "***"

    def test_monitor_chain_config(self):
        """Test the combined dictionary carries pool and chain settings."""
        manager = ConfigManager(environment="local")
        combined = manager.get_monitor_chain_config()

        assert combined["chain_id"] == 1
        assert combined["pool_address"] == manager.monitor.POOL_ADDRESS

    def test_global_instance(self):
        """Test get_config caches and reload_config replaces the instance."""
        first = reload_config("local")

        assert get_config() is first
        assert reload_config("local") is not first
