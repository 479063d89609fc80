"""
Configuration manager for poolwatch.

Combines the configuration classes into a single object. Only the CLI
bootstrap reads it; the decoding and tracking core receives explicit values.
"""

import logging
from typing import Dict, Any, Optional

from .base import BaseConfig
from .chains import ChainConfig
from .monitor import MonitorConfig
from ..errors import ConfigError

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.
    """

    def __init__(self, environment: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._chain_config = None
        self._monitor_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
                self._base_config._validate_config()

            self._chain_config = ChainConfig()
            self._monitor_config = MonitorConfig()

            logger.debug(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def chains(self) -> ChainConfig:
        """Get chain configuration."""
        return self._chain_config

    @property
    def monitor(self) -> MonitorConfig:
        """Get monitored-contract configuration."""
        return self._monitor_config

    def get_monitor_chain_config(self, chain: str = "ethereum") -> Dict[str, Any]:
        """
        Get combined monitor and chain configuration.

        Args:
            chain: Chain name

        Returns:
            Combined configuration dictionary
        """
        chain_config = self.chains.get_chain_config(chain)
        return {
            "chain": chain,
            "chain_id": chain_config["chain_id"],
            "rpc_url": chain_config["rpc_url"],
            "pool_address": self.monitor.POOL_ADDRESS,
            "router_address": self.monitor.ROUTER_ADDRESS,
            "poll_interval": self.chains.POLL_INTERVAL_SECONDS,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        chains = self.chains.to_dict() if self.chains else {}
        # Never echo the API key
        if chains.get("ALCHEMY_API_KEY"):
            chains["ALCHEMY_API_KEY"] = "***"
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "chains": chains,
            "monitor": self.monitor.to_dict() if self.monitor else {},
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: Optional[str] = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)

    return _config_manager


def reload_config(environment: Optional[str] = None) -> ConfigManager:
    """Reload the global configuration manager."""
    return get_config(environment=environment, force_reload=True)
