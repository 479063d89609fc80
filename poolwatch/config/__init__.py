"""
Configuration management for poolwatch.

Example:
    from poolwatch.config import get_config

    config = get_config()
    rpc_url = config.chains.get_rpc_url("ethereum")
    pool = config.monitor.POOL_ADDRESS
"""

from ..errors import ConfigError
from .base import BaseConfig
from .chains import ChainConfig
from .manager import ConfigManager, get_config, reload_config
from .monitor import MonitorConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "MonitorConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
