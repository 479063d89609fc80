"""
Monitored contracts and tracker limits.
"""

from dataclasses import dataclass
from typing import Dict, List

from .base import BaseConfig
from ..errors import ConfigError

USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC_WETH_PAIR = "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"
UNISWAP_V2_ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"


@dataclass
class MonitorConfig(BaseConfig):
    """Which pool and router to watch, and how the pool's tokens are seeded."""

    POOL_ADDRESS: str = BaseConfig.get_env("POOL_ADDRESS", USDC_WETH_PAIR)
    ROUTER_ADDRESS: str = BaseConfig.get_env("ROUTER_ADDRESS", UNISWAP_V2_ROUTER)

    TOKEN0_ADDRESS: str = BaseConfig.get_env("TOKEN0_ADDRESS", USDC_ADDRESS)
    TOKEN0_SYMBOL: str = BaseConfig.get_env("TOKEN0_SYMBOL", "USDC")
    TOKEN0_DECIMALS: int = BaseConfig.get_env_int("TOKEN0_DECIMALS", 6)
    TOKEN1_ADDRESS: str = BaseConfig.get_env("TOKEN1_ADDRESS", WETH_ADDRESS)
    TOKEN1_SYMBOL: str = BaseConfig.get_env("TOKEN1_SYMBOL", "WETH")
    TOKEN1_DECIMALS: int = BaseConfig.get_env_int("TOKEN1_DECIMALS", 18)

    # Index (0 or 1) of the pool token the price is quoted for
    BASE_TOKEN_INDEX: int = BaseConfig.get_env_int("BASE_TOKEN_INDEX", 1)

    SEEN_TX_LIMIT: int = BaseConfig.get_env_int("SEEN_TX_LIMIT", 1000)
    PENDING_TX_LIMIT: int = BaseConfig.get_env_int("PENDING_TX_LIMIT", 5000)
    QUEUE_MAXSIZE: int = BaseConfig.get_env_int("QUEUE_MAXSIZE", 10000)

    # CLI --no-pool / --no-router override these
    WATCH_POOL: bool = BaseConfig.get_env_bool("WATCH_POOL", True)
    WATCH_ROUTER: bool = BaseConfig.get_env_bool("WATCH_ROUTER", True)

    def _validate_config(self):
        super()._validate_config()
        if self.BASE_TOKEN_INDEX not in (0, 1):
            raise ConfigError(f"BASE_TOKEN_INDEX must be 0 or 1, got: {self.BASE_TOKEN_INDEX}")
        for decimals in (self.TOKEN0_DECIMALS, self.TOKEN1_DECIMALS):
            if not 0 <= decimals <= 255:
                raise ConfigError(f"Token decimals out of range: {decimals}")
        if self.SEEN_TX_LIMIT <= 0:
            raise ConfigError("SEEN_TX_LIMIT must be positive")
        if not (self.WATCH_POOL or self.WATCH_ROUTER):
            raise ConfigError("WATCH_POOL and WATCH_ROUTER are both disabled; nothing to monitor")

    @property
    def seed_tokens(self) -> List[Dict]:
        """The pool's two tokens, in pool order."""
        return [
            {
                "address": self.TOKEN0_ADDRESS,
                "symbol": self.TOKEN0_SYMBOL,
                "decimals": self.TOKEN0_DECIMALS,
            },
            {
                "address": self.TOKEN1_ADDRESS,
                "symbol": self.TOKEN1_SYMBOL,
                "decimals": self.TOKEN1_DECIMALS,
            },
        ]
