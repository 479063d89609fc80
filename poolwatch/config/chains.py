"""
Chain connection settings for poolwatch.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .base import BaseConfig

ALCHEMY_MAINNET_URL = "https://eth-mainnet.g.alchemy.com/v2/{api_key}"
PUBLIC_MAINNET_URL = "https://eth.llamarpc.com"


@dataclass
class ChainConfig(BaseConfig):
    """Connection and polling settings for the monitored chain."""

    ALCHEMY_API_KEY: Optional[str] = BaseConfig.get_env("ALCHEMY_API_KEY")
    ETHEREUM_RPC_URL: Optional[str] = BaseConfig.get_env("ETHEREUM_RPC_URL")

    ETHEREUM_CHAIN_ID: int = 1

    # Polling settings
    POLL_INTERVAL_SECONDS: float = BaseConfig.get_env_float("POLL_INTERVAL_SECONDS", 2.0)
    MAX_RETRY_ATTEMPTS: int = BaseConfig.get_env_int("MAX_RETRY_ATTEMPTS", 3)
    RETRY_DELAY_SECONDS: float = BaseConfig.get_env_float("RETRY_DELAY_SECONDS", 1.0)
    REQUEST_TIMEOUT_SECONDS: float = BaseConfig.get_env_float("REQUEST_TIMEOUT_SECONDS", 30.0)

    @property
    def ethereum_rpc_url(self) -> str:
        """Explicit RPC URL, else Alchemy when a key is present, else a public node."""
        if self.ETHEREUM_RPC_URL:
            return self.ETHEREUM_RPC_URL
        if self.ALCHEMY_API_KEY:
            return ALCHEMY_MAINNET_URL.format(api_key=self.ALCHEMY_API_KEY)
        return PUBLIC_MAINNET_URL

    @property
    def supported_chains(self) -> Dict[str, Dict]:
        """Get configuration for all supported chains."""
        return {
            "ethereum": {
                "chain_id": self.ETHEREUM_CHAIN_ID,
                "rpc_url": self.ethereum_rpc_url,
                "native_token": "ETH",
                "explorer_url": "https://etherscan.io",
            },
        }

    def get_chain_config(self, chain_name: str) -> Dict:
        """Get configuration for a specific chain."""
        if chain_name not in self.supported_chains:
            raise ValueError(f"Unsupported chain: {chain_name}")
        return self.supported_chains[chain_name]

    def get_rpc_url(self, chain_name: str) -> str:
        """Get RPC URL for a specific chain."""
        return self.get_chain_config(chain_name)["rpc_url"]

    def get_chain_id(self, chain_name: str) -> int:
        """Get chain ID for a specific chain."""
        return self.get_chain_config(chain_name)["chain_id"]
