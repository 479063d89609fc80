"""
Per-pool monitoring context.

Everything that carries state for one monitored pool (token cache, reserve
tracker, seen-transaction set) hangs off a PoolContext instance. Two pools
in one process get two contexts and share nothing but the read-only
selector registry.
"""

import logging
from typing import Optional

from eth_typing import ChecksumAddress
from eth_utils.address import to_checksum_address

from ..config.monitor import MonitorConfig
from ..decoding.calldata import CalldataDecoder
from ..decoding.events import EventDecoder
from ..decoding.models import Scope
from ..decoding.selectors import SelectorRegistry
from ..pool.state import DEFAULT_SEEN_LIMIT
from ..pool.tracker import PoolStateTracker
from ..tokens.metadata import TokenInfo, TokenMetadataCache, TokenReader

logger = logging.getLogger(__name__)

_SHARED_REGISTRY: Optional[SelectorRegistry] = None


def default_registry() -> SelectorRegistry:
    """The built-in router/pool tables, built once."""
    global _SHARED_REGISTRY
    if _SHARED_REGISTRY is None:
        _SHARED_REGISTRY = SelectorRegistry()
    return _SHARED_REGISTRY


class PoolContext:
    """
    Decoders, token cache and state tracker for one pool and its router.

    Args:
        pool_address: Pair contract
        router_address: Router whose calls are decoded (None to ignore the router)
        token0: Pool token0, seeded into the cache
        token1: Pool token1, seeded into the cache
        base_index: Pool token the price is quoted for
        seen_limit: Swap/Sync correlation set capacity
        reader: Token metadata source for addresses outside the seed
        registry: Selector tables; defaults to the built-in ones
    """

    def __init__(
        self,
        pool_address: str,
        router_address: Optional[str],
        token0: TokenInfo,
        token1: TokenInfo,
        base_index: int = 1,
        seen_limit: int = DEFAULT_SEEN_LIMIT,
        reader: Optional[TokenReader] = None,
        registry: Optional[SelectorRegistry] = None,
    ):
        self.pool_address: ChecksumAddress = to_checksum_address(pool_address)
        self.router_address: Optional[ChecksumAddress] = (
            to_checksum_address(router_address) if router_address else None
        )
        self.registry = registry or default_registry()
        self.tokens = TokenMetadataCache(reader=reader, seed=[token0, token1])
        self.token0 = self.tokens.get(token0.address)
        self.token1 = self.tokens.get(token1.address)
        self.calldata = CalldataDecoder(
            self.registry,
            self.tokens,
            pool_tokens=(token0.address, token1.address),
        )
        self.events = EventDecoder(self.registry)
        self.tracker = PoolStateTracker(self.token0, self.token1, base_index=base_index, seen_limit=seen_limit)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    def from_config(
        cls,
        config: MonitorConfig,
        reader: Optional[TokenReader] = None,
        watch_router: bool = True,
    ) -> "PoolContext":
        """Build a context from MonitorConfig values."""
        token0, token1 = (TokenInfo(**token) for token in config.seed_tokens)
        return cls(
            pool_address=config.POOL_ADDRESS,
            router_address=config.ROUTER_ADDRESS if watch_router else None,
            token0=token0,
            token1=token1,
            base_index=config.BASE_TOKEN_INDEX,
            seen_limit=config.SEEN_TX_LIMIT,
            reader=reader,
        )

    def scope_for(self, address: Optional[str]) -> Optional[Scope]:
        """Which decoder scope a transaction target or log emitter belongs to."""
        if not address:
            return None
        address = address.lower()
        if address == self.pool_address.lower():
            return Scope.POOL
        if self.router_address and address == self.router_address.lower():
            return Scope.ROUTER
        return None

    def token_for_log(self, address: Optional[str]) -> Optional[TokenInfo]:
        """Seeded token info for a log emitter, or None for the pool's LP token."""
        if address is None:
            return None
        return self.tokens.get(address)

    def __repr__(self) -> str:
        return (
            f"PoolContext(pool={self.pool_address}, router={self.router_address}, "
            f"pair={self.token0.symbol}/{self.token1.symbol})"
        )
