"""
Token metadata cache.

Resolves a token address to its symbol and decimals. Lookups are memoized
for the lifetime of the cache, including fallbacks for tokens whose
``symbol()``/``decimals()`` cannot be read, so a failing token is never
queried twice.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol

from eth_utils.address import is_address, to_checksum_address
from web3 import Web3

from ..errors import MetadataError

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18
FALLBACK_SYMBOL_LENGTH = 10

ERC20_METADATA_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
]

# Pre-ERC20 tokens (MKR, SAI) return symbol() as bytes32
BYTES32_SYMBOL_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "bytes32"}],
        "type": "function",
    },
]


def normalize_address(address: str) -> str:
    """Lowercase cache key for an address."""
    return str(address).strip().lower()


def display_address(address: str) -> str:
    """Checksummed form when the address is valid, else the input unchanged."""
    if is_address(address):
        return to_checksum_address(address)
    return str(address)


@dataclass(frozen=True)
class TokenInfo:
    """Immutable token metadata."""

    address: str
    symbol: str
    decimals: int

    @classmethod
    def fallback(cls, address: str) -> "TokenInfo":
        """Metadata used when the token contract cannot be read."""
        shown = display_address(address)
        return cls(
            address=normalize_address(address),
            symbol=shown[:FALLBACK_SYMBOL_LENGTH],
            decimals=DEFAULT_DECIMALS,
        )


class TokenReader(Protocol):
    """Read-only access to a token contract's metadata entry points."""

    async def symbol(self, address: str) -> str:
        ...

    async def decimals(self, address: str) -> int:
        ...


class Web3TokenReader:
    """TokenReader backed by a synchronous web3 instance, one worker thread per call."""

    def __init__(self, web3: Web3):
        self.web3 = web3

    def _contract(self, address: str, abi: List[Dict]):
        return self.web3.eth.contract(address=to_checksum_address(address), abi=abi)

    def _read_symbol(self, address: str) -> str:
        try:
            return self._contract(address, ERC20_METADATA_ABI).functions.symbol().call()
        except Exception as e:
            logger.debug(f"string symbol() failed for {address}, trying bytes32: {e}")
            raw = self._contract(address, BYTES32_SYMBOL_ABI).functions.symbol().call()
            return raw.rstrip(b"\x00").decode("utf-8", errors="ignore")

    def _read_decimals(self, address: str) -> int:
        return self._contract(address, ERC20_METADATA_ABI).functions.decimals().call()

    async def symbol(self, address: str) -> str:
        return await asyncio.to_thread(self._read_symbol, address)

    async def decimals(self, address: str) -> int:
        return await asyncio.to_thread(self._read_decimals, address)


class TokenMetadataCache:
    """
    Memoized address -> TokenInfo resolution.

    One instance per monitored pool. Entries are never evicted.
    """

    def __init__(
        self,
        reader: Optional[TokenReader] = None,
        seed: Optional[Iterable[TokenInfo]] = None,
    ):
        """
        Args:
            reader: Source for symbol()/decimals(); None resolves every miss to a fallback
            seed: Tokens known up front (the pool's token0 and token1)
        """
        self.reader = reader
        self._cache: Dict[str, TokenInfo] = {}
        self._inflight: Dict[str, "asyncio.Future[TokenInfo]"] = {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        for info in seed or ():
            self.seed(info)

    def seed(self, info: TokenInfo) -> TokenInfo:
        """Insert a known token, normalizing its address."""
        entry = TokenInfo(
            address=normalize_address(info.address),
            symbol=info.symbol,
            decimals=info.decimals,
        )
        self._cache[entry.address] = entry
        return entry

    def get(self, address: str) -> Optional[TokenInfo]:
        """Cached entry for an address, without touching the network."""
        return self._cache.get(normalize_address(address))

    def __contains__(self, address: str) -> bool:
        return normalize_address(address) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    async def resolve(self, address: str) -> TokenInfo:
        """
        Resolve token metadata, reading the contract on a cache miss.

        symbol() and decimals() are requested concurrently. A field that
        cannot be read falls back (symbol: first 10 characters of the
        address, decimals: 18) and the result is cached either way.

        Args:
            address: Token contract address, any case

        Returns:
            TokenInfo for the address
        """
        key = normalize_address(address)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        # Concurrent misses for one key share a single read
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(address))
            self._inflight[key] = task
            task.add_done_callback(lambda _: self._inflight.pop(key, None))
        info = await asyncio.shield(task)
        return self._cache.setdefault(key, info)

    async def resolve_many(self, addresses: Iterable[str]) -> List[TokenInfo]:
        """Resolve several addresses, preserving order."""
        return list(await asyncio.gather(*(self.resolve(a) for a in addresses)))

    async def _fetch(self, address: str) -> TokenInfo:
        fallback = TokenInfo.fallback(address)
        if self.reader is None or not is_address(address):
            return fallback

        symbol_result, decimals_result = await asyncio.gather(
            self.reader.symbol(address),
            self.reader.decimals(address),
            return_exceptions=True,
        )

        try:
            symbol = self._validate_symbol(symbol_result)
        except MetadataError as e:
            self.logger.warning(f"symbol() unavailable for {address}: {e}")
            symbol = fallback.symbol

        try:
            decimals = self._validate_decimals(decimals_result)
        except MetadataError as e:
            self.logger.warning(f"decimals() unavailable for {address}: {e}")
            decimals = fallback.decimals

        return TokenInfo(address=fallback.address, symbol=symbol, decimals=decimals)

    @staticmethod
    def _validate_symbol(result) -> str:
        if isinstance(result, BaseException):
            raise MetadataError(str(result) or type(result).__name__)
        if not isinstance(result, str) or not result.strip():
            raise MetadataError(f"unusable symbol {result!r}")
        return result.strip()

    @staticmethod
    def _validate_decimals(result) -> int:
        if isinstance(result, BaseException):
            raise MetadataError(str(result) or type(result).__name__)
        if isinstance(result, bool) or not isinstance(result, int) or not 0 <= result <= 255:
            raise MetadataError(f"unusable decimals {result!r}")
        return result
