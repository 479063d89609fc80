"""
Polling chain feed backed by web3.

On every new block the feed reads, in this order:

1. the block with full transactions (confirms pending router transactions
   and surfaces mined pool calls),
2. the pool's logs for the block, sorted by log index so a Swap always
   precedes the Sync emitted by the same transaction,
3. pending router transactions from the node's ``pending`` block, when the
   node exposes one.

Records go onto the processor's queue; ordering within a pool is the
queue's order. Node calls are synchronous web3 calls run in worker threads
and retried with exponential backoff.
"""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from web3 import Web3

from ..decoding.abis import UNISWAP_V2_PAIR_ABI
from ..errors import ConfigError, FeedError, NetworkError
from ..monitor.processor import MonitorProcessor
from ..monitor.records import RawBlock, RawLog, RawTransaction
from ..tokens.metadata import normalize_address
from .errors import ErrorHandler

logger = logging.getLogger(__name__)


@dataclass
class FeedConfig:
    """Configuration for the polling feed."""

    poll_interval: float = 2.0
    max_retries: int = 3
    retry_delay: float = 1.0
    watch_pool: bool = True
    watch_router: bool = True


class Web3PollingFeed:
    """
    Feeds one pool's processor from a web3 node.

    Args:
        web3: Connected (synchronous) Web3 instance
        processor: The pool's processing loop
        config: Polling and retry settings
    """

    def __init__(self, web3: Web3, processor: MonitorProcessor, config: Optional[FeedConfig] = None):
        self.web3 = web3
        self.processor = processor
        self.context = processor.context
        self.config = config or FeedConfig()
        self.last_block: Optional[int] = None
        self._stopped = asyncio.Event()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    async def _call(self, fn: Callable, *args, **kwargs) -> Any:
        return await asyncio.to_thread(fn, *args, **kwargs)

    async def _retry_operation(self, operation, *args, **kwargs) -> Any:
        """Retry an operation with exponential backoff and error classification."""
        name = getattr(operation, "__name__", str(operation))

        for attempt in range(self.config.max_retries):
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                self.error_handler.log_error(
                    e,
                    {
                        "attempt": attempt + 1,
                        "max_retries": self.config.max_retries,
                        "operation": name,
                    },
                )

                if not self.error_handler.should_retry(e, attempt, self.config.max_retries):
                    self.logger.info(f"Not retrying error: {e}")
                    raise

                if attempt == self.config.max_retries - 1:
                    raise

                delay = self.error_handler.get_retry_delay(e, attempt, self.config.retry_delay)
                self.logger.info(
                    f"Retrying {name} in {delay}s... (attempt {attempt + 1}/{self.config.max_retries})"
                )
                await asyncio.sleep(delay)

        raise FeedError(f"{name}: no attempts made (max_retries={self.config.max_retries})")

    async def _block_number(self) -> int:
        return await self._call(lambda: self.web3.eth.block_number)

    async def _get_block(self, identifier) -> Any:
        return await self._call(self.web3.eth.get_block, identifier, True)

    async def _get_logs(self, block_number: int) -> List[Any]:
        return await self._call(
            self.web3.eth.get_logs,
            {
                "address": self.context.pool_address,
                "fromBlock": block_number,
                "toBlock": block_number,
            },
        )

    def _pair(self):
        return self.web3.eth.contract(address=self.context.pool_address, abi=UNISWAP_V2_PAIR_ABI)

    async def _get_reserves(self):
        return await self._call(self._pair().functions.getReserves().call)

    async def _get_pair_tokens(self) -> Tuple[str, str]:
        functions = self._pair().functions
        token0 = await self._call(functions.token0().call)
        token1 = await self._call(functions.token1().call)
        return token0, token1

    async def _check_pair_tokens(self) -> None:
        """Refuse to price a pair whose token0/token1 differ from the seeded tokens."""
        token0, token1 = await self._retry_operation(self._get_pair_tokens)
        expected = (self.context.token0.address, self.context.token1.address)
        actual = (normalize_address(token0), normalize_address(token1))
        if actual != expected:
            raise ConfigError(
                f"Pool {self.context.pool_address} holds token0={token0}, token1={token1} "
                f"but {self.context.token0.symbol}/{self.context.token1.symbol} "
                f"({expected[0]}, {expected[1]}) are configured; set TOKEN0_*/TOKEN1_* for this pair"
            )

    async def initialize(self) -> None:
        """Check the pair's tokens, seed reserves from getReserves() and remember the starting block."""
        if self.config.watch_pool:
            await self._check_pair_tokens()
            reserve0, reserve1, _ = await self._retry_operation(self._get_reserves)
            self.context.tracker.initialize(reserve0, reserve1)
        self.last_block = await self._retry_operation(self._block_number)
        self.logger.info(f"📡 Feed starting after block {self.last_block} for {self.context}")

    async def poll_once(self) -> int:
        """
        Enqueue records for every block mined since the last poll.

        Returns:
            Number of records enqueued
        """
        latest = await self._retry_operation(self._block_number)
        if self.last_block is None:
            self.last_block = latest - 1

        count = 0
        for number in range(self.last_block + 1, latest + 1):
            count += await self._enqueue_block(number)
            self.last_block = number

        if self.config.watch_router and self.context.router_address:
            count += await self._enqueue_pending()
        return count

    async def _enqueue_block(self, number: int) -> int:
        # Read everything first; a failed read leaves nothing queued for the block
        block = await self._retry_operation(self._get_block, number)
        logs = []
        if self.config.watch_pool:
            logs = await self._retry_operation(self._get_logs, number)

        records = [RawBlock.from_dict(block)]
        records.extend(RawLog.from_dict(log) for log in sorted(logs, key=lambda entry: entry["logIndex"]))
        for record in records:
            await self.processor.submit(record)
        return len(records)

    async def _enqueue_pending(self) -> int:
        try:
            block = await self._retry_operation(self._get_block, "pending")
        except Exception as e:
            # Not every node serves a pending block
            self.logger.debug(f"Pending block unavailable: {e}")
            return 0

        router = self.context.router_address.lower()
        count = 0
        for tx in block.get("transactions") or ():
            if isinstance(tx, (bytes, str)) or (tx.get("to") or "").lower() != router:
                continue
            record = dataclasses.replace(RawTransaction.from_dict(tx), block_number=None)
            if record.hash in self.processor.pending:
                continue
            await self.processor.submit(record)
            count += 1
        return count

    async def run(self) -> None:
        """Poll until ``stop`` is called."""
        if not await self._call(self.web3.is_connected):
            raise NetworkError("Web3 provider is not connected")
        await self.initialize()

        while not self._stopped.is_set():
            try:
                count = await self.poll_once()
                if count:
                    self.logger.debug(f"Enqueued {count} records up to block {self.last_block}")
            except FeedError:
                raise
            except Exception as e:
                self.logger.error(f"❌ Poll failed after retries: {e}")
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.config.poll_interval)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stopped.set()
