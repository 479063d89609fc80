"""
Single-consumer processing loop for one pool.

The chain feed puts raw records (RawTransaction, RawLog, RawBlock) on an
asyncio.Queue; ``MonitorProcessor.run`` takes them off one at a time, in
order, and drives the decoders, the state tracker and the presenter. No
two records for a pool are ever processed concurrently.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ..decoding.models import DecodedEvent, DecodeResult, DecodeStatus, Scope
from ..pool.state import normalize_hash
from ..pool.tracker import LiquidityOutcome, SwapOutcome, SyncOutcome, TrackerOutcome
from .context import PoolContext
from .presenter import Presenter
from .records import RawBlock, RawLog, RawRecord, RawTransaction

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_MAXSIZE = 10000
DEFAULT_PENDING_LIMIT = 5000


class PendingBook:
    """
    Pending router transactions awaiting inclusion.

    Bounded: when full, the oldest entry is dropped. A mined block confirms
    (and removes) every pending transaction it contains.
    """

    def __init__(self, limit: int = DEFAULT_PENDING_LIMIT):
        self.limit = limit
        self._pending: "OrderedDict[str, RawTransaction]" = OrderedDict()
        self.seen_count = 0
        self.confirmed_count = 0
        self.evicted_count = 0

    def add(self, tx: RawTransaction) -> bool:
        """Remember a pending transaction. Returns False if it was already known."""
        key = normalize_hash(tx.hash)
        if key in self._pending:
            return False
        self._pending[key] = tx
        self.seen_count += 1
        while len(self._pending) > self.limit:
            self._pending.popitem(last=False)
            self.evicted_count += 1
        return True

    def confirm(self, block: RawBlock) -> List[RawTransaction]:
        """Remove and return the pending transactions included in ``block``."""
        confirmed = []
        for tx_hash in block.transaction_hashes:
            tx = self._pending.pop(normalize_hash(tx_hash), None)
            if tx is not None:
                confirmed.append(tx)
        self.confirmed_count += len(confirmed)
        return confirmed

    def __contains__(self, tx_hash) -> bool:
        return normalize_hash(tx_hash) in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def stats(self) -> Dict[str, int]:
        return {
            "pending": len(self._pending),
            "seen": self.seen_count,
            "confirmed": self.confirmed_count,
            "evicted": self.evicted_count,
        }


class MonitorProcessor:
    """
    Consumes raw records for one pool from a queue.

    Args:
        context: The pool's decoders, token cache and tracker
        presenter: Output renderer; defaults to one for the context's tokens
        maxsize: Queue capacity
        pending_limit: PendingBook capacity
    """

    def __init__(
        self,
        context: PoolContext,
        presenter: Optional[Presenter] = None,
        maxsize: int = DEFAULT_QUEUE_MAXSIZE,
        pending_limit: int = DEFAULT_PENDING_LIMIT,
    ):
        self.context = context
        self.presenter = presenter or Presenter(context.token0, context.token1)
        self.queue: "asyncio.Queue[Optional[RawRecord]]" = asyncio.Queue(maxsize=maxsize)
        self.pending = PendingBook(pending_limit)
        self.processed = 0
        self.failures = 0
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def submit(self, record: RawRecord) -> None:
        await self.queue.put(record)

    async def stop(self) -> None:
        """Ask ``run`` to return once everything queued before this call is handled."""
        await self.queue.put(None)

    async def run(self) -> None:
        """Process records until ``stop`` is called or the task is cancelled."""
        self.logger.info(f"Processing records for {self.context}")
        while True:
            record = await self.queue.get()
            try:
                if record is None:
                    break
                await self.handle(record)
            except Exception as e:
                # One bad record must not stop the pool's stream
                self.failures += 1
                self.logger.error(f"Failed to process {type(record).__name__}: {e}", exc_info=True)
            finally:
                self.queue.task_done()
        self.logger.info(f"Stopped after {self.processed} records; pending book {self.pending.stats()}")

    async def handle(self, record: RawRecord) -> Any:
        """Process one record immediately, bypassing the queue."""
        self.processed += 1
        if isinstance(record, RawLog):
            return self.handle_log(record)
        if isinstance(record, RawBlock):
            return await self.handle_block(record)
        if isinstance(record, RawTransaction):
            return await self.handle_transaction(record)
        raise TypeError(f"Unsupported record type: {type(record).__name__}")

    async def handle_transaction(self, tx: RawTransaction) -> Optional[DecodeResult]:
        """
        Decode a router or pool call.

        Pending router transactions are also remembered in the pending book;
        a pending transaction seen twice is only rendered once.
        """
        scope = self.context.scope_for(tx.to)
        if scope is None:
            return None
        if tx.block_number is None and scope is Scope.ROUTER and not self.pending.add(tx):
            return None

        result = await self.context.calldata.decode(tx.input, scope)
        if not self._report(result, tx):
            return result

        if scope is Scope.ROUTER:
            title = "🔀 Router transaction" + (" (pending)" if tx.block_number is None else "")
        else:
            title = "🏊 Pool transaction"
        self.presenter.emit(self.presenter.render_transaction(title, tx, result.operation))
        return result

    async def handle_block(self, block: RawBlock) -> List[RawTransaction]:
        """Confirm pending transactions and decode mined calls that were never seen pending."""
        confirmed = self.pending.confirm(block)
        if confirmed:
            self.presenter.emit(self.presenter.render_confirmed(block.number, confirmed))

        confirmed_hashes = {normalize_hash(tx.hash) for tx in confirmed}
        for tx in block.transactions:
            if tx.to is None or normalize_hash(tx.hash) in confirmed_hashes:
                continue
            await self.handle_transaction(tx)
        return confirmed

    def handle_log(self, log: RawLog) -> Optional[TrackerOutcome]:
        """Decode a log and, for pool events, apply it to the tracker."""
        event = self.context.events.decode_log(
            log.address,
            log.topics,
            log.data,
            tx_hash=log.transaction_hash,
            log_index=log.log_index,
        )
        if event.is_unknown:
            if event.status is DecodeStatus.MALFORMED:
                self.logger.warning(f"Malformed log from {log.address} in {log.transaction_hash}: {event.reason}")
            else:
                self.logger.debug(f"Unrecognized log from {log.address}: {event.reason}")
            return None

        outcome = None
        if self.context.scope_for(log.address) is Scope.POOL:
            outcome = self.context.tracker.apply(event)

        self.presenter.emit(self._render_event(event, outcome))
        return outcome

    def _render_event(self, event: DecodedEvent, outcome: Optional[TrackerOutcome]) -> List[str]:
        if isinstance(outcome, SwapOutcome):
            return self.presenter.render_swap(outcome)
        if isinstance(outcome, SyncOutcome):
            return self.presenter.render_sync(outcome)
        if isinstance(outcome, LiquidityOutcome):
            return self.presenter.render_liquidity(outcome)
        return self.presenter.render_event(event, self.context.token_for_log(event.address))

    def _report(self, result: DecodeResult, tx: RawTransaction) -> bool:
        """Log recognition/decode failures. Returns True when there is something to render."""
        if result.status is DecodeStatus.UNRECOGNIZED:
            self.logger.debug(f"Unrecognized call {result.operation.selector} in {tx.hash}: {result.reason}")
            return False
        if result.status is DecodeStatus.MALFORMED:
            self.logger.warning(f"Malformed call {result.operation.selector} in {tx.hash}: {result.reason}")
            return False
        return True
