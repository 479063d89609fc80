"""
Pool state tracker.

Owns a pool's ReserveState and reconciles the events a pool emits:

- Swap: deltas. Recorded in the seen set; produces a candidate state used
  only for a price preview. A candidate with a negative reserve is rejected.
- Sync: absolute reserves. Always committed. Classified as a confirmation
  when its transaction hash was already seen, otherwise as independent.
- Mint/Burn: never mutate state; annotated with the current price.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from ..decoding.models import BurnEvent, DecodedEvent, MintEvent, SwapEvent, SyncEvent
from ..tokens.amounts import PRICE_PLACEHOLDER, price_string
from ..tokens.metadata import TokenInfo
from .state import DEFAULT_SEEN_LIMIT, ReserveState, SeenTransactionSet, normalize_hash

logger = logging.getLogger(__name__)


class SyncKind(Enum):
    CONFIRMATION = "confirmation"
    INDEPENDENT = "independent"


@dataclass
class SwapOutcome:
    """Result of applying a Swap event."""
    event: SwapEvent
    tx_hash: Optional[str]
    accepted: bool
    candidate: Optional[ReserveState] = None
    preview_price: str = PRICE_PLACEHOLDER
    reason: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return not self.accepted


@dataclass
class SyncOutcome:
    """Result of applying a Sync event."""
    event: SyncEvent
    tx_hash: Optional[str]
    kind: SyncKind
    previous: Optional[ReserveState]
    current: ReserveState
    old_price: str
    new_price: str

    @property
    def is_confirmation(self) -> bool:
        return self.kind is SyncKind.CONFIRMATION

    @property
    def changed(self) -> bool:
        if self.previous is None:
            return True
        return (self.previous.reserve0, self.previous.reserve1) != (self.current.reserve0, self.current.reserve1)


@dataclass
class LiquidityOutcome:
    """A Mint or Burn, annotated with the price at the time of the event."""
    event: Union[MintEvent, BurnEvent]
    tx_hash: Optional[str]
    price: str


TrackerOutcome = Union[SwapOutcome, SyncOutcome, LiquidityOutcome]


class PoolStateTracker:
    """
    Reserve/price state for one pool.

    Args:
        token0: Pool token0 metadata
        token1: Pool token1 metadata
        base_index: Which pool token the price is quoted for (0 or 1); the
            other token is the quote currency
        seen_limit: Capacity of the Swap/Sync correlation set
    """

    def __init__(
        self,
        token0: TokenInfo,
        token1: TokenInfo,
        base_index: int = 1,
        seen_limit: int = DEFAULT_SEEN_LIMIT,
    ):
        if base_index not in (0, 1):
            raise ValueError(f"base_index must be 0 or 1, got {base_index}")
        self.token0 = token0
        self.token1 = token1
        self.base_index = base_index
        self.seen = SeenTransactionSet(seen_limit)
        self.state: Optional[ReserveState] = None
        self.rejected_swaps = 0
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def base_token(self) -> TokenInfo:
        return self.token1 if self.base_index == 1 else self.token0

    @property
    def quote_token(self) -> TokenInfo:
        return self.token0 if self.base_index == 1 else self.token1

    def initialize(self, reserve0: int, reserve1: int, tx_hash: Optional[str] = None) -> ReserveState:
        """Seed state from a getReserves() read."""
        self.state = ReserveState(reserve0, reserve1, tx_hash)
        self.logger.info(f"Initialized reserves ({reserve0}, {reserve1}), price {self.price()}")
        return self.state

    def price_of(self, state: Optional[ReserveState]) -> str:
        """Price of the base token in quote tokens for a given state, 2 decimals."""
        if state is None:
            return PRICE_PLACEHOLDER
        if self.base_index == 1:
            reserve_base, reserve_quote = state.reserve1, state.reserve0
        else:
            reserve_base, reserve_quote = state.reserve0, state.reserve1
        return price_string(
            reserve_base,
            reserve_quote,
            self.base_token.decimals,
            self.quote_token.decimals,
        )

    def price(self) -> str:
        """Price from the latest committed state."""
        return self.price_of(self.state)

    def snapshot(self) -> Dict[str, Optional[object]]:
        """Queryable view of the current reserves and price."""
        state = self.state
        return {
            "reserve0": state.reserve0 if state else None,
            "reserve1": state.reserve1 if state else None,
            "as_of_tx_hash": state.as_of_tx_hash if state else None,
            "price": self.price(),
            "base": self.base_token.symbol,
            "quote": self.quote_token.symbol,
        }

    def apply_swap(self, event: SwapEvent, tx_hash: Optional[str]) -> SwapOutcome:
        """
        Record a Swap and compute its candidate reserves.

        State is not committed here; the paired Sync carries the
        authoritative values.
        """
        tx_hash = normalize_hash(tx_hash) if tx_hash is not None else None
        if tx_hash is not None:
            self.seen.add(tx_hash)

        if self.state is None:
            return SwapOutcome(event, tx_hash, accepted=True, reason="reserves not initialized")

        reserve0 = self.state.reserve0 + event.amount0_in - event.amount0_out
        reserve1 = self.state.reserve1 + event.amount1_in - event.amount1_out
        if reserve0 < 0 or reserve1 < 0:
            self.rejected_swaps += 1
            reason = (
                f"swap {tx_hash} would drive reserves negative: "
                f"({self.state.reserve0}, {self.state.reserve1}) -> ({reserve0}, {reserve1})"
            )
            self.logger.warning(f"Data integrity: {reason}; keeping prior state")
            return SwapOutcome(event, tx_hash, accepted=False, reason=reason)

        candidate = ReserveState(reserve0, reserve1, tx_hash)
        return SwapOutcome(
            event,
            tx_hash,
            accepted=True,
            candidate=candidate,
            preview_price=self.price_of(candidate),
        )

    def apply_sync(self, event: SyncEvent, tx_hash: Optional[str]) -> SyncOutcome:
        """Commit the absolute reserves carried by a Sync."""
        tx_hash = normalize_hash(tx_hash) if tx_hash is not None else None
        kind = SyncKind.CONFIRMATION if tx_hash in self.seen else SyncKind.INDEPENDENT

        previous = self.state
        old_price = self.price()
        self.state = ReserveState(event.reserve0, event.reserve1, tx_hash)
        if tx_hash is not None:
            self.seen.add(tx_hash)

        return SyncOutcome(
            event=event,
            tx_hash=tx_hash,
            kind=kind,
            previous=previous,
            current=self.state,
            old_price=old_price,
            new_price=self.price(),
        )

    def apply_liquidity(self, event: Union[MintEvent, BurnEvent], tx_hash: Optional[str]) -> LiquidityOutcome:
        tx_hash = normalize_hash(tx_hash) if tx_hash is not None else None
        return LiquidityOutcome(event, tx_hash, self.price())

    def apply(self, decoded: DecodedEvent) -> Optional[TrackerOutcome]:
        """Dispatch a decoded pool event; events that do not affect reserves return None."""
        fields = decoded.fields
        if isinstance(fields, SwapEvent):
            return self.apply_swap(fields, decoded.tx_hash)
        if isinstance(fields, SyncEvent):
            return self.apply_sync(fields, decoded.tx_hash)
        if isinstance(fields, (MintEvent, BurnEvent)):
            return self.apply_liquidity(fields, decoded.tx_hash)
        return None
