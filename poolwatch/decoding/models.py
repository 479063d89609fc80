"""
Decoded record types.

Every recognized router/pool function and pool event decodes into a
concrete, typed argument record. ``DecodedOperation`` and ``DecodedEvent``
wrap those records together with the raw positional values and, for
operations, the human-readable field rendering.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

UNKNOWN_OPERATION = "UNKNOWN"


class Scope(Enum):
    """Which contract a record was captured from."""

    ROUTER = "router"
    POOL = "pool"


class DecodeStatus(Enum):
    """Outcome of a decode attempt."""

    DECODED = "decoded"
    UNRECOGNIZED = "unrecognized"
    MALFORMED = "malformed"


# Router calls


@dataclass(frozen=True)
class ExactInputSwap:
    """swapExact{Tokens,ETH}For{Tokens,ETH}[SupportingFeeOnTransferTokens].

    ``amount_in`` is None for the ETH-in variants; the input is the tx value.
    """

    amount_out_min: int
    path: Tuple[str, ...]
    to: str
    deadline: int
    amount_in: Optional[int] = None


@dataclass(frozen=True)
class ExactOutputSwap:
    """swap{Tokens,ETH}ForExact{Tokens,ETH}. ``amount_in_max`` is None for swapETHForExactTokens."""

    amount_out: int
    path: Tuple[str, ...]
    to: str
    deadline: int
    amount_in_max: Optional[int] = None


@dataclass(frozen=True)
class AddLiquidity:
    token_a: str
    token_b: str
    amount_a_desired: int
    amount_b_desired: int
    amount_a_min: int
    amount_b_min: int
    to: str
    deadline: int


@dataclass(frozen=True)
class AddLiquidityETH:
    token: str
    amount_token_desired: int
    amount_token_min: int
    amount_eth_min: int
    to: str
    deadline: int


@dataclass(frozen=True)
class Permit:
    approve_max: bool
    v: int
    r: bytes
    s: bytes


@dataclass(frozen=True)
class RemoveLiquidity:
    token_a: str
    token_b: str
    liquidity: int
    amount_a_min: int
    amount_b_min: int
    to: str
    deadline: int
    permit: Optional[Permit] = None


@dataclass(frozen=True)
class RemoveLiquidityETH:
    token: str
    liquidity: int
    amount_token_min: int
    amount_eth_min: int
    to: str
    deadline: int
    permit: Optional[Permit] = None


# Pool (pair) calls


@dataclass(frozen=True)
class PairSwap:
    amount0_out: int
    amount1_out: int
    to: str
    data: bytes


@dataclass(frozen=True)
class PairRecipient:
    """mint(to), burn(to) and skim(to)."""

    to: str


@dataclass(frozen=True)
class PairSync:
    pass


@dataclass(frozen=True)
class TokenApprove:
    spender: str
    value: int


@dataclass(frozen=True)
class TokenTransfer:
    to: str
    value: int


@dataclass(frozen=True)
class TokenTransferFrom:
    sender: str
    to: str
    value: int


@dataclass(frozen=True)
class TokenPermit:
    owner: str
    spender: str
    value: int
    deadline: int
    v: int
    r: bytes
    s: bytes


@dataclass(frozen=True)
class InterfaceCall:
    """A function only present in the full interface (views, quotes)."""

    arguments: Tuple[Tuple[str, Any], ...]


OperationArgs = Union[
    ExactInputSwap,
    ExactOutputSwap,
    AddLiquidity,
    AddLiquidityETH,
    RemoveLiquidity,
    RemoveLiquidityETH,
    PairSwap,
    PairRecipient,
    PairSync,
    TokenApprove,
    TokenTransfer,
    TokenTransferFrom,
    TokenPermit,
    InterfaceCall,
]


# Pool events


@dataclass(frozen=True)
class SwapEvent:
    sender: str
    to: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int


@dataclass(frozen=True)
class SyncEvent:
    reserve0: int
    reserve1: int


@dataclass(frozen=True)
class MintEvent:
    sender: str
    amount0: int
    amount1: int


@dataclass(frozen=True)
class BurnEvent:
    sender: str
    amount0: int
    amount1: int
    to: str


@dataclass(frozen=True)
class TransferEvent:
    sender: str
    to: str
    value: int


@dataclass(frozen=True)
class ApprovalEvent:
    owner: str
    spender: str
    value: int


EventFields = Union[SwapEvent, SyncEvent, MintEvent, BurnEvent, TransferEvent, ApprovalEvent]


@dataclass(frozen=True)
class DecodedOperation:
    """A decoded contract call. Immutable, consumed once for presentation."""

    operation_name: str
    raw_args: Tuple[Any, ...] = ()
    formatted_fields: Mapping[str, str] = field(default_factory=dict)
    args: Optional[OperationArgs] = None
    selector: Optional[str] = None
    scope: Optional[Scope] = None

    def __post_init__(self):
        # Read-only view over a private copy; insertion order is kept
        object.__setattr__(self, "formatted_fields", MappingProxyType(dict(self.formatted_fields)))

    @property
    def is_unknown(self) -> bool:
        return self.operation_name == UNKNOWN_OPERATION

    @classmethod
    def unknown(cls, selector: Optional[str] = None, scope: Optional[Scope] = None) -> "DecodedOperation":
        return cls(operation_name=UNKNOWN_OPERATION, selector=selector, scope=scope)


@dataclass(frozen=True)
class DecodeResult:
    """Decoded(operation), Unrecognized, or Malformed(reason).

    ``operation`` is always populated; it is the UNKNOWN operation unless
    the status is DECODED.
    """

    status: DecodeStatus
    operation: DecodedOperation
    reason: Optional[str] = None

    @property
    def decoded(self) -> bool:
        return self.status is DecodeStatus.DECODED

    @classmethod
    def ok(cls, operation: DecodedOperation) -> "DecodeResult":
        return cls(DecodeStatus.DECODED, operation)

    @classmethod
    def unrecognized(cls, selector: Optional[str], scope: Scope, reason: str = "unknown selector") -> "DecodeResult":
        return cls(DecodeStatus.UNRECOGNIZED, DecodedOperation.unknown(selector, scope), reason)

    @classmethod
    def malformed(cls, selector: Optional[str], scope: Scope, reason: str) -> "DecodeResult":
        return cls(DecodeStatus.MALFORMED, DecodedOperation.unknown(selector, scope), reason)


@dataclass(frozen=True)
class DecodedEvent:
    """A decoded pool log."""

    name: str
    fields: Optional[EventFields] = None
    raw_args: Tuple[Any, ...] = ()
    address: Optional[str] = None
    tx_hash: Optional[str] = None
    log_index: Optional[int] = None
    status: DecodeStatus = DecodeStatus.DECODED
    reason: Optional[str] = None

    @property
    def is_unknown(self) -> bool:
        return self.name == UNKNOWN_OPERATION
