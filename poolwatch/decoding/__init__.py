"""
Decoding of router/pool call data and pool event logs.
"""

from .calldata import PATH_SEPARATOR, CalldataDecoder, to_bytes
from .events import EventDecoder
from .models import (
    UNKNOWN_OPERATION,
    ApprovalEvent,
    BurnEvent,
    DecodedEvent,
    DecodedOperation,
    DecodeResult,
    DecodeStatus,
    MintEvent,
    Scope,
    SwapEvent,
    SyncEvent,
    TransferEvent,
)
from .selectors import POOL_EVENTS, POOL_FUNCTIONS, ROUTER_FUNCTIONS, EventEntry, SelectorEntry, SelectorRegistry

__all__ = [
    "PATH_SEPARATOR",
    "CalldataDecoder",
    "to_bytes",
    "EventDecoder",
    "UNKNOWN_OPERATION",
    "ApprovalEvent",
    "BurnEvent",
    "DecodedEvent",
    "DecodedOperation",
    "DecodeResult",
    "DecodeStatus",
    "MintEvent",
    "Scope",
    "SwapEvent",
    "SyncEvent",
    "TransferEvent",
    "POOL_EVENTS",
    "POOL_FUNCTIONS",
    "ROUTER_FUNCTIONS",
    "EventEntry",
    "SelectorEntry",
    "SelectorRegistry",
]
