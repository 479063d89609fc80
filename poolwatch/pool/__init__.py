"""
Pool reserve state tracking.
"""

from .state import ReserveState, SeenTransactionSet
from .tracker import LiquidityOutcome, PoolStateTracker, SwapOutcome, SyncKind, SyncOutcome

__all__ = [
    "ReserveState",
    "SeenTransactionSet",
    "LiquidityOutcome",
    "PoolStateTracker",
    "SwapOutcome",
    "SyncKind",
    "SyncOutcome",
]
