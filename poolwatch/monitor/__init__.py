"""
Per-pool monitoring: context, raw records, processing loop and output.
"""

from .context import PoolContext
from .presenter import Presenter
from .processor import MonitorProcessor, PendingBook
from .records import RawBlock, RawLog, RawTransaction

__all__ = [
    "PoolContext",
    "Presenter",
    "MonitorProcessor",
    "PendingBook",
    "RawBlock",
    "RawLog",
    "RawTransaction",
]
