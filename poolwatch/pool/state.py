"""
Reserve state and the bounded set of recently seen transaction hashes.
"""

from dataclasses import dataclass
from typing import Optional, Set

DEFAULT_SEEN_LIMIT = 1000


def normalize_hash(tx_hash) -> str:
    """Lowercase 0x-hex form of a transaction hash (bytes or str)."""
    if isinstance(tx_hash, (bytes, bytearray)):
        return "0x" + bytes(tx_hash).hex()
    text = str(tx_hash).strip().lower()
    return text if text.startswith("0x") else f"0x{text}"


@dataclass(frozen=True)
class ReserveState:
    """Pool reserves as of the last committed transaction. Both reserves are non-negative."""

    reserve0: int
    reserve1: int
    as_of_tx_hash: Optional[str] = None

    def __post_init__(self):
        if self.reserve0 < 0 or self.reserve1 < 0:
            raise ValueError(f"Negative reserves: ({self.reserve0}, {self.reserve1})")


class SeenTransactionSet:
    """
    Recently processed transaction hashes, used to pair a Swap with its Sync.

    Eviction is coarse: a hash is inserted first and, if that pushes the size
    past ``limit``, the whole set is cleared. After ``limit + 1`` distinct
    inserts the set is therefore empty.
    """

    def __init__(self, limit: int = DEFAULT_SEEN_LIMIT):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._hashes: Set[str] = set()
        self.clears = 0

    def add(self, tx_hash) -> None:
        self._hashes.add(normalize_hash(tx_hash))
        if len(self._hashes) > self.limit:
            self._hashes.clear()
            self.clears += 1

    def __contains__(self, tx_hash) -> bool:
        if tx_hash is None:
            return False
        return normalize_hash(tx_hash) in self._hashes

    def __len__(self) -> int:
        return len(self._hashes)
