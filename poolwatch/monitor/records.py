"""
Raw records delivered by the chain feed.

The feed hands web3 results (AttributeDicts with HexBytes values) or plain
JSON-RPC dicts to ``from_dict``; the processing loop only ever sees these
normalized, immutable records.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from hexbytes import HexBytes


def _hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def _int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value)
    return int(text, 16) if text.lower().startswith("0x") else int(text)


def _bytes(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    text = str(value)
    if text in ("", "0x"):
        return b""
    return bytes(HexBytes(text))


@dataclass(frozen=True)
class RawTransaction:
    """A pending or mined transaction."""

    hash: str
    sender: Optional[str]
    to: Optional[str]
    input: bytes = b""
    value: int = 0
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    block_number: Optional[int] = None

    @property
    def effective_gas_price(self) -> Optional[int]:
        """maxFeePerGas for EIP-1559 transactions, else gasPrice."""
        return self.max_fee_per_gas if self.max_fee_per_gas is not None else self.gas_price

    @classmethod
    def from_dict(cls, tx: Mapping[str, Any]) -> "RawTransaction":
        return cls(
            hash=_hex(tx.get("hash")),
            sender=tx.get("from"),
            to=tx.get("to"),
            input=_bytes(tx.get("input", tx.get("data"))),
            value=_int(tx.get("value")) or 0,
            gas_price=_int(tx.get("gasPrice")),
            max_fee_per_gas=_int(tx.get("maxFeePerGas")),
            block_number=_int(tx.get("blockNumber")),
        )


@dataclass(frozen=True)
class RawLog:
    """A contract log."""

    address: str
    topics: Tuple[bytes, ...]
    data: bytes
    transaction_hash: Optional[str] = None
    log_index: Optional[int] = None
    block_number: Optional[int] = None

    @classmethod
    def from_dict(cls, log: Mapping[str, Any]) -> "RawLog":
        return cls(
            address=log.get("address"),
            topics=tuple(_bytes(t) for t in log.get("topics") or ()),
            data=_bytes(log.get("data")),
            transaction_hash=_hex(log.get("transactionHash")),
            log_index=_int(log.get("logIndex")),
            block_number=_int(log.get("blockNumber")),
        )


@dataclass(frozen=True)
class RawBlock:
    """A mined block's transactions, in block order."""

    number: int
    transactions: Tuple[RawTransaction, ...] = field(default_factory=tuple)

    @property
    def transaction_hashes(self) -> Tuple[str, ...]:
        return tuple(tx.hash for tx in self.transactions)

    @classmethod
    def from_dict(cls, block: Mapping[str, Any]) -> "RawBlock":
        number = _int(block.get("number"))
        transactions = []
        for tx in block.get("transactions") or ():
            if isinstance(tx, (bytes, bytearray, str)):
                # Hash-only block body
                transactions.append(RawTransaction(hash=_hex(tx), sender=None, to=None, block_number=number))
            else:
                transactions.append(RawTransaction.from_dict(tx))
        return cls(number=number, transactions=tuple(transactions))


RawRecord = Union[RawTransaction, RawLog, RawBlock]
