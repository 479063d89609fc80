"""
Event decoder.

Decodes pool log records (address, topics, data) into DecodedEvent
records. topics[0] selects the event; indexed parameters are read from the
remaining topic words and non-indexed parameters are ABI-decoded from
``data``. Like the calldata decoder, ``decode_log`` never raises.
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from eth_abi import decode
from eth_utils.address import is_address, to_checksum_address

from ..errors import DecodeError
from .calldata import to_bytes
from .models import UNKNOWN_OPERATION, DecodedEvent, DecodeStatus
from .selectors import EventEntry, SelectorRegistry, field_name, normalize_value, to_topic


def _hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


class EventDecoder:
    """Decodes pool logs against the registry's topic table."""

    def __init__(self, registry: SelectorRegistry):
        self.registry = registry

    def decode_log(
        self,
        address: Optional[str],
        topics: Sequence[Any],
        data: Any,
        tx_hash: Optional[str] = None,
        log_index: Optional[int] = None,
    ) -> DecodedEvent:
        """
        Decode one log.

        Args:
            address: Emitting contract
            topics: Topic words, event signature hash first
            data: ABI-encoded non-indexed parameters
            tx_hash: Originating transaction hash
            log_index: Position of the log in its block

        Returns:
            DecodedEvent; ``name`` is UNKNOWN when the topic is not registered
            or the log does not match its event's layout
        """
        if address is not None and is_address(address):
            address = to_checksum_address(address)
        tx_hash = _hex(tx_hash)

        def unknown(status: DecodeStatus, reason: str) -> DecodedEvent:
            return DecodedEvent(
                name=UNKNOWN_OPERATION,
                address=address,
                tx_hash=tx_hash,
                log_index=log_index,
                status=status,
                reason=reason,
            )

        if not topics:
            return unknown(DecodeStatus.UNRECOGNIZED, "log has no topics")

        entry = self.registry.lookup_event(topics[0])
        if entry is None:
            return unknown(DecodeStatus.UNRECOGNIZED, f"unknown topic {_hex(topics[0])}")

        try:
            raw_args, fields = self._decode(entry, topics[1:], data)
        except DecodeError as e:
            return unknown(DecodeStatus.MALFORMED, str(e))

        return DecodedEvent(
            name=entry.name,
            fields=fields,
            raw_args=raw_args,
            address=address,
            tx_hash=tx_hash,
            log_index=log_index,
        )

    def decode_record(self, log: Mapping[str, Any]) -> DecodedEvent:
        """Decode a log given as a JSON-RPC / web3 log mapping."""
        return self.decode_log(
            log.get("address"),
            log.get("topics") or (),
            log.get("data"),
            tx_hash=log.get("transactionHash"),
            log_index=log.get("logIndex"),
        )

    @staticmethod
    def _decode(entry: EventEntry, indexed_topics: Sequence[Any], data: Any):
        indexed = entry.indexed
        if len(indexed_topics) != len(indexed):
            raise DecodeError(
                f"{entry.name}: expected {len(indexed)} indexed topics, got {len(indexed_topics)}"
            )

        values: Dict[str, Any] = {}
        try:
            for (name, abi_type), topic in zip(indexed, indexed_topics):
                (value,) = decode([abi_type], to_topic(topic))
                values[name] = normalize_value(abi_type, value)

            non_indexed = entry.non_indexed
            decoded = decode([t for _, t in non_indexed], to_bytes(data))
            for (name, abi_type), value in zip(non_indexed, decoded):
                values[name] = normalize_value(abi_type, value)
        except Exception as e:
            raise DecodeError(f"{entry.name}: {e}") from e

        # Declaration order, not topic/data order
        raw_args = tuple(values[name] for name, _, _ in entry.params)
        try:
            fields = entry.record_type(**{field_name(n): values[n] for n, _, _ in entry.params})
        except TypeError as e:
            raise DecodeError(f"{entry.name}: {e}") from e
        return raw_args, fields
