"""
Tests for the event decoder.
"""

import pytest
from eth_abi import encode
from eth_utils.address import to_checksum_address
from hexbytes import HexBytes

from poolwatch.config.monitor import USDC_WETH_PAIR
from poolwatch.decoding.models import (
    UNKNOWN_OPERATION,
    BurnEvent,
    DecodeStatus,
    MintEvent,
    SwapEvent,
    SyncEvent,
    TransferEvent,
)

from .conftest import RECIPIENT, SENDER

SWAP_TOPIC = HexBytes("0xd78ad95fa46c994b6551d0da85fc275fe613ce37657fb8d5e3d130840159d822")
SYNC_TOPIC = HexBytes("0x1c411e9a96e071241c2f21f7726b17ae89e3cab4c78be50e062b03a9fffbbad1")
MINT_TOPIC = HexBytes("0x4c209b5fc8ad50758f13e2e1088ba56a560dff690a1c6fef26394f4c03821c4f")
BURN_TOPIC = HexBytes("0xdccd412f0b1252819cb1fd330b93224ca42612892bb3f4f789976e6d81936496")
TRANSFER_TOPIC = HexBytes("0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef")
TX_HASH = "0x" + "ab" * 32


def address_topic(address: str) -> bytes:
    return encode(["address"], [address])


class TestKnownEvents:
    """Decoding of the pool's event types."""

    def test_swap(self, event_decoder):
        """Test Swap reads sender/to from topics and amounts from data."""
        data = encode(["uint256"] * 4, [0, 10**18, 2_500_000_000, 0])

        event = event_decoder.decode_log(
            USDC_WETH_PAIR,
            [SWAP_TOPIC, address_topic(SENDER), address_topic(RECIPIENT)],
            data,
            tx_hash=TX_HASH,
            log_index=7,
        )

        assert event.name == "Swap"
        assert event.status is DecodeStatus.DECODED
        assert event.fields == SwapEvent(
            sender=to_checksum_address(SENDER),
            to=to_checksum_address(RECIPIENT),
            amount0_in=0,
            amount1_in=10**18,
            amount0_out=2_500_000_000,
            amount1_out=0,
        )
        assert event.raw_args == (
            to_checksum_address(SENDER), 0, 10**18, 2_500_000_000, 0, to_checksum_address(RECIPIENT),
        )
        assert event.tx_hash == TX_HASH
        assert event.log_index == 7
        assert event.address == USDC_WETH_PAIR

    def test_sync(self, event_decoder):
        """Test Sync carries both reserves from data."""
        data = encode(["uint112", "uint112"], [2_500_000_000, 10**21])

        event = event_decoder.decode_log(USDC_WETH_PAIR, [SYNC_TOPIC], data)

        assert event.name == "Sync"
        assert event.fields == SyncEvent(reserve0=2_500_000_000, reserve1=10**21)

    def test_mint_and_burn(self, event_decoder):
        """Test Mint and Burn decode amounts and addresses."""
        mint = event_decoder.decode_log(
            USDC_WETH_PAIR,
            [MINT_TOPIC, address_topic(SENDER)],
            encode(["uint256", "uint256"], [1_000_000, 10**15]),
        )
        burn = event_decoder.decode_log(
            USDC_WETH_PAIR,
            [BURN_TOPIC, address_topic(SENDER), address_topic(RECIPIENT)],
            encode(["uint256", "uint256"], [2_000_000, 2 * 10**15]),
        )

        assert mint.fields == MintEvent(to_checksum_address(SENDER), 1_000_000, 10**15)
        assert burn.fields == BurnEvent(to_checksum_address(SENDER), 2_000_000, 2 * 10**15, to_checksum_address(RECIPIENT))

    def test_transfer_from_maps_to_sender(self, event_decoder):
        """Test Transfer's 'from' topic becomes the sender field."""
        event = event_decoder.decode_log(
            USDC_WETH_PAIR,
            [TRANSFER_TOPIC, address_topic(SENDER), address_topic(RECIPIENT)],
            encode(["uint256"], [123]),
        )

        assert event.fields == TransferEvent(to_checksum_address(SENDER), to_checksum_address(RECIPIENT), 123)

    def test_decode_record_with_hex_strings(self, event_decoder):
        """Test JSON-RPC style logs with hex-string topics and data."""
        log = {
            "address": USDC_WETH_PAIR.lower(),
            "topics": ["0x" + bytes(SYNC_TOPIC).hex()],
            "data": "0x" + encode(["uint112", "uint112"], [1, 2]).hex(),
            "transactionHash": HexBytes(TX_HASH),
            "logIndex": 3,
        }

        event = event_decoder.decode_record(log)

        assert event.fields == SyncEvent(1, 2)
        assert event.address == USDC_WETH_PAIR
        assert event.tx_hash == TX_HASH
        assert event.log_index == 3


class TestUnknownAndMalformed:
    """decode_log never raises."""

    def test_unknown_topic(self, event_decoder):
        """Test an unregistered topic yields UNKNOWN."""
        event = event_decoder.decode_log(USDC_WETH_PAIR, [b"\x00" * 32], b"")

        assert event.name == UNKNOWN_OPERATION
        assert event.is_unknown
        assert event.status is DecodeStatus.UNRECOGNIZED
        assert event.fields is None

    def test_no_topics(self, event_decoder):
        """Test anonymous logs yield UNKNOWN."""
        event = event_decoder.decode_log(USDC_WETH_PAIR, [], b"")

        assert event.is_unknown
        assert event.status is DecodeStatus.UNRECOGNIZED

    def test_missing_indexed_topic(self, event_decoder):
        """Test a Swap without its 'to' topic is malformed."""
        data = encode(["uint256"] * 4, [0, 1, 1, 0])

        event = event_decoder.decode_log(USDC_WETH_PAIR, [SWAP_TOPIC, address_topic(SENDER)], data)

        assert event.is_unknown
        assert event.status is DecodeStatus.MALFORMED
        assert "indexed topics" in event.reason

    def test_truncated_data(self, event_decoder):
        """Test Sync with too little data is malformed."""
        event = event_decoder.decode_log(USDC_WETH_PAIR, [SYNC_TOPIC], b"\x00" * 40)

        assert event.is_unknown
        assert event.status is DecodeStatus.MALFORMED

    @pytest.mark.parametrize("topic", ["0x1234", "not a topic", None])
    def test_garbage_topic(self, event_decoder, topic):
        """Test unreadable topic words are unrecognized."""
        event = event_decoder.decode_log(USDC_WETH_PAIR, [topic], b"")

        assert event.is_unknown

    def test_unknown_log_does_not_stop_batch(self, event_decoder):
        """Test an unknown log among known ones leaves the others intact."""
        logs = [
            (USDC_WETH_PAIR, [SYNC_TOPIC], encode(["uint112", "uint112"], [1, 2])),
            (USDC_WETH_PAIR, [b"\x11" * 32], b"\x00"),
            (USDC_WETH_PAIR, [SYNC_TOPIC], encode(["uint112", "uint112"], [3, 4])),
        ]

        events = [event_decoder.decode_log(*log) for log in logs]

        assert [e.name for e in events] == ["Sync", UNKNOWN_OPERATION, "Sync"]
        assert events[2].fields == SyncEvent(3, 4)
