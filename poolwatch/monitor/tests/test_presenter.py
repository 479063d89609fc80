"""
Tests for presentation blocks.
"""

import logging

import pytest

from poolwatch.decoding.models import (
    ApprovalEvent,
    DecodedEvent,
    DecodedOperation,
    MintEvent,
    SwapEvent,
    SyncEvent,
    TransferEvent,
)
from poolwatch.monitor.presenter import SEPARATOR, Presenter, field_line
from poolwatch.monitor.records import RawTransaction
from poolwatch.pool.state import ReserveState
from poolwatch.pool.tracker import LiquidityOutcome, SwapOutcome, SyncKind, SyncOutcome
from poolwatch.tokens.metadata import TokenInfo

from .conftest import TRADER


@pytest.fixture
def presenter(context):
    return Presenter(context.token0, context.token1)


def labels(lines):
    return [line.split(":", 1)[0].split(" ", 1)[-1] for line in lines[1:]]


class TestTransactionBlock:
    """Router transaction rendering."""

    def test_field_order(self, presenter):
        """Test Function, amounts, to, Value, From, Gas Price, Hash in that order."""
        operation = DecodedOperation(
            operation_name="swapExactTokensForTokens",
            formatted_fields={
                "to": TRADER,
                "amountOutMin": "1.0000 WETH",
                "amountIn": "2500.0000 USDC",
                "path": "USDC → WETH",
            },
        )
        tx = RawTransaction(
            hash="0xabc",
            sender=TRADER,
            to=None,
            value=10**17,
            gas_price=20_000_000_000,
            max_fee_per_gas=31_500_000_000,
        )

        lines = presenter.render_transaction("🔀 Router transaction", tx, operation)

        assert lines[0] == "🔀 Router transaction"
        assert labels(lines) == [
            "Function", "path", "amountIn", "amountOutMin", "to", "Value", "From", "Gas Price", "Hash",
        ]
        assert "💰 Value: 0.1000 ETH" in lines
        assert "⛽ Gas Price: 31.50 gwei" in lines
        assert "📝 Function: swapExactTokensForTokens" in lines
        assert "🛣️ path: USDC → WETH" in lines

    def test_empty_fields_skipped(self, presenter):
        """Test zero value, missing gas price and empty fields are omitted."""
        operation = DecodedOperation(operation_name="sync", formatted_fields={"note": ""})
        tx = RawTransaction(hash="0x01", sender=None, to=None)

        lines = presenter.render_transaction("🏊 Pool transaction", tx, operation)

        assert labels(lines) == ["Function", "Hash"]

    def test_extra_fields_before_to(self, presenter):
        """Test decoded fields outside the fixed order appear before 'to'."""
        operation = DecodedOperation(
            operation_name="addLiquidityETH",
            formatted_fields={"token": "USDC", "amountETHMin": "1.0000 ETH", "to": TRADER},
        )
        lines = presenter.render_transaction("t", RawTransaction("0x01", None, None), operation)

        assert labels(lines) == ["Function", "token", "amountETHMin", "to", "Hash"]
        assert "📋 token: USDC" in lines


class TestEventBlocks:
    """Pool event rendering."""

    def test_swap(self, presenter):
        """Test swap amounts and the price preview line."""
        event = SwapEvent(TRADER, TRADER, 2_500_000_000, 0, 0, 10**18)
        outcome = SwapOutcome(event, "0x01", accepted=True, candidate=ReserveState(1, 1), preview_price="2.50")

        lines = presenter.render_swap(outcome)

        assert lines[0] == "💫 Swap"
        assert "📥 amountIn: 2500.0000 USDC" in lines
        assert "📤 amountOut: 1.0000 WETH" in lines
        assert "💵 Price preview: 2.50" in lines

    def test_rejected_swap(self, presenter):
        """Test a rejected swap shows its reason instead of a preview."""
        outcome = SwapOutcome(SwapEvent(TRADER, TRADER, 0, 0, 150, 0), "0x01", accepted=False, reason="negative")

        lines = presenter.render_swap(outcome)

        assert "⚠️ Rejected: negative" in lines

    def test_sync_confirmation_and_independent(self, presenter):
        """Test the two Sync classifications render differently."""
        state = ReserveState(2_500_000_000, 10**21)
        confirmation = SyncOutcome(SyncEvent(2_500_000_000, 10**21), "0x01", SyncKind.CONFIRMATION, state, state, "2.40", "2.50")
        independent = SyncOutcome(SyncEvent(2_500_000_000, 10**21), "0x02", SyncKind.INDEPENDENT, None, state, "N/A", "2.50")

        confirmed_lines = presenter.render_sync(confirmation)
        independent_lines = presenter.render_sync(independent)

        assert confirmed_lines[0] == "🔄 Sync (confirms swap)"
        assert "💵 Price: 2.40 → 2.50" in confirmed_lines
        assert independent_lines[0] == "🔄 Sync (independent reserve update)"
        assert "📋 reserves: 2500.0000 USDC / 1000.0000 WETH" in independent_lines

    def test_mint(self, presenter):
        """Test Mint renders amounts and the current price."""
        outcome = LiquidityOutcome(MintEvent(TRADER, 1_000_000, 10**15), "0x01", "2.50")

        lines = presenter.render_liquidity(outcome)

        assert lines[0] == "🌱 Mint"
        assert "📋 amount0: 1.0000 USDC" in lines
        assert "💵 Price: 2.50" in lines

    def test_transfer_uses_lp_decimals(self, presenter):
        """Test pool-token Transfer values render as UNI-V2."""
        event = DecodedEvent("Transfer", TransferEvent(TRADER, TRADER, 5 * 10**17))

        lines = presenter.render_event(event)

        assert lines[0] == "📦 Transfer"
        assert "💰 value: 0.5000 UNI-V2" in lines

    def test_approval_uses_emitter_decimals(self, presenter):
        """Test a seeded token's Approval renders in that token's units."""
        event = DecodedEvent("Approval", ApprovalEvent(TRADER, TRADER, 1_000_000))

        lines = presenter.render_event(event, TokenInfo("0x01", "USDC", 6))

        assert "💰 value: 1.0000 USDC" in lines


class TestEmit:
    """Output goes through the presenter logger."""

    def test_emit_logs_separator_and_lines(self, presenter, caplog):
        """Test emit writes the separator then each line at INFO."""
        with caplog.at_level(logging.INFO, logger="poolwatch.monitor.presenter"):
            presenter.emit(["a", "b"])

        messages = [r.message for r in caplog.records if r.name == "poolwatch.monitor.presenter"]
        assert messages == [SEPARATOR, "a", "b"]

    def test_field_line_default_emoji(self):
        """Test unknown labels get the default marker."""
        assert field_line("whatever", "x") == "📋 whatever: x"
        assert field_line("Hash", "0x1") == "🔗 Hash: 0x1"
