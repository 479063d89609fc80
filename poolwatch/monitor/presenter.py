"""
Human-readable log blocks for decoded records.

Every ``render_*`` method returns the lines of one block; ``emit`` writes
them through this module's logger at INFO, framed by a separator line.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..decoding.calldata import LP_DECIMALS, LP_SYMBOL
from ..decoding.models import (
    ApprovalEvent,
    BurnEvent,
    DecodedEvent,
    DecodedOperation,
    MintEvent,
    SwapEvent,
    SyncEvent,
    TransferEvent,
)
from ..pool.tracker import LiquidityOutcome, SwapOutcome, SyncOutcome
from ..tokens.amounts import format_amount, format_gas_price
from ..tokens.metadata import TokenInfo
from .records import RawTransaction

logger = logging.getLogger(__name__)

SEPARATOR = "━" * 60

FIELD_EMOJIS: Dict[str, str] = {
    "function": "📝",
    "path": "🛣️",
    "amountin": "📥",
    "amountout": "📤",
    "amountoutmin": "📉",
    "amountinmax": "📈",
    "amountadesired": "💎",
    "amountbdesired": "💎",
    "liquidity": "💧",
    "to": "🎯",
    "value": "💰",
    "from": "👤",
    "gas price": "⛽",
    "hash": "🔗",
}
DEFAULT_EMOJI = "📋"

# Router fields shown first, in this order; other decoded fields follow
ROUTER_FIELD_ORDER = (
    "path",
    "amountIn",
    "amountOutMin",
    "amountOut",
    "amountInMax",
    "amountADesired",
    "amountBDesired",
    "liquidity",
)


def field_line(label: str, value: str) -> str:
    emoji = FIELD_EMOJIS.get(label.lower(), DEFAULT_EMOJI)
    return f"{emoji} {label}: {value}"


def _token_amount(raw: int, token: TokenInfo) -> str:
    return f"{format_amount(raw, token.decimals)} {token.symbol}"


class Presenter:
    """Renders transactions, events and tracker outcomes for one pool."""

    def __init__(self, token0: TokenInfo, token1: TokenInfo, log: Optional[logging.Logger] = None):
        self.token0 = token0
        self.token1 = token1
        self.logger = log or logger

    def emit(self, lines: Iterable[str]) -> None:
        self.logger.info(SEPARATOR)
        for line in lines:
            self.logger.info(line)

    def render_transaction(self, title: str, tx: RawTransaction, operation: DecodedOperation) -> List[str]:
        """
        Block for a router or pool call.

        Field order is Function, the amount fields, any remaining decoded
        fields, then to, Value, From, Gas Price and Hash. Empty fields are
        skipped.
        """
        fields = operation.formatted_fields
        lines = [title, field_line("Function", operation.operation_name)]

        for name in ROUTER_FIELD_ORDER:
            if fields.get(name):
                lines.append(field_line(name, fields[name]))
        for name, value in fields.items():
            if name in ROUTER_FIELD_ORDER or name == "to" or not value:
                continue
            lines.append(field_line(name, value))
        if fields.get("to"):
            lines.append(field_line("to", fields["to"]))

        if tx.value:
            eth = format_amount(tx.value, 18)
            lines.append(field_line("Value", f"{eth} ETH"))
        if tx.sender:
            lines.append(field_line("From", tx.sender))
        gas = format_gas_price(tx.effective_gas_price)
        if gas:
            lines.append(field_line("Gas Price", gas))
        if tx.hash:
            lines.append(field_line("Hash", tx.hash))
        return lines

    def render_event(self, event: DecodedEvent, emitter: Optional[TokenInfo] = None) -> List[str]:
        """
        Block for a pool log that does not touch reserves (Approval, Transfer).

        Values render with the emitting token's decimals, the LP token's
        when ``emitter`` is None.
        """
        fields = event.fields
        unit = emitter or TokenInfo(event.address or "", LP_SYMBOL, LP_DECIMALS)

        if isinstance(fields, ApprovalEvent):
            lines = [
                "✅ Approval",
                field_line("owner", fields.owner),
                field_line("spender", fields.spender),
                field_line("value", _token_amount(fields.value, unit)),
            ]
        elif isinstance(fields, TransferEvent):
            lines = [
                "📦 Transfer",
                field_line("from", fields.sender),
                field_line("to", fields.to),
                field_line("value", _token_amount(fields.value, unit)),
            ]
        else:
            lines = [f"❓ {event.name}"]
            lines.extend(field_line(f"arg{i}", str(v)) for i, v in enumerate(event.raw_args))
        if event.tx_hash:
            lines.append(field_line("Hash", event.tx_hash))
        return lines

    def render_swap(self, outcome: SwapOutcome) -> List[str]:
        event: SwapEvent = outcome.event
        lines = ["💫 Swap"]
        for raw, token, label in (
            (event.amount0_in, self.token0, "amountIn"),
            (event.amount1_in, self.token1, "amountIn"),
            (event.amount0_out, self.token0, "amountOut"),
            (event.amount1_out, self.token1, "amountOut"),
        ):
            if raw:
                lines.append(field_line(label, _token_amount(raw, token)))
        lines.append(field_line("from", event.sender))
        lines.append(field_line("to", event.to))
        if outcome.rejected:
            lines.append(f"⚠️ Rejected: {outcome.reason}")
        else:
            lines.append(f"💵 Price preview: {outcome.preview_price}")
        if outcome.tx_hash:
            lines.append(field_line("Hash", outcome.tx_hash))
        return lines

    def render_sync(self, outcome: SyncOutcome) -> List[str]:
        event: SyncEvent = outcome.event
        reserves = (
            f"{_token_amount(event.reserve0, self.token0)} / "
            f"{_token_amount(event.reserve1, self.token1)}"
        )
        if outcome.is_confirmation:
            lines = [
                "🔄 Sync (confirms swap)",
                f"💵 Price: {outcome.old_price} → {outcome.new_price}",
            ]
        else:
            lines = [
                "🔄 Sync (independent reserve update)",
                f"💵 Price: {outcome.new_price}",
            ]
        lines.append(field_line("reserves", reserves))
        if outcome.tx_hash:
            lines.append(field_line("Hash", outcome.tx_hash))
        return lines

    def render_liquidity(self, outcome: LiquidityOutcome) -> List[str]:
        event = outcome.event
        if isinstance(event, MintEvent):
            lines = ["🌱 Mint"]
        else:
            lines = ["🔥 Burn"]
        lines.append(field_line("amount0", _token_amount(event.amount0, self.token0)))
        lines.append(field_line("amount1", _token_amount(event.amount1, self.token1)))
        lines.append(field_line("sender", event.sender))
        if isinstance(event, BurnEvent):
            lines.append(field_line("to", event.to))
        lines.append(f"💵 Price: {outcome.price}")
        if outcome.tx_hash:
            lines.append(field_line("Hash", outcome.tx_hash))
        return lines

    def render_confirmed(self, block_number: int, confirmed: List[RawTransaction]) -> List[str]:
        lines = [f"⛓️ Block {block_number}: {len(confirmed)} pending router tx confirmed"]
        lines.extend(field_line("Hash", tx.hash) for tx in confirmed)
        return lines

