"""
Selector registry.

Static tables mapping 4-byte function selectors (scoped to the router or the
pool) and event topic hashes to an operation name and its parameter schema.
Selectors and topics are derived from the canonical signatures below, never
typed by hand.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from eth_abi import decode
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector
from eth_utils.address import to_checksum_address
from hexbytes import HexBytes

from ..errors import DecodeError
from .models import (
    AddLiquidity,
    AddLiquidityETH,
    ApprovalEvent,
    BurnEvent,
    ExactInputSwap,
    ExactOutputSwap,
    MintEvent,
    PairRecipient,
    PairSwap,
    PairSync,
    Permit,
    RemoveLiquidity,
    RemoveLiquidityETH,
    Scope,
    SwapEvent,
    SyncEvent,
    TokenApprove,
    TokenPermit,
    TokenTransfer,
    TokenTransferFrom,
    TransferEvent,
)

SelectorLike = Union[bytes, str]

_FIELD_OVERRIDES = {"from": "sender"}
_PERMIT_FIELDS = ("approve_max", "v", "r", "s")


def field_name(param_name: str) -> str:
    """camelCase ABI parameter name -> snake_case record field (amountETHMin -> amount_eth_min)."""
    if param_name in _FIELD_OVERRIDES:
        return _FIELD_OVERRIDES[param_name]
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", param_name)
    name = re.sub(r"(?<=[A-Z])(?=[A-Z][a-z])", "_", name)
    return name.lower()


def normalize_value(abi_type: str, value: Any) -> Any:
    """Checksum addresses and freeze arrays so both decode paths agree."""
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type == "address[]":
        return tuple(to_checksum_address(v) for v in value)
    if abi_type.endswith("[]"):
        return tuple(value)
    if abi_type == "bytes" or abi_type.startswith("bytes"):
        return bytes(value)
    return value


def _parse_params(body: str) -> List[Tuple[str, str, bool]]:
    params = []
    for chunk in filter(None, (c.strip() for c in body.split(","))):
        parts = chunk.split()
        indexed = "indexed" in parts
        parts = [p for p in parts if p != "indexed"]
        if len(parts) != 2:
            raise ValueError(f"Bad parameter declaration: {chunk!r}")
        params.append((parts[1], parts[0], indexed))
    return params


def _split_declaration(declaration: str) -> Tuple[str, List[Tuple[str, str, bool]]]:
    match = re.fullmatch(r"\s*(\w+)\((.*)\)\s*", declaration)
    if not match:
        raise ValueError(f"Bad declaration: {declaration!r}")
    return match.group(1), _parse_params(match.group(2))


def _build_record(record_type: type, values: Dict[str, Any]):
    values = dict(values)
    if all(f in values for f in _PERMIT_FIELDS):
        values["permit"] = Permit(**{f: values.pop(f) for f in _PERMIT_FIELDS})
    return record_type(**values)


@dataclass(frozen=True)
class SelectorEntry:
    """One function in a scope's schema table."""

    selector: bytes
    operation_name: str
    param_types: Tuple[str, ...]
    param_names: Tuple[str, ...]
    scope: Scope
    record_type: Callable[..., Any]

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()

    @property
    def signature(self) -> str:
        return f"{self.operation_name}({','.join(self.param_types)})"

    def decode_values(self, payload: bytes) -> Tuple[Any, ...]:
        """ABI-decode the call payload (everything after the selector)."""
        try:
            values = decode(list(self.param_types), bytes(payload))
        except Exception as e:
            raise DecodeError(f"{self.operation_name}: {e}") from e
        return tuple(normalize_value(t, v) for t, v in zip(self.param_types, values))

    def build_args(self, values: Union[Tuple[Any, ...], Dict[str, Any]]):
        """Typed argument record from positional values or a name -> value mapping."""
        if isinstance(values, dict):
            try:
                ordered = tuple(
                    normalize_value(t, values[n]) for t, n in zip(self.param_types, self.param_names)
                )
            except KeyError as e:
                raise DecodeError(f"{self.operation_name}: missing argument {e}") from e
        else:
            ordered = tuple(values)
        if len(ordered) != len(self.param_names):
            raise DecodeError(
                f"{self.operation_name}: expected {len(self.param_names)} values, got {len(ordered)}"
            )
        fields = {field_name(n): v for n, v in zip(self.param_names, ordered)}
        try:
            return ordered, _build_record(self.record_type, fields)
        except TypeError as e:
            raise DecodeError(f"{self.operation_name}: {e}") from e


@dataclass(frozen=True)
class EventEntry:
    """One pool event: topic hash and parameter layout."""

    topic: bytes
    name: str
    params: Tuple[Tuple[str, str, bool], ...]
    record_type: Callable[..., Any]

    @property
    def topic_hex(self) -> str:
        return "0x" + self.topic.hex()

    @property
    def indexed(self) -> Tuple[Tuple[str, str], ...]:
        return tuple((n, t) for n, t, i in self.params if i)

    @property
    def non_indexed(self) -> Tuple[Tuple[str, str], ...]:
        return tuple((n, t) for n, t, i in self.params if not i)


def function_entry(declaration: str, scope: Scope, record_type: Callable[..., Any]) -> SelectorEntry:
    """Build a SelectorEntry from ``name(type name, ...)``."""
    name, params = _split_declaration(declaration)
    types = tuple(t for _, t, _ in params)
    signature = f"{name}({','.join(types)})"
    return SelectorEntry(
        selector=bytes(function_signature_to_4byte_selector(signature)),
        operation_name=name,
        param_types=types,
        param_names=tuple(n for n, _, _ in params),
        scope=scope,
        record_type=record_type,
    )


def event_entry(declaration: str, record_type: Callable[..., Any]) -> EventEntry:
    """Build an EventEntry from ``Name(type [indexed] name, ...)``."""
    name, params = _split_declaration(declaration)
    signature = f"{name}({','.join(t for _, t, _ in params)})"
    return EventEntry(
        topic=bytes(event_signature_to_log_topic(signature)),
        name=name,
        params=tuple(params),
        record_type=record_type,
    )


_EXACT_IN = "uint256 amountIn,uint256 amountOutMin,address[] path,address to,uint256 deadline"
_EXACT_ETH_IN = "uint256 amountOutMin,address[] path,address to,uint256 deadline"
_EXACT_OUT = "uint256 amountOut,uint256 amountInMax,address[] path,address to,uint256 deadline"
_REMOVE = (
    "address tokenA,address tokenB,uint256 liquidity,uint256 amountAMin,"
    "uint256 amountBMin,address to,uint256 deadline"
)
_REMOVE_ETH = (
    "address token,uint256 liquidity,uint256 amountTokenMin,uint256 amountETHMin,"
    "address to,uint256 deadline"
)
_PERMIT = "bool approveMax,uint8 v,bytes32 r,bytes32 s"

ROUTER_FUNCTIONS: Tuple[SelectorEntry, ...] = tuple(
    function_entry(declaration, Scope.ROUTER, record)
    for declaration, record in [
        (f"swapExactTokensForTokens({_EXACT_IN})", ExactInputSwap),
        (f"swapExactTokensForETH({_EXACT_IN})", ExactInputSwap),
        (f"swapExactETHForTokens({_EXACT_ETH_IN})", ExactInputSwap),
        (f"swapExactTokensForTokensSupportingFeeOnTransferTokens({_EXACT_IN})", ExactInputSwap),
        (f"swapExactTokensForETHSupportingFeeOnTransferTokens({_EXACT_IN})", ExactInputSwap),
        (f"swapExactETHForTokensSupportingFeeOnTransferTokens({_EXACT_ETH_IN})", ExactInputSwap),
        (f"swapTokensForExactTokens({_EXACT_OUT})", ExactOutputSwap),
        (f"swapTokensForExactETH({_EXACT_OUT})", ExactOutputSwap),
        (
            "swapETHForExactTokens(uint256 amountOut,address[] path,address to,uint256 deadline)",
            ExactOutputSwap,
        ),
        (
            "addLiquidity(address tokenA,address tokenB,uint256 amountADesired,uint256 amountBDesired,"
            "uint256 amountAMin,uint256 amountBMin,address to,uint256 deadline)",
            AddLiquidity,
        ),
        (
            "addLiquidityETH(address token,uint256 amountTokenDesired,uint256 amountTokenMin,"
            "uint256 amountETHMin,address to,uint256 deadline)",
            AddLiquidityETH,
        ),
        (f"removeLiquidity({_REMOVE})", RemoveLiquidity),
        (f"removeLiquidityWithPermit({_REMOVE},{_PERMIT})", RemoveLiquidity),
        (f"removeLiquidityETH({_REMOVE_ETH})", RemoveLiquidityETH),
        (f"removeLiquidityETHWithPermit({_REMOVE_ETH},{_PERMIT})", RemoveLiquidityETH),
        (f"removeLiquidityETHSupportingFeeOnTransferTokens({_REMOVE_ETH})", RemoveLiquidityETH),
        (
            f"removeLiquidityETHWithPermitSupportingFeeOnTransferTokens({_REMOVE_ETH},{_PERMIT})",
            RemoveLiquidityETH,
        ),
    ]
)

POOL_FUNCTIONS: Tuple[SelectorEntry, ...] = tuple(
    function_entry(declaration, Scope.POOL, record)
    for declaration, record in [
        ("swap(uint256 amount0Out,uint256 amount1Out,address to,bytes data)", PairSwap),
        ("mint(address to)", PairRecipient),
        ("burn(address to)", PairRecipient),
        ("skim(address to)", PairRecipient),
        ("sync()", PairSync),
        ("approve(address spender,uint256 value)", TokenApprove),
        ("transfer(address to,uint256 value)", TokenTransfer),
        ("transferFrom(address from,address to,uint256 value)", TokenTransferFrom),
        (
            "permit(address owner,address spender,uint256 value,uint256 deadline,"
            "uint8 v,bytes32 r,bytes32 s)",
            TokenPermit,
        ),
    ]
)

POOL_EVENTS: Tuple[EventEntry, ...] = tuple(
    event_entry(declaration, record)
    for declaration, record in [
        (
            "Swap(address indexed sender,uint256 amount0In,uint256 amount1In,"
            "uint256 amount0Out,uint256 amount1Out,address indexed to)",
            SwapEvent,
        ),
        ("Sync(uint112 reserve0,uint112 reserve1)", SyncEvent),
        ("Mint(address indexed sender,uint256 amount0,uint256 amount1)", MintEvent),
        ("Burn(address indexed sender,uint256 amount0,uint256 amount1,address indexed to)", BurnEvent),
        ("Transfer(address indexed from,address indexed to,uint256 value)", TransferEvent),
        ("Approval(address indexed owner,address indexed spender,uint256 value)", ApprovalEvent),
    ]
)


def to_selector(selector: SelectorLike) -> bytes:
    """Normalize a 4-byte selector given as bytes or a 0x-hex string."""
    raw = bytes(HexBytes(selector))
    if len(raw) != 4:
        raise ValueError(f"Selector must be 4 bytes, got {len(raw)}")
    return raw


def to_topic(topic: SelectorLike) -> bytes:
    """Normalize a 32-byte topic given as bytes or a 0x-hex string."""
    raw = bytes(HexBytes(topic))
    if len(raw) != 32:
        raise ValueError(f"Topic must be 32 bytes, got {len(raw)}")
    return raw


class SelectorRegistry:
    """
    Read-only lookup of function selectors per scope and event topics.

    Function selectors are keyed by (scope, selector) so the same 4 bytes
    may name different operations on the router and the pool. Events live
    in a separate topic table.
    """

    def __init__(
        self,
        functions: Iterable[SelectorEntry] = ROUTER_FUNCTIONS + POOL_FUNCTIONS,
        events: Iterable[EventEntry] = POOL_EVENTS,
    ):
        self._functions: Dict[Tuple[Scope, bytes], SelectorEntry] = {}
        self._events: Dict[bytes, EventEntry] = {}

        for entry in functions:
            key = (entry.scope, entry.selector)
            if key in self._functions:
                existing = self._functions[key]
                raise ValueError(
                    f"Selector {entry.selector_hex} already registered in {entry.scope.value} "
                    f"scope as {existing.operation_name}"
                )
            self._functions[key] = entry

        for event in events:
            if event.topic in self._events:
                raise ValueError(f"Topic {event.topic_hex} registered twice")
            self._events[event.topic] = event

    def lookup(self, selector: SelectorLike, scope: Scope) -> Optional[SelectorEntry]:
        """
        Find the schema for a selector within a scope.

        Returns:
            The registered entry, or None when the selector is unknown (or malformed)
        """
        try:
            key = (scope, to_selector(selector))
        except (TypeError, ValueError):
            return None
        return self._functions.get(key)

    def lookup_event(self, topic: SelectorLike) -> Optional[EventEntry]:
        """Find the event registered for a topic hash, or None."""
        try:
            return self._events.get(to_topic(topic))
        except (TypeError, ValueError):
            return None

    def entries(self, scope: Optional[Scope] = None) -> List[SelectorEntry]:
        """All function entries, optionally limited to one scope."""
        return [e for (s, _), e in self._functions.items() if scope is None or s is scope]

    def events(self) -> List[EventEntry]:
        return list(self._events.values())

    def __len__(self) -> int:
        return len(self._functions)
