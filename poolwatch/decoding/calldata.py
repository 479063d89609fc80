"""
Calldata decoder.

Turns raw transaction input into a DecodedOperation. Decoding is total:
whatever the input, ``decode`` returns a DecodeResult and never raises.

Resolution order:
    1. selector -> scoped schema table -> eth_abi positional decode
    2. full contract interface (web3) for selectors missing from the table
       or whose schema decode failed
    3. UNKNOWN
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from hexbytes import HexBytes
from web3 import Web3

from ..errors import DecodeError
from ..tokens.amounts import format_amount
from ..tokens.metadata import TokenInfo, TokenMetadataCache
from .abis import UNISWAP_V2_PAIR_ABI, UNISWAP_V2_ROUTER_ABI
from .models import (
    AddLiquidity,
    AddLiquidityETH,
    DecodedOperation,
    DecodeResult,
    ExactInputSwap,
    ExactOutputSwap,
    InterfaceCall,
    PairRecipient,
    PairSwap,
    PairSync,
    RemoveLiquidity,
    RemoveLiquidityETH,
    Scope,
    TokenApprove,
    TokenPermit,
    TokenTransfer,
    TokenTransferFrom,
)
from .selectors import SelectorRegistry, normalize_value

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " → "
ETH_SYMBOL = "ETH"
ETH_DECIMALS = 18
LP_SYMBOL = "UNI-V2"
LP_DECIMALS = 18

RawInput = Union[bytes, bytearray, str, HexBytes]


def to_bytes(raw_input: RawInput) -> bytes:
    """Raw call data as bytes. Accepts bytes or (0x-prefixed) hex strings."""
    if raw_input is None:
        return b""
    if isinstance(raw_input, (bytes, bytearray)):
        return bytes(raw_input)
    if isinstance(raw_input, str):
        text = raw_input.strip()
        if text in ("", "0x"):
            return b""
        return bytes(HexBytes(text))
    raise TypeError(f"Unsupported call data type: {type(raw_input).__name__}")


class CalldataDecoder:
    """
    Decodes router and pool call data against the selector registry.

    Args:
        registry: Scoped selector tables
        tokens: Token metadata for rendering amounts and paths
        pool_tokens: The pool's (token0, token1) addresses, used to render
            pool-scope ``swap`` amounts
    """

    def __init__(
        self,
        registry: SelectorRegistry,
        tokens: TokenMetadataCache,
        pool_tokens: Optional[Tuple[str, str]] = None,
    ):
        self.registry = registry
        self.tokens = tokens
        self.pool_tokens = pool_tokens
        w3 = Web3()
        self._interfaces = {
            Scope.ROUTER: w3.eth.contract(abi=UNISWAP_V2_ROUTER_ABI),
            Scope.POOL: w3.eth.contract(abi=UNISWAP_V2_PAIR_ABI),
        }

    async def decode(self, raw_input: RawInput, scope: Scope) -> DecodeResult:
        """
        Decode call data captured from a contract in ``scope``.

        Args:
            raw_input: Transaction input (bytes or hex string)
            scope: Router or Pool

        Returns:
            DecodeResult; its ``operation`` is UNKNOWN unless decoding succeeded
        """
        try:
            data = to_bytes(raw_input)
        except (TypeError, ValueError) as e:
            return DecodeResult.malformed(None, scope, f"unreadable input: {e}")

        if not data:
            return DecodeResult.unrecognized(None, scope, "empty input")
        if len(data) < 4:
            return DecodeResult.malformed(None, scope, f"input shorter than a selector ({len(data)} bytes)")

        selector = "0x" + data[:4].hex()
        try:
            return await self._decode(data, selector, scope)
        except Exception as e:
            # Formatting or an unexpected decoder failure must not escape
            return DecodeResult.malformed(selector, scope, f"{type(e).__name__}: {e}")

    async def _decode(self, data: bytes, selector: str, scope: Scope) -> DecodeResult:
        entry = self.registry.lookup(data[:4], scope)
        failures = []

        if entry is not None:
            try:
                values = entry.decode_values(data[4:])
                raw_args, args = entry.build_args(values)
            except DecodeError as e:
                failures.append(f"schema: {e}")
            else:
                return await self._finish(entry.operation_name, raw_args, args, selector, scope)

        try:
            name, arguments = self._decode_with_interface(data, scope)
            if entry is not None and entry.operation_name == name:
                raw_args, args = entry.build_args(dict(arguments))
            else:
                raw_args, args = tuple(v for _, v in arguments), InterfaceCall(arguments)
        except DecodeError as e:
            failures.append(f"interface: {e}")
        else:
            return await self._finish(name, raw_args, args, selector, scope)

        if entry is None:
            return DecodeResult.unrecognized(selector, scope)
        return DecodeResult.malformed(selector, scope, "; ".join(failures))

    def _decode_with_interface(self, data: bytes, scope: Scope) -> Tuple[str, Tuple[Tuple[str, Any], ...]]:
        """Match call data against the full contract ABI."""
        contract = self._interfaces[scope]
        try:
            function, params = contract.decode_function_input(data)
        except Exception as e:
            raise DecodeError(str(e) or type(e).__name__) from e

        abi = function.abi
        name = abi["name"]
        try:
            arguments = tuple(
                (item["name"], normalize_value(item["type"], params[item["name"]]))
                for item in abi.get("inputs", [])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"{name}: {e}") from e
        return name, arguments

    async def _finish(self, name, raw_args, args, selector, scope) -> DecodeResult:
        formatted = await self.format_fields(args)
        return DecodeResult.ok(
            DecodedOperation(
                operation_name=name,
                raw_args=tuple(raw_args),
                formatted_fields=formatted,
                args=args,
                selector=selector,
                scope=scope,
            )
        )

    @staticmethod
    def _amount(raw: int, token: Optional[TokenInfo]) -> str:
        if token is None:
            return f"{format_amount(raw, ETH_DECIMALS)} {ETH_SYMBOL}"
        return f"{format_amount(raw, token.decimals)} {token.symbol}"

    async def format_path(self, path: Sequence[str]) -> str:
        """Render a swap route as ``SYM → SYM``."""
        infos = await self.tokens.resolve_many(path)
        return PATH_SEPARATOR.join(info.symbol for info in infos)

    async def format_fields(self, args) -> Dict[str, str]:
        """
        Human-readable fields for a typed argument record.

        Input-side amounts (amountIn, amountInMax) use the first hop's
        decimals; output-side amounts (amountOut, amountOutMin) use the last
        hop's. Liquidity operations use their named tokens.
        """
        fields: Dict[str, str] = {}

        if isinstance(args, (ExactInputSwap, ExactOutputSwap)):
            if args.path:
                fields["path"] = await self.format_path(args.path)
                first = await self.tokens.resolve(args.path[0])
                last = await self.tokens.resolve(args.path[-1])
            else:
                first = last = None
            if isinstance(args, ExactInputSwap):
                if args.amount_in is not None:
                    fields["amountIn"] = self._amount(args.amount_in, first)
                fields["amountOutMin"] = self._amount(args.amount_out_min, last)
            else:
                fields["amountOut"] = self._amount(args.amount_out, last)
                if args.amount_in_max is not None:
                    fields["amountInMax"] = self._amount(args.amount_in_max, first)
            fields["to"] = args.to

        elif isinstance(args, AddLiquidity):
            token_a, token_b = await self.tokens.resolve_many([args.token_a, args.token_b])
            fields["pair"] = f"{token_a.symbol}{PATH_SEPARATOR}{token_b.symbol}"
            fields["amountADesired"] = self._amount(args.amount_a_desired, token_a)
            fields["amountBDesired"] = self._amount(args.amount_b_desired, token_b)
            fields["amountAMin"] = self._amount(args.amount_a_min, token_a)
            fields["amountBMin"] = self._amount(args.amount_b_min, token_b)
            fields["to"] = args.to

        elif isinstance(args, AddLiquidityETH):
            token = await self.tokens.resolve(args.token)
            fields["token"] = token.symbol
            fields["amountTokenDesired"] = self._amount(args.amount_token_desired, token)
            fields["amountTokenMin"] = self._amount(args.amount_token_min, token)
            fields["amountETHMin"] = self._amount(args.amount_eth_min, None)
            fields["to"] = args.to

        elif isinstance(args, RemoveLiquidity):
            token_a, token_b = await self.tokens.resolve_many([args.token_a, args.token_b])
            fields["pair"] = f"{token_a.symbol}{PATH_SEPARATOR}{token_b.symbol}"
            fields["liquidity"] = f"{format_amount(args.liquidity, LP_DECIMALS)} {LP_SYMBOL}"
            fields["amountAMin"] = self._amount(args.amount_a_min, token_a)
            fields["amountBMin"] = self._amount(args.amount_b_min, token_b)
            fields["to"] = args.to

        elif isinstance(args, RemoveLiquidityETH):
            token = await self.tokens.resolve(args.token)
            fields["token"] = token.symbol
            fields["liquidity"] = f"{format_amount(args.liquidity, LP_DECIMALS)} {LP_SYMBOL}"
            fields["amountTokenMin"] = self._amount(args.amount_token_min, token)
            fields["amountETHMin"] = self._amount(args.amount_eth_min, None)
            fields["to"] = args.to

        elif isinstance(args, PairSwap):
            if self.pool_tokens:
                token0, token1 = await self.tokens.resolve_many(self.pool_tokens)
                fields["amount0Out"] = self._amount(args.amount0_out, token0)
                fields["amount1Out"] = self._amount(args.amount1_out, token1)
            else:
                fields["amount0Out"] = str(args.amount0_out)
                fields["amount1Out"] = str(args.amount1_out)
            fields["to"] = args.to
            if args.data:
                fields["data"] = "0x" + args.data.hex()

        elif isinstance(args, PairRecipient):
            fields["to"] = args.to

        elif isinstance(args, PairSync):
            pass

        elif isinstance(args, (TokenApprove, TokenPermit)):
            fields["spender"] = args.spender
            fields["value"] = f"{format_amount(args.value, LP_DECIMALS)} {LP_SYMBOL}"
            if isinstance(args, TokenPermit):
                fields["owner"] = args.owner

        elif isinstance(args, (TokenTransfer, TokenTransferFrom)):
            if isinstance(args, TokenTransferFrom):
                fields["from"] = args.sender
            fields["to"] = args.to
            fields["value"] = f"{format_amount(args.value, LP_DECIMALS)} {LP_SYMBOL}"

        elif isinstance(args, InterfaceCall):
            for name, value in args.arguments:
                if isinstance(value, tuple):
                    value = ", ".join(str(v) for v in value)
                elif isinstance(value, bytes):
                    value = "0x" + value.hex()
                fields[name] = str(value)

        else:
            raise DecodeError(f"No formatter for {type(args).__name__}")

        return fields

