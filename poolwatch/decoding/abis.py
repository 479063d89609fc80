"""
Full contract interfaces for the Uniswap V2 router and pair.

These are the secondary decode path: when a selector is missing from the
registry's schema table, or its schema decode fails, call data is matched
against the complete interface with web3.
"""

from typing import Dict, List, Sequence, Tuple

Param = Tuple[str, str]


def _function(
    name: str,
    inputs: Sequence[Param],
    outputs: Sequence[Param] = (),
    state_mutability: str = "nonpayable",
) -> Dict:
    return {
        "name": name,
        "type": "function",
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": state_mutability,
    }


def _event(name: str, inputs: Sequence[Tuple[str, str, bool]]) -> Dict:
    return {
        "anonymous": False,
        "name": name,
        "type": "event",
        "inputs": [{"indexed": i, "name": n, "type": t} for n, t, i in inputs],
    }


_SWAP_EXACT_IN = [
    ("amountIn", "uint256"),
    ("amountOutMin", "uint256"),
    ("path", "address[]"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_SWAP_EXACT_ETH_IN = [
    ("amountOutMin", "uint256"),
    ("path", "address[]"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_SWAP_EXACT_OUT = [
    ("amountOut", "uint256"),
    ("amountInMax", "uint256"),
    ("path", "address[]"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_REMOVE_LIQUIDITY = [
    ("tokenA", "address"),
    ("tokenB", "address"),
    ("liquidity", "uint256"),
    ("amountAMin", "uint256"),
    ("amountBMin", "uint256"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_REMOVE_LIQUIDITY_ETH = [
    ("token", "address"),
    ("liquidity", "uint256"),
    ("amountTokenMin", "uint256"),
    ("amountETHMin", "uint256"),
    ("to", "address"),
    ("deadline", "uint256"),
]
_PERMIT = [
    ("approveMax", "bool"),
    ("v", "uint8"),
    ("r", "bytes32"),
    ("s", "bytes32"),
]
_AMOUNTS = [("amounts", "uint256[]")]

UNISWAP_V2_ROUTER_ABI: List[Dict] = [
    _function("WETH", [], [("", "address")], "pure"),
    _function("factory", [], [("", "address")], "pure"),
    _function(
        "addLiquidity",
        [
            ("tokenA", "address"),
            ("tokenB", "address"),
            ("amountADesired", "uint256"),
            ("amountBDesired", "uint256"),
            ("amountAMin", "uint256"),
            ("amountBMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountA", "uint256"), ("amountB", "uint256"), ("liquidity", "uint256")],
    ),
    _function(
        "addLiquidityETH",
        [
            ("token", "address"),
            ("amountTokenDesired", "uint256"),
            ("amountTokenMin", "uint256"),
            ("amountETHMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        [("amountToken", "uint256"), ("amountETH", "uint256"), ("liquidity", "uint256")],
        "payable",
    ),
    _function("removeLiquidity", _REMOVE_LIQUIDITY, [("amountA", "uint256"), ("amountB", "uint256")]),
    _function("removeLiquidityETH", _REMOVE_LIQUIDITY_ETH, [("amountToken", "uint256"), ("amountETH", "uint256")]),
    _function(
        "removeLiquidityWithPermit",
        _REMOVE_LIQUIDITY + _PERMIT,
        [("amountA", "uint256"), ("amountB", "uint256")],
    ),
    _function(
        "removeLiquidityETHWithPermit",
        _REMOVE_LIQUIDITY_ETH + _PERMIT,
        [("amountToken", "uint256"), ("amountETH", "uint256")],
    ),
    _function(
        "removeLiquidityETHSupportingFeeOnTransferTokens",
        _REMOVE_LIQUIDITY_ETH,
        [("amountETH", "uint256")],
    ),
    _function(
        "removeLiquidityETHWithPermitSupportingFeeOnTransferTokens",
        _REMOVE_LIQUIDITY_ETH + _PERMIT,
        [("amountETH", "uint256")],
    ),
    _function("swapExactTokensForTokens", _SWAP_EXACT_IN, _AMOUNTS),
    _function("swapTokensForExactTokens", _SWAP_EXACT_OUT, _AMOUNTS),
    _function("swapExactETHForTokens", _SWAP_EXACT_ETH_IN, _AMOUNTS, "payable"),
    _function("swapTokensForExactETH", _SWAP_EXACT_OUT, _AMOUNTS),
    _function("swapExactTokensForETH", _SWAP_EXACT_IN, _AMOUNTS),
    _function(
        "swapETHForExactTokens",
        [("amountOut", "uint256"), ("path", "address[]"), ("to", "address"), ("deadline", "uint256")],
        _AMOUNTS,
        "payable",
    ),
    _function("swapExactTokensForTokensSupportingFeeOnTransferTokens", _SWAP_EXACT_IN),
    _function("swapExactETHForTokensSupportingFeeOnTransferTokens", _SWAP_EXACT_ETH_IN, (), "payable"),
    _function("swapExactTokensForETHSupportingFeeOnTransferTokens", _SWAP_EXACT_IN),
    _function(
        "quote",
        [("amountA", "uint256"), ("reserveA", "uint256"), ("reserveB", "uint256")],
        [("amountB", "uint256")],
        "pure",
    ),
    _function(
        "getAmountOut",
        [("amountIn", "uint256"), ("reserveIn", "uint256"), ("reserveOut", "uint256")],
        [("amountOut", "uint256")],
        "pure",
    ),
    _function(
        "getAmountIn",
        [("amountOut", "uint256"), ("reserveIn", "uint256"), ("reserveOut", "uint256")],
        [("amountIn", "uint256")],
        "pure",
    ),
    _function("getAmountsOut", [("amountIn", "uint256"), ("path", "address[]")], _AMOUNTS, "view"),
    _function("getAmountsIn", [("amountOut", "uint256"), ("path", "address[]")], _AMOUNTS, "view"),
]

UNISWAP_V2_PAIR_ABI: List[Dict] = [
    _function("getReserves", [], [
        ("_reserve0", "uint112"),
        ("_reserve1", "uint112"),
        ("_blockTimestampLast", "uint32"),
    ], "view"),
    _function("token0", [], [("", "address")], "view"),
    _function("token1", [], [("", "address")], "view"),
    _function("swap", [
        ("amount0Out", "uint256"),
        ("amount1Out", "uint256"),
        ("to", "address"),
        ("data", "bytes"),
    ]),
    _function("mint", [("to", "address")], [("liquidity", "uint256")]),
    _function("burn", [("to", "address")], [("amount0", "uint256"), ("amount1", "uint256")]),
    _function("skim", [("to", "address")]),
    _function("sync", []),
    _function("approve", [("spender", "address"), ("value", "uint256")], [("", "bool")]),
    _function("transfer", [("to", "address"), ("value", "uint256")], [("", "bool")]),
    _function(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("value", "uint256")],
        [("", "bool")],
    ),
    _function("permit", [
        ("owner", "address"),
        ("spender", "address"),
        ("value", "uint256"),
        ("deadline", "uint256"),
        ("v", "uint8"),
        ("r", "bytes32"),
        ("s", "bytes32"),
    ]),
    _event("Approval", [("owner", "address", True), ("spender", "address", True), ("value", "uint256", False)]),
    _event("Transfer", [("from", "address", True), ("to", "address", True), ("value", "uint256", False)]),
    _event("Mint", [("sender", "address", True), ("amount0", "uint256", False), ("amount1", "uint256", False)]),
    _event("Burn", [
        ("sender", "address", True),
        ("amount0", "uint256", False),
        ("amount1", "uint256", False),
        ("to", "address", True),
    ]),
    _event("Swap", [
        ("sender", "address", True),
        ("amount0In", "uint256", False),
        ("amount1In", "uint256", False),
        ("amount0Out", "uint256", False),
        ("amount1Out", "uint256", False),
        ("to", "address", True),
    ]),
    _event("Sync", [("reserve0", "uint112", False), ("reserve1", "uint112", False)]),
]
