"""
Pytest fixtures for monitor tests.
"""

import pytest
from eth_abi import encode
from hexbytes import HexBytes

from poolwatch.config.monitor import UNISWAP_V2_ROUTER, USDC_ADDRESS, USDC_WETH_PAIR, WETH_ADDRESS
from poolwatch.decoding.models import Scope
from poolwatch.monitor.context import PoolContext
from poolwatch.monitor.processor import MonitorProcessor
from poolwatch.monitor.records import RawLog, RawTransaction
from poolwatch.tokens.metadata import TokenInfo

TRADER = "0x2222222222222222222222222222222222222222"
SWAP_TOPIC = HexBytes("0xd78ad95fa46c994b6551d0da85fc275fe613ce37657fb8d5e3d130840159d822")
SYNC_TOPIC = HexBytes("0x1c411e9a96e071241c2f21f7726b17ae89e3cab4c78be50e062b03a9fffbbad1")


@pytest.fixture
def context():
    """USDC/WETH pool and V2 router, no network reader."""
    return PoolContext(
        pool_address=USDC_WETH_PAIR,
        router_address=UNISWAP_V2_ROUTER,
        token0=TokenInfo(USDC_ADDRESS, "USDC", 6),
        token1=TokenInfo(WETH_ADDRESS, "WETH", 18),
    )


@pytest.fixture
def processor(context):
    return MonitorProcessor(context, maxsize=100, pending_limit=10)


@pytest.fixture
def router_swap_tx(context):
    """Pending swapExactTokensForTokens(2500 USDC -> >=1 WETH) to the router."""
    entry = context.registry.lookup("0x38ed1739", Scope.ROUTER)
    data = entry.selector + encode(
        list(entry.param_types),
        [2_500_000_000, 10**18, [USDC_ADDRESS, WETH_ADDRESS], TRADER, 1_700_000_000],
    )
    return RawTransaction(
        hash="0x" + "aa" * 32,
        sender=TRADER,
        to=UNISWAP_V2_ROUTER,
        input=data,
        value=0,
        gas_price=30_000_000_000,
        max_fee_per_gas=None,
    )


def swap_log(tx_hash: str, log_index: int, amounts) -> RawLog:
    topic = encode(["address"], [TRADER])
    return RawLog(
        address=USDC_WETH_PAIR,
        topics=(bytes(SWAP_TOPIC), topic, topic),
        data=encode(["uint256"] * 4, list(amounts)),
        transaction_hash=tx_hash,
        log_index=log_index,
    )


def sync_log(tx_hash: str, log_index: int, reserve0: int, reserve1: int) -> RawLog:
    return RawLog(
        address=USDC_WETH_PAIR,
        topics=(bytes(SYNC_TOPIC),),
        data=encode(["uint112", "uint112"], [reserve0, reserve1]),
        transaction_hash=tx_hash,
        log_index=log_index,
    )
