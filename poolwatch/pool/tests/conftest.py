"""
Pytest fixtures for pool state tests.
"""

import pytest

from poolwatch.config.monitor import USDC_ADDRESS, WETH_ADDRESS
from poolwatch.pool.tracker import PoolStateTracker
from poolwatch.tokens.metadata import TokenInfo


@pytest.fixture
def usdc():
    return TokenInfo(USDC_ADDRESS.lower(), "USDC", 6)


@pytest.fixture
def weth():
    return TokenInfo(WETH_ADDRESS.lower(), "WETH", 18)


@pytest.fixture
def tracker(usdc, weth):
    """USDC/WETH tracker quoting WETH in USDC."""
    return PoolStateTracker(usdc, weth, base_index=1)
