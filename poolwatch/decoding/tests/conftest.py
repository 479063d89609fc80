"""
Pytest fixtures for decoder tests.
"""

import pytest
from eth_abi import encode

from poolwatch.config.monitor import USDC_ADDRESS, WETH_ADDRESS
from poolwatch.decoding.calldata import CalldataDecoder
from poolwatch.decoding.events import EventDecoder
from poolwatch.decoding.models import Scope
from poolwatch.decoding.selectors import SelectorRegistry
from poolwatch.tokens.metadata import TokenInfo, TokenMetadataCache

RECIPIENT = "0x1111111111111111111111111111111111111111"
SENDER = "0x2222222222222222222222222222222222222222"
DAI_ADDRESS = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


@pytest.fixture
def registry():
    return SelectorRegistry()


@pytest.fixture
def tokens():
    """Token cache seeded with the USDC/WETH pair and no network reader."""
    return TokenMetadataCache(
        seed=[
            TokenInfo(USDC_ADDRESS, "USDC", 6),
            TokenInfo(WETH_ADDRESS, "WETH", 18),
        ]
    )


@pytest.fixture
def decoder(registry, tokens):
    return CalldataDecoder(registry, tokens, pool_tokens=(USDC_ADDRESS, WETH_ADDRESS))


@pytest.fixture
def event_decoder(registry):
    return EventDecoder(registry)


@pytest.fixture
def build_call(registry):
    """Encode call data for a registered function: selector + ABI-encoded args."""

    def _build(name: str, scope: Scope, *values) -> bytes:
        entry = next(e for e in registry.entries(scope) if e.operation_name == name)
        return entry.selector + encode(list(entry.param_types), list(values))

    return _build
