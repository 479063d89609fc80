"""
Token metadata and amount rendering.
"""

from .amounts import (
    AMOUNT_FALLBACK,
    PRICE_PLACEHOLDER,
    PRICE_SCALE,
    compute_price_scaled,
    format_amount,
    format_gas_price,
    format_price,
    format_scaled,
    price_string,
)
from .metadata import TokenInfo, TokenMetadataCache, TokenReader, Web3TokenReader

__all__ = [
    "AMOUNT_FALLBACK",
    "PRICE_PLACEHOLDER",
    "PRICE_SCALE",
    "compute_price_scaled",
    "format_amount",
    "format_gas_price",
    "format_price",
    "format_scaled",
    "price_string",
    "TokenInfo",
    "TokenMetadataCache",
    "TokenReader",
    "Web3TokenReader",
]
